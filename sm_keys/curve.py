#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# @FileName     :   curve.py
# @Function     :   SM2曲线参数及点运算
from typing import Optional, Tuple

# 未压缩点前缀
UNCOMPRESSED = 0x04


class CurvePoint:
    """仿射坐标点"""

    def __init__(self, x: int, y: int, curve: "CurveFp"):
        self.x = x
        self.y = y
        self.curve = curve

    def __repr__(self):
        return '<CurvePoint(%d, %d)>' % (self.x, self.y)

    def __eq__(self, other):
        if not isinstance(other, CurvePoint):
            return NotImplemented
        return self.curve.name == other.curve.name and self.x == other.x and self.y == other.y

    def values(self) -> Tuple[int, int]:
        return self.x, self.y

    def scalar_mult(self, k: int) -> Optional["CurvePoint"]:
        return self.to_jacobian_point().scalar_mult(k).to_curve_point()

    def to_jacobian_point(self) -> "JacobianPoint":
        return JacobianPoint(self.x, self.y, 1, curve=self.curve)


class JacobianPoint:
    """Jacobian加重射影坐标点 (X, Y, Z) 对应仿射坐标 (X/Z^2, Y/Z^3)"""

    def __init__(self, x: int, y: int, z: int, curve: "CurveFp"):
        self.x = x
        self.y = y
        self.z = z
        self.curve = curve

    def double(self) -> "JacobianPoint":
        p = self.curve.p
        zz = (self.z * self.z) % p
        yy = (self.y * self.y) % p
        # 3(x + z^2)(x - z^2), 仅适用于 a = -3 的曲线
        m = (3 * (self.x + zz) * (self.x - zz)) % p
        z = (2 * self.y * self.z) % p
        s = (self.x * 4 * yy) % p
        x = (m * m - 2 * s) % p
        y = (m * (s - x) - 8 * yy * yy) % p
        return JacobianPoint(x, y, z, curve=self.curve)

    def add(self, other: "JacobianPoint") -> "JacobianPoint":
        # other须为仿射点, 即 z = 1
        p = self.curve.p
        zz = (self.z * self.z) % p
        u2 = (other.x * zz) % p
        s2 = (other.y * zz * self.z) % p
        h = (u2 - self.x) % p
        r = (s2 - self.y) % p
        hh = (h * h) % p
        hhh = (h * hh) % p
        v = (self.x * hh) % p
        x = (r * r - hhh - 2 * v) % p
        y = (r * (v - x) - self.y * hhh) % p
        z = (self.z * h) % p
        return JacobianPoint(x, y, z, curve=self.curve)

    def scalar_mult(self, k: int) -> "JacobianPoint":
        # kP运算, 从高位到低位的倍点-点加
        if k <= 0:
            raise ValueError('k必须为正整数')
        result = None
        for bit in bin(k)[2:]:
            if result is not None:
                result = result.double()
            if bit == '1':
                result = self if result is None else result.add(self)
        return result

    def to_curve_point(self) -> Optional[CurvePoint]:
        p = self.curve.p
        if self.z % p == 0:
            # 无穷远点
            return None
        z_inv = pow(self.z, p - 2, p)
        z_inv2 = (z_inv * z_inv) % p
        x = (self.x * z_inv2) % p
        y = (self.y * z_inv2 * z_inv) % p
        return CurvePoint(x, y, curve=self.curve)


class CurveFp:
    """Fp有限域曲线 方程 y^2 = x^3 + ax + b"""
    name: str
    key_size: int
    a: int
    b: int
    p: int
    n: int
    gx: int
    gy: int

    def __repr__(self):
        return '<CurveFp "%s">' % self.name

    @property
    def field_size(self) -> int:
        """坐标字节长度 ceil(bitlen(p)/8)"""
        return (self.p.bit_length() + 7) // 8

    @property
    def order_size(self) -> int:
        """私钥字节长度 ceil(bitlen(n)/8)"""
        return (self.n.bit_length() + 7) // 8

    def base_point(self) -> CurvePoint:
        return CurvePoint(self.gx, self.gy, curve=self)

    def scalar_base_mult(self, k: int) -> CurvePoint:
        return self.base_point().scalar_mult(k)

    def params(self) -> dict:
        """
        曲线参数
        :return: 字典类型的曲线参数
        """
        return dict(a=self.a, b=self.b, p=self.p, gx=self.gx, gy=self.gy, n=self.n)

    def is_on_curve(self, x: int, y: int) -> bool:
        """
        点(x, y)是否在曲线上 y^2 - (x^3 + ax + b) 应为p的倍数
        :param x: x坐标
        :param y: y坐标
        :return: 在曲线上返回True, 否则返回False
        """
        if not (0 <= x < self.p and 0 <= y < self.p):
            return False
        return (y * y - x * x * x - self.a * x - self.b) % self.p == 0

    def marshal(self, x: int, y: int) -> bytes:
        """
        未压缩点编码 04 || X || Y, 坐标左补零到域长度
        :return: 1 + 2 * field_size 字节
        """
        size = self.field_size
        return bytes((UNCOMPRESSED,)) + x.to_bytes(size, 'big') + y.to_bytes(size, 'big')

    def unmarshal(self, data: bytes) -> Optional[Tuple[int, int]]:
        """
        解析未压缩点编码, 格式不对或不在曲线上返回None
        """
        size = self.field_size
        if len(data) != 1 + 2 * size or data[0] != UNCOMPRESSED:
            return None
        x = int.from_bytes(data[1:1 + size], 'big')
        y = int.from_bytes(data[1 + size:], 'big')
        if not self.is_on_curve(x, y):
            return None
        return x, y


class SM2P256Curve(CurveFp):
    name = 'sm2p256v1'
    key_size = 256
    a = 115792089210356248756420345214020892766250353991924191454421193933289684991996
    b = 18505919022281880113072981827955639221458448578012075254857346196103069175443
    p = 115792089210356248756420345214020892766250353991924191454421193933289684991999
    n = 115792089210356248756420345214020892766061623724957744567843809356293439045923
    gx = 22963146547237050559479531362550074578802567295341616970375194840604139615431
    gy = 85132369209828568825618990617112496413088388631904505083283536607588877201568


sm2p256v1 = SM2P256Curve()

DEFAULT_CURVE = sm2p256v1
