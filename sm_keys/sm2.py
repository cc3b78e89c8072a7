#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# @FileName     :   sm2.py
# @Function     :   SM2密钥对象及DER编解码
"""
私钥dA是区间[1, n-1]内的整数, 公钥PA=[dA]G=(xA, yA)

私钥DER有两种形式:
- PKCS#8 外层PrivateKeyInfo 包装 ECPrivateKey, 内层省略曲线OID(兼容部分实现)
- 独立的 ECPrivateKey, 带曲线OID, 用于加密PEM
两种形式内层都带公钥点
"""
import enum
import logging
from typing import Optional

from pyasn1.codec.der import decoder, encoder
from pyasn1.error import PyAsn1Error
from pyasn1.type import univ

from . import asn1
from .curve import CurveFp, sm2p256v1
from .exceptions import DecodeError, EncodingError, KeyTypeError

logger = logging.getLogger(__name__)


class ECPrivateKeyForm(enum.Enum):
    """ECPrivateKey编码形式"""
    PKCS8 = 'pkcs8'  # 由PrivateKeyInfo包装, 省略曲线OID
    STANDALONE = 'standalone'  # 独立结构, 带曲线OID


class SM2PublicKey:
    """
    公钥 公钥是在椭圆曲线上的一个点，由一对坐标（x，y）组成
    """

    def __init__(self, x: int, y: int, curve: CurveFp = sm2p256v1):
        self.x = x
        self.y = y
        self.curve = curve

    def __repr__(self):
        return '<SM2PublicKey x="%s" y="%s">' % (self.x, self.y)

    def __eq__(self, other):
        if not isinstance(other, SM2PublicKey):
            return NotImplemented
        return self.curve.name == other.curve.name and self.x == other.x and self.y == other.y

    def point_bytes(self) -> bytes:
        """未压缩点编码 04 || x || y"""
        try:
            return self.curve.marshal(self.x, self.y)
        except OverflowError as exc:
            raise EncodingError('公钥坐标超出域长度或为负数') from exc

    @classmethod
    def from_der(cls, der: bytes, curve: CurveFp = sm2p256v1) -> "SM2PublicKey":
        """
        解析SubjectPublicKeyInfo
        :raises DecodeError: DER格式错误或点非法
        :raises KeyTypeError: 不是SM2公钥
        """
        spki = _decode(der, asn1.SubjectPublicKeyInfo())
        _check_algorithm(spki['algorithm'])
        point = curve.unmarshal(spki['subjectPublicKey'].asOctets())
        if point is None:
            raise DecodeError('公钥点格式错误或不在曲线上')
        return cls(x=point[0], y=point[1], curve=curve)

    def to_der(self) -> bytes:
        spki = asn1.SubjectPublicKeyInfo()
        spki['algorithm'] = asn1.sm2_algorithm()
        spki['subjectPublicKey'] = univ.BitString(hexValue=self.point_bytes().hex())
        return _encode(spki)

    @classmethod
    def from_pem(cls, pem: bytes, password=None) -> "SM2PublicKey":
        from .keys import pem_to_public_key
        return pem_to_public_key(pem, password)

    def to_pem(self, password=None) -> bytes:
        from .keys import public_key_to_pem
        return public_key_to_pem(self, password)


class SM2PrivateKey:
    """私钥"""

    def __init__(self, d: int, curve: CurveFp = sm2p256v1, public_key: Optional[SM2PublicKey] = None):
        """
        :param d: 私钥值
        :param curve: 曲线
        :param public_key: 公钥, 不传时由 [d]G 计算
        """
        self.d = d
        self.curve = curve
        if public_key is None:
            point = curve.scalar_base_mult(d)
            public_key = SM2PublicKey(x=point.x, y=point.y, curve=curve)
        self._public_key = public_key

    def __repr__(self):
        return '<SM2PrivateKey "%s">' % self.d

    def __eq__(self, other):
        if not isinstance(other, SM2PrivateKey):
            return NotImplemented
        return self.d == other.d and self._public_key == other._public_key

    @property
    def x(self) -> int:
        return self._public_key.x

    @property
    def y(self) -> int:
        return self._public_key.y

    def public_key(self) -> SM2PublicKey:
        return self._public_key

    def private_bytes(self) -> bytes:
        """d 大端编码, 左补零到曲线阶的字节长度"""
        size = self.curve.order_size
        try:
            return self.d.to_bytes(size, 'big')
        except OverflowError as exc:
            raise EncodingError('私钥长度超过曲线阶') from exc

    def to_ec_der(self, form: ECPrivateKeyForm = ECPrivateKeyForm.STANDALONE) -> bytes:
        """
        编码ECPrivateKey
        :param form: PKCS8 省略曲线OID, STANDALONE 带曲线OID
        """
        ec_key = asn1.ECPrivateKey()
        ec_key['version'] = asn1.EC_PRIVATE_KEY_VERSION
        ec_key['privateKey'] = self.private_bytes()
        if form is ECPrivateKeyForm.STANDALONE:
            ec_key['parameters'] = asn1.NamedCurve(asn1.SM2_OID)
        ec_key['publicKey'] = asn1.PublicKeyBits(hexValue=self._public_key.point_bytes().hex())
        logger.debug('编码ECPrivateKey, form=%s', form.value)
        return _encode(ec_key)

    def to_der(self) -> bytes:
        """编码PKCS#8 PrivateKeyInfo"""
        pkcs8_key = asn1.PrivateKeyInfo()
        pkcs8_key['version'] = asn1.PKCS8_VERSION
        pkcs8_key['privateKeyAlgorithm'] = asn1.sm2_algorithm()
        pkcs8_key['privateKey'] = self.to_ec_der(ECPrivateKeyForm.PKCS8)
        return _encode(pkcs8_key)

    @classmethod
    def from_der(cls, der: bytes, curve: CurveFp = sm2p256v1) -> "SM2PrivateKey":
        """
        解析私钥DER, 先按PKCS#8解析, 失败再按独立ECPrivateKey解析
        :raises DecodeError: 两种结构都无法解析
        :raises KeyTypeError: 不是SM2私钥
        """
        try:
            pkcs8_key = _decode(der, asn1.PrivateKeyInfo())
        except DecodeError as exc:
            logger.debug('不是PKCS#8结构, 尝试ECPrivateKey: %s', exc)
            return cls.from_ec_der(der, curve=curve)

        if int(pkcs8_key['version']) not in (0, 1):
            raise DecodeError('未知的PKCS#8版本: %d' % int(pkcs8_key['version']))
        _check_algorithm(pkcs8_key['privateKeyAlgorithm'])
        return cls.from_ec_der(pkcs8_key['privateKey'].asOctets(), curve=curve)

    @classmethod
    def from_ec_der(cls, der: bytes, curve: CurveFp = sm2p256v1) -> "SM2PrivateKey":
        ec_key = _decode(der, asn1.ECPrivateKey())
        if int(ec_key['version']) != asn1.EC_PRIVATE_KEY_VERSION:
            raise DecodeError('未知的ECPrivateKey版本: %d' % int(ec_key['version']))
        if ec_key['parameters'].isValue and ec_key['parameters'] != asn1.SM2_OID:
            raise KeyTypeError('曲线不是sm2p256v1: %s' % ec_key['parameters'])

        raw = ec_key['privateKey'].asOctets()
        if len(raw) > curve.order_size:
            raise DecodeError('私钥长度错误: %d' % len(raw))
        d = int.from_bytes(raw, 'big')
        if not 0 < d < curve.n:
            raise DecodeError('私钥值不在[1, n-1]内')

        public_key = None
        if ec_key['publicKey'].isValue:
            point = curve.unmarshal(ec_key['publicKey'].asOctets())
            if point is None:
                raise DecodeError('公钥点格式错误或不在曲线上')
            public_key = SM2PublicKey(x=point[0], y=point[1], curve=curve)
        return cls(d, curve=curve, public_key=public_key)

    @classmethod
    def from_pem(cls, pem: bytes, password=None) -> "SM2PrivateKey":
        from .keys import pem_to_private_key
        return pem_to_private_key(pem, password)

    def to_pem(self, password=None) -> bytes:
        from .keys import private_key_to_pem
        return private_key_to_pem(self, password)


def _encode(value) -> bytes:
    try:
        return encoder.encode(value)
    except PyAsn1Error as exc:
        raise EncodingError('ASN.1编码失败: %s' % exc) from exc


def _decode(der: bytes, spec):
    try:
        value, rest = decoder.decode(der, asn1Spec=spec)
    except PyAsn1Error as exc:
        raise DecodeError('ASN.1解码失败: %s' % exc) from exc
    if rest:
        raise DecodeError('ASN.1结构后有多余数据')
    return value


def _check_algorithm(algorithm: asn1.AlgorithmIdentifier):
    """算法须为ecPublicKey, 参数须为sm2p256v1曲线OID"""
    if algorithm['algorithm'] != asn1.EC_PUBLIC_KEY_OID:
        raise KeyTypeError('不是EC密钥: %s' % algorithm['algorithm'])
    if not algorithm['parameters'].isValue:
        raise KeyTypeError('缺少曲线参数')
    try:
        curve_oid = _decode(bytes(algorithm['parameters']), univ.ObjectIdentifier())
    except DecodeError as exc:
        raise KeyTypeError('曲线参数不是命名曲线OID') from exc
    if curve_oid != asn1.SM2_OID:
        raise KeyTypeError('曲线不是sm2p256v1: %s' % curve_oid)
