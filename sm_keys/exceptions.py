#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# @FileName     :   exceptions.py
# @Function     :   密钥编解码异常


class SMKeyError(Exception):
    """密钥编解码异常基类"""


class InvalidKeyError(SMKeyError):
    """导出时传入的密钥对象为空或类型不对"""


class InvalidInputError(SMKeyError):
    """导入时传入的PEM数据为空"""


class DecodeError(SMKeyError):
    """PEM或ASN.1结构无法解析"""


class MissingPasswordError(SMKeyError):
    """需要口令但未提供口令"""


class DecryptionError(SMKeyError):
    """口令错误或密文损坏"""


class EncodingError(SMKeyError):
    """ASN.1结构构造或加密失败"""


class KeyTypeError(SMKeyError):
    """解析成功但密钥算法或曲线不是SM2"""
