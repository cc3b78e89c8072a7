#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# @FileName     :   keys.py
# @Function     :   SM2密钥与PEM互转
"""
私钥:
- 无口令: PKCS#8 DER, PEM类型 PRIVATE KEY
- 有口令: 独立ECPrivateKey DER(带曲线OID), 口令加密后PEM类型 PRIVATE KEY

公钥:
- SubjectPublicKeyInfo DER, PEM类型 PUBLIC KEY, 有口令时加密
"""
import logging
from typing import Callable, Optional, Union

from . import pem
from .cipher import DEFAULT_PEM_CIPHER, PEMCipher, decrypt_pem_block, encrypt_pem_block, is_encrypted_pem_block
from .exceptions import (DecodeError, DecryptionError, EncodingError, InvalidInputError, InvalidKeyError,
                         MissingPasswordError)
from .sm2 import ECPrivateKeyForm, SM2PrivateKey, SM2PublicKey

logger = logging.getLogger(__name__)

PRIVATE_KEY_TYPE = 'PRIVATE KEY'
PUBLIC_KEY_TYPE = 'PUBLIC KEY'

Password = Optional[Union[bytes, str]]


def _check_private_key(key):
    if key is None:
        raise InvalidKeyError('私钥不能为空')
    if not isinstance(key, SM2PrivateKey):
        raise InvalidKeyError('不是SM2私钥: %r' % type(key))


def _check_public_key(key):
    if key is None:
        raise InvalidKeyError('公钥不能为空')
    if not isinstance(key, SM2PublicKey):
        raise InvalidKeyError('不是SM2公钥: %r' % type(key))


def _encrypt(block_type: str, raw: bytes, password, cipher: PEMCipher, rand) -> bytes:
    try:
        block = encrypt_pem_block(rand, block_type, raw, password, cipher)
    except (ValueError, TypeError) as exc:
        raise EncodingError('PEM加密失败: %s' % exc) from exc
    return pem.encode(block)


def _decode_pem(data, password, block_type: str):
    """
    解析PEM并按需解密
    :return: (DER, 是否为加密块)
    """
    if not data:
        raise InvalidInputError('PEM数据不能为空')
    block = pem.decode(data)
    if block is None:
        raise DecodeError('PEM解析失败, 未找到PEM块')
    if block.type != block_type:
        logger.debug('PEM块类型为 %s, 期望 %s', block.type, block_type)

    if not is_encrypted_pem_block(block):
        return block.data, False
    if not password:
        raise MissingPasswordError('PEM已加密, 需要口令')
    return decrypt_pem_block(block, password), True


def private_key_to_der(key: SM2PrivateKey) -> bytes:
    """私钥转为独立ECPrivateKey DER(带曲线OID)"""
    _check_private_key(key)
    return key.to_ec_der(ECPrivateKeyForm.STANDALONE)


def der_to_private_key(der: bytes) -> SM2PrivateKey:
    """解析PKCS#8或ECPrivateKey DER"""
    if not der:
        raise InvalidInputError('DER数据不能为空')
    return SM2PrivateKey.from_der(der)


def private_key_to_pem(key: SM2PrivateKey, password: Password = None) -> bytes:
    """
    私钥转为PEM, 口令非空时转为加密PEM
    :param key: SM2私钥
    :param password: 口令
    :return: PEM字节
    """
    if password:
        return private_key_to_encrypted_pem(key, password)
    _check_private_key(key)
    return pem.encode(pem.PemBlock(PRIVATE_KEY_TYPE, key.to_der()))


def private_key_to_encrypted_pem(key: SM2PrivateKey, password: Union[bytes, str],
                                 cipher: PEMCipher = DEFAULT_PEM_CIPHER,
                                 rand: Optional[Callable[[int], bytes]] = None) -> bytes:
    """
    私钥转为加密PEM, 内容为带曲线OID的ECPrivateKey
    :param rand: 随机数源, 默认secrets.token_bytes
    """
    _check_private_key(key)
    raw = key.to_ec_der(ECPrivateKeyForm.STANDALONE)
    return _encrypt(PRIVATE_KEY_TYPE, raw, password, cipher, rand)


def pem_to_private_key(data: Union[bytes, str], password: Password = None) -> SM2PrivateKey:
    """
    PEM转为私钥, 加密PEM需要口令
    :raises InvalidInputError: 输入为空
    :raises DecodeError: PEM或DER解析失败
    :raises MissingPasswordError: 加密PEM未提供口令
    :raises DecryptionError: 口令错误
    :raises KeyTypeError: 不是SM2私钥
    """
    der, encrypted = _decode_pem(data, password, PRIVATE_KEY_TYPE)
    try:
        return SM2PrivateKey.from_der(der)
    except DecodeError as exc:
        if encrypted:
            # 填充碰巧正确但口令错误时, 解密结果不是合法DER
            raise DecryptionError('解密结果不是合法私钥, 口令错误') from exc
        raise


def public_key_to_pem(key: SM2PublicKey, password: Password = None) -> bytes:
    """
    公钥转为PEM, 口令非空时转为加密PEM
    """
    if password:
        return public_key_to_encrypted_pem(key, password)
    _check_public_key(key)
    return pem.encode(pem.PemBlock(PUBLIC_KEY_TYPE, key.to_der()))


def public_key_to_encrypted_pem(key: SM2PublicKey, password: Union[bytes, str],
                                cipher: PEMCipher = DEFAULT_PEM_CIPHER,
                                rand: Optional[Callable[[int], bytes]] = None) -> bytes:
    """
    公钥转为加密PEM, 口令不能为空
    """
    _check_public_key(key)
    if not password:
        raise MissingPasswordError('口令不能为空')
    return _encrypt(PUBLIC_KEY_TYPE, key.to_der(), password, cipher, rand)


def pem_to_public_key(data: Union[bytes, str], password: Password = None) -> SM2PublicKey:
    """
    PEM转为公钥, 加密PEM需要口令
    """
    der, encrypted = _decode_pem(data, password, PUBLIC_KEY_TYPE)
    try:
        return SM2PublicKey.from_der(der)
    except DecodeError as exc:
        if encrypted:
            raise DecryptionError('解密结果不是合法公钥, 口令错误') from exc
        raise
