#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# @FileName     :   cipher.py
# @Function     :   PEM块口令加解密(RFC 1423 / OpenSSL传统格式)
"""
加密PEM块带两个头:
    Proc-Type: 4,ENCRYPTED
    DEK-Info: AES-256-CBC,<IV的16进制>

密钥由 OpenSSL EVP_BytesToKey(MD5, 1轮) 从口令和IV前8字节派生:
    D_1 = MD5(P || S), D_i = MD5(D_{i-1} || P || S), 取前 key_size 字节
明文按PKCS#7填充后CBC加密
"""
import enum
import hashlib
import logging
import secrets
from typing import Callable, Optional, Union

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .exceptions import DecryptionError, EncodingError
from .pem import PROC_TYPE, PemBlock

logger = logging.getLogger(__name__)

DEK_INFO = 'DEK-Info'
PROC_TYPE_ENCRYPTED = '4,ENCRYPTED'
SALT_SIZE = 8


class PEMCipher(enum.Enum):
    """(DEK-Info中的名称, 密钥字节长度)"""
    AES128 = ('AES-128-CBC', 16)
    AES192 = ('AES-192-CBC', 24)
    AES256 = ('AES-256-CBC', 32)

    @property
    def dek_name(self) -> str:
        return self.value[0]

    @property
    def key_size(self) -> int:
        return self.value[1]

    @property
    def block_size(self) -> int:
        return algorithms.AES.block_size // 8

    @classmethod
    def from_name(cls, name: str) -> Optional["PEMCipher"]:
        for cipher in cls:
            if cipher.dek_name == name:
                return cipher
        return None

    def derive_key(self, password: bytes, salt: bytes) -> bytes:
        key = b''
        digest = b''
        while len(key) < self.key_size:
            digest = hashlib.md5(digest + password + salt).digest()
            key += digest
        return key[:self.key_size]

    def new_cipher(self, key: bytes, iv: bytes) -> Cipher:
        return Cipher(algorithms.AES(key), modes.CBC(iv))


DEFAULT_PEM_CIPHER = PEMCipher.AES256


def _to_bytes(password: Union[bytes, str]) -> bytes:
    if isinstance(password, str):
        return password.encode('utf-8')
    if not isinstance(password, (bytes, bytearray)):
        raise TypeError('口令须为bytes或str: %r' % type(password))
    return bytes(password)


def is_encrypted_pem_block(block: PemBlock) -> bool:
    return DEK_INFO in block.headers


def encrypt_pem_block(rand: Optional[Callable[[int], bytes]], block_type: str, data: bytes,
                      password: Union[bytes, str], cipher: PEMCipher = DEFAULT_PEM_CIPHER) -> PemBlock:
    """
    口令加密数据并构造PEM块
    :param rand: 随机数源, 参数为字节数, 为None时使用secrets.token_bytes
    :param block_type: PEM块类型, 如 PRIVATE KEY
    :param data: 明文DER
    :param password: 口令
    :param cipher: 加密算法
    :return: 带Proc-Type和DEK-Info头的PemBlock
    """
    rand = rand or secrets.token_bytes
    iv = rand(cipher.block_size)
    if len(iv) != cipher.block_size:
        raise EncodingError('随机数源返回的IV长度错误: %d' % len(iv))
    key = cipher.derive_key(_to_bytes(password), iv[:SALT_SIZE])

    padder = padding.PKCS7(cipher.block_size * 8).padder()
    plaintext = padder.update(data) + padder.finalize()
    encryptor = cipher.new_cipher(key, iv).encryptor()
    ciphertext = encryptor.update(plaintext) + encryptor.finalize()
    logger.debug('加密PEM块 %s, cipher=%s', block_type, cipher.dek_name)

    headers = {
        PROC_TYPE: PROC_TYPE_ENCRYPTED,
        DEK_INFO: '%s,%s' % (cipher.dek_name, iv.hex().upper()),
    }
    return PemBlock(block_type, ciphertext, headers)


def decrypt_pem_block(block: PemBlock, password: Union[bytes, str]) -> bytes:
    """
    解密PEM块
    :raises DecryptionError: 不是加密块, DEK-Info格式错误, 口令错误或密文损坏
    """
    dek_info = block.headers.get(DEK_INFO)
    if dek_info is None:
        raise DecryptionError('PEM块未加密')
    name, sep, iv_hex = dek_info.partition(',')
    if not sep:
        raise DecryptionError('DEK-Info格式错误: %s' % dek_info)
    cipher = PEMCipher.from_name(name.strip())
    if cipher is None:
        raise DecryptionError('不支持的加密算法: %s' % name)
    try:
        iv = bytes.fromhex(iv_hex.strip())
    except ValueError as exc:
        raise DecryptionError('IV不是16进制: %s' % iv_hex) from exc
    if len(iv) != cipher.block_size:
        raise DecryptionError('IV长度错误: %d' % len(iv))
    if not block.data or len(block.data) % cipher.block_size != 0:
        raise DecryptionError('密文长度不是分组长度的整数倍')

    key = cipher.derive_key(_to_bytes(password), iv[:SALT_SIZE])
    decryptor = cipher.new_cipher(key, iv).decryptor()
    plaintext = decryptor.update(block.data) + decryptor.finalize()

    unpadder = padding.PKCS7(cipher.block_size * 8).unpadder()
    try:
        return unpadder.update(plaintext) + unpadder.finalize()
    except ValueError as exc:
        raise DecryptionError('PEM解密失败, 口令错误') from exc
