#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# @FileName     :   asn1.py
# @Function     :   SM2密钥ASN.1结构
"""
PrivateKeyInfo ::= SEQUENCE {                        -- PKCS#8
    version              INTEGER,                    -- 0
    privateKeyAlgorithm  AlgorithmIdentifier,
    privateKey           OCTET STRING,               -- ECPrivateKey的DER
    attributes       [0] IMPLICIT SET OF Attribute OPTIONAL }

ECPrivateKey ::= SEQUENCE {                          -- SEC1 / RFC 5915
    version        INTEGER,                          -- 1
    privateKey     OCTET STRING,
    parameters [0] EXPLICIT OBJECT IDENTIFIER OPTIONAL,
    publicKey  [1] EXPLICIT BIT STRING OPTIONAL }

SubjectPublicKeyInfo ::= SEQUENCE {
    algorithm         AlgorithmIdentifier,
    subjectPublicKey  BIT STRING }
"""
from pyasn1.codec.der import encoder
from pyasn1.type import namedtype, tag, univ

EC_PUBLIC_KEY_OID = univ.ObjectIdentifier('1.2.840.10045.2.1')
SM2_OID = univ.ObjectIdentifier('1.2.156.10197.1.301')

PKCS8_VERSION = 0
EC_PRIVATE_KEY_VERSION = 1


class AlgorithmIdentifier(univ.Sequence):
    # parameters 对EC密钥为曲线OID, 其他算法可能为NULL等, 故用Any
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('algorithm', univ.ObjectIdentifier()),
        namedtype.OptionalNamedType('parameters', univ.Any())
    )


class SubjectPublicKeyInfo(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('algorithm', AlgorithmIdentifier()),
        namedtype.NamedType('subjectPublicKey', univ.BitString())
    )


class Attributes(univ.SetOf):
    # 导出时不写, 解析时忽略内容
    componentType = univ.Any()


class PrivateKeyInfo(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('version', univ.Integer()),
        namedtype.NamedType('privateKeyAlgorithm', AlgorithmIdentifier()),
        namedtype.NamedType('privateKey', univ.OctetString()),
        namedtype.OptionalNamedType('attributes', Attributes().subtype(
            implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 0))),
    )


class NamedCurve(univ.ObjectIdentifier):
    tagSet = univ.ObjectIdentifier.tagSet.tagExplicitly(
        tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 0))


class PublicKeyBits(univ.BitString):
    tagSet = univ.BitString.tagSet.tagExplicitly(
        tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 1))


class ECPrivateKey(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('version', univ.Integer()),
        namedtype.NamedType('privateKey', univ.OctetString()),
        namedtype.OptionalNamedType('parameters', NamedCurve()),
        namedtype.OptionalNamedType('publicKey', PublicKeyBits()),
    )


def sm2_algorithm() -> AlgorithmIdentifier:
    """AlgorithmIdentifier {ecPublicKey, sm2p256v1}"""
    algorithm = AlgorithmIdentifier()
    algorithm['algorithm'] = EC_PUBLIC_KEY_OID
    algorithm['parameters'] = univ.Any(encoder.encode(SM2_OID))
    return algorithm
