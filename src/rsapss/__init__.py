"""RSA key generation, raw RSA and RSASSA-PSS signatures in an Academic Sense.

Provides a 64-bit toy RSA built on an explicit modular arithmetic engine, full-width RSA on fixed-length octet
strings, and RSASSA-PSS signing and verification over SHA-224/256/384/512. Keys can be exported to PKCS1 (Public Key)
and PKCS8 (Private Key).

Typical usage example:

    e, d, n = generate_key(KeyMode.FIXED_EXPONENT, 2048)
    s = pss_sign(b"Hi there!", d, n)
    pss_verify(b"Hi there!", e, n, s)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from rsapss.errors import ErrorCode
from rsapss.errors import HashMismatch
from rsapss.errors import HashTooLong
from rsapss.errors import InvalidLeadingBit
from rsapss.errors import InvalidPadding
from rsapss.errors import InvalidTrailer
from rsapss.errors import MsgTooLong
from rsapss.errors import OutOfRange
from rsapss.errors import RSAError
from rsapss.errors import VerificationError
from rsapss.keygen import generate_key_mini
from rsapss.keygen import generate_key_pair
from rsapss.keygen import KeyMode
from rsapss.keygen import miller_rabin
from rsapss.rsa import cipher_mini
from rsapss.rsa import generate_key
from rsapss.rsa import mgf1
from rsapss.rsa import pss_sign
from rsapss.rsa import pss_verify
from rsapss.rsa import rsa_cipher
from rsapss.rsa import RSAPrivKey
from rsapss.rsa import RSAPubKey

__version__ = "0.1.0"
__all__ = [
    "ErrorCode",
    "RSAError",
    "MsgTooLong",
    "HashTooLong",
    "OutOfRange",
    "VerificationError",
    "InvalidTrailer",
    "InvalidLeadingBit",
    "InvalidPadding",
    "HashMismatch",
    "KeyMode",
    "RSAPrivKey",
    "RSAPubKey",
    "generate_key_mini",
    "generate_key_pair",
    "generate_key",
    "miller_rabin",
    "cipher_mini",
    "rsa_cipher",
    "mgf1",
    "pss_sign",
    "pss_verify",
]
