"""Error codes and exceptions raised by the raw ciphers and the RSASSA-PSS routines.

Every failure of the cryptographic core maps onto one `ErrorCode`; the matching exception carries it as `code`, so
callers may either catch the specific class or switch on the code.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import enum


class ErrorCode(enum.IntEnum):
    MSG_TOO_LONG = 1
    HASH_TOO_LONG = 2
    OUT_OF_RANGE = 3
    INVALID_TRAILER = 4
    INVALID_LEADING_BIT = 5
    INVALID_PADDING = 6
    HASH_MISMATCH = 7


class RSAError(Exception):
    """Base class of all core errors.

    Attributes:
        code: The enumerated error code.
    """
    code: ErrorCode

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code.name.replace("_", " ").capitalize())


class MsgTooLong(RSAError, ValueError):
    code = ErrorCode.MSG_TOO_LONG


class HashTooLong(RSAError, ValueError):
    code = ErrorCode.HASH_TOO_LONG


class OutOfRange(RSAError, ValueError):
    code = ErrorCode.OUT_OF_RANGE


class VerificationError(RSAError):
    """A signature failed one of the structural or hash checks."""


class InvalidTrailer(VerificationError):
    code = ErrorCode.INVALID_TRAILER


class InvalidLeadingBit(VerificationError):
    code = ErrorCode.INVALID_LEADING_BIT


class InvalidPadding(VerificationError):
    code = ErrorCode.INVALID_PADDING


class HashMismatch(VerificationError):
    code = ErrorCode.HASH_MISMATCH


ERRORS: dict[ErrorCode, type[RSAError]] = {
    cls.code: cls
    for cls in (MsgTooLong, HashTooLong, OutOfRange, InvalidTrailer, InvalidLeadingBit, InvalidPadding, HashMismatch)
}
