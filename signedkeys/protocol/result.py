# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class VerifyCode(str, Enum):
    OK = "OK"
    BAD_INPUT = "ERR_BAD_INPUT"
    DECODE_FAILED = "ERR_DECODE_FAILED"
    TOO_SHORT = "ERR_TOO_SHORT"
    NO_VERIFIER = "ERR_NO_VERIFIER"
    BAD_SIGNATURE = "ERR_BAD_SIGNATURE"
    VERIFIER_ERROR = "ERR_VERIFIER_ERROR"


@dataclass(frozen=True)
class Verification:
    """
    Outcome of checking one candidate key.
    detail is LOCAL-ONLY diagnostic text and never carries key material.
    """
    valid: bool
    code: VerifyCode
    detail: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid

    @staticmethod
    def ok() -> "Verification":
        return Verification(valid=True, code=VerifyCode.OK)

    @staticmethod
    def fail(code: VerifyCode, detail: Optional[str] = None) -> "Verification":
        return Verification(valid=False, code=code, detail=detail)
