from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ResponseResultCode(str, Enum):
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"


class ServerResponse(BaseModel):
    result: ResponseResultCode = ResponseResultCode.SUCCESS
    status: int = 200
    data: Any = None

    @classmethod
    def ok(cls, data: Any) -> "ServerResponse":
        return cls(result=ResponseResultCode.SUCCESS, status=200, data=data)


class ErrorResponse(BaseModel):
    status: int
    result: ResponseResultCode = ResponseResultCode.FAIL
    reason: str
    path: Optional[str] = None
    timestamp: str = Field(default_factory=_utc_now_iso)
    request_id: Optional[str] = None

    @classmethod
    def of(
        cls,
        status: int,
        reason: str,
        path: Optional[str],
        request_id: Optional[str] = None,
    ) -> "ErrorResponse":
        return cls(status=status, reason=reason, path=path, request_id=request_id)
