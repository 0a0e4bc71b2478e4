"""
JSON-RPC envelopes exchanged one per line on every transport.
"""

from __future__ import annotations

import json
import math
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, StrictStr, ValidationError, model_validator

from .protocol import JSONRPC_VERSION


class EnvelopeParseError(ValueError):
    """An inbound line is not a well-formed request envelope."""


class ErrorObject(BaseModel):
    code: int
    message: str


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not valid JSON")


def _finite_float(token: str) -> float:
    value = float(token)
    if not math.isfinite(value):
        raise ValueError(f"number out of range: {token}")
    return value


class RequestEnvelope(BaseModel):
    jsonrpc: StrictStr = JSONRPC_VERSION
    id: Any = None
    method: StrictStr = ""
    params: Any = None

    @classmethod
    def parse(cls, line: Union[bytes, str]) -> "RequestEnvelope":
        try:
            text = line.decode("utf-8") if isinstance(line, bytes) else line
            payload = json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)
        except RecursionError:
            raise EnvelopeParseError("nesting too deep") from None
        except ValueError as exc:
            raise EnvelopeParseError(str(exc)) from None
        if not isinstance(payload, dict):
            raise EnvelopeParseError(
                f"expected a JSON object, got {type(payload).__name__}"
            )
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or "envelope"
            raise EnvelopeParseError(f"{field}: {first.get('msg')}") from None


class ResponseEnvelope(BaseModel):
    jsonrpc: str = JSONRPC_VERSION
    id: Any = None
    result: Optional[Any] = None
    error: Optional[ErrorObject] = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> "ResponseEnvelope":
        if (self.result is None) == (self.error is None):
            raise ValueError("response must carry exactly one of result or error")
        return self

    @classmethod
    def success(cls, msg_id: Any, result: Any) -> "ResponseEnvelope":
        return cls(id=msg_id, result=result)

    @classmethod
    def failure(cls, msg_id: Any, code: int, message: str) -> "ResponseEnvelope":
        return cls(id=msg_id, error=ErrorObject(code=code, message=message))

    def to_wire(self) -> Dict[str, Any]:
        wire: Dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            wire["error"] = self.error.model_dump()
        else:
            wire["result"] = self.result
        return wire

    def serialize(self) -> str:
        """Compact single-line JSON, without the trailing newline."""
        return json.dumps(self.to_wire(), separators=(",", ":"), allow_nan=False, default=str)

    @classmethod
    def parse(cls, line: Union[bytes, str]) -> "ResponseEnvelope":
        text = line.decode("utf-8") if isinstance(line, bytes) else line
        return cls.model_validate(json.loads(text))
