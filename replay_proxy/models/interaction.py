"""Recorded interaction models"""

import base64
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from ..utils.hashing import fingerprint_request

Headers = Dict[str, List[str]]


def _decode_body(value: Any) -> Optional[bytes]:
    # Bodies are stored as base64 strings; empty bodies are omitted
    if value is None or value == "" or value == b"":
        return None
    if isinstance(value, str):
        return base64.b64decode(value, validate=True)
    return value


def _decode_headers(value: Any) -> Any:
    if value is None:
        return {}
    if isinstance(value, dict):
        return {
            name: [values] if isinstance(values, str) else values
            for name, values in value.items()
        }
    return value


class RecordedRequest(BaseModel):
    """HTTP request as it was sent to the target"""
    method: str
    url: str = Field(..., description="Target URL as passed to the proxy")
    headers: Headers = Field(default_factory=dict)
    body: Optional[bytes] = None

    class Config:
        frozen = True

    @field_validator("body", mode="before")
    @classmethod
    def validate_body(cls, v: Any) -> Optional[bytes]:
        return _decode_body(v)

    @field_validator("headers", mode="before")
    @classmethod
    def validate_headers(cls, v: Any) -> Any:
        return _decode_headers(v)

    @field_serializer("body", when_used="json")
    def serialize_body(self, body: Optional[bytes]) -> Optional[str]:
        if body is None:
            return None
        return base64.b64encode(body).decode("ascii")

    @classmethod
    def from_inbound(
        cls,
        method: str,
        target: str,
        headers: Headers,
        body: Optional[bytes]
    ) -> "RecordedRequest":
        """
        Build the canonical request snapshot for an inbound proxied call.

        Recording and playback both go through here so that their
        fingerprints are always computed from the same fields.
        """
        return cls(method=method, url=target, headers=headers, body=body or None)

    def fingerprint(self) -> str:
        """Playback lookup key: SHA256 of method, URL and body"""
        return fingerprint_request(self.method, self.url, self.body)


class RecordedResponse(BaseModel):
    """HTTP response as it was returned by the target"""
    status_code: int = Field(..., ge=100, le=599)
    headers: Headers = Field(default_factory=dict)
    body: Optional[bytes] = None

    class Config:
        frozen = True

    @field_validator("body", mode="before")
    @classmethod
    def validate_body(cls, v: Any) -> Optional[bytes]:
        return _decode_body(v)

    @field_validator("headers", mode="before")
    @classmethod
    def validate_headers(cls, v: Any) -> Any:
        return _decode_headers(v)

    @field_serializer("body", when_used="json")
    def serialize_body(self, body: Optional[bytes]) -> Optional[str]:
        if body is None:
            return None
        return base64.b64encode(body).decode("ascii")


class InteractionMetadata(BaseModel):
    """Target and timing information"""
    target: str
    duration_ms: int = Field(default=0, ge=0)

    class Config:
        frozen = True


class Interaction(BaseModel):
    """A recorded request/response pair (the unit of persistence)"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    request: RecordedRequest
    response: RecordedResponse
    metadata: InteractionMetadata

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "8a1c1f0e-6a7b-4bd2-9d0e-2f1f8b8e4a51",
                "timestamp": "2025-11-05T10:30:01Z",
                "request": {
                    "method": "POST",
                    "url": "api.example.com/users",
                    "headers": {"Content-Type": ["application/json"]},
                    "body": "eyJuYW1lIjoiQWxpY2UifQ=="
                },
                "response": {
                    "status_code": 201,
                    "headers": {"Content-Type": ["application/json"]},
                    "body": "eyJpZCI6MSwibmFtZSI6IkFsaWNlIn0="
                },
                "metadata": {
                    "target": "api.example.com/users",
                    "duration_ms": 145
                }
            }
        }

    def fingerprint(self) -> str:
        """Fingerprint of the recorded request"""
        return self.request.fingerprint()

    def to_json(self) -> str:
        """Serialize for storage (bodies base64, empty bodies omitted)"""
        return self.model_dump_json(indent=2, exclude_none=True)

    @classmethod
    def from_json(cls, data: str) -> "Interaction":
        """Parse a stored interaction"""
        return cls.model_validate_json(data)
