"""Statistics, history and admin response models"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from .interaction import Interaction
from .mode import ProxyMode


class HistoryEntry(BaseModel):
    """Summary of one proxied request"""
    id: str = Field(..., description="Request fingerprint")
    timestamp: datetime
    method: str
    url: str
    target: str
    status: int
    duration: int = Field(..., description="Dispatch time in milliseconds")
    saved: bool = Field(..., description="Whether this call produced a new recording")


class StatisticsSnapshot(BaseModel):
    """Point-in-time copy of the proxy counters"""
    record_count: int = 0
    playback_hits: int = 0
    playback_misses: int = 0


class StatusResponse(StatisticsSnapshot):
    """Response from GET /admin/status"""
    mode: ProxyMode
    total_recordings: int
    uptime: str

    class Config:
        json_schema_extra = {
            "example": {
                "mode": "playback",
                "record_count": 0,
                "playback_hits": 12,
                "playback_misses": 1,
                "total_recordings": 42,
                "uptime": "1h2m3s"
            }
        }


class HistoryResponse(BaseModel):
    """Response from GET /admin/history"""
    count: int
    history: List[HistoryEntry]


class RecordingSummary(BaseModel):
    """One row of the recordings listing"""
    id: str = Field(..., description="Request fingerprint, usable with GET /admin/recording")
    uuid: str
    timestamp: datetime
    method: str
    url: str
    target: str
    status: int
    duration: int

    @classmethod
    def from_interaction(cls, interaction: Interaction) -> "RecordingSummary":
        return cls(
            id=interaction.fingerprint(),
            uuid=interaction.id,
            timestamp=interaction.timestamp,
            method=interaction.request.method,
            url=interaction.request.url,
            target=interaction.metadata.target,
            status=interaction.response.status_code,
            duration=interaction.metadata.duration_ms
        )


class RecordingsResponse(BaseModel):
    """Response from GET /admin/recordings"""
    count: int
    recordings: List[RecordingSummary]


class MessageResponse(BaseModel):
    """Plain acknowledgement"""
    message: str
