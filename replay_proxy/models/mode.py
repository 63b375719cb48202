"""Proxy mode models"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ProxyMode(str, Enum):
    """Proxy operating mode"""
    RECORD = "record"
    PLAYBACK = "playback"


class ModeRequest(BaseModel):
    """Request to switch the proxy mode"""
    mode: str = Field(..., description="Target mode: 'record' or 'playback'")

    class Config:
        json_schema_extra = {
            "example": {
                "mode": "record"
            }
        }


class ModeResponse(BaseModel):
    """Current (or newly switched) proxy mode"""
    mode: ProxyMode
    message: Optional[str] = None
