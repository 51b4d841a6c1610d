"""Shared DTOs for the support chat API."""
from datetime import datetime
from typing import Dict
from uuid import UUID

from pydantic import BaseModel, Field


class BaseDTO(BaseModel):
    """Base DTO with common configuration."""
    
    class Config:
        from_attributes = True
        json_encoders = {
            datetime: lambda v: v.isoformat(),
            UUID: lambda v: str(v),
        }


class HealthCheckResponse(BaseDTO):
    """Health check response DTO."""
    status: str = Field(description="Service status")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    version: str = Field(default="0.1.0")
    dependencies: Dict[str, str] = Field(default_factory=dict)
