"""API request/response schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.core.companion.care import can_care
from src.core.companion.display import describe
from src.core.companion.models import Companion


# === Request Schemas ===


class AdoptRequest(BaseModel):
    """Adopt a companion"""

    name: str = Field(..., max_length=50, description="Companion name (min 3 chars)")
    kind: str = Field("fish", description="Companion kind: fish, frog")
    confirm_replace: bool = Field(
        False, description="Required when the owner already has a companion"
    )


class RenameRequest(BaseModel):
    """Owner edit: name and/or kind"""

    name: Optional[str] = Field(None, max_length=50)
    kind: Optional[str] = None


class StatsEditRequest(BaseModel):
    """Admin edit: profile and stats in one write"""

    name: Optional[str] = Field(None, max_length=50)
    kind: Optional[str] = None
    health: Optional[int] = Field(None, description="0 ~ 100")
    level: Optional[int] = Field(None, description=">= 1")
    experience: Optional[int] = Field(None, description="0 ~ 499")
    expected_version: Optional[int] = Field(
        None, description="Reject the edit if the companion changed since this version"
    )


class HealthAdjustRequest(BaseModel):
    """Admin health nudge (admin console +10 / -10)"""

    delta: int = Field(..., ge=-100, le=100)


# === Response Schemas ===


class CompanionInfo(BaseModel):
    """Companion record plus derived display fields"""

    id: str
    owner_id: str
    name: str
    kind: str
    health: int
    level: int
    experience: int
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    health_status: str
    needs_attention: bool
    appearance: str
    display_level: int
    experience_progress: float
    can_care: bool

    @classmethod
    def from_core(cls, companion: Companion) -> "CompanionInfo":
        return cls(
            id=companion.id,
            owner_id=companion.owner_id,
            name=companion.name,
            kind=companion.kind.value,
            health=companion.health,
            level=companion.level,
            experience=companion.experience,
            version=companion.version,
            created_at=companion.created_at,
            updated_at=companion.updated_at,
            can_care=can_care(companion),
            **describe(companion),
        )


class CompanionResponse(BaseModel):
    success: bool = True
    companion: CompanionInfo


class CompanionListResponse(BaseModel):
    success: bool = True
    companions: list[CompanionInfo] = []
    count: int = 0


class ErrorResponse(BaseModel):
    """Error response"""

    success: bool = False
    error: str
    detail: Optional[str] = None
