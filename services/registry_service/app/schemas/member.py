from enum import Enum
from pydantic import BaseModel, ConfigDict, field_validator
from typing import List, Optional
from datetime import date, datetime


class MemberStatus(str, Enum):
    RETIREE = "Retiree"
    SURVIVOR = "Survivor"


class MemberPayload(BaseModel):
    """
    Body of POST/PUT /records.

    Required fields are optional here on purpose: blank and absent values are
    reported by the validation guard as a missing field, not as a schema error.
    Dates are DD/MM/YYYY strings as typed by the user.
    """
    full_name: Optional[str] = None
    national_id: Optional[str] = None
    status: Optional[MemberStatus] = None
    is_active_member: bool = False
    deceased_name: Optional[str] = None
    birth_date: Optional[str] = None
    death_date: Optional[str] = None
    phone: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("status", mode="before")
    @classmethod
    def blank_status_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class MemberResponse(BaseModel):
    id: int
    full_name: str
    national_id: str
    status: MemberStatus
    is_active_member: bool = False
    deceased_name: Optional[str] = None
    birth_date: Optional[date] = None
    death_date: Optional[date] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MemberEnvelope(BaseModel):
    record: MemberResponse


class MemberListResponse(BaseModel):
    rows: List[MemberResponse]


class BulkDeleteRequest(BaseModel):
    ids: List[int]

    model_config = ConfigDict(extra="forbid")


class BulkDeleteResponse(BaseModel):
    deleted: List[int]


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
