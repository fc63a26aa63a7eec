from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional

from ..exceptions import (
    InvalidDateFormat,
    InvalidFieldValue,
    MissingField,
    MissingRequiredConditionalField,
)
from ..schemas.member import MemberPayload, MemberStatus
from ..utils.dates import is_valid_display, to_storage

REQUIRED_FIELDS = ("full_name", "national_id", "status")


@dataclass(frozen=True)
class ValidatedMember:
    """Normalized column values ready to be written to the store."""
    full_name: str
    national_id: str
    status: str
    is_active_member: bool = False
    deceased_name: Optional[str] = None
    birth_date: Optional[date] = None
    death_date: Optional[date] = None
    phone: Optional[str] = None

    def as_columns(self) -> dict:
        return asdict(self)


def normalize_national_id(national_id: Optional[str]) -> str:
    """Drop thousands separators so V-12.345.678 and V-12345678 compare equal."""
    return (national_id or "").replace(".", "").strip()


def _blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_member(payload: MemberPayload) -> ValidatedMember:
    """
    Apply the record rules in order: required fields, national id
    normalization, survivor death date, then date formats.

    Raises:
        MissingField: full_name, national_id or status is blank.
        MissingRequiredConditionalField: a Survivor has no death date.
        InvalidDateFormat: a date is not a real DD/MM/YYYY date, or death precedes birth.
    """
    for field in REQUIRED_FIELDS:
        if _blank(getattr(payload, field)):
            raise MissingField(field)

    national_id = normalize_national_id(payload.national_id)
    if not national_id:
        raise MissingField("national_id")

    try:
        status = MemberStatus(payload.status)
    except ValueError:
        raise InvalidFieldValue(f"Unknown status: {payload.status}")

    if status == MemberStatus.SURVIVOR and _blank(payload.death_date):
        raise MissingRequiredConditionalField("death_date", "status is Survivor")

    for field in ("birth_date", "death_date"):
        value = getattr(payload, field)
        if not _blank(value) and not is_valid_display(value):
            raise InvalidDateFormat(f"Invalid {field}, use DD/MM/YYYY")

    birth_date = to_storage(payload.birth_date)
    death_date = to_storage(payload.death_date)
    if birth_date and death_date and death_date < birth_date:
        raise InvalidDateFormat("death_date cannot be earlier than birth_date")

    return ValidatedMember(
        full_name=payload.full_name.strip(),
        national_id=national_id,
        status=status.value,
        is_active_member=bool(payload.is_active_member),
        # Only survivors carry the name of the deceased retiree
        deceased_name=_optional_text(payload.deceased_name) if status == MemberStatus.SURVIVOR else None,
        birth_date=birth_date,
        death_date=death_date,
        phone=_optional_text(payload.phone),
    )
