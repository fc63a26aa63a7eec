from datetime import date

import pytest

from services.registry_service.app.exceptions import (
    InvalidDateFormat,
    MissingField,
    MissingRequiredConditionalField,
)
from services.registry_service.app.schemas.member import MemberPayload, MemberStatus
from services.registry_service.app.services.validation import normalize_national_id, validate_member


def make_payload(**overrides) -> MemberPayload:
    data = {
        "full_name": "Juan Perez",
        "national_id": "V-12.345.678",
        "status": "Retiree",
        "birth_date": "10/05/1960",
        "phone": "0412-1234567",
    }
    data.update(overrides)
    return MemberPayload(**data)


def test_normalize_national_id_strips_periods():
    assert normalize_national_id("V-12.345.678") == normalize_national_id("V-12345678") == "V-12345678"
    assert normalize_national_id(None) == ""


def test_valid_retiree_is_normalized():
    record = validate_member(make_payload(full_name="  Juan Perez  ", deceased_name="ignored"))

    assert record.full_name == "Juan Perez"
    assert record.national_id == "V-12345678"
    assert record.status == "Retiree"
    assert record.birth_date == date(1960, 5, 10)
    assert record.death_date is None
    assert record.deceased_name is None
    assert record.is_active_member is False


@pytest.mark.parametrize("field", ["full_name", "national_id", "status"])
@pytest.mark.parametrize("blank", [None, "", "   "])
def test_required_fields(field, blank):
    with pytest.raises(MissingField) as excinfo:
        validate_member(make_payload(**{field: blank}))
    assert excinfo.value.field == field


def test_national_id_of_only_periods_is_missing():
    with pytest.raises(MissingField):
        validate_member(make_payload(national_id="..."))


def test_survivor_requires_death_date():
    with pytest.raises(MissingRequiredConditionalField):
        validate_member(make_payload(status="Survivor", deceased_name="Pedro Rodriguez"))

    record = validate_member(
        make_payload(status="Survivor", deceased_name="Pedro Rodriguez", death_date="01/01/2020")
    )
    assert record.status == MemberStatus.SURVIVOR.value
    assert record.death_date == date(2020, 1, 1)
    assert record.deceased_name == "Pedro Rodriguez"


def test_conditional_field_is_checked_before_date_format():
    with pytest.raises(MissingRequiredConditionalField):
        validate_member(make_payload(status="Survivor", birth_date="99/99/9999"))


@pytest.mark.parametrize("field", ["birth_date", "death_date"])
def test_invalid_dates_are_rejected(field):
    with pytest.raises(InvalidDateFormat):
        validate_member(make_payload(**{field: "31/02/2024"}))


def test_death_before_birth_is_rejected():
    with pytest.raises(InvalidDateFormat):
        validate_member(make_payload(birth_date="10/05/1960", death_date="01/01/1950"))


def test_retiree_may_carry_a_death_date():
    record = validate_member(make_payload(death_date="15/06/2023"))
    assert record.death_date == date(2023, 6, 15)
