"""
Replace every member record with randomly generated ones.

Usage: python scripts/seed_db.py [COUNT]
"""
import random
import sys
from datetime import date, timedelta

from faker import Faker

from services.registry_service.app.models.database import Base, SessionLocal, engine
from services.registry_service.app.schemas.member import MemberPayload, MemberStatus
from services.registry_service.app.services.member import MemberService
from services.registry_service.app.services.validation import validate_member
from services.registry_service.app.utils.dates import to_display

fake = Faker("es_ES")


def _birth_date(year: int) -> date:
    # Day capped at 28 so every month is valid
    return date(year, random.randint(1, 12), random.randint(1, 28))


def random_member(today: date = None) -> MemberPayload:
    today = today or date.today()
    status = MemberStatus.RETIREE if random.random() < 0.7 else MemberStatus.SURVIVOR
    national_id = f"V-{random.randint(1000000, 30000000):,}".replace(",", ".")
    phone = f"041{random.randint(2, 6)}-{random.randint(1000000, 9999999)}"

    deceased_name = None
    death_date = None
    if status == MemberStatus.SURVIVOR:
        # Death within the last ten years, at an age between 58 and 90
        death_date = today - timedelta(days=random.randint(0, 3650))
        birth_date = _birth_date(death_date.year - random.randint(58, 90))
        deceased_name = fake.name()
    else:
        birth_date = _birth_date(today.year - random.randint(50, 80))

    return MemberPayload(
        full_name=fake.name(),
        national_id=national_id,
        status=status,
        is_active_member=random.random() < 0.5,
        deceased_name=deceased_name,
        birth_date=to_display(birth_date),
        death_date=to_display(death_date) or None,
        phone=phone,
    )


def seed(count: int = 100) -> int:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        service = MemberService(db)
        service.clear_members()
        seen = set()
        created = 0
        while created < count:
            payload = random_member()
            record = validate_member(payload)
            if record.national_id in seen:
                continue
            seen.add(record.national_id)
            service.create_member(record)
            created += 1
        return created
    finally:
        db.close()


if __name__ == "__main__":
    total = seed(int(sys.argv[1]) if len(sys.argv) > 1 else 100)
    print(f"Database seeded with {total} random records.")
