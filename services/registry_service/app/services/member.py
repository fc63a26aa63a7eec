import logging
import re
from typing import Iterable, List

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import BulkDeleteError, DuplicateKey, NotFound, RegistryError, StorageFailure
from ..models.member import Member
from .validation import ValidatedMember, normalize_national_id

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"\d+")


def national_id_number(national_id: str) -> int:
    """Integer value of the first digit run, e.g. ``V-12345678`` -> 12345678."""
    match = _DIGITS_RE.search(national_id or "")
    return int(match.group()) if match else 0


def national_id_sort_key(member: Member):
    return national_id_number(member.national_id), member.id or 0


def is_duplicate_national_id(exc: IntegrityError) -> bool:
    """True when the integrity error comes from the UNIQUE constraint on national_id."""
    message = str(exc.orig).lower()
    return "national_id" in message and ("unique" in message or "duplicate" in message)


class MemberService:
    def __init__(self, db: Session):
        self.db = db

    def create_member(self, member_data: ValidatedMember) -> Member:
        """
        Persists a validated record and returns it with its assigned id.

        Raises:
            DuplicateKey: the national id is already registered.
            StorageFailure: any other database error.
        """
        db_member = Member(**member_data.as_columns())
        self.db.add(db_member)
        self._commit(member_data.national_id)
        self.db.refresh(db_member)
        logger.info(f"Created member {db_member.id} ({db_member.national_id})")
        return db_member

    def get_member(self, member_id: int) -> Member:
        member = self.db.query(Member).filter(Member.id == member_id).first()
        if member is None:
            raise NotFound(member_id)
        return member

    def list_members(self) -> List[Member]:
        """
        Retrieves every record ordered by the numeric part of the national id,
        ignoring the leading letter, so V-9.000.000 sorts before E-10.000.000.
        """
        return sorted(self.db.query(Member).all(), key=national_id_sort_key)

    def search_members(self, query: str) -> List[Member]:
        """Case-insensitive match on name, or substring match on national id."""
        query = (query or "").strip()
        if not query:
            return []
        # autoescape makes % and _ in the query match literally
        conditions = [Member.full_name.icontains(query, autoescape=True)]
        national_id = normalize_national_id(query)
        if national_id:
            conditions.append(Member.national_id.contains(national_id, autoescape=True))
        members = self.db.query(Member).filter(or_(*conditions)).all()
        return sorted(members, key=national_id_sort_key)

    def update_member(self, member_id: int, member_data: ValidatedMember) -> Member:
        """Replaces every mutable field of an existing record."""
        member = self.get_member(member_id)
        for column, value in member_data.as_columns().items():
            setattr(member, column, value)
        self._commit(member_data.national_id)
        self.db.refresh(member)
        logger.info(f"Updated member {member_id}")
        return member

    def delete_member(self, member_id: int) -> None:
        member = self.get_member(member_id)
        self.db.delete(member)
        self._commit()
        logger.info(f"Deleted member {member_id}")

    def delete_members(self, member_ids: Iterable[int]) -> List[int]:
        """
        Deletes records one at a time, stopping at the first failure.

        Records deleted before the failure stay deleted and the remaining ids
        are not attempted.

        Raises:
            BulkDeleteError: carries the failing id and the ids already deleted.
        """
        deleted: List[int] = []
        for member_id in member_ids:
            try:
                self.delete_member(member_id)
            except RegistryError as exc:
                logger.warning(f"Bulk delete halted at {member_id} after {len(deleted)} deletions: {exc.message}")
                raise BulkDeleteError(member_id, exc, deleted) from exc
            deleted.append(member_id)
        return deleted

    def clear_members(self) -> int:
        num_deleted = self.db.query(Member).delete()
        self._commit()
        logger.info(f"Cleared {num_deleted} members")
        return num_deleted

    def _commit(self, national_id: str = None) -> None:
        # The UNIQUE constraint on national_id is the only arbiter of duplicates
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if not is_duplicate_national_id(exc):
                logger.exception("Database integrity check failed")
                raise StorageFailure("Storage failure") from exc
            logger.warning(f"Rejected duplicate national id {national_id}")
            raise DuplicateKey(national_id) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Database write failed")
            raise StorageFailure("Storage failure") from exc
