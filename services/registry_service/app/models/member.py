from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    String,
    func,
)
from ..models.database import Base


class Member(Base):
    """SQLAlchemy ORM model for association member records"""

    __tablename__ = 'members'

    id = Column(Integer, primary_key=True, autoincrement=True)

    full_name = Column(String(255), nullable=False)
    national_id = Column(String(20), nullable=False, unique=True, index=True)
    status = Column(String(20), nullable=False)
    is_active_member = Column(Boolean, nullable=False, default=False)
    deceased_name = Column(String(255))
    birth_date = Column(Date)
    death_date = Column(Date)
    phone = Column(String(20))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Member(id={self.id}, national_id='{self.national_id}', status='{self.status}')>"
