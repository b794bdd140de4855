"""
SQLAlchemy models for journal-related tables.
"""
import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Uuid,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

"""
Naming conventions doc
https://docs.sqlalchemy.org/en/13/core/constraints.html#configuring-constraint-naming-conventions
"""
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
metadata = MetaData(naming_convention=convention)
Base = declarative_base(metadata=metadata)


class JournalEntry(Base):  # type: ignore
    __tablename__ = "journal_entries"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        unique=True,
        nullable=False,
    )
    question_id = Column(Integer, nullable=False, index=True)
    # Wording at the time of the answer, later question edits do not rewrite history
    question_text = Column(String, nullable=False)
    answer_text = Column(String, nullable=False)

    # Local wall-clock time of creation or of the last same-day save
    timestamp = Column(DateTime, nullable=False, index=True)
    day_number = Column(Integer, nullable=False)
    cycle_number = Column(Integer, nullable=False)

    version_id = Column(Integer, nullable=False)
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint(
            "question_id >= 1 AND question_id <= 30", name="question_id_range"
        ),
        CheckConstraint("day_number >= 1 AND day_number <= 30", name="day_number_range"),
        CheckConstraint("cycle_number >= 1", name="cycle_number_positive"),
    )

    __mapper_args__ = {"version_id_col": version_id}
