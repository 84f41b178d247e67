from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.education_level import EducationLevel
from app.models.subject import Subject


tutor_subjects = Table(
    "tutor_subjects",
    Base.metadata,
    Column("tutor_id", Integer, ForeignKey("tutors.id", ondelete="CASCADE"), primary_key=True),
    Column("subject_id", Integer, ForeignKey("subjects.id", ondelete="RESTRICT"), primary_key=True),
)

tutor_education_levels = Table(
    "tutor_education_levels",
    Base.metadata,
    Column("tutor_id", Integer, ForeignKey("tutors.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "education_level_id",
        Integer,
        ForeignKey("education_levels.id", ondelete="RESTRICT"),
        primary_key=True,
    ),
)


class Tutor(Base):
    __tablename__ = "tutors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    username: Mapped[str] = mapped_column(String(100), nullable=False)

    # kept exactly as submitted (DD/MM/YYYY); the format check is not calendar-aware
    birth_date: Mapped[str] = mapped_column(String(10), nullable=False)

    cpf: Mapped[str] = mapped_column(String(14), nullable=False)

    # authoritative duplicate guard; the request-level email check is advisory
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=datetime.utcnow
    )

    subjects: Mapped[list[Subject]] = relationship(secondary=tutor_subjects, order_by=Subject.id)
    education_levels: Mapped[list[EducationLevel]] = relationship(
        secondary=tutor_education_levels, order_by=EducationLevel.id
    )
