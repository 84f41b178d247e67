from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class EducationLevel(Base):
    __tablename__ = "education_levels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # e.g. "Ensino Fundamental I", "Ensino Médio"
    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
