# seed_catalog.py
import argparse

from dotenv import load_dotenv
from sqlalchemy.orm import Session

load_dotenv()

from app.db.session import SessionLocal  # noqa: E402
from app.models.education_level import EducationLevel  # noqa: E402
from app.models.subject import Subject  # noqa: E402

SUBJECT_NAMES = [
    "Matemática",
    "Português",
    "Física",
    "Química",
    "Biologia",
    "História",
    "Geografia",
    "Inglês",
]

EDUCATION_LEVEL_NAMES = [
    "Ensino Fundamental I",
    "Ensino Fundamental II",
    "Ensino Médio",
    "Pré-vestibular",
]


def seed_names(db: Session, model, names: list[str]) -> list[str]:
    existing = {r.name for r in db.query(model).all()}
    to_add = [model(name=name) for name in names if name not in existing]
    if to_add:
        db.add_all(to_add)
        db.commit()
    return [r.name for r in to_add]


def main():
    parser = argparse.ArgumentParser(description="Seed subjects and education levels")
    parser.add_argument("--only", choices=["subjects", "education-levels"], default=None)
    args = parser.parse_args()

    db = SessionLocal()
    try:
        if args.only in (None, "subjects"):
            added = seed_names(db, Subject, SUBJECT_NAMES)
            print("Subjects seeded:", added or "nothing new")
        if args.only in (None, "education-levels"):
            added = seed_names(db, EducationLevel, EDUCATION_LEVEL_NAMES)
            print("Education levels seeded:", added or "nothing new")
    finally:
        db.close()

if __name__ == "__main__":
    main()
