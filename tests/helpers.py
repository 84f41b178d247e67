from sqlalchemy.orm import Session

from app.core.security import hash_password
from app.models.education_level import EducationLevel
from app.models.subject import Subject
from app.models.tutor import Tutor

VALID_CPF = "529.982.247-25"


def create_subject(db: Session, name: str, id: int | None = None) -> Subject:
    s = Subject(name=name)
    if id is not None:
        s.id = id
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


def create_education_level(db: Session, name: str, id: int | None = None) -> EducationLevel:
    e = EducationLevel(name=name)
    if id is not None:
        e.id = id
    db.add(e)
    db.commit()
    db.refresh(e)
    return e


def create_tutor(db: Session, email: str, full_name: str = "Tutor", cpf: str = VALID_CPF) -> Tutor:
    t = Tutor(
        full_name=full_name,
        username=email.split("@")[0],
        birth_date="10/05/1990",
        cpf=cpf,
        email=email,
        password_hash=hash_password("Abc123!"),
    )
    db.add(t)
    db.commit()
    db.refresh(t)
    return t


def seed_catalog(db: Session) -> None:
    """Subjects 1, 2 and education levels 1, 2."""
    create_subject(db, "Matemática", id=1)
    create_subject(db, "Física", id=2)
    create_education_level(db, "Ensino Fundamental II", id=1)
    create_education_level(db, "Ensino Médio", id=2)


def tutor_payload(**overrides) -> dict:
    """
    Valid registration body (once seed_catalog has run); override fields as needed.
    Pass a field as None to drop it from the body.
    """
    payload = {
        "fullName": "Ana Beatriz Souza",
        "username": "anabeatriz",
        "birthDate": "15/03/1995",
        "password": "Abc123!",
        "cpf": VALID_CPF,
        "email": "ana.souza@escola.com.br",
        "subjects": [1, 2],
        "educationLevel": ["1", "2"],
    }
    payload.update(overrides)
    return {k: v for k, v in payload.items() if v is not None}
