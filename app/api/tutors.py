import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.field_validation import coerce_ids, read_json_body, run_rules, validated_body
from app.core.security import hash_password
from app.core.tutor_validation import build_tutor_rules
from app.db.session import get_db
from app.models.education_level import EducationLevel
from app.models.subject import Subject
from app.models.tutor import Tutor
from app.schemas.tutor import TutorOut
from app.schemas.validation import ValidationPreviewResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tutors", tags=["tutors"])


def to_out(t: Tutor) -> TutorOut:
    return TutorOut(
        id=t.id,
        full_name=t.full_name,
        username=t.username,
        birth_date=t.birth_date,
        cpf=t.cpf,
        email=t.email,
        subject_ids=[s.id for s in t.subjects],
        education_level_ids=[e.id for e in t.education_levels],
        created_at=t.created_at,
    )


EMAIL_CONSTRAINTS = {"ix_tutors_email", "uq_tutors_email"}


def is_email_conflict(exc: IntegrityError) -> bool:
    """
    True when the violated constraint is the tutors.email unique index.
    Postgres drivers report the constraint name; SQLite only the column
    ("UNIQUE constraint failed: tutors.email").
    """
    diag = getattr(exc.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        return constraint in EMAIL_CONSTRAINTS
    message = str(exc.orig)
    return "tutors.email" in message or any(name in message for name in EMAIL_CONSTRAINTS)


def register_tutor(db: Session, data: dict[str, Any]) -> Tutor:
    """
    Persist a tutor from an already validated body.

    The unique index on tutors.email is the final word on duplicates: two
    concurrent registrations can both pass the request-level email check.
    """
    subject_ids = [i for i in coerce_ids(data["subjects"]) if i is not None]
    level_ids = [i for i in coerce_ids(data["educationLevel"]) if i is not None]

    tutor = Tutor(
        full_name=data["fullName"],
        username=data["username"],
        birth_date=data["birthDate"],
        cpf=data["cpf"],
        email=data["email"],
        password_hash=hash_password(data["password"]),
        subjects=db.query(Subject).filter(Subject.id.in_(subject_ids)).all(),
        education_levels=db.query(EducationLevel).filter(EducationLevel.id.in_(level_ids)).all(),
    )
    db.add(tutor)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if not is_email_conflict(exc):
            raise
        logger.warning("Tutor registration lost a uniqueness race on email")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email já cadastrado",
        )

    db.refresh(tutor)
    logger.info("Tutor registered: id=%s", tutor.id)
    return tutor


@router.post("", response_model=TutorOut, status_code=status.HTTP_201_CREATED)
async def create_tutor(
    data: dict = Depends(validated_body(build_tutor_rules)),
    db: Session = Depends(get_db),
):
    """
    Register a tutor.

    Body: fullName, username, birthDate (DD/MM/YYYY), password, cpf
    (###.###.###-##), email, subjects (IDs), educationLevel (IDs).
    Returns 400 with one error per invalid field.
    """
    tutor = await run_in_threadpool(register_tutor, db, data)
    # relationship loads hit the DB, keep them off the event loop
    return await run_in_threadpool(to_out, tutor)


@router.post("/validate", response_model=ValidationPreviewResponse)
async def validate_tutor(
    payload: Any = Depends(read_json_body),
    db: Session = Depends(get_db),
):
    """
    Run the registration checks without creating anything.
    """
    report = await run_rules(build_tutor_rules(), payload, db)
    return ValidationPreviewResponse(valid=report.valid, errors=report.errors, warnings=[])


@router.get("/{tutor_id}", response_model=TutorOut)
def get_tutor(tutor_id: int, db: Session = Depends(get_db)):
    tutor = db.get(Tutor, tutor_id)
    if not tutor:
        raise HTTPException(status_code=404, detail="Tutor not found")
    return to_out(tutor)
