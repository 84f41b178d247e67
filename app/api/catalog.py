from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.education_level import EducationLevel
from app.models.subject import Subject
from app.schemas.catalog import EducationLevelOut, SubjectOut

router = APIRouter(tags=["catalog"])


@router.get("/subjects", response_model=list[SubjectOut])
def list_subjects(db: Session = Depends(get_db)):
    """Subjects a tutor can pick at registration (IDs go in `subjects`)."""
    rows = db.query(Subject).order_by(Subject.name.asc()).all()
    return [SubjectOut(id=s.id, name=s.name) for s in rows]


@router.get("/education-levels", response_model=list[EducationLevelOut])
def list_education_levels(db: Session = Depends(get_db)):
    """Education levels a tutor can pick at registration (IDs go in `educationLevel`)."""
    rows = db.query(EducationLevel).order_by(EducationLevel.name.asc()).all()
    return [EducationLevelOut(id=e.id, name=e.name) for e in rows]
