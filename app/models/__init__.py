from app.models.education_level import EducationLevel
from app.models.subject import Subject
from app.models.tutor import Tutor, tutor_education_levels, tutor_subjects

__all__ = [ "EducationLevel", "Subject", "Tutor",
           "tutor_education_levels", "tutor_subjects" ]
