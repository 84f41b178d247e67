from datetime import datetime
from pydantic import BaseModel


class TutorOut(BaseModel):
    id: int
    full_name: str
    username: str
    birth_date: str  # DD/MM/YYYY, as submitted
    cpf: str
    email: str
    subject_ids: list[int]
    education_level_ids: list[int]
    created_at: datetime
