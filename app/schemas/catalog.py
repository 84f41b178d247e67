from pydantic import BaseModel


class SubjectOut(BaseModel):
    id: int
    name: str


class EducationLevelOut(BaseModel):
    id: int
    name: str
