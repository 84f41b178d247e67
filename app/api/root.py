from fastapi import APIRouter

router = APIRouter()

@router.get("/")
def root():
    return {
        "name": "Tutor Registration Backend",
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "register": "/tutors",
    }
