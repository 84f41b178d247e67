from pydantic import BaseModel


class ValidationError(BaseModel):
    """Individual validation error"""
    field: str
    code: str  # type, required, format, min_length, conflict, not_found
    message: str


class ValidationPreviewResponse(BaseModel):
    """Response from validation preview endpoint"""
    valid: bool
    errors: list[ValidationError]
    warnings: list[str]  # Non-blocking warnings
