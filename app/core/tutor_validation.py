"""
Validation rules for the tutor registration body.

Messages are user-facing (pt-BR).
"""
from __future__ import annotations

import re

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from validate_docbr import CPF

from app.core.field_validation import (
    CheckContext,
    CheckResult,
    FieldRule,
    Ok,
    Rejected,
    coerce_ids,
    field_rule,
    is_array,
    is_email,
    is_string,
    matches,
    min_length,
    not_empty,
    trim,
)
from app.models.education_level import EducationLevel
from app.models.subject import Subject
from app.models.tutor import Tutor

# DD/MM/YYYY; syntactic only, so 31/02/2020 is accepted
BIRTH_DATE_PATTERN = re.compile(r"(0[1-9]|1[0-9]|2[0-9]|3[0-1])/(0[1-9]|1[0-2]|[0-9])/[0-9]{4}")

PASSWORD_PATTERN = re.compile(
    r"(?=.*[A-Z])(?=.*[a-z])(?=.*[0-9])(?=.*[!@#$%¨&*])[A-Za-z0-9!@#$%¨&*]{6,}"
)

CPF_MASK_PATTERN = re.compile(r"[0-9]{3}\.[0-9]{3}\.[0-9]{3}-[0-9]{2}")

# passes the check-digit math but is a well-known placeholder number
KNOWN_INVALID_CPFS = frozenset({"12345678909"})

_cpf_validator = CPF()  # rejects repeated-digit sequences (000..., 111..., ...)


def is_valid_cpf(digits: str) -> bool:
    return digits not in KNOWN_INVALID_CPFS and _cpf_validator.validate(digits)


def _check_cpf(value: str, ctx: CheckContext) -> CheckResult:
    if not CPF_MASK_PATTERN.fullmatch(value):
        return Rejected("format", "Formato do CPF inválido.")

    digits = re.sub(r"\D", "", value)
    if not is_valid_cpf(digits):
        return Rejected("format", "CPF inválido.")
    return Ok(value)


# ---------- storage lookups (sync; run in the threadpool) ----------

def _find_tutor_id_by_email(db: Session, email: str) -> int | None:
    row = db.query(Tutor.id).filter(Tutor.email == email).first()
    return row[0] if row else None


def _count_existing(db: Session, model, ids: list[int | None]) -> int:
    wanted = {i for i in ids if i is not None}
    if not wanted:
        return 0
    return db.query(model.id).filter(model.id.in_(wanted)).count()


async def _check_email_available(value: str, ctx: CheckContext) -> CheckResult:
    existing = await run_in_threadpool(_find_tutor_id_by_email, ctx.db, value)
    if existing is not None:
        return Rejected("conflict", "Email já cadastrado")
    return Ok(value)


async def _check_subjects_exist(value: list, ctx: CheckContext) -> CheckResult:
    found = await run_in_threadpool(_count_existing, ctx.db, Subject, coerce_ids(value))
    if found != len(value):
        return Rejected("not_found", "Uma ou mais matérias não existem.")
    return Ok(value)


async def _check_education_levels_exist(value: list, ctx: CheckContext) -> CheckResult:
    found = await run_in_threadpool(_count_existing, ctx.db, EducationLevel, coerce_ids(value))
    if found != len(value):
        return Rejected("not_found", "Uma ou mais faixas de ensino não existem.")
    return Ok(value)


def build_tutor_rules() -> list[FieldRule]:
    return [
        field_rule(
            "fullName",
            trim(),
            is_string("Nome completo deve ser uma string."),
            not_empty("Nome completo é obrigatório."),
        ),
        field_rule(
            "username",
            trim(),
            is_string("Nome de usuário deve ser uma string."),
            not_empty("Nome de usuário é obrigatório."),
        ),
        field_rule(
            "birthDate",
            trim(),
            is_string("Data de nascimento deve ser uma string."),
            not_empty("Data de nascimento é obrigatória."),
            matches(BIRTH_DATE_PATTERN, "Data de nascimento deve estar no formato DD/MM/YYYY."),
        ),
        field_rule(
            "password",
            trim(),
            is_string("Senha deve ser uma string."),
            not_empty("Senha é obrigatória."),
            min_length(6, "Senha deve ter no mínimo 6 caracteres."),
            matches(
                PASSWORD_PATTERN,
                "A senha deve ter ao menos 1 letra maiúscula, 1 número e 1 caractere especial.",
            ),
        ),
        field_rule(
            "cpf",
            trim(),
            is_string("CPF deve ser uma string."),
            not_empty("CPF é obrigatório."),
            _check_cpf,
        ),
        field_rule(
            "email",
            trim(),
            is_string("Email deve ser uma string."),
            not_empty("Email é obrigatório."),
            is_email("Email deve ser válido."),
            _check_email_available,
        ),
        field_rule(
            "subjects",
            trim(),
            is_array("Matérias devem ser uma lista de IDs."),
            not_empty("Matérias são obrigatórias."),
            _check_subjects_exist,
        ),
        field_rule(
            "educationLevel",
            trim(),
            is_array("Faixa de ensino devem ser uma lista de IDs."),
            not_empty("Faixa de ensino é obrigatória."),
            _check_education_levels_exist,
        ),
    ]
