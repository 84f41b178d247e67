"""
Field-level request validation.

A FieldRule is an ordered list of checks applied to one body field. A check is
a callable ``(value, ctx)`` returning ``Ok(value)`` or ``Rejected(code, message)``,
either directly or as an awaitable. ``Ok`` carries the (possibly sanitized)
value on to the next check; the first ``Rejected`` stops the field.
"""
from __future__ import annotations

import inspect
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping, Union

from email_validator import EmailNotValidError, validate_email
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.validation import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ok:
    value: Any = None


@dataclass(frozen=True)
class Rejected:
    code: str  # type, required, format, min_length, conflict, not_found
    message: str


CheckResult = Union[Ok, Rejected]


@dataclass(frozen=True)
class CheckContext:
    db: Session
    payload: Mapping[str, Any]


Check = Callable[[Any, CheckContext], Union[CheckResult, Awaitable[CheckResult]]]


@dataclass(frozen=True)
class FieldRule:
    field: str
    checks: tuple[Check, ...]

    async def run(self, ctx: CheckContext) -> CheckResult:
        value = ctx.payload.get(self.field)
        for check in self.checks:
            result = check(value, ctx)
            if inspect.isawaitable(result):
                result = await result
            if isinstance(result, Rejected):
                return result
            value = result.value
        return Ok(value)


def field_rule(name: str, *checks: Check) -> FieldRule:
    return FieldRule(field=name, checks=tuple(checks))


@dataclass
class ValidationReport:
    data: dict[str, Any] = field(default_factory=dict)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


# ---------- check primitives ----------

def _is_absent(value: Any) -> bool:
    return value is None or value == ""


def trim() -> Check:
    """Strip strings; a missing value becomes "". Anything else passes through."""
    def _check(value, ctx):
        if value is None:
            return Ok("")
        if isinstance(value, str):
            return Ok(value.strip())
        return Ok(value)
    return _check


# Type checks only judge present values; absence is the presence check's job.

def is_string(message: str) -> Check:
    def _check(value, ctx):
        if _is_absent(value) or isinstance(value, str):
            return Ok(value)
        return Rejected("type", message)
    return _check


def is_array(message: str) -> Check:
    def _check(value, ctx):
        if _is_absent(value) or isinstance(value, list):
            return Ok(value)
        return Rejected("type", message)
    return _check


def not_empty(message: str) -> Check:
    def _check(value, ctx):
        if value is None or (isinstance(value, (str, list, dict)) and len(value) == 0):
            return Rejected("required", message)
        return Ok(value)
    return _check


def min_length(minimum: int, message: str) -> Check:
    def _check(value, ctx):
        if len(value) < minimum:
            return Rejected("min_length", message)
        return Ok(value)
    return _check


def matches(pattern: re.Pattern | str, message: str) -> Check:
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    def _check(value, ctx):
        if not compiled.fullmatch(value):
            return Rejected("format", message)
        return Ok(value)
    return _check


def is_email(message: str) -> Check:
    """Syntax only: no DNS lookup, and reserved domains such as .test are accepted."""
    def _check(value, ctx):
        try:
            validate_email(
                value,
                check_deliverability=False,
                globally_deliverable=False,
                test_environment=True,
            )
        except EmailNotValidError:
            return Rejected("format", message)
        return Ok(value)
    return _check


ID_MIN, ID_MAX = -(2**63), 2**63 - 1


def coerce_id(value: Any) -> int | None:
    """
    Numeric coercion for identifiers coming from JSON bodies:
      3 -> 3, 3.0 -> 3, "3" -> 3, " 3 " -> 3
    Anything that is not an integral number maps to None (never matches a row).
    So does anything outside the signed 64-bit range the database driver can bind.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if ID_MIN <= value <= ID_MAX else None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return coerce_id(int(value))
    return None


def coerce_ids(values: list[Any]) -> list[int | None]:
    return [coerce_id(v) for v in values]


# ---------- runner ----------

async def run_rules(rules: list[FieldRule], payload: Any, db: Session) -> ValidationReport:
    """
    Run every rule against the payload and collect one error per failing field.

    Fields run one after another: storage checks share the request session,
    which must not be used from two threads at once.
    """
    if not isinstance(payload, Mapping):
        payload = {}

    ctx = CheckContext(db=db, payload=payload)
    report = ValidationReport()

    for rule in rules:
        result = await rule.run(ctx)
        if isinstance(result, Rejected):
            report.errors.append(
                ValidationError(field=rule.field, code=result.code, message=result.message)
            )
        else:
            report.data[rule.field] = result.value

    if report.errors:
        logger.debug(
            "Request validation rejected fields: %s",
            ", ".join(f"{e.field}={e.code}" for e in report.errors),
        )
    return report


async def read_json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Invalid JSON body", "errors": []},
        )


def validated_body(build_rules: Callable[[], list[FieldRule]]):
    """
    Usage:
      data: dict = Depends(validated_body(build_tutor_rules))

    Returns the sanitized field values, or raises 400 with every field error.
    """
    rules = build_rules()

    async def _dep(
        payload: Any = Depends(read_json_body),
        db: Session = Depends(get_db),
    ) -> dict[str, Any]:
        report = await run_rules(rules, payload, db)
        if not report.valid:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "message": "Validation failed",
                    "errors": [e.model_dump() for e in report.errors],
                },
            )
        return report.data

    return _dep
