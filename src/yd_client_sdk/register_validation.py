from __future__ import annotations

import re
from dataclasses import dataclass

from .exceptions import RegisterError, RegisterErrorKind
from .models_users import RegisterRequest

_EMAIL_RE = re.compile(r"^[A-Z0-9a-z._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,64}$")
_SPECIAL_RE = re.compile(r"[^A-Za-z0-9]")
MIN_PASSWORD_LENGTH = 6
PHONE_DIGITS = 10


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    reason: str


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def is_valid_phone_number(phone: str) -> bool:
    return len(re.sub(r"[^0-9]", "", phone)) == PHONE_DIGITS


def validate_register_request(request: RegisterRequest) -> None:
    """Checks the server would reject anyway; raises the matching RegisterError."""
    if not is_valid_email(request.email):
        raise RegisterError(RegisterErrorKind.INVALID_EMAIL)
    if len(request.password) < MIN_PASSWORD_LENGTH:
        raise RegisterError(RegisterErrorKind.WEAK_PASSWORD)
    if not request.nombres or not request.apellido_paterno or not request.numero_celular:
        raise RegisterError(RegisterErrorKind.VALIDATION_FAILED, detail="Todos los campos son requeridos")


def validate_register_form(request: RegisterRequest) -> list[ValidationIssue]:
    """Stricter form rules for sign-up screens, reported all at once."""
    issues: list[ValidationIssue] = []
    required = (
        ("nombres", "Nombres", request.nombres),
        ("apellido_paterno", "Apellido paterno", request.apellido_paterno),
        ("apellido_materno", "Apellido materno", request.apellido_materno),
        ("numero_celular", "Número celular", request.numero_celular),
        ("email", "Correo electrónico", request.email),
    )
    for field, label, value in required:
        if not value.strip():
            issues.append(ValidationIssue(field, f"{label} es requerido"))
    if not request.password:
        issues.append(ValidationIssue("password", "Contraseña es requerido"))

    if request.email and not is_valid_email(request.email):
        issues.append(ValidationIssue("email", "Formato de correo inválido"))
    if request.numero_celular and not is_valid_phone_number(request.numero_celular):
        issues.append(ValidationIssue("numero_celular", "Formato de número celular inválido"))

    if len(request.password) < MIN_PASSWORD_LENGTH:
        issues.append(ValidationIssue("password", "La contraseña debe tener al menos 6 caracteres"))
    if not any(char.isupper() for char in request.password):
        issues.append(ValidationIssue("password", "La contraseña debe tener al menos una mayúscula"))
    if not _SPECIAL_RE.search(request.password):
        issues.append(ValidationIssue("password", "La contraseña debe tener al menos un carácter especial"))
    return issues
