from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .models import FirestoreTimestamp


class RegisterRequest(BaseModel):
    email: str
    password: str
    nombres: str
    apellido_paterno: str
    apellido_materno: str = ""
    numero_celular: str


class RegisteredUser(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    nombres: str
    apellido_paterno: str
    apellido_materno: str = ""
    numero_celular: str
    email: str
    rol_id: str | None = None
    fecha_registro: FirestoreTimestamp | None = None
    email_verification_status: str | None = None
    email_verified_at: str | None = None

    @property
    def is_email_verified(self) -> bool:
        return (self.email_verification_status or "").lower() == "verified"

    @property
    def needs_email_verification(self) -> bool:
        return (self.email_verification_status or "").lower() == "pending"

    @property
    def verification_status_text(self) -> str:
        status = (self.email_verification_status or "").lower()
        if status == "verified":
            return "Verificado"
        if status == "pending":
            return "Pendiente"
        return "Sin verificar"


class RegisterResponse(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    message: str = ""
    user: RegisteredUser | None = None
    requires_email_verification: bool | None = None


class UserProfile(BaseModel):
    """Editable profile fields; missing values decode as empty strings."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    email: str = ""
    nombres: str = ""
    apellido_paterno: str = ""
    apellido_materno: str = ""
    numero_celular: str = ""

    @property
    def nombre_completo(self) -> str:
        return " ".join(part for part in (self.nombres, self.apellido_paterno, self.apellido_materno) if part)

    @property
    def iniciales(self) -> str:
        if not self.nombres:
            return ""
        return f"{self.nombres[:1]}{self.apellido_paterno[:1]}"

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(mode="json")
