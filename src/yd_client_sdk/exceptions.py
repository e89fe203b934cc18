from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def log_level(self) -> str:
        return {
            Severity.LOW: "INFO",
            Severity.MEDIUM: "WARNING",
            Severity.HIGH: "ERROR",
            Severity.CRITICAL: "CRITICAL",
        }[self]


@dataclass(frozen=True)
class ErrorSpec:
    code: str
    message: str
    retryable: bool
    icon: str
    severity: Severity = Severity.MEDIUM
    uses_detail: bool = False


class ErrorKind(Enum):
    """Base for per-domain error kinds; each member's value is an ErrorSpec."""

    @property
    def spec(self) -> ErrorSpec:
        return self.value

    @property
    def code(self) -> str:
        return self.value.code

    @property
    def message(self) -> str:
        return self.value.message

    @property
    def retryable(self) -> bool:
        return self.value.retryable

    @property
    def icon(self) -> str:
        return self.value.icon

    @property
    def severity(self) -> Severity:
        return self.value.severity


# Kind names every HTTP-backed domain declares so error_mapper can resolve them uniformly.
GENERIC_KIND_NAMES = (
    "REQUEST_FAILED",
    "DECODING_ERROR",
    "UNAUTHORIZED",
    "NOT_FOUND",
    "TIMEOUT",
    "SERVER_UNREACHABLE",
    "SERVER_ERROR",
    "NO_INTERNET",
)

_MSG_REQUEST_FAILED = "Error de conexión. Verifica tu internet."
_MSG_DECODING = "Error procesando información."
_MSG_UNAUTHORIZED = "Tu sesión ha expirado. Inicia sesión nuevamente."
_MSG_NOT_FOUND = "La información solicitada no fue encontrada."
_MSG_TIMEOUT = "La operación tardó demasiado. Intenta nuevamente."
_MSG_UNREACHABLE = "No se pudo conectar al servidor. Intenta más tarde."
_MSG_SERVER = "Error del servidor. Intenta nuevamente en unos minutos."
_MSG_NO_INTERNET = "Sin conexión a internet. Verifica tu conexión e intenta nuevamente."

_ICON_NO_INTERNET = "wifi.slash"
_ICON_UNREACHABLE = "antenna.radiowaves.left.and.right"
_ICON_SERVER = "exclamationmark.icloud"
_ICON_UNAUTHORIZED = "lock.shield"
_ICON_NOT_FOUND = "magnifyingglass.circle"
_ICON_TIMEOUT = "clock.badge.exclamationmark"
_ICON_GENERIC = "exclamationmark.circle"
_ICON_WARNING = "exclamationmark.triangle"
_ICON_SESSION = "person.crop.circle.badge.exclamationmark"


class SessionErrorKind(ErrorKind):
    USER_NOT_AUTHENTICATED = ErrorSpec(
        "SES_001",
        "No hay una sesión activa. Inicia sesión para continuar.",
        False,
        _ICON_SESSION,
        Severity.HIGH,
    )
    TOKEN_EXPIRED = ErrorSpec(
        "SES_002", "Tu sesión ha expirado. Inicia sesión nuevamente.", False, _ICON_SESSION, Severity.HIGH
    )
    TOKEN_REFRESH_FAILED = ErrorSpec(
        "SES_003", "Error al renovar la sesión. Inicia sesión nuevamente.", True, _ICON_WARNING, Severity.MEDIUM
    )
    LOGOUT_FAILED = ErrorSpec(
        "SES_004", "Error al cerrar sesión. Intenta nuevamente.", True, _ICON_WARNING, Severity.MEDIUM
    )
    INVALID_USER = ErrorSpec(
        "SES_005", "Usuario inválido. Inicia sesión nuevamente.", False, _ICON_SESSION, Severity.HIGH
    )


# Session kinds that force the caller back to an unauthenticated experience.
UNRECOVERABLE_SESSION_KINDS = frozenset(
    {
        SessionErrorKind.USER_NOT_AUTHENTICATED,
        SessionErrorKind.TOKEN_EXPIRED,
        SessionErrorKind.INVALID_USER,
    }
)


class OrderErrorKind(ErrorKind):
    REQUEST_FAILED = ErrorSpec("ORD_001", _MSG_REQUEST_FAILED, True, _ICON_GENERIC)
    DECODING_ERROR = ErrorSpec("ORD_002", _MSG_DECODING, False, _ICON_GENERIC)
    UNAUTHORIZED = ErrorSpec("ORD_003", _MSG_UNAUTHORIZED, False, _ICON_UNAUTHORIZED, Severity.HIGH)
    NOT_FOUND = ErrorSpec("ORD_004", _MSG_NOT_FOUND, False, _ICON_NOT_FOUND)
    TIMEOUT = ErrorSpec("ORD_005", _MSG_TIMEOUT, True, _ICON_TIMEOUT)
    SERVER_UNREACHABLE = ErrorSpec("ORD_006", _MSG_UNREACHABLE, True, _ICON_UNREACHABLE, Severity.HIGH)
    SERVER_ERROR = ErrorSpec("ORD_007", _MSG_SERVER, True, _ICON_SERVER, Severity.HIGH)
    NO_INTERNET = ErrorSpec("ORD_008", _MSG_NO_INTERNET, True, _ICON_NO_INTERNET, Severity.HIGH)
    RETRY_EXHAUSTED = ErrorSpec(
        "ORD_009", "No se pudo obtener la orden tras varios intentos.", False, _ICON_GENERIC
    )


class EventErrorKind(ErrorKind):
    REQUEST_FAILED = ErrorSpec("EVT_001", _MSG_REQUEST_FAILED, True, _ICON_GENERIC)
    DECODING_ERROR = ErrorSpec("EVT_002", _MSG_DECODING, False, _ICON_GENERIC)
    UNAUTHORIZED = ErrorSpec("EVT_003", _MSG_UNAUTHORIZED, False, _ICON_UNAUTHORIZED, Severity.HIGH)
    NOT_FOUND = ErrorSpec("EVT_004", "El evento no fue encontrado.", False, _ICON_NOT_FOUND)
    TIMEOUT = ErrorSpec("EVT_005", _MSG_TIMEOUT, True, _ICON_TIMEOUT)
    SERVER_UNREACHABLE = ErrorSpec("EVT_006", _MSG_UNREACHABLE, True, _ICON_UNREACHABLE, Severity.HIGH)
    SERVER_ERROR = ErrorSpec("EVT_007", _MSG_SERVER, True, _ICON_SERVER, Severity.HIGH, uses_detail=True)
    NO_INTERNET = ErrorSpec("EVT_008", _MSG_NO_INTERNET, True, _ICON_NO_INTERNET, Severity.HIGH)
    VALIDATION_FAILED = ErrorSpec(
        "EVT_009", "Datos inválidos.", False, _ICON_WARNING, Severity.LOW, uses_detail=True
    )


class VerificationErrorKind(ErrorKind):
    REQUEST_FAILED = ErrorSpec("VER_001", _MSG_REQUEST_FAILED, True, _ICON_GENERIC)
    DECODING_ERROR = ErrorSpec("VER_002", _MSG_DECODING, False, _ICON_GENERIC)
    UNAUTHORIZED = ErrorSpec("VER_003", _MSG_UNAUTHORIZED, False, _ICON_UNAUTHORIZED, Severity.HIGH)
    NOT_FOUND = ErrorSpec("VER_004", _MSG_NOT_FOUND, False, _ICON_NOT_FOUND)
    TIMEOUT = ErrorSpec("VER_005", _MSG_TIMEOUT, True, _ICON_TIMEOUT)
    SERVER_UNREACHABLE = ErrorSpec("VER_006", _MSG_UNREACHABLE, True, _ICON_UNREACHABLE, Severity.HIGH)
    SERVER_ERROR = ErrorSpec("VER_007", _MSG_SERVER, True, _ICON_SERVER, Severity.HIGH, uses_detail=True)
    NO_INTERNET = ErrorSpec("VER_008", _MSG_NO_INTERNET, True, _ICON_NO_INTERNET, Severity.HIGH)
    INVALID_RESPONSE = ErrorSpec("VER_009", "Respuesta inválida del servidor.", False, _ICON_GENERIC)


class RegisterErrorKind(ErrorKind):
    REQUEST_FAILED = ErrorSpec("REG_001", "Error de red.", True, _ICON_GENERIC)
    DECODING_ERROR = ErrorSpec("REG_002", "Error al procesar respuesta.", False, _ICON_GENERIC)
    UNAUTHORIZED = ErrorSpec("REG_003", "Error de autenticación.", False, _ICON_UNAUTHORIZED)
    NOT_FOUND = ErrorSpec("REG_004", _MSG_NOT_FOUND, False, _ICON_NOT_FOUND)
    TIMEOUT = ErrorSpec("REG_005", "Tiempo de espera agotado.", True, _ICON_TIMEOUT)
    SERVER_UNREACHABLE = ErrorSpec("REG_006", "Servidor no disponible.", True, _ICON_UNREACHABLE, Severity.HIGH)
    SERVER_ERROR = ErrorSpec("REG_007", "Error del servidor.", True, _ICON_SERVER, Severity.HIGH)
    NO_INTERNET = ErrorSpec("REG_008", "Sin conexión a internet.", True, _ICON_NO_INTERNET, Severity.HIGH)
    EMAIL_ALREADY_EXISTS = ErrorSpec(
        "REG_009", "Este correo ya está registrado. Intenta con otro.", False, _ICON_WARNING, Severity.LOW
    )
    WEAK_PASSWORD = ErrorSpec(
        "REG_010", "La contraseña debe tener al menos 6 caracteres.", False, _ICON_WARNING, Severity.LOW
    )
    INVALID_EMAIL = ErrorSpec("REG_011", "Formato de correo inválido.", False, _ICON_WARNING, Severity.LOW)
    VALIDATION_FAILED = ErrorSpec(
        "REG_012", "Error de validación.", False, _ICON_WARNING, Severity.LOW, uses_detail=True
    )


class ProfileErrorKind(ErrorKind):
    REQUEST_FAILED = ErrorSpec("PRF_001", _MSG_REQUEST_FAILED, True, _ICON_GENERIC)
    DECODING_ERROR = ErrorSpec("PRF_002", "Error al decodificar datos de usuario.", False, _ICON_GENERIC)
    UNAUTHORIZED = ErrorSpec("PRF_003", _MSG_UNAUTHORIZED, False, _ICON_UNAUTHORIZED, Severity.HIGH)
    NOT_FOUND = ErrorSpec("PRF_004", "El usuario no fue encontrado.", False, _ICON_NOT_FOUND)
    TIMEOUT = ErrorSpec("PRF_005", _MSG_TIMEOUT, True, _ICON_TIMEOUT)
    SERVER_UNREACHABLE = ErrorSpec("PRF_006", _MSG_UNREACHABLE, True, _ICON_UNREACHABLE, Severity.HIGH)
    SERVER_ERROR = ErrorSpec("PRF_007", _MSG_SERVER, True, _ICON_SERVER, Severity.HIGH)
    NO_INTERNET = ErrorSpec("PRF_008", _MSG_NO_INTERNET, True, _ICON_NO_INTERNET, Severity.HIGH)


class CheckoutErrorKind(ErrorKind):
    REQUEST_FAILED = ErrorSpec("CHK_001", _MSG_REQUEST_FAILED, True, _ICON_GENERIC)
    DECODING_ERROR = ErrorSpec("CHK_002", "No se pudo procesar la respuesta de pago.", False, _ICON_GENERIC)
    UNAUTHORIZED = ErrorSpec("CHK_003", _MSG_UNAUTHORIZED, False, _ICON_UNAUTHORIZED, Severity.HIGH)
    NOT_FOUND = ErrorSpec("CHK_004", _MSG_NOT_FOUND, False, _ICON_NOT_FOUND)
    TIMEOUT = ErrorSpec("CHK_005", _MSG_TIMEOUT, True, _ICON_TIMEOUT)
    SERVER_UNREACHABLE = ErrorSpec("CHK_006", _MSG_UNREACHABLE, True, _ICON_UNREACHABLE, Severity.HIGH)
    SERVER_ERROR = ErrorSpec("CHK_007", _MSG_SERVER, True, _ICON_SERVER, Severity.HIGH)
    NO_INTERNET = ErrorSpec("CHK_008", _MSG_NO_INTERNET, True, _ICON_NO_INTERNET, Severity.HIGH)
    EMAIL_NOT_VERIFIED = ErrorSpec(
        "CHK_009",
        "Debes verificar tu correo electrónico antes de comprar.",
        False,
        "envelope.badge.shield.half.filled",
        Severity.MEDIUM,
    )
    EMPTY_CART = ErrorSpec("CHK_010", "Agrega al menos un boleto para continuar.", False, _ICON_WARNING, Severity.LOW)


@dataclass(eq=False)
class AppError(Exception):
    kind: ErrorKind
    detail: str | None = None
    status_code: int | None = None
    raw_payload: object | None = None

    domain: ClassVar[str] = "App"
    kind_type: ClassVar[type[ErrorKind]] = ErrorKind

    def __post_init__(self) -> None:
        if not isinstance(self.kind, self.kind_type):
            raise TypeError(f"{type(self).__name__} requires a {self.kind_type.__name__}, got {self.kind!r}")

    @property
    def code(self) -> str:
        return self.kind.code

    @property
    def message(self) -> str:
        if self.kind.spec.uses_detail and self.detail:
            return self.detail
        return self.kind.message

    @property
    def should_retry(self) -> bool:
        return self.kind.retryable

    @property
    def icon(self) -> str:
        return self.kind.icon

    @property
    def severity(self) -> Severity:
        return self.kind.severity

    @property
    def is_auth_failure(self) -> bool:
        return self.kind.name == "UNAUTHORIZED"

    @property
    def log_message(self) -> str:
        return f"[{self.code}] {self.domain} Error: {self.message}"

    def __str__(self) -> str:
        status = f" (HTTP {self.status_code})" if self.status_code else ""
        return f"[{self.code}] {self.message}{status}"


class SessionError(AppError):
    domain = "Session"
    kind_type = SessionErrorKind

    @property
    def is_auth_failure(self) -> bool:
        return self.kind in UNRECOVERABLE_SESSION_KINDS


class OrderError(AppError):
    domain = "Order"
    kind_type = OrderErrorKind


class EventError(AppError):
    domain = "Event"
    kind_type = EventErrorKind


class VerificationError(AppError):
    domain = "Verification"
    kind_type = VerificationErrorKind


class RegisterError(AppError):
    domain = "Register"
    kind_type = RegisterErrorKind


class ProfileError(AppError):
    domain = "Profile"
    kind_type = ProfileErrorKind


class CheckoutError(AppError):
    domain = "Checkout"
    kind_type = CheckoutErrorKind


DOMAIN_KIND_TYPES: tuple[type[ErrorKind], ...] = (
    SessionErrorKind,
    OrderErrorKind,
    EventErrorKind,
    VerificationErrorKind,
    RegisterErrorKind,
    ProfileErrorKind,
    CheckoutErrorKind,
)


class TransportFailure(str, Enum):
    TIMEOUT = "timeout"
    NO_INTERNET = "no_internet"
    SERVER_UNREACHABLE = "server_unreachable"
    OTHER = "other"


@dataclass(eq=False)
class HttpError(Exception):
    """Raw transport-level failure; domain clients translate it before it reaches callers."""

    method: str
    url: str

    @property
    def is_auth_failure(self) -> bool:
        return False


@dataclass(eq=False)
class TransportError(HttpError):
    """Network/transport failure before an HTTP response was returned."""

    failure: TransportFailure = TransportFailure.OTHER
    reason: str | None = None

    def __str__(self) -> str:
        return f"{self.method} {self.url} failed: {self.failure.value} ({self.reason})"


@dataclass(eq=False)
class HttpStatusError(HttpError):
    status_code: int = 0
    payload: object | None = None

    @property
    def is_auth_failure(self) -> bool:
        return self.status_code in {401, 403}

    def payload_field(self, key: str) -> object | None:
        if isinstance(self.payload, dict):
            return self.payload.get(key)
        return None

    def __str__(self) -> str:
        return f"{self.method} {self.url} returned HTTP {self.status_code}"


@dataclass(eq=False)
class ResponseDecodeError(HttpError):
    status_code: int = 0
    reason: str | None = None

    def __str__(self) -> str:
        return f"{self.method} {self.url} returned an undecodable body: {self.reason}"
