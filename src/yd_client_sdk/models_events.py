from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .models import ApiEnvelope, FirestoreTimestamp, JsonDecimal


class EventLocation(BaseModel):
    model_config = ConfigDict(extra="allow")

    ubicacion_nombre: str
    ubicacion_lat: float
    ubicacion_lng: float


class Ticket(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    descripcion: str
    tipo: str
    precio: JsonDecimal
    disponibilidad: int
    beneficios: List[str] | None = None


class EventDetails(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    nombre: str
    fecha_inicio: FirestoreTimestamp
    fecha_fin: FirestoreTimestamp
    ubicacion: EventLocation
    estatus_activo: bool
    cuota_servicio: JsonDecimal
    detalles: str
    terminos: List[str] = Field(default_factory=list)
    tickets: List[Ticket] = Field(default_factory=list)

    @property
    def ubicacion_nombre(self) -> str:
        return self.ubicacion.ubicacion_nombre

    def ticket_by_id(self, ticket_id: str) -> Ticket | None:
        return next((ticket for ticket in self.tickets if ticket.id == ticket_id), None)


class LineupSpeaker(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    nombre: str
    imagen: str | None = None
    bio: str | None = None


class HomeEventData(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    nombre: str
    fecha_inicio: FirestoreTimestamp
    fecha_fin: FirestoreTimestamp
    informacion_evento: str | None = None
    ubicacion: EventLocation | None = None
    lineup: List[LineupSpeaker] = Field(default_factory=list)
    terminos: List[str] = Field(default_factory=list)

    @property
    def ubicacion_nombre(self) -> str | None:
        return self.ubicacion.ubicacion_nombre if self.ubicacion else None


class HomeEventResponse(ApiEnvelope):
    data: HomeEventData | None = None
