from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import quote

from ..exceptions import EventError, EventErrorKind
from ..models_events import EventDetails, HomeEventData, HomeEventResponse
from .base import BaseClient

logger = logging.getLogger(__name__)

_EMPTY_EVENT_ID = "EventId no puede estar vacío"


@dataclass
class EventsClient(BaseClient):
    error_type = EventError

    def get_event_details(self, event_id: str) -> EventDetails:
        if not event_id:
            raise EventError(EventErrorKind.VALIDATION_FAILED, detail=_EMPTY_EVENT_ID)
        payload = self._authenticated_request("GET", f"/event-details/{quote(event_id, safe='')}")
        return self._decode(EventDetails, payload)

    def get_home_event(self, event_id: str) -> HomeEventData:
        if not event_id:
            raise EventError(EventErrorKind.VALIDATION_FAILED, detail=_EMPTY_EVENT_ID)
        payload = self._authenticated_request("GET", f"/home-event/{quote(event_id, safe='')}")
        response = self._decode(HomeEventResponse, payload)
        if response.success and response.data is not None:
            return response.data
        logger.info("home_event_unsuccessful", extra={"event_id": event_id})
        raise EventError(
            EventErrorKind.SERVER_ERROR,
            detail=response.failure_message(),
            raw_payload=payload,
        )
