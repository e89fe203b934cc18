from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..error_mapper import decoding_error, map_http_error
from ..exceptions import AppError, HttpError
from ..http_client import HttpClient
from ..logging_utils import log_app_error
from ..runner import AuthenticatedOperationRunner
from ..session import SessionManager

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


@dataclass
class BaseClient:
    http: HttpClient
    session: SessionManager | None = None
    runner: AuthenticatedOperationRunner | None = None

    error_type: ClassVar[type[AppError]] = AppError

    def __post_init__(self) -> None:
        if self.runner is None and self.session is not None:
            self.runner = AuthenticatedOperationRunner(self.session)

    def _authenticated_request(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        allow_statuses: Collection[int] = (),
    ):
        """Send a request through the operation runner; session errors pass through unchanged."""
        if self.runner is None:
            raise RuntimeError(f"{type(self).__name__} requires a session for authenticated requests")

        def operation(token: str):
            return self.http.request(
                method,
                path,
                token=token,
                json_body=json_body,
                params=params,
                allow_statuses=allow_statuses,
            )

        try:
            return self.runner.run(operation)
        except HttpError as exc:
            raise self._translate(exc) from exc

    def _request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        allow_statuses: Collection[int] = (),
    ):
        try:
            return self.http.request(
                method,
                path,
                token=token,
                json_body=json_body,
                params=params,
                allow_statuses=allow_statuses,
            )
        except HttpError as exc:
            raise self._translate(exc) from exc

    def _translate(self, exc: HttpError) -> AppError:
        error = map_http_error(self.error_type, exc)
        log_app_error(logger, error, client=type(self).__name__)
        return error

    def _decode(self, model: type[M], payload: Any) -> M:
        if not isinstance(payload, dict):
            raise decoding_error(self.error_type, ValueError(f"Expected {model.__name__} to be a JSON object"), payload)
        try:
            return model.model_validate(payload)
        except PydanticValidationError as exc:
            raise decoding_error(self.error_type, exc, payload) from exc

    def _decode_list(self, model: type[M], payload: Any) -> list[M]:
        if not isinstance(payload, list):
            raise decoding_error(self.error_type, ValueError(f"Expected a JSON array of {model.__name__}"), payload)
        try:
            return TypeAdapter(list[model]).validate_python(payload)
        except PydanticValidationError as exc:
            raise decoding_error(self.error_type, exc, payload) from exc
