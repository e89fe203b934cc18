from __future__ import annotations

import errno
import logging
import socket
from collections.abc import Collection, Iterator
from dataclasses import dataclass
from typing import Any
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .exceptions import HttpStatusError, ResponseDecodeError, TransportError, TransportFailure

logger = logging.getLogger(__name__)

_NO_INTERNET_ERRNOS = {errno.ENETUNREACH, errno.ENETDOWN}


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    stack: list[BaseException | None] = [exc]
    while stack:
        current = stack.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        stack.append(current.__cause__)
        stack.append(current.__context__)
        reason = getattr(current, "reason", None)
        if isinstance(reason, BaseException):
            stack.append(reason)
        stack.extend(arg for arg in current.args if isinstance(arg, BaseException))


def classify_transport_failure(exc: requests.RequestException) -> TransportFailure:
    if isinstance(exc, requests.Timeout):
        return TransportFailure.TIMEOUT
    for cause in _exception_chain(exc):
        if isinstance(cause, socket.timeout):
            return TransportFailure.TIMEOUT
        if isinstance(cause, socket.gaierror):
            return TransportFailure.SERVER_UNREACHABLE
        if isinstance(cause, ConnectionRefusedError):
            return TransportFailure.SERVER_UNREACHABLE
        if isinstance(cause, (ConnectionResetError, ConnectionAbortedError)):
            return TransportFailure.NO_INTERNET
        if isinstance(cause, OSError) and cause.errno in _NO_INTERNET_ERRNOS:
            return TransportFailure.NO_INTERNET
    if isinstance(exc, requests.ConnectionError):
        return TransportFailure.SERVER_UNREACHABLE
    return TransportFailure.OTHER


@dataclass
class HttpClient:
    config: ClientConfig
    session: requests.Session | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()
            adapter = HTTPAdapter(
                pool_connections=self.config.max_connections,
                pool_maxsize=self.config.max_connections,
            )
            self.session.mount("http://", adapter)
            self.session.mount("https://", adapter)

    def _build_url(self, path: str) -> str:
        base = self.config.api_base_url.rstrip("/") + "/"
        return urljoin(base, path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        allow_statuses: Collection[int] = (),
    ) -> dict[str, Any] | list[Any] | None:
        """Send a JSON request and return the decoded body.

        2xx responses (and any status listed in ``allow_statuses``) return
        their decoded JSON, or None for an empty body. Other statuses raise
        HttpStatusError; network failures raise TransportError.
        """
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        normalized_method = method.upper()
        url = self._build_url(path)
        logger.debug("http_request", extra={"method": normalized_method, "path": path})
        try:
            response = self.session.request(
                method=normalized_method,
                url=url,
                headers=headers,
                json=json_body,
                params=params,
                timeout=self.config.timeout_seconds,
                verify=self.config.verify_ssl,
            )
        except requests.RequestException as exc:
            failure = classify_transport_failure(exc)
            logger.warning(
                "http_transport_failure",
                extra={"method": normalized_method, "path": path, "failure": failure.value},
            )
            raise TransportError(
                method=normalized_method,
                url=url,
                failure=failure,
                reason=type(exc).__name__,
            ) from exc

        if 200 <= response.status_code < 300 or response.status_code in allow_statuses:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                logger.warning(
                    "http_decode_failure",
                    extra={"method": normalized_method, "path": path, "status_code": response.status_code},
                )
                raise ResponseDecodeError(
                    method=normalized_method,
                    url=url,
                    status_code=response.status_code,
                    reason=str(exc),
                ) from exc

        payload: object | None
        try:
            payload = response.json()
        except ValueError:
            payload = {"message": response.text}
        logger.info(
            "http_status_error",
            extra={"method": normalized_method, "path": path, "status_code": response.status_code},
        )
        raise HttpStatusError(
            method=normalized_method,
            url=url,
            status_code=response.status_code,
            payload=payload,
        )

    def close(self) -> None:
        if self.session is not None:
            self.session.close()
