from __future__ import annotations

import logging

from .exceptions import AppError

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: int | str = logging.INFO, fmt: str = DEFAULT_FORMAT) -> None:
    logging.basicConfig(level=level, format=fmt)


def log_app_error(logger: logging.Logger, exc: AppError, **context: object) -> None:
    """Log a domain error at the level its severity maps to."""
    logger.log(
        logging.getLevelName(exc.severity.log_level),
        exc.log_message,
        extra={"error_code": exc.code, "status_code": exc.status_code, **context},
    )
