# app/core/logger.py
import logging
import sys

LOGGER_NAME = "app"


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """
    Configure the package-level logger once and return it.
    Module loggers (logging.getLogger(__name__)) under `app.` inherit the handler.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # avoid stacking handlers when create_app() is called repeatedly (tests)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(handler)
    return logger


def log_api_request(logger: logging.Logger, method: str, path: str,
                    status_code: int | None = None, duration_ms: float | None = None) -> None:
    parts = [f"{method} {path}"]
    if status_code:
        parts.append(f"-> {status_code}")
    if duration_ms is not None:
        parts.append(f"({duration_ms:.0f}ms)")
    logger.info(" ".join(parts))
