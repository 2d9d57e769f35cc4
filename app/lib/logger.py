import logging
import os
from typing import Any, Callable, Dict, List, Optional

# Map string log levels to logging constants
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Upstream bodies and failure reasons can be long; keep each log line short
MAX_EXTRA_CHARS = 120

# Everything a bare LogRecord carries, plus what Formatter adds later
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def _clip(value: Any, limit: int = MAX_EXTRA_CHARS) -> str:
    text = str(value).replace("\n", "\\n")
    return text if len(text) <= limit else text[:limit] + "..."


def _render_request(value: Dict[str, Any]) -> List[str]:
    method = value.get("method", "")
    path = value.get("path", "")
    return [f"request={method} {path}"] if method and path else []


def _render_response(value: Dict[str, Any]) -> List[str]:
    rendered = []
    if value.get("status_code"):
        rendered.append(f"response={value['status_code']}")
    if value.get("process_time_ms"):
        rendered.append(f"time={value['process_time_ms']}ms")
    return rendered


# Extras emitted by the screening service, rendered under short names
_EXTRA_RENDERERS: Dict[str, Callable[[Any], List[str]]] = {
    "event_type": lambda value: [f"type={value}"],
    "request": _render_request,
    "response": _render_response,
    "client_id": lambda value: [f"client={value}"],
    "quota": lambda value: [f"quota={value}"],
    "error_type": lambda value: [f"error={value}"],
    "status_code": lambda value: [f"upstream_status={value}"],
    "response_body": lambda value: [f"body={_clip(value)!r}"],
    "reason": lambda value: [f"reason={_clip(value)!r}"],
}


class StructuredFormatter(logging.Formatter):
    """Single-line formatter: ``time | LEVEL | logger | message | extras``.

    Screening extras (client, quota, upstream status and body) get short
    names; upstream text is clipped to ``MAX_EXTRA_CHARS``. Unknown extras
    are rendered as ``key=value``.
    """

    def format(self, record):
        timestamp = self.formatTime(record, self.datefmt or "%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)
        logger_name = record.name.split(".")[-1][:20].ljust(20)

        log_line = f"{timestamp} | {level} | {logger_name} | {record.getMessage()}"

        extras = self.render_extras(record)
        if extras:
            log_line += f" | {' '.join(extras)}"

        if record.exc_info:
            log_line += f"\n{self.formatException(record.exc_info)}"

        return log_line

    @staticmethod
    def render_extras(record: logging.LogRecord) -> List[str]:
        rendered: List[str] = []
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or value is None:
                continue
            renderer = _EXTRA_RENDERERS.get(key)
            if renderer is not None:
                rendered.extend(renderer(value))
            else:
                rendered.append(f"{key}={_clip(value)}")
        return rendered


def configure_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Configure and return a logger instance with consistent formatting and level.

    Args:
        name (Optional[str]): Logger name. If None, returns the package logger

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(name if name else __name__)

    log_level = LOG_LEVELS.get(os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    logger.setLevel(log_level)

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(StructuredFormatter())
        logger.addHandler(console_handler)

    return logger


def setup_uvicorn_logging():
    """Give uvicorn's own loggers the screening log format."""
    # One line per request comes from LoggingMiddleware
    logging.getLogger("uvicorn.access").disabled = True

    structured_formatter = StructuredFormatter()
    for logger_name in ["", "uvicorn", "uvicorn.error", "fastapi"]:
        for handler in logging.getLogger(logger_name).handlers:
            handler.setFormatter(structured_formatter)
