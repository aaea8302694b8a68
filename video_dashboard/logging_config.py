import json
import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Optional

APP_NAME = "video-dashboard"

# Id of the outgoing API request currently being handled
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "name": record.name,
            "level": record.levelname,
            "message": getattr(record, "base_message", record.getMessage()),
        }
        request_id = request_id_var.get()
        if request_id:
            log_record["request_id"] = request_id

        if hasattr(record, "extra_kwargs"):
            log_record.update(record.extra_kwargs)
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record, default=str)


class ContextLogger:
    """Thin wrapper around stdlib logger that supports structured kwargs.

    Allows calls like `logger.info("Login succeeded", email=email)` by
    appending key=value pairs to the text message and passing the raw
    fields through to the JSON formatter.
    """

    def __init__(self, base: logging.Logger):
        self._base = base

    @property
    def name(self) -> str:
        return self._base.name

    def setLevel(self, level: int) -> None:
        self._base.setLevel(level)

    def isEnabledFor(self, level: int) -> bool:
        return self._base.isEnabledFor(level)

    def _prepare(self, msg: str, kwargs: Dict[str, Any]) -> Dict[str, Any]:
        std_kwargs: Dict[str, Any] = {}
        for key in ("exc_info", "stack_info", "stacklevel"):
            if key in kwargs:
                std_kwargs[key] = kwargs.pop(key)

        extra = {"base_message": msg}
        if kwargs:
            msg = f"{msg} - {' - '.join(f'{key}={value}' for key, value in kwargs.items())}"
            extra["extra_kwargs"] = kwargs
        std_kwargs["extra"] = extra
        return {"msg": msg, "std": std_kwargs}

    def debug(self, msg: str, **kwargs: Any) -> None:
        prepared = self._prepare(msg, kwargs)
        self._base.debug(prepared["msg"], **prepared["std"])

    def info(self, msg: str, **kwargs: Any) -> None:
        prepared = self._prepare(msg, kwargs)
        self._base.info(prepared["msg"], **prepared["std"])

    def warning(self, msg: str, **kwargs: Any) -> None:
        prepared = self._prepare(msg, kwargs)
        self._base.warning(prepared["msg"], **prepared["std"])

    def error(self, msg: str, **kwargs: Any) -> None:
        prepared = self._prepare(msg, kwargs)
        self._base.error(prepared["msg"], **prepared["std"])

    def exception(self, msg: str, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        prepared = self._prepare(msg, kwargs)
        self._base.error(prepared["msg"], **prepared["std"])


def _standardize_logger_name(name: str) -> str:
    """Turn a module path or dotted module name into `video-dashboard:<module>`.

    Names that already contain a colon are returned unchanged.
    """
    if ":" in name:
        return name
    if name.endswith(".py"):
        path = Path(name)
        stem = path.parent.name if path.name == "__init__.py" else path.stem
        return f"{APP_NAME}:{stem}"
    return f"{APP_NAME}:{name.rsplit('.', 1)[-1]}"


def configure_logging(
    name: str,
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
) -> ContextLogger:
    """Configure a module logger and return a ContextLogger that accepts kwargs.

    Usage:
        logger = configure_logging(__name__)
        logger.info("Project created", project_id=project.id)

    Level and format fall back to LOG_LEVEL / LOG_FORMAT from the dashboard config.
    """
    from .config import config

    name = _standardize_logger_name(name)
    log_level = log_level or config.LOG_LEVEL
    log_format = log_format if log_format is not None else config.LOG_FORMAT

    if log_format == "json":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            log_format or "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    base = logging.getLogger(name)
    # Re-configuration replaces the handler instead of stacking duplicates
    for handler in base.handlers[:]:
        base.removeHandler(handler)
        handler.close()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    base.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    base.addHandler(handler)
    base.propagate = False

    return ContextLogger(base)


def set_request_id(request_id: Optional[str]) -> None:
    """Sets the request ID for the current context."""
    request_id_var.set(request_id)
