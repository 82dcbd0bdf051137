"""Logging and trace export setup for the server."""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import queue
import threading
import urllib.request
from dataclasses import dataclass, field
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError, version
from typing import Optional

logger = logging.getLogger(__name__)

SERVICE_NAME = "konnekt-session"
DEFAULT_FILTER = "konnekt_session=debug,aiohttp=debug,warn"
DEFAULT_JAEGER_ENDPOINT = "http://jaeger:14268/api/traces"
EXPORT_TIMEOUT_SECONDS = 2

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "off": logging.CRITICAL + 1,
}


def _service_version() -> str:
    try:
        return version("konnekt_session")
    except PackageNotFoundError:
        return "0.0.0"


def telemetry_enabled() -> bool:
    """Return whether ENABLE_TELEMETRY is set to exactly ``true``."""
    return os.environ.get("ENABLE_TELEMETRY", "false") == "true"


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "fields": {"message": record.getMessage()},
            "target": record.name,
            "filename": record.pathname,
            "line_number": record.lineno,
            "threadId": record.thread,
        }
        if record.exc_info:
            entry["fields"]["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


class _CollectorHandler(logging.Handler):
    """Posts each record, tagged with the service resource, to a collector."""

    def __init__(self, endpoint: str) -> None:
        super().__init__()
        self.endpoint = endpoint
        self.resource = {"service.name": SERVICE_NAME, "service.version": _service_version()}
        self.setFormatter(_JsonFormatter())

    def emit(self, record: logging.LogRecord) -> None:
        body = json.dumps(
            {"resource": self.resource, "record": json.loads(self.format(record))}
        ).encode()
        request = urllib.request.Request(
            self.endpoint,
            data=body,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(request, timeout=EXPORT_TIMEOUT_SECONDS):
                pass
        except (OSError, ValueError):
            pass


@dataclass
class _Installation:
    handlers: list[logging.Handler] = field(default_factory=list)
    previous_levels: dict[Optional[str], int] = field(default_factory=dict)
    listener: Optional[logging.handlers.QueueListener] = None


_installed: Optional[_Installation] = None
_lock = threading.Lock()


def _parse_filter(spec: str) -> list[tuple[Optional[str], int]]:
    directives = []
    for part in spec.split(","):
        part = part.strip()
        if not part:
            continue
        target, sep, level_name = part.rpartition("=")
        level = _LEVELS.get(level_name.strip().lower())
        if level is None:
            continue
        name = target.strip() if sep else None
        directives.append((name or None, level))
    return directives


def _apply_filter(spec: str, installation: _Installation) -> None:
    for name, level in _parse_filter(spec):
        target = logging.getLogger(name)
        installation.previous_levels.setdefault(name, target.level)
        target.setLevel(level)


def init_telemetry() -> Optional[str]:
    """Install JSON logging, and trace export when telemetry is enabled.

    The log filter comes from LOG_FILTER, or a default. Returns the
    collector endpoint in use, or None when telemetry is disabled. Raises
    RuntimeError when already initialised.
    """
    global _installed
    with _lock:
        if _installed is not None:
            raise RuntimeError("telemetry is already initialised")
        installation = _Installation()
        _apply_filter(os.environ.get("LOG_FILTER") or DEFAULT_FILTER, installation)

        root = logging.getLogger()
        console = logging.StreamHandler()
        console.setFormatter(_JsonFormatter())
        root.addHandler(console)
        installation.handlers.append(console)

        endpoint: Optional[str] = None
        if telemetry_enabled():
            endpoint = os.environ.get("JAEGER_ENDPOINT", DEFAULT_JAEGER_ENDPOINT)
            records: queue.Queue = queue.Queue()
            forwarder = logging.handlers.QueueHandler(records)
            installation.listener = logging.handlers.QueueListener(
                records, _CollectorHandler(endpoint)
            )
            installation.listener.start()
            root.addHandler(forwarder)
            installation.handlers.append(forwarder)
        _installed = installation

    if endpoint is not None:
        logger.info("Telemetry initialized with Jaeger endpoint: %s", endpoint)
    else:
        logger.info("Telemetry disabled")
    return endpoint


def shutdown_telemetry() -> None:
    """Flush pending exports and remove what init_telemetry installed."""
    global _installed
    with _lock:
        installation, _installed = _installed, None
    if installation is None:
        return
    root = logging.getLogger()
    for handler in installation.handlers:
        root.removeHandler(handler)
        handler.close()
    if installation.listener is not None:
        installation.listener.stop()
    for name, level in installation.previous_levels.items():
        logging.getLogger(name).setLevel(level)