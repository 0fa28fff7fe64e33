"""Colored operation logger — ANSI-colored console logging for record operations.

Provides an OperationLogger with color-coded output per operation stage,
making it easy to visually trace submissions, queries and deletions in the
terminal.

Color scheme:
    🟢 Green   — Ingestion / Store writes
    🔵 Blue    — Queries / Aggregation
    🟡 Yellow  — Deletion
    🟣 Magenta — Export
    ⚪ Gray    — Audit trail / Timing
    🔴 Red     — Errors
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    GRAY = "\033[90m"


# ── Operation Stage Definitions ──────────────────────────────────────

class OperationStage:
    """Predefined operation stages with colors and icons."""

    INGEST = ("INGEST", _Colors.GREEN, "📥")
    STORE = ("STORE", _Colors.GREEN, "💾")
    QUERY = ("QUERY", _Colors.BLUE, "🔎")
    AGGREGATE = ("AGGREGATE", _Colors.BLUE, "📊")
    DELETE = ("DELETE", _Colors.YELLOW, "🗑️")
    EXPORT = ("EXPORT", _Colors.MAGENTA, "📤")
    AUDIT = ("AUDIT", _Colors.GRAY, "📝")
    ERROR = ("ERROR", _Colors.RED, "❌")


# ── OperationLogger ──────────────────────────────────────────────────

class OperationLogger:
    """Color-coded logger for record operations.

    Usage:
        log = OperationLogger(__name__)
        log.step_start(OperationStage.INGEST, "Received batch", items=12)
        log.step_complete(OperationStage.STORE, "Inserted 12 records")
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        """Log the start of an operation step with its stage color."""
        label, color, icon = stage
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        self._logger.info(formatted + self._details(kwargs))

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        """Log the successful completion of an operation step."""
        label, color, icon = stage
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        self._logger.info(formatted + self._details(kwargs))

    def step_error(self, stage: tuple[str, str, str], message: str, error: Exception | None = None) -> None:
        """Log an operation step error in red."""
        label, _, _ = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def warning(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        """Log a non-fatal problem (e.g. a dropped audit entry)."""
        label, _, icon = stage
        formatted = (
            f"{_Colors.YELLOW}{icon} [{label}] {message}{_Colors.RESET}"
        )
        self._logger.warning(formatted + self._details(kwargs))

    def detail(self, message: str, **kwargs: Any) -> None:
        """Log additional detail (gray/dimmed)."""
        formatted = f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}"
        self._logger.debug(formatted + self._details(kwargs))

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Context manager that logs start/end with elapsed time.

        Usage:
            with log.timed_step(OperationStage.AGGREGATE, "Computing statistics"):
                stats = await asyncio.gather(...)
        """
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.step_error(stage, f"{message} — failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message} — {elapsed:.2f}s")

    @staticmethod
    def _details(kwargs: dict[str, Any]) -> str:
        if not kwargs:
            return ""
        details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
        return f" {_Colors.GRAY}({details}){_Colors.RESET}"
