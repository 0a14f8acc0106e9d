"""Colored maintenance logger — ANSI-colored console logging for backup operations.

Provides a MaintenanceLogger with color-coded output per maintenance stage,
so a snapshot, its rotation and any restore can be traced in the terminal.

Color scheme:
    🟢 Green   — Snapshot / Complete
    🟡 Yellow  — Rotation
    🟣 Magenta — Restore / Import
    🔵 Blue    — Export
    🔴 Red     — Reset / Errors
    ⚪ Gray    — Details / Stats
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
    WHITE = "\033[97m"
    GRAY = "\033[90m"


# ── Maintenance Stage Definitions ────────────────────────────────────

class MaintenanceStage:
    """Predefined maintenance stages with colors and icons."""

    SNAPSHOT = ("SNAPSHOT", _Colors.GREEN, "🛡️")
    ROTATION = ("ROTATION", _Colors.YELLOW, "🗑️")
    RESTORE = ("RESTORE", _Colors.MAGENTA, "⏪")
    IMPORT = ("IMPORT", _Colors.MAGENTA, "📦")
    EXPORT = ("EXPORT", _Colors.BLUE, "📤")
    RESET = ("RESET", _Colors.RED, "🧹")
    ERROR = ("ERROR", _Colors.RED, "❌")
    COMPLETE = ("COMPLETE", _Colors.GREEN, "✅")


Stage = tuple[str, str, str]


# ── MaintenanceLogger ────────────────────────────────────────────────

class MaintenanceLogger:
    """Color-coded logger for backup, restore and reset operations.

    Usage:
        log = MaintenanceLogger("Maintenance")
        log.step_start(MaintenanceStage.SNAPSHOT, "Starting backup sequence")
        log.detail("Copied pallets.db")
        log.step_complete(MaintenanceStage.SNAPSHOT, "Archived to DB_v004")
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: Stage, message: str, **kwargs: Any) -> None:
        """Log the start of a maintenance step with its stage color."""
        label, color, icon = stage
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        self._logger.info(formatted + _format_details(kwargs))

    def step_complete(self, stage: Stage, message: str, **kwargs: Any) -> None:
        """Log the successful completion of a maintenance step."""
        label, color, icon = stage
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        self._logger.info(formatted + _format_details(kwargs))

    def step_error(self, stage: Stage, message: str, error: BaseException | None = None) -> None:
        """Log a maintenance step error in red, with the traceback if given."""
        label, _, _ = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted, exc_info=error)

    def detail(self, message: str, **kwargs: Any) -> None:
        """Log additional detail (gray/dimmed)."""
        formatted = f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}"
        self._logger.info(formatted + _format_details(kwargs))

    def warning(self, message: str) -> None:
        self._logger.warning(f"{_Colors.YELLOW}⚠️  {message}{_Colors.RESET}")

    @contextmanager
    def timed_step(self, stage: Stage, message: str, **kwargs: Any):
        """Context manager that logs start/end with elapsed time.

        Usage:
            with log.timed_step(MaintenanceStage.RESTORE, "Rolling back to DB_v002"):
                await copy_files()
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


def _format_details(kwargs: dict[str, Any]) -> str:
    if not kwargs:
        return ""
    details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    return f" {_Colors.GRAY}({details}){_Colors.RESET}"
