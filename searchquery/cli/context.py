from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, cast

from .errors import CLIError
from .paths import CliPaths, get_paths
from .results import CommandMeta, CommandResult, ErrorInfo

logger = logging.getLogger(__name__)

OutputFormat = Literal["table", "json"]
OUTPUT_FORMATS: tuple[str, ...] = ("table", "json")


def resolve_output(value: str | None) -> OutputFormat:
    """Pick the output format: explicit option, then SEARCHQUERY_OUTPUT, then table."""
    if value is not None:
        return cast(OutputFormat, value)
    env_value = os.getenv("SEARCHQUERY_OUTPUT", "").strip().lower()
    if not env_value:
        return "table"
    if env_value not in OUTPUT_FORMATS:
        raise CLIError(
            f"Invalid SEARCHQUERY_OUTPUT {env_value!r}; expected one of: {', '.join(OUTPUT_FORMATS)}.",
            exit_code=2,
            error_type="config_error",
        )
    return cast(OutputFormat, env_value)


def resolve_log_file(value: str | None, paths: CliPaths) -> Path:
    if value:
        return Path(value)
    env_value = os.getenv("SEARCHQUERY_LOG_FILE", "").strip()
    if env_value:
        return Path(env_value)
    return paths.log_file


@dataclass
class CLIContext:
    output: OutputFormat
    quiet: bool
    verbosity: int
    log_file: Path | None
    enable_log_file: bool

    _paths: CliPaths = field(default_factory=get_paths)

    @property
    def paths(self) -> CliPaths:
        return self._paths


def normalize_exception(exc: Exception, *, verbosity: int = 0) -> CLIError:
    if isinstance(exc, CLIError):
        return exc
    logger.debug(f"Unhandled {exc.__class__.__name__}", exc_info=exc)
    details: dict[str, Any] | None = None
    if verbosity >= 1:
        details = {"exceptionType": exc.__class__.__name__}
    return CLIError(
        f"Unexpected error: {exc}",
        exit_code=1,
        error_type="internal_error",
        details=details,
    )


def exit_code_for_exception(exc: Exception) -> int:
    if isinstance(exc, CLIError):
        return exc.exit_code
    return 1


def error_info_for_exception(exc: Exception) -> ErrorInfo:
    if isinstance(exc, CLIError):
        return ErrorInfo(
            type=exc.error_type,
            message=exc.message,
            hint=exc.hint,
            details=exc.details,
        )
    return ErrorInfo(type=exc.__class__.__name__, message=str(exc), details=None)


def build_result(
    *,
    ok: bool,
    command: str,
    started_at: float,
    data: Any | None,
    warnings: list[str],
    query: str | None = None,
    error: ErrorInfo | None = None,
) -> CommandResult:
    duration_ms = int(max(0.0, (time.time() - started_at) * 1000))
    meta = CommandMeta(duration_ms=duration_ms, query=query)
    return CommandResult(
        ok=ok,
        command=command,
        data=data,
        warnings=warnings,
        meta=meta,
        error=error,
    )
