"""Shared logging utilities."""

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from core.router import BOT_PREFIX, parse_bot_path

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "proxy.log"


def write_cli_log(
    level: str,
    message: str,
    *,
    log_file: Path | None = None,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    log_file = log_file or CLI_LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    with log_file.open("a") as f:
        f.write(line)


def clear_logs(log_file: Path | None = None) -> None:
    """Truncate the CLI log file from a previous run."""
    log_file = log_file or CLI_LOG_FILE
    if log_file.exists():
        log_file.write_text("")


def mask_path(path: str) -> str:
    """Mask the bot token in a `/bot<token>/...` path."""
    bot_path = parse_bot_path(path)
    if bot_path is None or not bot_path.token:
        return path
    masked = f"{BOT_PREFIX}{_mask(bot_path.token)}"
    if bot_path.method is not None:
        masked += f"/{bot_path.method}"
    return masked


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]
