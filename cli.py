"""CLI entry point for telegram-api-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, load_config
from core.exceptions import ConfigurationError
from core.policy import TokenAllowlist
from status import check_status
from ui.dashboard import Dashboard, QuietLogger
from ui.log_utils import CLI_LOG_FILE, clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg in ("--check", "--status"):
            sys.exit(0 if check_status(config) else 1)

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            console.print(f"[bold]Log:[/bold] {CLI_LOG_FILE}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        console.print(f"[red][ERROR][/red] Unknown argument: {arg}")
        _print_help()
        sys.exit(2)

    allowlist = TokenAllowlist.from_tokens(config.access.allowed_tokens)
    if not allowlist.enabled:
        console.print("[yellow]Warning:[/yellow] No token allowlist configured, all bot tokens are forwarded")
    elif not allowlist.usable:
        console.print("[yellow]Warning:[/yellow] ALLOWED_TOKENS has no usable entries, every bot token is rejected")

    clear_logs()
    dashboard = Dashboard(config) if config.proxy.dashboard else None
    logger = dashboard or QuietLogger()

    import uvicorn

    app = create_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    if dashboard:
        dashboard.start()
    start_time = datetime.now()
    write_cli_log(
        "STARTUP",
        "Proxy started",
        port=config.proxy.port,
        upstream=config.upstream.base_url,
        allowlist=len(config.access.allowed_tokens),
    )
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        if dashboard:
            dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Telegram API Proxy[/bold cyan]

Relays Telegram Bot API calls to api.telegram.org with CORS headers.

[bold]Usage:[/bold]
    telegram-api-proxy              Start with live dashboard
    telegram-api-proxy --check      Check a running proxy's health
    telegram-api-proxy --config     Show config and log locations
    telegram-api-proxy --help       Show this help

[bold]Environment:[/bold]
    ALLOWED_TOKENS      Comma-separated bot tokens to allowlist
    TELEGRAM_API_URL    Upstream origin (default https://api.telegram.org)
    PROXY_HOST          Listen host
    PROXY_PORT          Listen port
    UPSTREAM_TIMEOUT    Upstream request timeout in seconds
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
