"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log

console = Console()

OUTCOMES = ("proxied", "forbidden", "invalid_path", "health", "preflight")


class RequestInfo:
    """Info about a single request."""

    def __init__(self, method: str, path: str, outcome: str, status: int, timestamp: datetime):
        self.method = method
        self.path = path[:60] + "..." if len(path) > 60 else path
        self.outcome = outcome
        self.status = status
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing recent requests and upstream errors."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[RequestInfo] = []
        self._max_recent = 8
        self._request_count = {outcome: 0 for outcome in OUTCOMES}
        self._request_count["error"] = 0
        self._errors: list[str] = []
        self._live: Live | None = None

    @property
    def counts(self) -> dict[str, int]:
        with self._lock:
            return dict(self._request_count)

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_request(self, method: str, path: str, outcome: str, status: int) -> None:
        """Log a request that reached a terminal outcome."""
        with self._lock:
            self._request_count[outcome] = self._request_count.get(outcome, 0) + 1
            if outcome not in ("health", "preflight"):
                info = RequestInfo(method, path, outcome, status, datetime.now())
                self._recent.insert(0, info)
                self._recent = self._recent[: self._max_recent]
            self._refresh()
            write_cli_log(outcome.upper(), f"{method} {path}", status=status)

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an upstream error."""
        with self._lock:
            self._request_count["error"] += 1
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:200], route=route, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_requests_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Telegram API Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Proxied: {self._request_count['proxied']}", style="green")
        stats.append("  |  ")
        stats.append(f"Rejected: {self._rejected()}", style="yellow")
        stats.append("  |  ")
        stats.append(f"Errors: {self._request_count['error']}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _rejected(self) -> int:
        return self._request_count["forbidden"] + self._request_count["invalid_path"]

    def _build_requests_panel(self) -> Panel:
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=7)
            table.add_column("Path", ratio=2)
            table.add_column("Outcome", width=12)
            table.add_column("Status", width=6)

            for req in self._recent:
                style = "green" if req.status < 400 else "yellow" if req.status < 500 else "red"
                table.add_row(
                    req.timestamp.strftime("%H:%M:%S"),
                    req.method,
                    req.path,
                    req.outcome,
                    Text(str(req.status), style=style),
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent Requests[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"Replace {self.config.upstream.base_url} with "
                f"http://{self.config.proxy.host}:{self.config.proxy.port}",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")


class QuietLogger:
    """Request logger that only writes the CLI log file (no live display)."""

    def log_request(self, method: str, path: str, outcome: str, status: int) -> None:
        write_cli_log(outcome.upper(), f"{method} {path}", status=status)

    def log_error(self, route: str, status: int, message: str) -> None:
        write_cli_log("ERROR", message[:200], route=route, status=status)
