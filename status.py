"""Status check for a running proxy - hits its health endpoint."""

import json

import httpx
from rich.console import Console

from core.config import Config

console = Console()


def proxy_url(config: Config) -> str:
    return f"http://{config.proxy.host}:{config.proxy.port}"


def fetch_status(base_url: str, client: httpx.Client | None = None) -> dict | None:
    """Return the health payload of a running proxy, or None if unreachable."""
    owns_client = client is None
    client = client or httpx.Client(timeout=5.0)
    try:
        response = client.get(f"{base_url.rstrip('/')}/health")
        if response.status_code == 200:
            return response.json()
        console.print(f"[red]Health check failed:[/red] {response.status_code} - {response.text}")
    except (httpx.RequestError, json.JSONDecodeError) as e:
        console.print(f"[red]Health check failed:[/red] {e}")
    finally:
        if owns_client:
            client.close()
    return None


def check_status(config: Config, client: httpx.Client | None = None) -> bool:
    """Check whether the proxy is up and print how to use it."""
    base_url = proxy_url(config)
    payload = fetch_status(base_url, client)
    if payload and payload.get("status") == "ok":
        console.print(f"[green]Running[/green] {payload.get('service', '')} at {base_url}")
        console.print("\n[dim]Update your bot to use this base URL:[/dim]")
        console.print(f"  {base_url}/bot<YOUR_TOKEN>/<method>")
        if config.access.allowed_tokens:
            console.print(f"\n[dim]Allowlist:[/dim] {len(config.access.allowed_tokens)} token(s)")
        return True

    console.print(f"[yellow]Not running[/yellow] at {base_url}")
    console.print("\n[dim]Start the proxy with:[/dim]")
    console.print("  telegram-api-proxy")
    return False
