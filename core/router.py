"""Request routing logic - decides which pipeline outcome applies."""

from dataclasses import dataclass
from enum import Enum

BOT_PREFIX = "/bot"
HEALTH_PATHS = frozenset({"/", "/health"})
PREFLIGHT_METHOD = "OPTIONS"


class RouteKind(str, Enum):
    PREFLIGHT = "preflight"
    HEALTH = "health"
    INVALID_PATH = "invalid_path"
    PROXY = "proxy"


@dataclass(frozen=True)
class BotPath:
    """A `/bot<token>/<method>` path split into its two segments.

    `method` is None when the path has no separator after the token, and may be
    an empty string for a trailing slash (`/bot123:abc/`).
    """

    token: str
    method: str | None


@dataclass(frozen=True)
class RouteDecision:
    """Routing decision for a request."""

    kind: RouteKind
    bot_path: BotPath | None = None


def parse_bot_path(path: str) -> BotPath | None:
    """Parse `/bot<token>[/<method>]`, returning None if the prefix is missing."""
    if not path.startswith(BOT_PREFIX):
        return None
    rest = path[len(BOT_PREFIX):]
    token, sep, method = rest.partition("/")
    return BotPath(token=token, method=method if sep else None)


class RouteDecider:
    """Classify an inbound request; checks run top to bottom, first match wins."""

    def decide(self, method: str, path: str) -> RouteDecision:
        if method.upper() == PREFLIGHT_METHOD:
            return RouteDecision(RouteKind.PREFLIGHT)
        if path in HEALTH_PATHS:
            return RouteDecision(RouteKind.HEALTH)
        bot_path = parse_bot_path(path)
        if bot_path is None:
            return RouteDecision(RouteKind.INVALID_PATH)
        return RouteDecision(RouteKind.PROXY, bot_path)
