import pytest

from core.router import BotPath, RouteDecider, RouteKind, parse_bot_path


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/bot123:ABC/sendMessage", BotPath("123:ABC", "sendMessage")),
        ("/botT1/getMe/extra", BotPath("T1", "getMe/extra")),
        ("/botT1/", BotPath("T1", "")),
        ("/botT1", BotPath("T1", None)),
        ("/bot/getMe", BotPath("", "getMe")),
        ("/bot", BotPath("", None)),
        ("/bot T1 /getMe", BotPath(" T1 ", "getMe")),
    ],
)
def test_parse_bot_path(path, expected):
    assert parse_bot_path(path) == expected


@pytest.mark.parametrize("path", ["/", "/health", "/Bot1/getMe", "/x/bot1/getMe", ""])
def test_parse_bot_path_requires_prefix(path):
    assert parse_bot_path(path) is None


def test_decider_checks_in_order():
    decider = RouteDecider()

    assert decider.decide("OPTIONS", "/nowhere").kind is RouteKind.PREFLIGHT
    assert decider.decide("OPTIONS", "/health").kind is RouteKind.PREFLIGHT
    assert decider.decide("GET", "/").kind is RouteKind.HEALTH
    assert decider.decide("POST", "/health").kind is RouteKind.HEALTH
    assert decider.decide("GET", "/nowhere").kind is RouteKind.INVALID_PATH


def test_decider_attaches_bot_path_for_proxy():
    decision = RouteDecider().decide("POST", "/botT1/sendMessage")

    assert decision.kind is RouteKind.PROXY
    assert decision.bot_path == BotPath("T1", "sendMessage")
