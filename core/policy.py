"""Bot token allowlist policy."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TokenAllowlist:
    """Optional set of bot tokens permitted through the proxy.

    An empty allowlist is the unrestricted default. Matching is exact and
    case-sensitive; configured entries are trimmed, tokens from the path are not.
    A configured list with only blank entries permits nothing.
    """

    tokens: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_tokens(cls, tokens: list[str] | None) -> "TokenAllowlist":
        return cls(frozenset(t.strip() for t in tokens or []))

    @property
    def enabled(self) -> bool:
        return bool(self.tokens)

    @property
    def usable(self) -> bool:
        """True if at least one configured entry can ever match a token."""
        return any(self.tokens)

    def permits(self, token: str) -> bool:
        """Return True if the token may be forwarded."""
        if not self.enabled:
            return True
        return bool(token) and token in self.tokens
