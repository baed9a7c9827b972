"""Query string access for handlers.

Routing ignores the query string; handlers that need it read it here.
Parsing happens on access, since most endpoints never look.
"""

from dataclasses import dataclass
from urllib.parse import parse_qsl


@dataclass(frozen=True, slots=True)
class QueryString:
    """The query part of a request target, without the leading ``?``."""

    raw: str = ""

    def pairs(self) -> list[tuple[str, str]]:
        """Decoded ``(name, value)`` pairs in the order they were sent."""
        return parse_qsl(self.raw, keep_blank_values=True)

    def get(self, name: str, default: str | None = None) -> str | None:
        """The first value sent for *name*, or *default*."""
        for key, value in self.pairs():
            if key == name:
                return value
        return default

    def get_all(self, name: str) -> list[str]:
        return [value for key, value in self.pairs() if key == name]

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self.pairs())

    def __bool__(self) -> bool:
        return bool(self.raw)
