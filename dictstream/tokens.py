#!/usr/bin/env python3
"""Token model shared by the reconstructors, plus the ijson event adapter."""
import enum
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Tuple


class TokenKind(enum.Enum):
    OBJECT_START = "start_map"
    OBJECT_END = "end_map"
    ARRAY_START = "start_array"
    ARRAY_END = "end_array"
    KEY = "map_key"
    STRING = "string"
    NUMBER = "number"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"


SCALAR_KINDS = frozenset({
    TokenKind.STRING,
    TokenKind.NUMBER,
    TokenKind.TRUE,
    TokenKind.FALSE,
    TokenKind.NULL,
})

# ijson event names that map one-to-one onto a kind
_EVENT_KINDS = {
    kind.value: kind for kind in TokenKind
    if kind not in (TokenKind.TRUE, TokenKind.FALSE)
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    payload: Any = None

    @classmethod
    def from_event(cls, event: str, value: Any = None) -> "Token":
        """Build a token from one ``ijson.basic_parse`` ``(event, value)`` pair."""
        if event == "boolean":
            return cls(TokenKind.TRUE if value else TokenKind.FALSE, bool(value))
        try:
            kind = _EVENT_KINDS[event]
        except KeyError:
            raise ValueError(f"unknown parser event: {event!r}") from None
        if kind in (TokenKind.STRING, TokenKind.NUMBER, TokenKind.KEY):
            return cls(kind, value)
        return cls(kind)

    @property
    def is_scalar(self) -> bool:
        return self.kind in SCALAR_KINDS

    def decode(self) -> Any:
        """Python value of a scalar token. Numbers always come back as float, huge ones as inf."""
        if self.kind is TokenKind.NUMBER:
            return float(str(self.payload))
        if self.kind is TokenKind.TRUE:
            return True
        if self.kind is TokenKind.FALSE:
            return False
        if self.kind is TokenKind.NULL:
            return None
        if self.kind is TokenKind.STRING:
            return self.payload
        raise ValueError(f"{self.kind.name} token carries no value")


def tokens_from_events(events: Iterable[Tuple[str, Any]]) -> Iterator[Token]:
    for event, value in events:
        yield Token.from_event(event, value)
