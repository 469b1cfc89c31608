#!/usr/bin/env python3
"""Rebuild JSON trees from a flat token stream, one phase at a time.

``MetadataReconstructor`` collects the root-level keys that precede the
record array. ``EntryReconstructor`` then rebuilds the elements of that array
one at a time and hands each one off as soon as it closes, so memory stays
bounded by the largest single record.
"""
import logging
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Union

from dictstream.errors import (
    DetachedReconstructorError,
    InvalidPathError,
    MissingBoundaryKeyError,
    UnbalancedContainerError,
)
from dictstream.paths import Path, advance, place
from dictstream.tokens import Token, TokenKind

logger = logging.getLogger(__name__)

MetadataHandler = Callable[[Dict[str, Any]], None]
EntryHandler = Callable[[Dict[str, Any]], None]

# JMdict/JMnedict files keep their records under "words", Kanjidic2 under "characters"
DEFAULT_BOUNDARY_KEYS: Tuple[str, ...] = ("words", "characters")


def normalize_boundary_keys(keys: Union[str, Iterable[str]]) -> frozenset:
    if isinstance(keys, str):
        keys = (keys,)
    keys = frozenset(keys)
    if not keys:
        raise ValueError("at least one boundary key is required")
    return keys


class _Reconstructor:
    """Path bookkeeping common to both phases."""

    def __init__(self):
        self.path: Path = []
        self._open = 0
        self._done = False

    @property
    def done(self) -> bool:
        return self._done

    def handle(self, token: Token) -> None:
        if self._done:
            raise DetachedReconstructorError(
                f"{type(self).__name__} already finished; got {token.kind.name}"
            )
        self._handle(token)

    def feed(self, tokens: Iterable[Token]) -> None:
        """Handle tokens until this reconstructor detaches or the input runs out."""
        for token in tokens:
            self.handle(token)
            if self._done:
                return

    def _handle(self, token: Token) -> None:
        raise NotImplementedError

    def _close(self, kind: TokenKind) -> None:
        if self._open == 0:
            raise UnbalancedContainerError(
                f"{kind.name} with no open container at path {self.path!r}"
            )
        self._open -= 1

    def _close_array(self) -> None:
        self._close(TokenKind.ARRAY_END)
        if not self.path or not isinstance(self.path[-1], int):
            raise UnbalancedContainerError(f"ARRAY_END outside an array at path {self.path!r}")
        self.path.pop()
        advance(self.path)

    def _open_array(self, tree: Any) -> None:
        self._open += 1
        place(tree, self.path, [])
        self.path.append(0)

    def _scalar(self, tree: Any, token: Token) -> None:
        place(tree, self.path, token.decode())
        advance(self.path)


class MetadataReconstructor(_Reconstructor):
    """Builds the metadata object up to the first root-level boundary key.

    ``on_metadata`` fires exactly once, when a boundary key shows up at the
    root. The reconstructor is done from that moment on and rejects any
    further token.
    """

    def __init__(self, on_metadata: Optional[MetadataHandler] = None,
                 boundary_keys: Union[str, Iterable[str]] = DEFAULT_BOUNDARY_KEYS):
        super().__init__()
        self.on_metadata = on_metadata
        self.boundary_keys = normalize_boundary_keys(boundary_keys)
        self.metadata: Dict[str, Any] = {}
        self.boundary_key: Optional[str] = None

    def _handle(self, token: Token) -> None:
        kind = token.kind
        if kind is TokenKind.OBJECT_START:
            self._open += 1
            if self.path:
                place(self.metadata, self.path, {})
        elif kind is TokenKind.OBJECT_END:
            self._close(kind)
            advance(self.path)
        elif kind is TokenKind.KEY:
            if not self.path and token.payload in self.boundary_keys:
                self._detach(token.payload)
            else:
                self.path.append(token.payload)
        elif kind is TokenKind.ARRAY_START:
            self._open_array(self.metadata)
        elif kind is TokenKind.ARRAY_END:
            self._close_array()
        else:
            self._scalar(self.metadata, token)

    def _detach(self, key: str) -> None:
        self._done = True
        self.boundary_key = key
        logger.debug("Boundary key %r reached with %d metadata keys", key, len(self.metadata))
        if self.on_metadata is not None:
            self.on_metadata(self.metadata)

    def finish(self) -> Dict[str, Any]:
        """Signal end of stream. Returns the metadata once the boundary was seen."""
        if not self._done:
            raise MissingBoundaryKeyError(
                f"stream ended before any of {sorted(self.boundary_keys)} appeared at the root"
            )
        return self.metadata


class EntryReconstructor(_Reconstructor):
    """Rebuilds the elements of the record array, emitting each as it closes.

    Expects the token stream starting at the record array's ``ARRAY_START``.
    The ``ARRAY_END`` matching it finishes the reconstructor.
    """

    def __init__(self, on_entry: Optional[EntryHandler] = None):
        super().__init__()
        self.on_entry = on_entry
        self.entry: Dict[str, Any] = {}
        self.entry_count = 0
        self._started = False

    @property
    def started(self) -> bool:
        """Whether the record array's ARRAY_START has been seen."""
        return self._started

    @property
    def depth(self) -> int:
        """Open containers inside the current record."""
        return self._open

    def _handle(self, token: Token) -> None:
        kind = token.kind
        if kind is TokenKind.OBJECT_START:
            self._open += 1
            if self.path:
                place(self.entry, self.path, {})
        elif kind is TokenKind.OBJECT_END:
            self._close(kind)
            advance(self.path)
            if self._open == 0:
                self._emit()
        elif kind is TokenKind.KEY:
            self.path.append(token.payload)
        elif kind is TokenKind.ARRAY_START:
            if self._open == 0:
                if self._started:
                    raise InvalidPathError("arrays nested directly in the record array are not supported")
                # the record array itself
                self._started = True
                return
            self._open_array(self.entry)
        elif kind is TokenKind.ARRAY_END:
            if self._open == 0:
                self._done = True
                logger.debug("Record array closed after %d entries", self.entry_count)
                return
            self._close_array()
        else:
            self._scalar(self.entry, token)

    def _emit(self) -> None:
        entry, self.entry = self.entry, {}
        self.entry_count += 1
        if self.on_entry is not None:
            self.on_entry(entry)

    def finish(self) -> int:
        """Signal end of stream. Returns the number of entries emitted."""
        if not self._done:
            where = f"inside entry #{self.entry_count + 1}" if self._open else "before the record array closed"
            raise UnbalancedContainerError(f"stream ended {where} (path {self.path!r})")
        return self.entry_count
