#!/usr/bin/env python3
"""Two-phase driver: metadata first, then one record at a time."""
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Union

from dictstream.errors import DetachedReconstructorError, InvalidPathError, UnbalancedContainerError
from dictstream.reconstructors import (
    DEFAULT_BOUNDARY_KEYS,
    EntryHandler,
    EntryReconstructor,
    MetadataHandler,
    MetadataReconstructor,
)
from dictstream.tokens import Token, TokenKind

logger = logging.getLogger(__name__)


class LoaderPhase(enum.Enum):
    METADATA = "metadata"
    ENTRIES = "entries"
    TRAILER = "trailer"
    CLOSED = "closed"


@dataclass
class LoadSummary:
    metadata: Dict[str, Any] = field(default_factory=dict)
    entry_count: int = 0
    boundary_key: Optional[str] = None


class DictionaryLoader:
    """Routes a document's tokens through both reconstructors in order.

    The metadata callback always fires before the first entry callback.
    Root-level keys that follow the record array are skipped. Once closed,
    the loader rejects any further token.
    """

    def __init__(self, on_metadata: Optional[MetadataHandler] = None,
                 on_entry: Optional[EntryHandler] = None,
                 boundary_keys: Union[str, Iterable[str]] = DEFAULT_BOUNDARY_KEYS):
        self.on_metadata = on_metadata
        self.on_entry = on_entry
        self.phase = LoaderPhase.METADATA
        self._metadata = MetadataReconstructor(self._metadata_ready, boundary_keys)
        self._entries: Optional[EntryReconstructor] = None
        # root object stays open while trailing siblings are skipped
        self._trailer_depth = 0

    @property
    def metadata(self) -> Dict[str, Any]:
        return self._metadata.metadata

    @property
    def entry_count(self) -> int:
        return self._entries.entry_count if self._entries is not None else 0

    def _metadata_ready(self, metadata: Dict[str, Any]) -> None:
        logger.info("Metadata ready (%d keys), records start at %r",
                    len(metadata), self._metadata.boundary_key)
        if self.on_metadata is not None:
            self.on_metadata(metadata)

    def handle(self, token: Token) -> None:
        if self.phase is LoaderPhase.METADATA:
            self._metadata.handle(token)
            if self._metadata.done:
                self._entries = EntryReconstructor(self.on_entry)
                self._switch(LoaderPhase.ENTRIES)
        elif self.phase is LoaderPhase.ENTRIES:
            if not self._entries.started and token.kind is not TokenKind.ARRAY_START:
                raise InvalidPathError(
                    f"{self._metadata.boundary_key!r} must hold an array, got {token.kind.name}"
                )
            self._entries.handle(token)
            if self._entries.done:
                self._trailer_depth = 1
                self._switch(LoaderPhase.TRAILER)
        elif self.phase is LoaderPhase.TRAILER:
            self._skip(token)
        else:
            raise DetachedReconstructorError(f"loader is closed; got {token.kind.name}")

    def _skip(self, token: Token) -> None:
        if token.kind in (TokenKind.OBJECT_START, TokenKind.ARRAY_START):
            self._trailer_depth += 1
        elif token.kind in (TokenKind.OBJECT_END, TokenKind.ARRAY_END):
            self._trailer_depth -= 1
            if self._trailer_depth == 0:
                self._switch(LoaderPhase.CLOSED)
                return
        if token.kind is TokenKind.KEY and self._trailer_depth == 1:
            logger.debug("Skipping root-level key %r after the record array", token.payload)

    def _switch(self, phase: LoaderPhase) -> None:
        logger.debug("Loader phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase

    def finish(self) -> LoadSummary:
        """End-of-stream signal. Safe to call again once it has succeeded."""
        if self.phase is LoaderPhase.METADATA:
            self._metadata.finish()
        elif self.phase is LoaderPhase.ENTRIES:
            self._entries.finish()
        elif self.phase is LoaderPhase.TRAILER:
            raise UnbalancedContainerError(
                f"stream ended with {self._trailer_depth} container(s) still open after the record array"
            )
        self.phase = LoaderPhase.CLOSED
        return self.summary()

    def summary(self) -> LoadSummary:
        return LoadSummary(self.metadata, self.entry_count, self._metadata.boundary_key)

    def feed(self, tokens: Iterable[Token]) -> LoadSummary:
        for token in tokens:
            self.handle(token)
        return self.finish()
