#!/usr/bin/env python3
"""Constant‑memory streaming reader for large dictionary JSON files."""
import collections, ijson, logging, pathlib
from contextlib import contextmanager
from typing import Any, BinaryIO, Dict, Iterable, Iterator, Optional, Union

from dictstream.loader import DictionaryLoader, LoadSummary
from dictstream.reconstructors import (
    DEFAULT_BOUNDARY_KEYS,
    EntryHandler,
    MetadataHandler,
    MetadataReconstructor,
)
from dictstream.tokens import Token, tokens_from_events

logger = logging.getLogger(__name__)

Source = Union[str, pathlib.Path, BinaryIO]


@contextmanager
def _open_source(source: Source):
    if hasattr(source, 'read'):
        yield source
    else:
        with open(source, 'rb') as f:
            yield f


class StreamingDictionaryParser:
    def __init__(self, boundary_keys: Union[str, Iterable[str]] = DEFAULT_BOUNDARY_KEYS):
        self.boundary_keys = boundary_keys

    def auto_detect_json_structure(self, path: Union[str, pathlib.Path]) -> str:
        """Return 'array', 'object', or 'unknown'."""
        try:
            with open(path, 'rb') as f:
                while True:
                    ch = f.read(1)
                    if not ch:
                        return 'unknown'
                    if not ch.isspace():
                        if ch == b'[':
                            return 'array'
                        if ch == b'{':
                            return 'object'
                        return 'unknown'
        except OSError as e:
            logger.error(f"detect structure failed: {e}")
            return 'unknown'

    def iter_tokens(self, source: Source) -> Iterator[Token]:
        """Yield tokens in document order without loading the full file."""
        try:
            with _open_source(source) as f:
                yield from tokens_from_events(ijson.basic_parse(f))
        except ijson.JSONError as e:
            logger.error(f"stream parse failed: {e}")
            raise

    def read_metadata(self, source: Source) -> Dict[str, Any]:
        """Read only the metadata prefix; stops at the boundary key."""
        reconstructor = MetadataReconstructor(boundary_keys=self.boundary_keys)
        tokens = self.iter_tokens(source)
        try:
            reconstructor.feed(tokens)
        finally:
            tokens.close()
        return reconstructor.finish()

    def load(self, source: Source, on_metadata: Optional[MetadataHandler] = None,
             on_entry: Optional[EntryHandler] = None) -> LoadSummary:
        """Push every token through a fresh loader, firing both callbacks."""
        loader = DictionaryLoader(on_metadata, on_entry, self.boundary_keys)
        return loader.feed(self.iter_tokens(source))

    def iter_entries(self, source: Source,
                     on_metadata: Optional[MetadataHandler] = None) -> Iterator[Dict[str, Any]]:
        """Yield records one at a time. Metadata goes to ``on_metadata`` first."""
        ready = collections.deque()
        loader = DictionaryLoader(on_metadata, ready.append, self.boundary_keys)
        for token in self.iter_tokens(source):
            loader.handle(token)
            while ready:
                yield ready.popleft()
        summary = loader.finish()
        logger.debug("Streamed %d entries", summary.entry_count)
