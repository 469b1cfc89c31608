"""Rebuild dictionary JSON documents from a token stream, one record at a time."""
from dictstream.errors import (
    DetachedReconstructorError,
    EmptyPathError,
    InvalidPathError,
    MissingBoundaryKeyError,
    ReconstructionError,
    UnbalancedContainerError,
)
from dictstream.loader import DictionaryLoader, LoaderPhase, LoadSummary
from dictstream.paths import advance, place
from dictstream.reconstructors import (
    DEFAULT_BOUNDARY_KEYS,
    EntryReconstructor,
    MetadataReconstructor,
)
from dictstream.streaming_parser import StreamingDictionaryParser
from dictstream.tokens import Token, TokenKind, tokens_from_events

__all__ = [
    "DEFAULT_BOUNDARY_KEYS",
    "DetachedReconstructorError",
    "DictionaryLoader",
    "EmptyPathError",
    "EntryReconstructor",
    "InvalidPathError",
    "LoadSummary",
    "LoaderPhase",
    "MetadataReconstructor",
    "MissingBoundaryKeyError",
    "ReconstructionError",
    "StreamingDictionaryParser",
    "Token",
    "TokenKind",
    "UnbalancedContainerError",
    "advance",
    "place",
    "tokens_from_events",
]
