#!/usr/bin/env python3
"""Environment-driven defaults. Command-line flags take precedence."""
import os
from typing import Optional, Tuple

from dictstream.reconstructors import DEFAULT_BOUNDARY_KEYS

DEFAULT_PROGRESS_EVERY = 100000
DEFAULT_PORT = 8000


def boundary_keys(environ: Optional[dict] = None) -> Tuple[str, ...]:
    environ = os.environ if environ is None else environ
    raw = environ.get("DICTSTREAM_BOUNDARY_KEYS", "")
    keys = tuple(k.strip() for k in raw.split(",") if k.strip())
    return keys or DEFAULT_BOUNDARY_KEYS


def progress_every(environ: Optional[dict] = None) -> int:
    environ = os.environ if environ is None else environ
    value = int(environ.get("DICTSTREAM_PROGRESS_EVERY", DEFAULT_PROGRESS_EVERY))
    if value <= 0:
        raise ValueError(f"DICTSTREAM_PROGRESS_EVERY must be positive, got {value}")
    return value


def port(environ: Optional[dict] = None) -> int:
    environ = os.environ if environ is None else environ
    return int(environ.get("PORT", DEFAULT_PORT))
