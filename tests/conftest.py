#!/usr/bin/env python3
"""Shared pytest fixtures for the dictstream test suite."""

import pytest
import json
import pathlib
import sys
from typing import Any, Dict, List
from unittest.mock import patch

# Add parent directory to path for imports
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from tests.fixtures.generate_test_data import (
    generate_dictionary,
    generate_dictionary_json,
    generate_truncated_json,
)


# ============================================================================
# Recording callbacks
# ============================================================================

class Recorder:
    """Collects metadata and entry callbacks in the order they fire."""

    def __init__(self):
        self.events: List[tuple] = []

    def on_metadata(self, metadata: Dict[str, Any]) -> None:
        self.events.append(("metadata", metadata))

    def on_entry(self, entry: Dict[str, Any]) -> None:
        self.events.append(("entry", entry))

    @property
    def metadata(self) -> List[Dict[str, Any]]:
        return [payload for kind, payload in self.events if kind == "metadata"]

    @property
    def entries(self) -> List[Dict[str, Any]]:
        return [payload for kind, payload in self.events if kind == "entry"]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


# ============================================================================
# File Fixtures
# ============================================================================

@pytest.fixture
def small_dictionary() -> Dict[str, Any]:
    """In-memory dictionary document with 10 word entries."""
    return generate_dictionary(10)


@pytest.fixture
def jmdict_file(tmp_path) -> pathlib.Path:
    """JMdict-shaped file with 100 entries under "words"."""
    json_file = tmp_path / "jmdict.json"
    generate_dictionary_json(100, str(json_file))
    return json_file


@pytest.fixture
def kanjidic_file(tmp_path) -> pathlib.Path:
    """Kanjidic2-shaped file with 50 entries under "characters"."""
    json_file = tmp_path / "kanjidic2.json"
    generate_dictionary_json(50, str(json_file), boundary_key="characters", indent=2)
    return json_file


@pytest.fixture
def truncated_file(tmp_path) -> pathlib.Path:
    """Dictionary file cut off in the middle of the record array."""
    json_file = tmp_path / "truncated.json"
    generate_truncated_json(20, str(json_file))
    return json_file


@pytest.fixture
def no_boundary_file(tmp_path) -> pathlib.Path:
    """Well-formed object without any record array."""
    json_file = tmp_path / "no_boundary.json"
    json_file.write_text(json.dumps({"version": "1.0", "entries": [{"id": 1}]}))
    return json_file


# ============================================================================
# Parser Fixtures
# ============================================================================

@pytest.fixture
def streaming_parser():
    """Create a StreamingDictionaryParser instance with default boundary keys."""
    from dictstream.streaming_parser import StreamingDictionaryParser
    return StreamingDictionaryParser()


# ============================================================================
# Environment Fixtures
# ============================================================================

@pytest.fixture
def clean_environment(monkeypatch):
    """Ensure a clean environment for tests."""
    for var in ['DICTSTREAM_BOUNDARY_KEYS', 'DICTSTREAM_PROGRESS_EVERY', 'PORT']:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def mock_logger():
    """Patch the manual processor's module logger."""
    with patch('dictstream.manual_processor.logger') as mock_logger:
        yield mock_logger


# ============================================================================
# Test Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")
