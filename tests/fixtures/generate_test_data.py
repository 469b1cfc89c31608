#!/usr/bin/env python3
"""Generate dictionary-shaped JSON files and token streams for dictstream tests."""

import json
import random
import pathlib
from typing import Any, Dict, Iterator, Optional

from dictstream.tokens import Token, TokenKind

KANA = "あいうえおかきくけこさしすせそたちつてとなにぬねの"
GLOSSES = ["to eat", "to drink", "water", "mountain", "river", "book", "cat", "dog", "tree"]


def tokens_for(obj: Any) -> Iterator[Token]:
    """Depth-first token stream for a Python JSON value, numbers as raw text."""
    if isinstance(obj, dict):
        yield Token(TokenKind.OBJECT_START)
        for key, value in obj.items():
            yield Token(TokenKind.KEY, key)
            yield from tokens_for(value)
        yield Token(TokenKind.OBJECT_END)
    elif isinstance(obj, list):
        yield Token(TokenKind.ARRAY_START)
        for item in obj:
            yield from tokens_for(item)
        yield Token(TokenKind.ARRAY_END)
    elif obj is True:
        yield Token(TokenKind.TRUE, True)
    elif obj is False:
        yield Token(TokenKind.FALSE, False)
    elif obj is None:
        yield Token(TokenKind.NULL)
    elif isinstance(obj, (int, float)):
        yield Token(TokenKind.NUMBER, repr(obj))
    else:
        yield Token(TokenKind.STRING, obj)


def make_word(i: int) -> Dict[str, Any]:
    """One JMdict-simplified style word entry."""
    reading = ''.join(random.choices(KANA, k=3))
    return {
        "id": str(1000000 + i),
        "kanji": [],
        "kana": [{"common": i % 2 == 0, "text": reading, "tags": [], "appliesToKanji": ["*"]}],
        "sense": [
            {
                "partOfSpeech": ["n"],
                "gloss": [{"lang": "eng", "gender": None, "type": None, "text": random.choice(GLOSSES)}],
                "misc": [],
            }
        ],
    }


def make_character(i: int) -> Dict[str, Any]:
    """One Kanjidic2 style character entry."""
    return {
        "literal": chr(0x4E00 + i),
        "codepoints": [{"type": "ucs", "value": f"{0x4E00 + i:x}"}],
        "misc": {"grade": (i % 6) + 1, "strokeCounts": [i % 20 + 1], "frequency": None, "jlptLevel": None},
    }


def generate_dictionary(entries: int, boundary_key: str = "words",
                        trailer: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    make = make_character if boundary_key == "characters" else make_word
    doc = {
        "version": "3.5.0",
        "languages": ["eng"],
        "commonOnly": False,
        "dictDate": "2024-01-01",
        "dictRevisions": ["1.09", "1.08"],
        "tags": {"n": "noun (common) (futsuumeishi)", "v1": "Ichidan verb"},
        boundary_key: [make(i) for i in range(entries)],
    }
    if trailer:
        doc.update(trailer)
    return doc


def generate_dictionary_json(entries: int, output_path: str, boundary_key: str = "words",
                             indent: Optional[int] = None) -> str:
    """
    Write a dictionary file with a metadata prefix and a record array.

    Args:
        entries: Number of records in the record array
        output_path: Where to save the file
        boundary_key: Root key holding the record array
        indent: Optional JSON indentation

    Returns:
        Path to the generated file
    """
    doc = generate_dictionary(entries, boundary_key)
    pathlib.Path(output_path).write_text(json.dumps(doc, ensure_ascii=False, indent=indent), encoding='utf-8')
    return output_path


def generate_truncated_json(entries: int, output_path: str, cut: int = 40) -> str:
    """Write a dictionary file missing its last ``cut`` characters."""
    text = json.dumps(generate_dictionary(entries), ensure_ascii=False)
    pathlib.Path(output_path).write_text(text[:-cut], encoding='utf-8')
    return output_path


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Generate dictionary-shaped JSON files")
    parser.add_argument("--output", default="dictionary.json", help="Output file")
    parser.add_argument("--entries", type=int, default=1000, help="Number of records")
    parser.add_argument("--boundary-key", default="words", choices=["words", "characters"])
    parser.add_argument("--indent", type=int, default=None)

    args = parser.parse_args()
    result = generate_dictionary_json(args.entries, args.output, args.boundary_key, args.indent)
    print(f"Generated dictionary JSON: {result}")
