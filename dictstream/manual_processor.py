#!/usr/bin/env python3
"""Stream gigantic dictionary JSON files with RAM bounded by one record."""

import argparse, json, pathlib, logging, sys, time
from typing import Any, Dict, IO, Optional

import ijson

from dictstream import settings
from dictstream.errors import ReconstructionError
from dictstream.loader import LoadSummary
from dictstream.streaming_parser import StreamingDictionaryParser

logger = logging.getLogger(__name__)


class ProgressLogger:
    """Entry callback that counts, logs progress and optionally writes NDJSON."""

    def __init__(self, every: int, ndjson: Optional[IO[str]] = None):
        self.every = every
        self.ndjson = ndjson
        self.count = 0

    def __call__(self, entry: Dict[str, Any]) -> None:
        self.count += 1
        if self.ndjson is not None:
            self.ndjson.write(json.dumps(entry, ensure_ascii=False))
            self.ndjson.write("\n")
        if self.count % self.every == 0:
            logger.info("%s entries", self.count)


def write_metadata(metadata: Dict[str, Any], out: Optional[pathlib.Path]) -> None:
    text = json.dumps(metadata, ensure_ascii=False, indent=2)
    if out is None:
        print(text)
    else:
        out.write_text(text + "\n", encoding="utf-8")
        logger.info("Metadata written to %s", out)


def process(path: pathlib.Path, boundary_keys, progress_every: int,
            ndjson: Optional[pathlib.Path] = None,
            metadata_out: Optional[pathlib.Path] = None) -> LoadSummary:
    start = time.time()
    parser = StreamingDictionaryParser(boundary_keys)
    if parser.auto_detect_json_structure(path) != 'object':
        raise ValueError(f"{path} does not contain a JSON object at its root")

    def on_metadata(metadata):
        write_metadata(metadata, metadata_out)

    if ndjson is None:
        summary = parser.load(path, on_metadata, ProgressLogger(progress_every))
    else:
        with open(ndjson, "w", encoding="utf-8") as out:
            summary = parser.load(path, on_metadata, ProgressLogger(progress_every, out))
        logger.info("Entries written to %s", ndjson)
    logger.info("Done %s entries in %.2fs", summary.entry_count, time.time()-start)
    return summary


def positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {number}")
    return number


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="dictstream",
        description="Stream a dictionary JSON file: print its metadata, count or export its entries.",
    )
    ap.add_argument("file", type=pathlib.Path)
    ap.add_argument("--boundary-key", action="append", dest="boundary_keys", metavar="KEY",
                    help="root key holding the record array (repeatable; "
                         "default from DICTSTREAM_BOUNDARY_KEYS or words,characters)")
    ap.add_argument("--ndjson", type=pathlib.Path, help="write every entry as one JSON line here")
    ap.add_argument("--metadata-out", type=pathlib.Path, help="write metadata here instead of stdout")
    ap.add_argument("--progress-every", type=positive_int, help="log progress every N entries")
    ap.add_argument("--log-level", default="INFO",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return ap


def cli(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        boundary_keys = args.boundary_keys or settings.boundary_keys()
        progress_every = args.progress_every if args.progress_every is not None else settings.progress_every()
        process(args.file, boundary_keys, progress_every, args.ndjson, args.metadata_out)
    except (ReconstructionError, ijson.JSONError, ValueError, OSError) as e:
        logger.error("Failed to process %s: %s", args.file, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(cli())
