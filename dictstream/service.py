#!/usr/bin/env python3
from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.responses import Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
import ijson, logging, math, tempfile
from pathlib import Path
from dictstream import settings
from dictstream.errors import ReconstructionError
from dictstream.streaming_parser import StreamingDictionaryParser

app = FastAPI(title="dictstream")
logger = logging.getLogger(__name__)

upload_counter = Counter("dictionary_uploads_total", "Total dictionary uploads")
entry_counter = Counter("dictionary_entries_total", "Dictionary entries streamed")
process_duration = Histogram("dictionary_process_seconds", "Time spent streaming an upload")

CHUNK_SIZE = 8*1024*1024  # 8 MB


def finite_json(value):
    """Replace inf and nan with None, as JSON has no literal for them."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: finite_json(v) for k, v in value.items()}
    if isinstance(value, list):
        return [finite_json(v) for v in value]
    return value


@app.get("/health", tags=["ops"])
def health():
    return {"status": "healthy"}


@app.get("/metrics", tags=["ops"])
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.post("/process/file", tags=["process"])
async def process_file(file: UploadFile = File(...)):
    upload_counter.inc()
    with tempfile.NamedTemporaryFile(delete=False, suffix=".json") as tmp:
        total = 0
        while True:
            chunk = await file.read(CHUNK_SIZE)
            if not chunk:
                break
            tmp.write(chunk)
            total += len(chunk)
        tmp_path = Path(tmp.name)
    try:
        parser = StreamingDictionaryParser(settings.boundary_keys())
        with process_duration.time():
            summary = parser.load(tmp_path, on_entry=lambda entry: entry_counter.inc())
        return {
            "filename": file.filename,
            "bytes": total,
            "metadata": finite_json(summary.metadata),
            "entries": summary.entry_count,
        }
    except ReconstructionError as e:
        logger.warning("Rejected %s: %s", file.filename, e)
        raise HTTPException(status_code=422, detail=str(e))
    except ijson.JSONError as e:
        logger.warning("Malformed JSON in %s: %s", file.filename, e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Processing %s failed", file.filename)
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        tmp_path.unlink()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port())
