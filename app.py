import os
import shutil
import time
import uuid
import logging
import asyncio
from collections import OrderedDict
from typing import Any, Dict, List, Optional
from urllib.parse import unquote, urlparse
from fastapi import FastAPI, Body, HTTPException, Header, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from shuttle_recon import FilterSpec, PipelineOutput, ShuttleDataProcessor
from shuttle_recon.config import USER_TYPE_FILTER_ALL
from shuttle_recon.outputs import records_to_output
from shuttle_recon.runner import LatestOnlyRunner, SupersededRun

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

app = FastAPI(title="Shuttle Reconciliation Processor")

TMP_ROOT = os.environ.get("TMP_ROOT", "/tmp/shuttle_recon")
os.makedirs(TMP_ROOT, exist_ok=True)
API_KEY = os.environ.get("PROCESSOR_API_KEY", None)
TOTAL_TIMEOUT = float(os.environ.get("PROCESSOR_TIMEOUT", "360"))
BACKUP_PREVIEW_ROWS = 100
MAX_SESSIONS = int(os.environ.get("PROCESSOR_MAX_SESSIONS", "64"))

# Initialize the processor once
processor = ShuttleDataProcessor()
runner = LatestOnlyRunner(timeout=TOTAL_TIMEOUT)

# Latest successful output per session, served by the view endpoint.
# Least recently used sessions are evicted past MAX_SESSIONS.
SESSIONS: "OrderedDict[str, PipelineOutput]" = OrderedDict()


def store_session(session_id: str, output: PipelineOutput) -> None:
    SESSIONS[session_id] = output
    SESSIONS.move_to_end(session_id)
    while len(SESSIONS) > MAX_SESSIONS:
        evicted, _ = SESSIONS.popitem(last=False)
        logger.info(f"Evicted session {evicted!r}")


def get_session(session_id: str) -> Optional[PipelineOutput]:
    output = SESSIONS.get(session_id)
    if output is not None:
        SESSIONS.move_to_end(session_id)
    return output


def auth_ok(x_api_key: Optional[str]):
    if API_KEY is None:
        return True
    return x_api_key == API_KEY


def create_robust_session():
    session = requests.Session()
    retry = Retry(total=3, backoff_factor=1, status_forcelist=[429, 500, 502, 503, 504])
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def download_to_file(url_or_path: str, target_dir: str) -> str:
    """Fetch a URL (or copy a local file) into target_dir, keeping its file name.

    The name matters: category membership is checked on the file name prefix.
    """
    parsed = urlparse(url_or_path)
    if parsed.scheme in ("http", "https"):
        name = os.path.basename(unquote(parsed.path)) or f"download_{int(time.time() * 1000)}"
        target = os.path.join(target_dir, name)
        with create_robust_session() as session:
            with session.get(url_or_path, stream=True, timeout=60) as resp:
                resp.raise_for_status()
                with open(target, "wb") as f:
                    for chunk in resp.iter_content(chunk_size=1 << 16):
                        f.write(chunk)
        logger.info(f"Downloaded {url_or_path} -> {target}")
        return target

    if not os.path.isfile(url_or_path):
        raise FileNotFoundError(f"File not found: {url_or_path}")
    target = os.path.join(target_dir, os.path.basename(url_or_path))
    shutil.copyfile(url_or_path, target)
    return target


class ProcessRequest(BaseModel):
    session_id: str = "default"
    tickets_files: List[str] = Field(default_factory=list)
    services_files: List[str] = Field(default_factory=list)
    validations_files: List[str] = Field(default_factory=list)


def _backup_payload(output: PipelineOutput) -> Optional[Dict[str, Any]]:
    if output.backup is None:
        return None
    payload = {}
    for category in output.backup.categories():
        preview, total = output.backup.preview(category, BACKUP_PREVIEW_ROWS)
        payload[category] = {"total_rows": total, "preview": preview.to_dicts()}
    return payload


def _view_payload(output: PipelineOutput, filters: FilterSpec) -> Dict[str, Any]:
    view = processor.view(output.combined_records or [], filters)
    return {
        "records": records_to_output(view.records),
        "kpis": view.kpis.to_dict(),
        "available_years": output.available_years,
        "available_months": output.available_months,
        "tickets_sold": output.tickets_sold,
        "analysis": processor.analyze(view.records),
    }


@app.post("/process-files")
async def process_files(request: Request, payload: ProcessRequest = Body(...), x_api_key: Optional[str] = Header(None)):
    if not auth_ok(x_api_key):
        raise HTTPException(status_code=401, detail="Unauthorized")

    run_dir = os.path.join(TMP_ROOT, f"run_{int(time.time()*1000)}_{uuid.uuid4().hex[:8]}")
    os.makedirs(run_dir, exist_ok=True)

    try:
        provided = {
            "tickets": payload.tickets_files,
            "services": payload.services_files,
            "validations": payload.validations_files,
        }
        local_paths: Dict[str, List[str]] = {}
        download_errors: List[str] = []
        for category, sources in provided.items():
            category_dir = os.path.join(run_dir, category)
            os.makedirs(category_dir, exist_ok=True)
            for source in sources:
                if not source:
                    continue
                try:
                    local_paths.setdefault(category, []).append(download_to_file(source, category_dir))
                except (requests.RequestException, OSError) as e:
                    logger.warning(f"Could not fetch {source}: {e}")
                    download_errors.append(f"Error al procesar el archivo: \"{source}\": {e}")

        if not local_paths:
            raise HTTPException(status_code=400, detail="No valid file paths or URLs provided.")

        try:
            output = await runner.submit(payload.session_id, processor.process_files, local_paths)
        except SupersededRun:
            raise HTTPException(status_code=409, detail="Superseded by a newer request for this session.")
        except asyncio.TimeoutError:
            raise HTTPException(status_code=504, detail=f"Processing exceeded {TOTAL_TIMEOUT:.0f}s.")

        file_errors = download_errors + output.file_errors

        if not output.ok:
            # the previous result no longer reflects the inputs
            SESSIONS.pop(payload.session_id, None)
            return JSONResponse(
                status_code=422,
                content={
                    "code": 422,
                    "msg": output.error_message,
                    "file_errors": file_errors,
                    "backup": _backup_payload(output),
                },
            )

        if output.combined_records is None:
            SESSIONS.pop(payload.session_id, None)
            return {"code": 200, "msg": "No se cargaron datos.", "file_errors": file_errors, "records": []}

        store_session(payload.session_id, output)
        body = _view_payload(output, FilterSpec())
        message = f"Procesamiento completo: {len(output.combined_records)} registros."
        return {"code": 200, "msg": message, "session_id": payload.session_id, "file_errors": file_errors, **body}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Processing failed: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Processing failed: {str(e)}")
    finally:
        shutil.rmtree(run_dir, ignore_errors=True)


@app.get("/sessions/{session_id}/view")
async def session_view(
    session_id: str,
    year: str = "all",
    month: str = "all",
    user_type: str = USER_TYPE_FILTER_ALL,
    x_api_key: Optional[str] = Header(None),
):
    if not auth_ok(x_api_key):
        raise HTTPException(status_code=401, detail="Unauthorized")
    output = get_session(session_id)
    if output is None:
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
    try:
        body = _view_payload(output, FilterSpec(year=year, month=month, user_type=user_type))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"code": 200, "msg": "ok", **body}


@app.get("/health")
async def health():
    return {"status": "ok", "sessions": len(SESSIONS)}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"code": exc.status_code, "msg": exc.detail})
