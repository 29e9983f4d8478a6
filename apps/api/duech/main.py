from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from duech.core.db import db_health, init_schema
from duech.core.errors import DictionaryError
from duech.core.observability import emit, new_request_id
from duech.modules.reports.router import router as reports_router
from duech.modules.search.router import router as search_router
from duech.modules.users.router import router as users_router
from duech.modules.words.router import router as words_router

APP_VERSION = os.getenv("APP_VERSION", "0.1.0")


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    # alembic owns the schema in deployments; this only fills in missing tables
    init_schema()
    yield


app = FastAPI(title="DUECh Dictionary API", version=APP_VERSION, lifespan=_lifespan)

# Contract locks:
# - /health keys: status, version, db, last_error_summary
# - X-Request-Id in/out (missing -> generated; always echoed back; also on errors)
# - Error envelope keys: error, message, request_id, details

_last_error: Dict[str, Optional[str]] = {"summary": None}


def _err_envelope(error: str, message: str, request_id: Optional[str], details: Any, status_code: int):
    headers = {}
    if request_id:
        headers["X-Request-Id"] = request_id
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "request_id": request_id,
            "details": details,
        },
        headers=headers,
    )


@app.middleware("http")
async def _request_id_mw(request: Request, call_next):
    rid = request.headers.get("X-Request-Id") or new_request_id()
    request.state.request_id = rid
    emit("info", "http.request.start", f"{request.method} {request.url.path}", rid, __name__)
    try:
        resp = await call_next(request)
    except Exception as e:
        emit("error", "http.request.exception", str(e), rid, __name__)
        raise
    resp.headers["X-Request-Id"] = rid
    emit("info", "http.request.end", f"{request.method} {request.url.path} -> {getattr(resp, 'status_code', None)}", rid, __name__)
    return resp


@app.exception_handler(DictionaryError)
async def _dictionary_exc_handler(request: Request, exc: DictionaryError):
    rid = getattr(request.state, "request_id", None)
    if exc.status_code >= 500:
        _last_error["summary"] = f"{exc.error}: {exc.message}"
        emit("error", "dictionary.error", exc.message, rid, __name__, error=exc.error)
    env = exc.envelope(rid)
    return _err_envelope(env["error"], env["message"], rid, env["details"], exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
    rid = getattr(request.state, "request_id", None)
    return _err_envelope("http_error", str(exc.detail), rid, {"status_code": exc.status_code}, exc.status_code)


@app.exception_handler(RequestValidationError)
async def _validation_exc_handler(request: Request, exc: RequestValidationError):
    rid = getattr(request.state, "request_id", None)
    return _err_envelope("validation_error", "request validation failed", rid, jsonable_encoder(exc.errors()), 422)


@app.exception_handler(Exception)
async def _unhandled_exc_handler(request: Request, exc: Exception):
    rid = getattr(request.state, "request_id", None)
    _last_error["summary"] = f"{type(exc).__name__}: {exc}"
    return _err_envelope("internal_error", "internal server error", rid, {"type": type(exc).__name__}, 500)


@app.get("/health")
def health():
    return {
        "status": "ok",
        "version": os.getenv("APP_VERSION", APP_VERSION),
        "db": db_health(),
        "last_error_summary": _last_error["summary"],
    }


# /words/export and /words/report must be matched before /words/{lemma}
app.include_router(reports_router)
app.include_router(words_router)
app.include_router(search_router)
app.include_router(users_router)
