"""
JSON-line events on stdout plus the request-id helpers used by the middleware.

Event keys: ts, level, message, request_id, event, module (+ extra).
"""
from __future__ import annotations

import datetime
import json
import logging
import os
import uuid
from typing import Any, Dict, Optional

from fastapi import Request

_log = logging.getLogger("duech")
if not _log.handlers:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))


def now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def emit(level: str, event: str, message: str, request_id: Optional[str], module: str, **extra: Any) -> None:
    payload: Dict[str, Any] = {
        "ts": now_iso(),
        "level": level.lower(),
        "message": message,
        "request_id": request_id,
        "event": event,
        "module": module,
    }
    payload.update(extra)
    print(json.dumps(payload, ensure_ascii=False, default=str), flush=True)


def new_request_id() -> str:
    return uuid.uuid4().hex.upper()


def request_id_of(request: Request) -> Optional[str]:
    rid = getattr(getattr(request, "state", None), "request_id", None)
    if rid:
        return str(rid)
    hv = request.headers.get("X-Request-Id")
    return hv.strip() if hv and hv.strip() else None
