from __future__ import annotations

import os
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, Response

from duech.core.auth import Principal, require_admin
from duech.core.errors import ValidationError
from duech.core.observability import emit, request_id_of
from duech.modules.users.service import get_user

from . import mailer, service
from .schemas import ReportEmailOut, WordsExportOut

router = APIRouter(tags=["reports"])


# Feature flag (rollback preferred)
def _enabled() -> bool:
    return os.getenv("REPORTS_ENABLED", "1") == "1"


def _err(request: Request, status: int, code: str, message: str, details: Optional[Dict[str, Any]] = None):
    return JSONResponse(
        status_code=status,
        content={
            "error": code,
            "message": message,
            "request_id": request_id_of(request),
            "details": details or {},
        },
    )


def _disabled(request: Request):
    return _err(request, 503, "reports_disabled", "REPORTS_ENABLED=0", {})


@router.get("/words/export", response_model=WordsExportOut)
def api_export_words(request: Request, principal: Principal = Depends(require_admin)):
    if not _enabled():
        return _disabled(request)
    words = service.export_redacted_words()
    return WordsExportOut(words=words, count=len(words))


@router.get("/words/report")
def api_words_report(
    request: Request,
    type: str = Query(service.DEFAULT_REPORT_TYPE, description="redacted | reviewedLex | both"),
    principal: Principal = Depends(require_admin),
):
    if not _enabled():
        return _disabled(request)
    kind, pdf, _count = service.build_report(type)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{kind.filename}"'},
    )


@router.post("/words/export/send-email", response_model=ReportEmailOut)
def api_send_report_email(
    request: Request,
    type: str = Query(service.DEFAULT_REPORT_TYPE),
    principal: Principal = Depends(require_admin),
):
    if not _enabled():
        return _disabled(request)
    rid = request_id_of(request)

    user = get_user(principal.user_id) if principal.user_id is not None else None
    email = (user or {}).get("email")
    if not email:
        raise ValidationError("the requesting user has no e-mail address", {"user_id": principal.user_id})

    kind, pdf, count = service.build_report(type)
    try:
        mailer.send_words_report(email, pdf, kind.filename, subject=f"DUECh: {kind.title}")
    except (mailer.MailNotConfigured, OSError) as e:
        # smtplib errors are OSError subclasses
        emit("error", "report.email_failed", str(e), rid, __name__, email=email, type=type)
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    emit("audit", "report.emailed", f"{kind.filename} -> {email}", rid, __name__, email=email, words=count, type=type)
    return ReportEmailOut(email=email)
