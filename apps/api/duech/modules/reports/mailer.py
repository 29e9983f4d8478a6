"""
SMTP delivery of report PDFs.

Config (env):
- SMTP_HOST (required), SMTP_PORT (25)
- SMTP_USER / SMTP_PASSWORD: login when set
- SMTP_FROM: sender, defaults to SMTP_USER
"""
from __future__ import annotations

import os
import smtplib
from email.message import EmailMessage
from typing import Any, Dict, Optional


class MailNotConfigured(RuntimeError):
    pass


def smtp_settings() -> Dict[str, Any]:
    host = (os.getenv("SMTP_HOST") or "").strip()
    if not host:
        raise MailNotConfigured("SMTP_HOST is not configured")
    user = os.getenv("SMTP_USER") or None
    return {
        "host": host,
        "port": int(os.getenv("SMTP_PORT", "25")),
        "user": user,
        "password": os.getenv("SMTP_PASSWORD") or None,
        "sender": os.getenv("SMTP_FROM") or user or "no-reply@localhost",
    }


def build_message(to_email: str, pdf: bytes, filename: str, *, subject: str, sender: str, body: Optional[str] = None) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = sender
    msg["To"] = to_email
    msg.set_content(body or f"Se adjunta el reporte {filename}.")
    msg.add_attachment(pdf, maintype="application", subtype="pdf", filename=filename)
    return msg


def send_words_report(to_email: str, pdf: bytes, filename: str, *, subject: str) -> None:
    cfg = smtp_settings()
    msg = build_message(to_email, pdf, filename, subject=subject, sender=cfg["sender"])
    with smtplib.SMTP(cfg["host"], cfg["port"], timeout=30) as smtp:
        smtp.ehlo()
        if smtp.has_extn("starttls"):
            smtp.starttls()
            smtp.ehlo()
        if cfg["user"] and cfg["password"]:
            smtp.login(cfg["user"], cfg["password"])
        smtp.send_message(msg)
