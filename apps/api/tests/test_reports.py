"""
Tests for the admin reports: JSON export, PDF report and e-mail delivery.
"""
import pytest

from conftest import headers_for, make_word
from duech.core.errors import ValidationError
from duech.modules.reports import mailer
from duech.modules.reports.pdf import render_words_pdf
from duech.modules.reports.service import fetch_words_by_status, report_kind
from duech.modules.words.service import add_note_to_word


@pytest.fixture
def report_words(configured_db, users):
    make_word("cachai", "Entender algo.", status="redacted")
    make_word("guagua", "Bebé.", status="reviewed")
    make_word("pololo", "Novio.", status="published")
    add_note_to_word("cachai", "revisar <b>marcas</b> & ejemplos", users["editor"]["id"])
    return users


class FakeSMTP:
    sent = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.logged_in = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def ehlo(self):
        pass

    def has_extn(self, name):
        return False

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, msg):
        FakeSMTP.sent.append((self, msg))


class TestReportService:
    def test_report_kinds(self):
        assert report_kind("redacted").statuses == ("redacted",)
        assert report_kind("reviewedLex").statuses == ("reviewed",)
        assert report_kind("both").filename == "reporte_completo.pdf"
        assert report_kind(None).filename == "reporte_redactadas.pdf"

    def test_unknown_kind(self):
        with pytest.raises(ValidationError):
            report_kind("everything")

    def test_fetch_by_status_includes_meanings_and_notes(self, report_words):
        words = fetch_words_by_status(["redacted", "reviewed"])

        assert [w["lemma"] for w in words] == ["cachai", "guagua"]
        assert words[0]["values"][0]["meaning"] == "Entender algo."
        assert words[0]["notes"][0]["user"]["username"] == "edith"

    def test_pdf_renders_markup_safely(self, report_words):
        pdf = render_words_pdf("Prueba", fetch_words_by_status(["redacted"]), generated_at="2026-01-01T00:00:00Z")

        assert pdf.startswith(b"%PDF")

    def test_empty_pdf(self):
        assert render_words_pdf("Vacío", []).startswith(b"%PDF")


class TestMailer:
    def test_requires_host(self, monkeypatch):
        monkeypatch.delenv("SMTP_HOST", raising=False)

        with pytest.raises(mailer.MailNotConfigured):
            mailer.smtp_settings()

    def test_message_has_pdf_attachment(self):
        msg = mailer.build_message("a@b.cl", b"%PDF-1.4", "reporte.pdf", subject="Reporte", sender="duech@b.cl")

        attachments = list(msg.iter_attachments())
        assert msg["To"] == "a@b.cl"
        assert attachments[0].get_filename() == "reporte.pdf"
        assert attachments[0].get_content_type() == "application/pdf"

    def test_send_uses_smtp_settings(self, monkeypatch):
        FakeSMTP.sent = []
        monkeypatch.setattr(mailer.smtplib, "SMTP", FakeSMTP)
        monkeypatch.setenv("SMTP_HOST", "smtp.duech.test")
        monkeypatch.setenv("SMTP_PORT", "2525")
        monkeypatch.setenv("SMTP_USER", "bot@duech.cl")
        monkeypatch.setenv("SMTP_PASSWORD", "secret")
        monkeypatch.delenv("SMTP_FROM", raising=False)

        mailer.send_words_report("a@b.cl", b"%PDF-1.4", "reporte.pdf", subject="Reporte")

        smtp, msg = FakeSMTP.sent[0]
        assert (smtp.host, smtp.port) == ("smtp.duech.test", 2525)
        assert smtp.logged_in == ("bot@duech.cl", "secret")
        assert msg["From"] == "bot@duech.cl"


class TestReportsApi:
    def test_export_redacted(self, client, report_words):
        resp = client.get("/words/export", headers=headers_for(report_words["admin"]))

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["count"] == 1
        assert body["words"][0]["lemma"] == "cachai"
        assert body["words"][0]["notes"][0]["wordId"] == body["words"][0]["id"]

    def test_export_requires_admin(self, client, report_words):
        resp = client.get("/words/export", headers=headers_for(report_words["editor"]))

        assert resp.status_code == 403

    @pytest.mark.parametrize(
        "kind, filename",
        [
            ("redacted", "reporte_redactadas.pdf"),
            ("reviewedLex", "reporte_revisadas.pdf"),
            ("both", "reporte_completo.pdf"),
        ],
    )
    def test_pdf_report(self, client, report_words, kind, filename):
        resp = client.get("/words/report", params={"type": kind}, headers=headers_for(report_words["admin"]))

        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/pdf"
        assert filename in resp.headers["content-disposition"]
        assert resp.content.startswith(b"%PDF")

    def test_unknown_report_type(self, client, report_words):
        resp = client.get("/words/report", params={"type": "nope"}, headers=headers_for(report_words["admin"]))

        assert resp.status_code == 400
        assert resp.json()["error"] == "validation_error"

    def test_reports_can_be_disabled(self, client, report_words, monkeypatch):
        monkeypatch.setenv("REPORTS_ENABLED", "0")

        resp = client.get("/words/export", headers=headers_for(report_words["admin"]))

        assert resp.status_code == 503
        assert resp.json()["error"] == "reports_disabled"

    def test_send_email(self, client, report_words, monkeypatch):
        sent = []
        monkeypatch.setattr(
            mailer, "send_words_report", lambda to, pdf, filename, subject: sent.append((to, filename, pdf[:4]))
        )

        resp = client.post(
            "/words/export/send-email", params={"type": "both"}, headers=headers_for(report_words["admin"])
        )

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "email": "admin@duech.cl"}
        assert sent == [("admin@duech.cl", "reporte_completo.pdf", b"%PDF")]

    def test_send_email_without_smtp(self, client, report_words, monkeypatch):
        monkeypatch.delenv("SMTP_HOST", raising=False)

        resp = client.post("/words/export/send-email", headers=headers_for(report_words["admin"]))

        assert resp.status_code == 500
        body = resp.json()
        assert body["success"] is False
        assert "SMTP_HOST" in body["error"]

    def test_send_email_requires_address(self, client, report_words):
        resp = client.post("/words/export/send-email", headers=headers_for(report_words["superadmin"]))

        assert resp.status_code == 400
