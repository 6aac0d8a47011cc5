"""Quote submission sinks: Google Sheets for production, in-memory for local runs."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import google.auth
import requests
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from site_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)
SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
SHEETS_APPEND_URL = (
    "https://sheets.googleapis.com/v4/spreadsheets/{sheet_id}/values/{range}:append"
)
TOKEN_URI = "https://oauth2.googleapis.com/token"


class QuoteSubmissionError(RuntimeError):
    """Raised when a quote could not be recorded by the sink."""


def new_quote_id(now: datetime) -> str:
    return f"QT-{int(now.timestamp() * 1000)}"


def build_quote_row(quote_id: str, submitted_at: datetime, contact: Dict[str, Any], items: List[Dict[str, Any]]) -> List[str]:
    """One spreadsheet row: id, date, status, contact columns and the item JSON."""

    return [
        quote_id,
        submitted_at.isoformat(),
        "New",
        contact.get("name") or "",
        contact.get("email") or "",
        contact.get("phone") or "",
        contact.get("company") or "",
        contact.get("message") or "",
        json.dumps(items),
    ]


class QuoteSink(ABC):
    """Destination for submitted quote requests."""

    @abstractmethod
    def submit(self, contact: Dict[str, Any], items: List[Dict[str, Any]]) -> str:
        """Record the quote and return its identifier."""


class GoogleSheetsQuoteSink(QuoteSink):
    """Appends each quote as a row of the ``Quotes`` sheet."""

    def __init__(
        self,
        sheet_id: str,
        credentials_path: str | None = None,
        service_account_email: str | None = None,
        private_key: str | None = None,
        sheet_range: str = "Quotes!A1",
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
        credentials: Any = None,
    ) -> None:
        if not sheet_id:
            raise ValueError("sheet_id is required for the Google Sheets quote sink")
        self.sheet_id = sheet_id
        self.credentials_path = credentials_path
        self.service_account_email = service_account_email
        self.private_key = private_key
        self.sheet_range = sheet_range
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self._credentials = credentials

    def _get_credentials(self):
        if self._credentials is None:
            if self.service_account_email and self.private_key:
                self._credentials = service_account.Credentials.from_service_account_info(
                    {
                        "client_email": self.service_account_email,
                        "private_key": self.private_key.replace("\\n", "\n"),
                        "token_uri": TOKEN_URI,
                    },
                    scopes=SCOPES,
                )
            elif self.credentials_path:
                self._credentials, _ = google.auth.load_credentials_from_file(self.credentials_path, scopes=SCOPES)
            else:
                self._credentials, _ = google.auth.default(scopes=SCOPES)

        if not self._credentials.valid:
            self._credentials.refresh(Request())
        return self._credentials

    def submit(self, contact: Dict[str, Any], items: List[Dict[str, Any]]) -> str:
        submitted_at = datetime.now(timezone.utc)
        quote_id = new_quote_id(submitted_at)

        try:
            credentials = self._get_credentials()
        except Exception as exc:
            log_event(LOGGER, logging.ERROR, "quote_sink_auth_failed", quote_id=quote_id, exc_info=exc)
            raise QuoteSubmissionError("Could not authenticate with Google Sheets") from exc

        url = SHEETS_APPEND_URL.format(sheet_id=self.sheet_id, range=self.sheet_range)
        body = {"values": [build_quote_row(quote_id, submitted_at, contact, items)]}
        headers = {"Authorization": f"Bearer {credentials.token}", "Content-Type": "application/json"}

        try:
            response = self.session.post(
                url,
                params={"valueInputOption": "USER_ENTERED"},
                headers=headers,
                json=body,
                timeout=self.timeout_seconds,
            )
        except requests.Timeout as exc:
            log_event(LOGGER, logging.ERROR, "quote_sink_timeout", quote_id=quote_id)
            raise QuoteSubmissionError("Google Sheets request timed out") from exc
        except requests.RequestException as exc:
            log_event(LOGGER, logging.ERROR, "quote_sink_unreachable", quote_id=quote_id, exc_info=exc)
            raise QuoteSubmissionError("Google Sheets API unreachable") from exc

        if not response.ok:
            log_event(
                LOGGER,
                logging.ERROR,
                "quote_sink_rejected",
                quote_id=quote_id,
                status_code=response.status_code,
                detail=response.text[:500],
            )
            raise QuoteSubmissionError(f"Google Sheets API Error: {response.status_code} {response.reason}")

        log_event(LOGGER, logging.INFO, "quote_recorded", quote_id=quote_id, item_count=len(items))
        return quote_id


@dataclass
class MockQuoteSink(QuoteSink):
    """Offline sink keeping submissions in memory."""

    submissions: List[Dict[str, Any]] = field(default_factory=list)

    def submit(self, contact: Dict[str, Any], items: List[Dict[str, Any]]) -> str:
        submitted_at = datetime.now(timezone.utc)
        quote_id = f"{new_quote_id(submitted_at)}-{len(self.submissions) + 1}"
        self.submissions.append(
            {
                "id": quote_id,
                "submissionDate": submitted_at.isoformat(),
                "status": "New",
                "contact": dict(contact),
                "items": list(items),
            }
        )
        LOGGER.info("Recorded mock quote", extra={"quote_id": quote_id, "item_count": len(items)})
        return quote_id


__all__ = [
    "QuoteSink",
    "GoogleSheetsQuoteSink",
    "MockQuoteSink",
    "QuoteSubmissionError",
    "build_quote_row",
    "new_quote_id",
]
