# Overview: Gemini generateContent REST clients: VAT invoice extraction and shop assistant prompts.

"""
Document Intelligence

Two clients share one transport (GeminiClient):

GeminiInvoiceParser, used by vat_service:
    parse_from_text(text) -> dict draft | None
    parse_from_image(data: bytes, mime_type) -> dict draft | None

GeminiAssistant, used by assistant_service:
    suggest_repair_note(symptoms) -> str | None
    debt_advice(customer_name, balance, open_invoice_count) -> str | None
    business_analysis(summary) -> str | None
    validate_connection(api_key=None) -> ConnectionCheck

- None means "not configured" (no API key) or an empty answer.
- DocumentParseError means the service was reached and failed, or answered
  with something unusable.
- One blocking request per call with the client timeout. No retry.

The invoice draft uses the camelCase keys of the response schema below;
mapping onto a VATInvoice happens in vat_service.apply_parsed_result().
"""

from __future__ import annotations

import base64
import json
import logging
import re
from dataclasses import dataclass

import httpx


logger = logging.getLogger(__name__)


GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_TIMEOUT_SECONDS = 30.0

INVOICE_SCHEMA = {
    "type": "OBJECT",
    "description": "Invoice data",
    "properties": {
        "invoiceNumber": {"type": "STRING"},
        "date": {"type": "STRING"},
        "partnerName": {"type": "STRING"},
        "taxCode": {"type": "STRING"},
        "taxRate": {"type": "NUMBER"},
        "type": {"type": "STRING"},
        "internalCompany": {"type": "STRING"},
        "items": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "productName": {"type": "STRING"},
                    "unit": {"type": "STRING"},
                    "quantity": {"type": "NUMBER"},
                    "unitPrice": {"type": "NUMBER"},
                    "total": {"type": "NUMBER"},
                },
            },
        },
    },
    "required": ["invoiceNumber", "partnerName", "items"],
}

# Tells the model which side of the invoice is us, so it can fill
# internalCompany and type (IN = we bought, OUT = we sold).
OWN_COMPANIES_CONTEXT = (
    "MY COMPANIES:\n"
    '1. "TNC" (internalCompany: TNC).\n'
    '2. "TAY PHAT" (internalCompany: TAY_PHAT).\n'
    "type is IN when one of my companies is the buyer, OUT when it is the seller."
)

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


class DocumentParseError(Exception):
    """The document service failed or returned an unusable answer."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


@dataclass(frozen=True)
class ConnectionCheck:
    ok: bool
    message: str = ""


def clean_json_string(text: str) -> str:
    """Strip a markdown code fence the model sometimes wraps JSON in."""
    return _FENCE.sub("", text.strip()).strip()


class GeminiClient:
    """
    Thin synchronous generateContent client.

    Pass client= to reuse a configured httpx.Client (tests inject one with
    an httpx.MockTransport).
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.Client | None = None,
    ):
        self.api_key = (api_key or "").strip() or None
        self.model = model
        self.timeout = timeout
        self._client = client

    @property
    def configured(self) -> bool:
        return self.api_key is not None

    def _generate_text(self, parts: list[dict], generation_config: dict | None = None, *, api_key: str | None = None) -> str:
        """Text of the first candidate ('' if none). Raises DocumentParseError."""
        payload = {"contents": [{"parts": parts}]}
        if generation_config:
            payload["generationConfig"] = generation_config
        url = f"{GEMINI_BASE_URL}/models/{self.model}:generateContent"

        try:
            response = self._post(url, payload, api_key or self.api_key)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise DocumentParseError(
                f"Document service HTTP error: {e.response.status_code}",
                details={"response": e.response.text[:500]},
            )
        except httpx.RequestError as e:
            raise DocumentParseError(f"Document service request failed: {e}")
        except ValueError:
            raise DocumentParseError("Document service returned invalid JSON")

        return _first_text(body)

    def _post(self, url: str, payload: dict, api_key: str) -> httpx.Response:
        headers = {"x-goog-api-key": api_key, "Content-Type": "application/json"}
        if self._client is not None:
            return self._client.post(url, json=payload, headers=headers, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(url, json=payload, headers=headers)


class GeminiInvoiceParser(GeminiClient):
    """Structured VAT invoice extraction (JSON response schema)."""

    def parse_from_text(self, text: str) -> dict | None:
        prompt = f'Extract VAT invoice data. {OWN_COMPANIES_CONTEXT} Text: "{text}"'
        return self._generate_json([{"text": prompt}])

    def parse_from_image(self, data: bytes, mime_type: str) -> dict | None:
        parts = [
            {"text": f"Extract invoice data. {OWN_COMPANIES_CONTEXT}"},
            {"inlineData": {"mimeType": mime_type, "data": base64.b64encode(data).decode("ascii")}},
        ]
        return self._generate_json(parts)

    def _generate_json(self, parts: list[dict]) -> dict | None:
        if not self.configured:
            logger.warning("Document parsing skipped: GEMINI_API_KEY is not set")
            return None

        text = self._generate_text(parts, {
            "responseMimeType": "application/json",
            "responseSchema": INVOICE_SCHEMA,
        })
        if not text:
            return None

        try:
            draft = json.loads(clean_json_string(text))
        except ValueError:
            raise DocumentParseError("Document service answer is not valid JSON", details={"text": text[:500]})
        if not isinstance(draft, dict):
            raise DocumentParseError("Document service answer is not a JSON object")
        return draft or None


class GeminiAssistant(GeminiClient):
    """Short free-text advice for the counter, the debt screen and the dashboard."""

    def suggest_repair_note(self, symptoms: str) -> str | None:
        prompt = (
            "You assist the front desk of a computer repair shop. "
            f'The customer describes the problem as: "{symptoms}". '
            "Write one short intake note in Vietnamese: the likely cause and what the technician should check first."
        )
        return self._ask(prompt)

    def debt_advice(self, customer_name: str, balance: int, open_invoice_count: int) -> str | None:
        prompt = (
            "You are the bookkeeping assistant of a computer sales and repair shop. "
            f"Customer: {customer_name}. Total debt: {balance:,} VND. "
            f"Unpaid invoices: {open_invoice_count}. "
            "In Vietnamese, briefly assess the risk and suggest a tactful way to collect."
        )
        return self._ask(prompt)

    def business_analysis(self, summary: dict) -> str | None:
        figures = ", ".join(f"{key}={summary[key]}" for key in sorted(summary))
        prompt = (
            "Briefly analyse how this computer sales and repair shop is doing, in Vietnamese. "
            f"Figures (amounts in VND): {figures}."
        )
        return self._ask(prompt)

    def validate_connection(self, api_key: str | None = None) -> ConnectionCheck:
        """Send a trivial prompt with api_key (default: the configured key)."""
        key = (api_key or "").strip() or self.api_key
        if not key:
            return ConnectionCheck(False, "No API key")
        try:
            self._generate_text([{"text": "Hello"}], api_key=key)
        except DocumentParseError as e:
            return ConnectionCheck(False, str(e))
        return ConnectionCheck(True)

    def _ask(self, prompt: str) -> str | None:
        if not self.configured:
            logger.warning("Assistant request skipped: GEMINI_API_KEY is not set")
            return None
        return self._generate_text([{"text": prompt}]).strip() or None


def _first_text(body) -> str:
    """Concatenated text parts of the first candidate ('' if none)."""
    if not isinstance(body, dict):
        raise DocumentParseError("Document service answer is not a JSON object")
    candidates = body.get("candidates") or []
    if not isinstance(candidates, list):
        raise DocumentParseError("Document service answer has malformed candidates")
    if not candidates:
        return ""
    candidate = candidates[0]
    if not isinstance(candidate, dict):
        raise DocumentParseError("Document service answer has malformed candidates")
    # A blocked answer carries no content at all
    content = candidate.get("content") or {}
    parts = (content.get("parts") or []) if isinstance(content, dict) else None
    if not isinstance(parts, list):
        raise DocumentParseError("Document service answer has malformed content")
    return "".join(
        part["text"] for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    )


def _client_options(config) -> dict:
    return {
        "model": config.get("GEMINI_MODEL") or DEFAULT_MODEL,
        "timeout": float(config.get("GEMINI_TIMEOUT_SECONDS") or DEFAULT_TIMEOUT_SECONDS),
    }


def parser_from_config(config) -> GeminiInvoiceParser:
    """Build a parser from a Flask config mapping."""
    return GeminiInvoiceParser(config.get("GEMINI_API_KEY"), **_client_options(config))


def assistant_from_config(config) -> GeminiAssistant:
    return GeminiAssistant(config.get("GEMINI_API_KEY"), **_client_options(config))
