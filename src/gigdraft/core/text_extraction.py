"""Plain-text extraction from résumé PDFs."""

from __future__ import annotations

import logging
import re
import unicodedata
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from io import BytesIO

import pdfplumber

from gigdraft.errors import ExtractionError

logger = logging.getLogger(__name__)


class PdfTextExtractor:
    """Extracts text from a PDF payload with pdfplumber.

    A scanned or image-only PDF produces an empty string, which is a valid
    result; the caller decides what empty text means. Payloads that are empty,
    unparseable, or take longer than ``timeout_sec`` raise ``ExtractionError``.
    """

    def __init__(self, timeout_sec: float = 30, max_chars: int = 50000):
        self.timeout_sec = timeout_sec
        self.max_chars = max_chars

    def extract(self, data: bytes) -> str:
        if not data:
            raise ExtractionError("Resume file is empty")

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pdf-extract")
        try:
            future = executor.submit(_read_pdf_pages, data)
            raw = future.result(timeout=self.timeout_sec)
        except FutureTimeoutError as exc:
            raise ExtractionError(f"PDF text extraction timed out after {self.timeout_sec}s") from exc
        except Exception as exc:
            logger.warning("PDF extraction failed: %s", exc)
            raise ExtractionError("Could not read the uploaded file as a PDF", details=str(exc)) from exc
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        text = clean_text(raw, max_chars=self.max_chars)
        logger.info("Extracted %d characters of text from PDF", len(text))
        return text


def _read_pdf_pages(data: bytes) -> str:
    with pdfplumber.open(BytesIO(data)) as pdf:
        parts = []
        for page in pdf.pages:
            page_text = page.extract_text()
            if page_text:
                parts.append(page_text)
    return "\n\n".join(parts)


def clean_text(text: str, max_chars: int = 50000) -> str:
    if not text or not text.strip():
        return ""
    out = unicodedata.normalize("NFC", text)
    out = re.sub(r"[ \t]+", " ", out)
    out = re.sub(r"\n\s*\n\s*\n", "\n\n", out)
    out = out.strip()
    if len(out) > max_chars:
        out = out[:max_chars]
    return out
