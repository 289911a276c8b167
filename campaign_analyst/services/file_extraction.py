"""
Text extraction for uploaded campaign files.

CSV and XLSX files become JSON-serialized rows; PDF files become plain text
collected page by page.
"""

from __future__ import annotations

import io
import json
import logging
from dataclasses import dataclass
from typing import Any, Literal, Optional

import pandas as pd
from pdfminer.high_level import extract_pages
from pdfminer.layout import LTTextContainer

logger = logging.getLogger(__name__)

FileKind = Literal["csv", "xlsx", "pdf"]

_EXTENSIONS: dict[str, FileKind] = {
    ".csv": "csv",
    ".xlsx": "xlsx",
    ".pdf": "pdf",
}
_CONTENT_TYPES: dict[str, FileKind] = {
    "text/csv": "csv",
    "application/csv": "csv",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "xlsx",
    "application/pdf": "pdf",
}


class UnsupportedFileTypeError(ValueError):
    """Raised when an upload is not a CSV, XLSX or PDF file."""


class FileExtractionError(ValueError):
    """Raised when a supported file cannot be parsed."""


class FileTooLargeError(ValueError):
    """Raised when an upload exceeds the configured size limit."""


@dataclass(slots=True)
class ExtractedContent:
    """Prompt-ready content derived from an uploaded file."""

    file_name: str
    kind: FileKind
    text: str
    rows: Optional[list[dict[str, Any]]] = None


def detect_file_kind(filename: str | None, content_type: str | None = None) -> FileKind:
    """Classify an upload by extension, falling back to its declared content type."""
    name = (filename or "").lower()
    for extension, kind in _EXTENSIONS.items():
        if name.endswith(extension):
            return kind
    declared = (content_type or "").split(";")[0].strip().lower()
    if declared in _CONTENT_TYPES:
        return _CONTENT_TYPES[declared]
    raise UnsupportedFileTypeError(
        "Unsupported file type. Please upload CSV, XLSX, or PDF."
    )


def extract_content(
    data: bytes,
    filename: str,
    content_type: str | None = None,
    *,
    max_bytes: int | None = None,
) -> ExtractedContent:
    kind = detect_file_kind(filename, content_type)
    if max_bytes is not None and len(data) > max_bytes:
        raise FileTooLargeError(
            f"File too large: {len(data)} bytes exceeds the {max_bytes} byte limit."
        )
    logger.info("Extracting %s content from %s (%d bytes)", kind, filename, len(data))
    if kind == "pdf":
        return ExtractedContent(
            file_name=filename, kind=kind, text=extract_pdf_text(data)
        )

    rows = parse_csv_rows(data) if kind == "csv" else parse_xlsx_rows(data)
    return ExtractedContent(
        file_name=filename,
        kind=kind,
        text=serialize_rows(rows),
        rows=rows,
    )


def serialize_rows(rows: list[dict[str, Any]]) -> str:
    return json.dumps(rows, indent=2, ensure_ascii=False, default=str)


def parse_csv_rows(data: bytes) -> list[dict[str, Any]]:
    """Parse CSV bytes with a header row into a list of string-valued rows."""
    try:
        frame = pd.read_csv(
            io.BytesIO(data),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise FileExtractionError(f"Failed to parse CSV file: {exc}") from exc
    return _frame_to_rows(frame)


def parse_xlsx_rows(data: bytes) -> list[dict[str, Any]]:
    """Parse the first worksheet of an XLSX workbook."""
    try:
        frame = pd.read_excel(io.BytesIO(data), sheet_name=0, engine="openpyxl")
    except Exception as exc:
        raise FileExtractionError(f"Failed to parse Excel file: {exc}") from exc
    frame = frame.dropna(how="all")
    return _frame_to_rows(frame)


def extract_pdf_text(data: bytes) -> str:
    """Concatenate text page by page; unreadable pages are skipped."""
    page_texts: list[str] = []
    try:
        pages = extract_pages(io.BytesIO(data))
        for page_number, page in enumerate(pages, start=1):
            try:
                text = "".join(
                    element.get_text()
                    for element in page
                    if isinstance(element, LTTextContainer)
                )
            except Exception as exc:
                logger.warning("Skipping unreadable PDF page %d: %s", page_number, exc)
                continue
            page_texts.append(text.strip())
    except Exception as exc:
        raise FileExtractionError(f"Failed to parse PDF file: {exc}") from exc

    combined = "\n".join(text for text in page_texts if text)
    if not combined:
        raise FileExtractionError("No extractable text found in PDF file.")
    return combined


def _frame_to_rows(frame: pd.DataFrame) -> list[dict[str, Any]]:
    cleaned = frame.astype(object).where(frame.notna(), None)
    rows = cleaned.to_dict(orient="records")
    return [{str(key): value for key, value in row.items()} for row in rows]


__all__ = [
    "ExtractedContent",
    "FileExtractionError",
    "FileTooLargeError",
    "FileKind",
    "UnsupportedFileTypeError",
    "detect_file_kind",
    "extract_content",
    "extract_pdf_text",
    "parse_csv_rows",
    "parse_xlsx_rows",
    "serialize_rows",
]
