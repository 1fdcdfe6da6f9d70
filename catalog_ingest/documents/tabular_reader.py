"""Readers for spreadsheet-style price lists (CSV and XLSX)."""

import csv
import io
from collections.abc import Iterable
from typing import Any

import openpyxl

from catalog_ingest.documents.base import BaseDocumentReader, DocumentContent
from catalog_ingest.documents.exceptions import DocumentReadError

_MAX_ROWS = 5000


def _format_rows(rows: Iterable[Iterable[Any]]) -> list[str]:
    lines: list[str] = []
    for row in rows:
        cells = ["" if cell is None else str(cell).strip() for cell in row]
        if not any(cells):
            continue
        lines.append(" | ".join(cells).rstrip(" |"))
        if len(lines) >= _MAX_ROWS:
            break
    return lines


class CsvDocumentReader(BaseDocumentReader):
    def read(self, raw_bytes: bytes, media_type: str) -> DocumentContent:
        text = self._decode(raw_bytes)
        try:
            dialect = csv.Sniffer().sniff(text[:4096], delimiters=",;\t|")
        except csv.Error:
            dialect = csv.excel
        try:
            lines = _format_rows(csv.reader(io.StringIO(text), dialect))
        except csv.Error as exc:
            raise DocumentReadError(f"Malformed CSV: {exc}") from exc
        if not lines:
            raise DocumentReadError("CSV file has no rows")
        return DocumentContent(media_type=media_type, text="\n".join(lines))

    @staticmethod
    def _decode(raw_bytes: bytes) -> str:
        try:
            return raw_bytes.decode("utf-8-sig")
        except UnicodeDecodeError:
            return raw_bytes.decode("latin-1")


class XlsxDocumentReader(BaseDocumentReader):
    def read(self, raw_bytes: bytes, media_type: str) -> DocumentContent:
        try:
            workbook = openpyxl.load_workbook(
                io.BytesIO(raw_bytes), read_only=True, data_only=True
            )
        except Exception as exc:
            raise DocumentReadError(f"Unreadable spreadsheet: {exc}") from exc

        sections: list[str] = []
        try:
            for sheet in workbook.worksheets:
                lines = _format_rows(sheet.iter_rows(values_only=True))
                if lines:
                    sections.append(f"## {sheet.title}\n" + "\n".join(lines))
        finally:
            workbook.close()

        if not sections:
            raise DocumentReadError("Spreadsheet has no data")
        return DocumentContent(media_type=media_type, text="\n\n".join(sections))
