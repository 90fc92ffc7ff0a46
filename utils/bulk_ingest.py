# =============================================================================
# 📥 utils/bulk_ingest.py
# -----------------------------------------------------------------------------
# Liest einen CSV-Textblock (Header + Datenzeilen) und erzeugt daraus
# eine Liste von BulkRows. Fehler bleiben auf Zeilenebene, nur ein
# unbrauchbarer Header bricht den gesamten Import ab.
#
# Bewusst KEIN Quoting: ein Komma trennt immer Felder.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from utils.errors import MissingRequiredColumns, RowError
from utils.qr_schema import PRIMARY_FIELDS, QR_SCHEMAS, FieldSet, fields_for

REQUIRED_COLUMNS = ("type", "content")
PREVIEW_LIMIT = 5

BULK_TEMPLATE_FILENAME = "qr-bulk-template.csv"
BULK_TEMPLATE = (
    "type,content,title\n"
    "text,Hello World,Sample Text\n"
    "url,https://example.com,Example Website\n"
    "email,test@example.com,Contact Email"
)


@dataclass(frozen=True)
class BulkRow:
    row_index: int
    kind: str
    fields: Dict[str, str]
    title: Optional[str] = None

    @property
    def display_title(self) -> str:
        return self.title or f"Bulk {self.kind}"

    def to_field_set(self) -> FieldSet:
        return FieldSet(kind=self.kind, fields=dict(self.fields), title=self.display_title)

    def to_dict(self) -> dict:
        return {
            "row_index": self.row_index,
            "kind": self.kind,
            "fields": dict(self.fields),
            "title": self.display_title,
        }


@dataclass
class BulkParseResult:
    rows: List[BulkRow] = field(default_factory=list)
    errors: List[RowError] = field(default_factory=list)

    def preview(self, limit: int = PREVIEW_LIMIT) -> List[BulkRow]:
        return self.rows[:limit]


def _split(line: str) -> List[str]:
    return [value.strip() for value in line.split(",")]


def _row_fields(kind: str, content: str, record: Dict[str, str]) -> Dict[str, str]:
    """content → Hauptfeld; weitere Spalten nur, wenn sie zum Typ passen."""
    primary = PRIMARY_FIELDS[kind]
    by_lower = {name.lower(): name for name in fields_for(kind)}
    fields: Dict[str, str] = {}
    for column, value in record.items():
        name = by_lower.get(column)
        if name and name != primary and value:
            fields[name] = value
    fields[primary] = content
    return fields


def parse(text: str) -> BulkParseResult:
    """
    Zerlegt den CSV-Text in BulkRows.
    - Zeilen ohne type/content werden still verworfen
    - zu kurze Zeilen werden mit "" aufgefüllt
    - unbekannte Typen und überzählige Werte landen in errors
    """
    lines = (text or "").splitlines()
    header_at = next((i for i, line in enumerate(lines) if line.strip()), None)
    if header_at is None:
        raise MissingRequiredColumns(REQUIRED_COLUMNS)

    headers = [name.lower() for name in _split(lines[header_at])]
    missing = [column for column in REQUIRED_COLUMNS if column not in headers]
    if missing:
        raise MissingRequiredColumns(missing)

    result = BulkParseResult()
    for row_index, line in enumerate(lines[header_at + 1:]):
        values = _split(line)
        record = {
            header: (values[i] if i < len(values) else "")
            for i, header in enumerate(headers)
        }

        kind = record["type"].lower()
        content = record["content"]
        if not kind or not content:
            continue

        extra = [value for value in values[len(headers):] if value]
        if extra:
            result.errors.append(RowError(
                row_index,
                f"row has {len(values)} values but the header has {len(headers)} columns "
                "(commas inside values are not supported)",
            ))
            continue

        if kind not in QR_SCHEMAS:
            result.errors.append(RowError(row_index, f"unsupported type '{record['type']}'"))
            continue

        result.rows.append(BulkRow(
            row_index=row_index,
            kind=kind,
            fields=_row_fields(kind, content, record),
            title=record.get("title") or None,
        ))

    return result
