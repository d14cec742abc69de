"""
Select and shape component records into the table written to the sheet.
Given records and the publish options, returns a PublishBatch: header row,
data rows, and the value input mode the rows need.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Sequence

from gspread.utils import ValueInputOption

from src.errors import EmptyResultError
from src.figma.records import ComponentRecord, component_url

LINK_STYLES = ("plain", "formula")
DEFAULT_LINK_LABEL = "Open in Figma"
MISSING_DESCRIPTION = "—"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class PublishBatch:
    """Header + rows written in a single overwrite."""
    header: list[str]
    rows: list[list[Any]] = field(default_factory=list)
    value_input_option: str = ValueInputOption.raw

    @property
    def values(self) -> list[list[Any]]:
        return [list(self.header)] + [list(r) for r in self.rows]


def select_components(records: Sequence[ComponentRecord], max_components: int) -> list[ComponentRecord]:
    """First max_components records in fetch order. Nothing left -> EmptyResultError."""
    if max_components < 1:
        raise ValueError(f"max_components must be >= 1, got {max_components}")
    selected = list(records[:max_components])
    if not selected:
        raise EmptyResultError("No components found in the Figma file; nothing to publish.")
    return selected


def apply_usages(records: Sequence[ComponentRecord], usages: dict[str, int]) -> list[ComponentRecord]:
    """Join usage counts onto records by node_id; ids missing from usages get 0."""
    return [replace(record, instances_count=usages.get(record.node_id, 0)) for record in records]


def usage_count(record: ComponentRecord) -> int:
    try:
        return max(0, int(record.instances_count or 0))
    except (TypeError, ValueError):
        return 0


def literal_text(value: str) -> str:
    """
    Force a cell to be stored as text under USER_ENTERED. The leading apostrophe
    is consumed by Sheets, so `=SUM(1)` or `1/2` land verbatim instead of being
    evaluated or parsed as a date.
    """
    value = str(value)
    return "'" + value if value else value


def _quote_formula_string(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def format_link(url: str, link_style: str = "plain", label: str = DEFAULT_LINK_LABEL) -> str:
    """Plain URL, or a HYPERLINK formula that embeds the same URL."""
    if link_style == "plain":
        return url
    if link_style == "formula":
        return f"=HYPERLINK({_quote_formula_string(url)}, {_quote_formula_string(label)})"
    raise ValueError(f"Unknown link style: {link_style!r} (expected one of {LINK_STYLES})")


def build_header(
    *,
    include_description: bool = True,
    include_path_and_tags: bool = False,
    include_timestamp: bool = False,
) -> list[str]:
    header = ["#", "Component", "Usages", "Link"]
    if include_description:
        header.append("Description")
    if include_path_and_tags:
        header += ["Path", "Tags"]
    if include_timestamp:
        header.append("Updated")
    return header


def build_batch(
    records: Sequence[ComponentRecord],
    file_key: str,
    *,
    link_style: str = "plain",
    link_label: str = DEFAULT_LINK_LABEL,
    include_description: bool = True,
    include_path_and_tags: bool = False,
    include_timestamp: bool = False,
    now: datetime | None = None,
) -> PublishBatch:
    """
    Map records one-to-one into rows (1-based index first). The timestamp, when
    requested, is captured once so every row of a run carries the same value.
    """
    if link_style not in LINK_STYLES:
        raise ValueError(f"Unknown link style: {link_style!r} (expected one of {LINK_STYLES})")
    stamp = ""
    if include_timestamp:
        stamp = (now or datetime.now(timezone.utc)).strftime(TIMESTAMP_FORMAT)

    # USER_ENTERED applies to the whole batch, so text cells need the text marker
    text = literal_text if link_style == "formula" else str

    rows = []
    for index, record in enumerate(records, 1):
        url = component_url(file_key, record.node_id)
        row: list[Any] = [index, text(record.name), usage_count(record), format_link(url, link_style, link_label)]
        if include_description:
            row.append(text(record.description or MISSING_DESCRIPTION))
        if include_path_and_tags:
            row += [text(record.path), text(", ".join(record.tags))]
        if include_timestamp:
            row.append(text(stamp))
        rows.append(row)

    return PublishBatch(
        header=build_header(
            include_description=include_description,
            include_path_and_tags=include_path_and_tags,
            include_timestamp=include_timestamp,
        ),
        rows=rows,
        value_input_option=ValueInputOption.user_entered if link_style == "formula" else ValueInputOption.raw,
    )
