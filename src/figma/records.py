"""
Component records as returned by the Figma REST API.
Parses the library components listing and walks a full file document for
components tagged with #hashtags in their description.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Iterator

FIGMA_WEB_BASE = "https://www.figma.com"

COMPONENT_NODE_TYPES = ("COMPONENT", "COMPONENT_SET")
TAG_PATTERN = re.compile(r"#(\S+)")


@dataclass
class ComponentRecord:
    """A single component from a Figma file."""
    node_id: str
    name: str
    description: str | None = None
    instances_count: int | None = None
    path: str = ""
    tags: list[str] = field(default_factory=list)


def component_url(file_key: str, node_id: str) -> str:
    """Web link that opens the file focused on the given node."""
    return f"{FIGMA_WEB_BASE}/file/{file_key}/?node-id={node_id}"


def parse_count(value: Any) -> int | None:
    """Non-negative instance count, or None when absent or not a number."""
    if value is None:
        return None
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return None


def parse_components(payload: dict[str, Any]) -> list[ComponentRecord]:
    """
    Turn a /v1/files/:key/components response into records.
    Entries without a node_id are skipped; they cannot be linked or joined.
    """
    meta = payload.get("meta") or {}
    records = []
    for raw in meta.get("components") or []:
        node_id = str(raw.get("node_id") or "").strip()
        if not node_id:
            continue
        records.append(
            ComponentRecord(
                node_id=node_id,
                name=str(raw.get("name") or ""),
                description=raw.get("description") or None,
                instances_count=parse_count(raw.get("instances_count")),
            )
        )
    return records


def parse_usages(payload: dict[str, Any]) -> dict[str, int]:
    """Map node_id -> instances_count from a component_usages response."""
    meta = payload.get("meta") or {}
    usages: dict[str, int] = {}
    for node_id, usage in meta.items():
        if not isinstance(usage, dict):
            continue
        usages[str(node_id)] = parse_count(usage.get("instances_count")) or 0
    return usages


def extract_tags(description: str) -> list[str]:
    return TAG_PATTERN.findall(description or "")


def _walk(node: dict[str, Any], path: list[str]) -> Iterator[ComponentRecord]:
    name = str(node.get("name") or "")
    if node.get("type") in COMPONENT_NODE_TYPES:
        description = node.get("description") or ""
        tags = extract_tags(description)
        if tags:
            yield ComponentRecord(
                node_id=str(node.get("id") or ""),
                name=name,
                description=description,
                path=" / ".join(path + [name]),
                tags=tags,
            )
    for child in node.get("children") or []:
        yield from _walk(child, path + [name])


def collect_tagged_components(document: dict[str, Any]) -> list[ComponentRecord]:
    """
    Collect COMPONENT and COMPONENT_SET nodes whose description carries at
    least one #tag, in document order. Paths start at the page name.
    """
    records: list[ComponentRecord] = []
    for page in document.get("children") or []:
        page_name = str(page.get("name") or "")
        for child in page.get("children") or []:
            records.extend(_walk(child, [page_name]))
    return records
