"""
CLI: list the components of a Figma file.
  python -m src.figma [--file-key KEY] [--usage] [--tagged] [--json]
"""

import argparse
import json
import logging
from dataclasses import asdict

from src.errors import PublishError
from src.orchestration.pipeline import DEFAULT_FILE_KEY
from src.sheet_writer.config import EnvCredentialSource
from src.transform.rows import apply_usages

from .client import FigmaClient
from .records import collect_tagged_components, component_url


def main() -> None:
    ap = argparse.ArgumentParser(description="List components of a Figma file (FIGMA_TOKEN)")
    ap.add_argument("--file-key", "-f", default=DEFAULT_FILE_KEY, help="Figma file key")
    ap.add_argument("--usage", "-u", action="store_true", help="Also look up instance counts")
    ap.add_argument("--tagged", action="store_true", help="Walk the document for #tagged components")
    ap.add_argument("--json", action="store_true", help="Output as JSON")
    args = ap.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    try:
        with FigmaClient(EnvCredentialSource().figma_token()) as client:
            if args.tagged:
                records = collect_tagged_components(client.get_file_document(args.file_key))
            else:
                records = client.get_components(args.file_key)
            if args.usage and records:
                records = apply_usages(records, client.get_component_usages(args.file_key, [r.node_id for r in records]))
    except PublishError as e:
        print(f"Error: {e}")
        raise SystemExit(1)

    if args.json:
        out = [dict(asdict(r), link=component_url(args.file_key, r.node_id)) for r in records]
        print(json.dumps(out, indent=2, ensure_ascii=False))
        return

    print(f"Total components: {len(records)}")
    for r in records:
        usage = f" | used {r.instances_count}x" if r.instances_count is not None else ""
        where = f" | {r.path}" if r.path else ""
        print(f"  [{r.node_id}] {r.name}{usage}{where}")


if __name__ == "__main__":
    main()
