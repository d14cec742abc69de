"""
CLI for the publish job (Figma components → Google Sheet).
  python -m src.orchestration [--json]
Credentials come from FIGMA_TOKEN and GOOGLE_CREDENTIALS; everything else is fixed in PublishConfig.
"""

import argparse
import json
import logging
import sys

from .pipeline import PublishConfig, run_pipeline


def main() -> None:
    ap = argparse.ArgumentParser(
        description="Publish Figma component metadata to the component report sheet"
    )
    ap.add_argument("--json", action="store_true", help="Output result as JSON")
    args = ap.parse_args()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    config = PublishConfig()
    result = run_pipeline(config)

    if result.error:
        if args.json:
            print(json.dumps({
                "error": str(result.error),
                "error_type": type(result.error).__name__,
                "failed_stage": result.failed_stage.value if result.failed_stage else None,
            }, indent=2))
        print(f"Error: {result.error}", file=sys.stderr)
        raise SystemExit(1)

    if args.json:
        out = {
            "file_key": config.file_key,
            "spreadsheet_id": config.spreadsheet_id,
            "fetched": result.fetched_count,
            "rows_written": result.rows_written,
            "stages": [s.value for s in result.stages],
        }
        print(json.dumps(out, indent=2))
        return

    print(f"Fetched {result.fetched_count} components from Figma file {config.file_key}")
    print(f"Published {result.rows_written} rows to spreadsheet {config.spreadsheet_id}")


if __name__ == "__main__":
    main()
