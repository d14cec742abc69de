#!/usr/bin/env python3
"""
One-command entry point: Figma components → Google Sheet.
Usage:
  python scripts/run_publish.py
Requires: FIGMA_TOKEN, GOOGLE_CREDENTIALS (or credentials.json in project root),
and the sheet shared with the service account.
"""

import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def main():
    from src.orchestration import PublishConfig, run_pipeline
    from src.sheet_writer import EnvCredentialSource

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    config = PublishConfig()
    print(f"Running publish: file={config.file_key}, sheet={config.spreadsheet_id}, cap={config.max_components}")
    print("Fetching components → building table → overwriting sheet...\n")
    result = run_pipeline(config, credentials=EnvCredentialSource(project_root=ROOT))

    if result.error:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    print(f"Published {result.rows_written} of {result.fetched_count} components.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
