"""
CLI: check that the service account can open the destination spreadsheet.
  python -m src.sheet_writer [--sheet SPREADSHEET_ID] [--credentials PATH]
"""

import argparse
import json
import logging

from src.errors import PublishError
from src.orchestration.pipeline import DEFAULT_SPREADSHEET_ID

from .config import EnvCredentialSource, load_service_account_file, service_account_identity
from .writer import SheetPublisher


def main() -> None:
    ap = argparse.ArgumentParser(description="Verify Google Sheets access for the publish job")
    ap.add_argument("--sheet", "-s", default=DEFAULT_SPREADSHEET_ID, help="Spreadsheet key")
    ap.add_argument("--credentials", "-c", help="Path to credentials.json (takes precedence over GOOGLE_CREDENTIALS)")
    ap.add_argument("--json", action="store_true", help="Output as JSON")
    args = ap.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    try:
        if args.credentials:
            info = load_service_account_file(args.credentials)
        else:
            info = EnvCredentialSource().google_credentials()
        publisher = SheetPublisher(info)
        spreadsheet = publisher.verify_access(args.sheet)
    except PublishError as e:
        print(f"Error: {e}")
        raise SystemExit(1)

    out = {
        "spreadsheet_id": args.sheet,
        "title": spreadsheet.title,
        "service_account": service_account_identity(info),
        "worksheets": [ws.title for ws in spreadsheet.worksheets()],
    }
    if args.json:
        print(json.dumps(out, indent=2))
    else:
        print(f"Spreadsheet: {out['title']} ({args.sheet})")
        print(f"Service account: {out['service_account']}")
        print(f"Worksheets: {', '.join(out['worksheets'])}")


if __name__ == "__main__":
    main()
