import argparse
import json
import os
import sys
from pathlib import Path

import pandas as pd

# Make the repo root importable when run as `python tools/import_statement.py`
sys.path.append(str(Path(__file__).resolve().parents[1]))

from packages.statement_engine import (  # noqa: E402
    ImportConfig,
    SourceFormat,
    StatementError,
    analyze,
    import_statement,
)
from packages.statement_engine.frame import transactions_to_frame  # noqa: E402


def load_config(value: str) -> ImportConfig:
    """Parse --config: inline JSON, or a path to a JSON file."""
    if os.path.isfile(value):
        value = Path(value).read_text(encoding="utf-8")
    return ImportConfig.from_dict(json.loads(value))


def print_analysis(analysis) -> None:
    print(f"📋 Header row: {analysis.header_row_index}")
    print(f"   Columns found: {analysis.header_cells}")
    print(f"   Data rows: {analysis.total_rows}")
    print(f"   Amount format: {analysis.suggested_amount_format.value}")
    print("-" * 50)
    print("Preview:")
    print(pd.DataFrame(analysis.preview_rows).fillna("").to_string(header=False))
    print("-" * 50)
    print("Suggested config (pass back with --config):")
    print(json.dumps(analysis.suggested_config().to_dict()))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyze or import a bank statement export")
    parser.add_argument("file", help="Path to a CSV/TSV or .xlsx statement")
    parser.add_argument("--config", help="Import config as JSON or a path to a JSON file")
    parser.add_argument(
        "--format-hint",
        choices=[f.value for f in SourceFormat],
        help="Container format, detected from the file when omitted",
    )
    parser.add_argument("--delimiter", help="Field delimiter for delimited text")
    parser.add_argument("--password", help="Password for an encrypted workbook")
    parser.add_argument("--out", help="Write imported transactions to this CSV file")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if not os.path.exists(args.file):
        print(f"❌ File not found: {args.file}")
        return 1

    content = Path(args.file).read_bytes()
    options = {
        "filename": os.path.basename(args.file),
        "delimiter": args.delimiter,
        "password": args.password,
    }

    try:
        if not args.config:
            print_analysis(analyze(content, args.format_hint, **options))
            return 0

        try:
            config = load_config(args.config)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            print(f"❌ Invalid config: {e}")
            return 2

        transactions = import_statement(content, config, args.format_hint, **options)
    except StatementError as e:
        print(f"❌ {e}")
        return 1

    frame = transactions_to_frame(transactions)
    if args.out:
        frame.to_csv(args.out, index=False)
        print(f"✅ Wrote {len(frame)} transactions to {args.out}")
    else:
        print(frame.to_string(index=False))
        print(f"✅ {len(frame)} transactions")
    return 0


if __name__ == "__main__":
    sys.exit(main())
