"""
Build the trade agreements database from the shipped seed data.

This script:
1. Removes any existing database file at the output path
2. Creates the schema and the provisions_fts full-text index
3. Loads trade blocs, sources, agreements, provisions and relation tables
4. Writes db_metadata and compacts the file for read-only serving

Usage:
    python scripts/build_db.py

    # Custom output path
    python scripts/build_db.py --output /tmp/database.db

    # Additional per-agreement provision files
    python scripts/build_db.py --seed-dir data/seed/extra
"""

import os
import sys
import argparse
import logging
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from mercosur_trade.config import get_db_path
from mercosur_trade.ingestion import build_database


def main():
    parser = argparse.ArgumentParser(description="Build the Mercosur trade agreements database")
    parser.add_argument("--output", "-o", default=None,
                        help="Output SQLite file (default: $MERCOSUR_TRADE_DB_PATH or data/database.db)")
    parser.add_argument("--seed-dir", action="append", default=[],
                        help="Extra directory of per-agreement provision JSON files (repeatable)")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    output = args.output or get_db_path()
    print(f"=== Building database: {output} ===\n")

    report = build_database(output, extra_seed_dirs=[Path(d) for d in args.seed_dir])

    print(f"  Trade blocs:               {report.trade_blocs}")
    print(f"  Sources:                   {report.sources}")
    print(f"  Agreements:                {report.agreements}")
    print(f"  Provisions:                {report.provisions}")
    print(f"  Data transfer rules:       {report.data_transfer_rules}")
    print(f"  Mutual recognition:        {report.mutual_recognition}")
    print(f"  Digital trade obligations: {report.digital_trade_obligations}")
    if report.skipped_provisions:
        print(f"  Skipped provisions:        {len(report.skipped_provisions)}")
        for entry in report.skipped_provisions:
            print(f"    {entry}")
    print(f"  Size: {report.size_bytes / 1024:.1f} KB")

    print("\n=== Done! ===")


if __name__ == "__main__":
    main()
