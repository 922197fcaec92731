"""Dump the attendance database with `mysqldump`.

Usage: python scripts/backup.py [--tables users parties attendance_records attendance_entries]
"""
from __future__ import annotations

import argparse
import importlib
import subprocess
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

TABLES = ("users", "parties", "attendance_records", "attendance_entries")


def build_command(db: dict, tables: list[str]) -> list[str]:
    return [
        "mysqldump",
        f"-h{db['host']}",
        f"-P{db.get('port', 3306)}",
        f"-u{db['user']}",
        f"-p{db['password']}",
        "--single-transaction",
        db["database"],
        *tables,
    ]


def main() -> None:
    parser = argparse.ArgumentParser(description="Back up the attendance database")
    parser.add_argument("--tables", nargs="*", default=list(TABLES))
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db = settings.DB_CONFIG

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)
    out_file = out_dir / f"{db['database']}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.sql"

    try:
        with out_file.open("wb") as f:
            subprocess.run(build_command(db, args.tables), stdout=f, stderr=subprocess.PIPE, check=True)
    except FileNotFoundError:
        raise SystemExit("mysqldump not found; install the MySQL client tools.")
    except subprocess.CalledProcessError as e:
        out_file.unlink(missing_ok=True)
        raise SystemExit(f"mysqldump failed: {e.stderr.decode(errors='replace').strip()}")
    print(f"OK: backup written to {out_file}")


if __name__ == "__main__":
    main()
