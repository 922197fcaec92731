"""Create the demo admin/user accounts and the demo parties.

Run `scripts/init_db.py` first so the tables exist.
"""
from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.geo_attendance.geo_attendance.database.bootstrap import DEMO_USERS, seed_demo_data


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    seed_demo_data(db_config)

    print(f"OK: seeded {db_config.get('database')} on {db_config.get('host')}:{db_config.get('port', 3306)}")
    for username, password, role, _name, _email in DEMO_USERS:
        print(f"  {role:<5} {username} / {password}")


if __name__ == "__main__":
    main()
