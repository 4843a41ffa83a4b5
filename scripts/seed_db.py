from __future__ import annotations

import importlib
import sys
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from dotenv import load_dotenv

from attendflow.common.datetime_utils import now_local
from attendflow.config import get_settings_module
from attendflow.database.bootstrap import seed_demo_data
from attendflow.database.demo_data import generate_demo_data


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    if not settings.DB_CONFIG:
        raise SystemExit("DB_HOST is not set; the in-memory store is seeded automatically at start-up.")
    db_config = dict(settings.DB_CONFIG)

    data = generate_demo_data(int(settings.DEMO_SEED), now_local().date())
    seed_demo_data(db_config, data)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"({len(data.users)} users, {len(data.records)} records)"
    )


if __name__ == "__main__":
    main()
