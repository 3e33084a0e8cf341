from __future__ import annotations

import argparse
import importlib

from dotenv import load_dotenv

from classroom_attendance.container import build_container
from classroom_attendance.demo import initialize_demo_data
from classroom_attendance.settings import get_settings_module


def main() -> None:
    parser = argparse.ArgumentParser(description="Create demo classes, students and today's attendance.")
    parser.add_argument("--user-id", help="Teacher id owning the demo classes (default: DEMO_USER_ID)")
    parser.add_argument(
        "--standardize",
        action="store_true",
        help="Also replace every class roster with the standard student list",
    )
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG), local_cache_path=settings.LOCAL_CACHE_PATH)

    user_id = args.user_id or settings.DEMO_USER_ID
    created = initialize_demo_data(container, user_id)
    print(f"OK: demo data {'created' if created else 'already present'} for user {user_id}")

    if args.standardize:
        ok = container.roster_standardizer.standardize_all_classes()
        print("OK: rosters standardized" if ok else "FAILED: could not standardize rosters")


if __name__ == "__main__":
    main()
