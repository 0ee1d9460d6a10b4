"""Create the admin account from ADMIN_EMAIL / ADMIN_PASSWORD (or argv)."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.hr_tool.hr_tool.container import build_container


def main(argv: list[str]) -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())

    email = argv[1] if len(argv) > 1 else getattr(settings, "ADMIN_EMAIL", None)
    password = argv[2] if len(argv) > 2 else getattr(settings, "ADMIN_PASSWORD", None)
    if not email or not password:
        raise SystemExit("usage: seed_admin.py EMAIL PASSWORD (or set ADMIN_EMAIL / ADMIN_PASSWORD)")

    container = build_container(db_config=settings.DB_CONFIG)
    created = container.user_service.ensure_admin(email=email, password=password)
    print(f"OK: Admin {'created' if created else 'already exists'}: {email}")


if __name__ == "__main__":
    main(sys.argv)
