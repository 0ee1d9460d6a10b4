"""Example: use the service layer directly (no Flask).

Controllers are thin; the business rules live in services and in the
leave evaluator / report aggregator.
"""

import importlib
import json

from config import get_settings_module

from src.hr_tool.hr_tool.container import build_container
from src.hr_tool.hr_tool.core.enums import Role


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    report = container.report_service.build_monthly_report(current_role=Role.ADMIN)
    print(json.dumps(report, indent=2, default=str))


if __name__ == "__main__":
    main()
