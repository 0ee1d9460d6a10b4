"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_EMPLOYEE_LEAVE_BALANCE = 20
DEFAULT_ADMIN_LEAVE_BALANCE = 0
MIN_PASSWORD_LENGTH = 6
DEFAULT_LIST_LIMIT = 500
ISO_DATE_FORMAT = "%Y-%m-%d"
