# hoops_admin/errors/package_errors.py

PACKAGE_HISTORY_MIGRATION = "b7d2_player_package_history"


class PackageError(Exception):
    """Base exception for package lifecycle errors."""
    pass

class InvalidPackageData(PackageError):
    """Raised when package input (sessions, dates, extension) is malformed."""
    pass

class PackageHistoryNotFound(PackageError):
    """Raised when an archived package snapshot is not found."""
    pass

class PackageHistoryUnavailable(PackageError):
    """Raised when the package history table is missing from the database."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "Package history table not found. "
            f"Run migration {PACKAGE_HISTORY_MIGRATION} (alembic upgrade head) and retry."
        )
