"""Exit codes used by CLI commands."""

SYSTEM_EXIT_CODE = 1
VALIDATION_EXIT_CODE = 2
FETCH_EXIT_CODE = 3
NOT_FOUND_EXIT_CODE = 4

__all__ = ["SYSTEM_EXIT_CODE", "VALIDATION_EXIT_CODE", "FETCH_EXIT_CODE", "NOT_FOUND_EXIT_CODE"]
