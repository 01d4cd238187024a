from datetime import datetime

# yyyy-MM-ddTHH:mm:ss (the .fff part is appended by format_error_code)
_ERROR_CODE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def format_error_code(moment: datetime) -> str:
    """
    Render a local timestamp as an error code: `2025-11-02T22:09:44.047`.

    Milliseconds are truncated, not rounded.
    """
    return f"{moment.strftime(_ERROR_CODE_FORMAT)}.{moment.microsecond // 1000:03d}"
