# src/clarifier/core/logging/
# ├─ __init__.py            # public API: setup_logging, make_dict_config, error-code helpers
# ├─ builder.py             # make_dict_config(settings) + setup_logging(settings)
# ├─ formatters.py          # JsonFormatter, ColorFormatter
# ├─ filters.py             # ErrorCodeFilter, RedactFilter (+ contextvar helpers)
# └─ handlers.py            # dictConfig handler factories (console/file)


from .builder import setup_logging, make_dict_config
from .filters import set_error_code, reset_error_code, get_error_code, ErrorCodeFilter, RedactFilter

__all__ = [
    "setup_logging",
    "make_dict_config",
    "set_error_code",
    "reset_error_code",
    "get_error_code",
    "ErrorCodeFilter",
    "RedactFilter",
]
