# src/item_repository/core/logging/
# ├─ __init__.py            # public API
# ├─ builder.py             # make_dict_config(settings) + setup_logging(settings)
# ├─ formatters.py          # JsonFormatter, ColorFormatter
# ├─ filters.py             # OperationIdFilter, ContentRedactFilter (+ contextvar helpers)
# └─ handlers.py            # handler factories (console / file / error)


from .builder import setup_logging, make_dict_config
from .filters import (
    set_operation_id,
    get_operation_id,
    reset_operation_id,
    operation_scope,
    OperationIdFilter,
    ContentRedactFilter,
)

__all__ = [
    "setup_logging",
    "make_dict_config",
    "set_operation_id",
    "get_operation_id",
    "reset_operation_id",
    "operation_scope",
    "OperationIdFilter",
    "ContentRedactFilter",
]
