from .bill import Bill
from .operation import Operation, Reimbursement, format_timestamp
from .options import ConfigurationError, MatchOptions, resolve_match_options
from .document_io import (
    LinkingConfig,
    load_bills_json,
    load_linking_config,
    load_operations_json,
    save_linking_config,
)

__all__ = [
    # models
    "Bill",
    "Operation",
    "Reimbursement",
    "MatchOptions",
    "LinkingConfig",
    # helpers
    "format_timestamp",
    "resolve_match_options",
    "ConfigurationError",
    # IO helpers
    "load_bills_json",
    "load_operations_json",
    "load_linking_config",
    "save_linking_config",
]
