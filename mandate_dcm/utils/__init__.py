"""Utils module for the mandate calculator."""
from .logging_config import (
    setup_logging,
    make_formatter,
    get_logger,
    JsonFormatter,
    EvaluationLogger,
)
