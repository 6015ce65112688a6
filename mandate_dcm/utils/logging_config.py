"""
Structured Logging for the Mandate Calculator
=============================================

Provides consistent logging across the package.

Usage:
    from mandate_dcm.utils.logging_config import get_logger, EvaluationLogger

    # Simple logging
    logger = get_logger(__name__)
    logger.info("Draw panel generated")

    # Structured evaluation logging
    eval_log = EvaluationLogger("AU/severe")
    eval_log.start()
    eval_log.result(support=0.64, bcr=5.4)

Author: Mandate DCM Team
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import List, Optional


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Style name -> line format; "json" lines come from JsonFormatter
FORMATS = {
    "standard": "%(asctime)s | %(levelname)-8s | %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
    "json": None,
}


def make_formatter(format_style: str = "standard") -> logging.Formatter:
    """
    Build the formatter for a named style.

    Raises:
        ValueError: If the style is not one of FORMATS
    """
    if format_style not in FORMATS:
        raise ValueError(
            f"Unknown log format '{format_style}'; expected one of {sorted(FORMATS)}"
        )
    if format_style == "json":
        return JsonFormatter()
    return logging.Formatter(FORMATS[format_style], datefmt=DATE_FORMAT)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    format_style: str = "standard"
) -> None:
    """
    Route package logging to stderr and, optionally, a file.

    Results are printed on stdout, so log lines never mix with them.
    The file always gets the detailed layout unless JSON was requested.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path for log output
        format_style: "standard", "detailed", or "json"
    """
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(make_formatter(format_style))
    handlers: List[logging.Handler] = [console]

    if log_file:
        to_file = logging.FileHandler(log_file)
        to_file.setFormatter(make_formatter("json" if format_style == "json" else "detailed"))
        handlers.append(to_file)

    for handler in handlers:
        handler.setLevel(level)
    logging.basicConfig(level=level, handlers=handlers, force=True)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module."""
    return logging.getLogger(name)


class JsonFormatter(logging.Formatter):
    """One JSON object per record; evaluation results go under "data"."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data = getattr(record, "extra_data", None)
        if data is not None:
            entry["data"] = data
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


# =============================================================================
# EVALUATION LOGGER
# =============================================================================

class EvaluationLogger:
    """
    Structured logger for policy evaluations.

    Example:
        logger = EvaluationLogger("AU/mild")
        logger.start()
        logger.result(support=0.58, bcr=None)
    """

    def __init__(self, label: str):
        self.label = label
        self.start_time: Optional[datetime] = None
        self._logger = get_logger(f"mandate_dcm.evaluation.{label}")

    def _elapsed(self) -> float:
        if self.start_time is None:
            return 0.0
        return (datetime.now() - self.start_time).total_seconds()

    def start(self) -> None:
        """Log evaluation start."""
        self.start_time = datetime.now()
        self._logger.info(f"Evaluating: {self.label}")

    def result(self, support: Optional[float], bcr: Optional[float]) -> None:
        """Log a completed evaluation."""
        support_txt = "n/a" if support is None else f"{support:.4f}"
        bcr_txt = "not defined" if bcr is None else f"{bcr:.3f}"
        self._logger.info(
            f"Evaluated: {self.label} | support={support_txt} | "
            f"bcr={bcr_txt} | time={self._elapsed():.3f}s",
            extra={"extra_data": {"support": support, "bcr": bcr}}
        )

    def incomplete(self, reason: str) -> None:
        """Log an evaluation that produced no estimate."""
        self._logger.warning(f"No estimate: {self.label} | {reason}")

    def failed(self, reason: str) -> None:
        """Log an evaluation failure."""
        self._logger.error(f"Failed: {self.label} | {reason}")
