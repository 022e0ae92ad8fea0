"""
Structured logging system for Kutimo.

Provides centralized logging with console and file outputs, log levels,
and metrics tracking for monitoring the remote scoring service.
"""

import logging
import sys
import threading
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics for monitoring scoring calls.

    ``item_success_rate`` keeps one entry per distinct item identifier for
    the life of the instance. Long-lived hosts scoring many items should
    call ``reset_item_metrics()`` after reading them.
    """

    def __init__(
        self,
        name: str = "kutimo",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()  # Remove existing handlers

        self._lock = threading.Lock()
        self.metrics = {
            "scoring_calls": 0,
            "scores_returned": 0,
            "scoring_failed": 0,
            "validation_failed": 0,
            "errors_by_type": {},
            "item_success_rate": {},
        }

        # Console handler
        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        # File handler
        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"kutimo_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_validation_failure(self, error_type: str):
        """Record an evaluation rejected before any network call."""
        with self._lock:
            self.metrics["validation_failed"] += 1
            self._count_error(error_type)

    def record_scoring_attempt(self, item_id: str):
        """Record an outbound scoring call for an item."""
        with self._lock:
            self.metrics["scoring_calls"] += 1
            stats = self.metrics["item_success_rate"].setdefault(
                item_id, {"attempts": 0, "successes": 0}
            )
            stats["attempts"] += 1

    def record_scoring_success(self, item_id: str):
        with self._lock:
            self.metrics["scores_returned"] += 1
            if item_id in self.metrics["item_success_rate"]:
                self.metrics["item_success_rate"][item_id]["successes"] += 1

    def record_scoring_failure(self, item_id: str, error_type: str):
        with self._lock:
            self.metrics["scoring_failed"] += 1
            self._count_error(error_type)

    def reset_item_metrics(self):
        """Drop the per-item counters; totals are kept."""
        with self._lock:
            self.metrics["item_success_rate"] = {}

    def _count_error(self, error_type: str):
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def get_metrics(self) -> dict:
        """Return a snapshot of current metrics."""
        with self._lock:
            metrics_copy = json.loads(json.dumps(self.metrics))
        for stats in metrics_copy["item_success_rate"].values():
            if stats["attempts"] > 0:
                stats["success_rate"] = round(
                    stats["successes"] / stats["attempts"], 3
                )
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        total_calls = metrics["scoring_calls"]
        total_scores = metrics["scores_returned"]
        overall_rate = 0
        if total_calls > 0:
            overall_rate = round(total_scores / total_calls * 100, 1)

        self.info("=== Scoring Session Metrics ===")
        self.info(f"Scoring calls: {total_scores}/{total_calls} ({overall_rate}% success)")
        self.info(f"Rejected before call: {metrics['validation_failed']}")

        if metrics["item_success_rate"]:
            self.info("Item Success Rates:")
            for item_id, stats in metrics["item_success_rate"].items():
                rate = stats.get("success_rate", 0) * 100
                self.info(f"  {item_id}: {stats['successes']}/{stats['attempts']} ({rate:.1f}%)")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None
_global_lock = threading.Lock()


def get_logger(
    name: str = "kutimo",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    with _global_lock:
        if _global_logger is None:
            _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    with _global_lock:
        _global_logger = None
