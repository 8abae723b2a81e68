"""Structured JSON logging and console status output."""

import logging
import sys
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, TextIO

from pythonjsonlogger import jsonlogger

from sinkhole.models.blacklist import BlacklistLoadSummary
from sinkhole.models.run_statistics import RunStatistics


# Process run ID for correlation across log entries
RUN_ID = str(uuid.uuid4())


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter that adds run_id and standardized fields."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        """Add custom fields to log record.

        Args:
            log_record: The log record to modify.
            record: The original logging.LogRecord.
            message_dict: Additional fields from the logging call.
        """
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = (
            datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        )
        log_record["run_id"] = RUN_ID
        log_record["level"] = record.levelname
        log_record["logger"] = record.name


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure structured JSON logging for the application.

    Args:
        verbose: Log at DEBUG instead of INFO.

    Returns:
        logging.Logger: Configured root logger.
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    json_handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(message)s",
        timestamp=True,
    )
    json_handler.setFormatter(formatter)
    logger.addHandler(json_handler)

    return logger


class StatusLine:
    """Single console line showing the running block ratio, rewritten in place.

    Updated by the query reporter in simple log mode. Writes go to
    stderr so they never interleave with the JSON log stream on stdout.
    """

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream if stream is not None else sys.stderr
        self._width = 0

    def update(self, stats: RunStatistics) -> None:
        text = stats.render()
        # Pad with spaces to wipe leftovers of a longer previous line
        padding = " " * max(0, self._width - len(text))
        self._width = len(text)
        self._stream.write(f"\r{text}{padding}")
        self._stream.flush()

    def close(self) -> None:
        if self._width:
            self._stream.write("\n")
            self._stream.flush()
            self._width = 0


def log_query(
    name: str,
    record_type: str,
    blocked: bool,
    addresses: List[str],
    rcode: str,
) -> None:
    """Log structured per-query result.

    Args:
        name: First question name of the query.
        record_type: First question type (A, AAAA, ...).
        blocked: Whether the query matched the blacklist.
        addresses: A/AAAA addresses returned to the client.
        rcode: Response code of the returned answer.
    """
    logger = logging.getLogger(__name__)
    logger.info(
        "Query answered",
        extra={
            "query_name": name,
            "query_type": record_type,
            "blocked": blocked,
            "addresses": addresses,
            "rcode": rcode,
        },
    )


def log_source_failure(location: str, error: str) -> None:
    """Log a blacklist source that could not be fetched.

    Args:
        location: URL or path of the source.
        error: Failure description.
    """
    logger = logging.getLogger(__name__)
    logger.warning(
        f"Blacklist {location} failed to load",
        extra={"location": location, "error": error},
    )


def log_blacklist_summary(summary: BlacklistLoadSummary) -> None:
    """Log blacklist loading summary.

    Args:
        summary: Aggregated per-source results.
    """
    logger = logging.getLogger(__name__)
    logger.info(
        f"Blacklisted domains: {summary.distinct_domains}",
        extra=summary.to_json(),
    )


def log_run_statistics(stats: RunStatistics) -> None:
    """Log final query statistics at shutdown."""
    logger = logging.getLogger(__name__)
    logger.info(stats.render(), extra=stats.to_json())
