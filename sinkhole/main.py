"""Main entry point for the DNS sinkhole."""

import logging
import signal
import sys
import threading

from sinkhole.config import Config, read_source_locations
from sinkhole.services.blacklist_loader import load_blacklist, summarize
from sinkhole.services.classifier import QueryClassifier
from sinkhole.services.logger import (
    StatusLine,
    log_blacklist_summary,
    log_run_statistics,
    setup_logging,
)
from sinkhole.services.pipeline import QueryPipeline
from sinkhole.services.reporter import QueryReporter
from sinkhole.services.server import SinkholeServer
from sinkhole.services.statistics import StatisticsTracker
from sinkhole.services.upstream import UpstreamResolver


logger = logging.getLogger(__name__)


def build_pipeline(
    config: Config, classifier: QueryClassifier, status_line: StatusLine | None = None
) -> QueryPipeline:
    """Wire the per-query pipeline from configuration.

    Args:
        config: Application configuration.
        classifier: Classifier holding the loaded blacklist.
        status_line: Console status line for simple log mode.

    Returns:
        QueryPipeline: Ready-to-serve pipeline.
    """
    upstream = UpstreamResolver(
        server=config.upstream_server,
        port=config.upstream_port,
        timeout=config.upstream_timeout,
    )
    reporter = QueryReporter(
        status_line=status_line,
        log_queries=config.log_mode == "full",
    )

    return QueryPipeline(
        classifier=classifier,
        upstream=upstream,
        statistics=StatisticsTracker(),
        reporter=reporter,
    )


def wait_for_shutdown() -> None:
    """Block until SIGINT or SIGTERM is received."""
    stop_event = threading.Event()

    def _handle_signal(signum, frame):
        logger.info(f"Received {signal.Signals(signum).name}, shutting down")
        stop_event.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    while not stop_event.is_set():
        stop_event.wait(0.5)


def main() -> int:
    """Main execution function.

    Returns:
        int: Exit code (0 for clean shutdown, 1 for fatal error).
    """
    setup_logging()
    logger.info("Starting DNS sinkhole")

    try:
        config = Config.from_env()
        setup_logging(verbose=config.verbose)

        # Missing sources file is fatal (ConfigMissingError)
        locations = read_source_locations(config.blacklist_sources_file)
        logger.info(f"Configuration loaded: {len(locations)} blacklist sources configured")

        blacklist, results = load_blacklist(
            locations, timeout=config.blacklist_fetch_timeout
        )
        log_blacklist_summary(summarize(blacklist, results))

        status_line = StatusLine() if config.log_mode == "simple" else None
        pipeline = build_pipeline(config, QueryClassifier(blacklist), status_line)

        server = SinkholeServer(
            pipeline,
            address=config.listen_address,
            port=config.listen_port,
            enable_tcp=config.enable_tcp,
        )
        server.start()

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1

    try:
        wait_for_shutdown()
    finally:
        server.stop()
        pipeline.reporter.close()
        if status_line is not None:
            status_line.close()
        log_run_statistics(pipeline.statistics.snapshot())

    return 0


if __name__ == "__main__":
    sys.exit(main())
