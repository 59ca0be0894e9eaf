"""CLI entry point: python -m cluster_rank.cli run MATRIX"""

import argparse
import json
import signal
import sys
import threading
from pathlib import Path

import structlog
from pydantic import ValidationError

from cluster_rank.clustering.config import ClusteringConfig, load_clustering_config
from cluster_rank.clustering.extraction import ClusterRankResult, run_cluster_rank
from cluster_rank.config.settings import get_settings
from cluster_rank.errors import ClusterRankError, ConfigError
from cluster_rank.logging_config import configure_logging
from cluster_rank.report.formatter import clusters_to_dict, format_clusters


def run_clustering(
    matrix_path: Path,
    config: ClusteringConfig,
    as_json: bool = False,
    output_separator: str = " | ",
) -> ClusterRankResult:
    """Run ClusterRank over ``matrix_path`` and print the clusters to stdout.

    On the main thread SIGINT cancels the run cooperatively.  Signal
    handlers can only be installed there, so from any other thread the
    run is not interruptible this way.
    """
    log = structlog.get_logger()
    stop_event = threading.Event()

    def _request_stop(signum, frame):
        log.warning("cancellation_requested", signal=signum)
        stop_event.set()

    on_main_thread = threading.current_thread() is threading.main_thread()
    previous_handler = signal.signal(signal.SIGINT, _request_stop) if on_main_thread else None
    try:
        log.info(
            "cluster_rank_starting",
            matrix=str(matrix_path),
            **config.model_dump(mode="json"),
        )
        result = run_cluster_rank(matrix_path, config, should_stop=stop_event.is_set)
    finally:
        if previous_handler is not None:
            signal.signal(signal.SIGINT, previous_handler)

    if as_json:
        sys.stdout.write(json.dumps(clusters_to_dict(result.clusters), indent=2) + "\n")
    else:
        sys.stdout.write(format_clusters(result.clusters, output_separator))
    return result


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="cluster_rank.cli",
        description="ClusterRank graph clustering CLI",
    )
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Cluster the graph in an adjacency matrix file")
    run_parser.add_argument("matrix", type=str, help="Adjacency matrix file (labels on the first row)")
    run_parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML run configuration (default: CLUSTER_RANK_CONFIG_PATH or config/clustering.yaml)",
    )
    run_parser.add_argument(
        "--clusters",
        type=int,
        default=None,
        help="Override the number of clusters to extract",
    )
    run_parser.add_argument(
        "--json",
        action="store_true",
        help="Print clusters as JSON instead of a text table",
    )
    run_parser.add_argument(
        "--output-separator",
        type=str,
        default=" | ",
        help="Field separator for the text table (default: ' | ')",
    )
    run_parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Log level (default: CLUSTER_RANK_LOG_LEVEL or INFO)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "run":
        settings = get_settings()
        configure_logging(
            json_output=settings.log_json,
            log_level=args.log_level or settings.log_level,
        )
        log = structlog.get_logger()

        try:
            if args.config:
                config = load_clustering_config(Path(args.config), missing_ok=False)
            else:
                config = load_clustering_config(settings.config_path)
            if args.clusters is not None:
                try:
                    config = ClusteringConfig.model_validate(
                        {**config.model_dump(), "clusters": args.clusters}
                    )
                except ValidationError as e:
                    raise ConfigError(f"invalid --clusters value: {e}") from e
            run_clustering(
                Path(args.matrix),
                config,
                as_json=args.json,
                output_separator=args.output_separator,
            )
        except ClusterRankError as e:
            log.error("cluster_rank_failed", error=str(e), error_type=type(e).__name__, exc_info=True)
            sys.exit(1)


if __name__ == "__main__":
    main()
