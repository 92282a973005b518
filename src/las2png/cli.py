from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Optional, Sequence

from .config import DEFAULT_PIPELINE_CONFIG_ENV, load_pipeline_config
from .errors import Las2PngError
from .observability import configure_logging
from .pipeline import run_pipeline

logger = logging.getLogger(__name__)

_EXAMPLE = "$ las2png -z 15,16,17,18 -e 2450 -d tmp -f *.las"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="las2png",
        description="Generate Mapbox Terrain-RGB tiles from LAS files.",
        epilog=f"Example: {_EXAMPLE}",
    )
    parser.add_argument(
        "inputs", nargs="*", metavar="file", help="Input LAS/LAZ files"
    )
    parser.add_argument(
        "-f",
        "--files",
        dest="files",
        nargs="+",
        action="extend",
        default=[],
        metavar="file",
        help="Input LAS/LAZ files (same as the positional arguments)",
    )
    parser.add_argument(
        "-z",
        "--zoom",
        default=None,
        help='Zoom levels, comma separated values or ranges (default: "15-18")',
    )
    parser.add_argument(
        "-e",
        "--epsg-datum",
        dest="source_crs",
        default=None,
        help='EPSG code or CRS of the input files (default: "2450")',
    )
    parser.add_argument(
        "-d",
        "--directory",
        dest="output_dir",
        default=None,
        help='Output directory (default: ".")',
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help=f"Path to las2png.yaml (defaults to {DEFAULT_PIPELINE_CONFIG_ENV} / config/las2png.yaml).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: INFO)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    files = [*args.inputs, *args.files]
    overrides: dict[str, Any] = {
        "zoom": args.zoom,
        "source_crs": args.source_crs,
        "output_dir": args.output_dir,
        "inputs": files or None,
        "log_level": args.log_level,
    }

    try:
        config = load_pipeline_config(args.config_path, overrides=overrides)
    except (ValueError, FileNotFoundError) as exc:
        configure_logging()
        logger.error("config_invalid", extra={"error": str(exc)})
        return 2

    configure_logging(log_level=config.log_level)

    if not config.inputs:
        parser.print_help(sys.stdout)
        return 1

    try:
        result = run_pipeline(config)
    except (Las2PngError, ValueError) as exc:
        logger.error("pipeline_failed", extra={"error": str(exc)})
        return 2

    print(json.dumps(result.to_dict(), ensure_ascii=True, separators=(",", ":"), sort_keys=True))
    return 0
