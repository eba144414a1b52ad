"""
Command line entry point.

    tsp-annealing --input=points.xlsx --output=result.txt --config=config.txt

Reads the point set and the configuration, anneals, and writes the trace
report. Any invalid input or configuration aborts the run before an output
file is created.
"""

import sys
import time

from loguru import logger

from .data import format_report, read_points, write_result
from .errors import ConfigurationError, InputShapeError, PreconditionError
from .sa import solve
from .setup import configure_logger, get_script_arguments, load_config


def main(argv=None) -> int:
    start = time.perf_counter()
    args = get_script_arguments(argv)
    configure_logger(args.log_level)

    try:
        points = read_points(args.input)
        config = load_config(args.config)
        logger.info(
            f"Loaded {points.size(0)} points of dimension {points.size(1)} "
            f"from {args.input}"
        )
        logger.info(
            f"Annealing with {config.generation_label} moves and "
            f"{config.cooling_method}"
        )
        result = solve(points, config, progress=args.progress)
    except (ConfigurationError, InputShapeError, PreconditionError) as exc:
        logger.error(f"{type(exc).__name__}: {exc}")
        return 1
    except OSError as exc:
        logger.error(f"Cannot read input: {exc}")
        return 1

    report = format_report(result, elapsed=time.perf_counter() - start)
    try:
        write_result(args.output, report)
    except OSError as exc:
        logger.error(f"Failed to write {args.output}: {exc}")
        return 1

    logger.info(f"Path length = {result.cost:.6f}, result written to {args.output}")
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
