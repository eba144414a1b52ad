import sys

from loguru import logger


def configure_logger(level: str = "INFO", sink=None) -> None:
    """
    Replace loguru's default handler with the solver's console format.

    Args:
        level: Minimum level shown
        sink: Destination, stderr when omitted
    """
    logger.remove()  # Remove default logger
    logger.add(
        sink if sink is not None else sys.stderr,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "  # Timestamp in green
            "<blue>{file}:{line}</blue> | "  # File and line in blue
            "<level>{message}</level>"
        ),
        colorize=sink is None,
        level=level,
    )
