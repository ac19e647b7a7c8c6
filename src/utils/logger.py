import os
import sys

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level>"
)


def setup_logger(*, json_logs: bool = False, level: str = "INFO", log_dir: str = "") -> None:
    """Configure loguru for the analyzer.

    Console goes to stderr (stdout carries the result JSON), level from
    LOG_LEVEL env, falling back to `level`. With log_dir set, a rotating file
    additionally captures DEBUG so upstream failures can be traced afterwards.
    """
    console_level = os.getenv("LOG_LEVEL", level).upper()
    logger.remove()

    if json_logs:
        logger.add(sys.stderr, serialize=True, level=console_level)
    else:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    if log_dir:
        logger.add(
            os.path.join(log_dir, "coin_risk_{time:YYYY-MM-DD}.log"),
            rotation="20 MB",
            retention="7 days",
            compression="gz",
            level="DEBUG",
            serialize=json_logs,
        )
