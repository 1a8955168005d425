"""
src/logger.py

loguru setup shared by the API, the UI and the CLI.
"""


import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from config import LOG_LEVEL


CONSOLE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | "
    "{extra[run_id]} | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {extra[run_id]} | {message}"

# Records logged outside a run still need the run_id field
logger.configure(extra={"run_id": "-"})


def setup_logger(log_dir: Optional[Union[str, Path]] = None, level: str = LOG_LEVEL) -> Optional[Path]:
    """
    Replace loguru's default sink with a console sink and, optionally, a file sink.

    Args:
        log_dir: Directory for `agent.log`. No file sink when None.
        level: Console level. The file sink always captures DEBUG.

    Returns:
        Path to the log file, or None when only the console is used.
    """

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_dir is None:
        return None

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "agent.log"
    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")

    return log_file
# EOF
