"""
Console logging for the hwstats command line.
"""
import logging

from rich.logging import RichHandler


def configure_logging(level: str = "WARNING", verbose: bool = False):
    """Install a RichHandler on the root logger.

    Args:
        level: Log level name used when verbose is off
        verbose: Force DEBUG so resolver fallbacks are visible
    """
    resolved = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=resolved,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
