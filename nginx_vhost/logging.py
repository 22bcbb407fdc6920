"""
Logging for nginx-vhost.

Example:
    from nginx_vhost.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Rendering vhost")
    logger.warning("IPv6 requested but host has no IPv6 address")
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

VHOST_THEME = Theme({
    "log.time": "dim cyan",
    "log.level.debug": "dim blue",
    "log.level.info": "green",
    "log.level.warning": "yellow",
    "log.level.error": "bold red",
    "log.level.critical": "bold white on red",
    "vhost.success": "bold green",
    "vhost.action.create": "green",
    "vhost.action.update": "yellow",
    "vhost.action.delete": "red",
    "vhost.reload": "cyan",
})

console = Console(theme=VHOST_THEME, stderr=True)

_initialized = False


def setup_logging(
    level: str = "INFO",
    show_time: bool = True,
    show_path: bool = False,
    rich_tracebacks: bool = True,
) -> None:
    """
    init nginx-vhost logging

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        show_time: Show timestamps in log output
        show_path: Show file path in log output
        rich_tracebacks: Use rich formatting for tracebacks

    Note:
        Only the first call installs the handler. Later calls just
        adjust the root level, so the CLI can honour --log-level after
        module loggers were created at import time.
    """
    global _initialized

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if _initialized:
        logging.getLogger().setLevel(numeric_level)
        return

    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=rich_tracebacks,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a given module.

    Args:
        name: Logger name (typically __name__)
    """
    if not _initialized:
        setup_logging()

    return logging.getLogger(name)


class VhostLogger:
    """
    Wraps a standard logger with console helpers for plan/apply output.
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)
        self.console = console

    def debug(self, message: str, *args, **kwargs) -> None:
        self.logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs) -> None:
        self.logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs) -> None:
        self.logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs) -> None:
        self.logger.error(message, *args, **kwargs)

    def success(self, message: str) -> None:
        """Print a success line."""
        self.console.print(f"[vhost.success]✓[/vhost.success] {escape(message)}")

    def action(self, action: str, resource_id: str, details: Optional[str] = None) -> None:
        """
        Print a resource action (create/update/delete/reload).

        Args:
            action: Action type
            resource_id: Resource identifier
            details: Optional details about the action
        """
        symbols = {
            "create": "+",
            "update": "~",
            "delete": "-",
            "reload": "⟳",
            "restart": "↻",
        }
        symbol = symbols.get(action.lower(), "•")
        style = f"vhost.action.{action.lower()}"
        if action.lower() in ("reload", "restart"):
            style = "vhost.reload"

        msg = f"[{style}]{symbol}[/{style}] {escape(resource_id)}"
        if details:
            msg += f" [dim]({escape(details)})[/dim]"

        self.console.print(msg)


def get_vhost_logger(name: str) -> VhostLogger:
    """
    Get a VhostLogger instance for the given module.

    Example:
        logger = get_vhost_logger(__name__)
        logger.action("reload", "svc:nginx")
    """
    return VhostLogger(name)
