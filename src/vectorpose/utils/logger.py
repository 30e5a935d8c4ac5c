"""
Structured console logger

Every record prints as one headline plus a tree of `key: value` details:

    [14:23:45] PLAYBACK  ✓ Action started
               ├─ action: shuffle
               └─ from_state: center

Modules bind a category once at import time:

    log = get_logger().for_category(LogCategory.PLAYBACK)
    log.info("Action started", action=name)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from vectorpose.models.enums import LogLevel, LogCategory

# Receives (timestamp, level, category, message) for every emitted record
LogSink = Callable[[str, str, str, str], None]

DETAIL_INDENT = " " * 11
CATEGORY_WIDTH = 9


class Ansi:
    """Escape codes used by the console renderer"""
    RESET = '\033[0m'
    DIM = '\033[2m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'
    WHITE = '\033[37m'
    BRIGHT_BLUE = '\033[94m'
    BRIGHT_MAGENTA = '\033[95m'
    BRIGHT_CYAN = '\033[96m'
    BRIGHT_WHITE = '\033[97m'
    BRIGHT_YELLOW = '\033[93m'


CATEGORY_COLORS = {
    LogCategory.CONFIG: Ansi.CYAN,
    LogCategory.MARKUP: Ansi.BRIGHT_BLUE,
    LogCategory.ROUTE: Ansi.BRIGHT_CYAN,
    LogCategory.PLAYBACK: Ansi.BRIGHT_YELLOW,
    LogCategory.TWEEN: Ansi.MAGENTA,
    LogCategory.EVENT: Ansi.BRIGHT_MAGENTA,
    LogCategory.SYSTEM: Ansi.BRIGHT_WHITE,
    LogCategory.GENERAL: Ansi.WHITE,
}

# level → (symbol, color)
LEVEL_STYLES = {
    LogLevel.DEBUG: ('·', Ansi.DIM),
    LogLevel.INFO: ('✓', Ansi.GREEN),
    LogLevel.WARN: ('⚠', Ansi.YELLOW),
    LogLevel.ERROR: ('✗', Ansi.RED),
}

LEVEL_ORDER = (LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARN, LogLevel.ERROR)


@dataclass
class LogRecord:
    category: LogCategory
    level: LogLevel
    message: str
    details: List[str] = field(default_factory=list)
    created: datetime = field(default_factory=datetime.now)

    def flattened(self) -> str:
        """Headline with details folded in, for single-line consumers"""
        if not self.details:
            return self.message
        return f"{self.message} ({', '.join(self.details)})"


class Logger:
    """
    Category-tagged console logger

    Args:
        min_level: Records below this level are dropped (console and sink)
        use_colors: Emit ANSI colors; disable when output goes to a file
    """

    def __init__(self, min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
        self.min_level = min_level
        self.use_colors = use_colors
        self._sink: Optional[LogSink] = None

    def set_sink(self, sink: Optional[LogSink]) -> None:
        """
        Forward every emitted record to an extra consumer

        Args:
            sink: Callable receiving (iso_timestamp, level_name, category_name, message),
                  or None to detach the current sink
        """
        self._sink = sink

    def enabled_for(self, level: LogLevel) -> bool:
        return LEVEL_ORDER.index(level) >= LEVEL_ORDER.index(self.min_level)

    def log(
        self,
        category: LogCategory,
        message: str,
        level: LogLevel = LogLevel.INFO,
        details: Optional[list] = None,
        **kwargs
    ):
        """
        Emit one record

        Args:
            category: Log category (PLAYBACK, ROUTE, ...)
            message: Headline text
            level: Severity
            details: Preformatted detail lines
            **kwargs: Rendered as `key: value` detail lines after `details`
        """
        if not self.enabled_for(level):
            return

        record = LogRecord(
            category=category,
            level=level,
            message=message,
            details=list(details or []) + [f"{k}: {v}" for k, v in kwargs.items()],
        )

        print("\n".join(self._render(record)))

        if self._sink:
            self._sink(record.created.isoformat(), level.name, category.name, record.flattened())

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{Ansi.RESET}" if self.use_colors else text

    def _render(self, record: LogRecord) -> List[str]:
        symbol, level_color = LEVEL_STYLES[record.level]
        category = record.category.name.ljust(CATEGORY_WIDTH)
        lines = [
            " ".join((
                record.created.strftime('[%H:%M:%S]'),
                self._paint(category, CATEGORY_COLORS.get(record.category, Ansi.WHITE)),
                self._paint(symbol, level_color),
                self._paint(record.message, level_color),
            ))
        ]
        last = len(record.details) - 1
        for i, detail in enumerate(record.details):
            branch = "└─" if i == last else "├─"
            lines.append(f"{DETAIL_INDENT}{self._paint(branch, Ansi.DIM)} {detail}")
        return lines

    def debug(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.DEBUG, **kw)
    def info(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.INFO, **kw)
    def warn(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.WARN, **kw)
    def error(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.ERROR, **kw)

    def for_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self, category)


class BoundLogger:
    """Logger with a default category; `category=` still overrides per call"""

    def __init__(self, base: Logger, category: LogCategory):
        self._base = base
        self._category = category

    def log(self, message: str, level: LogLevel = LogLevel.INFO, category: Optional[LogCategory] = None, **kw):
        self._base.log(category or self._category, message, level, **kw)

    def debug(self, message: str, **kw): self.log(message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self.log(message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self.log(message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self.log(message, LogLevel.ERROR, **kw)

    def with_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self._base, category)


_logger = Logger()


def get_logger() -> Logger:
    return _logger


def get_category_logger(category: LogCategory) -> BoundLogger:
    return _logger.for_category(category)


def configure_logger(min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
    """
    Reconfigure the shared logger in place

    Bound loggers created at import time keep pointing at it and pick up
    the new settings.
    """
    _logger.min_level = min_level
    _logger.use_colors = use_colors
