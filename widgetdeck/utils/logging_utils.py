"""Logging utilities for widgetdeck.

Standard Logger Initialization Pattern
--------------------------------------
Modules use the standard Python pattern:

    import logging
    logger = logging.getLogger(__name__)

Configuration happens once at the application level. The Textual shell owns
the terminal, so everything goes to a rotating file under the config
directory instead of stderr.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Max log file size: 5MB, keep 2 backups
_MAX_LOG_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 2

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _log_dir() -> Path:
    # Imported lazily so logging can be configured before config is touched
    from widgetdeck.config.settings import get_config_dir

    return get_config_dir()


def setup_tui_logging(module_name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Set up logging for the Textual shell.

    The root logger is set to WARNING to avoid noise from third-party libs.
    widgetdeck.* loggers go through at ``level`` (INFO by default).

    Returns:
        The logger for ``module_name``
    """
    from widgetdeck.config.constants import LOG_FILENAME
    from widgetdeck.config.settings import get_log_level

    try:
        log_file = _log_dir() / LOG_FILENAME

        if not logging.getLogger().handlers:
            handler = RotatingFileHandler(
                log_file, maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT
            )
            handler.setFormatter(logging.Formatter(_FORMAT))
            logging.basicConfig(level=logging.WARNING, handlers=[handler])

        logging.getLogger("widgetdeck").setLevel(level or get_log_level())
        return logging.getLogger(module_name)

    except OSError as e:
        # Logging is what failed, so stderr is the only place left to say so
        print(f"Warning: TUI logging setup failed: {e}", file=sys.stderr)
        return logging.getLogger(module_name)
