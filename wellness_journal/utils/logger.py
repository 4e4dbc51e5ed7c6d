import logging
import logging.config
from typing import Optional

from wellness_journal.config import JournalSettings, get_settings


def setup_logging(settings: Optional[JournalSettings] = None) -> logging.Logger:
    settings = settings or get_settings()
    if settings.LOG_TO_FILE:
        settings.LOG_DIR.mkdir(exist_ok=True, parents=True)
    logging.config.dictConfig(settings.get_logging_config())
    return logging.getLogger("wellness_journal")
