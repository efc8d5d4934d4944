"""Log setup for the config builder. Records can carry the wizard session and reference store they concern."""
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [session=%(session_id)s store=%(store_id)s] - %(message)s"


class ContextFormatter(logging.Formatter):
    """Formats records that may or may not have been logged with extra={"session_id", "store_id"}."""

    def format(self, record):
        # uvicorn, sqlalchemy and startup logs never set these
        for name in ("session_id", "store_id"):
            if not hasattr(record, name):
                setattr(record, name, "-")
        return super().format(record)


def configure_logging(level: str = "INFO") -> None:
    """Send every log record to stdout at the configured LOG_LEVEL."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter(LOG_FORMAT))
    logging.basicConfig(level=level.upper(), handlers=[handler])
