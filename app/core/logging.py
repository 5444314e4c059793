import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for the application process"""
    root = logging.getLogger()
    if not any(getattr(h, "_business_manager", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._business_manager = True
        root.addHandler(handler)
    root.setLevel(level.upper())

    # SQL echo is controlled by DB_ECHO, keep the engine logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
