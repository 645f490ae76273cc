import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach one stream handler to the package logger. Safe to call more than once."""
    root = logging.getLogger("feeledger")
    root.setLevel(level.upper())
    if not any(getattr(h, "_feeledger", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._feeledger = True  # type: ignore[attr-defined]
        root.addHandler(handler)
