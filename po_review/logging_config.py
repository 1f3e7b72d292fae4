import logging


def configure_logging(level: str = "INFO") -> None:
    """Send ``po_review.*`` loggers to stderr once; repeated calls only change the level."""
    root = logging.getLogger("po_review")
    root.setLevel(level.upper())
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s  %(name)-24s  %(levelname)-5s  %(message)s"))
        root.addHandler(handler)
