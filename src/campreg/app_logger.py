import logging, os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DEFAULT_LEVEL = os.getenv("CAMPREG_LOG_LEVEL", "INFO").upper()

def setup_logging():
    # Main app logger
    logger = logging.getLogger("campreg")
    logger.setLevel(getattr(logging, _DEFAULT_LEVEL, logging.INFO))

    # Avoid duplicate console handlers
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter(LOG_FORMAT))
        ch.setLevel(logger.level)
        logger.addHandler(ch)

    logger.propagate = False
    return logger

def get_logger(name: str | None = None) -> logging.Logger:
    base = logging.getLogger("campreg")
    if not name:
        return base
    # accept module paths like "campreg.services.user_notes"
    if name == "campreg" or name.startswith("campreg."):
        name = name.removeprefix("campreg").lstrip(".")
        return base.getChild(name) if name else base
    return base.getChild(name)

logger = setup_logging()
