import logging

from .config import LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

logger = logging.getLogger("event_intake")


def log_evt(level: str, action: str, **kw):
    """Emit one ``action=... key=value`` line; ``None`` values are dropped."""
    parts = [f"action={action}"]
    for k, v in kw.items():
        if v is None:
            continue
        parts.append(f"{k}={v}")
    msg = " ".join(parts)

    lvl = level.lower()
    if lvl == "debug":
        logger.debug(msg)
    elif lvl == "warning":
        logger.warning(msg)
    elif lvl == "error":
        logger.error(msg)
    else:
        logger.info(msg)
