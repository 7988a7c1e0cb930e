# 日志：stdout 单一 handler，格式与 uvicorn 保持一致

import logging
import sys
from typing import Iterable, Optional

from storefront.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# third-party loggers that flood INFO/DEBUG with per-statement noise
NOISY_LOGGERS = ("sqlalchemy.engine", "multipart", "httpx")


def configure_logging(level: Optional[str] = None, quiet: Iterable[str] = NOISY_LOGGERS) -> logging.Logger:
    """
    Install the stdout handler once (uvicorn already has one, alembic/scripts do not)
    and apply LOG_LEVEL. Loggers in `quiet` are capped at WARNING.
    """
    resolved_level = (level or settings.LOG_LEVEL or "INFO").upper()
    root_logger = logging.getLogger()

    if not root_logger.handlers:
        logging.basicConfig(
            level=resolved_level,
            format=LOG_FORMAT,
            handlers=[logging.StreamHandler(sys.stdout)],
        )
    else:
        root_logger.setLevel(resolved_level)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    app_logger = logging.getLogger("storefront")
    app_logger.debug("logging configured: level=%s env=%s", resolved_level, settings.ENVIRONMENT)
    return app_logger
