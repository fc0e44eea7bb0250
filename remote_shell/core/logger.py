import logging
import sys
from logging.handlers import RotatingFileHandler
from remote_shell.core.config import settings


def setup_logger():
    logger = logging.getLogger("remote_shell")
    logger.setLevel(settings.LOG_LEVEL)

    # 재import 시 핸들러 중복 등록 방지
    if logger.handlers:
        return logger

    formatter = logging.Formatter(settings.LOG_FORMAT)

    file_handler = RotatingFileHandler(
        settings.LOG_PATH,
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if settings.LOG_TO_CONSOLE:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


logger = setup_logger()
