import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from app.config.config import settings


def _file_handler(path: Path, level: int, formatter: logging.Formatter):
    handler = RotatingFileHandler(
        path,
        maxBytes=1024 * 1024,  # 1MB
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logger(name: str = "ecotrack"):
    """
    Return the application logger.

    Logs go to the console, to ``app.log`` and, for errors only, to
    ``errors.log`` under ``settings.LOG_DIR``. Handlers are attached once.
    """
    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    level = logging.DEBUG if settings.DEBUG else getattr(
        logging, settings.LOG_LEVEL.upper(), logging.INFO
    )

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        logger.addHandler(_file_handler(log_dir / "app.log", level, formatter))
        logger.addHandler(_file_handler(log_dir / "errors.log", logging.ERROR, formatter))

    return logger
