# utils/logger.py
import logging

formatter = logging.Formatter(
    fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

ROOT_LOGGER = "reservas"


def configure_logging(level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """Configura el logger raíz de la aplicación (idempotente)."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    # Avoid duplicate handlers if called multiple times
    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger hijo de 'reservas' (hereda nivel y handlers)."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
