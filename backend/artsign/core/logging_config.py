# backend/artsign/core/logging_config.py
"""
Configuración centralizada del logging de la aplicación.

Usa LOG_LEVEL, LOG_FORMAT y LOG_FILE_PATH de settings. Se invoca una sola
vez al arrancar la aplicación; los módulos solo hacen
`logger = logging.getLogger(__name__)`.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from artsign.core.config import Settings


def _file_handler(path: Path, formatter: logging.Formatter) -> RotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=2_000_000, backupCount=5, encoding="utf-8")
    handler.setFormatter(formatter)
    return handler


def setup_logging(settings: Settings, log_file: Optional[str] = None) -> None:
    """Configura el logger raíz con salida a consola y, opcionalmente, a fichero rotativo."""
    root = logging.getLogger()
    root.setLevel(settings.LOG_LEVEL.upper())
    if root.handlers:
        return

    formatter = logging.Formatter(settings.LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    file_path = log_file or settings.LOG_FILE_PATH
    if file_path:
        path = Path(file_path)
        if not path.is_absolute():
            path = settings.BASE_DIR / path
        root.addHandler(_file_handler(path, formatter))

    # SQLAlchemy es muy verboso en INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
