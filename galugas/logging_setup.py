# ==============================================================================
# CONFIGURACIÓN DE LOGS DEL PROCESO
# ==============================================================================
# Loggers con nombre bajo "galugas":
#   galugas.database, galugas.logs, galugas.errors, galugas.client,
#   galugas.performance
#
# Salidas:
#   consola               → todo desde LOG_LEVEL
#   logs/galugas.log      → todo desde LOG_LEVEL (rotativo)
#   logs/slow_routes.log  → solo galugas.performance
# ==============================================================================

import logging
import os
from logging.handlers import RotatingFileHandler

from galugas import config

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

_configured = False


def setup_logging(level: str = None, logs_dir: str = None, to_files: bool = True) -> logging.Logger:
    """
    Configura el logger raíz "galugas" una sola vez por proceso.

    Args:
        level: Nivel (por defecto config.LOG_LEVEL)
        logs_dir: Carpeta de archivos (por defecto config.LOGS_DIR)
        to_files: False en tests para no escribir en disco

    Returns:
        Logger "galugas"
    """
    global _configured
    root = logging.getLogger('galugas')
    if _configured:
        return root

    root.setLevel((level or config.LOG_LEVEL).upper())
    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if to_files:
        logs_dir = logs_dir or config.LOGS_DIR
        os.makedirs(logs_dir, exist_ok=True)

        app_file = RotatingFileHandler(
            os.path.join(logs_dir, 'galugas.log'),
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8',
        )
        app_file.setFormatter(formatter)
        root.addHandler(app_file)

        slow_file = logging.FileHandler(os.path.join(logs_dir, 'slow_routes.log'), encoding='utf-8')
        slow_file.setFormatter(formatter)
        slow_file.setLevel(logging.WARNING)
        logging.getLogger('galugas.performance').addHandler(slow_file)

    _configured = True
    return root
