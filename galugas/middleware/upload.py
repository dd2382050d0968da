# ==============================================================================
# SUBIDA DE IMÁGENES DE DISPOSITIVOS
# ==============================================================================
# - Un solo campo multipart: "imagen"
# - Solo imágenes (JPEG, PNG, GIF, WebP, SVG)
# - Tamaño máximo: MAX_CONTENT_LENGTH de Flask (RequestEntityTooLarge → 400)
# - Nombre en disco: device-{timestamp}-{aleatorio}{ext}
# ==============================================================================

import logging
import os
import random
import time
from typing import Optional

from flask import current_app, request
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from galugas import constants
from galugas.errors import AppError

logger = logging.getLogger('galugas.upload')

UPLOAD_FIELD = 'imagen'


def get_upload_dir() -> str:
    upload_dir = current_app.config['UPLOAD_PATH']
    os.makedirs(upload_dir, exist_ok=True)
    return upload_dir


def _extension(file: FileStorage) -> str:
    original = secure_filename(file.filename or '')
    ext = os.path.splitext(original)[1].lower()
    return ext or constants.MIMETYPE_EXTENSIONS.get(file.mimetype, '')


def generate_filename(file: FileStorage) -> str:
    """device-{ms}-{0..1e9}{ext}"""
    return f'device-{int(time.time() * 1000)}-{random.randint(0, 10 ** 9)}{_extension(file)}'


def save_image(file: Optional[FileStorage]) -> Optional[str]:
    """
    Guarda la imagen en UPLOAD_PATH.

    Args:
        file: Archivo del formulario (puede venir vacío)

    Raises:
        AppError(400): Tipo de archivo no permitido

    Returns:
        Nombre del archivo guardado o None si no se subió nada
    """
    if file is None or not file.filename:
        return None

    if file.mimetype not in constants.ALLOWED_IMAGE_MIMETYPES:
        raise AppError(
            'Tipo de archivo no permitido. Solo se permiten imágenes (JPEG, PNG, GIF, WebP, SVG)',
            400
        )

    filename = generate_filename(file)
    file.save(os.path.join(get_upload_dir(), filename))
    logger.info('Imagen guardada: %s', filename)
    return filename


def save_request_image() -> Optional[str]:
    """Guarda la imagen del campo "imagen" de la petición actual, si hay."""
    return save_image(request.files.get(UPLOAD_FIELD))


def _safe_path(filename: str) -> Optional[str]:
    name = secure_filename(filename or '')
    if not name:
        return None
    return os.path.join(get_upload_dir(), name)


def delete_file(filename: str) -> bool:
    """
    Elimina un archivo subido.

    Returns:
        True si se eliminó, False si no existía o no se pudo borrar
    """
    path = _safe_path(filename)
    if not path or not os.path.exists(path):
        return False
    try:
        os.remove(path)
        return True
    except OSError as e:
        logger.error('No se pudo eliminar %s: %s', filename, e)
        return False
