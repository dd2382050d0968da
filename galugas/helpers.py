# ==============================================================================
# HELPERS COMPARTIDOS
# ==============================================================================
# Conversión de tipos, fechas y sobres JSON de respuesta.
# ==============================================================================

import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from flask import jsonify, request


def to_int(v, default=None):
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def to_float(v, default=None):
    try:
        return float(v)
    except (TypeError, ValueError):
        return default


def utc_now() -> datetime.datetime:
    """Fecha/hora actual en UTC sin tzinfo (así se guarda en la BD)."""
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


def format_db_datetime(value: datetime.datetime) -> str:
    """Formato 'YYYY-MM-DD HH:MM:SS' aceptado por MySQL y SQLite."""
    return value.strftime('%Y-%m-%d %H:%M:%S')


def timestamp() -> str:
    """Timestamp ISO-8601 (UTC) para los sobres de respuesta."""
    return utc_now().isoformat(timespec='milliseconds') + 'Z'


def parse_date(value) -> Optional[datetime.date]:
    """
    Convierte 'YYYY-MM-DD' (o ISO completo) a date.

    Returns:
        date o None si el valor no es una fecha válida
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    text = str(value).strip()
    try:
        return datetime.date.fromisoformat(text[:10])
    except ValueError:
        return None


def serialize_value(value: Any) -> Any:
    if isinstance(value, datetime.datetime):
        return value.isoformat()
    if isinstance(value, datetime.date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')
    return value


def serialize_row(row: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Convierte una fila de BD en un dict apto para JSON."""
    if row is None:
        return None
    return {k: serialize_value(v) for k, v in row.items()}


def success_response(
    data: Any = None,
    status: int = 200,
    message: str = None,
    count: int = None,
    **extra
):
    """
    Arma el sobre estándar de éxito de la API.

    {success: true, data, count?, message?, timestamp}
    """
    body: Dict[str, Any] = {'success': True}
    if message is not None:
        body['message'] = message
    if data is not None:
        body['data'] = data
    if count is not None:
        body['count'] = count
    body.update(extra)
    body['timestamp'] = timestamp()
    return jsonify(body), status


def request_data() -> Dict[str, Any]:
    """Cuerpo de la petición: JSON o formulario (multipart / urlencoded)."""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def base_url() -> str:
    """'http://host:puerto' de la petición actual."""
    return request.host_url.rstrip('/')
