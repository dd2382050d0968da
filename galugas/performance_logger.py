# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide el rendimiento de rutas y funciones sin afectar la respuesta.
# Las rutas lentas van al logger "galugas.performance", que setup_logging()
# manda a logs/slow_routes.log.
#
# ACTIVAR/DESACTIVAR: app.config['ENABLE_PROFILING'] (por defecto True)
# ==============================================================================

import logging
import threading
import time
from functools import wraps
from typing import Any, Dict, Optional

from flask import Flask, g, request, session

logger = logging.getLogger('galugas.performance')

# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════

# Umbrales de tiempo (en milisegundos)
THRESHOLD_WARNING = 300
THRESHOLD_CRITICAL = 700

# Nombres legibles de las rutas más usadas
ROUTE_NAMES = {
    'POST /api/auth/login': 'Iniciar sesión',
    'POST /api/auth/logout': 'Cerrar sesión',
    'POST /api/auth/register': 'Registrar usuario',
    'GET /api/dispositivos/': 'Listar dispositivos',
    'GET /api/dispositivos/search': 'Buscar dispositivos',
    'GET /api/dispositivos/<int:dispositivo_id>': 'Ver dispositivo',
    'POST /api/dispositivos/': 'Crear dispositivo',
    'PUT /api/dispositivos/<int:dispositivo_id>': 'Editar dispositivo',
    'DELETE /api/dispositivos/<int:dispositivo_id>': 'Eliminar dispositivo',
    'GET /api/logs/': 'Ver registro de actividad',
    'GET /api/logs/exportar': 'Exportar logs CSV',
    'POST /api/logs/limpiar': 'Purgar logs antiguos',
}


class _FunctionStat:
    __slots__ = ('llamadas', 'errores', 'total_ms', 'max_ms')

    def __init__(self):
        self.llamadas = 0
        self.errores = 0
        self.total_ms = 0.0
        self.max_ms = 0.0


_function_stats: Dict[str, _FunctionStat] = {}
_stats_lock = threading.Lock()


def _get_route_name(method: str, path: str, rule: Optional[str] = None) -> str:
    """Nombre legible de la ruta; si no está mapeada, 'METHOD path'."""
    for key in (f'{method} {path}', f'{method} {rule}' if rule else None):
        if key and key in ROUTE_NAMES:
            return ROUTE_NAMES[key]
    return f'{method} {path}'


# ═══════════════════════════════════════════════════════════════════════════
# 1️⃣ PROFILING DE RUTAS
# ═══════════════════════════════════════════════════════════════════════════

def log_slow_route(method: str, path: str, rule: Optional[str], time_ms: float, user: Any = None) -> None:
    """
    Registra una ruta lenta.

    WARNING a partir de 300 ms, CRITICAL a partir de 700 ms.
    """
    critical = time_ms >= THRESHOLD_CRITICAL
    level = logging.CRITICAL if critical else logging.WARNING
    logger.log(
        level,
        'Ruta %s: %s | Usuario: %s | %s %s | %.0f ms (umbral: %s ms)',
        'MUY LENTA' if critical else 'LENTA',
        _get_route_name(method, path, rule),
        user or 'anónimo',
        method,
        path,
        time_ms,
        THRESHOLD_CRITICAL if critical else THRESHOLD_WARNING,
    )


def init_profiling(app: Flask) -> None:
    """
    Registra los hooks before_request / after_request de medición.

    g.start_time queda disponible para el middleware de auditoría.
    """
    if not app.config.get('ENABLE_PROFILING', True):
        return

    @app.before_request
    def _start_timer():
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        if not hasattr(g, 'start_time') or request.path.startswith('/static'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000
        g.duration_ms = elapsed
        if elapsed >= THRESHOLD_WARNING:
            user = session.get('user') or {}
            rule = str(request.url_rule) if request.url_rule else None
            log_slow_route(request.method, request.path, rule, elapsed, user.get('email'))
        return response


# ═══════════════════════════════════════════════════════════════════════════
# 2️⃣ MÉTRICAS DE FUNCIONES (servicios)
# ═══════════════════════════════════════════════════════════════════════════

def _record_call(func_name: str, elapsed_ms: float, failed: bool) -> None:
    with _stats_lock:
        entry = _function_stats.setdefault(func_name, _FunctionStat())
        entry.llamadas += 1
        entry.total_ms += elapsed_ms
        entry.max_ms = max(entry.max_ms, elapsed_ms)
        if failed:
            entry.errores += 1

    if elapsed_ms >= THRESHOLD_WARNING:
        logger.warning('Función lenta: %s | %.0f ms', func_name, elapsed_ms)


def profile_function(func=None, name: str = None):
    """
    Mide cada llamada a un método de servicio.

    Se acepta con o sin argumentos:
        @profile_function                               → nombre = __qualname__
        @profile_function(name='Exportar logs CSV')     → nombre legible

    Las excepciones se cuentan como errores y se vuelven a lanzar.
    """
    def wrap(target):
        label = name or target.__qualname__

        @wraps(target)
        def measured(*args, **kwargs):
            t0 = time.perf_counter()
            failed = False
            try:
                return target(*args, **kwargs)
            except Exception:
                failed = True
                raise
            finally:
                _record_call(label, (time.perf_counter() - t0) * 1000, failed)

        return measured

    return wrap(func) if callable(func) else wrap


# ═══════════════════════════════════════════════════════════════════════════
# 3️⃣ REPORTE
# ═══════════════════════════════════════════════════════════════════════════

def get_function_stats() -> Dict[str, Dict[str, Any]]:
    """
    Returns:
        {nombre: {calls, errors, avg_time, max_time}}, de mayor a menor
        tiempo acumulado
    """
    with _stats_lock:
        ordenadas = sorted(_function_stats.items(), key=lambda kv: kv[1].total_ms, reverse=True)
        return {
            func_name: {
                'calls': entry.llamadas,
                'errors': entry.errores,
                'avg_time': round(entry.total_ms / entry.llamadas, 2) if entry.llamadas else 0,
                'max_time': round(entry.max_ms, 2),
            }
            for func_name, entry in ordenadas
        }


def reset_stats() -> None:
    with _stats_lock:
        _function_stats.clear()


__all__ = ['init_profiling', 'log_slow_route', 'profile_function', 'get_function_stats', 'reset_stats']
