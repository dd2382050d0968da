# ==============================================================================
# PROXIES JSON (cliente → API)
# ==============================================================================
# Usados por el JavaScript del navegador para no depender de CORS.
# ==============================================================================

import logging

from flask import Blueprint, jsonify, request

from galugas.client.api_client import APIError
from galugas.client.main import get_api
from galugas.helpers import utc_now

logger = logging.getLogger('galugas.client')

api_proxy_bp = Blueprint('client_api', __name__)


def _proxy_error(e: APIError, what: str):
    logger.error('API Error - %s: %s', what, e.message)
    status = e.status if not e.is_network_error else 503
    return jsonify({'error': e.message or 'Error del servidor'}), status


@api_proxy_bp.route('/dispositivos')
def dispositivos():
    try:
        return jsonify(get_api().get_dispositivos(request.args.to_dict()))
    except APIError as e:
        return _proxy_error(e, 'dispositivos')


@api_proxy_bp.route('/dispositivos/<int:dispositivo_id>')
def dispositivo(dispositivo_id):
    try:
        return jsonify(get_api().get_dispositivo_by_id(dispositivo_id))
    except APIError as e:
        return _proxy_error(e, 'dispositivo detail')


@api_proxy_bp.route('/categorias')
def categorias():
    try:
        return jsonify(get_api().get_categorias())
    except APIError as e:
        return _proxy_error(e, 'categorias')


@api_proxy_bp.route('/marcas')
def marcas():
    try:
        return jsonify(get_api().get_marcas())
    except APIError as e:
        return _proxy_error(e, 'marcas')


@api_proxy_bp.route('/health')
def health():
    try:
        return jsonify(get_api().health_check())
    except APIError as e:
        logger.error('API Health Check Error: %s', e.message)
        return jsonify({
            'status': 'ERROR',
            'message': 'No se puede conectar al servidor API',
            'timestamp': utc_now().isoformat(),
        }), 503
