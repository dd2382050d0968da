# -*- coding: utf-8 -*-
"""
Traducción de errores de base de datos y formato JSON de errores.
"""
import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from galugas.errors import AppError, handle_database_error


class _DriverError(Exception):
    """Imita a pymysql.err.*: args = (código, mensaje)."""


def _wrap(cls, code, message):
    return cls('INSERT ...', {}, _DriverError(code, message))


@pytest.mark.parametrize('exc,status,message', [
    (_wrap(IntegrityError, 1062, "Duplicate entry 'a@b.com'"), 400, 'El registro ya existe en la base de datos'),
    (_wrap(IntegrityError, 1452, 'Cannot add or update a child row'), 400, 'Referencia a registro inexistente'),
    (IntegrityError('INSERT', {}, Exception('UNIQUE constraint failed: Usuario.email')), 400,
     'El registro ya existe en la base de datos'),
    (IntegrityError('INSERT', {}, Exception('FOREIGN KEY constraint failed')), 400,
     'Referencia a registro inexistente'),
    (_wrap(OperationalError, 1045, 'Access denied'), 500, 'Error de acceso a la base de datos'),
    (_wrap(OperationalError, 2003, "Can't connect to MySQL server"), 503, 'No se puede conectar a la base de datos'),
    (_wrap(ProgrammingError, 1064, 'syntax error'), 500, 'Error de base de datos'),
])
def test_handle_database_error(exc, status, message):
    err = handle_database_error(exc)
    assert isinstance(err, AppError)
    assert err.status_code == status
    assert err.message == message


def test_unknown_db_error_is_not_operational():
    err = handle_database_error(_wrap(ProgrammingError, 1146, "Table doesn't exist"))
    assert err.is_operational is False


def test_app_error_to_dict():
    body = AppError('Campos requeridos faltantes: nombre', 400, details=['nombre']).to_dict()
    assert body['success'] is False
    assert body['details'] == ['nombre']
    assert body['timestamp'].endswith('Z')


def test_unknown_route_is_json_404(client):
    r = client.get('/api/no-existe')
    assert r.status_code == 404
    assert r.get_json()['error'] == 'Ruta no encontrada - GET /api/no-existe'


def test_unexpected_error_hides_stack_outside_development(app, client, container, monkeypatch):
    def _boom(*args, **kwargs):
        raise RuntimeError('fallo interno')

    monkeypatch.setattr(container.categoria_service, 'get_categorias', _boom)
    r = client.get('/api/categorias/')

    assert r.status_code == 500
    body = r.get_json()
    assert body['error'] == 'Error interno del servidor'
    assert 'stack' not in body


def test_health(client):
    body = client.get('/api/health').get_json()
    assert body['status'] == 'OK'
    assert body['database'] == 'connected'


def test_index_lists_endpoints(client):
    body = client.get('/api/').get_json()
    assert body['endpoints']['logs'] == '/api/logs'


def test_security_headers(client):
    r = client.get('/api/health')
    assert r.headers['X-Frame-Options'] == 'SAMEORIGIN'
    assert r.headers['X-Content-Type-Options'] == 'nosniff'
