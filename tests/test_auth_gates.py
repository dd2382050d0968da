# -*- coding: utf-8 -*-
"""
Compuertas de rol: 401 sin sesión, 403 con rol insuficiente, el handler
no se ejecuta y queda un log ACCESO_DENEGADO.
"""
import pytest

from galugas import constants
from galugas.middleware.auth import MSG_ADMIN_REQUIRED, MSG_UNAUTHORIZED, MSG_VENDEDOR_REQUIRED


def test_anonymous_gets_401_and_denied_log(client, find_logs):
    r = client.get('/api/usuarios/')
    assert r.status_code == 401
    body = r.get_json()
    assert body['success'] is False
    assert body['error'] == MSG_UNAUTHORIZED
    assert 'timestamp' in body

    denied = find_logs(accion=constants.ACCION_ACCESO_DENEGADO)
    assert len(denied) == 1
    assert denied[0]['tipo_usuario'] == constants.ROLE_SISTEMA
    assert denied[0]['modulo'] == constants.MODULO_SEGURIDAD


def test_usuario_blocked_from_admin_route_handler_not_run(as_usuario, container, catalogo, find_logs):
    r = as_usuario.delete(f"/api/categorias/{catalogo['categoria_id']}")

    assert r.status_code == 403
    assert r.get_json()['error'] == MSG_ADMIN_REQUIRED
    # La categoría sigue activa: el handler nunca corrió
    assert container.categoria_repo.find_by_id(catalogo['categoria_id'], active_only=True) is not None

    denied = find_logs(accion=constants.ACCION_ACCESO_DENEGADO)
    assert len(denied) == 1
    assert denied[0]['tipo_usuario'] == constants.ROLE_USUARIO
    assert denied[0]['metadata']['ruta'] == f"/api/categorias/{catalogo['categoria_id']}"


def test_usuario_cannot_create_dispositivo(as_usuario, container, catalogo):
    r = as_usuario.post('/api/dispositivos/', json={
        'nombre': 'Pixel 8', 'precio': 699, 'fechaLanzamiento': '2023-10-04', **catalogo,
    })
    assert r.status_code == 403
    assert r.get_json()['error'] == MSG_VENDEDOR_REQUIRED
    assert container.dispositivo_service.get_dispositivos({}) == []


def test_vendedor_can_create_but_not_delete(as_vendedor, catalogo):
    r = as_vendedor.post('/api/dispositivos/', json={
        'nombre': 'Pixel 8', 'precio': 699, 'fechaLanzamiento': '2023-10-04', **catalogo,
    })
    assert r.status_code == 201
    dispositivo_id = r.get_json()['data']['id']

    r = as_vendedor.delete(f'/api/dispositivos/{dispositivo_id}')
    assert r.status_code == 403

    assert as_vendedor.get(f'/api/dispositivos/{dispositivo_id}').status_code == 200


@pytest.mark.parametrize('path', ['/api/logs/', '/api/logs/estadisticas', '/api/logs/exportar', '/api/usuarios/'])
def test_vendedor_blocked_from_admin_only(as_vendedor, path):
    assert as_vendedor.get(path).status_code == 403


def test_admin_passes_every_gate(as_admin):
    assert as_admin.get('/api/usuarios/').status_code == 200
    assert as_admin.get('/api/logs/').status_code == 200
    assert as_admin.get('/api/logs/mis-actividades').status_code == 200


def test_own_resource_gate(client, make_user, login):
    propio = make_user(constants.ROL_ID_USUARIO, 'ana@galugas.com')
    otro = make_user(constants.ROL_ID_USUARIO, 'beto@galugas.com', nombre='Beto')
    login('ana@galugas.com')

    assert client.get(f'/api/usuarios/{propio}/actividad').status_code == 200
    r = client.get(f'/api/usuarios/{otro}/actividad')
    assert r.status_code == 403
    assert r.get_json()['error'] == 'No tiene permisos para acceder a este recurso'


def test_check_admin_flag(as_vendedor):
    r = as_vendedor.get('/api/auth/check-admin')
    assert r.status_code == 200
    assert r.get_json()['isAdmin'] is False
