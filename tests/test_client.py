# -*- coding: utf-8 -*-
"""
Cliente web (tienda + panel) con la API simulada.
"""
import json
from unittest import mock

import pytest
import requests
from flask import session

from galugas.client.api_client import API_COOKIE_KEY, APIClient, APIError
from galugas.client.main import create_client_app

ADMIN = {'usuario_id': 1, 'primer_nombre': 'Admin', 'primer_apellido': 'Galugas',
         'email': 'admin@galugas.com', 'rol_nombre': 'Administrador'}
VENDEDOR = dict(ADMIN, usuario_id=2, primer_nombre='Vera', rol_nombre='Vendedor')
USUARIO = dict(ADMIN, usuario_id=3, primer_nombre='Ana', rol_nombre='Usuario')

DISPOSITIVO = {
    'dispositivo_id': 7, 'nombre': 'Galaxy S24', 'precio': 999.99, 'descripcion': 'Gama alta',
    'marca_nombre': 'Samsung', 'categoria_nombre': 'Smartphones', 'fechaLanzamiento': '2024-01-17',
    'imagen_url': None, 'procesador': 'Snapdragon', 'ram_gb': 12,
}


@pytest.fixture
def api():
    fake = mock.MagicMock()
    fake.base_url = 'http://api.test/api'
    fake.get_dispositivos.return_value = {'success': True, 'data': [DISPOSITIVO]}
    fake.get_categorias.return_value = {'success': True, 'data': []}
    fake.get_marcas.return_value = {'success': True, 'data': []}
    fake.get_informacion_tecnica.return_value = {'success': True, 'data': []}
    fake.get_dispositivo_by_id.return_value = {'success': True, 'data': DISPOSITIVO}
    fake.search_dispositivos.return_value = {'success': True, 'data': [DISPOSITIVO]}
    fake.get_estadisticas.return_value = {'success': True, 'data': {'total': 1, 'precioPromedio': 999.99}}
    fake.get_log_stats.return_value = {'success': True, 'data': {'totalActividades': 3}}
    fake.get_usuarios.return_value = {'success': True, 'data': [ADMIN]}
    fake.get_logs.return_value = {
        'success': True, 'data': [],
        'paginacion': {'pagina': 1, 'limite': 50, 'total': 0, 'paginas': 0},
    }
    return fake


@pytest.fixture
def web(api):
    app = create_client_app({'TESTING': True, 'LOG_TO_FILES': False, 'SECRET_KEY': 'test'}, api_client=api)
    with app.test_client() as c:
        yield c


def _as(web, user):
    with web.session_transaction() as s:
        s['user'] = user
        s[API_COOKIE_KEY] = 'cookie-api'


def _flashes(web):
    with web.session_transaction() as s:
        return [m for _, m in s.get('_flashes', [])]


# ═══════════════════════════════════════════════════════════════════════════
# TIENDA
# ═══════════════════════════════════════════════════════════════════════════

def test_index_shows_latest(web, api):
    r = web.get('/')
    assert r.status_code == 200
    assert 'Galaxy S24' in r.get_data(as_text=True)
    api.get_dispositivos.assert_called_once_with({
        'limit': 8, 'orderBy': 'fechaLanzamiento', 'orderDirection': 'DESC',
    })


def test_catalogo_passes_filters_and_survives_api_errors(web, api):
    r = web.get('/catalogo?categoria_id=2&orderBy=precio&ignorado=1')
    assert r.status_code == 200
    api.get_dispositivos.assert_called_with({'categoria_id': '2', 'orderBy': 'precio'})

    api.get_dispositivos.side_effect = APIError(500, 'Error de base de datos')
    r = web.get('/catalogo')
    assert r.status_code == 200
    assert 'No se encontraron productos' in r.get_data(as_text=True)


def test_producto_not_found_redirects(web, api):
    api.get_dispositivo_by_id.side_effect = APIError(404, 'Dispositivo no encontrado')
    r = web.get('/producto/99')
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/catalogo')
    assert 'Producto no encontrado' in _flashes(web)


def test_producto_detail(web):
    body = web.get('/producto/7').get_data(as_text=True)
    assert 'Galaxy S24' in body
    assert 'Snapdragon' in body


def test_buscar(web, api):
    r = web.get('/buscar?q=')
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/catalogo')

    r = web.get('/buscar?q=galaxy')
    assert r.status_code == 200
    api.search_dispositivos.assert_called_once_with('galaxy')


def test_contact_flash(web):
    r = web.post('/contact', data={'nombre': 'Ana', 'email': 'ana@x.com', 'mensaje': 'Hola'})
    assert r.status_code == 302
    assert '¡Mensaje enviado correctamente! Te contactaremos pronto.' in _flashes(web)


def test_network_error_renders_error_page(web, api):
    api.get_dispositivo_by_id.side_effect = APIError(503, 'No se pudo conectar con la API', is_network_error=True)
    r = web.get('/producto/7')
    assert r.status_code == 503
    assert 'No se pudo conectar con la API' in r.get_data(as_text=True)


# ═══════════════════════════════════════════════════════════════════════════
# AUTENTICACIÓN
# ═══════════════════════════════════════════════════════════════════════════

def test_login_redirects_by_role(web, api):
    api.login.return_value = {'success': True, 'data': ADMIN}
    r = web.post('/auth/login', data={'email': 'admin@galugas.com', 'password': 'x'})
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/admin/')
    with web.session_transaction() as s:
        assert s['user']['rol_nombre'] == 'Administrador'


def test_login_returns_to_requested_page(web, api):
    web.get('/auth/profile')
    api.login.return_value = {'success': True, 'data': USUARIO}
    r = web.post('/auth/login', data={'email': 'ana@galugas.com', 'password': 'x'})
    assert r.headers['Location'].endswith('/auth/profile')


def test_login_failure_flashes_api_message(web, api):
    api.login.side_effect = APIError(401, 'Credenciales inválidas')
    r = web.post('/auth/login', data={'email': 'a@b.com', 'password': 'x'})
    assert r.headers['Location'].endswith('/auth/login')
    assert 'Credenciales inválidas' in _flashes(web)


def test_logout_clears_session(web, api):
    _as(web, USUARIO)
    r = web.post('/auth/logout')
    assert r.status_code == 302
    api.logout.assert_called_once()
    with web.session_transaction() as s:
        assert 'user' not in s and API_COOKIE_KEY not in s


# ═══════════════════════════════════════════════════════════════════════════
# PANEL
# ═══════════════════════════════════════════════════════════════════════════

def test_admin_requires_login(web):
    r = web.get('/admin/')
    assert r.status_code == 302
    assert '/auth/login' in r.headers['Location']
    with web.session_transaction() as s:
        assert s['return_to'] == '/admin/'


def test_usuario_bounced_from_panel(web, api):
    _as(web, USUARIO)
    r = web.get('/admin/')
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/')
    assert 'No tienes permisos para acceder a esta página' in _flashes(web)
    api.get_estadisticas.assert_not_called()


def test_vendedor_dashboard_skips_admin_data(web, api):
    _as(web, VENDEDOR)
    r = web.get('/admin/')
    assert r.status_code == 200
    api.get_log_stats.assert_not_called()
    assert web.get('/admin/logs').status_code == 302


def test_admin_dashboard(web, api):
    _as(web, ADMIN)
    assert web.get('/admin/').status_code == 200
    api.get_log_stats.assert_called_once()


def test_expired_api_session_goes_to_login(web, api):
    _as(web, ADMIN)
    api.get_estadisticas.side_effect = APIError(401, 'Acceso no autorizado. Por favor inicie sesión.')
    r = web.get('/admin/')
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/auth/login')
    with web.session_transaction() as s:
        assert 'user' not in s


def test_crear_dispositivo_error_flashes(web, api):
    _as(web, VENDEDOR)
    api.create_dispositivo.side_effect = APIError(400, 'El precio debe ser mayor a 0')
    r = web.post('/admin/dispositivos/crear', data={'nombre': 'X', 'precio': '0'})
    assert r.headers['Location'].endswith('/admin/dispositivos/crear')
    assert 'El precio debe ser mayor a 0' in _flashes(web)
    api.create_dispositivo.assert_called_once_with({'nombre': 'X', 'precio': '0'}, {})


def test_eliminar_requires_admin(web, api):
    _as(web, VENDEDOR)
    web.post('/admin/dispositivos/eliminar/7')
    api.delete_dispositivo.assert_not_called()

    _as(web, ADMIN)
    r = web.post('/admin/dispositivos/eliminar/7')
    api.delete_dispositivo.assert_called_once_with(7)
    assert r.headers['Location'].endswith('/admin/dispositivos')


def test_logs_export_passthrough(web, api):
    _as(web, ADMIN)
    api.export_logs.return_value = (b'ID,Fecha\n1,2024\n', 'attachment; filename=logs_galugas_2024-01-01.csv')
    r = web.get('/admin/logs/exportar?modulo=LOGS')
    assert r.status_code == 200
    assert r.mimetype == 'text/csv'
    assert r.headers['Content-Disposition'] == 'attachment; filename=logs_galugas_2024-01-01.csv'
    api.export_logs.assert_called_once_with({'modulo': 'LOGS'})


# ═══════════════════════════════════════════════════════════════════════════
# PROXIES JSON
# ═══════════════════════════════════════════════════════════════════════════

def test_proxy_health_down(web, api):
    api.health_check.side_effect = APIError(503, 'No se pudo conectar con la API', is_network_error=True)
    r = web.get('/api/health')
    assert r.status_code == 503
    assert r.get_json()['status'] == 'ERROR'


def test_proxy_forwards_status(web, api):
    api.get_dispositivo_by_id.side_effect = APIError(404, 'Dispositivo no encontrado')
    r = web.get('/api/dispositivos/9')
    assert r.status_code == 404
    assert r.get_json() == {'error': 'Dispositivo no encontrado'}


# ═══════════════════════════════════════════════════════════════════════════
# APIClient
# ═══════════════════════════════════════════════════════════════════════════

def _response(status=200, body=None, cookies=None):
    resp = requests.Response()
    resp.status_code = status
    resp._content = json.dumps(body or {}).encode('utf-8')
    resp.headers['content-type'] = 'application/json'
    for name, value in (cookies or {}).items():
        resp.cookies.set(name, value)
    return resp


@pytest.fixture
def ctx_app():
    return create_client_app({'TESTING': True, 'LOG_TO_FILES': False, 'SECRET_KEY': 'test'},
                             api_client=mock.MagicMock(base_url='x'))


def test_api_client_stores_and_forwards_cookie(ctx_app):
    client = APIClient('http://api.test/api', cookie_name='galugas.sid')
    with ctx_app.test_request_context('/'):
        with mock.patch.object(client.session, 'request',
                               return_value=_response(body={'data': 1}, cookies={'galugas.sid': 'abc'})) as req:
            assert client.login('a@b.com', 'x') == {'data': 1}
            assert req.call_args.kwargs.get('cookies') is None

            assert session[API_COOKIE_KEY] == 'abc'

            client.get_current_user()
            assert req.call_args.kwargs['cookies'] == {'galugas.sid': 'abc'}
            assert req.call_args.args == ('GET', 'http://api.test/api/auth/me')


def test_api_client_error_mapping(ctx_app):
    client = APIClient('http://api.test/api')
    with ctx_app.test_request_context('/'):
        with mock.patch.object(client.session, 'request',
                               return_value=_response(403, {'success': False, 'error': 'Prohibido'})):
            with pytest.raises(APIError) as exc:
                client.get_usuarios()
        assert exc.value.status == 403
        assert exc.value.message == 'Prohibido'

        with mock.patch.object(client.session, 'request', side_effect=requests.exceptions.ConnectionError()):
            with pytest.raises(APIError) as exc:
                client.health_check()
        assert exc.value.status == 503
        assert exc.value.is_network_error

        with mock.patch.object(client.session, 'request', side_effect=requests.exceptions.Timeout()):
            with pytest.raises(APIError) as exc:
                client.health_check()
        assert exc.value.status == 504
