# -*- coding: utf-8 -*-
"""
Registro, login, perfil y administración de usuarios.
"""
from werkzeug.security import check_password_hash

from galugas import constants

PASSWORD = 'secreto123'


def _register(client, **overrides):
    data = {
        'primer_nombre': 'Lucía',
        'primer_apellido': 'Gómez',
        'email': 'Lucia@Galugas.com',
        'contrasena': 'clave123',
        **overrides,
    }
    return client.post('/api/auth/register', json=data)


def test_register_and_login(client, container, find_logs):
    r = _register(client)
    assert r.status_code == 201
    body = r.get_json()
    assert body['message'] == 'Usuario registrado exitosamente'
    assert 'contrasena' not in body['data']
    assert body['data']['email'] == 'lucia@galugas.com'

    stored = container.user_repo.find_by_email('lucia@galugas.com')
    assert stored['rol_nombre'] == constants.ROLE_USUARIO
    assert check_password_hash(stored['contrasena'], 'clave123')

    registros = find_logs(accion=constants.ACCION_REGISTRO_USUARIO)
    assert registros[0]['metadata'] == {'usuario_id': body['data']['id']}

    r = client.post('/api/auth/login', json={'email': 'lucia@galugas.com', 'password': 'clave123'})
    assert r.status_code == 200
    user = r.get_json()['data']
    assert user['rol_nombre'] == constants.ROLE_USUARIO
    assert 'contrasena' not in user

    me = client.get('/api/auth/me').get_json()['data']
    assert me['email'] == 'lucia@galugas.com'


def test_register_validation(client):
    r = _register(client, email='no-es-email')
    assert r.get_json()['error'] == 'Email inválido'

    r = _register(client, contrasena='123')
    assert r.get_json()['error'] == 'La contraseña debe tener al menos 6 caracteres'

    r = client.post('/api/auth/register', json={'email': 'x@y.com'})
    assert r.status_code == 400
    assert r.get_json()['error'].startswith('Campos requeridos faltantes')

    assert _register(client).status_code == 201
    r = _register(client, email='lucia@galugas.com')
    assert r.status_code == 400
    assert r.get_json()['error'] == 'Ya existe un usuario con ese email'


def test_failed_login_logged_as_sistema(client, make_user, find_logs):
    make_user(email='ana@galugas.com')

    r = client.post('/api/auth/login', json={'email': 'ana@galugas.com', 'password': 'incorrecta'})
    assert r.status_code == 401
    assert r.get_json()['error'] == 'Credenciales inválidas'

    r = client.post('/api/auth/login', json={'email': 'ana@galugas.com'})
    assert r.status_code == 400

    fallidos = find_logs(accion=constants.ACCION_ERROR_AUTENTICACION)
    assert len(fallidos) == 2
    assert all(l['tipo_usuario'] == constants.ROLE_SISTEMA for l in fallidos)
    assert 'ana@galugas.com' in fallidos[0]['descripcion']


def test_inactive_user_cannot_login(client, make_user):
    make_user(email='baja@galugas.com', estado_id=constants.ESTADO_INACTIVO)
    r = client.post('/api/auth/login', json={'email': 'baja@galugas.com', 'password': PASSWORD})
    assert r.status_code == 401


def test_session_cookie(client, make_user):
    make_user(email='ana@galugas.com')
    r = client.post('/api/auth/login', json={'email': 'ana@galugas.com', 'password': PASSWORD})
    cookie = r.headers['Set-Cookie']
    assert cookie.startswith('galugas.sid=')
    assert 'HttpOnly' in cookie


def test_update_profile_refreshes_session(as_usuario, make_user):
    make_user(email='otro@galugas.com', nombre='Otro')

    r = as_usuario.put('/api/auth/profile', json={'email': 'otro@galugas.com'})
    assert r.get_json()['error'] == 'El email ya está en uso'

    r = as_usuario.put('/api/auth/profile', json={'primer_nombre': 'Anabel', 'rol_id': 1})
    assert r.status_code == 200
    assert r.get_json()['data']['rol_nombre'] == constants.ROLE_USUARIO

    me = as_usuario.get('/api/auth/me').get_json()['data']
    assert me['primer_nombre'] == 'Anabel'


def test_change_password(as_usuario, client):
    r = as_usuario.put('/api/auth/change-password', json={'currentPassword': 'mala', 'newPassword': 'nueva123'})
    assert r.get_json()['error'] == 'Contraseña actual incorrecta'

    r = as_usuario.put('/api/auth/change-password', json={'current_password': PASSWORD, 'new_password': 'corta'})
    assert r.status_code == 400

    r = as_usuario.put('/api/auth/change-password', json={'currentPassword': PASSWORD, 'newPassword': 'nueva123'})
    assert r.status_code == 200

    as_usuario.post('/api/auth/logout')
    r = client.post('/api/auth/login', json={'email': 'cliente@galugas.com', 'password': 'nueva123'})
    assert r.status_code == 200


def test_logout_clears_session(as_usuario):
    assert as_usuario.post('/api/auth/logout').status_code == 200
    assert as_usuario.get('/api/auth/me').status_code == 401


# ═══════════════════════════════════════════════════════════════════════════
# ADMINISTRACIÓN DE USUARIOS
# ═══════════════════════════════════════════════════════════════════════════

def test_admin_changes_role_and_status(as_admin, make_user, container):
    usuario_id = make_user(email='ana@galugas.com')

    r = as_admin.put(f'/api/usuarios/{usuario_id}/role', json={'rol_id': constants.ROL_ID_VENDEDOR})
    assert r.status_code == 200
    assert container.user_service.get_usuario_by_id(usuario_id)['rol_nombre'] == constants.ROLE_VENDEDOR

    r = as_admin.put(f'/api/usuarios/{usuario_id}/role', json={'rol_id': 99})
    assert r.get_json()['error'] == 'Rol inválido'

    r = as_admin.put(f'/api/usuarios/{usuario_id}/role', json={})
    assert r.get_json()['error'] == 'El ID del rol es requerido'

    r = as_admin.put(f'/api/usuarios/{usuario_id}/status', json={'estado_id': constants.ESTADO_SUSPENDIDO})
    assert r.status_code == 200
    r = as_admin.put(f'/api/usuarios/{usuario_id}/status', json={'estado_id': 7})
    assert r.get_json()['error'] == 'Estado inválido'


def test_admin_cannot_remove_self(as_admin, container):
    admin = container.user_repo.find_by_email('admin@galugas.com')

    r = as_admin.delete(f"/api/usuarios/{admin['usuario_id']}")
    assert r.status_code == 400
    assert r.get_json()['error'] == 'No puede eliminar su propio usuario'

    r = as_admin.put(f"/api/usuarios/{admin['usuario_id']}/status", json={'estado_id': constants.ESTADO_INACTIVO})
    assert r.get_json()['error'] == 'No puede desactivar su propio usuario'


def test_usuarios_list_hides_passwords(as_admin):
    usuarios = as_admin.get('/api/usuarios/').get_json()['data']
    assert usuarios and all('contrasena' not in u for u in usuarios)


def test_deleted_user_not_found_by_id(as_admin, make_user, container):
    usuario_id = make_user(email='baja@galugas.com')
    assert as_admin.get(f'/api/usuarios/{usuario_id}').status_code == 200

    r = as_admin.delete(f'/api/usuarios/{usuario_id}')
    assert r.status_code == 200
    assert container.user_repo.find_by_id(usuario_id)['estado_id'] == constants.ESTADO_INACTIVO

    r = as_admin.get(f'/api/usuarios/{usuario_id}')
    assert r.status_code == 404
    assert r.get_json()['error'] == 'Usuario no encontrado'
    assert as_admin.get(f'/api/usuarios/{usuario_id}/actividad').status_code == 404

    # El administrador todavía puede reactivarlo
    r = as_admin.put(f'/api/usuarios/{usuario_id}/status', json={'estado_id': constants.ESTADO_ACTIVO})
    assert r.status_code == 200
    assert as_admin.get(f'/api/usuarios/{usuario_id}').status_code == 200
