# -*- coding: utf-8 -*-
"""
Fixtures compartidas: API sobre SQLite en memoria, usuarios por rol y login.
"""
import os
import sys

import pytest
from werkzeug.security import generate_password_hash

# Asegurar que el proyecto esté en el path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from galugas import constants
from galugas.app_container import EXTENSION_KEY, AppContainer
from galugas.main import create_app

PASSWORD = 'secreto123'


@pytest.fixture
def app(tmp_path):
    app = create_app({
        'DATABASE_URL': 'sqlite://',
        'AUTO_INIT_DB': True,
        'RATELIMIT_ENABLED': False,
        'LOG_TO_FILES': False,
        'TESTING': True,
        'GALUGAS_ENV': 'test',
        'UPLOAD_PATH': str(tmp_path / 'uploads'),
    })
    yield app
    AppContainer.reset_instance()


@pytest.fixture
def container(app):
    return app.extensions[EXTENSION_KEY]


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def make_user(container):
    """Crea un usuario activo con el rol indicado y devuelve su id."""
    def _make(rol_id=constants.ROL_ID_USUARIO, email='cliente@galugas.com',
              nombre='Ana', apellido='Pérez', estado_id=constants.ESTADO_ACTIVO):
        created = container.user_repo.create({
            'primer_nombre': nombre,
            'primer_apellido': apellido,
            'email': email,
            'contrasena': generate_password_hash(PASSWORD),
            'rol_id': rol_id,
            'estado_id': estado_id,
        })
        return created['id']
    return _make


@pytest.fixture
def login(client):
    def _login(email, password=PASSWORD):
        r = client.post('/api/auth/login', json={'email': email, 'password': password})
        assert r.status_code == 200, r.get_json()
        return r.get_json()['data']
    return _login


@pytest.fixture
def as_admin(client, make_user, login):
    make_user(constants.ROL_ID_ADMIN, 'admin@galugas.com', nombre='Admin', apellido='Galugas')
    login('admin@galugas.com')
    return client


@pytest.fixture
def as_vendedor(client, make_user, login):
    make_user(constants.ROL_ID_VENDEDOR, 'vendedor@galugas.com', nombre='Vera', apellido='Ventas')
    login('vendedor@galugas.com')
    return client


@pytest.fixture
def as_usuario(client, make_user, login):
    make_user(constants.ROL_ID_USUARIO, 'cliente@galugas.com')
    login('cliente@galugas.com')
    return client


@pytest.fixture
def catalogo(container):
    """Categoría, marca y ficha técnica mínimas para crear dispositivos."""
    categoria = container.categoria_repo.create({
        'nombre': 'Smartphones', 'descripcion': 'Teléfonos', 'estado_id': constants.ESTADO_ACTIVO,
    })
    marca = container.marca_repo.create({
        'nombre': 'Samsung', 'descripcion': 'Electrónica', 'pais_id': 2, 'estado_id': constants.ESTADO_ACTIVO,
    })
    info = container.informacion_tecnica_repo.create({'procesador': 'Snapdragon 8 Gen 3', 'ram_gb': 12})
    return {
        'categoria_id': categoria['id'],
        'marca_id': marca['id'],
        'informacionTecnica_id': info['id'],
    }


@pytest.fixture
def make_dispositivo(container, catalogo):
    def _make(nombre='Galaxy S24', precio=999.99, fecha='2024-01-17', **extra):
        data = {
            'nombre': nombre,
            'descripcion': 'Gama alta',
            'precio': precio,
            'fechaLanzamiento': fecha,
            **catalogo,
            **extra,
        }
        return container.dispositivo_service.create_dispositivo(data)['id']
    return _make


@pytest.fixture
def find_logs(container):
    """Logs que cumplen los filtros (hasta 100)."""
    def _find(**filtros):
        return container.log_service.get_logs(filtros, 1, 100)['logs']
    return _find
