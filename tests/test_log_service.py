# -*- coding: utf-8 -*-
"""
Tests del servicio de auditoría: redacción, registro tolerante a fallos,
paginación, filtros por fecha, purga y exportación CSV.
"""
import csv
import io
import json
import logging

import pytest

from galugas import constants
from galugas.errors import AppError
from galugas.services.log_service import LogService, redact_sensitive


class _MemoryLogRepo:
    def __init__(self):
        self.rows = []

    def create(self, data, conn=None):
        self.rows.append(dict(data))
        return {'id': len(self.rows), **data}


class _BrokenLogRepo:
    def create(self, data, conn=None):
        raise RuntimeError('disco lleno')


# ═══════════════════════════════════════════════════════════════════════════
# REDACCIÓN
# ═══════════════════════════════════════════════════════════════════════════

def test_redact_sensitive_nested():
    original = {
        'email': 'ana@galugas.com',
        'password': 'x',
        'datos': {'contrasena': 'y', 'Authorization': 'Bearer z', 'nombre': 'Ana'},
        'lista': [{'api_key': 'k'}, 'texto'],
    }
    redacted = redact_sensitive(original)

    assert redacted['email'] == 'ana@galugas.com'
    assert redacted['password'] == constants.SENSITIVE_MASK
    assert redacted['datos']['contrasena'] == constants.SENSITIVE_MASK
    assert redacted['datos']['Authorization'] == constants.SENSITIVE_MASK
    assert redacted['datos']['nombre'] == 'Ana'
    assert redacted['lista'][0]['api_key'] == constants.SENSITIVE_MASK
    assert redacted['lista'][1] == 'texto'
    # El original no se toca
    assert original['password'] == 'x'


def test_redact_matches_substrings():
    redacted = redact_sensitive({'currentPassword': 'a', 'new_password': 'b', 'refresh_token': 'c'})
    assert set(redacted.values()) == {constants.SENSITIVE_MASK}


# ═══════════════════════════════════════════════════════════════════════════
# REGISTRO
# ═══════════════════════════════════════════════════════════════════════════

def test_record_stores_redacted_metadata():
    repo = _MemoryLogRepo()
    service = LogService(repo)

    result = service.record(5, 'Administrador', 'CREACION', 'USUARIOS', 'Creó usuario',
                            metadata={'email': 'a@b.com', 'contrasena': 'secreta'})

    assert result['log_id'] == 1
    stored = json.loads(repo.rows[0]['metadata'])
    assert stored == {'email': 'a@b.com', 'contrasena': constants.SENSITIVE_MASK}
    assert 'secreta' not in repo.rows[0]['metadata']


def test_record_defaults_to_sistema():
    repo = _MemoryLogRepo()
    LogService(repo).record(None, None, 'MANTENIMIENTO', 'LOGS', 'Purga')
    assert repo.rows[0]['tipo_usuario'] == constants.ROLE_SISTEMA
    assert repo.rows[0]['usuario_id'] is None
    assert repo.rows[0]['metadata'] is None


def test_record_failure_is_swallowed(caplog):
    service = LogService(_BrokenLogRepo())
    with caplog.at_level(logging.ERROR, logger='galugas.logs'):
        result = service.record(1, 'Usuario', 'CONSULTA', 'DISPOSITIVOS', 'Consulta')
    assert result is None
    assert 'disco lleno' in caplog.text


def test_record_denied_access_shape():
    repo = _MemoryLogRepo()
    LogService(repo).record_denied_access(
        {'usuario_id': 3, 'rol_nombre': 'Usuario'}, '/api/usuarios/', 'Rol Usuario sin privilegios'
    )
    row = repo.rows[0]
    assert row['accion'] == constants.ACCION_ACCESO_DENEGADO
    assert row['modulo'] == constants.MODULO_SEGURIDAD
    assert row['tipo_usuario'] == 'Usuario'
    assert json.loads(row['metadata'])['ruta'] == '/api/usuarios/'


# ═══════════════════════════════════════════════════════════════════════════
# CONSULTA (SQLite)
# ═══════════════════════════════════════════════════════════════════════════

def test_pagination_totals(container):
    for i in range(7):
        container.log_service.record(None, None, 'CONSULTA', 'API', f'evento {i}')

    resultado = container.log_service.get_logs({}, pagina=3, limite=3)

    assert resultado['paginacion'] == {'pagina': 3, 'limite': 3, 'total': 7, 'paginas': 3}
    assert len(resultado['logs']) == 1


def test_pagination_clamps_limit(container):
    container.log_service.record(None, None, 'CONSULTA', 'API', 'uno')
    resultado = container.log_service.get_logs({}, pagina='abc', limite=100000)
    assert resultado['paginacion']['pagina'] == 1
    assert resultado['paginacion']['limite'] == constants.MAX_LIMIT


def test_filters_and_day_range(container):
    container.log_repo.create({
        'tipo_usuario': 'Sistema', 'accion': 'MANTENIMIENTO', 'modulo': 'LOGS',
        'descripcion': 'antiguo', 'fecha_creacion': '2023-05-10 23:59:59',
    })
    container.log_repo.create({
        'tipo_usuario': 'Sistema', 'accion': 'MANTENIMIENTO', 'modulo': 'LOGS',
        'descripcion': 'día siguiente', 'fecha_creacion': '2023-05-11 00:00:00',
    })
    container.log_service.record(None, None, 'CONSULTA', 'DISPOSITIVOS', 'hoy')

    mismo_dia = container.log_service.get_logs({'fecha_desde': '2023-05-10', 'fecha_hasta': '2023-05-10'})
    assert [l['descripcion'] for l in mismo_dia['logs']] == ['antiguo']

    por_modulo = container.log_service.get_logs({'modulo': 'DISPOSITIVOS'})
    assert por_modulo['paginacion']['total'] == 1

    busqueda = container.log_service.get_logs({'busqueda': 'siguiente'})
    assert busqueda['logs'][0]['descripcion'] == 'día siguiente'


def test_metadata_is_decoded(container):
    container.log_service.record(None, None, 'CONSULTA', 'API', 'con meta', metadata={'k': [1, 2]})
    log = container.log_service.get_logs({})['logs'][0]
    assert log['metadata'] == {'k': [1, 2]}


def test_newest_first(container):
    container.log_repo.create({
        'tipo_usuario': 'Sistema', 'accion': 'A', 'modulo': 'M',
        'descripcion': 'viejo', 'fecha_creacion': '2020-01-01 00:00:00',
    })
    container.log_service.record(None, None, 'A', 'M', 'nuevo')
    logs = container.log_service.get_logs({})['logs']
    assert [l['descripcion'] for l in logs] == ['nuevo', 'viejo']


# ═══════════════════════════════════════════════════════════════════════════
# PURGA Y EXPORTACIÓN
# ═══════════════════════════════════════════════════════════════════════════

def test_purge_old_logs_counts(container):
    for fecha in ('2001-01-01 00:00:00', '2002-06-01 12:00:00'):
        container.log_repo.create({
            'tipo_usuario': 'Sistema', 'accion': 'A', 'modulo': 'M',
            'descripcion': 'viejo', 'fecha_creacion': fecha,
        })
    container.log_service.record(None, None, 'A', 'M', 'reciente')

    resultado = container.log_service.purge_old_logs(30)

    assert resultado['eliminados'] == 2
    assert '30 días' in resultado['mensaje']
    assert container.log_service.get_logs({})['paginacion']['total'] == 1


@pytest.mark.parametrize('dias', [0, -5, 'abc', None])
def test_purge_rejects_invalid_days(container, dias):
    with pytest.raises(AppError) as exc:
        container.log_service.purge_old_logs(dias)
    assert exc.value.status_code == 400


def test_export_csv(container, make_user):
    usuario_id = make_user(constants.ROL_ID_ADMIN, 'admin@galugas.com', nombre='Admin', apellido='Galugas')
    container.log_service.record(usuario_id, 'Administrador', 'CREACION', 'MARCAS', 'Creó marca, "Sony"')
    container.log_service.record(None, None, 'MANTENIMIENTO', 'LOGS', 'Purga')

    rows = list(csv.reader(io.StringIO(container.log_service.export_csv({}))))

    assert rows[0][0] == 'ID'
    assert rows[0][6] == 'Descripción'
    assert len(rows) == 3
    by_desc = {r[6]: r for r in rows[1:]}
    assert by_desc['Creó marca, "Sony"'][2] == 'Admin Galugas'
    assert by_desc['Purga'][2] == 'Sistema'


def test_stats(container, make_user):
    usuario_id = make_user(constants.ROL_ID_ADMIN, 'admin@galugas.com')
    container.log_service.record(usuario_id, 'Administrador', 'CONSULTA', 'DISPOSITIVOS', 'x')
    container.log_service.record(None, None, 'MANTENIMIENTO', 'LOGS', 'y')
    stats = container.log_service.get_stats('semana')
    assert stats['totalActividades'] == 2
    assert stats['usuariosActivos'] == 1
    assert {r['tipo_usuario'] for r in stats['actividadesPorTipo']} == {'Administrador', 'Sistema'}
