# ==============================================================================
# PANEL DE ADMINISTRACIÓN (cliente)
# ==============================================================================
# Vendedor:       dashboard, listado y alta/edición de dispositivos
# Administrador:  además baja de dispositivos, logs y usuarios
#
# El control final de permisos lo hace la API; aquí solo se evita mostrar
# páginas que la API rechazaría.
# ==============================================================================

import logging
from typing import Any, Dict

from flask import Blueprint, Response, flash, redirect, render_template, request, session, url_for

from galugas import constants
from galugas.client.api_client import APIError
from galugas.client.auth import require_admin, require_vendedor
from galugas.client.main import get_api

logger = logging.getLogger('galugas.client')

admin_bp = Blueprint('client_admin', __name__)

DEVICE_FORM_FIELDS = (
    'nombre', 'descripcion', 'precio', 'fechaLanzamiento',
    'marca_id', 'categoria_id', 'informacionTecnica_id',
)
LOG_FILTERS = ('tipo_usuario', 'modulo', 'accion', 'usuario_id', 'fecha_desde', 'fecha_hasta', 'busqueda')
USER_FILTERS = ('rol_id', 'estado_id', 'search')


def _args(keys) -> Dict[str, Any]:
    return {k: request.args[k] for k in keys if request.args.get(k)}


def _device_form() -> Dict[str, Any]:
    return {k: request.form[k] for k in DEVICE_FORM_FIELDS if request.form.get(k)}


def _device_files() -> Dict[str, Any]:
    """Reenvía la imagen subida tal cual a la API (campo 'imagen')."""
    f = request.files.get('imagen')
    if not f or not f.filename:
        return {}
    return {'imagen': (f.filename, f.stream, f.mimetype)}


def _form_catalogs() -> Dict[str, Any]:
    api = get_api()
    return {
        'categorias': api.get_categorias()['data'],
        'marcas': api.get_marcas()['data'],
        'info_tecnica': api.get_informacion_tecnica()['data'],
    }


def _client_error(e: APIError, fallback: str) -> str:
    """Mensaje a mostrar; errores de red o 401/403 se propagan al handler global."""
    if e.is_network_error or e.status in (401, 403):
        raise e
    return e.message or fallback


# ═══════════════════════════════════════════════════════════════════════════
# DASHBOARD
# ═══════════════════════════════════════════════════════════════════════════

@admin_bp.route('/')
@require_vendedor
def dashboard():
    api = get_api()
    is_admin = session['user'].get('rol_nombre') == constants.ROLE_ADMIN
    estadisticas, log_stats, usuarios = {}, {}, []
    try:
        estadisticas = api.get_estadisticas()['data']
        if is_admin:
            log_stats = api.get_log_stats()['data']
            usuarios = api.get_usuarios()['data']
    except APIError as e:
        flash(_client_error(e, 'Error al cargar el dashboard'), 'error')

    return render_template(
        'admin/dashboard.html',
        title='Dashboard - Panel de Administración',
        estadisticas=estadisticas,
        log_stats=log_stats,
        usuarios=usuarios,
        is_admin=is_admin,
        active_page='dashboard',
    )


# ═══════════════════════════════════════════════════════════════════════════
# DISPOSITIVOS
# ═══════════════════════════════════════════════════════════════════════════

@admin_bp.route('/dispositivos')
@require_vendedor
def dispositivos():
    filters = _args(('categoria_id', 'marca_id', 'search', 'orderBy', 'orderDirection'))
    api = get_api()
    try:
        items = api.get_dispositivos({**filters, 'limit': 50})['data']
        categorias = api.get_categorias()['data']
        marcas = api.get_marcas()['data']
    except APIError as e:
        flash(_client_error(e, 'Error al cargar los dispositivos'), 'error')
        items, categorias, marcas = [], [], []

    return render_template(
        'admin/dispositivos.html',
        title='Gestión de Dispositivos',
        dispositivos=items,
        categorias=categorias,
        marcas=marcas,
        filters=filters,
        active_page='dispositivos',
    )


@admin_bp.route('/dispositivos/crear', methods=['GET', 'POST'])
@require_vendedor
def crear_dispositivo():
    api = get_api()
    if request.method == 'POST':
        try:
            api.create_dispositivo(_device_form(), _device_files())
        except APIError as e:
            flash(_client_error(e, 'Error al crear el dispositivo'), 'error')
            return redirect(url_for('client_admin.crear_dispositivo'))
        flash('Dispositivo creado exitosamente', 'success')
        return redirect(url_for('client_admin.dispositivos'))

    try:
        catalogs = _form_catalogs()
    except APIError as e:
        flash(_client_error(e, 'Error al cargar el formulario'), 'error')
        return redirect(url_for('client_admin.dispositivos'))
    return render_template(
        'admin/dispositivo_form.html',
        title='Crear Dispositivo',
        dispositivo=None,
        active_page='dispositivos',
        **catalogs
    )


@admin_bp.route('/dispositivos/editar/<int:dispositivo_id>', methods=['GET', 'POST'])
@require_vendedor
def editar_dispositivo(dispositivo_id):
    api = get_api()
    if request.method == 'POST':
        try:
            api.update_dispositivo(dispositivo_id, _device_form(), _device_files())
        except APIError as e:
            flash(_client_error(e, 'Error al actualizar el dispositivo'), 'error')
            return redirect(url_for('client_admin.editar_dispositivo', dispositivo_id=dispositivo_id))
        flash('Dispositivo actualizado exitosamente', 'success')
        return redirect(url_for('client_admin.dispositivos'))

    try:
        dispositivo = api.get_dispositivo_by_id(dispositivo_id)['data']
        catalogs = _form_catalogs()
    except APIError as e:
        flash(_client_error(e, 'Error al cargar el formulario de edición'), 'error')
        return redirect(url_for('client_admin.dispositivos'))
    return render_template(
        'admin/dispositivo_form.html',
        title='Editar Dispositivo',
        dispositivo=dispositivo,
        active_page='dispositivos',
        **catalogs
    )


@admin_bp.route('/dispositivos/eliminar/<int:dispositivo_id>', methods=['POST'])
@require_admin
def eliminar_dispositivo(dispositivo_id):
    try:
        get_api().delete_dispositivo(dispositivo_id)
        flash('Dispositivo eliminado exitosamente', 'success')
    except APIError as e:
        flash(_client_error(e, 'Error al eliminar el dispositivo'), 'error')
    return redirect(url_for('client_admin.dispositivos'))


# ═══════════════════════════════════════════════════════════════════════════
# LOGS
# ═══════════════════════════════════════════════════════════════════════════

@admin_bp.route('/logs')
@require_admin
def logs():
    filters = _args(LOG_FILTERS)
    params = dict(filters)
    params['pagina'] = request.args.get('pagina', 1)
    params['limite'] = request.args.get('limite', constants.DEFAULT_LOG_LIMIT)

    api = get_api()
    try:
        body = api.get_logs(params)
        items, paginacion = body['data'], body.get('paginacion', {})
        estadisticas = api.get_log_stats()['data']
    except APIError as e:
        flash(_client_error(e, 'Error al cargar los logs'), 'error')
        items, paginacion, estadisticas = [], {}, {}

    return render_template(
        'admin/logs.html',
        title='Sistema de Logs',
        logs=items,
        paginacion=paginacion,
        estadisticas=estadisticas,
        filters=filters,
        active_page='logs',
    )


@admin_bp.route('/logs/exportar')
@require_admin
def exportar_logs():
    try:
        content, disposition = get_api().export_logs(_args(LOG_FILTERS))
    except APIError as e:
        flash(_client_error(e, 'Error al exportar los logs'), 'error')
        return redirect(url_for('client_admin.logs'))
    return Response(
        content,
        mimetype='text/csv',
        headers={'Content-Disposition': disposition},
    )


# ═══════════════════════════════════════════════════════════════════════════
# USUARIOS
# ═══════════════════════════════════════════════════════════════════════════

@admin_bp.route('/usuarios')
@require_admin
def usuarios():
    filters = _args(USER_FILTERS)
    try:
        items = get_api().get_usuarios(filters)['data']
    except APIError as e:
        flash(_client_error(e, 'Error al cargar los usuarios'), 'error')
        items = []
    return render_template(
        'admin/usuarios.html',
        title='Gestión de Usuarios',
        usuarios=items,
        filters=filters,
        roles=[
            (constants.ROL_ID_ADMIN, constants.ROLE_ADMIN),
            (constants.ROL_ID_VENDEDOR, constants.ROLE_VENDEDOR),
            (constants.ROL_ID_USUARIO, constants.ROLE_USUARIO),
        ],
        estados=[
            (constants.ESTADO_ACTIVO, 'Activo'),
            (constants.ESTADO_INACTIVO, 'Inactivo'),
            (constants.ESTADO_SUSPENDIDO, 'Suspendido'),
        ],
        active_page='usuarios',
    )


@admin_bp.route('/usuarios/<int:usuario_id>/role', methods=['POST'])
@require_admin
def cambiar_rol(usuario_id):
    try:
        result = get_api().update_user_role(usuario_id, request.form.get('rol_id', type=int))
        flash(result.get('message', 'Rol actualizado exitosamente'), 'success')
    except APIError as e:
        flash(_client_error(e, 'Error al actualizar el rol'), 'error')
    return redirect(url_for('client_admin.usuarios'))


@admin_bp.route('/usuarios/<int:usuario_id>/status', methods=['POST'])
@require_admin
def cambiar_estado(usuario_id):
    try:
        result = get_api().update_user_status(usuario_id, request.form.get('estado_id', type=int))
        flash(result.get('message', 'Estado actualizado exitosamente'), 'success')
    except APIError as e:
        flash(_client_error(e, 'Error al actualizar el estado'), 'error')
    return redirect(url_for('client_admin.usuarios'))


@admin_bp.route('/profile')
@require_vendedor
def profile():
    return render_template(
        'admin/profile.html',
        title='Mi Perfil - Administración',
        user=session['user'],
        active_page='profile',
    )
