# ==============================================================================
# TIENDA PÚBLICA
# ==============================================================================

import logging

from flask import Blueprint, flash, redirect, render_template, request, url_for

from galugas.client.api_client import APIError
from galugas.client.main import get_api

logger = logging.getLogger('galugas.client')

index_bp = Blueprint('client_index', __name__)

CATALOG_FILTERS = ('categoria_id', 'marca_id', 'minPrice', 'maxPrice', 'search', 'orderBy', 'orderDirection')


@index_bp.route('/')
def index():
    try:
        dispositivos = get_api().get_dispositivos({
            'limit': 8,
            'orderBy': 'fechaLanzamiento',
            'orderDirection': 'DESC',
        })['data']
    except APIError as e:
        logger.error('Error obteniendo dispositivos para inicio: %s', e.message)
        dispositivos = []
    return render_template('pages/index.html', title='Inicio - Galugas | Tu Tienda de Tecnología',
                           dispositivos=dispositivos)


@index_bp.route('/catalogo')
def catalogo():
    filters = {k: request.args[k] for k in CATALOG_FILTERS if request.args.get(k)}
    api = get_api()
    try:
        dispositivos = api.get_dispositivos(filters)['data']
        categorias = api.get_categorias()['data']
        marcas = api.get_marcas()['data']
    except APIError as e:
        logger.error('Error obteniendo catálogo: %s', e.message)
        dispositivos, categorias, marcas = [], [], []
    return render_template('pages/catalogo.html', title='Catálogo de Productos - Galugas',
                           dispositivos=dispositivos, categorias=categorias, marcas=marcas, filters=filters)


@index_bp.route('/producto/<int:dispositivo_id>')
def producto(dispositivo_id):
    try:
        dispositivo = get_api().get_dispositivo_by_id(dispositivo_id)['data']
    except APIError as e:
        if e.is_network_error:
            raise
        flash('Producto no encontrado', 'error')
        return redirect(url_for('client_index.catalogo'))
    return render_template('pages/producto.html', title=f"{dispositivo['nombre']} - Galugas", dispositivo=dispositivo)


@index_bp.route('/about')
def about():
    return render_template('pages/about.html', title='Acerca de Nosotros - Galugas')


@index_bp.route('/contact', methods=['GET', 'POST'])
def contact():
    if request.method == 'POST':
        nombre = (request.form.get('nombre') or '').strip()
        email = (request.form.get('email') or '').strip()
        mensaje = (request.form.get('mensaje') or '').strip()
        if not nombre or not email or not mensaje:
            flash('Nombre, email y mensaje son requeridos', 'error')
            return redirect(url_for('client_index.contact'))

        logger.info('Nuevo mensaje de contacto de %s <%s>: %s', nombre, email, request.form.get('asunto', ''))
        flash('¡Mensaje enviado correctamente! Te contactaremos pronto.', 'success')
        return redirect(url_for('client_index.contact'))
    return render_template('pages/contact.html', title='Contacto - Galugas')


@index_bp.route('/buscar')
def buscar():
    q = (request.args.get('q') or '').strip()
    if not q:
        return redirect(url_for('client_index.catalogo'))

    try:
        dispositivos = get_api().search_dispositivos(q)['data']
    except APIError as e:
        if e.is_network_error:
            raise
        dispositivos = []
    return render_template('pages/buscar.html', title=f'Resultados para "{q}" - Galugas',
                           dispositivos=dispositivos, q=q)
