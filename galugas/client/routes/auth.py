# ==============================================================================
# LOGIN, REGISTRO Y PERFIL (cliente)
# ==============================================================================
# La sesión del cliente guarda:
#   user        → usuario devuelto por la API (sin contraseña)
#   api_cookie  → cookie de sesión de la API (la maneja APIClient)
# ==============================================================================

from flask import Blueprint, flash, redirect, render_template, request, session, url_for

from galugas import constants
from galugas.client.api_client import APIError
from galugas.client.auth import require_auth
from galugas.client.main import get_api

auth_bp = Blueprint('client_auth', __name__)


def _landing_for(user):
    if user.get('rol_nombre') in constants.ELEVATED_ROLES:
        return url_for('client_admin.dashboard')
    return url_for('client_index.index')


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if session.get('user'):
        return redirect(_landing_for(session['user']))

    if request.method == 'POST':
        email = (request.form.get('email') or '').strip()
        password = request.form.get('password') or ''
        if not email or not password:
            flash('Email y contraseña son requeridos', 'error')
            return redirect(url_for('client_auth.login'))

        try:
            user = get_api().login(email, password)['data']
        except APIError as e:
            if e.is_network_error:
                raise
            flash(e.message, 'error')
            return redirect(url_for('client_auth.login'))

        session.permanent = True
        session['user'] = user
        flash(f"Bienvenido, {user.get('primer_nombre', '')}.", 'success')
        return_to = session.pop('return_to', None)
        if return_to and return_to.startswith('/') and not return_to.startswith('//'):
            return redirect(return_to)
        return redirect(_landing_for(user))

    return render_template('pages/login.html', title='Iniciar sesión - Galugas')


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    if request.method == 'POST':
        form = request.form
        if form.get('contrasena') != form.get('confirmar_contrasena'):
            flash('Las contraseñas no coinciden', 'error')
            return redirect(url_for('client_auth.register'))

        try:
            get_api().register({
                'primer_nombre': form.get('primer_nombre'),
                'primer_apellido': form.get('primer_apellido'),
                'email': form.get('email'),
                'contrasena': form.get('contrasena'),
            })
        except APIError as e:
            if e.is_network_error:
                raise
            flash(e.message, 'error')
            return redirect(url_for('client_auth.register'))

        flash('Registro exitoso. Ya puedes iniciar sesión.', 'success')
        return redirect(url_for('client_auth.login'))

    return render_template('pages/register.html', title='Crear cuenta - Galugas')


@auth_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    if session.get('api_cookie'):
        try:
            get_api().logout()
        except APIError as e:
            # La sesión local se cierra igual
            flash(f'No se pudo cerrar la sesión en el servidor: {e.message}', 'error')
    session.clear()
    flash('Sesión cerrada.', 'success')
    return redirect(url_for('client_index.index'))


@auth_bp.route('/profile', methods=['GET', 'POST'])
@require_auth
def profile():
    if request.method == 'POST':
        try:
            updated = get_api().update_profile({
                'primer_nombre': request.form.get('primer_nombre'),
                'primer_apellido': request.form.get('primer_apellido'),
                'email': request.form.get('email'),
            })['data']
        except APIError as e:
            if e.status == 400:
                flash(e.message, 'error')
                return redirect(request.path)
            raise
        session['user'] = updated
        flash('Perfil actualizado exitosamente', 'success')
        return redirect(request.path)

    return render_template('pages/profile.html', title='Mi perfil - Galugas', user=session['user'])


@auth_bp.route('/change-password', methods=['GET', 'POST'])
@require_auth
def change_password():
    if request.method == 'POST':
        if request.form.get('new_password') != request.form.get('confirm_password'):
            flash('Las contraseñas no coinciden', 'error')
            return redirect(url_for('client_auth.change_password'))
        try:
            get_api().change_password(request.form.get('current_password'), request.form.get('new_password'))
        except APIError as e:
            if e.status == 400:
                flash(e.message, 'error')
                return redirect(url_for('client_auth.change_password'))
            raise
        flash('Contraseña cambiada exitosamente', 'success')
        return redirect(url_for('client_auth.profile'))

    return render_template('pages/change_password.html', title='Cambiar contraseña - Galugas')
