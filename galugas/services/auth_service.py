# ==============================================================================
# SERVICIO DE AUTENTICACIÓN
# ==============================================================================
# Login, registro, perfil propio y cambio de contraseña.
#
# - Las contraseñas se guardan con werkzeug.security (hash + salt)
# - La contraseña NUNCA sale de este servicio (se quita de cada respuesta)
# - Solo los usuarios ACTIVOS pueden iniciar sesión
# ==============================================================================

import re
from typing import Any, Dict, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from galugas import constants
from galugas.errors import AppError
from galugas.helpers import serialize_row
from galugas.repositories.interfaces import IUserRepository

_EMAIL_RE = re.compile(constants.EMAIL_REGEX)


def public_user(user: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Copia del usuario sin la contraseña, lista para JSON/sesión."""
    if user is None:
        return None
    data = {k: v for k, v in user.items() if k != 'contrasena'}
    return serialize_row(data)


def is_valid_email(email: str) -> bool:
    return bool(email) and bool(_EMAIL_RE.match(email))


class AuthService:
    """
    Servicio de autenticación.

    Uso:
        user = auth_service.authenticate('ana@galugas.com', 'secreto')
        session['user'] = user
    """

    def __init__(self, user_repo: IUserRepository):
        """
        Args:
            user_repo: Repositorio de usuarios
        """
        self.user_repo = user_repo

    # =========================================================================
    # LOGIN
    # =========================================================================

    def authenticate(self, email: str, password: str) -> Dict[str, Any]:
        """
        Valida credenciales.

        Raises:
            AppError(400): Faltan email o contraseña
            AppError(401): Usuario inexistente/inactivo o contraseña incorrecta

        Returns:
            Usuario (sin contraseña) con rol_nombre
        """
        if not email or not password:
            raise AppError('Email y contraseña son requeridos', 400)

        user = self.user_repo.find_by_email(str(email).strip().lower())
        if not user or not check_password_hash(user.get('contrasena') or '', password):
            raise AppError('Credenciales inválidas', 401)

        return public_user(user)

    # =========================================================================
    # CONSULTAS DE ROL
    # =========================================================================

    def get_user_by_id(self, usuario_id: int) -> Dict[str, Any]:
        user = self.user_repo.find_by_id_with_role(usuario_id)
        if not user:
            raise AppError('Usuario no encontrado', 404)
        return public_user(user)

    def is_admin(self, usuario_id: int) -> bool:
        user = self.user_repo.find_by_id_with_role(usuario_id)
        return bool(user) and user.get('rol_nombre') == constants.ROLE_ADMIN

    # =========================================================================
    # REGISTRO Y PERFIL
    # =========================================================================

    def validate_user_data(self, data: Dict[str, Any]) -> None:
        """
        Valida los datos de un usuario nuevo.

        Raises:
            AppError(400): Con el detalle del primer problema encontrado
        """
        required = ['primer_nombre', 'primer_apellido', 'email', 'contrasena']
        missing = [field for field in required if not data.get(field)]
        if missing:
            raise AppError(f"Campos requeridos faltantes: {', '.join(missing)}", 400, details=missing)

        if not is_valid_email(data['email']):
            raise AppError('Email inválido', 400)

        if len(data['contrasena']) < constants.PASSWORD_MIN_LENGTH:
            raise AppError('La contraseña debe tener al menos 6 caracteres', 400)

    def register(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Registra un cliente nuevo (rol Usuario, estado Activo).

        Returns:
            {id, primer_nombre, primer_apellido, email, rol_id, estado_id}
        """
        data = dict(data or {})
        if data.get('email'):
            data['email'] = str(data['email']).strip().lower()

        self.validate_user_data(data)

        if self.user_repo.is_email_taken(data['email']):
            raise AppError('Ya existe un usuario con ese email', 400)

        created = self.user_repo.create({
            'primer_nombre': str(data['primer_nombre']).strip(),
            'primer_apellido': str(data['primer_apellido']).strip(),
            'email': data['email'],
            'contrasena': generate_password_hash(data['contrasena']),
            'rol_id': constants.ROL_ID_USUARIO,
            'estado_id': constants.ESTADO_ACTIVO,
        })
        created.pop('contrasena', None)
        return created

    def update_profile(self, usuario_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Actualiza nombre, apellido y/o email del propio usuario.

        El rol, el estado y la contraseña NO se cambian por aquí.
        """
        existing = self.user_repo.find_by_id(usuario_id)
        if not existing:
            raise AppError('Usuario no encontrado', 404)

        allowed = {k: v for k, v in (data or {}).items()
                   if k in ('primer_nombre', 'primer_apellido', 'email') and v not in (None, '')}
        if 'email' in allowed:
            allowed['email'] = str(allowed['email']).strip().lower()
            if not is_valid_email(allowed['email']):
                raise AppError('Email inválido', 400)
            if allowed['email'] != existing.get('email') and \
                    self.user_repo.is_email_taken(allowed['email'], exclude_id=usuario_id):
                raise AppError('El email ya está en uso', 400)

        self.user_repo.update(usuario_id, allowed)
        return self.get_user_by_id(usuario_id)

    def change_password(self, usuario_id: int, current_password: str, new_password: str) -> bool:
        """
        Cambia la contraseña verificando la actual.

        Raises:
            AppError(404): Usuario inexistente
            AppError(400): Contraseña actual incorrecta o nueva muy corta
        """
        user = self.user_repo.find_by_id(usuario_id)
        if not user:
            raise AppError('Usuario no encontrado', 404)

        if not current_password or not check_password_hash(user.get('contrasena') or '', current_password):
            raise AppError('Contraseña actual incorrecta', 400)

        if not new_password or len(new_password) < constants.PASSWORD_MIN_LENGTH:
            raise AppError('La nueva contraseña debe tener al menos 6 caracteres', 400)

        return self.user_repo.update_password(usuario_id, generate_password_hash(new_password))
