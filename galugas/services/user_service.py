# ==============================================================================
# SERVICIO DE USUARIOS (ADMINISTRACIÓN)
# ==============================================================================
# Gestión de usuarios por parte de un Administrador: listado, edición,
# cambio de rol/estado y borrado lógico.
#
# REGLA: un administrador NO puede eliminarse ni desactivarse a sí mismo.
# Esta validación se hace AQUÍ, no en las rutas.
# ==============================================================================

from typing import Any, Dict, List

from werkzeug.security import generate_password_hash

from galugas import constants
from galugas.errors import AppError
from galugas.repositories.interfaces import IUserRepository
from galugas.services.auth_service import is_valid_email, public_user


class SelfModificationError(AppError):
    """Un administrador intenta eliminarse o desactivarse a sí mismo."""

    def __init__(self, message: str):
        super().__init__(message, 400)


class UserService:
    """
    Servicio para gestión de usuarios.

    Responsabilidades:
    - Listado con roles y filtros
    - Edición de datos (con control de email único)
    - Cambio de rol y de estado
    - Borrado lógico
    """

    def __init__(self, user_repo: IUserRepository):
        """
        Args:
            user_repo: Repositorio de usuarios
        """
        self.user_repo = user_repo

    def _get_existing(self, usuario_id: int) -> Dict[str, Any]:
        user = self.user_repo.find_by_id(usuario_id)
        if not user:
            raise AppError('Usuario no encontrado', 404)
        return user

    # =========================================================================
    # CONSULTA
    # =========================================================================

    def get_usuarios(self, filters: Dict[str, Any] = None) -> List[Dict[str, Any]]:
        return [public_user(u) for u in self.user_repo.find_all_with_roles(filters or {})]

    def get_usuario_by_id(self, usuario_id: int) -> Dict[str, Any]:
        user = self.user_repo.find_by_id_with_role(usuario_id)
        if not user:
            raise AppError('Usuario no encontrado', 404)
        return public_user(user)

    # =========================================================================
    # MODIFICACIÓN
    # =========================================================================

    def update_usuario(self, usuario_id: int, data: Dict[str, Any]) -> Dict[str, str]:
        """
        Actualiza datos de un usuario.

        Si viene `contrasena` se re-hashea; un email nuevo debe ser único.
        """
        existing = self._get_existing(usuario_id)
        data = dict(data or {})

        if data.get('email'):
            data['email'] = str(data['email']).strip().lower()
            if not is_valid_email(data['email']):
                raise AppError('Email inválido', 400)
            if data['email'] != existing.get('email') and \
                    self.user_repo.is_email_taken(data['email'], exclude_id=usuario_id):
                raise AppError('El email ya está en uso', 400)

        if data.get('contrasena'):
            if len(data['contrasena']) < constants.PASSWORD_MIN_LENGTH:
                raise AppError('La contraseña debe tener al menos 6 caracteres', 400)
            data['contrasena'] = generate_password_hash(data['contrasena'])
        else:
            data.pop('contrasena', None)

        if not self.user_repo.update(usuario_id, data):
            raise AppError('Error al actualizar el usuario', 500)
        return {'message': 'Usuario actualizado exitosamente'}

    def delete_usuario(self, usuario_id: int, acting_user_id: int = None) -> Dict[str, str]:
        """Borrado lógico (estado Inactivo)."""
        self._get_existing(usuario_id)
        if acting_user_id is not None and int(acting_user_id) == int(usuario_id):
            raise SelfModificationError('No puede eliminar su propio usuario')

        if not self.user_repo.delete(usuario_id):
            raise AppError('Error al eliminar el usuario', 500)
        return {'message': 'Usuario eliminado exitosamente'}

    def update_user_role(self, usuario_id: int, rol_id: int) -> Dict[str, str]:
        self._get_existing(usuario_id)
        if not self.user_repo.role_exists(rol_id):
            raise AppError('Rol inválido', 400)

        if not self.user_repo.update(usuario_id, {'rol_id': rol_id}):
            raise AppError('Error al actualizar el rol del usuario', 500)
        return {'message': 'Rol de usuario actualizado exitosamente'}

    def update_user_status(self, usuario_id: int, estado_id: int, acting_user_id: int = None) -> Dict[str, str]:
        self._get_existing(usuario_id)
        if not self.user_repo.estado_exists(estado_id):
            raise AppError('Estado inválido', 400)
        if acting_user_id is not None and int(acting_user_id) == int(usuario_id) \
                and estado_id != constants.ESTADO_ACTIVO:
            raise SelfModificationError('No puede desactivar su propio usuario')

        if not self.user_repo.update(usuario_id, {'estado_id': estado_id}):
            raise AppError('Error al actualizar el estado del usuario', 500)
        return {'message': 'Estado de usuario actualizado exitosamente'}
