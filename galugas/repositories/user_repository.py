# ==============================================================================
# REPOSITORIO DE USUARIOS
# ==============================================================================
# Encapsula el acceso a la tabla Usuario (JOIN con Rol y Estado).
# Las contraseñas llegan ya hasheadas: el hashing vive en los servicios.
# ==============================================================================

from typing import Any, Dict, List, Optional

from galugas import constants
from galugas.helpers import to_int
from galugas.repositories.base import BaseRepository

_SELECT_WITH_ROLE = """
    SELECT u.usuario_id, u.primer_nombre, u.primer_apellido, u.email, u.contrasena,
           u.rol_id, u.estado_id, u.fecha_creacion,
           r.nombre AS rol_nombre,
           e.nombre AS estado_nombre
    FROM Usuario u
    LEFT JOIN Rol r ON u.rol_id = r.rol_id
    LEFT JOIN Estado e ON u.estado_id = e.estado_id
"""


class UserRepository(BaseRepository):
    """
    Repositorio de usuarios.

    Formato de fila:
    {
        "usuario_id": 1,
        "primer_nombre": "Ana",
        "primer_apellido": "Pérez",
        "email": "ana@galugas.com",
        "contrasena": "scrypt:...",
        "rol_id": 1,
        "rol_nombre": "Administrador",
        "estado_id": 1
    }
    """

    table_name = 'Usuario'
    soft_delete = True
    columns = frozenset([
        'primer_nombre',
        'primer_apellido',
        'email',
        'contrasena',
        'rol_id',
        'estado_id',
    ])

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Usuario ACTIVO por email (para login)."""
        return self.db.execute_one(
            _SELECT_WITH_ROLE + ' WHERE u.email = :email AND u.estado_id = :estado',
            {'email': email, 'estado': constants.ESTADO_ACTIVO}
        )

    def find_by_id_with_role(self, usuario_id: int) -> Optional[Dict[str, Any]]:
        """Usuario ACTIVO con su rol; los dados de baja no se encuentran."""
        return self.db.execute_one(
            _SELECT_WITH_ROLE + ' WHERE u.usuario_id = :id AND u.estado_id = :estado',
            {'id': usuario_id, 'estado': constants.ESTADO_ACTIVO}
        )

    def find_all_with_roles(self, filters: Dict[str, Any] = None) -> List[Dict[str, Any]]:
        """
        Lista usuarios con su rol.

        Args:
            filters: rol_id, estado_id, search (nombre/apellido/email)
        """
        filters = filters or {}
        conditions = ['1=1']
        params: Dict[str, Any] = {}

        rol_id = to_int(filters.get('rol_id'))
        if rol_id:
            conditions.append('u.rol_id = :rol_id')
            params['rol_id'] = rol_id

        estado_id = to_int(filters.get('estado_id'))
        if estado_id:
            conditions.append('u.estado_id = :estado_id')
            params['estado_id'] = estado_id

        search = (filters.get('search') or '').strip()
        if search:
            conditions.append(
                '(u.primer_nombre LIKE :search OR u.primer_apellido LIKE :search OR u.email LIKE :search)'
            )
            params['search'] = f'%{search}%'

        query = _SELECT_WITH_ROLE + ' WHERE ' + ' AND '.join(conditions) + ' ORDER BY u.usuario_id ASC'
        return self.db.execute(query, params)

    def is_email_taken(self, email: str, exclude_id: int = None) -> bool:
        query = 'SELECT usuario_id FROM Usuario WHERE email = :email'
        params: Dict[str, Any] = {'email': email}
        if exclude_id is not None:
            query += ' AND usuario_id <> :exclude_id'
            params['exclude_id'] = exclude_id
        return self.db.execute_one(query, params) is not None

    def update_password(self, usuario_id: int, password_hash: str) -> bool:
        return self.update(usuario_id, {'contrasena': password_hash})

    def role_exists(self, rol_id: int) -> bool:
        return self.db.execute_one('SELECT rol_id FROM Rol WHERE rol_id = :id', {'id': rol_id}) is not None

    def estado_exists(self, estado_id: int) -> bool:
        return self.db.execute_one(
            'SELECT estado_id FROM Estado WHERE estado_id = :id', {'id': estado_id}
        ) is not None
