"""
Cliente HTTP de la API Galugas.

La tienda y el panel de administración no tocan la base de datos: todo pasa
por este cliente. La cookie de sesión que entrega la API se guarda en la
sesión del cliente (session['api_cookie']) y se reenvía en cada llamada, así
cada navegador conserva su propia sesión en la API.
"""

import http.cookiejar
import logging
from typing import Any, Dict, Optional, Tuple

import requests
from flask import has_request_context, session

from galugas import config

logger = logging.getLogger('galugas.client')

API_COOKIE_KEY = 'api_cookie'


class APIError(Exception):
    """Error normalizado de una llamada a la API."""

    def __init__(self, status: int, message: str, data: Any = None, is_network_error: bool = False):
        self.status = status
        self.message = message
        self.data = data
        self.is_network_error = is_network_error
        super().__init__(self.message)


class _BlockAllCookies(http.cookiejar.DefaultCookiePolicy):
    """El jar compartido nunca guarda cookies: cada usuario lleva la suya."""

    def set_ok(self, cookie, request):
        return False


class APIClient:
    """
    Cliente de la API REST.

    Uso:
        api = APIClient()
        body = api.get_dispositivos({'categoria_id': 2})
        dispositivos = body['data']
    """

    def __init__(self, base_url: str = None, timeout: float = None, cookie_name: str = None):
        """
        Args:
            base_url: URL base de la API (ej: http://localhost:3000/api)
            timeout: Segundos de espera por respuesta
            cookie_name: Nombre de la cookie de sesión de la API
        """
        self.base_url = (base_url or config.API_URL).rstrip('/')
        self.timeout = timeout or config.API_TIMEOUT
        self.cookie_name = cookie_name or config.SESSION_COOKIE_NAME
        self.session = requests.Session()
        self.session.cookies.set_policy(_BlockAllCookies())
        self.session.headers.update({'X-Requested-With': 'XMLHttpRequest'})

    # =========================================================================
    # NÚCLEO
    # =========================================================================

    def _stored_cookie(self) -> Optional[str]:
        if has_request_context():
            return session.get(API_COOKIE_KEY)
        return None

    def _store_cookie(self, response: requests.Response) -> None:
        if not has_request_context():
            return
        value = response.cookies.get(self.cookie_name)
        if value is not None:
            session[API_COOKIE_KEY] = value

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        cookie = self._stored_cookie()
        if cookie:
            kwargs['cookies'] = {self.cookie_name: cookie}
        url = f'{self.base_url}{path}'
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout:
            logger.error('[API Timeout] %s %s', method, url)
            raise APIError(504, 'La API no respondió a tiempo', is_network_error=True)
        except requests.exceptions.RequestException as e:
            logger.error('[API Network Error] %s %s: %s', method, url, e)
            raise APIError(503, 'No se pudo conectar con la API', is_network_error=True)

        self._store_cookie(response)

        if response.status_code >= 400:
            data = None
            message = response.reason or 'Error desconocido'
            if response.headers.get('content-type', '').startswith('application/json'):
                data = response.json()
                message = data.get('error') or data.get('message') or message
            logger.error('[API Error %s]: %s', response.status_code, message)
            raise APIError(response.status_code, message, data)
        return response

    def request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        """
        Llama a la API y devuelve el cuerpo JSON.

        Raises:
            APIError: Respuesta >= 400 o fallo de red
        """
        return self._send(method, path, **kwargs).json()

    # =========================================================================
    # CATÁLOGO
    # =========================================================================

    def get_dispositivos(self, params: Dict[str, Any] = None) -> Dict[str, Any]:
        return self.request('GET', '/dispositivos/', params=params or {})

    def get_dispositivo_by_id(self, dispositivo_id: int) -> Dict[str, Any]:
        return self.request('GET', f'/dispositivos/{dispositivo_id}')

    def search_dispositivos(self, query: str) -> Dict[str, Any]:
        return self.request('GET', '/dispositivos/search', params={'q': query})

    def get_estadisticas(self) -> Dict[str, Any]:
        return self.request('GET', '/dispositivos/estadisticas')

    def create_dispositivo(self, data: Dict[str, Any], files: Dict[str, Any] = None) -> Dict[str, Any]:
        return self.request('POST', '/dispositivos/', data=data, files=files or None)

    def update_dispositivo(self, dispositivo_id: int, data: Dict[str, Any], files: Dict[str, Any] = None) -> Dict[str, Any]:
        return self.request('PUT', f'/dispositivos/{dispositivo_id}', data=data, files=files or None)

    def delete_dispositivo(self, dispositivo_id: int) -> Dict[str, Any]:
        return self.request('DELETE', f'/dispositivos/{dispositivo_id}')

    def get_categorias(self) -> Dict[str, Any]:
        return self.request('GET', '/categorias/')

    def get_marcas(self) -> Dict[str, Any]:
        return self.request('GET', '/marcas/')

    def get_informacion_tecnica(self) -> Dict[str, Any]:
        return self.request('GET', '/informacion-tecnica/')

    def create_informacion_tecnica(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.request('POST', '/informacion-tecnica/', json=data)

    # =========================================================================
    # AUTENTICACIÓN
    # =========================================================================

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self.request('POST', '/auth/login', json={'email': email, 'password': password})

    def register(self, user_data: Dict[str, Any]) -> Dict[str, Any]:
        return self.request('POST', '/auth/register', json=user_data)

    def logout(self) -> Dict[str, Any]:
        return self.request('POST', '/auth/logout')

    def get_current_user(self) -> Dict[str, Any]:
        return self.request('GET', '/auth/me')

    def update_profile(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.request('PUT', '/auth/profile', json=data)

    def change_password(self, current_password: str, new_password: str) -> Dict[str, Any]:
        return self.request('PUT', '/auth/change-password', json={
            'currentPassword': current_password,
            'newPassword': new_password,
        })

    # =========================================================================
    # ADMINISTRACIÓN
    # =========================================================================

    def get_logs(self, params: Dict[str, Any] = None) -> Dict[str, Any]:
        return self.request('GET', '/logs/', params=params or {})

    def get_log_stats(self, periodo: str = 'dia') -> Dict[str, Any]:
        return self.request('GET', '/logs/estadisticas', params={'periodo': periodo})

    def export_logs(self, params: Dict[str, Any] = None) -> Tuple[bytes, str]:
        """
        Returns:
            (contenido CSV, cabecera Content-Disposition)
        """
        response = self._send('GET', '/logs/exportar', params=params or {})
        return response.content, response.headers.get('Content-Disposition', 'attachment; filename=logs.csv')

    def get_usuarios(self, params: Dict[str, Any] = None) -> Dict[str, Any]:
        return self.request('GET', '/usuarios/', params=params or {})

    def update_user_role(self, usuario_id: int, rol_id: int) -> Dict[str, Any]:
        return self.request('PUT', f'/usuarios/{usuario_id}/role', json={'rol_id': rol_id})

    def update_user_status(self, usuario_id: int, estado_id: int) -> Dict[str, Any]:
        return self.request('PUT', f'/usuarios/{usuario_id}/status', json={'estado_id': estado_id})

    def health_check(self) -> Dict[str, Any]:
        return self.request('GET', '/health')
