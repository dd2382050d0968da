# ==============================================================================
# PUNTO DE ENTRADA - TIENDA / PANEL GALUGAS
# ==============================================================================
# Desarrollo:   python wsgi_client.py
# Producción:   gunicorn wsgi_client:app
# ==============================================================================

from galugas import config
from galugas.client.main import create_client_app

config.validate_config()
app = create_client_app()


if __name__ == "__main__":
    if not config.DEBUG:
        print(f"\n{'='*50}")
        print(f"  Tienda Galugas iniciada en http://{config.HOST}:{config.CLIENT_PORT}")
        print(f"  API: {config.API_URL}")
        print(f"{'='*50}\n")

    app.run(host=config.HOST, port=config.CLIENT_PORT, debug=config.DEBUG)
