# ==============================================================================
# PUNTO DE ENTRADA - API GALUGAS
# ==============================================================================
# Desarrollo:   python wsgi.py
# Producción:   gunicorn wsgi:app  (o waitress-serve wsgi:app)
# ==============================================================================

from galugas import config
from galugas.main import create_app

config.validate_config()
app = create_app()


if __name__ == "__main__":
    if not config.DEBUG:
        print(f"\n{'='*50}")
        print(f"  API Galugas iniciada en http://{config.HOST}:{config.PORT}")
        print(f"  Entorno: {config.NODE_ENV}")
        print(f"  Health:  http://localhost:{config.PORT}/api/health")
        print(f"{'='*50}\n")

    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)
