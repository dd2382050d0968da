# ==============================================================================
# MIDDLEWARES DE LA API
# ==============================================================================
# ├── auth.py                → Compuertas de rol (require_auth/admin/vendedor)
# ├── logging_middleware.py  → Auditoría automática de peticiones
# └── upload.py              → Subida de imágenes de dispositivos
# ==============================================================================
