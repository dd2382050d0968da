# ==============================================================================
# GALUGAS - Tienda de tecnología
# ==============================================================================
# ├── main.py          → API REST (create_app)
# ├── client/          → Tienda y panel de administración (create_client_app)
# ├── services/        → Lógica de negocio
# ├── repositories/    → Acceso a datos (SQL crudo sobre SQLAlchemy)
# ├── middleware/      → Compuertas de rol, auditoría, subida de imágenes
# └── routes/          → Blueprints de la API
# ==============================================================================

__version__ = '1.0.0'
