"""
API Routes
"""
from .config_routes import create_config_blueprint
from .document_routes import create_document_blueprint
from .translation_routes import create_translation_blueprint
from .file_routes import create_file_blueprint
from .history_routes import create_history_blueprint

__all__ = [
    'create_config_blueprint',
    'create_document_blueprint',
    'create_translation_blueprint',
    'create_file_blueprint',
    'create_history_blueprint'
]
