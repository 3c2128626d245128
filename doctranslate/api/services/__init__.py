"""
API Services
"""
from .file_service import FileService
from .path_validator import PathValidator

__all__ = ['FileService', 'PathValidator']
