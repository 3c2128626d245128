"""
File service for centralized file operations
"""
from pathlib import Path
from datetime import datetime
from typing import Optional, Dict

from werkzeug.utils import secure_filename

from doctranslate.core.documents import get_unique_output_path


class FileService:
    """Handles uploaded and translated files for the translation API"""

    def __init__(self, output_dir: str):
        """
        Initialize file service

        Args:
            output_dir: Base directory for file operations
        """
        self.output_dir = Path(output_dir)
        self.uploads_dir = self.output_dir / 'uploads'

    def save_upload(self, data: bytes, filename: str) -> Path:
        """
        Store an uploaded document under a sanitized, unique name

        Returns:
            Path of the stored file
        """
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        safe_name = secure_filename(filename) or 'document'
        path = Path(get_unique_output_path(self.uploads_dir / safe_name))
        path.write_bytes(data)
        return path

    def find_upload(self, upload_id: str) -> Optional[Path]:
        """Find a stored upload by its stored name"""
        path = self.uploads_dir / upload_id
        if path.exists() and path.is_file():
            return path
        return None

    def find_file(self, filename: str) -> Optional[Path]:
        """
        Find a translated file in the output directory

        Args:
            filename: Name of the file to find

        Returns:
            Path object if found, None otherwise
        """
        path = self.output_dir / filename
        if path.exists() and path.is_file():
            return path
        return None

    def delete_file(self, filename: str) -> bool:
        """
        Delete a translated file

        Args:
            filename: Name of the file to delete

        Returns:
            True if file was deleted, False if not found
        """
        file_path = self.find_file(filename)
        if file_path:
            file_path.unlink()
            return True
        return False

    def get_file_info(self, file_path: Path) -> Dict:
        """File metadata returned by the API"""
        stat = file_path.stat()
        return {
            "filename": file_path.name,
            "size_bytes": stat.st_size,
            "size_mb": round(stat.st_size / (1024 * 1024), 2),
            "modified_date": datetime.fromtimestamp(stat.st_mtime).isoformat(),
            "file_type": file_path.suffix.lower()[1:] if file_path.suffix else "unknown"
        }
