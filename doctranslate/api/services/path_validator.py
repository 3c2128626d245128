"""
Path validation utilities for secure file operations
"""
from typing import Tuple


class PathValidator:
    """Validates file names for security"""

    MAX_FILENAME_LENGTH = 255

    @staticmethod
    def validate_filename(filename: str) -> Tuple[bool, str]:
        """
        Validate filename for security issues

        Args:
            filename: The filename to validate

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not filename:
            return False, "Filename cannot be empty"

        # Prevent directory traversal
        if '..' in filename or filename.startswith('/') or filename.startswith('\\'):
            return False, "Invalid filename: directory traversal not allowed"

        if '/' in filename or '\\' in filename:
            return False, "Invalid filename: subdirectories not allowed"

        if len(filename) > PathValidator.MAX_FILENAME_LENGTH:
            return False, f"Filename too long (max {PathValidator.MAX_FILENAME_LENGTH} characters)"

        # Prevent absolute paths
        if ':' in filename and len(filename) > 2 and filename[1] == ':':  # Windows absolute path
            return False, "Absolute paths not allowed"

        return True, ""
