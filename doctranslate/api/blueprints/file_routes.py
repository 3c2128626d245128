"""
Translated file routes (download, delete)
"""
from flask import Blueprint, jsonify, send_from_directory, current_app

from ..services import FileService, PathValidator


def create_file_blueprint(output_dir):
    """
    Create and configure the file management blueprint

    Args:
        output_dir: Base directory for file operations
    """
    bp = Blueprint('files', __name__)
    file_service = FileService(output_dir)

    @bp.route('/api/files/<path:filename>', methods=['GET'])
    def download_file_by_name(filename):
        """Download a translated document by name"""
        is_valid, error = PathValidator.validate_filename(filename)
        if not is_valid:
            return jsonify({"error": error}), 400

        file_path = file_service.find_file(filename)
        if not file_path:
            return jsonify({"error": "File not found"}), 404

        return send_from_directory(str(file_path.parent.resolve()), file_path.name, as_attachment=True)

    @bp.route('/api/files/<path:filename>', methods=['DELETE'])
    def delete_file(filename):
        """Delete a translated document"""
        is_valid, error = PathValidator.validate_filename(filename)
        if not is_valid:
            return jsonify({"error": error}), 400

        if file_service.delete_file(filename):
            current_app.logger.info(f"File deleted: {filename}")
            return jsonify({"success": True, "message": f"File {filename} deleted successfully"})
        return jsonify({"error": "File not found"}), 404

    return bp
