"""
Translation job management routes
"""
import time
import uuid

from flask import Blueprint, request, jsonify

from doctranslate.core.exceptions import ValidationError
from doctranslate.core.languages import is_supported
from ..services import FileService

REQUIRED_FIELDS = ['upload_id', 'original_text', 'source_language', 'target_language']


def _public_config(config):
    """Job configuration without API keys"""
    return {k: ('***' if 'api_key' in k and v else v) for k, v in config.items()}


def create_translation_blueprint(state_manager, start_translation_job, output_dir):
    """
    Create and configure the translation blueprint

    Args:
        state_manager: Translation state manager instance
        start_translation_job: Function to start translation jobs
        output_dir: Base directory for file operations
    """
    bp = Blueprint('translation', __name__)
    file_service = FileService(output_dir)

    @bp.route('/api/translate', methods=['POST'])
    def start_translation_request():
        """Start a new translation job for an uploaded document"""
        data = request.get_json(silent=True) or {}

        for field in REQUIRED_FIELDS:
            value = data.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                return jsonify({"error": f"Missing or empty field: {field}"}), 400

        for field in ('source_language', 'target_language'):
            if not is_supported(data[field]):
                raise ValidationError(f"Unsupported language for {field}: {data[field]}")

        if file_service.find_upload(data['upload_id']) is None:
            return jsonify({"error": "Uploaded document not found"}), 404

        translation_id = f"trans_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"

        config = dict(data)
        config.setdefault('filename', data['upload_id'])

        state_manager.create_translation(translation_id, config)
        start_translation_job(translation_id, config)

        return jsonify({
            "translation_id": translation_id,
            "message": "Translation queued.",
            "config_received": _public_config(config)
        })

    @bp.route('/api/translation/<translation_id>', methods=['GET'])
    def get_translation_job_status(translation_id):
        """Get status of a translation job"""
        job_data = state_manager.get_translation(translation_id)
        if not job_data:
            return jsonify({"error": "Translation not found"}), 404

        stats = job_data.get('stats', {})
        if job_data.get('status') in ('running', 'queued'):
            elapsed = time.time() - stats.get('start_time', time.time())
        else:
            elapsed = stats.get('elapsed_time', time.time() - stats.get('start_time', time.time()))

        return jsonify({
            "translation_id": translation_id,
            "status": job_data.get('status'),
            "progress": job_data.get('progress'),
            "stats": {
                'start_time': stats.get('start_time'),
                'elapsed_time': elapsed
            },
            "logs": job_data.get('logs', [])[-100:],
            "result": job_data.get('result'),
            "error": job_data.get('error'),
            "attempts_made": job_data.get('attempts_made'),
            "config": _public_config(job_data.get('config', {}))
        })

    @bp.route('/api/translations', methods=['GET'])
    def list_all_translations():
        """List all translation jobs"""
        summary_list = state_manager.get_translation_summaries()
        return jsonify({"translations": summary_list})

    return bp
