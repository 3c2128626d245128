"""
Document upload, language detection and quality hint routes
"""
import asyncio
import logging

from flask import Blueprint, request, jsonify

from doctranslate.config import MAX_UPLOAD_SIZE_MB, parse_bool
from doctranslate.core.documents import DEFAULT_MIME_TYPE, DocumentFile
from doctranslate.core.exceptions import ValidationError
from doctranslate.core.languages import find_language
from doctranslate.core.services import DetectSourceLanguageInput, detect_source_language
from ..services import FileService

logger = logging.getLogger(__name__)


def _required(data, *fields):
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"Missing or empty field: {field}")


def create_document_blueprint(output_dir, session_factory):
    """
    Create and configure the document blueprint

    Args:
        output_dir: Base directory for file operations
        session_factory: Callable building a TranslationSession from request settings
    """
    bp = Blueprint('documents', __name__)
    file_service = FileService(output_dir)
    max_upload_bytes = MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @bp.route('/api/upload', methods=['POST'])
    def upload_file():
        """Store a document, extract its text and optionally detect its language"""
        if 'file' not in request.files:
            return jsonify({"error": "No file part in request"}), 400

        file = request.files['file']
        if not file or file.filename == '':
            return jsonify({"error": "No file selected"}), 400

        if len(file.filename) > 255:
            return jsonify({"error": "Filename too long"}), 400

        file_data = file.read()
        if len(file_data) == 0:
            return jsonify({"error": "Empty file not allowed"}), 400
        if len(file_data) > max_upload_bytes:
            return jsonify({
                "error": "File too large",
                "details": f"Maximum upload size is {MAX_UPLOAD_SIZE_MB} MB"
            }), 413

        settings = request.form.to_dict()
        settings['auto_detect'] = parse_bool(settings.get('auto_detect'))

        mime_type = file.mimetype if file.mimetype and file.mimetype != DEFAULT_MIME_TYPE else None
        document = DocumentFile.from_bytes(file_data, file.filename, mime_type)
        stored_path = file_service.save_upload(file_data, file.filename)

        async def load():
            session = session_factory(settings)
            try:
                await session.load_document(document)
                return {
                    "extracted_text": session.original_text,
                    "auto_detect": session.auto_detect,
                    "detected_language": session.source_language or None,
                    "detected_language_label": session.detected_language_label or None,
                    "confidence": session.detection_confidence,
                    "detection_error": session.detection_error
                }
            finally:
                await session.aclose()

        try:
            extraction = asyncio.run(load())
        except Exception:
            stored_path.unlink(missing_ok=True)
            raise

        logger.info("Uploaded %s (%d bytes) as %s", file.filename, len(file_data), stored_path.name)
        return jsonify({
            "success": True,
            "upload_id": stored_path.name,
            "filename": file.filename,
            "mime_type": document.mime_type,
            "size": document.size,
            "size_mb": round(document.size / (1024 * 1024), 2),
            **extraction
        })

    @bp.route('/api/detect', methods=['POST'])
    def detect_language():
        """Detect the language of a text"""
        data = request.get_json(silent=True) or {}
        _required(data, 'text')

        async def detect():
            session = session_factory(data)
            try:
                return await detect_source_language(
                    DetectSourceLanguageInput(data['text']),
                    provider=session.provider,
                    policy=session.policy,
                    backend=session.detection_backend,
                    log_callback=session.log_callback
                )
            finally:
                await session.aclose()

        result = asyncio.run(detect())
        language = find_language(result.language_code)
        return jsonify({
            "language_code": result.language_code,
            "confidence": result.confidence,
            "supported": language is not None,
            "label": language.label if language else None
        })

    @bp.route('/api/quality-hints', methods=['POST'])
    def quality_hints():
        """Quality commentary for a finished translation"""
        data = request.get_json(silent=True) or {}
        _required(data, 'original_text', 'translated_text', 'source_language', 'target_language')

        async def hints():
            session = session_factory(data)
            try:
                session.set_source_language(data['source_language'])
                session.set_target_language(data['target_language'])
                session.original_text = data['original_text']
                session.translated_text = data['translated_text']
                return await session.fetch_quality_hints()
            finally:
                await session.aclose()

        return jsonify({"quality_hints": asyncio.run(hints())})

    return bp
