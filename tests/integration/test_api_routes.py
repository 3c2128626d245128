"""
Integration tests for the Flask translation API.

Remote services are replaced by FakeProvider and FakeDocumentClient; the
translation job runs synchronously so its outcome can be asserted directly.
"""
import io

import pytest
from flask import Flask

from conftest import FakeDocumentClient, FakeProvider, llm_json, unavailable
from doctranslate.api.handlers import run_translation_async_wrapper
from doctranslate.api.routes import configure_routes
from doctranslate.api.translation_state import TranslationStateManager
from doctranslate.core.exceptions import ConfigurationError, ServiceError
from doctranslate.core.retry import RetryPolicy
from doctranslate.core.services.document_translation import TRANSLATION_FAILED_MESSAGE
from doctranslate.core.workflow import TranslationSession

pytestmark = pytest.mark.integration


class FakeSocketIO:
    """Records emitted events"""

    def __init__(self):
        self.events = []

    def emit(self, event, data, namespace=None):
        self.events.append((event, data))


class Backend:
    """Remote services shared by every session the API builds during a test"""

    def __init__(self):
        self.provider = FakeProvider()
        self.document_client = FakeDocumentClient()
        self.policy = RetryPolicy(max_attempts=3, initial_delay=0.0)
        self.settings = []
        self.fail_with = None

    def session_factory(self, settings, log_callback=None):
        if self.fail_with is not None:
            raise self.fail_with
        self.settings.append(settings)
        return TranslationSession(
            provider=self.provider,
            document_client=self.document_client,
            policy=self.policy,
            auto_detect=bool(settings.get('auto_detect', True)),
            detection_backend="llm",
            log_callback=log_callback
        )


@pytest.fixture
def backend():
    return Backend()


@pytest.fixture
def socketio():
    return FakeSocketIO()


@pytest.fixture
def state_manager():
    return TranslationStateManager()


@pytest.fixture
def output_dir(tmp_path):
    (tmp_path / 'uploads').mkdir()
    return tmp_path


def build_app(backend, socketio, state_manager, output_dir, max_content_length=None):
    app = Flask(__name__)
    app.config['TESTING'] = True
    if max_content_length:
        app.config['MAX_CONTENT_LENGTH'] = max_content_length

    def start_job(translation_id, config):
        run_translation_async_wrapper(translation_id, config, state_manager, str(output_dir),
                                      socketio, backend.session_factory)

    configure_routes(app, state_manager, str(output_dir), start_job, session_factory=backend.session_factory)
    return app


@pytest.fixture
def client(backend, socketio, state_manager, output_dir):
    return build_app(backend, socketio, state_manager, output_dir).test_client()


def upload(client, data=b"Bonjour tout le monde", filename="lettre.txt", **form):
    form['file'] = (io.BytesIO(data), filename)
    return client.post('/api/upload', data=form, content_type='multipart/form-data')


class TestConfigRoutes:
    """Tests for health, configuration, languages and models."""

    def test_health(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200
        assert response.get_json()['status'] == 'ok'

    def test_config(self, client):
        data = client.get('/api/config').get_json()
        assert data['retry_policy']['retryable'] == 'is_service_unavailable'
        assert {'value': 'es', 'label': 'Spanish'} in data['languages']
        assert 'max_upload_size_mb' in data

    def test_languages_exclude_source(self, client):
        data = client.get('/api/languages?source=fr').get_json()
        assert data['source'] == 'fr'
        assert 'fr' not in [language['value'] for language in data['languages']]

    def test_languages_accept_label(self, client):
        assert client.get('/api/languages?source=German').get_json()['source'] == 'de'

    def test_unknown_source_language(self, client):
        response = client.get('/api/languages?source=xx')
        assert response.status_code == 400
        assert "Unsupported source language" in response.get_json()['error']

    def test_models(self, client):
        data = client.get('/api/models?provider=openai').get_json()
        assert data == {'models': [], 'status': 'connected', 'count': 0}

    def test_models_configuration_error(self, client, backend):
        backend.fail_with = ConfigurationError("Gemini provider requires an API key.")
        data = client.get('/api/models?provider=gemini').get_json()
        assert data['status'] == 'error'
        assert data['error'] == "Gemini provider requires an API key."

    def test_unknown_endpoint(self, client):
        response = client.get('/api/nothing-here')
        assert response.status_code == 404
        assert response.get_json()['error'] == "API Endpoint not found"


class TestUpload:
    """Tests for /api/upload."""

    def test_upload_extracts_and_detects(self, client, backend, output_dir):
        backend.provider.queue(
            llm_json(extractedText="Bonjour tout le monde"),
            llm_json(languageCode="fr", confidence=0.95)
        )

        response = upload(client)

        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['upload_id'] == "lettre.txt"
        assert data['mime_type'] == "text/plain"
        assert data['size'] == len(b"Bonjour tout le monde")
        assert data['extracted_text'] == "Bonjour tout le monde"
        assert data['detected_language'] == "fr"
        assert data['detected_language_label'] == "French"
        assert data['confidence'] == 0.95
        assert data['detection_error'] is None
        assert (output_dir / 'uploads' / 'lettre.txt').read_bytes() == b"Bonjour tout le monde"

    def test_upload_without_auto_detect(self, client, backend):
        backend.provider.queue(llm_json(extractedText="Bonjour"))

        data = upload(client, auto_detect='false').get_json()

        assert data['auto_detect'] is False
        assert data['detected_language'] is None
        assert len(backend.provider.calls) == 1

    def test_detection_failure_is_reported(self, client, backend):
        backend.provider.queue(llm_json(extractedText="Bonjour"), llm_json(languageCode="tlh", confidence=0.4))

        response = upload(client)

        assert response.status_code == 200
        assert response.get_json()['detected_language'] is None
        assert "not supported" in response.get_json()['detection_error']

    def test_duplicate_names_get_unique_ids(self, client, backend):
        backend.provider.queue(llm_json(extractedText="a"), llm_json(extractedText="b"))

        first = upload(client, auto_detect='false').get_json()
        second = upload(client, auto_detect='false').get_json()

        assert first['upload_id'] == "lettre.txt"
        assert second['upload_id'] == "lettre (1).txt"

    def test_unsafe_filename_is_sanitized(self, client, backend, output_dir):
        backend.provider.queue(llm_json(extractedText="x"))
        data = upload(client, filename="../../etc/passwd.txt", auto_detect='false').get_json()
        assert '/' not in data['upload_id']
        assert (output_dir / 'uploads' / data['upload_id']).exists()

    def test_missing_file(self, client):
        response = client.post('/api/upload', data={}, content_type='multipart/form-data')
        assert response.status_code == 400
        assert response.get_json()['error'] == "No file part in request"

    def test_empty_file(self, client):
        response = upload(client, data=b"")
        assert response.status_code == 400
        assert response.get_json()['error'] == "Empty file not allowed"

    def test_extraction_exhausts_retries(self, client, backend, output_dir):
        backend.provider.queue(unavailable(), unavailable(), unavailable())

        response = upload(client)

        assert response.status_code == 502
        body = response.get_json()
        assert body['attempts_made'] == 3
        assert body['retries_exhausted'] is True
        assert list((output_dir / 'uploads').iterdir()) == []

    def test_request_too_large(self, backend, socketio, state_manager, output_dir):
        client = build_app(backend, socketio, state_manager, output_dir, max_content_length=64).test_client()
        response = upload(client, data=b"x" * 1024)
        assert response.status_code == 413
        assert response.get_json()['error'] == "File too large"


class TestDetectAndHints:
    """Tests for /api/detect and /api/quality-hints."""

    def test_detect(self, client, backend):
        backend.provider.queue(llm_json(languageCode="de", confidence=0.88))

        data = client.post('/api/detect', json={'text': "Guten Morgen"}).get_json()

        assert data == {'language_code': 'de', 'confidence': 0.88, 'supported': True, 'label': 'German'}

    def test_detect_requires_text(self, client):
        response = client.post('/api/detect', json={'text': "   "})
        assert response.status_code == 400
        assert response.get_json()['error'] == "Missing or empty field: text"

    def test_quality_hints(self, client, backend):
        backend.provider.queue(llm_json(qualityHints="Fluent. Consider 'informe' for 'report'."))

        response = client.post('/api/quality-hints', json={
            'original_text': "The report",
            'translated_text': "El reporte",
            'source_language': "en",
            'target_language': "es"
        })

        assert response.status_code == 200
        assert response.get_json()['quality_hints'] == "Fluent. Consider 'informe' for 'report'."
        prompt = backend.provider.calls[0]['prompt']
        assert "English" in prompt and "Spanish" in prompt

    def test_quality_hints_missing_translation(self, client):
        response = client.post('/api/quality-hints', json={
            'original_text': "The report",
            'source_language': "en",
            'target_language': "es"
        })
        assert response.status_code == 400
        assert "translated_text" in response.get_json()['error']


class TestTranslationJobs:
    """Tests for /api/translate and job status."""

    def _upload(self, client, backend):
        backend.provider.queue(
            llm_json(extractedText="Bonjour tout le monde"),
            llm_json(languageCode="fr", confidence=0.95)
        )
        return upload(client).get_json()

    def _translate(self, client, uploaded, **extra):
        body = {
            'upload_id': uploaded['upload_id'],
            'filename': uploaded['filename'],
            'mime_type': uploaded['mime_type'],
            'original_text': uploaded['extracted_text'],
            'source_language': uploaded['detected_language'],
            'target_language': 'es',
        }
        body.update(extra)
        return client.post('/api/translate', json=body)

    def test_full_translation(self, client, backend, socketio, output_dir):
        uploaded = self._upload(client, backend)
        backend.provider.queue(llm_json(translatedText="Hola a todos"))
        backend.document_client.responses.append(b"Hola a todos")

        response = self._translate(client, uploaded, openai_api_key="sk-secret")
        assert response.status_code == 200
        started = response.get_json()
        assert started['translation_id'].startswith("trans_")
        assert started['config_received']['openai_api_key'] == '***'

        status = client.get(f"/api/translation/{started['translation_id']}").get_json()
        assert status['status'] == 'completed'
        assert status['progress'] == 100
        assert status['error'] is None
        assert status['result']['translated_text'] == "Hola a todos"
        assert status['result']['output_filename'] == "lettre_translated_to_es.txt"
        assert status['config']['openai_api_key'] == '***'
        assert (output_dir / "lettre_translated_to_es.txt").read_bytes() == b"Hola a todos"
        assert backend.provider.closed and backend.document_client.closed

        events = [event for event, _ in socketio.events]
        assert 'file_list_changed' in events
        completed = [data for event, data in socketio.events
                     if event == 'translation_update' and data.get('status') == 'completed']
        assert completed[0]['file_info']['filename'] == "lettre_translated_to_es.txt"

        download = client.get("/api/files/lettre_translated_to_es.txt")
        assert download.status_code == 200
        assert download.data == b"Hola a todos"

        history = client.get('/api/history').get_json()
        assert history['count'] == 1
        assert history['history'][0]['translation_id'] == started['translation_id']

        listing = client.get('/api/translations').get_json()['translations']
        assert listing[0]['filename'] == "lettre.txt"

    def test_document_failure_marks_job_failed(self, client, backend):
        uploaded = self._upload(client, backend)
        backend.provider.queue(llm_json(translatedText="Hola"))
        backend.document_client.responses.append(ServiceError("HTTP 400: bad input", status_code=400))

        translation_id = self._translate(client, uploaded).get_json()['translation_id']
        status = client.get(f"/api/translation/{translation_id}").get_json()

        assert status['status'] == 'error'
        assert status['error'] == TRANSLATION_FAILED_MESSAGE
        assert status['attempts_made'] == 1
        assert client.get('/api/history').get_json()['count'] == 0

    def test_missing_field(self, client):
        response = client.post('/api/translate', json={'upload_id': 'x', 'source_language': 'en', 'target_language': 'es'})
        assert response.status_code == 400
        assert response.get_json()['error'] == "Missing or empty field: original_text"

    def test_unsupported_language(self, client):
        response = client.post('/api/translate', json={
            'upload_id': 'x', 'original_text': 'hi', 'source_language': 'en', 'target_language': 'Klingon'
        })
        assert response.status_code == 400

    def test_unknown_upload(self, client):
        response = client.post('/api/translate', json={
            'upload_id': 'never-uploaded.txt', 'original_text': 'hi', 'source_language': 'en', 'target_language': 'es'
        })
        assert response.status_code == 404

    def test_unknown_translation(self, client):
        assert client.get('/api/translation/trans_0_missing').status_code == 404


class TestFilesAndHistory:
    """Tests for file and history routes."""

    def test_download_and_delete(self, client, output_dir):
        (output_dir / "report_translated_to_fr.pdf").write_bytes(b"%PDF")

        assert client.get("/api/files/report_translated_to_fr.pdf").data == b"%PDF"
        assert client.delete("/api/files/report_translated_to_fr.pdf").get_json()['success'] is True
        assert client.get("/api/files/report_translated_to_fr.pdf").status_code == 404
        assert client.delete("/api/files/report_translated_to_fr.pdf").status_code == 404

    def test_invalid_filename(self, client):
        response = client.get("/api/files/..secret")
        assert response.status_code == 400

    def test_uploads_are_not_downloadable(self, client, output_dir):
        (output_dir / 'uploads' / 'private.txt').write_bytes(b"x")
        assert client.get("/api/files/uploads/private.txt").status_code == 400

    def test_clear_history(self, client, state_manager):
        state_manager.add_history_entry({'translation_id': 't1'})
        assert client.delete('/api/history').get_json() == {'success': True, 'removed': 1}
        assert client.get('/api/history').get_json() == {'history': [], 'count': 0}
