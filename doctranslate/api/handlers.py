"""
Translation job handlers and processing logic
"""
import asyncio
import logging
import threading
import time
import traceback
from pathlib import Path

import aiofiles

from doctranslate.config import TranslationConfig
from doctranslate.core.documents import DocumentFile, get_unique_output_path
from doctranslate.core.exceptions import TranslationError, error_message
from doctranslate.core.workflow import create_session
from doctranslate.utils.unified_logger import setup_web_logger, LogType
from .services import FileService
from .websocket import emit_update

logger = logging.getLogger(__name__)


def create_web_session(request_data, log_callback=None):
    """Session factory used by the web API: settings come from the request body"""
    return create_session(TranslationConfig.from_web_request(request_data or {}), log_callback)


def run_translation_async_wrapper(translation_id, config, state_manager, output_dir, socketio,
                                  session_factory=create_web_session):
    """
    Wrapper for running translation in async context

    Args:
        translation_id (str): Translation job ID
        config (dict): Translation configuration
        state_manager: State manager instance
        output_dir (str): Output directory path
        socketio: SocketIO instance
        session_factory: Callable building a TranslationSession from the config
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        loop.run_until_complete(
            perform_actual_translation(translation_id, config, state_manager, output_dir, socketio, session_factory)
        )
    except Exception as e:
        error_msg = f"Uncaught major error in translation wrapper {translation_id}: {e}"
        logger.error(error_msg)
        if state_manager.exists(translation_id):
            state_manager.update_translation(translation_id, {
                'status': 'error',
                'error': error_msg,
                'log': f"CRITICAL WRAPPER ERROR: {error_msg}"
            })
            emit_update(socketio, translation_id, {'error': error_msg, 'status': 'error'}, state_manager)
    finally:
        loop.close()


async def perform_actual_translation(translation_id, config, state_manager, output_dir, socketio,
                                     session_factory=create_web_session):
    """
    Translate one uploaded document and store the result

    Args:
        translation_id (str): Translation job ID
        config (dict): Translation configuration
        state_manager: State manager instance
        output_dir (str): Output directory path
        socketio: SocketIO instance
        session_factory: Callable building a TranslationSession from the config
    """
    if not state_manager.exists(translation_id):
        logger.error("Critical error: %s not found in state_manager.", translation_id)
        return

    state_manager.set_translation_field(translation_id, 'status', 'running')
    emit_update(socketio, translation_id, {'status': 'running', 'log': 'Translation task started by worker.'}, state_manager)

    def web_callback(log_entry):
        """Callback for WebSocket emission"""
        emit_update(socketio, translation_id, {'log': log_entry['message'], 'log_entry': log_entry}, state_manager)

    def storage_callback(log_entry):
        """Callback for storing logs"""
        state_manager.append_log(translation_id, log_entry)

    job_logger = setup_web_logger(web_callback, storage_callback)

    def set_progress(progress):
        state_manager.set_translation_field(translation_id, 'progress', progress)
        emit_update(socketio, translation_id, {'progress': progress}, state_manager)

    file_service = FileService(output_dir)
    session = None
    try:
        session = session_factory(config, job_logger.create_retry_callback())

        upload_path = file_service.find_upload(config['upload_id'])
        if upload_path is None:
            raise TranslationError("Uploaded document not found. Please upload it again.",
                                   context={'upload_id': config['upload_id']})
        document = await DocumentFile.from_path(upload_path, config.get('mime_type') or None)
        document.filename = config.get('filename') or document.filename

        session.restore(document, config['original_text'],
                        config['source_language'], config['target_language'])

        job_logger.info("Translation started", LogType.TRANSLATION_START, {
            'input_file': document.filename,
            'source_lang': session.source_language,
            'target_lang': session.target_language,
            'llm_provider': config.get('llm_provider'),
            'model': config.get('model')
        })
        set_progress(10)

        result = await session.translate()
        set_progress(90)

        output_path = Path(get_unique_output_path(Path(output_dir) / result.download_filename))
        async with aiofiles.open(output_path, 'wb') as f:
            await f.write(session.translated_document_bytes())

        result_data = result.to_dict()
        result_data['output_filename'] = output_path.name
        elapsed = time.time() - (state_manager.get_translation_field(translation_id, 'stats') or {}).get('start_time', time.time())

        state_manager.update_translation(translation_id, {
            'status': 'completed',
            'progress': 100,
            'result': result_data,
            'output_filepath': str(output_path),
            'stats': {'elapsed_time': elapsed}
        })
        state_manager.add_history_entry({'translation_id': translation_id, **result_data})

        job_logger.info("Translation complete", LogType.TRANSLATION_END, {'output_file': output_path.name})
        emit_update(socketio, translation_id, {
            'status': 'completed',
            'progress': 100,
            'result': result_data,
            'file_info': file_service.get_file_info(output_path)
        }, state_manager)
        socketio.emit('file_list_changed', {'reason': 'completed', 'filename': output_path.name}, namespace='/')

    except TranslationError as e:
        message = error_message(e)
        attempts = getattr(e, 'attempts_made', None)
        job_logger.error(message, LogType.ERROR_DETAIL, {'details': str(e), 'attempts_made': attempts})
        state_manager.update_translation(translation_id, {
            'status': 'error',
            'error': message,
            'attempts_made': attempts
        })
        emit_update(socketio, translation_id, {
            'status': 'error',
            'error': message,
            'attempts_made': attempts
        }, state_manager)

    except Exception as e:
        critical_error_msg = f"Critical error during translation task ({translation_id}): {e}"
        logger.error("%s\n%s", critical_error_msg, traceback.format_exc())
        state_manager.update_translation(translation_id, {'status': 'error', 'error': critical_error_msg})
        emit_update(socketio, translation_id, {'status': 'error', 'error': critical_error_msg}, state_manager)

    finally:
        if session is not None:
            await session.aclose()


def start_translation_job(translation_id, config, state_manager, output_dir, socketio,
                          session_factory=create_web_session):
    """
    Start a translation job in a separate thread

    Args:
        translation_id (str): Translation job ID
        config (dict): Translation configuration
        state_manager: State manager instance
        output_dir (str): Output directory path
        socketio: SocketIO instance
        session_factory: Callable building a TranslationSession from the config
    """
    thread = threading.Thread(
        target=run_translation_async_wrapper,
        args=(translation_id, config, state_manager, output_dir, socketio, session_factory)
    )
    thread.daemon = True
    thread.start()
