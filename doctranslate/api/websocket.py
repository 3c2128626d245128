"""
WebSocket handlers for real-time communication
"""
import logging

from flask import request
from flask_socketio import emit

logger = logging.getLogger(__name__)


def configure_websocket_handlers(socketio, state_manager):
    """Configure WebSocket event handlers"""

    @socketio.on('connect')
    def handle_websocket_connect():
        logger.info('WebSocket client connected: %s', request.sid)
        emit('connected', {'message': 'Connected to translation server via WebSocket'})

    @socketio.on('disconnect')
    def handle_websocket_disconnect():
        logger.info('WebSocket client disconnected: %s', request.sid)

    @socketio.on('get_status')
    def handle_get_status(data):
        """Send the current state of a job to the requesting client"""
        translation_id = (data or {}).get('translation_id')
        job = state_manager.get_translation(translation_id) if translation_id else None
        if job is None:
            emit('translation_update', {'translation_id': translation_id, 'error': 'Translation not found'})
            return
        emit('translation_update', {
            'translation_id': translation_id,
            'status': job.get('status'),
            'progress': job.get('progress'),
            'error': job.get('error')
        })


def emit_update(socketio, translation_id, data_to_emit, state_manager):
    """
    Emit WebSocket update for translation progress

    Args:
        socketio: SocketIO instance
        translation_id (str): Translation job ID
        data_to_emit (dict): Data to send
        state_manager: Translation state manager instance
    """
    translation_data = state_manager.get_translation(translation_id)
    if translation_data:
        data_to_emit['translation_id'] = translation_id
        try:
            if 'progress' not in data_to_emit and 'progress' in translation_data:
                data_to_emit['progress'] = translation_data['progress']

            socketio.emit('translation_update', data_to_emit, namespace='/')
        except Exception as e:
            logger.warning("WebSocket emission error for %s: %s", translation_id, e)
