"""
Translation history routes
"""
from flask import Blueprint, jsonify


def create_history_blueprint(state_manager):
    """
    Create and configure the history blueprint

    Args:
        state_manager: Translation state manager instance
    """
    bp = Blueprint('history', __name__)

    @bp.route('/api/history', methods=['GET'])
    def get_history():
        """Completed translations, newest first"""
        history = state_manager.get_history()
        return jsonify({"history": history, "count": len(history)})

    @bp.route('/api/history', methods=['DELETE'])
    def clear_history():
        removed = state_manager.clear_history()
        return jsonify({"success": True, "removed": removed})

    return bp
