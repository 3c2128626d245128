"""
Thread-safe translation state management
"""
import threading
import time
import copy
from datetime import datetime
from typing import Dict, Any, List, Optional


class TranslationStateManager:
    """Thread-safe manager for translation jobs and translation history"""

    def __init__(self, max_history: int = 100):
        self._translations: Dict[str, Dict[str, Any]] = {}
        self._history: List[Dict[str, Any]] = []
        self._max_history = max_history
        self._lock = threading.RLock()  # Use RLock to allow nested locking

    def create_translation(self, translation_id: str, config: Dict[str, Any]) -> None:
        """Create a new translation entry"""
        with self._lock:
            self._translations[translation_id] = {
                'status': 'queued',
                'progress': 0,
                'stats': {
                    'start_time': time.time()
                },
                'logs': [f"[{datetime.now().strftime('%H:%M:%S')}] Translation {translation_id} queued."],
                'result': None,
                'error': None,
                'config': config,
                'output_filepath': None
            }

    def update_translation(self, translation_id: str, updates: Dict[str, Any]) -> bool:
        """Update translation state safely"""
        with self._lock:
            if translation_id not in self._translations:
                return False

            translation = self._translations[translation_id]

            # Handle nested updates for stats
            if 'stats' in updates and isinstance(updates['stats'], dict):
                translation.setdefault('stats', {}).update(updates['stats'])
                updates = {k: v for k, v in updates.items() if k != 'stats'}

            # Handle logs append
            if 'log' in updates:
                translation.setdefault('logs', []).append(updates['log'])
                updates = {k: v for k, v in updates.items() if k != 'log'}

            translation.update(updates)
            return True

    def get_translation(self, translation_id: str) -> Optional[Dict[str, Any]]:
        """Get translation state safely"""
        with self._lock:
            if translation_id not in self._translations:
                return None
            # Return a deep copy to prevent external modification of nested objects
            return copy.deepcopy(self._translations[translation_id])

    def get_translation_field(self, translation_id: str, field: str, default=None):
        """Get a specific field from translation state"""
        with self._lock:
            if translation_id not in self._translations:
                return default
            return copy.deepcopy(self._translations[translation_id].get(field, default))

    def set_translation_field(self, translation_id: str, field: str, value: Any) -> bool:
        """Set a specific field in translation state"""
        with self._lock:
            if translation_id not in self._translations:
                return False
            self._translations[translation_id][field] = value
            return True

    def append_log(self, translation_id: str, log_entry: Any) -> bool:
        """Append a log entry to translation"""
        with self._lock:
            if translation_id not in self._translations:
                return False
            self._translations[translation_id].setdefault('logs', []).append(log_entry)
            return True

    def exists(self, translation_id: str) -> bool:
        """Check if translation exists"""
        with self._lock:
            return translation_id in self._translations

    def get_translation_summaries(self) -> list:
        """Get summaries of all translations for listing"""
        with self._lock:
            summaries = []
            for tid, data in self._translations.items():
                config = data.get('config', {})
                summaries.append({
                    "translation_id": tid,
                    "status": data.get('status'),
                    "progress": data.get('progress'),
                    "start_time": data.get('stats', {}).get('start_time'),
                    "filename": config.get('filename'),
                    "source_language": config.get('source_language'),
                    "target_language": config.get('target_language')
                })
            return sorted(summaries, key=lambda x: x.get('start_time') or 0, reverse=True)

    # === History ===

    def add_history_entry(self, entry: Dict[str, Any]) -> None:
        """Record a completed translation (newest first)"""
        with self._lock:
            self._history.insert(0, copy.deepcopy(entry))
            del self._history[self._max_history:]

    def get_history(self) -> List[Dict[str, Any]]:
        with self._lock:
            return copy.deepcopy(self._history)

    def clear_history(self) -> int:
        """Forget all history entries and return how many were removed"""
        with self._lock:
            removed = len(self._history)
            self._history.clear()
            return removed


# Global instance
_state_manager = TranslationStateManager()


def get_state_manager() -> TranslationStateManager:
    """Get the global state manager instance"""
    return _state_manager
