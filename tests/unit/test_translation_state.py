"""
Unit tests for TranslationStateManager.
"""
import threading

from doctranslate.api.translation_state import TranslationStateManager


class TestTranslationJobs:
    """Tests for job state."""

    def test_create_translation(self):
        manager = TranslationStateManager()
        manager.create_translation("t1", {'filename': 'a.txt'})

        job = manager.get_translation("t1")
        assert job['status'] == 'queued'
        assert job['progress'] == 0
        assert job['result'] is None
        assert 'start_time' in job['stats']
        assert "t1 queued" in job['logs'][0]

    def test_update_merges_stats_and_appends_log(self):
        manager = TranslationStateManager()
        manager.create_translation("t1", {})

        manager.update_translation("t1", {'status': 'running', 'stats': {'elapsed_time': 2.5}, 'log': 'working'})

        job = manager.get_translation("t1")
        assert job['status'] == 'running'
        assert job['stats']['elapsed_time'] == 2.5
        assert 'start_time' in job['stats']
        assert job['logs'][-1] == 'working'

    def test_unknown_translation(self):
        manager = TranslationStateManager()
        assert manager.get_translation("missing") is None
        assert manager.update_translation("missing", {'status': 'running'}) is False
        assert manager.set_translation_field("missing", 'status', 'x') is False
        assert manager.append_log("missing", 'x') is False
        assert manager.get_translation_field("missing", 'status', 'none') == 'none'
        assert manager.exists("missing") is False

    def test_returned_state_is_a_copy(self):
        manager = TranslationStateManager()
        manager.create_translation("t1", {'filename': 'a.txt'})

        manager.get_translation("t1")['config']['filename'] = 'changed'
        manager.get_translation_field("t1", 'logs').append('injected')

        job = manager.get_translation("t1")
        assert job['config']['filename'] == 'a.txt'
        assert 'injected' not in job['logs']

    def test_summaries_newest_first(self):
        manager = TranslationStateManager()
        manager.create_translation("old", {'filename': 'old.txt', 'source_language': 'en', 'target_language': 'fr'})
        manager.create_translation("new", {'filename': 'new.txt'})
        manager.update_translation("old", {'stats': {'start_time': 1.0}})

        summaries = manager.get_translation_summaries()

        assert [s['translation_id'] for s in summaries] == ["new", "old"]
        assert summaries[1]['filename'] == 'old.txt'
        assert summaries[1]['target_language'] == 'fr'

    def test_concurrent_log_appends(self):
        manager = TranslationStateManager()
        manager.create_translation("t1", {})

        def worker(n):
            for i in range(50):
                manager.append_log("t1", f"{n}-{i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(manager.get_translation_field("t1", 'logs')) == 1 + 4 * 50


class TestHistory:
    """Tests for translation history."""

    def test_newest_first_and_capped(self):
        manager = TranslationStateManager(max_history=2)
        for name in ("a", "b", "c"):
            manager.add_history_entry({'filename': name})

        assert [entry['filename'] for entry in manager.get_history()] == ["c", "b"]

    def test_clear_history(self):
        manager = TranslationStateManager()
        manager.add_history_entry({'filename': 'a'})
        manager.add_history_entry({'filename': 'b'})

        assert manager.clear_history() == 2
        assert manager.get_history() == []
        assert manager.clear_history() == 0
