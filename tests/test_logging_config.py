"""
Tests for the queue-based logging setup.
"""
import logging
import logging.handlers

from shuffle_service.logging_config import ThreadSafeLoggingConfig


class TestThreadSafeLoggingConfig:

    def setup_method(self):
        root = logging.getLogger()
        self._saved_handlers = list(root.handlers)
        self._saved_level = root.level
        self.config = ThreadSafeLoggingConfig()

    def teardown_method(self):
        self.config.stop()
        root = logging.getLogger()
        root.handlers[:] = self._saved_handlers
        root.setLevel(self._saved_level)

    def test_setup_routes_root_through_queue(self):
        self.config.setup_logging(debug=False)

        root = logging.getLogger()
        assert self.config.running
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.handlers.QueueHandler)
        assert root.level == logging.INFO
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_debug_level(self):
        self.config.setup_logging(debug=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_setup_twice_replaces_listener(self):
        self.config.setup_logging()
        self.config.setup_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_stop(self):
        self.config.setup_logging()
        self.config.stop()

        assert not self.config.running
