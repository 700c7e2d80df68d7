"""
Unit tests for the shared logger factory.
"""

import logging

from study_core.logging_config import get_logger


class TestGetLogger:

    def test_single_handler(self):
        first = get_logger("study_core.tests.single")
        second = get_logger("study_core.tests.single")
        assert first is second
        assert len(second.handlers) == 1

    def test_does_not_propagate_to_root(self):
        logger = get_logger("study_core.tests.propagate")
        assert logger.propagate is False

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("STUDY_CORE_LOG_LEVEL", "debug")
        assert get_logger("study_core.tests.env").level == logging.DEBUG

    def test_unknown_level_falls_back_to_warning(self, monkeypatch):
        monkeypatch.setenv("STUDY_CORE_LOG_LEVEL", "chatty")
        assert get_logger("study_core.tests.unknown").level == logging.WARNING

    def test_explicit_level(self):
        assert get_logger("study_core.tests.explicit", logging.INFO).level == logging.INFO
