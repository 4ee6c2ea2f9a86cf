"""Pytest fixtures for tests."""

import io
import logging

import pytest

from clibind import CommandLineBinding


@pytest.fixture
def out():
    """Capture stream for command output."""
    return io.StringIO()


@pytest.fixture
def err():
    """Capture stream for command errors."""
    return io.StringIO()


@pytest.fixture
def bind(out, err):
    """Build a binding whose output and error streams are captured."""

    def _bind(model_type, config=None):
        binding = CommandLineBinding.build(model_type, config)
        binding.out = out
        binding.error = err
        return binding

    return _bind


@pytest.fixture
def clean_root_logger():
    """Restore the root logger's level and handlers after the test."""
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
