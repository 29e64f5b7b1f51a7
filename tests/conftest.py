"""Pytest configuration and fixtures for jetgit tests."""

import tempfile
from pathlib import Path

import pytest

from jetgit.core.log import ConsoleSink, setup_logger


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Console-only logging at debug level for the whole session.

    Nothing is sent to logfire.dev and no log files are written.
    """
    test_log_root = Path(tempfile.gettempdir()) / "jetgit-tests"
    setup_logger(
        log_root=test_log_root,
        session_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture
def conflicted():
    """Build conflicted text from (current, incoming) pairs.

    Plain strings are copied through as ordinary lines.
    """
    def build(*parts, current_label="HEAD", incoming_label="feature"):
        lines = []
        for part in parts:
            if isinstance(part, str):
                lines.append(part)
                continue
            current, incoming = part
            lines.append(f"<<<<<<< {current_label}")
            lines.extend(current)
            lines.append("=======")
            lines.extend(incoming)
            lines.append(f">>>>>>> {incoming_label}")
        return "\n".join(lines)
    return build
