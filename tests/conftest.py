"""Pytest configuration for blnverify tests.

Shared configuration and fixtures for all test suites.
"""

import logging
import pathlib
import sys

import pytest

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Add project root to path for all tests to ensure imports work
PROJECT_ROOT = pathlib.Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))
sys.path.insert(0, str(PROJECT_ROOT / "tests"))


@pytest.fixture
def chain_dir(tmp_path: pathlib.Path):
    """Return a writer that stores blocks as a ``.bln`` file in a temp dir.

    Usage in tests:
        def test_something(chain_dir):
            path = chain_dir("96", 2, 2, [["D = 0110 a b", "E = 0110 c D"]])
    """

    def write(hex_spec: str, fanin: int, steps: int, blocks, separator="\n\n"):
        path = tmp_path / f"{hex_spec}-{fanin}-{steps}.bln"
        text = separator.join("\n".join(block) for block in blocks)
        path.write_text(text + "\n", encoding="utf-8")
        return path

    return write


@pytest.fixture
def isolated_logging():
    """Restore the BLN loggers after a test that calls ``configure_loggers``.

    dictConfig binds its stream handlers to the ``sys.stdout``/``sys.stderr``
    of the moment, which under ``capsys`` is a capture buffer that is closed
    when the test ends.
    """
    from blnverify.core.logging import LOGGER_NAMES, invalidate_level_flags

    saved = {}
    for name in ["", *LOGGER_NAMES]:
        lg = logging.getLogger(name)
        saved[name] = (list(lg.handlers), lg.level, lg.propagate)
    yield
    for name, (handlers, level, propagate) in saved.items():
        lg = logging.getLogger(name)
        for handler in lg.handlers:
            if handler not in handlers:
                handler.close()
        lg.handlers = handlers
        lg.setLevel(level)
        lg.propagate = propagate
    invalidate_level_flags()


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "solver: mark test as requiring the Z3 solver")
    config.addinivalue_line("markers", "integration: mark test as integration test")
