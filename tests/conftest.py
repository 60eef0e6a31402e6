import io
import logging

import pytest

from tests.fixtures import FakeExecutable, make_project


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("npminstall")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream  # Yield the stream to the test function

    # Cleanup after the test
    logger.removeHandler(handler)
    log_stream.close()


@pytest.fixture
def executable():
    """A fake npm that succeeds without output."""
    return FakeExecutable()


@pytest.fixture
def working_dir(tmp_path):
    """An npm project without lockfile or node_modules."""
    return make_project(tmp_path / "app")


@pytest.fixture
def locked_dir(tmp_path):
    """An npm project with a package-lock.json."""
    return make_project(tmp_path / "app", lockfile=True)


@pytest.fixture
def layer_dir(tmp_path):
    return tmp_path / "layers" / "modules"


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "npm-cache"
