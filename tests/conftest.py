import pytest

from flowsched.logging_config import LoggingFlags


@pytest.fixture(autouse=True)
def restore_logging_flags():
    """Tests may flip LoggingFlags; put them back afterwards."""
    saved = {
        attr: getattr(LoggingFlags, attr)
        for attr in dir(LoggingFlags)
        if not attr.startswith('_') and attr.isupper()
    }
    yield
    for attr, value in saved.items():
        setattr(LoggingFlags, attr, value)


@pytest.fixture
def write_task_file(tmp_path):
    """Write a task file and return its path."""
    def _write(content: str, name: str = "tasks.txt"):
        path = tmp_path / name
        path.write_text(content)
        return path
    return _write
