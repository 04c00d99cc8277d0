import pytest
from pathlib import Path
from typer.testing import CliRunner

from memoproxy.infrastructure.cli.display import ConsoleDisplay
from memoproxy.infrastructure.config.settings import clear_test_config, set_config_for_testing
from memoproxy.infrastructure.storage.disk_store import DiskStore, reset_default_store
from memoproxy.infrastructure.storage.memory_store import MemoryStore

@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()

@pytest.fixture
def memory_store():
    """A fresh, empty in-memory store for each test."""
    return MemoryStore()

@pytest.fixture
def disk_store(tmp_path: Path):
    """A disk store in a temporary directory, closed after the test."""
    store = DiskStore(tmp_path / "store")
    yield store
    store.close()

@pytest.fixture
def mock_console_display(mocker):
    """Mocks the ConsoleDisplay used by the CLI to capture output easily."""
    mock = mocker.MagicMock(spec=ConsoleDisplay)
    mocker.patch('memoproxy.main.ConsoleDisplay', return_value=mock)
    return mock

@pytest.fixture(autouse=True)
def isolated_default_store(tmp_path: Path):
    """Points the default persistent store at a temporary directory."""
    set_config_for_testing({"cache.dir": str(tmp_path / "default-store")})
    yield tmp_path / "default-store"
    reset_default_store()
    clear_test_config()
