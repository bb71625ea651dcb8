"""
Global pytest configuration and shared fixtures.

Provides common test infrastructure for all test suites including:
- Sample YAML data directories
- Knowledge snapshots built from the sample data
- Reload coordinator, console transport and dispatcher wiring
"""

import sys
from pathlib import Path

import pytest

# Add backend to path
backend_path = Path(__file__).parent.parent
sys.path.insert(0, str(backend_path))

from delphi.engine.dispatcher import Dispatcher  # noqa: E402
from delphi.engine.reload import ReloadCoordinator  # noqa: E402
from delphi.knowledge.loader import load_snapshot  # noqa: E402
from delphi.knowledge.snapshot import KnowledgeSnapshot  # noqa: E402
from delphi.transport.console import ConsoleTransport  # noqa: E402
from tests.fixtures.knowledge_samples import write_data_dir  # noqa: E402

BOT_NAME = "oracleofdelphibot"


# ============================================================================
# Data Fixtures
# ============================================================================


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Directory holding the sample YAML data set."""
    return write_data_dir(tmp_path / "world_data")


@pytest.fixture
def snapshot(data_dir: Path) -> KnowledgeSnapshot:
    """Snapshot loaded from the sample data directory."""
    return load_snapshot(data_dir, version=1)


# ============================================================================
# Engine Fixtures
# ============================================================================


@pytest.fixture
def coordinator(data_dir: Path) -> ReloadCoordinator:
    """Coordinator whose loader reads the sample data directory."""

    def loader(version: int) -> KnowledgeSnapshot:
        return load_snapshot(data_dir, version=version)

    return ReloadCoordinator.start(loader)


@pytest.fixture
def transport() -> ConsoleTransport:
    """In-memory transport recording joins, departs and replies."""
    return ConsoleTransport()


@pytest.fixture
def dispatcher(transport: ConsoleTransport, coordinator: ReloadCoordinator) -> Dispatcher:
    """Dispatcher wired to the console transport and sample data."""
    return Dispatcher(transport, coordinator, bot_name=BOT_NAME)
