"""Shared test fixtures."""

from pathlib import Path

import pytest
import respx
import yaml

from bomfeed.config.defaults import DEFAULT_AREAS
from bomfeed.config.loader import default_config
from bomfeed.config.schema import BomConfig

FIXTURE_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def vic_feed() -> bytes:
    return (FIXTURE_DIR / "IDV10753.xml").read_bytes()


@pytest.fixture
def nsw_feed() -> bytes:
    return (FIXTURE_DIR / "IDN11060.xml").read_bytes()


@pytest.fixture
def test_config() -> BomConfig:
    """Default config pointed at a fake bureau host."""
    config = default_config()
    return config.model_copy(
        update={
            "feeds": config.feeds.model_copy(
                update={"base_url": "https://test-bom.example.com", "chunk_size": 512}
            )
        }
    )


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "feeds": {"base_url": "https://test-bom.example.com", "chunk_size": 1024},
        "search": {"default_limit": 5},
        "logging": {"level": "debug"},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def default_areas():
    return DEFAULT_AREAS


@pytest.fixture(autouse=True)
def no_leaked_routes():
    """Fail a test that leaves routes behind on the global respx router."""
    yield
    leaked = list(respx.routes)
    respx.routes.clear()
    assert not leaked, f"routes left on the global respx router: {leaked}"
