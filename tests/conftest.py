"""Pytest configuration and fixtures for apianalyzer tests."""

import tempfile
from pathlib import Path
from typing import Iterator

import pytest

from apianalyzer.config import Config
from apianalyzer.resource_ids import ApiDefinitionResource


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def api_definition() -> ApiDefinitionResource:
    return ApiDefinitionResource(
        subscription_id="00000000-0000-0000-0000-000000000000",
        resource_group_name="contoso-rg",
        service_name="contoso",
        workspace_name="default",
        api_name="petstore",
        version_name="v1",
        definition_name="openapi",
    )


@pytest.fixture
def sample_config(temp_dir: Path) -> Config:
    """Create a sample Config object for testing."""
    return Config(
        project_root=temp_dir,
        config_dict={
            "registry": {"endpoint": "https://registry.example.com/", "timeout_seconds": 15},
            "compiler": {"command": "tsp", "ruleset": "tspconfig.yaml"},
        },
    )


@pytest.fixture
def pyproject_toml(temp_dir: Path) -> Path:
    """Create a sample pyproject.toml file."""
    config_path = temp_dir / "pyproject.toml"
    config_path.write_text(
        """[project]
name = "sample"

[tool.apianalyzer.registry]
endpoint = "https://registry.example.com"
api_version = "2024-03-01"
timeout_seconds = 30

[tool.apianalyzer.compiler]
command = "npx tsp"
timeout_seconds = 120
"""
    )
    return config_path


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep APIANALYZER_* variables from the host out of the tests."""
    for key in (
        "APIANALYZER_REGISTRY_ENDPOINT",
        "APIANALYZER_REGISTRY_API_VERSION",
        "APIANALYZER_ACCESS_TOKEN",
        "APIANALYZER_REGISTRY_TIMEOUT",
        "APIANALYZER_TSP_COMMAND",
        "APIANALYZER_COMPILER_TIMEOUT",
        "APIANALYZER_COMPILER_PROJECT_DIR",
    ):
        monkeypatch.delenv(key, raising=False)
