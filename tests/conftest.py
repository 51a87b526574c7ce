"""Configuration file for pytest."""

import json
import logging
import sys
from pathlib import Path

import pytest

# Add the project root to the path so tests can import the package without installing it
sys.path.insert(0, str(Path(__file__).parent.parent))

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Keep test output readable
for logger_name in ["swagger_mcp", "httpx", "urllib3"]:
    logging.getLogger(logger_name).setLevel(logging.CRITICAL)


@pytest.fixture
def petstore_spec():
    """Return a fresh copy of the sample Swagger 2.0 document."""
    with open(FIXTURES_DIR / "petstore.json", "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def petstore_path():
    """Return the path of the sample Swagger 2.0 document."""
    return str(FIXTURES_DIR / "petstore.json")


@pytest.fixture
def inventory_yaml_path():
    """Return the path of the sample YAML Swagger document."""
    return str(FIXTURES_DIR / "inventory.yaml")
