"""Pytest configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient

from recordsmith.api import create_app
from recordsmith.export import ExportField, ExportProfile


@pytest.fixture
def people_text() -> str:
    """Semicolon-separated file with a header row."""
    return "Name;Age\nAnn;34\nBo;29"


@pytest.fixture
def people_records() -> list[dict[str, str]]:
    """Records parsed from people_text."""
    return [
        {"Name": "Ann", "Age": "34"},
        {"Name": "Bo", "Age": "29"},
    ]


@pytest.fixture
def id_const_profile() -> ExportProfile:
    """Profile mapping Name to ID plus a static column."""
    return ExportProfile(
        name="Test",
        separator=";",
        fields=[
            ExportField(output_name="ID", source_field="Name"),
            ExportField(output_name="Const", is_static=True, static_value="X"),
        ],
    )


@pytest.fixture
def test_client() -> TestClient:
    """Create a test client for the full application."""
    return TestClient(create_app())
