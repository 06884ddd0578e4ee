"""Shared pytest fixtures and test configuration."""

import pytest


@pytest.fixture
def config(tmp_path):
    return {
        "api": {
            "base_url": "https://example.test",
            "origin": "https://www.example.test",
            "token_env": "SCENE_API_TOKEN",
            "timeout": 5,
        },
        "pagination": {"strategy": "count", "page_size": 100},
        "request": {"cards": ["ALL"], "categories": ["ALL"]},
        "paths": {
            "logs_dir": str(tmp_path / "logs"),
            "output_base": str(tmp_path / "output"),
            "reports_subdir": "points_reports",
        },
        "reporting": {"show_progress": False},
    }


@pytest.fixture
def api_token(monkeypatch):
    monkeypatch.setenv("SCENE_API_TOKEN", "test-token")
    return "test-token"
