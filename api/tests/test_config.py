"""Tests for application settings."""

import os

import pytest
from agent_demo.core.config import Settings


def test_database_paths_live_in_data_dir(test_settings, test_data_dir):
    assert test_settings.CATALOG_DB_PATH == os.path.join(test_data_dir, "catalog.db")
    assert test_settings.CHAT_DB_PATH == os.path.join(test_data_dir, "chat.db")
    assert test_settings.get_data_path("exports", "a.json") == os.path.join(
        test_data_dir, "exports", "a.json"
    )


def test_relative_data_dir_is_made_absolute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    settings = Settings(DATA_DIR="relative-data")
    assert settings.CATALOG_DB_PATH == os.path.join(
        os.getcwd(), "relative-data", "catalog.db"
    )


@pytest.mark.parametrize("threshold", [-0.1, 1.5])
def test_match_threshold_out_of_range(threshold, test_data_dir):
    with pytest.raises(ValueError):
        Settings(DATA_DIR=test_data_dir, MATCH_THRESHOLD=threshold)
