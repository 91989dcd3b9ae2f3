import os

import pytest
from unittest.mock import MagicMock

from ngram_chain.utils.config_loader import (
    DEFAULT_CONFIG,
    get_config_dir,
    load_config,
    merge_config,
)


@pytest.fixture
def mock_logger():
    return MagicMock()


def test_packaged_config_matches_defaults(mock_logger):
    config = load_config(logger=mock_logger)
    assert config == DEFAULT_CONFIG
    mock_logger.info.assert_called()


def test_packaged_config_dir_holds_default_file():
    assert os.path.exists(os.path.join(get_config_dir(), "chain.yaml"))


def test_environment_file_is_preferred(tmp_path, mock_logger):
    (tmp_path / "chain.yaml").write_text("indexed:\n  grams: 5\n")
    (tmp_path / "chain_test.yaml").write_text("indexed:\n  grams: 7\n")

    config = load_config(environment="test", config_dir=str(tmp_path), logger=mock_logger)
    assert config["indexed"]["grams"] == 7
    assert config["indexed"]["from"] == ""

    config = load_config(environment="production", config_dir=str(tmp_path), logger=mock_logger)
    assert config["indexed"]["grams"] == 5


def test_missing_files_use_defaults(tmp_path, mock_logger):
    config = load_config(config_dir=str(tmp_path), logger=mock_logger)
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG
    mock_logger.warning.assert_called()


def test_broken_yaml_is_skipped(tmp_path, mock_logger):
    (tmp_path / "chain_dev.yaml").write_text("indexed: [unclosed\n")
    (tmp_path / "chain.yaml").write_text("generation:\n  max_steps: 9\n")

    config = load_config(environment="dev", config_dir=str(tmp_path), logger=mock_logger)
    assert config["generation"]["max_steps"] == 9
    mock_logger.warning.assert_called()


def test_non_mapping_yaml_is_skipped(tmp_path, mock_logger):
    (tmp_path / "chain.yaml").write_text("- just\n- a list\n")
    assert load_config(config_dir=str(tmp_path), logger=mock_logger) == DEFAULT_CONFIG


def test_empty_yaml_gives_defaults(tmp_path, mock_logger):
    (tmp_path / "chain.yaml").write_text("")
    assert load_config(config_dir=str(tmp_path), logger=mock_logger) == DEFAULT_CONFIG


def test_merge_config_does_not_mutate():
    base = {"a": {"b": 1, "c": 2}, "d": 3}
    merged = merge_config(base, {"a": {"b": 10}, "e": 4})

    assert merged == {"a": {"b": 10, "c": 2}, "d": 3, "e": 4}
    assert base == {"a": {"b": 1, "c": 2}, "d": 3}
