"""Tests for the YAML config loader and logging setup."""

import logging
import sys

import pytest

from QBMCP.config import find_config_file, get_config, load_config
from QBMCP.config.loader import CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE
from QBMCP.utils.logging import setup_logging


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


class TestConfigLoader:
    def test_packaged_file_has_every_section(self):
        assert find_config_file() == DEFAULT_CONFIG_FILE
        config = get_config()
        assert {"logging", "client", "payload_limits", "integrity"} <= set(config)
        assert get_config("integrity")["page_size"] == 1000

    def test_missing_section_is_empty(self):
        assert get_config("no_such_section") == {}

    def test_env_override(self, monkeypatch, tmp_path):
        custom = tmp_path / "qbmcp.yaml"
        custom.write_text("integrity:\n  page_size: 10\n", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(custom))

        assert get_config("integrity") == {"page_size": 10}
        assert get_config("client") == {}

    def test_env_override_missing_file(self, monkeypatch, tmp_path):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "absent.yaml"))

        with pytest.raises(FileNotFoundError) as exc_info:
            find_config_file()
        assert CONFIG_ENV_VAR in str(exc_info.value)

    def test_non_mapping_rejected(self, tmp_path):
        bad = tmp_path / "list.yaml"
        bad.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError):
            load_config(bad)

    def test_empty_file_is_empty_config(self, tmp_path):
        empty = tmp_path / "empty.yaml"
        empty.write_text("", encoding="utf-8")

        assert load_config(empty) == {}


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_console_goes_to_stderr(self):
        setup_logging(level="DEBUG", log_to_file=False)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert root.handlers[0].stream is sys.stderr
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_defaults_come_from_config(self):
        setup_logging()

        assert logging.getLogger().level == logging.INFO
        assert "funcName" in logging.getLogger().handlers[0].formatter._fmt
