"""Tests for env helpers."""

import pytest

from QBMCP.utils import env_config
from QBMCP.utils.env_config import env_flag, find_dotenv_file, get_int, get_str, parse_flag


@pytest.mark.parametrize("raw", ["1", "true", "TRUE", " yes ", "y", "on"])
def test_true_spellings(raw):
    assert parse_flag(raw) is True


@pytest.mark.parametrize("raw", ["0", "false", "No", "n", "off"])
def test_false_spellings(raw):
    assert parse_flag(raw, default=True) is False


@pytest.mark.parametrize("raw", [None, "", "maybe"])
def test_unknown_falls_back(raw):
    assert parse_flag(raw, default=True) is True
    assert parse_flag(raw, default=False) is False


def test_env_flag(monkeypatch):
    monkeypatch.setenv("QB_READONLY", "yes")
    assert env_flag("QB_READONLY") is True
    monkeypatch.delenv("QB_READONLY")
    assert env_flag("QB_READONLY") is False


def test_get_int_and_bounds(monkeypatch):
    monkeypatch.setenv("QB_MAX_RETRIES", "50")
    assert get_int("QB_MAX_RETRIES", 3, max_value=10) == 10
    monkeypatch.setenv("QB_MAX_RETRIES", "abc")
    assert get_int("QB_MAX_RETRIES", 3) == 3
    monkeypatch.delenv("QB_MAX_RETRIES")
    assert get_int("QB_MAX_RETRIES", 3) == 3


def test_get_str(monkeypatch):
    monkeypatch.setenv("MCP_SERVER_NAME", "  ")
    assert get_str("MCP_SERVER_NAME", "quickbase-mcp") == "quickbase-mcp"


def test_dotenv_prefers_cwd(tmp_path, monkeypatch):
    root = tmp_path / "root"
    root.mkdir()
    (root / ".env").write_text("QB_REALM=root.quickbase.com\n")
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.setattr(env_config, "PROJECT_ROOT", root)

    assert find_dotenv_file(cwd) == root / ".env"

    (cwd / ".env").write_text("QB_REALM=cwd.quickbase.com\n")
    assert find_dotenv_file(cwd) == cwd / ".env"
