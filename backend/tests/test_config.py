import importlib
import logging

import pytest

from volleytracker import config
from volleytracker.limits import client_ip


@pytest.fixture
def reload_config(monkeypatch):
    def _reload(**env):
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return importlib.reload(config)

    yield _reload
    monkeypatch.undo()
    importlib.reload(config)


def test_prefix_is_canonical():
    assert config._canon_prefix(None) == "/api"
    assert config._canon_prefix("v1/") == "/v1"
    assert config._canon_prefix("/") == "/"


def test_rule_defaults_from_environment(reload_config):
    cfg = reload_config(SET_POINTS_TO="21", MATCH_BEST_OF="3")
    assert cfg.DEFAULT_RULES == {
        "pointsTo": 21,
        "winBy": 2,
        "bestOf": 3,
        "decidingSetPointsTo": 21,
    }


def test_invalid_values_fall_back_with_warning(reload_config, caplog):
    with caplog.at_level(logging.WARNING):
        cfg = reload_config(SET_POINTS_TO="many", MATCH_BEST_OF="4")
    assert cfg.SET_POINTS_TO == 25
    assert cfg.MATCH_BEST_OF == 5
    assert "SET_POINTS_TO is not a valid integer" in caplog.text


def test_client_ip_prefers_forwarded_header():
    class _Client:
        host = "10.0.0.1"

    class _Request:
        def __init__(self, headers):
            self.headers = headers
            self.client = _Client()

    assert client_ip(_Request({"X-Forwarded-For": "1.1.1.1, 2.2.2.2"})) == "2.2.2.2"
    assert client_ip(_Request({"X-Real-IP": "3.3.3.3"})) == "3.3.3.3"
    assert client_ip(_Request({})) == "10.0.0.1"
