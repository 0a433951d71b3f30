""" Test cases for settings """

import io

import pytest

from barnacle import config

@pytest.fixture(autouse=True)
def restore_settings():
    yield
    config.load_config()

def test_default_config():
    settings = config.load_config()
    assert settings.Logging.LEVEL == "INFO"
    assert settings.Director.MAX_TICKS > 0
    assert config.Settings is settings

def test_override_config():
    settings = config.load_config(io.StringIO('[Director]\nMAX_TICKS = 7\n'))
    assert settings.Director.MAX_TICKS == 7
    assert settings.Logging.LEVEL == "INFO"

def test_override_conflict():
    with pytest.raises(ValueError):
        config.load_config(io.StringIO('[Director]\nMAX_TICKS = "lots"\n'))

def test_bad_values():
    with pytest.raises(ValueError):
        config.load_config(io.StringIO('[Director]\nMAX_TICKS = 0\n'))
    with pytest.raises(ValueError):
        config.load_config(io.StringIO('[Logging]\nLEVEL = "CHATTY"\n'))

def test_merge():
    a = {"x": {"y": 1, "z": 2}, "w": "s"}
    config.merge(a, {"x": {"y": 3}, "v": True})
    assert a == {"x": {"y": 3, "z": 2}, "w": "s", "v": True}
