""" Settings for barnacle.

Defaults ship as barnacle/data/config.toml. An override file is merged on top
of them, key by key, and the result is exposed as nested namespaces, e.g.
config.Settings.Logging.LEVEL """

import logging
import importlib.resources
import types
from typing import Optional, Any, TextIO

import toml # type: ignore

def merge(a:dict[str, Any], b:dict[str, Any], path:Optional[list[str]]=None) -> dict[str, Any]:
    """ recursively merges b into a

    b[key] overrides a[key] if key present in both. raises ValueError if
    b[key] and a[key] are not of the same type, that's almost always a typo
    in an override file.

    inspired by https://stackoverflow.com/a/51653724/553580
    """

    if path is None: path = []
    for key, value in b.items():
        if key not in a:
            a[key] = value
        elif isinstance(a[key], dict) and isinstance(value, dict):
            merge(a[key], value, path + [str(key)])
        elif a[key].__class__ == value.__class__:
            a[key] = value
        else:
            raise ValueError(f'Conflict at {".".join(path + [str(key)])}: {a[key]!r} vs {value!r}')
    return a

def to_namespace(d:dict[str, Any]) -> types.SimpleNamespace:
    return types.SimpleNamespace(**{
        k: to_namespace(v) if isinstance(v, dict) else v for k, v in d.items()
    })

def default_config() -> dict[str, Any]:
    return toml.loads(importlib.resources.files("barnacle.data").joinpath("config.toml").read_text())

def load_config(config_file:Optional[TextIO]=None) -> types.SimpleNamespace:
    config = default_config()
    if config_file:
        merge(config, toml.load(config_file))

    if config["Director"]["MAX_TICKS"] < 1:
        raise ValueError(f'Director.MAX_TICKS must be positive, got {config["Director"]["MAX_TICKS"]}')
    if not isinstance(logging.getLevelName(config["Logging"]["LEVEL"]), int):
        raise ValueError(f'unknown Logging.LEVEL {config["Logging"]["LEVEL"]}')

    global Settings
    Settings = to_namespace(config)

    return Settings

# it's ok to reload the config with a file elsewhere, but we start with the
# built-in config
Settings = load_config()
