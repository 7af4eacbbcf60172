from typing import Any

import toml

_config: dict[str, Any] | None = None


class ConfigNotFound(Exception):
    pass


def get_config() -> dict[str, Any]:
    return _config or {}


def init(config: dict[str, Any] | None) -> dict[str, Any] | None:
    global _config  # noqa: PLW0603
    _config = config
    return _config


def init_from_toml(configfile: str) -> dict[str, Any] | None:
    try:
        return init(toml.load(configfile))
    except (OSError, toml.TomlDecodeError) as e:
        raise ConfigNotFound(f"can not load config file {configfile}: {e!s}") from e


def get_value(path: str, default: Any = None) -> Any:
    """
    Look up a dotted path, e.g. ``grafana.namespace``, in the loaded config.
    Returns ``default`` if any part of the path is missing.
    """
    value: Any = get_config()
    for token in path.split("."):
        if not isinstance(value, dict) or token not in value:
            return default
        value = value[token]
    return value
