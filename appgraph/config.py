"""
Configuration: connection strings supplied outside the topology.

Values come from the ``ConnectionStrings`` section of ``appgraph.yaml``
and from ``ConnectionStrings__<name>`` environment variables, which win.
"""
import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

import yaml
from rich.console import Console

from appgraph.models.errors import ConfigError

console = Console(stderr=True)

DEFAULT_CONFIG_FILE = "appgraph.yaml"
_ENV_PREFIX = "ConnectionStrings__"


@dataclass
class Configuration:
    connection_strings: Dict[str, str] = field(default_factory=dict)

    def get_connection_string(self, name: str) -> Optional[str]:
        return self.connection_strings.get(name)


_current = Configuration()


def get_configuration() -> Configuration:
    return _current


def set_configuration(config: Configuration) -> None:
    global _current
    _current = config


def _read_file(path: str) -> Dict[str, str]:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read configuration file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")

    section = data.get("ConnectionStrings") or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'ConnectionStrings' in {path} must be a mapping")

    values = {}
    for name, value in section.items():
        if value is None:
            console.print(f"[yellow]Warning:[/yellow] empty connection string '{name}' in {path}, ignoring.")
            continue
        values[str(name)] = str(value)
    return values


def load_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Configuration:
    """
    Build a Configuration from a YAML file and the environment.

    A missing default file is not an error; a missing explicit ``path`` is.
    """
    values: Dict[str, str] = {}
    if path is not None:
        values.update(_read_file(path))
    elif os.path.exists(DEFAULT_CONFIG_FILE):
        values.update(_read_file(DEFAULT_CONFIG_FILE))

    env = os.environ if environ is None else environ
    for key, value in env.items():
        if key.startswith(_ENV_PREFIX) and len(key) > len(_ENV_PREFIX):
            values[key[len(_ENV_PREFIX):]] = value

    return Configuration(connection_strings=values)
