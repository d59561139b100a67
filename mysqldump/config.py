"""
Configuration loading and validation for MySQL Dump.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import parse_qsl

import yaml

from .models import DumpOptions

DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 3306

_ADDRESS_PATTERN = re.compile(r'(?P<protocol>\w+)?(?:\((?P<address>[^)]*)\))?')


@dataclass
class ConnectionSettings:
    """Where to connect and which database to dump."""
    database: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    user: str = ''
    password: str = ''
    params: dict[str, str] = field(default_factory=dict)


def parse_dsn(dsn: str) -> ConnectionSettings:
    """
    Parse a Go-driver style DSN: ``user:password@tcp(host:port)/dbname?params``.

    Credentials, protocol and address are optional (``/dbname`` is valid).
    Only the tcp protocol is supported.
    """
    head, slash, tail = dsn.rpartition('/')
    if not slash:
        raise ValueError(f"invalid DSN '{dsn}': missing '/'")
    database, _, query = tail.partition('?')
    if not database:
        raise ValueError(f"invalid DSN '{dsn}': no database name")

    credentials, at, address = head.rpartition('@')
    if not at:
        credentials, address = '', head
    user, _, password = credentials.partition(':')

    match = _ADDRESS_PATTERN.fullmatch(address)
    if not match:
        raise ValueError(f"invalid DSN '{dsn}': bad address '{address}'")
    protocol = match.group('protocol') or 'tcp'
    if protocol != 'tcp':
        raise ValueError(f"invalid DSN '{dsn}': unsupported protocol '{protocol}'")

    host, port = DEFAULT_HOST, DEFAULT_PORT
    if match.group('address'):
        host_part, colon, port_part = match.group('address').rpartition(':')
        if colon:
            host = host_part.strip('[]') or DEFAULT_HOST
            port = int(port_part)
        else:
            host = port_part

    return ConnectionSettings(
        database=database,
        host=host,
        port=port,
        user=user,
        password=password,
        params=dict(parse_qsl(query))
    )


class ConfigLoader:
    """Loads and validates configuration from YAML file."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        return self._resolve_env_vars(config)

    def _resolve_env_vars(self, obj: Any) -> Any:
        """Recursively resolve environment variables in config."""
        if isinstance(obj, str):
            matches = self.ENV_VAR_PATTERN.findall(obj)
            for match in matches:
                env_value = os.environ.get(match, '')
                obj = obj.replace(f'${{{match}}}', env_value)
            return obj
        elif isinstance(obj, dict):
            return {k: self._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._resolve_env_vars(item) for item in obj]
        return obj

    def get_connection_settings(self, dsn: Optional[str] = None) -> ConnectionSettings:
        """Get connection settings; an explicit or configured DSN wins over fields."""
        connection = self.config.get('connection') or {}
        dsn = dsn or connection.get('dsn')
        if dsn:
            return parse_dsn(dsn)

        if not connection.get('database'):
            raise ValueError("Configuration is missing 'connection.database' (or 'connection.dsn')")
        return ConnectionSettings(
            database=connection['database'],
            host=connection.get('host', DEFAULT_HOST),
            port=int(connection.get('port', DEFAULT_PORT)),
            user=connection.get('user', ''),
            password=connection.get('password', '')
        )

    def get_dump_settings(self) -> dict[str, Any]:
        """Get the raw ``dump`` section."""
        return self.config.get('dump') or {}

    def get_dump_options(self, **overrides: Any) -> DumpOptions:
        """Build DumpOptions from the ``dump`` section and non-None overrides."""
        return DumpOptions.from_config(self.get_dump_settings(), **overrides)

    def get_output_settings(self) -> dict[str, Any]:
        """Get output settings."""
        return self.config.get('output') or {}

    def get_logging_settings(self) -> dict[str, Any]:
        """Get logging settings."""
        return self.config.get('logging') or {}
