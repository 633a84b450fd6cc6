"""
URI-style connection string assembly.

Credentials are percent-encoded as RFC 3986 userinfo, so ``:``, ``@``,
``/`` and ``%`` in a user name or password cannot break the URI.
"""
from typing import Optional
from urllib.parse import quote


def _encode_credential(value: str) -> str:
    return quote(value, safe="")


class ConnectionStringBuilder:
    def __init__(self, scheme: str):
        self.scheme = scheme
        self._server: Optional[str] = None
        self._port: Optional[int] = None
        self._user_name: Optional[str] = None
        self._password: Optional[str] = None

    def with_server(self, server: str) -> "ConnectionStringBuilder":
        self._server = server
        return self

    def with_port(self, port: int) -> "ConnectionStringBuilder":
        self._port = port
        return self

    def with_user_name(self, user_name: str) -> "ConnectionStringBuilder":
        self._user_name = user_name
        return self

    def with_password(self, password: str) -> "ConnectionStringBuilder":
        self._password = password
        return self

    def build(self) -> str:
        userinfo = ""
        if self._user_name:
            userinfo = _encode_credential(self._user_name)
            if self._password:
                userinfo += ":" + _encode_credential(self._password)
            userinfo += "@"

        host = self._server or ""
        # IPv6 literals need brackets once a port follows
        if ":" in host and not host.startswith("["):
            host = f"[{host}]"
        if self._port is not None:
            host = f"{host}:{self._port}"

        return f"{self.scheme}://{userinfo}{host}"


class MongoDBConnectionStringBuilder(ConnectionStringBuilder):
    def __init__(self):
        super().__init__("mongodb")


def append_path_segment(connection_string: str, segment: str) -> str:
    """Return ``connection_string`` with ``segment`` as its last path segment, one ``/`` between."""
    if connection_string.endswith("/"):
        return connection_string + segment
    return f"{connection_string}/{segment}"
