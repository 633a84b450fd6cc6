"""
MongoDB resources: a server container, its databases, and external connections.
"""
import secrets
from typing import Optional

from appgraph.config import get_configuration
from appgraph.connection_string import MongoDBConnectionStringBuilder, append_path_segment
from appgraph.endpoints import resolve_single_endpoint
from appgraph.graph import ResourceBuilder, ResourceGraph
from appgraph.models.annotations import ContainerImageAnnotation, Protocol
from appgraph.models.errors import AppGraphError, ParentConnectionStringUnavailableError
from appgraph.models.resource import ChildResource, ConnectionResource, ContainerResource

DEFAULT_CONTAINER_PORT = 27017
DEFAULT_IMAGE = "mongo"
DEFAULT_TAG = "latest"
DEFAULT_USER_NAME = "root"

SERVER_MANIFEST_TYPE = "mongodb.server.v0"
CONNECTION_MANIFEST_TYPE = "mongodb.connection.v0"
DATABASE_MANIFEST_TYPE = "mongodb.database.v0"


class MongoDBContainerResource(ContainerResource):
    kind = "mongodb.server"

    def __init__(self, name: str, password: Optional[str] = None):
        super().__init__(name)
        self.user_name = DEFAULT_USER_NAME
        self.password = password if password is not None else secrets.token_urlsafe(16)

    def get_connection_string(self, graph: Optional[ResourceGraph] = None) -> str:
        """Connection string of the form ``mongodb://root:<password>@host:port``."""
        endpoint = resolve_single_endpoint(self)
        return (
            MongoDBConnectionStringBuilder()
            .with_server(endpoint.address)
            .with_port(endpoint.port)
            .with_user_name(self.user_name)
            .with_password(self.password)
            .build()
        )

    def write_to_manifest(self, context) -> None:
        context.writer.write_string("type", SERVER_MANIFEST_TYPE)


class MongoDBDatabaseResource(ChildResource):
    kind = "mongodb.database"
    parent_type = MongoDBContainerResource

    def get_connection_string(self, graph: ResourceGraph) -> str:
        parent = graph.parent_of(self)
        try:
            parent_connection_string = parent.get_connection_string(graph)
        except AppGraphError as exc:
            raise ParentConnectionStringUnavailableError(self.name, parent.name) from exc
        if parent_connection_string is None:
            raise ParentConnectionStringUnavailableError(self.name, parent.name)
        return append_path_segment(parent_connection_string, self.name)

    def write_to_manifest(self, context) -> None:
        context.writer.write_string("type", DATABASE_MANIFEST_TYPE)
        context.writer.write_string("parent", self.parent_name)


class MongoDBConnectionResource(ConnectionResource):
    kind = "mongodb.connection"

    def get_connection_string(self, graph: Optional[ResourceGraph] = None) -> Optional[str]:
        if self.supplied_connection_string is not None:
            return self.supplied_connection_string
        return get_configuration().get_connection_string(self.name)

    def write_to_manifest(self, context) -> None:
        context.writer.write_string("type", CONNECTION_MANIFEST_TYPE)
        context.writer.write_string("connectionString", self.get_connection_string(context.graph))


def add_mongodb_container(
    graph: ResourceGraph,
    name: str,
    port: Optional[int] = None,
    password: Optional[str] = None,
) -> ResourceBuilder:
    """Register a MongoDB server container; ``port`` is the host port, the container always listens on 27017."""
    return (
        graph.register(MongoDBContainerResource(name, password))
        .with_service_binding(Protocol.TCP, port=port, container_port=DEFAULT_CONTAINER_PORT)
        .with_annotation(ContainerImageAnnotation(image=DEFAULT_IMAGE, tag=DEFAULT_TAG))
    )


def add_mongodb_connection(
    graph: ResourceGraph, name: str, connection_string: Optional[str] = None
) -> ResourceBuilder:
    return graph.register(MongoDBConnectionResource(name, connection_string))


def add_database(server: ResourceBuilder, name: str) -> ResourceBuilder:
    return server.graph.register(MongoDBDatabaseResource(name, server.resource))
