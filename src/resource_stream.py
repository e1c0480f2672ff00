import logging

from client_config import ClientConfig, derive_v7_config
from constants import STREAM_DESCRIPTION
from resource_data import (
    Resource,
    ResourceData,
    import_state_passthrough,
    resource_build_struct,
    resource_read,
    resource_schema_build,
    resource_update,
)
from stream import Stream
from stream_client import StreamClient

logger = logging.getLogger(__name__)


def resource_stream() -> Resource:
    """Returns the stream resource: schema, CRUD handlers and ID importer."""
    return Resource(
        schema=resource_schema_build(Stream),
        create=resource_stream_create,
        read=resource_stream_read,
        update=resource_stream_update,
        delete=resource_stream_delete,
        importer=import_state_passthrough,
        description=STREAM_DESCRIPTION,
    )


def _client(config: ClientConfig) -> StreamClient:
    return StreamClient(derive_v7_config(config))


def build_stream_struct(data: ResourceData) -> Stream:
    return resource_build_struct(data, Stream)


def resource_stream_create(data: ResourceData, config: ClientConfig) -> None:
    """Create a stream from the attributes in ``data``.

    Args:
        data: Desired attributes; receives the server-assigned ID.
        config: Client settings for the v6 API; the v7 endpoint is derived.
    """
    logger.info(f"Creating ThousandEyes Stream {data.id()}")
    local = build_stream_struct(data)

    remote = _client(config).create_stream(local)
    data.set_id(remote.id)
    resource_stream_read(data, config)


def resource_stream_read(data: ResourceData, config: ClientConfig) -> None:
    """Refreshes ``data`` from the server.

    On any failure the ID is cleared, so the resource is treated as gone
    and recreated on the next apply, and the error is re-raised.
    """
    logger.info(f"Reading ThousandEyes Stream {data.id()}")
    try:
        remote = _client(config).get_stream(data.id())
    except Exception:
        data.set_id("")
        raise
    resource_read(data, remote)


def resource_stream_update(data: ResourceData, config: ClientConfig) -> None:
    """Send the changed attributes of ``data`` to the server, then refresh.

    Args:
        data: Attributes with change tracking against the prior state.
        config: Client settings for the v6 API; the v7 endpoint is derived.
    """
    logger.info(f"Updating ThousandEyes Stream {data.id()}")
    update = resource_update(data, Stream)
    _client(config).update_stream(data.id(), update)
    resource_stream_read(data, config)


def resource_stream_delete(data: ResourceData, config: ClientConfig) -> None:
    """Delete the stream and clear the stored ID.

    Args:
        data: Resource whose ID names the stream.
        config: Client settings for the v6 API; the v7 endpoint is derived.
    """
    logger.info(f"Deleting ThousandEyes Stream {data.id()}")
    _client(config).delete_stream(data.id())
    data.set_id("")
