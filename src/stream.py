from dataclasses import dataclass, field, fields
from typing import Any, Dict, List


def _attr(json_name: str, description: str, **extra: Any) -> Dict[str, Any]:
    return {"json": json_name, "description": description, **extra}


@dataclass
class StreamTestMatch:
    """A (test ID, domain) filter selecting tests that feed a stream."""

    id: str = field(default="", metadata=_attr("id", "The test ID."))
    domain: str = field(default="", metadata=_attr("domain", "The domain of the test (e.g. cea, endpoint)."))


@dataclass
class StreamTagMatch:
    """A (key, value) filter selecting resources by tag."""

    key: str = field(default="", metadata=_attr("key", "The tag key."))
    value: str = field(default="", metadata=_attr("value", "The tag value."))


@dataclass
class Stream:
    """A data-export destination configured on the ThousandEyes v7 API.

    ``id`` stays empty until the server assigns one on creation.
    """

    id: str = field(default="", metadata=_attr("id", "The ID of the stream.", computed=True))
    enabled: bool = field(default=False, metadata=_attr("enabled", "Whether the stream is enabled."))
    type: str = field(default="", metadata=_attr("type", "The type of stream (e.g. opentelemetry)."))
    endpoint_type: str = field(
        default="", metadata=_attr("endpointType", "The endpoint type of the stream (e.g. grpc, http).")
    )
    stream_endpoint_url: str = field(
        default="", metadata=_attr("streamEndpointUrl", "The URL data is sent to.")
    )
    data_model_version: str = field(
        default="", metadata=_attr("dataModelVersion", "The version of the data model (e.g. v1).")
    )
    test_match: List[StreamTestMatch] = field(
        default_factory=list,
        metadata=_attr("testMatch", "Tests whose data is sent to the stream.", elem=StreamTestMatch),
    )
    tag_match: List[StreamTagMatch] = field(
        default_factory=list,
        metadata=_attr("tagMatch", "Tags whose tests' data is sent to the stream.", elem=StreamTagMatch),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Returns the JSON object for this stream, zero values omitted."""
        return to_json_dict(self)

    @classmethod
    def from_dict(cls, obj: Any) -> "Stream":
        """Builds a stream from a decoded JSON document.

        Raises:
            TypeError: If the document or one of its values has the wrong type.
        """
        return from_json_dict(cls, obj)


def _is_zero(value: Any) -> bool:
    return value is None or value == "" or value is False or value == []


def to_json_dict(obj: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if _is_zero(value):
            continue
        if "elem" in f.metadata:
            value = [to_json_dict(item) for item in value]
        out[f.metadata["json"]] = value
    return out


def from_json_dict(cls: type, obj: Any) -> Any:
    if not isinstance(obj, dict):
        raise TypeError(f"expected a JSON object for {cls.__name__}, got {type(obj).__name__}")
    kwargs: Dict[str, Any] = {}
    for f in fields(cls):
        key = f.metadata["json"]
        if key not in obj or obj[key] is None:
            continue
        value = obj[key]
        elem = f.metadata.get("elem")
        if elem is not None:
            if not isinstance(value, list):
                raise TypeError(f"{key}: expected a JSON array, got {type(value).__name__}")
            value = [from_json_dict(elem, item) for item in value]
        elif f.type in (bool, "bool"):
            if not isinstance(value, bool):
                raise TypeError(f"{key}: expected a boolean, got {type(value).__name__}")
        elif not isinstance(value, str):
            raise TypeError(f"{key}: expected a string, got {type(value).__name__}")
        kwargs[f.name] = value
    return cls(**kwargs)
