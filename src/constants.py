from typing import Final

__version__: Final[str] = "0.1.0"

DEFAULT_API_ENDPOINT: Final[str] = "https://api.thousandeyes.com/v6"
DEFAULT_USER_AGENT: Final[str] = f"thousandeyes-stream/{__version__}"

STREAM_PATH: Final[str] = "/stream"
ACCOUNT_GROUP_PARAM: Final[str] = "aid"

# Exact status each operation must answer with.
EXPECTED_STATUS: Final[dict[str, int]] = {
    "create": 201,
    "get": 200,
    "update": 200,
    "delete": 204,
}

STREAM_DESCRIPTION: Final[str] = (
    "This resource allows you to create an OpenTelemetry data stream. For more "
    "information, see [Streams](https://developer.cisco.com/docs/thousandeyes/list-data-streams/)."
)
