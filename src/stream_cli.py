import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from client_config import ClientConfig, derive_v7_config
from constants import DEFAULT_API_ENDPOINT, DEFAULT_USER_AGENT
from errors import StreamAPIError
from stream import Stream
from stream_client import StreamClient
from utils import read_json, write_json_atomic

logger = logging.getLogger(__name__)
log_level = logging.DEBUG if os.getenv("DEBUG") else logging.INFO


class Suppress404Filter(logging.Filter):
    """Filters out HTTP 404 error logs from stream_client unless in debug mode.

    A 404 on read just means the stream is gone, which the caller reports.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if log_level == logging.DEBUG:
            return True
        return not ("stream_client" in record.name and "HTTP error: 404" in record.getMessage())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="te-stream",
        description="Manage ThousandEyes data streams",
    )
    parser.add_argument("--endpoint", help=f"API endpoint (default: TE_API_ENDPOINT or {DEFAULT_API_ENDPOINT})")
    parser.add_argument("--token", help="Bearer token (default: TE_TOKEN)")
    parser.add_argument("--account-group", help="Account group ID sent as aid (default: TE_AID)")
    parser.add_argument("--user-agent", help=f"User agent (default: TE_USER_AGENT or {DEFAULT_USER_AGENT})")
    parser.add_argument("--rate-limit", type=float, help="Maximum requests per second")
    parser.add_argument("--proxy", action="store_true", help="Use HTTP_PROXY/HTTPS_PROXY")
    parser.add_argument("--output", help="Write the resulting stream JSON to this file")

    sub = parser.add_subparsers(dest="command", required=True)
    create = sub.add_parser("create", help="Create a stream from a JSON file ('-' for stdin)")
    create.add_argument("file")
    get = sub.add_parser("get", help="Show a stream")
    get.add_argument("id")
    update = sub.add_parser("update", help="Update a stream from a JSON file ('-' for stdin)")
    update.add_argument("id")
    update.add_argument("file")
    delete = sub.add_parser("delete", help="Delete a stream")
    delete.add_argument("id")
    return parser


def build_config(args: argparse.Namespace) -> ClientConfig:
    """Builds the client config; command-line options win over TE_* variables."""
    return ClientConfig.from_env(
        api_endpoint=args.endpoint,
        auth_token=args.token,
        user_agent=args.user_agent,
        account_group_id=args.account_group,
        rate_limit=args.rate_limit,
        proxy=args.proxy,
    )


def run(args: argparse.Namespace, client: StreamClient) -> Optional[Stream]:
    if args.command == "create":
        return client.create_stream(Stream.from_dict(read_json(args.file)))
    if args.command == "get":
        return client.get_stream(args.id)
    if args.command == "update":
        return client.update_stream(args.id, Stream.from_dict(read_json(args.file)))
    client.delete_stream(args.id)
    logger.info(f"Deleted stream {args.id}")
    return None


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the te-stream command."""
    logging.basicConfig(level=log_level)
    logging.getLogger("stream_client").addFilter(Suppress404Filter())

    args = build_parser().parse_args(argv)
    try:
        client = StreamClient(derive_v7_config(build_config(args)))
        stream = run(args, client)
    except (StreamAPIError, TypeError, ValueError, OSError) as e:
        logger.error(str(e))
        return 1

    if stream is None:
        return 0
    if args.output:
        write_json_atomic(args.output, stream.to_dict())
        logger.info(f"Wrote stream {stream.id} to {args.output}")
    else:
        print(json.dumps(stream.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
