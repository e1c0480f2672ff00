import json
import logging
from typing import Any

import requests

from client_config import ClientConfig
from constants import ACCOUNT_GROUP_PARAM, EXPECTED_STATUS, STREAM_PATH
from errors import DecodingError, EncodingError, TransportError, UnexpectedStatusError
from stream import Stream

logger = logging.getLogger(__name__)


class StreamClient:
    """A client for the ThousandEyes v7 streaming-configuration endpoint.

    The vendored v6 SDK has no stream support, so this client performs the
    request cycle itself: rate-limit wait, authenticated JSON request, a
    generic 2xx check, then an exact per-operation status check and decode.

    Args:
        config: Client settings; use ``derive_v7_config`` on a v6 config.

    Usage:
        client = StreamClient(derive_v7_config(config))
        stream = client.create_stream(Stream(enabled=True, type='opentelemetry'))
    """

    def __init__(self, config: ClientConfig) -> None:
        self.config = config

    def _build_headers(self) -> dict[str, str]:
        return {
            'accept': 'application/json',
            'authorization': f'Bearer {self.config.auth_token}',
            'content-type': 'application/json',
            'user-agent': self.config.user_agent,
        }

    def _do(self, method: str, path: str, payload: Any = None) -> requests.Response:
        """Performs one authenticated call and returns the raw 2xx response.

        Args:
            method: HTTP method.
            path: Entity path without the ``.json`` suffix, e.g. ``/stream/abc``.
            payload: A Stream, a JSON-serializable object, or None for no body.

        Returns:
            The response, body not yet read. The caller must close it.

        Raises:
            EncodingError: If the payload cannot be serialized.
            TransportError: If the HTTP call fails.
            UnexpectedStatusError: If the status is outside [200, 299].
        """
        if self.config.limiter is not None:
            self.config.limiter.wait()

        url = f'{self.config.api_endpoint}{path}.json'
        data = None
        if payload is not None:
            if isinstance(payload, Stream):
                payload = payload.to_dict()
            try:
                data = json.dumps(payload)
            except (TypeError, ValueError) as e:
                raise EncodingError(f'Could not encode request payload: {e}') from e

        params = None
        if self.config.account_group_id:
            params = {ACCOUNT_GROUP_PARAM: self.config.account_group_id}

        logger.debug(f'Making {method} request to {url} with params={params}, json={data}')
        try:
            response = self.config.session.request(
                method=method,
                url=url,
                headers=self._build_headers(),
                params=params,
                data=data,
                timeout=self.config.timeout,
                stream=True,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f'Request failed: {str(e)}')
            raise TransportError(str(e)) from e

        if not 200 <= response.status_code <= 299:
            logger.error(f'HTTP error: {response.status_code} - {method} {url}')
            response.close()
            raise UnexpectedStatusError(response.status_code)
        return response

    def _decode_json(self, response: requests.Response) -> Stream:
        """Decodes a response body into a Stream, closing the response.

        The body is streamed, so the connection can still fail while it is read.
        """
        try:
            return Stream.from_dict(response.json())
        except (TypeError, ValueError) as e:
            raise DecodingError(e) from e
        except requests.exceptions.RequestException as e:
            logger.error(f'Request failed: {str(e)}')
            raise TransportError(str(e)) from e
        finally:
            response.close()

    def _expect(self, response: requests.Response, operation: str) -> None:
        if response.status_code != EXPECTED_STATUS[operation]:
            response.close()
            raise UnexpectedStatusError(response.status_code, operation)

    def create_stream(self, stream: Stream) -> Stream:
        """Creates a stream; the returned copy carries the server-assigned ID."""
        response = self._do('POST', STREAM_PATH, stream)
        self._expect(response, 'create')
        return self._decode_json(response)

    def get_stream(self, stream_id: str) -> Stream:
        """Get a stream.

        Args:
            stream_id: Stream ID.

        Returns:
            The stream as the server stores it.
        """
        response = self._do('GET', f'{STREAM_PATH}/{stream_id}')
        self._expect(response, 'get')
        return self._decode_json(response)

    def update_stream(self, stream_id: str, stream: Stream) -> Stream:
        """Replaces the fields present in ``stream``; omitted fields are left alone."""
        response = self._do('PUT', f'{STREAM_PATH}/{stream_id}', stream)
        self._expect(response, 'update')
        return self._decode_json(response)

    def delete_stream(self, stream_id: str) -> None:
        """Delete a stream. The API answers 204 with no body.

        Args:
            stream_id: Stream ID.
        """
        response = self._do('DELETE', f'{STREAM_PATH}/{stream_id}')
        self._expect(response, 'delete')
        response.close()

