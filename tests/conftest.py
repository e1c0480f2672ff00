import json
import re
import uuid
from unittest.mock import MagicMock

import pytest
import requests

from client_config import ClientConfig


def make_response(status_code, body=None):
    """Builds a fake streamed response whose json() parses ``body``."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    if body is None:
        response.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", "", 0)
    else:
        text = body if isinstance(body, str) else json.dumps(body)
        response.json.side_effect = lambda: json.loads(text)
    return response


class FakeStreamAPI:
    """In-memory stand-in for the v7 /stream endpoints."""

    _path = re.compile(r"^https://api\.example\.com/v7/stream(?:/(?P<id>[^/]+))?\.json$")

    def __init__(self):
        self.streams = {}
        self.calls = []
        self.responses = []

    def request(self, method, url, headers=None, params=None, data=None, timeout=None, stream=False):
        self.calls.append({"method": method, "url": url, "params": params,
                           "data": json.loads(data) if data else None})
        match = self._path.match(url)
        if match is None:
            response = make_response(404)
        else:
            response = self._handle(method, match.group("id"), json.loads(data) if data else None)
        self.responses.append(response)
        return response

    def _handle(self, method, stream_id, body):
        if method == "POST" and stream_id is None:
            stored = dict(body, id=f"s-{uuid.uuid4().hex[:8]}")
            self.streams[stored["id"]] = stored
            return make_response(201, stored)
        if stream_id not in self.streams:
            return make_response(404)
        if method == "GET":
            return make_response(200, self.streams[stream_id])
        if method == "PUT":
            self.streams[stream_id].update(body)
            return make_response(200, self.streams[stream_id])
        if method == "DELETE":
            del self.streams[stream_id]
            return make_response(204)
        return make_response(405)


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def config(session):
    return ClientConfig(
        api_endpoint="https://api.example.com/v7",
        auth_token="secret-token",
        user_agent="te-tests/1.0",
        session=session,
    )


@pytest.fixture
def fake_api():
    return FakeStreamAPI()


@pytest.fixture
def v6_config(fake_api):
    session = MagicMock(spec=requests.Session)
    session.request.side_effect = fake_api.request
    return ClientConfig(
        api_endpoint="https://api.example.com/v6",
        auth_token="secret-token",
        user_agent="te-tests/1.0",
        session=session,
    )


@pytest.fixture(name="make_response")
def make_response_fixture():
    return make_response
