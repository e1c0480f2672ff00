import dataclasses
import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Protocol

import requests
from requests.adapters import HTTPAdapter
from urllib3 import Retry

from constants import DEFAULT_API_ENDPOINT, DEFAULT_USER_AGENT
from rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class Limiter(Protocol):
    def wait(self) -> None: ...


def build_session(proxy: bool = False) -> requests.Session:
    """Builds the HTTP transport used by the stream client.

    Retries are pinned to zero so that every transport or status failure
    reaches the caller on the first attempt.

    Args:
        proxy: Route requests through HTTP_PROXY/HTTPS_PROXY from the environment.

    Returns:
        A configured requests session.
    """
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=Retry(total=0, read=False))
    session.mount('https://', adapter)
    session.mount('http://', adapter)

    if proxy:
        session.proxies = {
            "http": os.getenv("HTTP_PROXY"),
            "https": os.getenv("HTTPS_PROXY"),
        }
    return session


@dataclass(frozen=True)
class ClientConfig:
    """Read-only settings shared by every call against the API.

    Args:
        api_endpoint: Base URL, e.g. https://api.thousandeyes.com/v6.
        auth_token: Bearer token.
        user_agent: Value of the user-agent header.
        account_group_id: Optional account group, sent as the ``aid`` parameter.
        limiter: Optional gate with a blocking ``wait()``.
        session: HTTP transport.
        timeout: Request timeout in seconds; None keeps the transport default.
    """

    api_endpoint: str
    auth_token: str
    user_agent: str = DEFAULT_USER_AGENT
    account_group_id: Optional[str] = None
    limiter: Optional[Limiter] = None
    session: requests.Session = field(default_factory=build_session)
    timeout: Optional[float] = None

    @classmethod
    def from_env(
            cls,
            api_endpoint: Optional[str] = None,
            auth_token: Optional[str] = None,
            user_agent: Optional[str] = None,
            account_group_id: Optional[str] = None,
            rate_limit: Optional[float] = None,
            proxy: bool = False,
    ) -> "ClientConfig":
        """Builds a config from TE_* environment variables.

        Explicit arguments take precedence over the environment.

        Raises:
            ValueError: If no token is given or TE_RATE_LIMIT is not a number.
        """
        token = auth_token or os.getenv("TE_TOKEN")
        if not token:
            raise ValueError("a token is required (TE_TOKEN)")

        if rate_limit is None and os.getenv("TE_RATE_LIMIT"):
            raw = os.getenv("TE_RATE_LIMIT")
            try:
                rate_limit = float(raw)
            except ValueError as e:
                raise ValueError(f"TE_RATE_LIMIT must be a number, got {raw!r}") from e
        limiter = RateLimiter(rate_per_sec=rate_limit) if rate_limit else None

        proxy = proxy or os.getenv("TE_PROXY", "").lower() in ("1", "true", "yes")
        return cls(
            api_endpoint=api_endpoint or os.getenv("TE_API_ENDPOINT", DEFAULT_API_ENDPOINT),
            auth_token=token,
            user_agent=user_agent or os.getenv("TE_USER_AGENT", DEFAULT_USER_AGENT),
            account_group_id=account_group_id or os.getenv("TE_AID") or None,
            limiter=limiter,
            session=build_session(proxy=proxy),
        )


def derive_v7_config(config: ClientConfig) -> ClientConfig:
    """Returns a copy of ``config`` pointed at the v7 API.

    The streaming endpoint only exists on v7, while the rest of the provider
    talks to v6. The input config is left untouched.
    """
    v7 = dataclasses.replace(config, api_endpoint=config.api_endpoint.replace("v6", "v7"))
    logger.debug(f"Derived v7 endpoint {v7.api_endpoint} from {config.api_endpoint}")
    return v7
