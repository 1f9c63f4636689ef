"""Web-to-Lead HTTP client."""
import logging
from typing import Dict

import requests

from web2lead.errors import TransportError
from web2lead.schema.models import PostError, PostResult

logger = logging.getLogger(__name__)


class WebToLeadClient:
    """Posts lead payloads to a Web-to-Lead endpoint."""

    def __init__(self, timeout: int = 30):
        """Initialize client."""
        self.timeout = timeout
        self.session = requests.Session()

    def post(self, url: str, payload: Dict[str, str]) -> requests.Response:
        """
        POST the payload URL-encoded.

        Raises:
            TransportError: On network failure or a non-2xx response
        """
        try:
            # A dict body is sent as application/x-www-form-urlencoded
            response = self.session.post(url, data=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(str(e)) from e

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise TransportError(str(e), response=response) from e

        # 1xx and 3xx final responses are not accepted either
        if not 200 <= response.status_code < 300:
            raise TransportError(f"Unexpected status {response.status_code}", response=response)

        return response

    def send(self, url: str, payload: Dict[str, str]) -> PostResult:
        """Send a payload once and report the outcome; never raises TransportError."""
        try:
            response = self.post(url, payload)
        except TransportError as e:
            logger.debug(f"POST {url} failed: {e.message}")
            return PostResult(
                ok=False,
                response=e.response,
                error=PostError(message=e.message, response=e.response),
                payload=dict(payload),
            )

        logger.debug(f"POST {url} -> {response.status_code}")
        return PostResult(ok=True, response=response, payload=dict(payload))

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()
