"""
Shared HTTP client plumbing for the Goodreads and Notion clients.
"""

from typing import Optional, Dict, Any
from dataclasses import dataclass
import requests
from requests.adapters import HTTPAdapter


@dataclass
class APIError(Exception):
    """Raised when a remote service is unreachable or answers with an error."""
    message: str
    status_code: Optional[int] = None
    response_data: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        if self.status_code:
            return f"API Error {self.status_code}: {self.message}"
        return f"API Error: {self.message}"


class BaseClient:
    """
    Base class for API clients with common functionality.

    Requests are never retried: a failed call surfaces as an APIError
    and the caller decides what it means for the run.
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        pool_size: int = 10,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self.session = requests.Session()

        # Writers fan out one request per batch item, so the pool has to
        # hold a full batch worth of connections.
        adapter = HTTPAdapter(
            pool_connections=pool_size,
            pool_maxsize=pool_size,
            max_retries=0,
        )
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _build_url(self, endpoint: str) -> str:
        """Build full URL from endpoint."""
        return f"{self.base_url}{endpoint}"

    def _send(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Send an HTTP request and check its status.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint
            **kwargs: Additional arguments for requests

        Returns:
            The successful response

        Raises:
            APIError: If the request fails or the status is not 2xx/3xx
        """
        url = self._build_url(endpoint)

        kwargs.setdefault("timeout", self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.ConnectionError as e:
            raise APIError(f"Connection error: {str(e)}")
        except requests.exceptions.Timeout as e:
            raise APIError(f"Request timeout: {str(e)}")
        except requests.exceptions.RequestException as e:
            raise APIError(f"Request failed: {str(e)}")

        if response.status_code >= 400:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {"error": response.text}
            if not isinstance(error_data, dict):
                error_data = {"error": response.text}

            raise APIError(
                message=error_data.get("message") or error_data.get("error") or response.text,
                status_code=response.status_code,
                response_data=error_data,
            )

        return response

    def _request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Make an HTTP request and decode the JSON body.

        Raises:
            APIError: If the request fails or the body is not JSON
        """
        response = self._send(method, endpoint, **kwargs)

        try:
            return response.json()
        except ValueError:
            raise APIError(
                f"Invalid JSON response from {endpoint}",
                status_code=response.status_code,
            )

    def get_text(self, endpoint: str, **kwargs) -> str:
        """Make a GET request and return the raw body."""
        return self._send("GET", endpoint, **kwargs).text

    def post(self, endpoint: str, **kwargs) -> Dict[str, Any]:
        """Make a POST request."""
        return self._request("POST", endpoint, **kwargs)

    def patch(self, endpoint: str, **kwargs) -> Dict[str, Any]:
        """Make a PATCH request."""
        return self._request("PATCH", endpoint, **kwargs)

    def close(self) -> None:
        """Close the session."""
        self.session.close()
