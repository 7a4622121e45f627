"""Host list fetcher module.

Philosophy:
- Single responsibility: download the raw host list payload
- Single attempt, fail fast (no retries)
- Security: credentials never logged, TLS verification is an explicit choice

Public API (the "studs"):
    HostFetcher: Authenticated HTTPS GET returning the raw response body
    JSON_HEADERS: Headers sent with every request

TLS verification is off by default to keep working against inventory
servers with self-signed certificates. This is a security trade-off: turn
it on with ``verify_tls=True`` (``--verify-tls``) wherever the endpoint has
a valid certificate. Every unverified fetch logs a warning.
"""

import logging
import warnings

import requests
from requests.auth import HTTPBasicAuth
from urllib3.exceptions import InsecureRequestWarning

from gethosts.exceptions import BodyReadError, RequestBuildError, TransportError
from gethosts.log_sanitizer import LogSanitizer

logger = logging.getLogger(__name__)

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class HostFetcher:
    """Download the host list over HTTPS with basic authentication.

    Example:
        >>> fetcher = HostFetcher(verify_tls=True, timeout=30)
        >>> data = fetcher.fetch("https://inventory/hosts", "bob", "secret")
    """

    def __init__(
        self,
        verify_tls: bool = False,
        timeout: float | None = None,
        session: requests.Session | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize fetcher.

        Args:
            verify_tls: Validate the server certificate (default: off, trust-all)
            timeout: Connect/read timeout in seconds (default: None, wait forever)
            session: requests session to use (default: a new session)
            log: Logger for progress messages (default: module logger)
        """
        self.verify_tls = verify_tls
        self.timeout = timeout
        self._session = session or requests.Session()
        self._log = log or logger

    def fetch(self, url: str, user: str, password: str) -> bytes:
        """Download the raw host list payload.

        Args:
            url: Host list URL
            user: Basic auth user name
            password: Basic auth password

        Returns:
            Raw response body

        Raises:
            RequestBuildError: If the request cannot be built from the URL
            TransportError: If the connection fails (unreachable host, TLS, timeout)
            BodyReadError: If the response body cannot be read
        """
        safe_url = LogSanitizer.sanitize_url(url)

        request = requests.Request(
            "GET", url, headers=JSON_HEADERS, auth=HTTPBasicAuth(user, password)
        )
        try:
            prepared = self._session.prepare_request(request)
        except (requests.RequestException, ValueError) as e:
            self._log.warning(f"could not create new http request for {safe_url}")
            raise RequestBuildError(
                f"Invalid request for {safe_url}: {LogSanitizer.sanitize(str(e))}"
            ) from e

        if not self.verify_tls:
            self._log.warning(
                f"TLS certificate verification is disabled for {safe_url} "
                "(use --verify-tls to enable)"
            )

        response = self._send(prepared, safe_url)

        with response:
            if not response.ok:
                self._log.warning(f"{safe_url} answered with HTTP {response.status_code}")
            try:
                data = response.content
            except requests.RequestException as e:
                self._log.warning(f"could not download host list from {safe_url}")
                raise BodyReadError(
                    f"Failed reading response from {safe_url}: {LogSanitizer.sanitize(str(e))}"
                ) from e

        self._log.debug(f"Downloaded {len(data)} bytes from {safe_url}")
        return data

    def _send(self, prepared: requests.PreparedRequest, safe_url: str) -> requests.Response:
        """Send a prepared request, mapping connection failures to TransportError."""
        settings = self._session.merge_environment_settings(
            prepared.url, {}, True, self.verify_tls, None
        )
        try:
            with warnings.catch_warnings():
                if not self.verify_tls:
                    warnings.simplefilter("ignore", InsecureRequestWarning)
                return self._session.send(prepared, timeout=self.timeout, **settings)
        except (requests.exceptions.InvalidSchema, requests.exceptions.InvalidURL) as e:
            self._log.warning(f"could not create new http request for {safe_url}")
            raise RequestBuildError(
                f"Invalid request for {safe_url}: {LogSanitizer.sanitize(str(e))}"
            ) from e
        except requests.RequestException as e:
            self._log.warning(f"could not open http connection to {safe_url}")
            raise TransportError(
                f"Connection to {safe_url} failed: {LogSanitizer.sanitize(str(e))}"
            ) from e
