"""
Client for the iFlytek (Xunfei) text-correction API.

Requests are authenticated by signing the host, date and request line with
HMAC-SHA256 and passing the result as URL query parameters. Text travels
base64-encoded in both directions.
"""

import base64
import hashlib
import hmac
import logging
from email.utils import formatdate
from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from .config import ServiceConfig

logger = logging.getLogger(__name__)


class XunfeiClientError(Exception):
    """Raised when a correction request fails."""
    pass


class XunfeiConfigurationError(XunfeiClientError):
    """Raised when credentials are missing."""
    pass


class XunfeiAPIError(XunfeiClientError):
    """Raised when the service answers with an error or an unusable payload."""

    def __init__(self, message: str, code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.code = code
        self.details = details


class XunfeiNetworkError(XunfeiClientError):
    """Raised when the service cannot be reached or does not answer in time."""
    pass


def rfc1123_date() -> str:
    """Current time in the format used by the signature (e.g. 'Mon, 20 Oct 2026 08:00:00 GMT')."""
    return formatdate(usegmt=True)


class XunfeiClient:
    """
    Client for the iFlytek text-correction endpoint.

    Usage:
        client = XunfeiClient(ServiceConfig.from_env())
        response = client.correct_text("这是一段需要纠错的文本")
        result = process_result(response, text)
    """

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Credentials and endpoint. Defaults to ServiceConfig.from_env().
            http_client: httpx client to send requests with. One is created
                with the configured timeout when omitted.

        Raises:
            XunfeiConfigurationError: If any credential is missing.
        """
        self.config = config or ServiceConfig.from_env()
        if not self.config.has_credentials:
            raise XunfeiConfigurationError(
                "Missing iFlytek credentials. Set "
                + ", ".join(self.config.missing_credentials)
                + " environment variables."
            )
        self.http_client = http_client or httpx.Client(
            timeout=httpx.Timeout(self.config.timeout),
            follow_redirects=True,
        )

    def build_auth(self, date: Optional[str] = None) -> dict[str, str]:
        """
        Build the signed query parameters.

        Args:
            date: RFC 1123 date to sign. Defaults to now.

        Returns:
            Dict with authorization, date and host.
        """
        date = date or rfc1123_date()
        signature_origin = (
            f"host: {self.config.host}\n"
            f"date: {date}\n"
            f"POST {self.config.uri} HTTP/1.1"
        )
        digest = hmac.new(
            self.config.api_secret.encode("utf-8"),
            signature_origin.encode("utf-8"),
            hashlib.sha256,
        ).digest()
        signature = base64.b64encode(digest).decode("ascii")

        authorization_origin = (
            f'api_key="{self.config.api_key}", algorithm="hmac-sha256", '
            f'headers="host date request-line", signature="{signature}"'
        )
        authorization = base64.b64encode(authorization_origin.encode("utf-8")).decode("ascii")
        return {"authorization": authorization, "date": date, "host": self.config.host}

    def build_url(self, date: Optional[str] = None) -> str:
        return f"{self.config.url}?{urlencode(self.build_auth(date))}"

    def build_request_body(self, text: str) -> dict:
        """Build the JSON body with the text base64-encoded."""
        encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
        return {
            "header": {
                "app_id": self.config.app_id,
                "uid": self.config.uid,
                "status": 3,
            },
            "parameter": {
                "s9a87e3ec": {
                    "result": {
                        "encoding": "utf8",
                        "compress": "raw",
                        "format": "json",
                    }
                }
            },
            "payload": {
                "input": {
                    "encoding": "utf8",
                    "compress": "raw",
                    "format": "json",
                    "status": 3,
                    "text": encoded,
                }
            },
        }

    def correct_text(self, text: str) -> dict:
        """
        Send text for correction.

        Args:
            text: Text to check.

        Returns:
            The service response with ``payload.result.text`` decoded from
            base64 to its JSON string.

        Raises:
            XunfeiAPIError: On an HTTP error, a non-zero service code or an
                undecodable payload.
            XunfeiNetworkError: On timeouts and connection failures.
        """
        logger.info(f"Sending {len(text)} characters for correction")
        try:
            response = self.http_client.post(
                self.build_url(),
                json=self.build_request_body(text),
                headers={"Content-Type": "application/json", "Accept": "application/json"},
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise XunfeiNetworkError(f"Request timed out: {e}")
        except httpx.HTTPStatusError as e:
            raise XunfeiAPIError(
                f"API call failed {e.response.status_code}: {e.response.reason_phrase}",
                code=e.response.status_code,
                details=e.response.text,
            )
        except httpx.RequestError as e:
            raise XunfeiNetworkError(f"Network connection failed: {e}")

        try:
            data = response.json()
        except ValueError as e:
            raise XunfeiAPIError(f"Response is not JSON: {e}")
        if not isinstance(data, dict):
            raise XunfeiAPIError(f"Unexpected response body: {type(data).__name__}")
        if not data:
            raise XunfeiAPIError("Empty response from correction service")

        header = data.get("header") or {}
        payload = data.get("payload") or {}
        if not isinstance(header, dict) or not isinstance(payload, dict):
            raise XunfeiAPIError("Malformed response: header and payload must be objects")
        code = header.get("code")
        if code:
            message = header.get("message") or "未知错误"
            logger.error(f"Correction service returned error {code}: {message}")
            raise XunfeiAPIError(f"API错误 {code}: {message}", code=code, details=header)

        result = payload.get("result") or {}
        if isinstance(result, dict) and result.get("text"):
            try:
                result["text"] = base64.b64decode(result["text"]).decode("utf-8")
            except (ValueError, UnicodeDecodeError) as e:
                raise XunfeiAPIError(f"Could not decode result text: {e}")
            logger.debug(f"Decoded result text: {len(result['text'])} characters")

        return data

    def close(self) -> None:
        self.http_client.close()

    def __enter__(self) -> "XunfeiClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def create_xunfei_client(
    config: Optional[ServiceConfig] = None,
    http_client: Optional[httpx.Client] = None,
) -> XunfeiClient:
    """
    Factory function to create a client.

    Args:
        config: Optional config. If None, reads IFLYTEK_* environment variables.
        http_client: Optional httpx client.

    Returns:
        Configured XunfeiClient instance.
    """
    return XunfeiClient(config=config, http_client=http_client)

