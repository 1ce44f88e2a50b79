"""SOAP RPC transport for the GeisPoint web service.

The service speaks SOAP 1.1 in RPC style: each operation is an element named
after the operation holding one child element per argument, and the response
carries a single string return value (a JSON document). This module only
frames the envelope, performs the HTTP round trip and extracts that string;
decoding the JSON is left to :mod:`geispoint.adapters.geispoint`.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, Mapping

import httpx

from ..__version__ import __version__
from ..config.models import DEFAULT_ENDPOINT, DEFAULT_NAMESPACE
from ..errors import RemoteServiceError

logger = logging.getLogger(__name__)

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"

ET.register_namespace("SOAP-ENV", SOAP_ENV_NS)


class SoapTransport:
    """Blocking SOAP transport over :class:`httpx.Client`.

    Parameters
    ----------
    endpoint: str
        Service location the envelopes are POSTed to.
    namespace: str
        Namespace of the RPC operation element.
    timeout: float
        Request timeout in seconds.

    Attributes
    ----------
    _client: httpx.Client
        Shared client configured with timeout and headers.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        namespace: str = DEFAULT_NAMESPACE,
        timeout: float = 30.0,
    ) -> None:
        self._endpoint = endpoint
        self._namespace = namespace
        self._client = httpx.Client(timeout=timeout, headers=self._headers())
        logger.info(
            "geispoint.soap.init",
            extra={"endpoint": endpoint, "timeout_seconds": timeout},
        )

    def inject_http_client_for_testing(self, client: Any) -> None:
        """Replace underlying HTTP client (testing only)."""
        self._client = client

    @staticmethod
    def _headers() -> Dict[str, str]:
        return {
            "Content-Type": "text/xml; charset=utf-8",
            "User-Agent": f"geispoint-client/{__version__}",
        }

    def build_envelope(self, operation: str, arguments: Mapping[str, Any]) -> bytes:
        """Serialize an RPC call into a SOAP 1.1 envelope."""
        envelope = ET.Element(f"{{{SOAP_ENV_NS}}}Envelope")
        body = ET.SubElement(envelope, f"{{{SOAP_ENV_NS}}}Body")
        call = ET.SubElement(body, f"{{{self._namespace}}}{operation}")
        for name, value in arguments.items():
            arg = ET.SubElement(call, name)
            arg.text = "" if value is None else str(value)
        return ET.tostring(envelope, encoding="utf-8", xml_declaration=True)

    @staticmethod
    def parse_envelope(operation: str, content: bytes) -> str:
        """Extract the return value of ``operation`` from a response envelope.

        Raises
        ------
        RemoteServiceError
            On a SOAP fault or an envelope that does not carry a response
            for ``operation``.
        """
        try:
            root = ET.fromstring(content)
        except ET.ParseError as exc:
            raise RemoteServiceError(f"Malformed SOAP envelope: {exc}") from exc

        body = root.find(f"{{{SOAP_ENV_NS}}}Body")
        if body is None or len(body) == 0:
            raise RemoteServiceError("SOAP envelope has no body")

        payload = body[0]
        if payload.tag == f"{{{SOAP_ENV_NS}}}Fault":
            fault = payload.findtext("faultstring") or "unknown fault"
            raise RemoteServiceError(f"SOAP fault in {operation}: {fault}")

        # Response element name is "<operation>Response" in any namespace
        local_name = payload.tag.rsplit("}", 1)[-1]
        if local_name != f"{operation}Response":
            raise RemoteServiceError(
                f"Unexpected SOAP response element `{local_name}` for {operation}"
            )
        if len(payload) == 0:
            return ""
        return payload[0].text or ""

    def call(self, operation: str, arguments: Mapping[str, Any]) -> str:
        """Perform one RPC round trip and return the raw string result."""
        logger.debug(
            "geispoint.soap.call",
            extra={"operation": operation, "argument_keys": list(arguments.keys())},
        )
        try:
            resp = self._client.post(
                self._endpoint,
                content=self.build_envelope(operation, arguments),
                headers={"SOAPAction": f'"{self._namespace}#{operation}"'},
            )
        except httpx.HTTPError as exc:
            logger.error(
                "geispoint.soap.transport_error",
                extra={"operation": operation, "error": str(exc)},
            )
            raise RemoteServiceError(f"{operation} request failed: {exc}") from exc

        # Faults are delivered with status 500 and still carry an envelope
        if resp.status_code >= 400 and resp.status_code != 500:
            logger.error(
                "geispoint.soap.status_error",
                extra={"operation": operation, "status": resp.status_code},
            )
            raise RemoteServiceError(
                f"{operation} failed with HTTP status {resp.status_code}"
            )

        result = self.parse_envelope(operation, resp.content)
        if resp.status_code == 500:
            raise RemoteServiceError(f"{operation} failed with HTTP status 500")
        logger.debug(
            "geispoint.soap.response",
            extra={"operation": operation, "status_code": resp.status_code},
        )
        return result

    def close(self) -> None:
        """Release the underlying HTTP client."""
        self._client.close()
