"""SOAP transport tests with mocked HTTP.

These tests validate envelope framing and response parsing without
requiring the live GeisPoint endpoint, using ``httpx.MockTransport``.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import List

import httpx
import pytest

from geispoint.adapters.soap import SOAP_ENV_NS, SoapTransport
from geispoint.errors import RemoteServiceError

NS = "urn:GeisPoint"


def _response_envelope(operation: str, value: str) -> bytes:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<SOAP-ENV:Envelope xmlns:SOAP-ENV="{SOAP_ENV_NS}" xmlns:ns1="{NS}">'
        "<SOAP-ENV:Body>"
        f"<ns1:{operation}Response><return>{value}</return></ns1:{operation}Response>"
        "</SOAP-ENV:Body></SOAP-ENV:Envelope>"
    ).encode("utf-8")


def _fault_envelope(message: str) -> bytes:
    return (
        f'<SOAP-ENV:Envelope xmlns:SOAP-ENV="{SOAP_ENV_NS}"><SOAP-ENV:Body>'
        "<SOAP-ENV:Fault><faultcode>SOAP-ENV:Server</faultcode>"
        f"<faultstring>{message}</faultstring></SOAP-ENV:Fault>"
        "</SOAP-ENV:Body></SOAP-ENV:Envelope>"
    ).encode("utf-8")


def _transport(handler) -> SoapTransport:
    transport = SoapTransport("http://example/wsdl.php", NS, timeout=5)
    transport.inject_http_client_for_testing(
        httpx.Client(transport=httpx.MockTransport(handler))
    )
    return transport


def test_build_envelope_contains_ordered_arguments():
    """RPC arguments become child elements of the operation element."""
    transport = SoapTransport("http://example/wsdl.php", NS)
    root = ET.fromstring(
        transport.build_envelope("getCities", {"country_code": "CZ", "id_region": 19})
    )
    call = root.find(f"{{{SOAP_ENV_NS}}}Body/{{{NS}}}getCities")
    assert call is not None
    assert [(child.tag, child.text) for child in call] == [
        ("country_code", "CZ"),
        ("id_region", "19"),
    ]


def test_call_posts_envelope_and_returns_string():
    """A successful call returns the text of the response's return element."""
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=_response_envelope("getRegions", "[]"))

    result = _transport(handler).call("getRegions", {"country_code": "CZ"})

    assert result == "[]"
    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert str(seen[0].url) == "http://example/wsdl.php"
    assert seen[0].headers["SOAPAction"] == f'"{NS}#getRegions"'
    assert b"<country_code>CZ</country_code>" in seen[0].content


def test_json_payload_text_is_unescaped():
    """Escaped JSON inside the XML return element is returned verbatim."""
    payload = '[{"id_region": 19, "name": "Praha &amp; okoli"}]'

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=_response_envelope("getRegions", payload))

    result = _transport(handler).call("getRegions", {"country_code": "CZ"})
    assert result == '[{"id_region": 19, "name": "Praha & okoli"}]'


def test_soap_fault_raises_remote_error():
    """Faults are propagated as RemoteServiceError with the fault string."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, content=_fault_envelope("Procedure not present"))

    with pytest.raises(RemoteServiceError, match="Procedure not present"):
        _transport(handler).call("getGPDetail", {"id_gp": "x"})


def test_http_status_error_raises_remote_error():
    """Non-SOAP HTTP errors are not swallowed."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="not here")

    with pytest.raises(RemoteServiceError, match="404"):
        _transport(handler).call("getRegions", {"country_code": "CZ"})


def test_network_error_raises_remote_error():
    """Transport failures surface as RemoteServiceError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RemoteServiceError, match="connection refused"):
        _transport(handler).call("getRegions", {"country_code": "CZ"})


def test_malformed_envelope_raises_remote_error():
    """A body that is not an envelope for the operation is rejected."""
    with pytest.raises(RemoteServiceError, match="Malformed"):
        SoapTransport.parse_envelope("getRegions", b"<html>oops")
    with pytest.raises(RemoteServiceError, match="Unexpected"):
        SoapTransport.parse_envelope(
            "getRegions", _response_envelope("getCities", "[]")
        )
