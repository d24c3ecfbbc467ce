"""
Unit tests for the IIIF descriptor fetcher
"""

import pytest
import os
import sys
from unittest.mock import Mock

import requests

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.append(project_root)

from common.errors import MalformedMetadata, UpstreamUnavailable
from common.types import TargetRegionSpec
from iiif_shim.iiif_client import IIIFClient
from tests.fixtures import INFO_8421


def _session(status=200, payload=None, json_error=None, exc=None):
    session = Mock()
    if exc is not None:
        session.get.side_effect = exc
        return session
    resp = Mock()
    resp.status_code = status
    resp.text = "body"
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = payload
    session.get.return_value = resp
    return session


class TestIIIFClient:
    """Test cases for IIIFClient"""

    def test_init_strips_trailing_slash(self):
        client = IIIFClient("http://iiif.example.org/iiif/", session=Mock())
        assert client.server_root == "http://iiif.example.org/iiif"

    def test_init_requires_root(self):
        with pytest.raises(ValueError, match="server root is required"):
            IIIFClient("")

    def test_default_session_is_pooled(self):
        """Test a real session with pooled adapters is built when none is given"""
        client = IIIFClient("http://iiif.example.org/iiif", pool_maxsize=7)
        assert isinstance(client.session, requests.Session)
        adapter = client.session.get_adapter("http://iiif.example.org/")
        assert adapter._pool_maxsize == 7
        client.close()

    def test_urls(self):
        client = IIIFClient("http://iiif.example.org/iiif", session=Mock())
        assert client.info_url("uva-lib:1") == "http://iiif.example.org/iiif/uva-lib:1/info.json"
        spec = TargetRegionSpec(region="20,10,80,60", size="pct:50")
        assert client.image_url("uva-lib:1", spec) == "http://iiif.example.org/iiif/uva-lib:1/20,10,80,60/pct:50/0/default.jpg"

    def test_fetch_descriptor_success(self):
        """Test info.json is fetched once and parsed"""
        session = _session(payload=INFO_8421)
        client = IIIFClient("http://iiif.example.org/iiif", timeout=3, session=session)
        r = client.fetch_descriptor("uva-lib:1234")
        assert r.ok
        assert r.value.scale_factors == (8, 4, 2, 1)
        args, kwargs = session.get.call_args
        assert args[0] == "http://iiif.example.org/iiif/uva-lib:1234/info.json"
        assert kwargs["timeout"] == 3.0

    def test_http_error_status(self):
        """Test non-200 is reported as upstream unavailable"""
        client = IIIFClient("http://iiif", session=_session(status=404))
        r = client.fetch_descriptor("x")
        assert isinstance(r.error, UpstreamUnavailable)
        assert "404" in r.error.detail

    def test_transport_error(self):
        """Test connection failures are reported, not raised"""
        client = IIIFClient("http://iiif", session=_session(exc=requests.ConnectionError("refused")))
        assert isinstance(client.fetch_info("x").error, UpstreamUnavailable)

    def test_unparseable_body(self):
        client = IIIFClient("http://iiif", session=_session(json_error=ValueError("no json")))
        r = client.fetch_info("x")
        assert isinstance(r.error, UpstreamUnavailable)
        assert "Unable to parse" in r.error.detail

    def test_non_object_body(self):
        client = IIIFClient("http://iiif", session=_session(payload=["not", "a", "dict"]))
        assert isinstance(client.fetch_info("x").error, UpstreamUnavailable)

    def test_malformed_descriptor(self):
        """Test a JSON object missing fields is malformed metadata"""
        client = IIIFClient("http://iiif", session=_session(payload={"@id": "x"}))
        assert isinstance(client.fetch_descriptor("x").error, MalformedMetadata)
