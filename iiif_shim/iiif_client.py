"""
IIIF Image API client (descriptor fetcher for the shim).

One instance is built at process start and shared by every request; the
underlying requests.Session keeps a pooled adapter so concurrent requests
reuse connections. No retries: a failed fetch fails the request.

Usage:
    client = IIIFClient("http://iiif.example.org/iiif")
    r = client.fetch_descriptor("uva-lib:12345")
    if r.ok:
        r.value.scale_factors  # (8, 4, 2, 1)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter

from common.errors import Result, UpstreamUnavailable
from common.types import ImageDescriptor, TargetRegionSpec


log = logging.getLogger(__name__)


class IIIFClient:
    def __init__(
        self,
        server_root: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        pool_maxsize: int = 20,
    ):
        """
        Params:
            server_root: IIIF base URL, e.g. http://host/iiif (trailing slash optional)
            timeout: per-request timeout in seconds
            session: optional requests.Session (tests pass a mock)
            pool_maxsize: connections kept per host when we build the session
        """
        if not server_root:
            raise ValueError("IIIF server root is required")
        self.server_root = server_root.rstrip("/")
        self.timeout = float(timeout)
        if session is None:
            session = requests.Session()
            adapter = HTTPAdapter(pool_connections=1, pool_maxsize=int(pool_maxsize))
            session.mount("http://", adapter)
            session.mount("https://", adapter)
        self.session = session

    # ----------------------------
    # URL building
    # ----------------------------
    def info_url(self, identifier: str) -> str:
        return f"{self.server_root}/{identifier}/info.json"

    def image_url(self, identifier: str, spec: TargetRegionSpec) -> str:
        return f"{self.server_root}/{identifier}/{spec.path()}"

    # ----------------------------
    # Fetching
    # ----------------------------
    def fetch_info(self, identifier: str) -> Result[Dict[str, Any]]:
        url = self.info_url(identifier)
        try:
            r = self.session.get(url, timeout=self.timeout, headers={"Accept": "application/json"})
        except requests.RequestException as e:
            log.warning("IIIF info request failed: %s (%s)", url, e)
            return Result.failure(UpstreamUnavailable(f"Unable to reach {url!r}: {e}"))

        if r.status_code != 200:
            log.warning("IIIF info request failed: %s %s %s", url, r.status_code, r.text[:200])
            return Result.failure(UpstreamUnavailable(f"{url!r} returned HTTP {r.status_code}"))

        try:
            doc = r.json()
        except ValueError:
            log.warning("IIIF info response is not JSON: %s", url)
            return Result.failure(UpstreamUnavailable(f"Unable to parse response from {url!r}"))
        if not isinstance(doc, dict):
            return Result.failure(UpstreamUnavailable(f"Unexpected JSON document from {url!r}"))
        return Result.success(doc)

    def fetch_descriptor(self, identifier: str) -> Result[ImageDescriptor]:
        info = self.fetch_info(identifier)
        if not info.ok:
            return Result.failure(info.error)
        return ImageDescriptor.from_info_json(info.value)

    def close(self) -> None:
        self.session.close()
