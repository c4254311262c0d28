"""Map stored media URLs back to object-store keys.

Two URL shapes point at our bucket:
- public CDN path:      https://<public-host>[/<prefix>]/<key>   (e.g. pub-xxx.r2.dev)
- private endpoint path: https://<endpoint-host>/<bucket>/<key>  (e.g. <acct>.r2.cloudflarestorage.com)

Anything else (placeholder images, third-party hosts, malformed strings) maps to
None and is skipped by the deleter. extract_key never raises.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import unquote, urlsplit

logger = logging.getLogger(__name__)


def _host_and_path(url: str | None) -> tuple[str, str]:
    """Return (lowercase host, path without trailing slash) of a configured base URL."""
    if not url:
        return "", ""
    parts = urlsplit(url.strip())
    return (parts.hostname or "").lower(), parts.path.rstrip("/")


class KeyExtractor:
    """Recognizes public CDN and private endpoint URLs of the media bucket."""

    PUBLIC_HOST_SUFFIXES: tuple[str, ...] = (".r2.dev",)
    PRIVATE_HOST_SUFFIXES: tuple[str, ...] = (".r2.cloudflarestorage.com",)

    def __init__(
        self,
        public_base_url: str | None = None,
        endpoint_url: str | None = None,
        bucket: str | None = None,
    ) -> None:
        """Initialize with the configured bases (all optional).

        Args:
            public_base_url: CDN base, may include a path prefix.
            endpoint_url: Private S3 endpoint (path-style, bucket is first segment).
            bucket: Media bucket; private URLs naming another bucket are not ours.
        """
        self._public_host, self._public_prefix = _host_and_path(public_base_url)
        self._endpoint_host, _ = _host_and_path(endpoint_url)
        self._bucket = (bucket or "").strip() or None

    def _is_public_host(self, host: str) -> bool:
        if self._public_host and host == self._public_host:
            return True
        return host.endswith(self.PUBLIC_HOST_SUFFIXES)

    def _is_private_host(self, host: str) -> bool:
        if self._endpoint_host and host == self._endpoint_host:
            return True
        return host.endswith(self.PRIVATE_HOST_SUFFIXES)

    def extract_key(self, url: Any) -> str | None:
        """Return the storage key for url, or None if url is not one of ours.

        Query strings and fragments are ignored; percent-escapes are decoded.
        """
        if not isinstance(url, str) or not url.strip():
            return None
        try:
            parts = urlsplit(url.strip())
            host = (parts.hostname or "").lower()
        except ValueError:
            logger.debug("Unparseable media URL skipped: %r", url)
            return None
        if parts.scheme not in ("http", "https") or not host:
            return None
        path = unquote(parts.path)

        if self._is_public_host(host):
            if host == self._public_host and self._public_prefix:
                if not path.startswith(self._public_prefix + "/"):
                    return None
                path = path[len(self._public_prefix):]
            return self._clean(path)

        if self._is_private_host(host):
            segments = path.lstrip("/").split("/", 1)
            if len(segments) < 2 or not segments[0]:
                return None
            if self._bucket is not None and segments[0] != self._bucket:
                return None
            return self._clean(segments[1])

        return None

    @staticmethod
    def _clean(path: str) -> str | None:
        key = path.lstrip("/")
        return key or None
