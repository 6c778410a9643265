"""URL validation for the IP-echo and Cloudflare endpoints."""

from __future__ import annotations

import ipaddress
from urllib.parse import urlparse


def validate_url(value: str, *, setting: str = "URL") -> None:
    """Reject endpoints the agent should never send credentials or requests to.

    Raises ValueError naming ``setting`` when the URL is not https, has no
    hostname, or points at localhost or a non-public IP literal.
    """
    parsed = urlparse(value)
    scheme = parsed.scheme.lower()
    if scheme != "https":
        raise ValueError(f"{setting} must use https://")
    if not parsed.hostname:
        raise ValueError(f"{setting} must include a hostname")

    host = parsed.hostname.lower()
    if host == "localhost":
        raise ValueError(f"{setting} hostname cannot be localhost")

    try:
        ip_address = ipaddress.ip_address(host)
    except ValueError:
        ip_address = None

    if ip_address and (
        ip_address.is_private
        or ip_address.is_loopback
        or ip_address.is_link_local
        or ip_address.is_reserved
        or ip_address.is_multicast
        or ip_address.is_unspecified
    ):
        raise ValueError(f"{setting} hostname cannot be a loopback or private IP")
