"""Public IPv4 lookup through a plain-text IP-echo service."""

from __future__ import annotations

import ipaddress
import logging

import requests

from shared_lib.schema import DEFAULT_CHECK_IP_URL


class AddressResolver:
    """Asks an IP-echo service for the caller's public IPv4 address."""

    def __init__(
        self,
        session: requests.Session,
        check_ip_url: str = DEFAULT_CHECK_IP_URL,
        timeout: float = 10,
    ) -> None:
        self._session = session
        self._check_ip_url = check_ip_url
        self._timeout = timeout

    def current_address(self) -> str:
        """Return the response body, or "" when the address is unknown.

        The body is returned as received; callers strip it before comparing.
        """
        try:
            response = self._session.get(self._check_ip_url, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logging.warning("Failed to fetch public IP from %s: %s", self._check_ip_url, exc)
            return ""

        body = response.text
        try:
            ipaddress.IPv4Address(body.strip())
        except ValueError:
            logging.warning(
                "IP-echo service %s returned a non-IPv4 body: %r",
                self._check_ip_url,
                body[:64],
            )
            return ""
        return body
