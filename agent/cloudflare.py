"""Cloudflare v4 DNS record lookup and update."""

from __future__ import annotations

import logging
from typing import Any, Dict

import requests

from shared_lib.schema import (
    DEFAULT_API_BASE_URL,
    DNSRecord,
    DNSUpdateRequest,
    RecordConfig,
    dump_model,
    validate_model,
)


class DNSProviderError(RuntimeError):
    """A Cloudflare call failed in transport, decoding, or was rejected."""


class DNSRecordClient:
    """Looks up and updates A records with X-Auth-Email/X-Auth-Key credentials."""

    def __init__(
        self,
        session: requests.Session,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = 10,
    ) -> None:
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def _headers(self, record: RecordConfig) -> Dict[str, str]:
        return {
            "X-Auth-Email": record.auth_email,
            "X-Auth-Key": record.auth_key or "",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, url: str, record: RecordConfig, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self._session.request(
                method,
                url,
                headers=self._headers(record),
                timeout=self._timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise DNSProviderError(f"{method} {url} failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise DNSProviderError(
                f"{method} {url} returned undecodable body (HTTP {response.status_code})"
            ) from exc
        if not isinstance(payload, dict):
            raise DNSProviderError(f"{method} {url} returned unexpected JSON: {payload!r}")

        if payload.get("success") is not True:
            raise DNSProviderError(
                f"{method} {url} rejected (HTTP {response.status_code}): "
                f"{_error_messages(payload)}"
            )
        return payload

    def lookup_record(self, record: RecordConfig) -> DNSRecord:
        """Return the first A record named ``record.record_name`` in its zone."""
        url = f"{self._base_url}/zones/{record.zone_identifier}/dns_records"
        payload = self._request(
            "GET",
            url,
            record,
            params={"name": record.record_name, "type": "A"},
        )
        results = payload.get("result")
        if not isinstance(results, list):
            raise DNSProviderError(f"GET {url} returned no result list")
        if not results:
            raise DNSProviderError(
                f"No A record named {record.record_name} in zone {record.zone_identifier}"
            )

        try:
            dns_record = validate_model(DNSRecord, results[0])
        except ValueError as exc:
            raise DNSProviderError(f"GET {url} returned a malformed record: {exc}") from exc
        logging.info(
            "Cloudflare has %s -> %s (record id %s)",
            record.record_name,
            dns_record.content.strip(),
            dns_record.id,
        )
        return dns_record

    def update_record(self, record: RecordConfig, ip_address: str, record_id: str) -> None:
        url = f"{self._base_url}/zones/{record.zone_identifier}/dns_records/{record_id}"
        body = DNSUpdateRequest(
            id=record.zone_identifier,
            proxied=record.proxy,
            name=record.record_name,
            content=ip_address,
        )
        self._request("PUT", url, record, json=dump_model(body))
        logging.info("Updated %s -> %s", record.record_name, ip_address)


def _error_messages(payload: Dict[str, Any]) -> str:
    errors = payload.get("errors") or []
    messages = [
        f"{error.get('code')}: {error.get('message')}" if isinstance(error, dict) else str(error)
        for error in errors
    ]
    return "; ".join(messages) or "success flag not set"
