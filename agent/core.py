"""Core runner for the DDNS agent."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import requests

from agent.cloudflare import DNSProviderError, DNSRecordClient
from agent.resolver import AddressResolver
from agent.store import AddressStore
from shared_lib.schema import AgentSettings, RecordConfig, parse_records
from shared_lib.security import CryptoManager


class DDNSRunner:
    """Runs update and resync cycles for the configured records."""

    def __init__(
        self,
        settings: Optional[AgentSettings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._settings = settings or AgentSettings.from_env()
        self._config_path = Path(self._settings.config_path)
        self._session = session or requests.Session()
        self._resolver = AddressResolver(
            self._session,
            self._settings.check_ip_url,
            timeout=self._settings.http_timeout,
        )
        self._client = DNSRecordClient(
            self._session,
            self._settings.api_base_url,
            timeout=self._settings.http_timeout,
        )
        self._store = AddressStore(self._settings.state_dir)
        self._records: Optional[List[RecordConfig]] = None

    @property
    def settings(self) -> AgentSettings:
        return self._settings

    @property
    def store(self) -> AddressStore:
        return self._store

    def _get_crypto(self) -> Optional[CryptoManager]:
        if not self._settings.master_key:
            return None
        return CryptoManager(self._settings.master_key)

    def load_config(self) -> List[RecordConfig]:
        try:
            raw_payload = self._config_path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise FileNotFoundError(
                f"Config file not found at {self._config_path!s}. "
                "Set DDNS_CONFIG_PATH or create config.json in the working directory."
            ) from exc

        try:
            data = json.loads(raw_payload)
        except json.JSONDecodeError as exc:
            raise ValueError(
                f"Config file {self._config_path!s} is not valid JSON: {exc}"
            ) from exc

        records = parse_records(data, self._get_crypto())
        if not records:
            logging.warning("Config file %s lists no records.", self._config_path)
        self._records = records
        return records

    def _get_records(self) -> List[RecordConfig]:
        if self._records is None:
            return self.load_config()
        return self._records

    def _push(self, record: RecordConfig, current_ip: str) -> bool:
        """Look up the record id, update it, then remember the address."""
        try:
            dns_record = self._client.lookup_record(record)
            self._client.update_record(record, current_ip, dns_record.id)
        except DNSProviderError as exc:
            logging.warning("DNS update failed for %s: %s", record.record_name, exc)
            return False

        try:
            self._store.write(record.record_name, current_ip)
        except OSError as exc:
            logging.error(
                "Updated %s but could not store the address: %s", record.record_name, exc
            )
            return False
        return True

    def try_update(self, record: RecordConfig) -> bool:
        """Update the record when the public IP differs from the stored one.

        Returns True when Cloudflare was updated and the new address stored.
        Every failure is logged and the record is retried on the next cycle.
        """
        current_ip = self._resolver.current_address().strip()
        if not current_ip:
            logging.warning(
                "Public IP unknown; skipping %s until the next cycle.", record.record_name
            )
            return False
        logging.info("Current public ipv4 address: %s", current_ip)

        stored_ip = self._store.read(record.record_name).strip()
        if stored_ip == current_ip:
            logging.info("Address for %s unchanged; nothing to do.", record.record_name)
            return False

        logging.info(
            "Address for %s changed: %s -> %s",
            record.record_name,
            stored_ip or "<none>",
            current_ip,
        )
        return self._push(record, current_ip)

    def resync(self, record: RecordConfig) -> bool:
        """Push the current public IP to Cloudflare regardless of the stored one.

        Keeps the provider side in line when the record was edited elsewhere
        or the state file no longer reflects what Cloudflare holds.
        """
        current_ip = self._resolver.current_address().strip()
        if not current_ip:
            logging.warning(
                "Public IP unknown; skipping resync of %s.", record.record_name
            )
            return False
        return self._push(record, current_ip)

    def run_update_cycle(self) -> None:
        for record in self._get_records():
            try:
                self.try_update(record)
            except Exception:  # noqa: BLE001 - log and continue other records
                logging.exception("Unexpected error updating %s", record.record_name)

    def run_poll_cycle(self) -> None:
        for record in self._get_records():
            try:
                self.resync(record)
            except Exception:  # noqa: BLE001 - log and continue other records
                logging.exception("Unexpected error resyncing %s", record.record_name)

    def close(self) -> None:
        self._session.close()
