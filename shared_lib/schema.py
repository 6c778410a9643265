"""Shared configuration and Cloudflare payload schemas."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Iterable, List, Literal, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, Field

try:
    from pydantic import ConfigDict
except ImportError:  # pragma: no cover - Pydantic v1 fallback
    ConfigDict = None  # type: ignore[assignment]

from shared_lib.security import CryptoManager
from shared_lib.url_validation import validate_url

DEFAULT_CHECK_IP_URL = "https://api.ipify.org/"
DEFAULT_API_BASE_URL = "https://api.cloudflare.com/client/v4/"
RECORD_TTL = 120

M = TypeVar("M", bound=BaseModel)


def validate_model(model: Type[M], data: Any) -> M:
    if hasattr(model, "model_validate"):
        return model.model_validate(data)
    return model.parse_obj(data)


def dump_model(model: BaseModel) -> dict:
    if hasattr(model, "model_dump"):
        return model.model_dump()
    return model.dict()


class RecordConfig(BaseModel):
    """One managed DNS record, as written in config.json."""

    auth_email: str = Field(alias="authEmail", min_length=1)
    auth_key: Optional[str] = Field(default=None, alias="authKey")
    encrypted_auth_key: Optional[str] = Field(default=None, alias="encryptedAuthKey")
    zone_identifier: str = Field(alias="zoneIdentifier", min_length=1)
    record_name: str = Field(alias="recordName", min_length=1)
    proxy: bool = False

    if ConfigDict is not None:
        model_config = ConfigDict(extra="forbid", populate_by_name=True)
    else:
        class Config:
            extra = "forbid"
            allow_population_by_field_name = True

    def __repr__(self) -> str:
        return f"<RecordConfig name={self.record_name!r} zone={self.zone_identifier!r}>"


class DNSRecord(BaseModel):
    """Subset of a Cloudflare DNS record object that the agent reads."""

    id: str
    content: str
    name: Optional[str] = None
    type: Optional[str] = None


class DNSUpdateRequest(BaseModel):
    id: str
    type: Literal["A"] = "A"
    proxied: bool
    name: str
    content: str
    ttl: Literal[120] = RECORD_TTL

    if ConfigDict is not None:
        model_config = ConfigDict(extra="forbid")
    else:
        class Config:
            extra = "forbid"


class AgentSettings(BaseModel):
    """Process settings, read from ``DDNS_*`` environment variables."""

    config_path: Path = Path("config.json")
    state_dir: Path = Path(".")
    check_ip_url: str = DEFAULT_CHECK_IP_URL
    api_base_url: str = DEFAULT_API_BASE_URL
    update_interval: float = Field(default=10, gt=0)
    poll_interval: float = Field(default=300, gt=0)
    http_timeout: float = Field(default=10, gt=0)
    shutdown_timeout: float = Field(default=10, gt=0)
    master_key: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AgentSettings":
        env = os.environ if environ is None else environ
        names = {
            "config_path": "DDNS_CONFIG_PATH",
            "state_dir": "DDNS_STATE_DIR",
            "check_ip_url": "DDNS_CHECK_IP_URL",
            "api_base_url": "DDNS_API_BASE_URL",
            "update_interval": "DDNS_UPDATE_INTERVAL",
            "poll_interval": "DDNS_POLL_INTERVAL",
            "http_timeout": "DDNS_HTTP_TIMEOUT",
            "shutdown_timeout": "DDNS_SHUTDOWN_TIMEOUT",
            "master_key": "DDNS_MASTER_KEY",
            "log_level": "DDNS_LOG_LEVEL",
        }
        data = {field: env[var] for field, var in names.items() if env.get(var)}
        settings = validate_model(cls, data)
        validate_url(settings.check_ip_url, setting="DDNS_CHECK_IP_URL")
        validate_url(settings.api_base_url, setting="DDNS_API_BASE_URL")
        return settings


def parse_records(
    entries: Any,
    crypto: Optional[CryptoManager] = None,
) -> List[RecordConfig]:
    """Validate the decoded config.json payload.

    The payload must be a JSON array of record objects. Each entry needs
    exactly one of ``authKey`` or ``encryptedAuthKey``; encrypted keys are
    decrypted here with ``crypto``. Record names must be unique because they
    double as the lookup key at Cloudflare and as the state file name.

    Raises ValueError on any violation.
    """
    if not isinstance(entries, list):
        raise ValueError("config must be a JSON array of record objects")

    records: List[RecordConfig] = []
    for index, entry in enumerate(entries):
        record = validate_model(RecordConfig, entry)
        if (record.auth_key is None) == (record.encrypted_auth_key is None):
            raise ValueError(
                f"entry {index} ({record.record_name}): set exactly one of "
                "authKey or encryptedAuthKey"
            )
        if record.encrypted_auth_key is not None:
            if crypto is None:
                raise ValueError(
                    f"entry {index} ({record.record_name}): encryptedAuthKey "
                    "requires DDNS_MASTER_KEY"
                )
            record.auth_key = crypto.decrypt_str(record.encrypted_auth_key)
        records.append(record)

    _check_unique(record.record_name for record in records)
    return records


def _check_unique(names: Iterable[str]) -> None:
    seen = set()
    for name in names:
        if name in seen:
            raise ValueError(f"duplicate recordName in config: {name}")
        seen.add(name)
