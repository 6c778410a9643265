from pathlib import Path

import pytest

from shared_lib.schema import AgentSettings, RecordConfig, parse_records
from shared_lib.security import CryptoManager


def _entry(**overrides):
    entry = {
        "authEmail": "owner@example.com",
        "authKey": "global-key",
        "zoneIdentifier": "zone-123",
        "recordName": "home.example.com",
        "proxy": True,
    }
    entry.update(overrides)
    return entry


def test_parse_records_maps_json_keys():
    (record,) = parse_records([_entry()])

    assert isinstance(record, RecordConfig)
    assert record.auth_email == "owner@example.com"
    assert record.auth_key == "global-key"
    assert record.zone_identifier == "zone-123"
    assert record.record_name == "home.example.com"
    assert record.proxy is True


def test_proxy_defaults_to_false():
    entry = _entry()
    del entry["proxy"]

    assert parse_records([entry])[0].proxy is False


def test_repr_hides_credentials():
    (record,) = parse_records([_entry()])

    assert "global-key" not in repr(record)


@pytest.mark.parametrize(
    "payload",
    [
        {"records": []},
        [_entry(recordName="")],
        [_entry(unexpected="x")],
        [_entry(), _entry()],
        [_entry(encryptedAuthKey="gAAAA")],
    ],
)
def test_parse_records_rejects(payload):
    with pytest.raises(ValueError):
        parse_records(payload)


def test_missing_auth_key_rejected():
    entry = _entry()
    del entry["authKey"]

    with pytest.raises(ValueError, match="exactly one"):
        parse_records([entry])


def test_encrypted_key_requires_master_key():
    entry = _entry()
    del entry["authKey"]
    entry["encryptedAuthKey"] = "gAAAA"

    with pytest.raises(ValueError, match="DDNS_MASTER_KEY"):
        parse_records([entry])


def test_encrypted_key_with_wrong_master_key():
    cipher = CryptoManager(CryptoManager.generate_key()).encrypt_str("secret")
    entry = _entry()
    del entry["authKey"]
    entry["encryptedAuthKey"] = cipher

    with pytest.raises(ValueError, match="cannot be decrypted"):
        parse_records([entry], CryptoManager(CryptoManager.generate_key()))


def test_settings_defaults():
    settings = AgentSettings.from_env({})

    assert settings.config_path == Path("config.json")
    assert settings.state_dir == Path(".")
    assert settings.check_ip_url == "https://api.ipify.org/"
    assert settings.api_base_url == "https://api.cloudflare.com/client/v4/"
    assert settings.update_interval == 10
    assert settings.poll_interval == 300
    assert settings.master_key is None


def test_settings_from_env():
    settings = AgentSettings.from_env(
        {
            "DDNS_CONFIG_PATH": "/etc/ddns/config.json",
            "DDNS_STATE_DIR": "/var/lib/ddns",
            "DDNS_UPDATE_INTERVAL": "30",
            "DDNS_POLL_INTERVAL": "600",
            "DDNS_LOG_LEVEL": "DEBUG",
        }
    )

    assert settings.config_path == Path("/etc/ddns/config.json")
    assert settings.state_dir == Path("/var/lib/ddns")
    assert settings.update_interval == 30
    assert settings.poll_interval == 600
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "environ",
    [
        {"DDNS_UPDATE_INTERVAL": "0"},
        {"DDNS_POLL_INTERVAL": "-5"},
        {"DDNS_HTTP_TIMEOUT": "soon"},
        {"DDNS_CHECK_IP_URL": "http://api.ipify.org/"},
        {"DDNS_API_BASE_URL": "https://127.0.0.1/client/v4/"},
    ],
)
def test_settings_rejects(environ):
    with pytest.raises(ValueError):
        AgentSettings.from_env(environ)
