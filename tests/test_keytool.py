import io

from agent import keytool
from shared_lib.security import CryptoManager


def test_genkey_prints_usable_key(capsys):
    assert keytool.main(["genkey"]) == 0

    key = capsys.readouterr().out.strip()
    crypto = CryptoManager(key)
    assert crypto.decrypt_str(crypto.encrypt_str("x")) == "x"


def test_encrypt_from_stdin_round_trips(monkeypatch, capsys):
    key = CryptoManager.generate_key()
    monkeypatch.setenv("DDNS_MASTER_KEY", key)
    monkeypatch.setattr("sys.stdin", io.StringIO("global-key\n"))

    assert keytool.main(["encrypt", "--stdin"]) == 0

    token = capsys.readouterr().out.strip()
    assert CryptoManager(key).decrypt_str(token) == "global-key"


def test_encrypt_prompts_when_not_reading_stdin(monkeypatch, capsys):
    key = CryptoManager.generate_key()
    monkeypatch.setenv("DDNS_MASTER_KEY", key)
    monkeypatch.setattr(keytool.getpass, "getpass", lambda prompt: "prompted-key")

    assert keytool.main(["encrypt"]) == 0

    assert CryptoManager(key).decrypt_str(capsys.readouterr().out.strip()) == "prompted-key"


def test_encrypt_requires_master_key(monkeypatch, capsys):
    monkeypatch.delenv("DDNS_MASTER_KEY", raising=False)

    assert keytool.main(["encrypt", "--stdin"]) == 1
    assert "DDNS_MASTER_KEY" in capsys.readouterr().err


def test_encrypt_rejects_invalid_master_key(monkeypatch, capsys):
    monkeypatch.setenv("DDNS_MASTER_KEY", "not-a-fernet-key")

    assert keytool.main(["encrypt", "--stdin"]) == 1
    assert "not a valid Fernet key" in capsys.readouterr().err


def test_encrypt_rejects_empty_key(monkeypatch, capsys):
    monkeypatch.setenv("DDNS_MASTER_KEY", CryptoManager.generate_key())
    monkeypatch.setattr("sys.stdin", io.StringIO("\n"))

    assert keytool.main(["encrypt", "--stdin"]) == 1
    assert "must not be empty" in capsys.readouterr().err
