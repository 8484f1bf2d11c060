"""Tests for command-line argument handling in the entry point."""

import yaml

from crusty_agent.core.credential_store import CredentialStore
from crusty_agent.main import main, parse_args


def write_config(tmp_path):
    path = tmp_path / "crusty.yaml"
    path.write_text(yaml.dump({
        "server": {"host": "127.0.0.1", "port": 8123, "static_dir": str(tmp_path / "public")},
        "auth": {"file_path": str(tmp_path / "auth.json"), "bcrypt_rounds": 4},
    }))
    return str(path)


def test_parse_args_flags():
    args = parse_args(["--no-gui", "--daemon", "-p", "4000"])
    assert args.no_gui and args.daemon
    assert args.port == 4000
    assert args.command is None

    assert parse_args(["status"]).command == "status"


def test_status_command(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("CRUSTY_PORT", raising=False)
    monkeypatch.delenv("CRUSTY_AUTH_FILE", raising=False)
    config_path = write_config(tmp_path)

    assert main(["-c", config_path, "status"]) == 0

    out = capsys.readouterr().out
    assert "Status: Stopped" in out
    assert "Port: 8123" in out
    assert "Registered Users: 0" in out
    assert (tmp_path / "auth.json").exists()


def test_daemon_requires_setup(tmp_path, monkeypatch):
    monkeypatch.delenv("CRUSTY_AUTH_FILE", raising=False)
    config_path = write_config(tmp_path)

    assert main(["-c", config_path, "daemon"]) == 1


def test_stop_command(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("CRUSTY_AUTH_FILE", raising=False)
    config_path = write_config(tmp_path)
    CredentialStore(str(tmp_path / "auth.json"), bcrypt_rounds=4).register(
        "alice", "password1", "a@x.com", "tok12345",
    )

    assert main(["-c", config_path, "stop"]) == 0
    assert "No server is running in this process." in capsys.readouterr().out


def test_out_of_range_port_exits_cleanly(tmp_path, monkeypatch):
    monkeypatch.delenv("CRUSTY_AUTH_FILE", raising=False)
    monkeypatch.setenv("CRUSTY_PORT", "70000")
    config_path = write_config(tmp_path)

    assert main(["-c", config_path, "status"]) == 1


def test_port_zero_flag_is_honoured(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("CRUSTY_PORT", raising=False)
    monkeypatch.delenv("CRUSTY_AUTH_FILE", raising=False)
    config_path = write_config(tmp_path)

    assert main(["-c", config_path, "-p", "0", "status"]) == 0
    assert "Port: 0" in capsys.readouterr().out
