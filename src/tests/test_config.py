from __future__ import annotations

import json

import pytest

from wallabag_notes import config
from wallabag_notes.datamodels import Settings
from wallabag_notes.errors import ConfigurationError
from wallabag_notes.main import main, parse_assignments


def test_missing_file_gives_defaults(tmp_path):
    settings = config.load_settings(str(tmp_path / "nope.json"))
    assert settings == Settings()
    assert settings.instance_url == "https://app.wallabag.it"
    assert settings.note_folder == "Wallabag"
    assert settings.only_starred is True
    assert settings.since == 0


def test_save_then_load(tmp_path):
    path = str(tmp_path / "nested" / "config.json")
    original = Settings(username="alice", since=1_700_000_000, access_token="tok")

    config.save_settings(original, path)

    assert config.load_settings(path) == original


def test_unknown_keys_are_ignored_and_values_normalised(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "instanceUrl": "legacy",
        "instance_url": "https://bag.example/",
        "note_folder": "  ",
        "only_starred": False,
    }))

    settings = config.load_settings(str(path))

    assert settings.instance_url == "https://bag.example"
    assert settings.note_folder == "Wallabag"
    assert settings.only_starred is False


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    assert config.load_settings(str(path)) == Settings()


def test_masked_settings_hide_secrets():
    shown = config.masked_settings(Settings(client_secret="s", password="p", username="alice"))
    assert shown["client_secret"] == "********"
    assert shown["password"] == "********"
    assert shown["access_token"] == ""
    assert shown["username"] == "alice"


def test_parse_assignments():
    assert parse_assignments(["username=alice", "only-starred=off", "password=a=b"]) == {
        "username": "alice",
        "only_starred": False,
        "password": "a=b",
    }
    with pytest.raises(ConfigurationError):
        parse_assignments(["username"])
    with pytest.raises(ConfigurationError):
        parse_assignments(["only_starred=maybe"])


def test_cli_set_and_show_config(tmp_path, capsys):
    path = str(tmp_path / "config.json")
    vault = str(tmp_path / "vault")

    assert main(["--config", path, "--vault", vault, "set", "username=alice", "password=pw", "only_starred=false"]) == 0
    stored = json.loads((tmp_path / "config.json").read_text())
    assert stored["username"] == "alice"
    assert stored["only_starred"] is False

    assert main(["--config", path, "--vault", vault, "show-config"]) == 0
    shown = json.loads(capsys.readouterr().out)
    assert shown["password"] == "********"


def test_cli_reset_zeroes_watermark(tmp_path):
    path = str(tmp_path / "config.json")
    config.save_settings(Settings(since=1_700_000_000, access_token="tok"), path)

    assert main(["--config", path, "--vault", str(tmp_path), "reset"]) == 0

    stored = config.load_settings(path)
    assert stored.since == 0
    assert stored.access_token == "tok"


def test_cli_rejects_unknown_setting(tmp_path):
    path = str(tmp_path / "config.json")
    assert main(["--config", path, "--vault", str(tmp_path), "set", "colour=blue"]) == 1
