import json

from lpmanager.config import Settings, load_settings, save_settings

def test_defaults_when_missing(tmp_path):
    settings = load_settings(str(tmp_path / "missing.json"))
    assert settings == Settings()
    assert settings.max_drivers == 10

def test_env_override(tmp_path, monkeypatch):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"lpinfo": "/usr/sbin/lpinfo"}))
    monkeypatch.setenv("LPMANAGER_CONFIG", str(path))
    assert load_settings().lpinfo == "/usr/sbin/lpinfo"

def test_unknown_keys_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"theme": "light", "colour": "blue"}))
    settings = load_settings(str(path))
    assert settings.theme == "light"

def test_broken_json_gives_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    assert load_settings(str(path)) == Settings()

def test_save_merges(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"use_sudo": False, "extra": 1}))
    settings = save_settings({"theme": "light"}, str(path))
    assert settings.theme == "light"
    assert settings.use_sudo is False
    assert json.loads(path.read_text()) == {"use_sudo": False, "extra": 1, "theme": "light"}

def test_admin_command():
    assert Settings().admin_command("-x", "HP") == ["sudo", "lpadmin", "-x", "HP"]
    assert Settings(use_sudo=False).admin_command("-x", "HP") == ["lpadmin", "-x", "HP"]
