import json
import logging
import os
from dataclasses import dataclass, fields
from typing import Optional

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.json"
CONFIG_ENV = "LPMANAGER_CONFIG"


@dataclass
class Settings:
    # CUPS command names, overridable for non-standard installs
    lpstat: str = "lpstat"
    lpinfo: str = "lpinfo"
    lpadmin: str = "lpadmin"
    lp: str = "lp"
    cancel: str = "cancel"
    use_sudo: bool = True
    max_drivers: int = 10
    theme: str = "dark"
    log_file: Optional[str] = None

    def admin_command(self, *args) -> list[str]:
        """Builds an lpadmin invocation, prefixed with sudo if configured."""
        cmd = [self.lpadmin, *args]
        if self.use_sudo:
            cmd.insert(0, "sudo")
        return cmd


def config_path(path=None) -> str:
    return path or os.environ.get(CONFIG_ENV, CONFIG_FILE)


def load_settings(path=None) -> Settings:
    """Loads settings from the JSON config file. Missing or broken files give defaults."""
    path = config_path(path)
    if not os.path.exists(path):
        return Settings()

    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Error loading config %s: %s", path, e)
        return Settings()

    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a JSON object", path)
        return Settings()

    known = {f.name for f in fields(Settings)}
    return Settings(**{k: v for k, v in data.items() if k in known})


def save_settings(updates: dict, path=None) -> Settings:
    path = config_path(path)

    # Load existing to preserve other keys if any
    current = {}
    if os.path.exists(path):
        try:
            with open(path, "r") as f:
                current = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Overwriting unreadable config %s: %s", path, e)
            current = {}

    current.update(updates)
    with open(path, "w") as f:
        json.dump(current, f, indent=4)

    return load_settings(path)
