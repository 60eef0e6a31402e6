"""Configuration for the npm installation engine"""

import configparser
import os
import platform
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field

APP_NAME = "npminstall"

_home = os.path.expanduser("~")

xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(_home, ".config")

default_cfg = {
    "npm": {
        "executable": "npm",
        "production": "true",
        "loglevel": "error",
        "unsafe_perm": "true",
    }
}

if platform.system() == "Darwin":
    config_dir = Path(f"~/Library/Application Support/{APP_NAME}").expanduser()
else:
    config_dir = Path(os.path.join(xdg_config_home, APP_NAME))


def get_config_file() -> Path:
    return config_dir / f"{APP_NAME}.cfg"


class ConfigAccessor:
    """
    A dict-like accessor for configuration files.

    Missing files, sections and keys are tolerated; lookups fall back to the
    supplied default.

    Usage:
        config = ConfigAccessor()
        value = config.get('npm', 'executable', default='npm')
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Args:
            config_path: Path to the configuration file. If None, uses the default path.
        """
        if config_path is None:
            self.config_path = get_config_file()
        else:
            self.config_path = Path(config_path)

        self.config = configparser.ConfigParser()
        if self.config_path.exists():
            self.config.read(self.config_path)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        try:
            return self.config[section][key]
        except (KeyError, configparser.NoSectionError, configparser.NoOptionError):
            return default

    def getboolean(self, section: str, key: str, default: bool = False) -> bool:
        try:
            return self.config.getboolean(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default


class InstallSettings(BaseModel):
    """Settings shared by every installation process.

    Passed explicitly to the components that need them.
    """

    executable: str = "npm"
    unsafe_perm: bool = True
    production: bool = True
    loglevel: str = "error"
    inherit_environ: bool = True
    extra_env: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_config(cls, config: ConfigAccessor) -> "InstallSettings":
        """Build settings from the [npm] section of a config file."""
        defaults = default_cfg["npm"]
        return cls(
            executable=config.get("npm", "executable", defaults["executable"]),
            unsafe_perm=config.getboolean(
                "npm", "unsafe_perm", defaults["unsafe_perm"] == "true"
            ),
            production=config.getboolean(
                "npm", "production", defaults["production"] == "true"
            ),
            loglevel=config.get("npm", "loglevel", defaults["loglevel"]),
        )

    def fixed_env(self) -> Dict[str, str]:
        """The variables forced onto every npm invocation."""
        env = dict(self.extra_env)
        env["NPM_CONFIG_PRODUCTION"] = "true" if self.production else "false"
        env["NPM_CONFIG_LOGLEVEL"] = self.loglevel
        return env

    def process_env(self, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Environment for an npm invocation.

        Args:
            base: Starting environment; defaults to os.environ when
                  inherit_environ is set, otherwise empty.
        """
        if base is None:
            base = os.environ if self.inherit_environ else {}
        env = dict(base)
        env.update(self.fixed_env())
        return env
