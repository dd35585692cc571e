import json
import logging
import ipaddress
from pathlib import Path
from typing import Any, Dict, Optional, Union

import kubernix.settings as default_settings
from kubernix.errors import IoFailure

log = logging.getLogger(__name__)

_LEVEL_MAP = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "off": logging.CRITICAL + 10,
}


class Config:
    """
    The runtime configuration of a Kubernix cluster.

    Values follow a clear precedence:
    1. Base values from `settings.py`.
    2. Overrides from the environment or `.env` file (handled in settings.py).
    3. Explicit constructor arguments, or the values persisted in
       `kubernix.json` once `update_from_file` is called.
    """

    def __init__(
        self,
        root: Optional[Union[str, Path]] = None,
        log_level: Optional[str] = None,
        cidr: Optional[str] = None,
    ) -> None:
        self.root = Path(root) if root is not None else default_settings.ROOT_DIR
        self.log_level = self._validate_log_level(log_level or default_settings.LOG_LEVEL)
        self.cidr = self._validate_cidr(cidr or default_settings.CLUSTER_CIDR)

    @staticmethod
    def _validate_log_level(level: str) -> str:
        level = level.lower()
        if level not in default_settings.LOG_LEVELS:
            raise ValueError(
                f"Invalid log level '{level}'. Expected one of: {', '.join(default_settings.LOG_LEVELS)}"
            )
        return level

    @staticmethod
    def _validate_cidr(cidr: str) -> str:
        try:
            return str(ipaddress.IPv4Network(cidr))
        except ValueError as e:
            raise ValueError(f"Invalid cluster CIDR '{cidr}': {e}") from e

    @property
    def log_dir(self) -> Path:
        """The shared directory receiving one log file per program."""
        return self.root / default_settings.LOG_DIR_NAME

    @property
    def config_file(self) -> Path:
        return self.root / default_settings.CONFIG_FILE_NAME

    @property
    def pid_file(self) -> Path:
        return self.root / default_settings.PID_FILE_NAME

    @property
    def logging_level(self) -> int:
        """The configured verbosity as a `logging` level."""
        return _LEVEL_MAP[self.log_level]

    def canonicalize_root(self) -> None:
        """Creates the root directory if needed and makes its path absolute."""
        self._create_root_dir()
        self.root = self.root.resolve()

    def to_dict(self) -> Dict[str, Any]:
        return {"root": str(self.root), "log-level": self.log_level, "cidr": self.cidr}

    def to_file(self) -> None:
        """Writes the current configuration into the root directory."""
        self._create_root_dir()
        try:
            self.config_file.write_text(json.dumps(self.to_dict(), indent=4))
        except OSError as e:
            raise IoFailure("kubernix", f"Unable to write configuration to file: {e}") from e
        log.debug(f"Configuration written to {self.config_file}")

    def update_from_file(self) -> None:
        """
        Replaces the current values with the ones persisted in the root directory.

        :raises IoFailure: If the file is missing, unreadable or malformed.
        """
        path = self.config_file
        try:
            data = json.loads(path.read_text())
        except OSError as e:
            raise IoFailure("kubernix", f"Unable to read expected configuration file '{path}': {e}") from e
        except json.JSONDecodeError as e:
            raise IoFailure("kubernix", f"Unable to load config file '{path}': {e}") from e

        if not isinstance(data, dict):
            raise IoFailure("kubernix", f"Unable to load config file '{path}': not a JSON object")

        try:
            self.root = Path(data["root"])
            self.log_level = self._validate_log_level(data["log-level"])
            self.cidr = self._validate_cidr(data["cidr"])
        except (KeyError, ValueError) as e:
            raise IoFailure("kubernix", f"Unable to load config file '{path}': {e}") from e
        log.info(f"Loaded configuration from {path}")

    def _create_root_dir(self) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IoFailure("kubernix", f"Unable to create root directory: {e}") from e
