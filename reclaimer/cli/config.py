"""CLI configuration.

Loaded from ~/.reclaimer/config.yaml, then overridden by RECLAIMER_* environment variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..reclaim.finalizer import ACCOUNT_NAMESPACE

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".reclaimer" / "config.yaml"

ENV_OVERRIDES = {
    "RECLAIMER_STORE_PATH": "store_path",
    "RECLAIMER_AUDIT_PATH": "audit_path",
    "RECLAIMER_ACCOUNT_NAMESPACE": "account_namespace",
    "RECLAIMER_LOG_LEVEL": "log_level",
}


@dataclass
class Config:
    """Reclaimer configuration.

    Attributes:
        store_path: Root of the YAML entity store (None for the default location)
        audit_path: Directory for reclamation audit logs (None for the default location)
        account_namespace: Namespace holding Accounts and their Secrets
        log_level: Default log level
    """

    store_path: Optional[str] = None
    audit_path: Optional[str] = None
    account_namespace: str = ACCOUNT_NAMESPACE
    log_level: str = "INFO"

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """Load configuration from file and environment.

        Args:
            path: Config file to read (default: ~/.reclaimer/config.yaml)

        Returns:
            Config with file values applied, then environment overrides
        """
        config = cls()
        config_path = path or DEFAULT_CONFIG_PATH

        if config_path.exists():
            with open(config_path, "r") as f:
                data: Dict[str, Any] = yaml.safe_load(f) or {}
            for key, value in data.items():
                if hasattr(config, key):
                    setattr(config, key, value)
                else:
                    logger.warning(f"Ignoring unknown config key: {key}")

        for env_var, attr in ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if value:
                setattr(config, attr, value)

        return config
