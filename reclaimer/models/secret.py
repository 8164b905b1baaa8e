"""Secret model."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Dict

ACCESS_KEY_ID_FIELD = "aws_access_key_id"
SECRET_ACCESS_KEY_FIELD = "aws_secret_access_key"


@dataclass
class Secret:
    """Namespaced credential object with raw byte values."""

    name: str
    namespace: str
    data: Dict[str, bytes] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert secret to dictionary, base64 encoding values."""
        return {
            "name": self.name,
            "namespace": self.namespace,
            "data": {key: base64.b64encode(value).decode("ascii") for key, value in self.data.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Secret":
        return cls(
            name=data["name"],
            namespace=data["namespace"],
            data={key: base64.b64decode(value) for key, value in (data.get("data") or {}).items()},
        )
