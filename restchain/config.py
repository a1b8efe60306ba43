"""
Process-wide defaults for a backend.

Every backend module owns one RestChainConfig named ``config``. Specifications
copy it when they are created, so changing the config never affects a
specification that already exists. Resetting it is the caller's job, normally
in test teardown.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

DEFAULT_URI = "http://localhost"
DEFAULT_PORT = 8080
DEFAULT_PATH = ""


def _env_port() -> int:
    value = os.environ.get("RESTCHAIN_PORT")
    if not value:
        return DEFAULT_PORT
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"RESTCHAIN_PORT must be an integer, got {value!r}")


@dataclass
class RestChainConfig:
    """Defaults applied to every new request specification of a backend."""
    base_uri: str = field(default_factory=lambda: os.environ.get("RESTCHAIN_BASE_URI", DEFAULT_URI))
    port: Optional[int] = field(default_factory=_env_port)
    base_path: str = field(default_factory=lambda: os.environ.get("RESTCHAIN_BASE_PATH", DEFAULT_PATH))
    default_headers: Dict[str, str] = field(default_factory=dict)
    filters: List[Any] = field(default_factory=list)
    timeout: Optional[float] = None
    url_encoding_enabled: bool = True
    log_if_validation_fails: bool = False
    app: Optional[Any] = None

    def reset(self) -> None:
        """Restore every setting to its default."""
        defaults = type(self)()
        for name in self.__dataclass_fields__:
            setattr(self, name, getattr(defaults, name))

    def snapshot(self) -> "RestChainConfig":
        """Return an independent copy; filters and the application are shared, not copied."""
        return replace(self, default_headers=dict(self.default_headers), filters=list(self.filters))

    def enable_logging_of_request_and_response_if_validation_fails(self) -> None:
        self.log_if_validation_fails = True


@dataclass
class InProcessConfig(RestChainConfig):
    """Config for backends that dispatch into an application instead of a socket."""
    base_uri: str = "http://testserver"
    port: Optional[int] = None
    base_path: str = ""
