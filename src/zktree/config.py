"""Runtime settings resolved from CLI options and environment variables."""

from __future__ import annotations

from dataclasses import dataclass

from zktree.models import ROLE_ADMIN, ROLE_USER, ROLES, Role

DEFAULT_HOSTS = "localhost:2181"
DEFAULT_TIMEOUT = 2.0
DEFAULT_CONNECT_ATTEMPTS = 5
CONNECT_BACKOFF = 0.03

ENV_PREFIX = "ZKTREE"


@dataclass(frozen=True)
class Settings:
    """Connection and access settings shared by every CLI command."""

    hosts: str = DEFAULT_HOSTS
    timeout: float = DEFAULT_TIMEOUT           # ZooKeeper session timeout, seconds
    role: Role = ROLE_USER
    connect_attempts: int = DEFAULT_CONNECT_ATTEMPTS

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Invalid role {self.role!r}; expected one of {ROLES}")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.connect_attempts < 1:
            raise ValueError("connect_attempts must be at least 1")

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
