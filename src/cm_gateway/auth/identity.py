"""Authenticated caller as seen by the engine."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Identity:
    user_id: int
    roles: list[str] = field(default_factory=list)
