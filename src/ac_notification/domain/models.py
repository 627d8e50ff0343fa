"""Notification payload: what a push transport receives."""

from dataclasses import dataclass, field


@dataclass
class NotificationMessage:
    title: str
    body: str
    # Push data payloads are string -> string only
    data: dict[str, str] = field(default_factory=dict)
