from typing import Literal

from pydantic import BaseModel


class NotificationAction(BaseModel):
    label: str
    href: str


class Notification(BaseModel):
    """Payload for the client's toast surface."""

    kind: Literal["success", "error"]
    title: str
    description: str
    action: NotificationAction | None = None
