from __future__ import annotations

from dataclasses import asdict, field
from datetime import datetime, timezone
from typing import Optional

from pydantic.dataclasses import dataclass


@dataclass
class DomainNotificationSettings:
    email: bool = True
    in_app: bool = True
    course_updates: bool = True
    assignment_updates: bool = True
    discussion_updates: bool = True
    payment_updates: bool = True
    account_updates: bool = True
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class DomainNotificationSettingsUpdate:
    email: Optional[bool] = None
    in_app: Optional[bool] = None
    course_updates: Optional[bool] = None
    assignment_updates: Optional[bool] = None
    discussion_updates: Optional[bool] = None
    payment_updates: Optional[bool] = None
    account_updates: Optional[bool] = None

    def changes(self) -> dict[str, bool]:
        return {k: v for k, v in asdict(self).items() if v is not None}
