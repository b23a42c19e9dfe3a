"""
Maintenance reminder notifications.

After each recomputation the store hands the summary to a
NotificationTrigger. When any service is overdue or due soon, one
notification is built and passed to a sender, at most once per rate-limit
window. The time of the last emission lives in a timestamp store so the
window survives restarts.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, List, Optional, Union

from .loader import load_last_notified, save_last_notified
from .service_log import as_utc
from .service_status import ServiceStatus
from .status import Status

logger = logging.getLogger(__name__)

NOTIFY_INTERVAL = timedelta(hours=12)


class NotificationError(Exception):
    """Raised by a sender when a notification could not be delivered."""


@dataclass
class Notification:
    title: str
    body: str


def build_notification(statuses: List[ServiceStatus]) -> Optional[Notification]:
    """
    Build a reminder for the given (sorted) statuses.

    Returns None when nothing is overdue or due soon.
    """
    critical = [s for s in statuses if s.is_due]
    if not critical:
        return None

    overdue = sum(1 for s in critical if s.status == Status.DANGER)
    if overdue:
        title = f"Attention! {overdue} overdue service{'s' if overdue > 1 else ''}"
    else:
        title = "Maintenance reminder"

    body = f"{critical[0].name} needs attention."
    if len(critical) > 1:
        body += f" +{len(critical) - 1} more pending."
    return Notification(title=title, body=body)


# =============================================================================
# Timestamp stores
# =============================================================================


class MemoryTimestampStore:
    """Keeps the last-sent time in memory."""

    def __init__(self, last_sent: Optional[datetime] = None):
        self.last_sent = last_sent

    def get(self) -> Optional[datetime]:
        return self.last_sent

    def set(self, when: datetime) -> None:
        self.last_sent = when


class YamlTimestampStore:
    """Keeps the last-sent time in the vehicle YAML file (state.lastNotifiedAt)."""

    def __init__(self, filename: Union[str, Path]):
        self.filename = filename

    def get(self) -> Optional[datetime]:
        return load_last_notified(self.filename)

    def set(self, when: datetime) -> None:
        save_last_notified(self.filename, when)


# =============================================================================
# Senders
# =============================================================================


class ConsoleSender:
    """Print notifications to stdout."""

    def __call__(self, notification: Notification) -> None:
        print(f"[{notification.title}] {notification.body}")


class LogSender:
    """Emit notifications through the logging system."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def __call__(self, notification: Notification) -> None:
        self.log.warning("%s: %s", notification.title, notification.body)


# =============================================================================
# Trigger
# =============================================================================


class NotificationTrigger:
    """Send at most one reminder per interval when services need attention."""

    def __init__(
        self,
        sender: Callable[[Notification], None],
        timestamp_store=None,
        interval: timedelta = NOTIFY_INTERVAL,
    ):
        self.sender = sender
        self.timestamp_store = timestamp_store or MemoryTimestampStore()
        self.interval = interval

    def allows(self, now: datetime) -> bool:
        """Check whether the rate-limit window has elapsed."""
        last = self.timestamp_store.get()
        if last is None:
            return True
        return now - last >= self.interval

    def maybe_notify(
        self, statuses: List[ServiceStatus], now: Optional[datetime] = None
    ) -> Optional[Notification]:
        """
        Emit a reminder if one is warranted. Returns what was emitted.

        Delivery and timestamp failures are logged, never raised.
        """
        notification = build_notification(statuses)
        if notification is None:
            return None

        now = as_utc(now) if now else datetime.now(timezone.utc)
        if not self.allows(now):
            logger.debug("Reminder suppressed by rate limit")
            return None

        try:
            self.sender(notification)
            logger.info("Sent reminder: %s", notification.title)
        except NotificationError as e:
            logger.warning("Could not deliver reminder: %s", e)
        except Exception:
            logger.warning("Reminder sender failed", exc_info=True)

        try:
            self.timestamp_store.set(now)
        except OSError as e:
            logger.warning("Could not record reminder time: %s", e)
        return notification
