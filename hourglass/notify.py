"""Desktop notifications. Delivery is best-effort and never fails the caller."""

from __future__ import annotations

import logging

from plyer import notification

log = logging.getLogger(__name__)

APP_NAME = "hourglass"


def send_notification(title: str, message: str) -> None:
    try:
        notification.notify(title=title, message=message, app_name=APP_NAME, timeout=10)
    except Exception:
        log.debug("Could not deliver notification %r.", message, exc_info=True)
