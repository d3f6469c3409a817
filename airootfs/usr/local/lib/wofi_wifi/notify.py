"""wofi-wifi - Desktop notifications and detached launches."""

import logging
import subprocess
from typing import List

import gi
gi.require_version('Notify', '0.7')
from gi.repository import GLib, Notify

from . import __app_id__

log = logging.getLogger(__name__)

# Last-resort editor for networks nmcli could not join
CONNECTION_EDITOR = ['nm-connection-editor']

NOTIFY_ICON = 'network-wireless'


def notify(title: str, body: str) -> None:
    """Show a desktop notification without waiting for it."""
    log.info("%s: %s", title, body)
    try:
        if not Notify.is_initted():
            Notify.init(__app_id__)
        Notify.Notification.new(title, body, NOTIFY_ICON).show()
    except GLib.Error as e:
        log.warning("Could not show notification: %s", e)


def launch_detached(argv: List[str]) -> None:
    """Start a program in its own session and return immediately."""
    try:
        subprocess.Popen(
            argv,
            start_new_session=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        log.error("Failed to launch %s: %s", argv[0], e)


def launch_connection_editor() -> None:
    """Open nm-connection-editor for manual configuration."""
    launch_detached(CONNECTION_EDITOR)
