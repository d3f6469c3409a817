"""wofi-wifi - Connection orchestrator.

One run shows the main menu once and carries out the chosen action:
toggle the radio, disconnect, join a network typed by hand, or join a
network picked from the scan list.  Every prompt may be cancelled, which
ends the run without touching NetworkManager.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from . import backend
from .backend import ExternalToolError
from .config import Configuration
from .menu import show_menu, show_prompt
from .networks import NetworkOptions, build_network_options
from .notify import notify, launch_connection_editor

log = logging.getLogger(__name__)


# --- Main menu entries ---
TOGGLE_ON = 'Toggle Wi-Fi On'
TOGGLE_OFF = 'Toggle Wi-Fi Off'
MANUAL_ENTRY = 'Enter SSID Manually'
DISCONNECT = 'Disconnect'

# --- Notification titles ---
TITLE = 'Wi-Fi'
ERROR_TITLE = 'Wi-Fi Error'


class WifiMenu:
    """Drives one menu -> action cycle."""

    def __init__(self, config: Configuration):
        self.config = config
        self.iface = ''
        self.current_ssid = ''
        self.radio_state = ''
        self.options = NetworkOptions()

    # ------------------------------------------------------------------ #
    # Entry point
    # ------------------------------------------------------------------ #

    def run(self) -> int:
        """Show the main menu and perform the selected action.

        Returns:
            0 when the cycle completed or was cancelled, 1 on failure.
        """
        try:
            self.iface = backend.detect_interface()
        except ExternalToolError as e:
            log.error("Error detecting Wi-Fi interface: %s", e)
            notify(ERROR_TITLE, 'Failed to detect Wi-Fi interface.')
            return 1
        if not self.iface:
            log.error("No Wi-Fi interface found by nmcli")
            notify(ERROR_TITLE, 'No Wi-Fi interface found! Check nmcli device status.')
            return 1
        log.debug("Detected Wi-Fi interface: %s", self.iface)

        try:
            self.refresh()
            selection = show_menu(self.main_menu_options(), self.config)
            if not selection:
                log.info("Main menu cancelled")
                return 0
            self.dispatch(selection)
        except ExternalToolError as e:
            log.exception("Network command failed")
            notify(ERROR_TITLE, f'Command failed: {e}')
            return 1
        except Exception as e:
            log.exception("Unhandled error")
            notify(ERROR_TITLE, f'An unhandled error occurred: {e}')
            return 1
        return 0

    def refresh(self) -> None:
        """Query SSID, radio state and scan results concurrently."""
        with ThreadPoolExecutor(max_workers=3) as pool:
            ssid_job = pool.submit(backend.get_current_ssid)
            radio_job = pool.submit(backend.get_radio_state)
            scan_job = pool.submit(backend.scan_networks,
                                   self.config.fields, self.config.rescan)
            self.current_ssid = ssid_job.result()
            self.radio_state = radio_job.result()
            networks = scan_job.result()
        self.options = build_network_options(networks, self.current_ssid)

    @property
    def radio_enabled(self) -> bool:
        return 'enabled' in self.radio_state

    def main_menu_options(self) -> List[str]:
        toggle = TOGGLE_OFF if self.radio_enabled else TOGGLE_ON
        return [toggle, MANUAL_ENTRY, DISCONNECT] + self.options.labels

    def dispatch(self, selection: str) -> None:
        """Route a main menu selection to its action."""
        if selection == TOGGLE_ON:
            self.toggle_radio(True)
        elif selection == TOGGLE_OFF:
            self.toggle_radio(False)
        elif selection == DISCONNECT:
            self.disconnect()
        elif selection == MANUAL_ENTRY:
            self.manual_entry()
        else:
            self.pick_network(selection)

    # ------------------------------------------------------------------ #
    # Actions
    # ------------------------------------------------------------------ #

    def toggle_radio(self, enable: bool) -> None:
        backend.set_radio(enable)
        notify(TITLE, 'Wi-Fi enabled.' if enable else 'Wi-Fi disabled.')

    def disconnect(self) -> None:
        if not self.current_ssid:
            notify(TITLE, 'Not connected to any network.')
            return
        backend.disconnect_device(self.iface)
        notify(TITLE, f'Disconnected from {self.current_ssid}.')

    def manual_entry(self) -> None:
        """Join a network whose SSID the user types in."""
        ssid = show_prompt('Enter SSID:', self.config)
        if not ssid:
            notify(TITLE, 'Manual SSID entry cancelled.')
            return

        net = self.options.networks.get(ssid)
        if net is not None and net.is_open:
            self.attempt_connection(ssid)
            return

        password = show_prompt(f'Enter password for {ssid}:', self.config, password=True)
        if not password:
            notify(TITLE, 'Password entry cancelled for manual SSID.')
            return
        self.attempt_connection(ssid, password)

    def pick_network(self, label: str) -> None:
        """Join a network selected from the scan list."""
        ssid = self.options.ssid_for(label)
        if not ssid:
            log.error("Failed to map selected option to SSID: %s", label)
            notify('Error', 'Invalid Wi-Fi network selected.')
            return

        if self.options.networks[ssid].is_open:
            self.attempt_connection(ssid)
            return

        if self.config.use_saved_profiles and ssid in backend.get_saved_connections():
            notify(TITLE, f'Connecting to saved network: {ssid}...')
            try:
                backend.connection_up(ssid)
            except ExternalToolError as e:
                log.warning("Saved profile %s failed: %s", ssid, e)
            else:
                notify(TITLE, f'Connected to {ssid}.')
                return
            password = show_prompt(f'Re-enter password for {ssid}:', self.config, password=True)
            if not password:
                notify(TITLE, 'Connection to saved profile failed and no new password provided.')
                return
        else:
            notify(TITLE, f'Connecting to new network: {ssid}. Enter password...')
            password = show_prompt(f'Password for {ssid}:', self.config, password=True)
            if not password:
                notify(TITLE, f'Connection cancelled: No password provided for {ssid}.')
                return

        self.attempt_connection(ssid, password)

    def attempt_connection(self, ssid: str, password: Optional[str] = None) -> None:
        """Connect, falling back to nm-connection-editor on failure."""
        try:
            self.connect_to_wifi(ssid, password)
        except ExternalToolError as e:
            log.error("Error connecting to %s via nmcli: %s", ssid, e)
            notify(ERROR_TITLE, f'Failed to connect to {ssid}. Manual configuration '
                                f'may be required. Launching Network Manager Editor.')
            launch_connection_editor()
            return
        notify(TITLE, f'Connection attempt completed for {ssid}.')

    # ------------------------------------------------------------------ #
    # Connection
    # ------------------------------------------------------------------ #

    def connect_to_wifi(self, ssid: str, password: Optional[str] = None) -> str:
        """Join ``ssid``, creating or updating a profile when a password is given.

        A profile named exactly after the SSID is reused; otherwise the
        ``wifi-`` prefixed name is used.  If modifying that profile fails,
        a new ``wifi-`` profile bound to the detected interface is added
        and brought up instead.

        Returns:
            The profile (or SSID, for password-less joins) that was activated.

        Raises:
            ExternalToolError: If the final connect or bring-up fails.
        """
        target = backend.profile_name_for(ssid)
        try:
            if ssid in backend.get_saved_connections():
                target = ssid
                log.debug("Found existing connection profile named %r", ssid)
        except ExternalToolError as e:
            log.warning("Could not check for existing connection profile: %s", e)

        if not password:
            log.debug("Connecting to %r without password", ssid)
            backend.connect_ssid(ssid)
            return ssid

        try:
            backend.modify_connection(target, ssid, password)
        except ExternalToolError as e:
            log.warning("Modify connection failed for %r, adding new: %s", target, e)
            target = backend.profile_name_for(ssid)
            backend.add_connection(target, self.iface, ssid, password)

        log.debug("Bringing connection %r up", target)
        backend.connection_up(target)
        return target
