"""wofi-wifi - Network backend using NetworkManager (nmcli).

All network operations are performed by invoking nmcli as a subprocess
with arguments passed as a list.  Query helpers parse nmcli's terse
(``-t``) output.  Any non-zero exit is raised as ExternalToolError.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Security value used when nmcli reports none
NO_SECURITY = 'None'

# Placeholder nmcli prints for empty values (hidden SSIDs, no security)
EMPTY_VALUE = '--'

# Prefix for profiles this tool creates
PROFILE_PREFIX = 'wifi-'

QUERY_TIMEOUT = 30
CONNECT_TIMEOUT = 60


# ---------------------------------------------------------------------------
# Errors and data classes
# ---------------------------------------------------------------------------

class ExternalToolError(RuntimeError):
    """An external command was missing, timed out or exited non-zero."""

    def __init__(self, cmd: List[str], message: str, returncode: Optional[int] = None):
        self.cmd = cmd
        self.returncode = returncode
        super().__init__(message)


@dataclass
class WiFiNetwork:
    """One access point row from a scan."""
    ssid: str = ''
    security: str = NO_SECURITY
    signal: int = 0

    @property
    def is_open(self) -> bool:
        """Return True when the network needs no password."""
        return self.security in ('', NO_SECURITY, EMPTY_VALUE)


# ---------------------------------------------------------------------------
# Helper: run commands
# ---------------------------------------------------------------------------

def _run_command(cmd: List[str], timeout: int = QUERY_TIMEOUT) -> subprocess.CompletedProcess:
    """Execute a command and return the CompletedProcess result.

    Args:
        cmd: Command and arguments to execute.
        timeout: Maximum seconds to wait.

    Returns:
        A subprocess.CompletedProcess instance.

    Raises:
        FileNotFoundError: If the command is not installed.
        subprocess.TimeoutExpired: If the command times out.
    """
    return subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        timeout=timeout,
    )


def _run_nmcli_check(args: List[str], timeout: int = QUERY_TIMEOUT) -> str:
    """Run nmcli, raise on failure, and return stdout.

    Args:
        args: Arguments to pass after 'nmcli'.
        timeout: Maximum seconds to wait.

    Returns:
        Raw stdout string.

    Raises:
        ExternalToolError: If nmcli is missing, times out or exits non-zero.
    """
    cmd = ['nmcli'] + args
    try:
        result = _run_command(cmd, timeout=timeout)
    except FileNotFoundError:
        raise ExternalToolError(cmd, 'nmcli not found')
    except subprocess.TimeoutExpired:
        raise ExternalToolError(cmd, f'nmcli timed out after {timeout}s')

    if result.returncode != 0:
        raise ExternalToolError(
            cmd,
            result.stderr.strip() or f'nmcli exited with code {result.returncode}',
            result.returncode,
        )
    return result.stdout


def _split_nmcli_line(line: str) -> List[str]:
    """Split an nmcli terse-mode output line on unescaped colons.

    nmcli escapes literal colons in values as '\\:' and backslashes as
    '\\\\'.  This function splits only on unescaped colons and then
    unescapes the results.

    Args:
        line: A single line of nmcli -t output.

    Returns:
        A list of field values.
    """
    parts: List[str] = []
    current: List[str] = []
    i = 0
    while i < len(line):
        if line[i] == '\\' and i + 1 < len(line) and line[i + 1] in (':', '\\'):
            current.append(line[i + 1])
            i += 2
        elif line[i] == ':':
            parts.append(''.join(current))
            current = []
            i += 1
        else:
            current.append(line[i])
            i += 1
    parts.append(''.join(current))
    return parts


def _scan_columns(fields: str) -> List[str]:
    """Return the nmcli columns to request for a scan.

    The configured FIELDS are kept in order; SSID, SECURITY and SIGNAL are
    appended when missing since the menu and the password decision need them.
    """
    columns = []
    for name in fields.split(','):
        name = name.strip().upper()
        if name and name not in columns:
            columns.append(name)
    for required in ('SSID', 'SECURITY', 'SIGNAL'):
        if required not in columns:
            columns.append(required)
    return columns


def _parse_signal(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def detect_interface() -> str:
    """Return the first WiFi device name, or '' if there is none."""
    output = _run_nmcli_check(['-t', '-f', 'DEVICE,TYPE', 'device', 'status'])
    for line in output.splitlines():
        parts = _split_nmcli_line(line)
        if len(parts) >= 2 and parts[1] == 'wifi' and parts[0]:
            return parts[0]
    return ''


def get_radio_state() -> str:
    """Return nmcli's raw WiFi radio state ('enabled' or 'disabled')."""
    return _run_nmcli_check(['-t', '-f', 'WIFI', 'general']).strip()


def set_radio(enabled: bool) -> None:
    """Switch the WiFi radio on or off."""
    _run_nmcli_check(['radio', 'wifi', 'on' if enabled else 'off'])


def get_current_ssid() -> str:
    """Return the SSID of the active WiFi connection, or ''."""
    output = _run_nmcli_check(['-t', '-f', 'ACTIVE,SSID', 'device', 'wifi'])
    for line in output.splitlines():
        parts = _split_nmcli_line(line)
        if len(parts) >= 2 and parts[0] == 'yes':
            return parts[1]
    return ''


def scan_networks(fields: str = 'SSID,SECURITY', rescan: str = 'no') -> List[WiFiNetwork]:
    """List visible access points.

    Rows are returned as reported; duplicate SSIDs and hidden
    placeholders are left for the caller to fold.

    Args:
        fields: Comma separated nmcli columns to request.
        rescan: Value for ``--rescan`` ('yes', 'no' or 'auto').

    Returns:
        A list of WiFiNetwork objects.
    """
    columns = _scan_columns(fields)
    output = _run_nmcli_check(
        ['-t', '-f', ','.join(columns), 'device', 'wifi', 'list', '--rescan', rescan],
        timeout=CONNECT_TIMEOUT,
    )

    networks: List[WiFiNetwork] = []
    for line in output.splitlines():
        if not line:
            continue
        row = dict(zip(columns, _split_nmcli_line(line)))
        security = row.get('SECURITY', '').strip()
        if security in ('', EMPTY_VALUE):
            security = NO_SECURITY
        networks.append(WiFiNetwork(
            ssid=row.get('SSID', ''),
            security=security,
            signal=_parse_signal(row.get('SIGNAL', '')),
        ))
    log.debug("Scan returned %d rows", len(networks))
    return networks


def get_saved_connections() -> List[str]:
    """Return the names of all saved connection profiles."""
    output = _run_nmcli_check(['-t', '-f', 'NAME', 'connection', 'show'])
    return [_split_nmcli_line(line)[0] for line in output.splitlines() if line]


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

def profile_name_for(ssid: str) -> str:
    """Return the profile name this tool uses for a new network."""
    return f'{PROFILE_PREFIX}{ssid}'


def connect_ssid(ssid: str) -> None:
    """Connect by SSID (open networks or already saved profiles)."""
    _run_nmcli_check(['device', 'wifi', 'connect', ssid], timeout=CONNECT_TIMEOUT)


def modify_connection(name: str, ssid: str, password: str) -> None:
    """Point an existing profile at ``ssid`` with a WPA-PSK key."""
    _run_nmcli_check([
        'connection', 'modify', name,
        'wifi.ssid', ssid,
        'wifi-sec.key-mgmt', 'wpa-psk',
        'wifi-sec.psk', password,
    ])


def add_connection(name: str, iface: str, ssid: str, password: str) -> None:
    """Create a WPA-PSK profile bound to ``iface``."""
    _run_nmcli_check([
        'connection', 'add',
        'type', 'wifi',
        'con-name', name,
        'ifname', iface,
        'ssid', ssid,
        'wifi-sec.key-mgmt', 'wpa-psk',
        'wifi-sec.psk', password,
    ])


def connection_up(name: str) -> None:
    """Activate a saved profile."""
    _run_nmcli_check(['connection', 'up', 'id', name], timeout=CONNECT_TIMEOUT)


def disconnect_device(iface: str) -> None:
    """Disconnect the given device."""
    _run_nmcli_check(['device', 'disconnect', iface])
