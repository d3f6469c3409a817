"""wofi-wifi - Network list processing.

Folds raw scan rows into one entry per SSID, renders menu labels and
keeps a lookup from each label back to its SSID.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .backend import WiFiNetwork, NO_SECURITY, EMPTY_VALUE

CONNECTED_MARKER = ' [Connected]'


@dataclass
class NetworkOptions:
    """Ordered menu labels plus reverse lookups."""
    labels: List[str] = field(default_factory=list)
    lookup: Dict[str, str] = field(default_factory=dict)
    networks: Dict[str, WiFiNetwork] = field(default_factory=dict)

    def ssid_for(self, label: str) -> str:
        """Return the SSID behind a label, or '' if unknown."""
        return self.lookup.get(label, '')


def dedupe_networks(networks: Iterable[WiFiNetwork]) -> Dict[str, WiFiNetwork]:
    """Keep the strongest row per SSID; ties keep the first seen.

    Rows without an SSID or with the hidden placeholder are dropped.
    """
    unique: Dict[str, WiFiNetwork] = {}
    for net in networks:
        if not net.ssid or net.ssid == EMPTY_VALUE:
            continue
        best = unique.get(net.ssid)
        if best is None or net.signal > best.signal:
            unique[net.ssid] = net
    return unique


def render_label(net: WiFiNetwork, current_ssid: str = '') -> str:
    """Return the menu label for a network, e.g. 'Home (80%) [WPA2]'."""
    label = f'{net.ssid} ({net.signal}%)'
    if net.security and net.security != NO_SECURITY:
        label += f' [{net.security}]'
    if current_ssid and net.ssid == current_ssid:
        label += CONNECTED_MARKER
    return label


def build_network_options(networks: Iterable[WiFiNetwork],
                          current_ssid: str = '') -> NetworkOptions:
    """Build the ordered, labelled network list for the menu.

    Sort order: connected network first, then signal strength
    descending, then label ascending.

    Raises:
        ValueError: If two distinct SSIDs render to the same label.
    """
    unique = dedupe_networks(networks)
    options = NetworkOptions(networks=unique)

    entries = []
    for ssid, net in unique.items():
        label = render_label(net, current_ssid)
        if label in options.lookup:
            raise ValueError(f'Label collision for {ssid!r} and {options.lookup[label]!r}')
        options.lookup[label] = ssid
        entries.append((ssid == current_ssid, net.signal, label))

    entries.sort(key=lambda e: (not e[0], -e[1], e[2]))
    options.labels = [label for _, _, label in entries]
    return options
