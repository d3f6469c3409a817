"""wofi-wifi - Wi-Fi network picker for wofi.

Shows visible networks in a wofi dmenu popup and joins the selected
one through NetworkManager (nmcli).

Usage:
    from wofi_wifi.config import load_config
    from wofi_wifi.app import WifiMenu

    WifiMenu(load_config()).run()
"""

__version__ = "1.0.0"
__app_id__ = "wofi-wifi"
