"""wofi-wifi - Menu and prompt presenter using wofi.

wofi runs in dmenu mode: options arrive on stdin, the chosen line comes
back on stdout.  Exit code 1 means the user dismissed the window and is
reported as an empty string.
"""

import logging
import subprocess
from typing import List, Sequence

from .backend import ExternalToolError
from .config import Configuration

log = logging.getLogger(__name__)


# --- Geometry ---
MENU_WIDTH = 500
LINE_HEIGHT = 30
MIN_HEIGHT = 100

# wofi exit status when the window is dismissed
CANCEL_EXIT_CODE = 1

# Maximum seconds a menu may stay open
MENU_TIMEOUT = 300

# POSITION config value -> wofi --location
LOCATIONS = {
    0: 'center',
    1: 'top_left',
    2: 'top',
    3: 'top_right',
    4: 'right',
    5: 'bottom_right',
    6: 'bottom',
    7: 'bottom_left',
    8: 'left',
}


def location_for(position: int) -> str:
    """Map a POSITION value to a wofi location, defaulting to center."""
    return LOCATIONS.get(position, LOCATIONS[0])


def _wofi_args(prompt: str, lines: int, height: int, config: Configuration) -> List[str]:
    args = [
        'wofi', '-i', '-d',
        '--prompt', prompt,
        '--lines', str(lines),
        '--location', location_for(config.position),
        '--width', str(MENU_WIDTH),
        '--height', str(height),
    ]
    if config.xoff:
        args += ['--xoffset', str(config.xoff)]
    if config.yoff:
        args += ['--yoffset', str(config.yoff)]
    return args


def _run_wofi(args: List[str], stdin: str) -> str:
    """Run wofi and return the selection, or '' if the user cancelled.

    Raises:
        ExternalToolError: If wofi is missing, times out or fails.
    """
    log.debug("wofi command: %s", args)
    try:
        result = subprocess.run(
            args,
            input=stdin,
            capture_output=True,
            text=True,
            timeout=MENU_TIMEOUT,
        )
    except FileNotFoundError:
        raise ExternalToolError(args, 'wofi not found')
    except subprocess.TimeoutExpired:
        raise ExternalToolError(args, 'wofi timed out')

    if result.returncode == CANCEL_EXIT_CODE:
        log.debug("wofi cancelled by user")
        return ''
    if result.returncode != 0:
        raise ExternalToolError(
            args,
            result.stderr.strip() or f'wofi exited with code {result.returncode}',
            result.returncode,
        )
    return result.stdout.rstrip('\n')


def show_menu(options: Sequence[str], config: Configuration,
              prompt: str = 'Select Wi-Fi Network:') -> str:
    """Show a selection list and return the chosen line, or ''."""
    height = max(len(options) * LINE_HEIGHT, MIN_HEIGHT)
    args = _wofi_args(prompt, len(options), height, config)
    return _run_wofi(args, '\n'.join(options))


def show_prompt(prompt: str, config: Configuration, default: str = '',
                password: bool = False) -> str:
    """Show a single-line input and return the entered text, or ''.

    Args:
        prompt: Text shown in the input field.
        config: Supplies the on-screen location.
        default: Value offered as the only list entry.
        password: Mask the typed characters.
    """
    args = _wofi_args(prompt, 1, MIN_HEIGHT, config)
    if password:
        args.append('--password')
    return _run_wofi(args, default)
