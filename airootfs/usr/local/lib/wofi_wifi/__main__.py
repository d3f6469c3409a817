#!/usr/bin/env python3
"""wofi-wifi - Entry point."""

import argparse
import logging
import sys

from . import __app_id__, __version__
from .app import WifiMenu
from .config import load_config


def _setup_logging(verbose: bool, quiet: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format=f'[{__app_id__}] %(levelname)s %(name)s: %(message)s',
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog=__app_id__,
        description='Pick and join a Wi-Fi network from a wofi menu.',
    )
    parser.add_argument('-c', '--config', metavar='PATH',
                        help='read this config file instead of searching')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('-v', '--verbose', action='store_true',
                       help='log every command and config key')
    group.add_argument('-q', '--quiet', action='store_true',
                       help='only log warnings and errors')
    parser.add_argument('--version', action='version',
                        version=f'%(prog)s {__version__}')
    return parser.parse_args(argv)


def main(argv=None):
    """Run one wofi-wifi menu cycle."""
    args = parse_args(argv)
    _setup_logging(args.verbose, args.quiet)
    config = load_config([args.config] if args.config else None)
    return WifiMenu(config).run()


if __name__ == '__main__':
    sys.exit(main())
