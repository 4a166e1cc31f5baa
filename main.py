import argparse
import logging
import os
import sys

from arp_scan import DEFAULT_WINDOW, scan
from cli_utils import print_arp_table, print_scan_error, select_interfaces
from network_utils import iface_to_names
from scan_errors import ScanError, UnknownInterfaceError


def positive_float(value):
    seconds = float(value)
    if seconds <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return seconds


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description=(
            "Discovers live hosts on the networks attached to local interfaces using ARP.\n"
        )
    )
    parser.add_argument(
        "-i", "--interface",
        help=(
            "[Optional] Interface to scan: a name, a comma-separated list (eth0,eth1) or 'all'. "
            "Prompts for a selection when omitted."
        )
    )
    parser.add_argument(
        "-w", "--window",
        type=positive_float,
        default=DEFAULT_WINDOW,
        help=(
            "[Optional] Seconds to wait for replies after the last request.\n"
            f"Default: {DEFAULT_WINDOW}"
        )
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="[Optional] Enable debug logging."
    )
    return parser.parse_args(argv)


def setup_logging(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_scans(names, window):
    """
    Scans each interface independently and prints its result.
    Returns the number of interfaces whose scan failed.
    """
    failures = 0
    for name in names:
        try:
            table = scan(name, window=window)
        except ScanError as e:
            print_scan_error(e)
            failures += 1
            continue
        print_arp_table(name, table)
    return failures


def main(argv=None):
    args = parse_args(argv)

    if os.geteuid() != 0:
        print(
            "Please run this script as root.\n"
            "Sending and sniffing raw ARP frames needs elevated privileges."
        )
        return 1

    setup_logging(args.verbose)

    if args.interface:
        try:
            names = iface_to_names(args.interface)
        except UnknownInterfaceError as e:
            print_scan_error(e)
            return 1
    else:
        names = select_interfaces()
        if not names:
            print("No interface selected.")
            return 1

    failures = run_scans(names, args.window)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
