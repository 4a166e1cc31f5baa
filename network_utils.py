import ipaddress
import logging
from dataclasses import dataclass, field
from typing import List, Union

import netifaces

from scan_errors import (
    LoopbackError, NoAddressError, NoHardwareAddressError,
    RangeTooLargeError, UnknownInterfaceError
)

logger = logging.getLogger(__name__)

ZERO_MAC = "00:00:00:00:00:00"


@dataclass
class Interface:
    """A local network interface as the scanner sees it."""
    name: str
    mac: str
    addresses: List[Union[ipaddress.IPv4Interface, ipaddress.IPv6Interface]] = field(default_factory=list)


@dataclass(frozen=True)
class NetworkRange:
    address: ipaddress.IPv4Address
    netmask: ipaddress.IPv4Address

    def __str__(self):
        return f"{self.address}/{self.netmask}"


def list_interface_names():
    """
    Returns every interface name the host reports, in enumeration order.
    """
    return list(netifaces.interfaces())


def iface_to_names(interface_names):
    """
    Resolves an interface specification into the list of names to scan.
    Accepts "all", a comma-separated list ("eth0,eth1") or a single name.
    """
    if interface_names == "all":
        return list_interface_names()

    names = interface_names.split(",")
    known = set(list_interface_names())
    for name in names:
        if name not in known:
            raise UnknownInterfaceError(name)

    return names


def _ipv4_entries(entries):
    for entry in entries:
        try:
            yield ipaddress.IPv4Interface(f"{entry['addr']}/{entry.get('netmask', '255.255.255.255')}")
        except (KeyError, ValueError):
            continue


def _ipv6_entries(entries):
    for entry in entries:
        try:
            addr = entry['addr'].split('%', 1)[0]
            mask = entry.get('netmask', '/128')
            if '/' in mask:
                prefix = mask.rsplit('/', 1)[1]
            else:
                prefix = bin(int(ipaddress.IPv6Address(mask))).count('1')
            yield ipaddress.IPv6Interface(f"{addr}/{prefix}")
        except (KeyError, ValueError):
            continue


def get_interface(name):
    """
    Looks up the hardware address and bound addresses of the given interface.
    Interfaces without a usable hardware address (e.g. loopback) get an empty MAC.
    """
    if name not in list_interface_names():
        raise UnknownInterfaceError(name)

    addrs = netifaces.ifaddresses(name)

    mac = ""
    for link in addrs.get(netifaces.AF_LINK, []):
        candidate = link.get('addr', '').lower()
        if candidate and candidate != ZERO_MAC:
            mac = candidate
            break

    addresses = list(_ipv4_entries(addrs.get(netifaces.AF_INET, [])))
    addresses.extend(_ipv6_entries(addrs.get(netifaces.AF_INET6, [])))
    return Interface(name=name, mac=mac, addresses=addresses)


def _as_ipv4(address):
    if address.version == 4:
        return address.ip, address.netmask

    mapped = address.ip.ipv4_mapped
    if mapped is None:
        return None
    # Keep only the trailing 32 bits of the IPv6 mask.
    return mapped, ipaddress.IPv4Address(int(address.netmask) & 0xffffffff)


def resolve_network_range(iface):
    """
    Picks the first IPv4 network bound to the interface and checks that it can be scanned.
    Raises a RangeError subclass describing why it can't.
    """
    selected = None
    for address in iface.addresses:
        selected = _as_ipv4(address)
        if selected:
            break

    if selected is None:
        raise NoAddressError(iface.name)
    if not iface.mac:
        raise NoHardwareAddressError(iface.name)

    network_range = NetworkRange(*selected)
    if network_range.address.packed[0] == 127:
        raise LoopbackError(iface.name)
    if network_range.netmask.packed[:2] != b"\xff\xff":
        raise RangeTooLargeError(iface.name)

    logger.info("Using network range %s for interface %s", network_range, iface.name)
    return network_range


def enumerate_addresses(network_range):
    """
    Returns every address of the network in ascending order.
    The network address itself is included, the broadcast address is not.
    """
    mask = int(network_range.netmask)
    num = int(network_range.address) & mask

    out = []
    while mask < 0xffffffff:
        out.append(ipaddress.IPv4Address(num))
        mask += 1
        num += 1
    return out
