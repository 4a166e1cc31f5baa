import logging

from scapy.all import ARP, Ether
from scapy.data import ETH_P_ARP, ETH_P_IP

from scan_errors import TransmitError

logger = logging.getLogger(__name__)

BROADCAST_MAC = "ff:ff:ff:ff:ff:ff"
ZERO_MAC = "00:00:00:00:00:00"


def build_request(iface, network_range):
    """
    Builds the ARP who-has frame shared by every probe. Only the target
    protocol address changes between candidates.
    """
    return Ether(src=iface.mac, dst=BROADCAST_MAC, type=ETH_P_ARP) / ARP(
        hwtype=1,
        ptype=ETH_P_IP,
        hwlen=6,
        plen=4,
        op="who-has",
        hwsrc=iface.mac,
        psrc=str(network_range.address),
        hwdst=ZERO_MAC,
    )


def write_arp(capture, iface, network_range, addresses):
    """
    Sends one ARP request for each address, in order.
    Stops at the first frame that can't be written.
    """
    frame = build_request(iface, network_range)
    sent = 0
    for ip in addresses:
        frame[ARP].pdst = str(ip)
        try:
            capture.send(frame)
        except OSError as e:
            logger.error("error writing packets on %s: %s", iface.name, e)
            raise TransmitError(f"{iface.name}: could not send ARP request for {ip}: {e}") from e
        sent += 1

    logger.debug("Sent %d ARP requests on %s", sent, iface.name)
    return sent
