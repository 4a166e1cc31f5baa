import enum
import ipaddress
import logging
import threading
from dataclasses import dataclass

from scapy.all import ARP
from scapy.data import ETH_P_IP

logger = logging.getLogger(__name__)

# Upper bound on how long start() waits for the sniffer to be listening.
READY_TIMEOUT = 1.0
# Upper bound on how long stop() waits for the sniffer thread to exit.
JOIN_TIMEOUT = 5.0


class FrameKind(enum.Enum):
    REPLY = "reply"
    REQUEST = "request"
    OTHER = "other"


@dataclass(frozen=True)
class ArpEntry:
    """A host that answered: its IPv4 address and hardware address."""
    ip: ipaddress.IPv4Address
    mac: str


def classify(frame):
    if not frame.haslayer(ARP):
        return FrameKind.OTHER
    arp = frame[ARP]
    # Only Ethernet/IPv4 resolution is of interest.
    if arp.ptype != ETH_P_IP or arp.plen != 4 or arp.hwlen != 6:
        return FrameKind.OTHER
    op = arp.op
    if op == 2:
        return FrameKind.REPLY
    if op == 1:
        return FrameKind.REQUEST
    return FrameKind.OTHER


def parse_reply(frame, local_mac):
    """
    Returns the ArpEntry announced by an ARP reply, or None when the frame is
    not a reply or was sent from the local interface.
    """
    if classify(frame) is not FrameKind.REPLY:
        return None

    arp = frame[ARP]
    if arp.hwsrc.lower() == local_mac.lower():
        # This is a packet I sent.
        return None

    try:
        ip = ipaddress.IPv4Address(arp.psrc)
    except ValueError:
        return None

    # Unsolicited replies are kept too, they still tell us who is where.
    return ArpEntry(ip=ip, mac=arp.hwsrc.lower())


class ReplyCollector:
    """
    Sniffs ARP replies on a capture in a background thread.

    The collector thread is the only writer of the result table. stop() signals
    it, stops the sniffer and joins its thread before handing the table back,
    so the caller always reads a table that can no longer change.
    """

    def __init__(self, local_mac):
        self.local_mac = local_mac
        self._table = []
        self._stopped = threading.Event()
        self._ready = threading.Event()
        self._sniffer = None

    def handle(self, frame):
        if self._stopped.is_set():
            return None
        entry = parse_reply(frame, self.local_mac)
        if entry is not None:
            self._table.append(entry)
        return entry

    def _on_frame(self, frame):
        # AsyncSniffer prints whatever prn returns.
        self.handle(frame)

    def start(self, capture, ready_timeout=READY_TIMEOUT):
        self._sniffer = capture.sniffer(self._on_frame, started_callback=self._ready.set)
        self._sniffer.start()
        if not self._ready.wait(ready_timeout):
            logger.warning("Capture on %s not ready after %.1fs, sending anyway",
                           capture.interface, ready_timeout)

    def stop(self):
        """
        Stops collecting and returns the result table, in arrival order.
        """
        if self._stopped.is_set():
            return self._table
        self._stopped.set()

        if self._sniffer is not None:
            if not self._sniffer.running:
                # A slow starter has to be up before it can be told to stop.
                self._ready.wait(READY_TIMEOUT)
            if self._sniffer.running:
                self._sniffer.stop(join=False)
            self._sniffer.join(JOIN_TIMEOUT)
            thread = self._sniffer.thread
            if thread is not None and thread.is_alive():
                logger.warning("Sniffer thread still running %.1fs after stop", JOIN_TIMEOUT)

        logger.debug("Collected %d ARP replies", len(self._table))
        return self._table
