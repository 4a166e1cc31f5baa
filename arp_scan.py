import enum
import logging
import time

from arp_replies import ReplyCollector
from arp_requests import write_arp
from capture import Capture
from network_utils import enumerate_addresses, get_interface, resolve_network_range

logger = logging.getLogger(__name__)

# We don't know exactly how long it'll take for replies to come back,
# but 2 seconds is plenty on a directly attached network.
DEFAULT_WINDOW = 2.0


class ScanState(enum.Enum):
    IDLE = "idle"
    RANGE_RESOLVED = "range-resolved"
    CAPTURE_OPEN = "capture-open"
    COLLECTING = "collecting"
    BROADCASTING = "broadcasting"
    WINDOW_OPEN = "window-open"
    STOPPING = "stopping"
    DONE = "done"
    FAILED = "failed"


class ARPScanner:
    """
    Scans the local network of one interface for machines using ARP requests/replies.

    A scan resolves the interface's IPv4 range, starts sniffing for replies,
    sends one request per address, waits for the collection window and then
    returns every (ip, mac) pair that answered, in arrival order.
    """

    def __init__(self, iface, window=DEFAULT_WINDOW, open_capture=Capture, sleep=time.sleep):
        self.iface = iface
        self.window = window
        self.state = ScanState.IDLE
        self.error = None
        self._open_capture = open_capture
        self._sleep = sleep

    def _enter(self, state):
        logger.debug("%s: %s -> %s", self.iface.name, self.state.value, state.value)
        self.state = state

    def scan(self):
        try:
            table = self._run()
        except Exception as e:
            self.error = e
            self._enter(ScanState.FAILED)
            raise
        self._enter(ScanState.DONE)
        return table

    def _run(self):
        network_range = resolve_network_range(self.iface)
        self._enter(ScanState.RANGE_RESOLVED)

        capture = self._open_capture(self.iface.name)
        self._enter(ScanState.CAPTURE_OPEN)
        try:
            collector = ReplyCollector(self.iface.mac)
            collector.start(capture)
            self._enter(ScanState.COLLECTING)
            try:
                self._enter(ScanState.BROADCASTING)
                write_arp(capture, self.iface, network_range, enumerate_addresses(network_range))

                self._enter(ScanState.WINDOW_OPEN)
                self._sleep(self.window)
            finally:
                self._enter(ScanState.STOPPING)
                table = collector.stop()
        finally:
            capture.close()

        logger.info("%d hosts answered on %s", len(table), self.iface.name)
        return table


def scan(interface_name, window=DEFAULT_WINDOW):
    """
    Scans the network attached to the named interface.
    Returns a list of ArpEntry, or raises a ScanError.
    """
    return ARPScanner(get_interface(interface_name), window=window).scan()
