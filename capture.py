import logging

from scapy.all import AsyncSniffer, conf
from scapy.error import Scapy_Exception

from scan_errors import CaptureOpenError

logger = logging.getLogger(__name__)


class Capture:
    """
    A promiscuous layer 2 socket on one interface, used both to send requests
    and to sniff replies. Reads block until a frame arrives.
    """

    def __init__(self, interface):
        self.interface = interface
        conf.verb = 0
        try:
            self._socket = conf.L2socket(iface=interface, promisc=True)
        except (OSError, Scapy_Exception) as e:
            raise CaptureOpenError(f"could not open {interface} for capture: {e}") from e
        logger.debug("Opened capture on %s", interface)

    def send(self, frame):
        self._socket.send(frame)

    def sniffer(self, prn, started_callback=None):
        """
        Returns an AsyncSniffer reading from this socket. The sniffer leaves the
        socket open when stopped.
        """
        return AsyncSniffer(
            opened_socket=self._socket,
            prn=prn,
            store=False,
            started_callback=started_callback,
        )

    def close(self):
        self._socket.close()
        logger.debug("Closed capture on %s", self.interface)
