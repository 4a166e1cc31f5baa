import queue
import threading

from scapy.all import ARP, Ether

LOCAL_MAC = "aa:bb:cc:dd:ee:ff"
LOCAL_IP = "10.0.0.5"


def arp_reply(psrc, hwsrc, pdst=LOCAL_IP, hwdst=LOCAL_MAC):
    return Ether(src=hwsrc, dst=hwdst) / ARP(
        op="is-at", psrc=psrc, hwsrc=hwsrc, pdst=pdst, hwdst=hwdst
    )


def arp_request(psrc, hwsrc, pdst):
    return Ether(src=hwsrc, dst="ff:ff:ff:ff:ff:ff") / ARP(
        op="who-has", psrc=psrc, hwsrc=hwsrc, pdst=pdst
    )


class FakeSniffer:
    """
    Delivers frames from a queue to prn in its own thread, blocking on the
    queue between frames. A None in the queue ends the thread.
    """

    def __init__(self, frames, prn, started_callback=None):
        self.frames = frames
        self.prn = prn
        self.started_callback = started_callback
        self.running = False
        self.thread = None

    def start(self):
        self.thread = threading.Thread(target=self._run, daemon=True)
        self.thread.start()

    def _run(self):
        self.running = True
        if self.started_callback:
            self.started_callback()
        while True:
            frame = self.frames.get()
            try:
                if frame is None:
                    break
                self.prn(frame)
            finally:
                self.frames.task_done()
        self.running = False

    def stop(self, join=True):
        self.frames.put(None)
        if join:
            self.join()

    def join(self, timeout=None):
        if self.thread:
            self.thread.join(timeout)


class FakeCapture:
    """
    Stands in for capture.Capture. Every request sent loops back to the
    sniffer, and peers answer the requests for their address.
    """

    def __init__(self, interface="eth0", peers=None, fail_after=None):
        self.interface = interface
        self.peers = peers or {}
        self.fail_after = fail_after
        self.frames = queue.Queue()
        self.sent = []
        self.sniffers = []
        self.closed = 0

    def send(self, frame):
        if self.fail_after is not None and len(self.sent) >= self.fail_after:
            raise OSError(105, "No buffer space available")
        data = bytes(frame)
        self.sent.append(data)

        request = Ether(data)
        self.frames.put(request)
        mac = self.peers.get(request[ARP].pdst)
        if mac:
            self.frames.put(arp_reply(request[ARP].pdst, mac, pdst=request[ARP].psrc))

    def sniffer(self, prn, started_callback=None):
        sniffer = FakeSniffer(self.frames, prn, started_callback)
        self.sniffers.append(sniffer)
        return sniffer

    def close(self):
        self.closed += 1

    def drain(self):
        self.frames.join()
