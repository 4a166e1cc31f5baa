class ScanError(Exception):
    """
    Base class for every error that aborts a scan of one interface.
    """


class UnknownInterfaceError(ScanError, ValueError):
    def __init__(self, name):
        super().__init__(f"interface {name}: unknown")
        self.name = name


class RangeError(ScanError):
    """
    The interface has no network range that can be scanned.
    """

    message = "no scannable network"

    def __init__(self, interface):
        super().__init__(f"{interface}: {self.message}")
        self.interface = interface


class NoAddressError(RangeError):
    message = "no good IP network found"


class NoHardwareAddressError(RangeError):
    message = "could not obtain MAC address"


class LoopbackError(RangeError):
    message = "skipping localhost"


class RangeTooLargeError(RangeError):
    message = "mask means network is too large"


class CaptureOpenError(ScanError):
    pass


class TransmitError(ScanError):
    pass
