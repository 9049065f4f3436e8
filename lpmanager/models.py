from dataclasses import dataclass
from urllib.parse import unquote


class ConnectionType:
    """Well-known device URI schemes. Other schemes are reported verbatim."""
    USB = "usb"
    DNSSD = "dnssd"
    SOCKET = "socket"
    IPP = "ipp"
    IPPS = "ipps"
    LPD = "lpd"
    SMB = "smb"
    UNKNOWN = "unknown"

    NETWORK = frozenset({DNSSD, SOCKET, IPP, IPPS, LPD, SMB, "http", "https"})


@dataclass(frozen=True)
class PrinterRecord:
    """One installed queue as reported by `lpstat -s`."""
    name: str
    connection: str
    is_default: bool = False


@dataclass(frozen=True)
class DeviceURI:
    raw: str

    @property
    def decoded(self) -> str:
        return unquote(self.raw)


@dataclass(frozen=True)
class InstallableDevice:
    """A device reported by `lpinfo -v` that a queue can be created for."""
    uri: str
    uri_pretty: str
    protocol: str
    model: str = "unknown"

    @property
    def is_network(self) -> bool:
        return self.protocol in ConnectionType.NETWORK


@dataclass(frozen=True)
class DriverRecord:
    driver: str
    lang: str
    make_and_model: str
    id: str
