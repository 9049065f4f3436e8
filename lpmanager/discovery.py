import logging

from .lines import split_lines
from .models import InstallableDevice
from .uri import classify_uri

logger = logging.getLogger(__name__)

# Backends for network print protocols and fax gateways. These show up in
# `lpinfo -v` as bare backend lines and never describe an attached device.
IGNORED_DEVICES = (
    'http', 'https', 'ipp', 'ipps', 'lpd', 'smb', 'socket',
    'fax', 'canonoipnets2', 'cnips2', 'epsonfax', 'hpfax',
)

def parse_discovery(output) -> dict[str, list[InstallableDevice]]:
    """
    Groups `lpinfo -v` output by backend.

    Format is usually: backend uri [extra]
        network socket
        direct usb://Brother/DCP-L2550DW?serial=E78123
        network dnssd://Brother%20HL-5270DN%20series._pdl-datastream._tcp.local./?bidi

    The key is the backend token exactly as lpinfo prints it, which is not
    always the scheme of the URI that follows.
    """
    devices = {}
    if not isinstance(output, str):
        return devices

    for line in split_lines(output, trim=True):
        parts = line.split(' ')
        if len(parts) < 2:
            continue

        backend, uri = parts[0], parts[1]
        if backend in IGNORED_DEVICES:
            continue
        # "network socket", "network ipp": a bare backend name, not a device
        if uri in IGNORED_DEVICES:
            continue

        device = classify_uri(uri)
        if device.model == "unknown":
            logger.debug("Could not extract a model from %s", uri)
        devices.setdefault(backend, []).append(device)

    return devices
