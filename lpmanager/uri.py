import re
from urllib.parse import unquote

from .models import ConnectionType, InstallableDevice

# Patterns are only ever applied with single-shot match()/search() calls.
SCHEME_PATTERN = re.compile(r'^([A-Za-z]+)://')
# usb://Brother/DCP-L2550DW?serial=E78123
USB_PATTERN = re.compile(r'usb://([^/?]*)/([^?]*)\?(.*)')
# dnssd://Brother%20HL-5270DN%20series._pdl-datastream._tcp.local./?bidi
NETWORK_PATTERN = re.compile(r'//(.*?)\._')

UNKNOWN_MODEL = "unknown"

def _scheme(decoded):
    match = SCHEME_PATTERN.match(decoded)
    if match:
        return match.group(1)
    return ConnectionType.UNKNOWN

def connection_type(uri: str) -> str:
    """Returns the scheme in front of `://`, or 'unknown' when there is none."""
    return _scheme(unquote(uri))

def extract_model(decoded: str, scheme: str) -> str:
    if scheme == ConnectionType.UNKNOWN:
        return UNKNOWN_MODEL

    if scheme == ConnectionType.USB:
        match = USB_PATTERN.search(decoded)
        if match and match.group(1) and match.group(2):
            return f"{match.group(1)} {match.group(2)}"
        return UNKNOWN_MODEL

    match = NETWORK_PATTERN.search(decoded)
    if match and match.group(1):
        return match.group(1)
    return UNKNOWN_MODEL

def classify_uri(raw: str) -> InstallableDevice:
    """
    Classifies a device URI reported by `lpinfo -v`.

    The model is a best-effort guess: USB URIs carry vendor/product in the
    path, Bonjour URIs carry the service instance name before the first `._`.
    Anything else comes back as 'unknown' rather than failing the listing.
    """
    decoded = unquote(raw)
    protocol = _scheme(decoded)
    return InstallableDevice(
        uri=raw,
        uri_pretty=decoded,
        protocol=protocol,
        model=extract_model(decoded, protocol),
    )
