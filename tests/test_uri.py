import pytest

from lpmanager.models import DeviceURI
from lpmanager.uri import classify_uri, connection_type

@pytest.mark.parametrize("raw, model", [
    ("usb://Brother/DCP-L2550DW?serial=E78123", "Brother DCP-L2550DW"),
    ("usb://HP/LaserJet%20P1102w?serial=000", "HP LaserJet P1102w"),
    ("usb://%42rother/HL%2D2030?serial=1", "Brother HL-2030"),
])
def test_usb_model(raw, model):
    device = classify_uri(raw)
    assert device.protocol == "usb"
    assert device.model == model

def test_usb_without_query_is_unknown():
    assert classify_uri("usb://Brother/DCP-L2550DW").model == "unknown"

def test_dnssd_model():
    device = classify_uri("dnssd://Brother%20HL-5270DN%20series._pdl-datastream._tcp.local./?bidi")
    assert device.protocol == "dnssd"
    assert device.model == "Brother HL-5270DN series"

def test_network_without_service_name():
    device = classify_uri("ipp://192.168.1.20/ipp/print")
    assert device.protocol == "ipp"
    assert device.model == "unknown"

def test_unusual_scheme_kept_verbatim():
    device = classify_uri("hpfax://Office%20Fax._x")
    assert device.protocol == "hpfax"
    assert device.model == "Office Fax"

@pytest.mark.parametrize("raw", ["hp", "serial:/dev/ttyS0", "", "//Brother._ipp"])
def test_malformed_uri(raw):
    device = classify_uri(raw)
    assert device.protocol == "unknown"
    assert device.model == "unknown"

def test_repeated_classification_is_stable():
    raw = "dnssd://Canon%20TS5000._ipp._tcp.local./"
    assert classify_uri(raw) == classify_uri(raw)

def test_connection_type():
    assert connection_type("socket://10.0.0.1:9100") == "socket"
    assert connection_type("nothing here") == "unknown"

def test_device_uri_decoded():
    uri = DeviceURI("dnssd://A%20B._ipp")
    assert uri.decoded == "dnssd://A B._ipp"
