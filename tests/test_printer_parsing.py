from lpmanager.discovery import IGNORED_DEVICES, parse_discovery
from lpmanager.listing import parse_printer_listing
from lpmanager.models import PrinterRecord

LPSTAT_OUTPUT = """system default destination: HP_LaserJet
device for Brother_DCP_L2550DW: usb://Brother/DCP-L2550DW?serial=E78123
device for HP_LaserJet: ipp://host/printers/HP_LaserJet
"""

def test_lpstat_parsing():
    printers = parse_printer_listing(LPSTAT_OUTPUT)
    assert printers == [
        PrinterRecord("Brother_DCP_L2550DW", "usb://Brother/DCP-L2550DW?serial=E78123", False),
        PrinterRecord("HP_LaserJet", "ipp://host/printers/HP_LaserJet", True),
    ]

def test_status_line_with_colon():
    output = ("system default destination: HP_LaserJet\n"
              "printer HP_LaserJet is idle.  enabled since ...: ipp://host/printers/HP_LaserJet\n")
    printers = parse_printer_listing(output)
    assert printers == [PrinterRecord("HP_LaserJet", "ipp://host/printers/HP_LaserJet", True)]

def test_default_match_is_case_sensitive():
    output = "system default destination: hp_laserjet\ndevice for HP_LaserJet: ipp://host/x\n"
    printers = parse_printer_listing(output)
    assert printers[0].is_default is False

def test_no_default_destination():
    output = "no system default destination\r\n\r\ndevice for Office: socket://10.0.0.9:9100\r\n"
    printers = parse_printer_listing(output)
    assert printers == [PrinterRecord("Office", "socket://10.0.0.9:9100", False)]

def test_empty_listing():
    assert parse_printer_listing("") == []
    assert parse_printer_listing("\n\n") == []

def test_line_without_connection_is_skipped():
    output = "system default destination: A\ndevice for B:\ndevice for A: usb://X/Y?s=1\n"
    assert [p.name for p in parse_printer_listing(output)] == ["A"]

LPINFO_OUTPUT = """network socket
network ipp
direct usb://Brother/DCP-L2550DW?serial=E78123
dnssd dnssd://Brother%20HL-5270DN%20series._pdl-datastream._tcp.local./?bidi
socket socket://192.168.1.5:9100
direct hp
serial serial:/dev/ttyS0?baud=115200
"""

def test_discovery_groups_by_backend():
    devices = parse_discovery(LPINFO_OUTPUT)
    assert list(devices) == ["direct", "dnssd", "serial"]

    usb = devices["direct"][0]
    assert usb.protocol == "usb"
    assert usb.model == "Brother DCP-L2550DW"

    dnssd = devices["dnssd"][0]
    assert dnssd.protocol == "dnssd"
    assert dnssd.model == "Brother HL-5270DN series"
    assert dnssd.uri == "dnssd://Brother%20HL-5270DN%20series._pdl-datastream._tcp.local./?bidi"
    assert dnssd.uri_pretty == "dnssd://Brother HL-5270DN series._pdl-datastream._tcp.local./?bidi"

def test_bare_backend_lines_are_devices_of_unknown_type():
    devices = parse_discovery(LPINFO_OUTPUT)
    hp = devices["direct"][1]
    assert hp.protocol == "unknown"
    assert hp.model == "unknown"
    assert devices["serial"][0].protocol == "unknown"

def test_ignored_backends_never_appear():
    lines = "\n".join(f"{backend} {backend}://somewhere/x._y" for backend in IGNORED_DEVICES)
    assert parse_discovery(lines) == {}

def test_socket_line_dropped():
    assert parse_discovery("socket socket://192.168.1.5:9100") == {}

def test_non_text_output():
    assert parse_discovery(None) == {}
    assert parse_discovery(b"direct usb://a/b?c") == {}

def test_single_token_line_dropped():
    assert parse_discovery("direct\n\n   \n") == {}
