from .lines import split_lines
from .models import PrinterRecord

def parse_printer_listing(output: str) -> list[PrinterRecord]:
    """
    Parses `lpstat -s` output into printer records.
    Example output:
    system default destination: HP_LaserJet
    device for Brother_DCP_L2550DW: usb://Brother/DCP-L2550DW?serial=E78
    device for HP_LaserJet: ipp://host/printers/HP_LaserJet
    """
    lines = [line for line in split_lines(output, keep_empty=True) if line.strip()]
    if not lines:
        return []

    # "system default destination: NAME" or "no system default destination"
    header = lines[0].split(':', 1)
    default_name = header[1].strip() if len(header) > 1 else None

    printers = []
    for line in lines[1:]:
        label, connection = _split_on_colon(line)
        if connection is None:
            continue
        name = _printer_name(label)
        printers.append(PrinterRecord(name=name, connection=connection, is_default=name == default_name))
    return printers

def _split_on_colon(line):
    # The first colon that still has something after it. Device labels never
    # contain one, but "device for X:" lines with an empty URI do exist.
    start = 0
    while True:
        idx = line.find(':', start)
        if idx == -1:
            return line, None
        rest = line[idx + 1:].strip()
        if rest:
            return line[:idx], rest
        start = idx + 1

def _printer_name(label):
    # "device for NAME" ends with the name; a status line such as
    # "printer NAME is idle.  enabled since ..." carries it second.
    words = label.split()
    if len(words) > 1 and words[0] == "printer":
        return words[1]
    return label[label.rfind(' ') + 1:].strip()
