"""lpmanager - discover, install and manage CUPS printers."""

from .manager import Manager
from .models import DriverRecord, InstallableDevice, PrinterRecord
from .printer import Printer

__version__ = "0.3.0"

__all__ = ["Manager", "Printer", "PrinterRecord", "InstallableDevice", "DriverRecord"]
