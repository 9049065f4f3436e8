from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass, field, fields
from typing import Optional

from .config import Settings, load_settings
from .discovery import IGNORED_DEVICES, parse_discovery
from .drivers import match_drivers, parse_driver_catalog
from .executor import run_command
from .listing import parse_printer_listing
from .models import InstallableDevice
from .printer import Printer

logger = logging.getLogger(__name__)

# IPP Everywhere, used for network devices without a matching driver
EVERYWHERE_DRIVER = "everywhere"


@dataclass
class InstallRequest:
    name: str
    uri: str
    driver: str
    description: str = ""
    location: str = ""
    enabled: bool = True
    shared: Optional[bool] = None
    ppd_options: dict = field(default_factory=dict)


def queue_name(model: str) -> str:
    """Makes a CUPS queue name out of a model string."""
    name = re.sub(r'[^a-zA-Z0-9]+', '_', model).strip('_')
    return name or "Printer"


def build_install_command(request: InstallRequest, settings: Settings) -> list[str]:
    # lpadmin -p [name] -v [uri] -m [driver] -E
    args = ["-p", request.name, "-v", request.uri, "-m", request.driver]
    if request.description:
        args.extend(["-D", request.description])
    if request.location:
        args.extend(["-L", request.location])
    for key, value in request.ppd_options.items():
        args.extend(["-o", f"{key}={value}"])
    if request.shared is not None:
        args.extend(["-o", f"printer-is-shared={'true' if request.shared else 'false'}"])
    if request.enabled:
        args.append("-E")
    return settings.admin_command(*args)


class Manager:
    """Lists, discovers and installs CUPS printers through the CUPS command-line tools."""

    def __init__(self, settings: Settings = None, executor=None):
        self.settings = settings or load_settings()
        self._run = executor or run_command

    @staticmethod
    def get_ignored_devices():
        return IGNORED_DEVICES

    async def _list(self):
        try:
            result = await self._run([self.settings.lpstat, "-s"])
        except subprocess.CalledProcessError as e:
            # lpstat exits non-zero when no destinations are configured
            logger.debug("lpstat -s failed: %s", e)
            return []

        if result.stderr or not result.stdout:
            return []
        return parse_printer_listing(result.text)

    def _hydrate(self, record):
        return Printer(record, self.settings, self._run)

    async def get(self, name: str = None) -> Optional[Printer]:
        """Returns the printer called `name` (case-insensitive), or the default printer."""
        for record in await self._list():
            if name:
                if record.name.lower() == name.lower():
                    return self._hydrate(record)
            elif record.is_default:
                return self._hydrate(record)
        return None

    async def list(self) -> list[Printer]:
        """Printers currently installed on the system."""
        return [self._hydrate(record) for record in await self._list()]

    async def discover(self) -> dict[str, list[InstallableDevice]]:
        """Devices reported by `lpinfo -v`, grouped by backend."""
        result = await self._run([self.settings.lpinfo, "-v"])
        devices = parse_discovery(result.text)
        logger.info("Found %d devices", sum(len(d) for d in devices.values()))
        return devices

    async def find_drivers(self, slugs=None, maxsize: int = None):
        """
        Searches the driver catalog (`lpinfo -l -m`).

        :param slugs: free-text model names, e.g. "Brother HL-5270DN"; None returns the whole catalog
        :param maxsize: cap on matched drivers, defaults to the max_drivers setting
        """
        result = await self._run([self.settings.lpinfo, "-l", "-m"])
        drivers = parse_driver_catalog(result.text)
        if maxsize is None:
            maxsize = self.settings.max_drivers
        return match_drivers(slugs, drivers, maxsize)

    async def _find_device(self, name):
        devices = [d for group in (await self.discover()).values() for d in group]
        for device in devices:
            if device.model == name:
                return device
        for device in devices:
            if name in (device.uri, device.uri_pretty):
                return device
        return None

    async def _default_driver(self, device):
        if device.model != "unknown":
            drivers = await self.find_drivers([device.model], maxsize=1)
            if drivers:
                return drivers[0].driver
        if device.is_network:
            return EVERYWHERE_DRIVER
        return None

    async def install(self, printer, options: dict = None) -> Optional[InstallRequest]:
        """
        Creates a queue for a discovered device.

        :param printer: an InstallableDevice, or its model/URI as reported by discover()
        :param options: name, driver, description, location, enabled, shared, ppd_options
        :return: the request that was submitted, or None when nothing was installed
        """
        if isinstance(printer, str):
            printer = await self._find_device(printer)
        if printer is None:
            return None

        merged = {
            "name": queue_name(printer.model),
            "uri": printer.uri,
            "description": printer.model if printer.model != "unknown" else "",
        }
        merged.update(options or {})
        unknown = set(merged) - {f.name for f in fields(InstallRequest)}
        if unknown:
            raise ValueError(f"Unknown install options: {', '.join(sorted(unknown))}")

        if not merged.get("driver"):
            merged["driver"] = await self._default_driver(printer)
        if not merged["driver"]:
            logger.warning("No driver found for %s, not installing", printer.uri_pretty)
            return None

        request = InstallRequest(**merged)
        logger.info("Registering queue '%s' for %s", request.name, request.uri)
        await self._run(build_install_command(request, self.settings))
        return request

    async def uninstall(self, name: str):
        logger.info("Removing printer queue: %s", name)
        await self._run(self.settings.admin_command("-x", name))
