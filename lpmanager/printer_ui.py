import logging

import pyperclip
from rich.markup import escape
from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Checkbox, Input, Label, RichLog, SelectionList

from .log import attach_callback
from .manager import Manager
from .uri import classify_uri

TEST_PAGE = "/usr/share/cups/data/testprint"


class PrinterSetup(Horizontal):
    def __init__(self, manager: Manager = None, **kwargs):
        super().__init__(**kwargs)
        self.manager = manager
        self.driver_mode = "search"
        self.devices = {}
        self.chosen_device = None
        self.chosen_driver = None
        self._log_handler = None

    def compose(self) -> ComposeResult:
        # Left Panel: installed queues
        with Vertical(id="left_panel"):
            yield Label("My Configured Printers", id="printers_title")
            yield SelectionList(id="installed_printers_list")
            yield Button("Print Test Page", id="test_page_btn", disabled=True)
            yield Button("Remove Selected Printer", id="remove_printer_btn", disabled=True)
            yield Label("System Log:")
            yield RichLog(id="printer_log", highlight=True, markup=True)
            yield Button("Copy Log", id="copy_log_btn")

        # Right Panel: devices and drivers
        with Vertical(id="right_panel"):
            yield Label("Driver Management", id="drivers_title")
            yield Input(placeholder="Enter Printer Make/Model (e.g., Brother HL-5270DN)", id="printer_input")
            yield Button("Search Drivers", id="search_btn")
            yield Label("Select Device or Driver:")
            yield SelectionList(id="driver_list")

            with Vertical(id="driver_actions"):
                yield Button("Scan Devices", id="scan_btn", variant="primary")

                # Manual Entry Section
                yield Label("— OR —", classes="section-label")
                with Horizontal(classes="manual-row"):
                    yield Input(placeholder="Enter IP (e.g. 192.168.1.5) or URI", id="manual_ip")
                    yield Button("Register Manual", id="manual_add_btn", variant="primary")

                yield Label("— Queue Options —", classes="section-label")
                yield Input(placeholder="Queue name (optional)", id="queue_name_input")
                yield Checkbox("Share this printer", id="share_chk")
                yield Button("Register Selected Printer", id="install_btn", disabled=True)

    def on_mount(self):
        if self.manager is None:
            self.manager = Manager()
        self._log_handler = attach_callback(self.log_message)
        self.run_worker(self.refresh_status(), group="status")

    def on_unmount(self):
        if self._log_handler:
            logging.getLogger("lpmanager").removeHandler(self._log_handler)
            self._log_handler = None

    def log_message(self, message: str):
        """Log a message to the local RichLog and the main app's RichLog if available."""
        try:
            log = self.query_one("#printer_log", RichLog)
            log.write(message)
        except Exception:
            pass

        if hasattr(self.app, "log_message"):
            self.app.log_message(message)

    async def refresh_status(self):
        """Reload the installed printers list."""
        printers_list = self.query_one("#installed_printers_list", SelectionList)
        printers_list.clear_options()

        try:
            printers = await self.manager.list()
        except Exception as e:
            self.log_message(f"[red]Could not list printers: {escape(str(e))}[/red]")
            printers = []

        for p in printers:
            marker = " (Default)" if p.is_default else ""
            printers_list.add_option((f"{escape(p.name)}{marker}  {escape(p.connection)}", p.name))

        self.query_one("#test_page_btn", Button).disabled = True
        self.query_one("#remove_printer_btn", Button).disabled = True

    @on(Button.Pressed, "#copy_log_btn")
    def copy_log(self):
        log = self.query_one("#printer_log", RichLog)
        content = "\n".join([strip.text for strip in log.lines])
        pyperclip.copy(content)
        self.notify("Log copied to clipboard")

    @on(Button.Pressed, "#search_btn")
    def on_search_btn(self):
        query = self.query_one("#printer_input", Input).value.strip()
        if not query:
            self.log_message("[red]Please enter a printer make/model.[/red]")
            return

        self.driver_mode = "search"
        self.query_one("#drivers_title", Label).update("Driver Results")
        self.query_one("#search_btn", Button).disabled = True
        self.query_one("#search_btn", Button).label = "Searching..."
        self.run_worker(self.search_drivers(query), exclusive=True)

    @on(Button.Pressed, "#scan_btn")
    def on_scan_btn(self):
        self.query_one("#scan_btn", Button).disabled = True
        self.query_one("#scan_btn", Button).label = "Scanning..."
        self.driver_mode = "scan"
        self.query_one("#drivers_title", Label).update("Discovered Devices")
        self.run_worker(self.scan_devices(), exclusive=True)

    @on(Button.Pressed, "#manual_add_btn")
    def on_manual_add_btn(self):
        raw_input = self.query_one("#manual_ip", Input).value.strip()
        if not raw_input:
            self.log_message("[red]Please enter an IP address or URI.[/red]")
            return

        uri = raw_input
        if "://" not in raw_input:
            # Assume IP address or hostname, default to ipp://
            uri = f"ipp://{raw_input}/ipp/print"
            self.log_message(f"Assuming ipp protocol for: {escape(raw_input)}")

        device = classify_uri(uri)
        self.log_message(f"[yellow]Starting manual registration for: {escape(device.uri_pretty)}[/yellow]")
        self.run_worker(self.register_device(device), exclusive=True)

    async def scan_devices(self):
        try:
            discovered = await self.manager.discover()

            driver_list = self.query_one("#driver_list", SelectionList)
            driver_list.clear_options()
            self.devices = {}
            self.chosen_device = None

            for backend, devices in discovered.items():
                for device in devices:
                    self.devices[device.uri] = device
                    label = f"{escape(device.model)}  ({escape(backend)}: {escape(device.protocol)})"
                    driver_list.add_option((label, device.uri))

            if not self.devices:
                self.log_message("[yellow]No devices found via lpinfo -v.[/yellow]")
                self.log_message("Check USB connection or ensure printer is on network.")

        except Exception as e:
            self.log_message(f"[red]Error scanning devices: {escape(str(e))}[/red]")
        finally:
            self.query_one("#scan_btn", Button).disabled = False
            self.query_one("#scan_btn", Button).label = "Scan Devices"

    async def search_drivers(self, query: str):
        try:
            drivers = await self.manager.find_drivers([query])

            driver_list = self.query_one("#driver_list", SelectionList)
            driver_list.clear_options()
            self.chosen_driver = None

            if drivers:
                for d in drivers:
                    label = f"{escape(d.make_and_model)}  ({escape(d.lang)})"
                    driver_list.add_option((label, d.driver))
            else:
                self.log_message(f"[yellow]No drivers found matching '{escape(query)}'.[/yellow]")

        except Exception as e:
            self.log_message(f"[red]Exception during search: {escape(str(e))}[/red]")

        finally:
            self.query_one("#search_btn", Button).disabled = False
            self.query_one("#search_btn", Button).label = "Search Drivers"

    @on(SelectionList.SelectedChanged, "#installed_printers_list")
    def on_printer_selected(self):
        selected = self.query_one("#installed_printers_list", SelectionList).selected
        has_selection = bool(selected)
        self.query_one("#test_page_btn", Button).disabled = not has_selection
        self.query_one("#remove_printer_btn", Button).disabled = not has_selection

    @on(SelectionList.SelectedChanged, "#driver_list")
    def on_driver_selected(self):
        selected = self.query_one("#driver_list", SelectionList).selected
        value = selected[0] if selected else None

        if self.driver_mode == "scan":
            self.chosen_device = self.devices.get(value)
        else:
            self.chosen_driver = value

        install_btn = self.query_one("#install_btn", Button)
        install_btn.disabled = self.chosen_device is None
        if self.chosen_device and self.chosen_driver:
            install_btn.label = "Register with Selected Driver"
        else:
            install_btn.label = "Register Selected Printer"

    @on(Button.Pressed, "#test_page_btn")
    def on_test_page_btn(self):
        selected = self.query_one("#installed_printers_list", SelectionList).selected
        for name in selected:
            self.log_message(f"Sending test page to {escape(name)}...")
            self.run_worker(self._print_test_page(name))

    async def _print_test_page(self, name):
        try:
            printer = await self.manager.get(name)
            if printer is None:
                self.log_message(f"[red]Printer {escape(name)} is no longer installed.[/red]")
                return
            job_id = await printer.print_file(TEST_PAGE, {"t": "Test Page"})
            self.log_message(f"[green]Test page sent to {escape(name)} ({escape(str(job_id))})[/green]")
        except Exception as e:
            self.log_message(f"[red]Failed to print test page: {escape(str(e))}[/red]")

    @on(Button.Pressed, "#remove_printer_btn")
    def on_remove_printer_btn(self):
        selected = self.query_one("#installed_printers_list", SelectionList).selected
        if not selected:
            return
        self.run_worker(self.remove_printers(list(selected)), exclusive=True)

    async def remove_printers(self, printers):
        try:
            for name in printers:
                await self.manager.uninstall(name)
            self.log_message("[green]Printer(s) removed.[/green]")
        except Exception as e:
            self.log_message(f"[red]Error removing printers: {escape(str(e))}[/red]")
        await self.refresh_status()

    @on(Button.Pressed, "#install_btn")
    def on_install_btn(self):
        if self.chosen_device is None:
            self.log_message("[red]Please scan and select a device first.[/red]")
            return
        self.log_message(f"[yellow]Starting registration for device: {escape(self.chosen_device.uri_pretty)}[/yellow]")
        self.run_worker(self.register_device(self.chosen_device), exclusive=True)

    def _install_options(self):
        options = {"shared": self.query_one("#share_chk", Checkbox).value}
        name = self.query_one("#queue_name_input", Input).value.strip()
        if name:
            options["name"] = name
        if self.chosen_driver:
            options["driver"] = self.chosen_driver
        return options

    async def register_device(self, device):
        try:
            options = self._install_options()
            if "driver" not in options:
                # Use the search box as a model hint when the URI carries none
                hint = self.query_one("#printer_input", Input).value.strip()
                if hint:
                    drivers = await self.manager.find_drivers([hint], maxsize=1)
                    if drivers:
                        options["driver"] = drivers[0].driver
                        self.log_message(f"Selected Driver: {escape(drivers[0].make_and_model)}")

            request = await self.manager.install(device, options)
            if request is None:
                self.log_message("[red]Could not find a driver for this device. Search for one and select it first.[/red]")
                return
            self.log_message(f"[green]Printer '{escape(request.name)}' successfully configured![/green]")
        except Exception as e:
            self.log_message(f"[red]Registration failed: {escape(str(e))}[/red]")
        await self.refresh_status()
