import unittest
from unittest.mock import patch

from textual.app import App
from textual.widgets import RichLog, SelectionList

from lpmanager.config import Settings
from lpmanager.executor import CommandResult
from lpmanager.main import LPManagerApp
from lpmanager.manager import Manager
from lpmanager.printer_ui import PrinterSetup

from test_printer_management import LPINFO_DEVICES, LPINFO_DRIVERS, LPSTAT_OUTPUT, FakeExecutor


def fake_manager():
    executor = FakeExecutor({
        ("lpstat", "-s"): CommandResult(LPSTAT_OUTPUT, b""),
        ("lpinfo", "-v"): CommandResult(LPINFO_DEVICES, b""),
        ("lpinfo", "-l", "-m"): CommandResult(LPINFO_DRIVERS, b""),
    })
    return Manager(Settings(use_sudo=False), executor), executor


class PanelApp(App):
    def __init__(self, manager):
        super().__init__()
        self.manager = manager

    def compose(self):
        yield PrinterSetup(manager=self.manager)


class TestPrinterSetup(unittest.IsolatedAsyncioTestCase):

    async def test_installed_printers_listed_on_mount(self):
        manager, _ = fake_manager()
        app = PanelApp(manager)
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            printers = app.query_one("#installed_printers_list", SelectionList)
            self.assertEqual(printers.option_count, 2)

    async def test_scan_lists_devices(self):
        manager, _ = fake_manager()
        app = PanelApp(manager)
        async with app.run_test() as pilot:
            panel = app.query_one(PrinterSetup)
            panel.driver_mode = "scan"
            await panel.scan_devices()
            await pilot.pause()

            self.assertEqual(len(panel.devices), 2)
            self.assertEqual(app.query_one("#driver_list", SelectionList).option_count, 2)

    async def test_search_lists_drivers(self):
        manager, _ = fake_manager()
        app = PanelApp(manager)
        async with app.run_test() as pilot:
            panel = app.query_one(PrinterSetup)
            await panel.search_drivers("Brother HL-5270DN")
            await pilot.pause()
            self.assertEqual(app.query_one("#driver_list", SelectionList).option_count, 1)

    async def test_register_device_runs_lpadmin(self):
        manager, executor = fake_manager()
        app = PanelApp(manager)
        async with app.run_test() as pilot:
            panel = app.query_one(PrinterSetup)
            await panel.scan_devices()
            device = next(d for d in panel.devices.values() if d.protocol == "dnssd")

            await panel.register_device(device)
            await pilot.pause()

            lpadmin = [cmd for cmd in executor.executed_commands if cmd[0] == "lpadmin"]
            self.assertEqual(len(lpadmin), 1)
            self.assertIn("brother-HL5270DN-cups-en.ppd", lpadmin[0])

    async def test_remove_printers(self):
        manager, executor = fake_manager()
        app = PanelApp(manager)
        async with app.run_test() as pilot:
            panel = app.query_one(PrinterSetup)
            await panel.remove_printers(["HP_LaserJet"])
            await pilot.pause()
            self.assertIn(["lpadmin", "-x", "HP_LaserJet"], executor.executed_commands)

    async def test_copy_log(self):
        manager, _ = fake_manager()
        app = PanelApp(manager)
        async with app.run_test() as pilot:
            panel = app.query_one(PrinterSetup)
            panel.log_message("hello")
            await pilot.pause()
            with patch("lpmanager.printer_ui.pyperclip.copy") as mock_copy:
                panel.copy_log()
            mock_copy.assert_called_once()


class TestApp(unittest.IsolatedAsyncioTestCase):

    async def test_app_composes_and_logs(self):
        manager, _ = fake_manager()
        with patch("lpmanager.main.Manager", return_value=manager), \
             patch("lpmanager.main.load_settings", return_value=Settings(use_sudo=False)):
            app = LPManagerApp()
            async with app.run_test() as pilot:
                await app.workers.wait_for_complete()
                app.log_message("Scanning...")
                await pilot.pause()
                self.assertIn("Scanning...", app.log_buffer)
                self.assertIsInstance(app.query_one("#main_log"), RichLog)


if __name__ == "__main__":
    unittest.main()
