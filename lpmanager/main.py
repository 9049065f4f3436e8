import argparse
import datetime
import logging
import os

from textual import on
from textual.app import App, ComposeResult
from textual.widgets import Button, Footer, Header, Label, RichLog, TabbedContent, TabPane

from .config import config_path, load_settings, save_settings
from .log import setup_logging
from .manager import Manager
from .printer_ui import PrinterSetup


class LPManagerApp(App):
    """Terminal front end for lpmanager."""

    TITLE = "lpmanager - CUPS Printers"
    CSS_PATH = "styles.tcss"
    BINDINGS = [
        ("q", "quit", "Quit"),
        ("d", "toggle_dark", "Toggle Dark Mode"),
        ("r", "refresh", "Refresh Printers"),
    ]

    def __init__(self, config_file=None, **kwargs):
        super().__init__(**kwargs)
        self.config_file = config_path(config_file)
        self.settings = load_settings(self.config_file)
        self.log_buffer = []

    def on_mount(self) -> None:
        self.apply_theme(self.settings.theme)

    def log_message(self, message: str) -> None:
        """Log a message to the buffer and the RichLog widget."""
        self.log_buffer.append(str(message))
        try:
            self.query_one("#main_log", RichLog).write(message)
        except Exception:
            pass

    def apply_theme(self, theme: str) -> None:
        if theme == "light":
            self.theme = "textual-light"
            self.add_class("light-mode")
        else:
            self.theme = "textual-dark"
            self.remove_class("light-mode")

    def action_toggle_dark(self) -> None:
        theme = "dark" if self.settings.theme == "light" else "light"
        self.apply_theme(theme)
        try:
            self.settings = save_settings({"theme": theme}, self.config_file)
        except OSError as e:
            self.log_message(f"Error saving config: {e}")

    def action_refresh(self) -> None:
        panel = self.query_one(PrinterSetup)
        panel.run_worker(panel.refresh_status(), group="status")

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with TabbedContent():
            with TabPane(title="Printers", id="printer"):
                yield PrinterSetup(manager=Manager(self.settings))

            with TabPane(title="Logs", id="logs"):
                yield Label("System Logs")
                yield Button("Export Logs", id="export_logs_btn")
                yield RichLog(id="main_log", markup=True)

        yield Footer()

    @on(Button.Pressed, "#export_logs_btn")
    def export_logs(self):
        try:
            timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"lpmanager_logs_{timestamp}.txt"
            filepath = os.path.join(os.path.expanduser("~"), filename)

            with open(filepath, "w") as f:
                f.write("\n".join(self.log_buffer))

            self.notify(f"Logs exported to {filepath}")
            self.log_message(f"Logs exported to {filepath}")
        except OSError as e:
            self.notify(f"Failed to export logs: {e}", severity="error")
            self.log_message(f"Failed to export logs: {e}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Manage CUPS printers from the terminal.")
    parser.add_argument("--config", help="path to config.json")
    parser.add_argument("-v", "--verbose", action="store_true", help="log commands as they run")
    args = parser.parse_args(argv)

    settings = load_settings(args.config)
    logger = setup_logging(log_file=settings.log_file, verbose=args.verbose)
    # The TUI owns the terminal; Rich console output would corrupt it
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)

    app = LPManagerApp(config_file=args.config)
    app.run()


if __name__ == "__main__":
    main()
