"""
Interactive command-line frontend.

First-run setup wizard and the numbered main menu used for headless
operation. Input and output callables are injectable so the flows can be
driven from tests.
"""

import getpass
import logging
import signal
import threading
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Callable, Optional

from .context import AgentContext
from .core.credential_store import (
    MAX_PASSWORD_BYTES,
    MIN_PASSWORD_LENGTH,
    MIN_TOKEN_LENGTH,
    MIN_USERNAME_LENGTH,
)
from .core.errors import (
    AuthError,
    BindError,
    LifecycleError,
    PersistenceError,
    RecoveryError,
    ValidationError,
)
from .core.models import NotifierConfig
from .server.lifecycle import ServerLifecycle


logger = logging.getLogger(__name__)

MENU = """
Main Menu
-------------
1. Start Server
2. Stop Server
3. Server Status
4. Change Port
5. Configure Email Notifier
6. View Configuration
7. Run as Service (daemon mode)
8. Show My Access Token
9. Recover Credentials
10. Exit"""


class CrustyCLI:
    """Setup wizard and main menu around an AgentContext and a ServerLifecycle."""

    def __init__(
        self,
        context: AgentContext,
        lifecycle: ServerLifecycle,
        input_fn: Callable[[str], str] = input,
        password_fn: Callable[[str], str] = getpass.getpass,
        output: Callable[..., None] = print,
        bind_timeout: float = 5.0,
    ):
        self.context = context
        self.lifecycle = lifecycle
        self._input = input_fn
        self._password = password_fn
        self._out = output
        self.bind_timeout = bind_timeout

    def _ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def run(self):
        """Run setup if needed, then the main menu until Exit."""
        self._out("Crusty-Crawler CLI Mode")
        self._out("=" * 26)

        if not self.context.store.has_users():
            self._out("\nWelcome! First-time setup required.\n")
            self.setup_wizard()
        else:
            self._out("\nConfiguration found.\n")

        self.main_menu()

    def setup_wizard(self):
        """Collect the first user's credentials and register them."""
        self._out("Setup Wizard")
        self._out("-" * 15)

        while True:
            username, password, email, access_token = self._prompt_credentials()
            try:
                self.context.store.register(username, password, email, access_token)
            except ValidationError as e:
                self._out(f"\nRegistration failed: {e}\n")
                continue
            except PersistenceError as e:
                self._out(f"\nRegistration failed: {e}")
                raise
            break

        self._out("\nUser registered successfully!")
        self._out(f"Your access token: {access_token}\n")
        self._out("Save this token - you'll need it to access the web interface.\n")

    def _prompt_credentials(self):
        while True:
            username = self._ask("Enter username (min 3 characters): ")
            if len(username) >= MIN_USERNAME_LENGTH:
                break
            self._out("Username must be at least 3 characters.\n")

        while True:
            password = self._password("Enter password (min 8 characters): ")
            if len(password) < MIN_PASSWORD_LENGTH:
                self._out("Password must be at least 8 characters.\n")
                continue
            if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
                self._out("Password must be at most 72 bytes.\n")
                continue
            if self._password("Confirm password: ") != password:
                self._out("Passwords do not match.\n")
                continue
            break

        while True:
            email = self._ask("Enter email address: ")
            if "@" in email:
                break
            self._out("Please enter a valid email address.\n")

        if self._ask("\nGenerate random access token? (Y/n): ").lower() == "n":
            while True:
                access_token = self._ask("Enter access token (min 8 characters): ")
                if len(access_token) >= MIN_TOKEN_LENGTH:
                    break
                self._out("Access token must be at least 8 characters.\n")
        else:
            access_token = self.context.store.suggest_token()
            self._out(f"Generated token: {access_token}")

        return username, password, email, access_token

    def main_menu(self):
        actions = {
            "1": self.start_server,
            "2": self.stop_server,
            "3": self.show_status,
            "4": self.change_port,
            "5": self.configure_notifier,
            "6": self.view_config,
            "7": self.run_daemon,
            "8": self.show_token,
            "9": self.recover_credentials,
        }
        while True:
            self._out(MENU)
            choice = self._ask("\nSelect option (1-10): ")
            if choice == "10":
                if self.lifecycle.status()[0]:
                    self.stop_server()
                self._out("\nGoodbye!")
                return
            action = actions.get(choice)
            if action is None:
                self._out("Invalid option. Please try again.")
                continue
            action()

    def start_server(self) -> bool:
        """Start the listener and wait for the bind result."""
        running, port = self.lifecycle.status()
        if running:
            self._out("Server is already running!")
            return False

        self._out(f"\nStarting server on port {port}...")
        try:
            bound = self.lifecycle.start()
        except LifecycleError as e:
            self._out(f"{e}")
            return False

        try:
            port = bound.result(timeout=self.bind_timeout)
        except BindError as e:
            self._out(f"Failed to start server: {e}")
            return False
        except FutureTimeout:
            self._out("Server is still starting; check status shortly.")
            return True

        self._out("Server started successfully!")
        self._out(f"Access at: http://localhost:{port}")
        self._out(f"Network access: http://[YOUR-IP]:{port}")
        return True

    def stop_server(self):
        try:
            self.lifecycle.stop()
        except LifecycleError:
            self._out("Server is not running!")
            return
        self._out("\nServer stopped successfully!")

    def show_status(self):
        running, port = self.lifecycle.status()
        self._out("\nServer Status")
        self._out("-" * 16)
        self._out(f"Status: {'Running' if running else 'Stopped'}")
        self._out(f"Port: {port}")
        if running:
            self._out(f"Local URL: http://localhost:{port}")
            self._out(f"Network URL: http://[YOUR-IP]:{port}")

    def change_port(self):
        if self.lifecycle.status()[0]:
            self._out("Please stop the server before changing the port.")
            return
        raw = self._ask("\nEnter new port number (1024-65535): ")
        try:
            self.lifecycle.set_port(int(raw))
        except (ValueError, LifecycleError):
            self._out("Invalid port number. Must be between 1024 and 65535.")
            return
        self._out(f"Port changed to {raw}")

    def configure_notifier(self):
        self._out("\nEmail Notifier Configuration")
        self._out("-" * 29)
        server = self._ask("SMTP Server: ")
        port_raw = self._ask("Port (e.g., 587): ")
        try:
            port = int(port_raw)
        except ValueError:
            self._out("Invalid port number.")
            return
        username = self._ask("Username: ")
        password = self._password("Password: ").strip()
        use_tls = self._ask("Use TLS? (Y/n): ").lower() != "n"

        try:
            config = NotifierConfig(
                server=server, port=port, username=username, password=password, use_tls=use_tls,
            )
        except ValueError:
            # pydantic's ValidationError subclasses ValueError
            self._out("Invalid port number.")
            return

        try:
            self.context.store.configure_notifier(config)
        except PersistenceError as e:
            self._out(f"Failed to save configuration: {e}")
            return
        self._out("Notifier configuration saved!")

    def view_config(self):
        _, port = self.lifecycle.status()
        store = self.context.store
        self._out("\nConfiguration")
        self._out("-" * 16)
        self._out(f"Port: {port}")
        self._out(f"Auth File: {store.path}")
        self._out(f"Registered Users: {store.user_count()}")
        self._out(f"Email Configured: {'Yes' if store.notifier_configured() else 'No'}")

    def show_token(self):
        """Interactive login: print the access token for a username/password pair."""
        username = self._ask("Username: ")
        password = self._password("Password: ")
        try:
            token = self.context.store.authenticate(username, password)
        except AuthError:
            self._out("Invalid username or password")
            return
        except PersistenceError as e:
            self._out(f"Login failed: {e}")
            return
        self._out(f"Your access token: {token}")

    def recover_credentials(self):
        email = self._ask("Enter the email address you registered with: ")
        try:
            self.context.store.recover(email)
        except RecoveryError as e:
            self._out(f"Recovery failed: {e}")
            return
        self._out("Recovery email sent. Check your inbox.")

    def run_daemon(self, stop_event: Optional[threading.Event] = None):
        """Serve until SIGINT/SIGTERM (or `stop_event`), then stop."""
        self._out("\nStarting in daemon mode...")
        if not self.lifecycle.status()[0] and not self.start_server():
            return

        stop_event = stop_event or threading.Event()
        previous = {}
        if threading.current_thread() is threading.main_thread():
            for sig in (signal.SIGINT, signal.SIGTERM):
                previous[sig] = signal.signal(sig, lambda *_: stop_event.set())

        self._out("Server is running. Press Ctrl+C to stop.\n")
        try:
            while not stop_event.is_set() and self.lifecycle.status()[0]:
                stop_event.wait(0.5)
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)

        self._out("\nShutting down...")
        if self.lifecycle.status()[0]:
            self.stop_server()
        self.lifecycle.wait_stopped(self.bind_timeout)
