"""
Server Lifecycle - start/stop control for the HTTP listener.

The listener runs uvicorn on its own thread so the interactive frontend
keeps running while requests are served. At most one listener exists per
lifecycle object; stopping is cooperative through a one-shot signal that
flips uvicorn's should_exit flag.
"""

import logging
import os
import socket
import threading
from concurrent.futures import Future
from typing import Callable, Optional, Tuple

import uvicorn

from ..core.errors import AlreadyRunning, BindError, NotRunning
from ..core.models import ServerState


logger = logging.getLogger(__name__)

MIN_USER_PORT = 1024
MAX_PORT = 65535


def validate_port(port) -> int:
    """Return `port` as an int, or raise ValueError if it is not 0-65535."""
    try:
        value = int(port)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid port number: {port}") from None
    if not 0 <= value <= MAX_PORT:
        raise ValueError(f"Invalid port number: {port}")
    return value


class ShutdownSignal:
    """
    One-shot stop request for a single listener.

    fire() only has an effect the first time; later calls return False.
    A signal fired before the server is attached stops it as soon as it is.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._fired = False
        self._server: Optional[uvicorn.Server] = None

    def attach(self, server: uvicorn.Server):
        with self._lock:
            self._server = server
            fired = self._fired
        if fired:
            server.should_exit = True

    def fire(self) -> bool:
        with self._lock:
            if self._fired:
                return False
            self._fired = True
            server = self._server
        if server is not None:
            server.should_exit = True
        return True

    @property
    def fired(self) -> bool:
        with self._lock:
            return self._fired


class ServerLifecycle:
    """
    Owns the running/stopped state of the HTTP listener.

    The state lock is only held to read or flip fields, never across
    binding or serving.
    """

    def __init__(
        self,
        app_factory: Callable,
        host: str = "0.0.0.0",
        port: int = 3000,
        join_timeout: float = 5.0,
    ):
        self._app_factory = app_factory
        self.host = host
        self.join_timeout = join_timeout
        self._lock = threading.Lock()
        self._state = ServerState.STOPPED
        self._port = validate_port(port)
        self._shutdown: Optional[ShutdownSignal] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> ServerState:
        with self._lock:
            return self._state

    def status(self) -> Tuple[bool, int]:
        """(running, port) snapshot."""
        with self._lock:
            return self._state.is_running, self._port

    def set_port(self, port: int):
        """Change the port used by the next start(). Only allowed while stopped."""
        value = validate_port(port)
        if value < MIN_USER_PORT:
            raise ValueError("Invalid port number. Must be between 1024 and 65535.")
        with self._lock:
            if self._state.is_running:
                raise AlreadyRunning("Please stop the server before changing the port.")
            self._port = value

    def start(self, port: Optional[int] = None) -> Future:
        """
        Start the listener in the background.

        Raises AlreadyRunning if a listener is active; the active one is
        left untouched. The returned future resolves to the bound port, or
        fails with BindError if the port could not be bound, in which case
        the state is already back to STOPPED.
        """
        if port is not None:
            port = validate_port(port)

        # A listener that was just stopped may still hold its socket
        self._join_previous()

        with self._lock:
            if self._state.is_running:
                raise AlreadyRunning()
            if port is not None:
                self._port = port
            port = self._port

            signal = ShutdownSignal()
            bound: Future = Future()
            thread = threading.Thread(
                target=self._serve,
                args=(port, signal, bound),
                name=f"crusty-listener-{port}",
                daemon=True,
            )
            self._shutdown = signal
            self._state = ServerState.STARTING
            self._thread = thread

        logger.info(f"Server starting on port {port}")
        thread.start()
        return bound

    def stop(self):
        """
        Request the listener to stop.

        Raises NotRunning without changing state if nothing is running.
        The state reads STOPPED as soon as this returns; the listener thread
        winds down on its own.
        """
        with self._lock:
            if not self._state.is_running or self._shutdown is None:
                raise NotRunning()
            signal = self._shutdown
            self._shutdown = None
            self._state = ServerState.STOPPING

        signal.fire()

        with self._lock:
            if self._state is ServerState.STOPPING:
                self._state = ServerState.STOPPED

        logger.info("Server shutdown initiated")

    def wait_stopped(self, timeout: Optional[float] = None) -> bool:
        """Block until the listener thread has exited. Returns False on timeout."""
        with self._lock:
            thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _join_previous(self):
        with self._lock:
            thread = self._thread
            running = self._state.is_running
        if thread is not None and not running and thread.is_alive():
            thread.join(self.join_timeout)
            if thread.is_alive():
                logger.warning("Previous listener is still shutting down")

    def _bind(self, port: int) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            if os.name != "nt":
                # Windows lets SO_REUSEADDR steal a port that is in use
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, port))
            sock.listen(socket.SOMAXCONN)
        except OSError:
            sock.close()
            raise
        return sock

    def _finish(self, signal: ShutdownSignal):
        """Mark this listener's lifecycle as stopped, unless it was already replaced."""
        with self._lock:
            if self._shutdown is signal:
                self._shutdown = None
                self._state = ServerState.STOPPED

    def _serve(self, port: int, signal: ShutdownSignal, bound: Future):
        try:
            sock = self._bind(port)
        except OSError as e:
            logger.error(f"Failed to bind to port {port}: {e}")
            self._finish(signal)
            bound.set_exception(BindError(f"Failed to bind to port {port}: {e}"))
            return

        actual_port = sock.getsockname()[1]
        with self._lock:
            if self._shutdown is signal:
                self._state = ServerState.RUNNING
                self._port = actual_port
        bound.set_result(actual_port)
        logger.info(f"Server running at http://{self.host}:{actual_port}")

        try:
            server = uvicorn.Server(uvicorn.Config(
                self._app_factory(),
                log_config=None,
                lifespan="off",
            ))
            signal.attach(server)
            server.run(sockets=[sock])
        except Exception as e:
            logger.error(f"Listener on port {actual_port} failed: {e}", exc_info=True)
        finally:
            sock.close()
            self._finish(signal)
            logger.info(f"Server on port {actual_port} stopped")
