# tinymud/mud/server.py

import asyncio
import logging
import signal
import socket
import struct
import time
from typing import Optional, Tuple

from ..config import VERSION, Config
from ..game.models import World
from ..game.world import load_world
from .session import ClientSession

log = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = ("SIGINT", "SIGTERM", "SIGHUP")


def welcome_banner() -> str:
    return f"\nWelcome to the Tiny MUD Server version {VERSION}\n"


class MudServer:
    """
    Owns the listener and the session list. Reading is done by one task
    per connection; everything else happens in `serve`, once per tick:
    periodic messages, reaping closed sessions, and flushing output.
    """

    def __init__(self, world: World):
        self.world = world
        self.config: Config = world.config
        self.started = asyncio.Event()
        self.listen_address: Optional[Tuple[str, int]] = None
        self._wakeup = asyncio.Event()
        self._server: Optional[asyncio.AbstractServer] = None
        self._last_message = time.monotonic()
        self._signals = []

    @property
    def sessions(self):
        return self.world.sessions

    # --- Listener ---

    def make_listener(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            # don't let closed sockets linger
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_LINGER, struct.pack("ii", 0, 0))
            sock.bind((self.config.host, self.config.port))
            sock.setblocking(False)
        except OSError:
            sock.close()
            raise
        return sock

    async def _client_connected(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        peer = writer.get_extra_info("peername")
        address = peer[0] if peer else "unknown"

        if self.world.control.is_blocked(address):
            log.warning("Rejected connection from %s", address)
            writer.close()
            return

        session = ClientSession(reader, writer, self.world, wakeup=self._wakeup.set)
        self.sessions.append(session)
        log.info("New player accepted from address %s, port %d", session.address, session.port)

        session.enqueue(welcome_banner())
        session.enqueue(self.world.messages["welcome"])
        session.enqueue(session.prompt)

        await session.pump()

    # --- Signals ---

    def _bailout(self, signum: int) -> None:
        log.warning("Terminated on signal %d", signum)
        self.world.request_shutdown()
        self._wakeup.set()

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for name in SHUTDOWN_SIGNALS:
            signum = getattr(signal, name, None)
            if signum is None:
                continue
            try:
                loop.add_signal_handler(signum, self._bailout, signum)
            except NotImplementedError:
                signal.signal(signum, lambda s, _frame: self._bailout(s))
            self._signals.append(signum)

    def _remove_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for signum in self._signals:
            try:
                loop.remove_signal_handler(signum)
            except NotImplementedError:
                signal.signal(signum, signal.SIG_DFL)
        self._signals.clear()

    # --- Tick ---

    def periodic_updates(self, now: Optional[float] = None) -> None:
        """Things that don't depend on player input."""
        if now is None:
            now = time.monotonic()
        if now - self._last_message > self.config.message_interval:
            self.world.send_to_all(self.config.periodic_message)
            self._last_message = now

    def remove_inactive(self) -> None:
        for session in list(self.sessions):
            if not session.connected or session.closing:
                log.debug("Reaping %r", session)
                session.destroy()
                self.sessions.remove(session)

    def flush_output(self) -> None:
        for session in self.sessions:
            if session.connected and session.pending_output:
                session.on_writable()

    def tick(self) -> None:
        self.periodic_updates()
        self.remove_inactive()
        self.flush_output()

    async def _wait(self, timeout: float) -> None:
        try:
            await asyncio.wait_for(self._wakeup.wait(), timeout)
        except asyncio.TimeoutError:
            pass
        self._wakeup.clear()

    def close_all(self) -> None:
        log.info("Closing all comms connections.")
        for session in self.sessions:
            session.destroy()
        self.sessions.clear()

    async def serve(self, install_signals: bool = True) -> None:
        """
        Listen and run the game until a shutdown is requested. Raises
        OSError if the port cannot be bound.
        """
        sock = self.make_listener()
        self._server = await asyncio.start_server(
            self._client_connected, sock=sock, backlog=socket.SOMAXCONN
        )
        self.listen_address = sock.getsockname()[:2]

        if install_signals:
            self._install_signal_handlers()

        log.info("Accepting connections on %s:%d", *self.listen_address)
        self.started.set()

        try:
            while not self.world.stop_requested:
                self.tick()
                await self._wait(self.config.tick)
        finally:
            # game over - tell them all
            self.world.send_to_all("\n\n** Game shut down. **\n\n")
            self.close_all()
            self._server.close()
            await self._server.wait_closed()
            if install_signals:
                self._remove_signal_handlers()

        log.info("Game shut down.")


async def run_server(config: Config) -> None:
    world = load_world(config)
    server = MudServer(world)
    await server.serve()
