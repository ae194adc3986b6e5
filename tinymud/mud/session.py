# tinymud/mud/session.py

import asyncio
import logging
from typing import Callable, Optional

from ..game.dispatch import process_input
from ..game.models import ConnState, Player
from ..game.states import NAME_PROMPT

log = logging.getLogger(__name__)


class ClientSession:
    """
    One connected client: its stream, what it has sent that we have not
    dealt with yet, what we have to send it, and how far through logging
    in it has got.

    Nothing here waits on the network except `pump`; everything else
    only touches the buffers.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        world,
        wakeup: Optional[Callable[[], None]] = None,
    ):
        self.reader = reader
        # None once the connection is gone
        self.writer: Optional[asyncio.StreamWriter] = writer
        self.world = world
        self._wakeup = wakeup

        peer = writer.get_extra_info("peername")
        if peer:
            self.address, self.port = peer[0], peer[1]
        else:
            self.address, self.port = "unknown", 0

        self.inbuf = bytearray()
        self.outbuf = bytearray()
        self.closing = False
        self.reset()

    def __repr__(self) -> str:
        return f"<ClientSession {self.player.name or '?'} {self.address}:{self.port} {self.state.value}>"

    def reset(self) -> None:
        """Back to the start of the login dialog."""
        self.state = ConnState.AWAITING_NAME
        self.player = Player(name="", room=self.world.config.initial_room)
        self.prompt = NAME_PROMPT
        self.bad_password_count = 0

    # expose the player's room so commands don't reach through
    @property
    def room(self) -> int:
        return self.player.room

    @room.setter
    def room(self, value: int) -> None:
        self.player.room = value

    @property
    def connected(self) -> bool:
        return self.writer is not None

    @property
    def is_playing(self) -> bool:
        return self.connected and self.state is ConnState.PLAYING and not self.closing

    @property
    def pending_output(self) -> bool:
        return bool(self.outbuf)

    # --- Output ---

    def enqueue(self, text: str) -> None:
        if not text:
            return
        self.outbuf += text.encode("utf-8", errors="replace")
        if self._wakeup is not None:
            self._wakeup()

    def on_writable(self, force: bool = False) -> None:
        """
        Hand queued output to the transport in `write_chunk` slices. Stops
        while the transport is still holding `write_high_water` bytes,
        unless `force` is set.
        """
        config = self.world.config
        while self.outbuf and self.connected:
            if self.writer.is_closing():
                self.disconnect()
                return

            transport = self.writer.transport
            if not force and transport.get_write_buffer_size() >= config.write_high_water:
                return

            chunk = bytes(self.outbuf[: config.write_chunk])
            try:
                self.writer.write(chunk)
            except (ConnectionError, OSError) as e:
                log.warning("Send to %s:%d failed: %s", self.address, self.port, e)
                self.disconnect()
                return
            del self.outbuf[: len(chunk)]

    # --- Input ---

    def on_readable(self, data: bytes) -> None:
        """
        Take a chunk read from the peer. An empty chunk means the peer has
        gone. Complete lines are dispatched; a partial line waits.
        """
        if self.closing:
            return

        if not data:
            log.info("Connection from %s:%d closed", self.address, self.port)
            self.disconnect()
            if self.state is ConnState.PLAYING:
                process_input(self, "quit")
            else:
                self.close()
            return

        self.inbuf += data

        while not self.closing:
            i = self.inbuf.find(b"\n")
            if i < 0:
                break
            line = bytes(self.inbuf[:i])
            del self.inbuf[: i + 1]
            process_input(self, line.decode("utf-8", errors="ignore").strip())

        if len(self.inbuf) > self.world.config.max_input:
            log.warning("Input from %s:%d too long, disconnecting", self.address, self.port)
            self.inbuf.clear()
            self.enqueue("Input line too long.\n")
            self.close()

    def on_exception(self, exc: BaseException) -> None:
        log.warning("Exception on connection %s:%d: %s", self.address, self.port, exc)

    async def pump(self) -> None:
        """Read from the peer until it goes away or the session closes."""
        while self.connected and not self.closing:
            try:
                data = await self.reader.read(self.world.config.read_chunk)
            except OSError as e:
                self.on_exception(e)
                data = b""

            # reaped while we were waiting
            if not self.connected:
                break

            self.on_readable(data)
            if not data:
                break

    # --- Teardown ---

    def close(self) -> None:
        """Mark for the reaper; queued output still goes out first."""
        self.closing = True
        if self._wakeup is not None:
            self._wakeup()

    def disconnect(self) -> None:
        if self.writer is not None:
            self.writer.close()
            self.writer = None

    def destroy(self) -> None:
        """Final flush, save a playing character, drop the connection."""
        self.on_writable(force=True)
        if self.state is ConnState.PLAYING and self.player.name:
            self.world.store.save(self.player)
        self.disconnect()
