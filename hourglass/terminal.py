"""Terminal session: keyboard input mode, alternate screen, and frame drawing."""

from __future__ import annotations

import logging
import os
import signal
import sys
import threading
import time
from types import FrameType, TracebackType
from typing import IO, Any, Optional

from rich.console import Console, RenderableType
from rich.live import Live

from hourglass import display
from hourglass.errors import InputError, RenderError, TerminalError

if os.name == "nt":
    import msvcrt
else:
    import select
    import termios
    import tty

log = logging.getLogger(__name__)

_NAMED_KEYS: dict[str, str] = {
    "\x1b": "escape",
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    "\x7f": "backspace",
    "\x08": "backspace",
}


def decode_key(data: bytes) -> str:
    """Turn one chunk of raw keyboard input into a key name.

    A lone ESC byte is ``"escape"``; longer escape sequences (arrows,
    function keys) and undecodable bytes are ``"unknown"``.
    """
    if not data:
        return "unknown"
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return "unknown"
    if len(text) != 1:
        return "unknown"
    return _NAMED_KEYS.get(text, text)


def _utf8_length(lead: int) -> int:
    if 0xC0 <= lead < 0xE0:
        return 2
    if 0xE0 <= lead < 0xF0:
        return 3
    if 0xF0 <= lead < 0xF8:
        return 4
    return 1


def split_key(data: bytes) -> tuple[bytes, bytes]:
    """Split the first key event off buffered input, returning ``(event, rest)``.

    An event is one UTF-8 character, or an ESC together with the CSI (``ESC [``)
    or SS3 (``ESC O``) sequence it starts. Any other ESC stands alone.
    """
    if not data:
        return b"", b""
    if data[0] == 0x1B:
        if len(data) > 2 and data[1:2] == b"[":
            end = 2
            while end < len(data) and not 0x40 <= data[end] <= 0x7E:
                end += 1
            end = min(end + 1, len(data))
            return data[:end], data[end:]
        if len(data) > 2 and data[1:2] == b"O":
            return data[:3], data[3:]
        return data[:1], data[1:]
    n = _utf8_length(data[0])
    return data[:n], data[n:]


def _raise_exit(signum: int, frame: Optional[FrameType]) -> None:
    raise SystemExit(128 + signum)


class TerminalSession:
    """Owns the terminal for a single timer run.

    Entering puts stdin into cbreak mode and opens a full-screen
    :class:`rich.live.Live` on the alternate screen with the cursor hidden.
    Leaving undoes both, whichever way the block exits.
    """

    def __init__(self, console: Optional[Console] = None, stdin: Optional[IO[Any]] = None) -> None:
        self.console = console or display.console
        self._stdin = stdin or sys.stdin
        self._saved_attrs: Optional[list[Any]] = None
        self._live: Optional[Live] = None
        self._pending = b""
        self._previous_sigterm: Any = None

    # -- lifecycle ----------------------------------------------------------

    def __enter__(self) -> TerminalSession:
        try:
            self.enable_raw_mode()
            self._install_sigterm_handler()
            self._live = Live(
                console=self.console,
                screen=True,
                auto_refresh=False,
                redirect_stdout=False,
                redirect_stderr=False,
            )
            self._live.start()
        except BaseException:
            self._restore(suppress=True)
            raise
        log.debug("Terminal session started.")
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        # Don't let a restore failure mask the error that ended the run.
        self._restore(suppress=exc_type is not None)
        log.debug("Terminal session closed.")

    def _restore(self, suppress: bool) -> None:
        failure: Optional[BaseException] = None
        if self._live is not None:
            try:
                self._live.stop()
            except Exception as e:
                failure = e
            self._live = None
        try:
            self.disable_raw_mode()
        except TerminalError as e:
            failure = failure or e
        self._restore_sigterm_handler()
        if failure is not None:
            log.warning("Terminal restore failed: %s", failure)
            if not suppress:
                if isinstance(failure, TerminalError):
                    raise failure
                raise TerminalError(f"Unable to restore the terminal: {failure}") from failure

    def _install_sigterm_handler(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            return
        self._previous_sigterm = signal.signal(signal.SIGTERM, _raise_exit)

    def _restore_sigterm_handler(self) -> None:
        if self._previous_sigterm is None:
            return
        signal.signal(signal.SIGTERM, self._previous_sigterm)
        self._previous_sigterm = None

    # -- input mode ---------------------------------------------------------

    def enable_raw_mode(self) -> None:
        """Deliver keys immediately, without echo or line editing."""
        if os.name == "nt":
            return
        try:
            fd = self._stdin.fileno()
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except (OSError, ValueError, termios.error) as e:
            self._saved_attrs = None
            raise TerminalError(f"Unable to enable raw mode: {e}") from e

    def disable_raw_mode(self) -> None:
        if os.name == "nt" or self._saved_attrs is None:
            return
        try:
            termios.tcsetattr(self._stdin.fileno(), termios.TCSADRAIN, self._saved_attrs)
        except (OSError, ValueError, termios.error) as e:
            raise TerminalError(f"Unable to disable raw mode: {e}") from e
        finally:
            self._saved_attrs = None

    # -- input --------------------------------------------------------------

    def poll(self, timeout: float) -> bool:
        """Wait up to ``timeout`` seconds for a key; True if one is ready."""
        if self._pending:
            return True
        try:
            if os.name == "nt":
                deadline = time.monotonic() + timeout
                while not msvcrt.kbhit():
                    if time.monotonic() >= deadline:
                        return False
                    time.sleep(0.005)
                return True
            ready, _, _ = select.select([self._stdin], [], [], timeout)
            return bool(ready)
        except (OSError, ValueError) as e:
            raise InputError(f"Unable to poll for events: {e}") from e

    def read_key(self) -> str:
        """Read exactly one key event."""
        try:
            if os.name == "nt":
                char = msvcrt.getwch()
                if char in ("\x00", "\xe0"):
                    msvcrt.getwch()
                    return "unknown"
                return decode_key(char.encode("utf-8"))
            fd = self._stdin.fileno()
            if not self._pending:
                self._pending = os.read(fd, 32)
            event, self._pending = split_key(self._pending)
            if event and event[0] != 0x1B:
                missing = _utf8_length(event[0]) - len(event)
                if missing > 0:
                    event += os.read(fd, missing)
            return decode_key(event)
        except (OSError, ValueError) as e:
            raise InputError(f"Unable to read events: {e}") from e

    # -- output -------------------------------------------------------------

    def draw(self, renderable: RenderableType) -> None:
        """Replace the whole screen with ``renderable``."""
        if self._live is None:
            raise RenderError("Terminal session is not active")
        try:
            self._live.update(renderable, refresh=True)
        except OSError as e:
            raise RenderError(f"Unable to draw frame: {e}") from e
