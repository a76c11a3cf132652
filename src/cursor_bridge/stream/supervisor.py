"""Process supervisor — owns one Cursor Agent CLI subprocess per invocation."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Mapping, Sequence
from dataclasses import dataclass

from cursor_bridge.stream.cancel import CancelToken

logger = logging.getLogger(__name__)

#: Maximum bytes per JSONL line from subprocess stdout (1 MB).
_MAX_LINE_BYTES = 1_048_576


@dataclass(frozen=True)
class ProcessExit:
    """How a supervised process ended.

    Exactly one of ``returncode`` / ``spawn_error`` is meaningful: a process
    that never started has ``returncode=None`` and a ``spawn_error`` message.
    """

    returncode: int | None
    stderr: str = ""
    spawn_error: str | None = None

    @property
    def spawned(self) -> bool:
        return self.spawn_error is None


class ProcessSupervisor:
    """Spawn the CLI, stream its stdout lines, and report a single exit.

    * stdin is closed, stdout/stderr are piped.
    * stderr is collected concurrently, for diagnostics only.
    * A cancel listener sends SIGTERM and is removed once the process exits.
    * :meth:`wait` resolves once; later calls return the same ``ProcessExit``.
    """

    def __init__(
        self,
        executable: str,
        args: Sequence[str],
        *,
        env: Mapping[str, str] | None = None,
        cancel_token: CancelToken | None = None,
        name: str = "cursor-agent",
    ) -> None:
        self.name = name
        self._executable = executable
        self._args = list(args)
        self._env = dict(env) if env is not None else None
        self._cancel_token = cancel_token

        self._process: asyncio.subprocess.Process | None = None
        self._stderr_task: asyncio.Task[bytes] | None = None
        self._exit: ProcessExit | None = None
        self._listening = False

    @property
    def pid(self) -> int | None:
        if self._process is None:
            return None
        return self._process.pid

    @property
    def exit(self) -> ProcessExit | None:
        """The recorded exit, once the process has finished or failed to spawn."""
        return self._exit

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    async def start(self) -> bool:
        """Spawn the subprocess. Returns ``False`` on spawn failure.

        Spawn failures are recorded as the exit and never raised.
        """
        if self._process is not None or self._exit is not None:
            msg = f"{self.name}: supervisor already started"
            raise RuntimeError(msg)

        try:
            self._process = await asyncio.create_subprocess_exec(
                self._executable,
                *self._args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                limit=_MAX_LINE_BYTES,
                env=self._env,
                start_new_session=True,
            )
        except FileNotFoundError:
            error_msg = (
                f"Cursor CLI not found: '{self._executable}'. "
                "Install the Cursor Agent CLI or set CURSOR_AGENT_PATH."
            )
            logger.error("%s: %s", self.name, error_msg)
            self._complete(ProcessExit(returncode=None, spawn_error=error_msg))
            return False
        except OSError as exc:
            error_msg = f"Failed to spawn Cursor CLI: {exc}"
            logger.error("%s: %s", self.name, error_msg)
            self._complete(ProcessExit(returncode=None, spawn_error=error_msg))
            return False

        logger.debug("%s: spawned pid %s", self.name, self._process.pid)
        if self._process.stderr is not None:
            self._stderr_task = asyncio.create_task(self._process.stderr.read())
        if self._cancel_token is not None:
            self._listening = True
            self._cancel_token.add_listener(self.terminate)
        return True

    def terminate(self) -> None:
        """Send SIGTERM to a still-running process."""
        proc = self._process
        if proc is None or proc.returncode is not None or self._exit is not None:
            return
        logger.info("%s: terminating pid %s", self.name, proc.pid)
        with contextlib.suppress(ProcessLookupError):
            proc.terminate()

    async def lines(self) -> AsyncIterator[str]:
        """Yield decoded stdout lines until EOF."""
        proc = self._process
        if proc is None or proc.stdout is None:
            return

        while True:
            try:
                line_bytes = await proc.stdout.readline()
            except ValueError:
                # Line exceeded StreamReader buffer limit; skip it and keep reading.
                logger.warning(
                    "%s: stdout line exceeded %d bytes, skipping",
                    self.name,
                    _MAX_LINE_BYTES,
                )
                continue

            if not line_bytes:
                break

            yield line_bytes.decode(errors="replace")

    async def wait(self) -> ProcessExit:
        """Wait for the process to exit and return how it ended."""
        if self._exit is not None:
            return self._exit

        proc = self._process
        if proc is None:
            msg = f"{self.name}: wait() called before start()"
            raise RuntimeError(msg)

        # Drain leftover stdout so the child cannot block on a full pipe.
        if proc.stdout is not None and not proc.stdout.at_eof():
            with contextlib.suppress(OSError, ValueError):
                await proc.stdout.read()

        stderr_bytes = b""
        if self._stderr_task is not None:
            try:
                stderr_bytes = await self._stderr_task
            except (OSError, ValueError) as exc:
                logger.warning("%s: failed to read stderr: %s", self.name, exc)

        returncode = await proc.wait()
        self._stop_listening()

        stderr_text = stderr_bytes.decode(errors="replace").strip()
        if returncode != 0:
            logger.warning(
                "%s: Cursor CLI exited with code %s: %s",
                self.name,
                returncode,
                stderr_text[:2048],
            )
        return self._complete(ProcessExit(returncode=returncode, stderr=stderr_text))

    async def kill(self) -> None:
        """Force-kill the process and reap it. Used when the caller's task dies."""
        proc = self._process
        if proc is None or self._exit is not None:
            return
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
        returncode = await proc.wait()
        self._stop_listening()
        if self._stderr_task is not None and not self._stderr_task.done():
            self._stderr_task.cancel()
        self._complete(ProcessExit(returncode=returncode))

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _stop_listening(self) -> None:
        if self._listening and self._cancel_token is not None:
            self._cancel_token.remove_listener(self.terminate)
        self._listening = False

    def _complete(self, result: ProcessExit) -> ProcessExit:
        """Record *result* unless an exit was already recorded (one-shot)."""
        if self._exit is None:
            self._exit = result
        else:
            logger.debug("%s: ignoring second completion %r", self.name, result)
        return self._exit
