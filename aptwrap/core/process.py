"""
Spawning external tools and streaming their output.

Every apt-get operation returns an :class:`Operation`. The process is started
as soon as the operation is created (a running event loop is required), its
output can be consumed live, and awaiting the operation gives the final result
or raises :class:`ToolExecutionError`::

    op = apt_get.update()
    async for chunk in op:
        print(chunk.source, chunk.text, end="")
    await op
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Generator, Generic, List, TypeVar

from aptwrap.core.errors import ToolExecutionError

logger = logging.getLogger(__name__)

T = TypeVar("T")

STDOUT = "stdout"
STDERR = "stderr"

READ_SIZE = 4096

_EOF = object()


@dataclass(frozen=True)
class OutputChunk:
    """A piece of output read from one of the child's pipes."""
    source: str
    data: bytes

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class ProcessResult:
    """Everything a finished process produced."""
    command: List[str]
    returncode: int
    stdout: str
    stderr: str


def _decode(parts: List[bytes]) -> str:
    return b"".join(parts).decode("utf-8", errors="replace")


class Operation(Generic[T]):
    """
    A running external command.

    Iterate (``async for``) to receive :class:`OutputChunk` objects in the
    order each pipe delivers them. There is no ordering between stdout and
    stderr chunks. Only one consumer should iterate.

    Await the operation (or :meth:`result`) for the outcome. The outcome is
    available only after all output has been queued, and is computed once.
    Failures are logged when they happen, so an operation that is only
    iterated does not lose its error; await it to have the error raised.
    """

    def __init__(
        self,
        command: List[str],
        on_success: Callable[[ProcessResult], Awaitable[T]] | None = None,
    ) -> None:
        self.command = list(command)
        self._on_success = on_success
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._drained = False
        self._task: asyncio.Task[T] = asyncio.get_running_loop().create_task(self._run())
        self._task.add_done_callback(self._log_failure)

    def __repr__(self) -> str:
        state = "done" if self._task.done() else "running"
        return f"Operation({' '.join(self.command)!r}, {state})"

    def __aiter__(self) -> AsyncIterator[OutputChunk]:
        return self._chunks()

    def __await__(self) -> Generator[Any, None, T]:
        return self._task.__await__()

    async def result(self) -> T:
        return await self._task

    def done(self) -> bool:
        return self._task.done()

    def _log_failure(self, task: asyncio.Task[T]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        # ToolExecutionError is logged by _run before it is raised
        if exc is not None and not isinstance(exc, ToolExecutionError):
            logger.error("%s failed", self.command[0], exc_info=exc)

    async def _chunks(self) -> AsyncIterator[OutputChunk]:
        while not self._drained:
            item = await self._queue.get()
            if item is _EOF:
                self._drained = True
                break
            yield item

    async def _pump(
        self,
        stream: asyncio.StreamReader | None,
        source: str,
        sink: List[bytes],
    ) -> None:
        if stream is None:
            return
        while True:
            data = await stream.read(READ_SIZE)
            if not data:
                break
            sink.append(data)
            self._queue.put_nowait(OutputChunk(source, data))

    async def _spawn(self) -> asyncio.subprocess.Process:
        logger.info("Executing: %s", " ".join(self.command))
        try:
            return await asyncio.create_subprocess_exec(
                *self.command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error("Could not start %s: %s", self.command[0], e)
            raise ToolExecutionError(self.command, None, str(e)) from e

    async def _run(self) -> T:
        stdout: List[bytes] = []
        stderr: List[bytes] = []

        try:
            proc = await self._spawn()
            pumps = [
                asyncio.ensure_future(self._pump(proc.stdout, STDOUT, stdout)),
                asyncio.ensure_future(self._pump(proc.stderr, STDERR, stderr)),
            ]
            try:
                await asyncio.gather(*pumps)
                returncode = await proc.wait()
            finally:
                for pump in pumps:
                    pump.cancel()
                if proc.returncode is None:
                    proc.kill()
                    await proc.wait()
        finally:
            self._queue.put_nowait(_EOF)

        result = ProcessResult(self.command, returncode, _decode(stdout), _decode(stderr))

        logger.info("Return code: %d", returncode)
        if result.stdout:
            logger.debug("STDOUT:\n%s", result.stdout)
        if result.stderr:
            logger.debug("STDERR:\n%s", result.stderr)

        if returncode != 0:
            logger.error("%s failed with status %d", self.command[0], returncode)
            raise ToolExecutionError(self.command, returncode, result.stderr, result.stdout)

        if self._on_success is None:
            return None  # type: ignore[return-value]
        return await self._on_success(result)


def run_tool(
    command: List[str],
    on_success: Callable[[ProcessResult], Awaitable[T]] | None = None,
) -> Operation[T]:
    """Start command and return the Operation tracking it."""
    return Operation(command, on_success)


async def run_and_capture(command: List[str]) -> ProcessResult:
    """Run command to completion without streaming and return its output."""

    async def _keep(result: ProcessResult) -> ProcessResult:
        return result

    return await run_tool(command, _keep)
