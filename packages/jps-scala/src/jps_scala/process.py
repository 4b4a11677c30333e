"""External compiler process execution.

This module provides:
- ProcessHandle: A started child process with a line iterator over its
  merged stdout/stderr, a (timed) wait and cancellation
- ProcessDriver: Runs an invocation to termination, forwarding every
  output line to the diagnostic sink as it is produced

Concurrency: ProcessDriver.run() is synchronous for its caller. Output is
read by a task on a shared thread pool while the calling thread waits
for the process to exit; both are joined before run() returns.
"""

from __future__ import annotations

import subprocess
import threading
import time
from collections.abc import Callable, Iterator
from concurrent.futures import Future, ThreadPoolExecutor
from typing import IO

import structlog

from jps_scala.errors import ProcessLaunchError
from jps_scala.models import Diagnostic, ProcessInvocation, ProcessOutcome
from jps_scala.output_parser import OutputParser

logger = structlog.get_logger(__name__)

# Upper bound of concurrently running output readers (one per running compiler)
SHARED_POOL_WORKERS = 32

# Seconds between cancellation checks while waiting for the process
CANCEL_POLL_INTERVAL = 0.1

# Seconds a cancelled process gets to terminate before it is killed
TERMINATE_GRACE_SECONDS = 5.0

_shared_pool: ThreadPoolExecutor | None = None
_shared_pool_lock = threading.Lock()


def shared_pool() -> ThreadPoolExecutor:
    """Return the process-wide pool used for output readers."""
    global _shared_pool
    with _shared_pool_lock:
        if _shared_pool is None:
            _shared_pool = ThreadPoolExecutor(
                max_workers=SHARED_POOL_WORKERS,
                thread_name_prefix="jps-scala-output",
            )
        return _shared_pool


class ProcessHandle:
    """A running child process.

    Attributes:
        invocation: The command line the process was started with

    Example:
        >>> handle = ProcessHandle.start(invocation)
        >>> for line in handle.lines():
        ...     print(line, end="")
        >>> handle.wait()
        0
    """

    def __init__(self, invocation: ProcessInvocation, popen: subprocess.Popen[str]) -> None:
        self.invocation = invocation
        self._popen = popen

    @classmethod
    def start(
        cls,
        invocation: ProcessInvocation,
        *,
        encoding: str = "utf-8",
        cwd: str | None = None,
    ) -> ProcessHandle:
        """Spawn the process with stderr merged into stdout.

        Args:
            invocation: Command line to run.
            encoding: Encoding used to decode the process output.
            cwd: Working directory (defaults to the current one).

        Returns:
            Handle of the started process.

        Raises:
            ProcessLaunchError: If the OS cannot start the process.
        """
        try:
            popen = subprocess.Popen(
                invocation.argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding=encoding,
                errors="replace",
                bufsize=1,
                cwd=cwd,
            )
        except OSError as e:
            raise ProcessLaunchError.from_os_error(e, command=invocation.command) from e

        logger.info("process_started", command=invocation.command, pid=popen.pid)
        return cls(invocation, popen)

    @property
    def pid(self) -> int:
        return self._popen.pid

    @property
    def returncode(self) -> int | None:
        """Exit status, or None while the process is running."""
        return self._popen.returncode

    def lines(self) -> Iterator[str]:
        """Iterate over output lines until the process closes its output."""
        stream: IO[str] | None = self._popen.stdout
        if stream is None:
            return
        try:
            yield from stream
        finally:
            stream.close()

    def wait(self, timeout: float | None = None) -> int:
        """Wait for the process to exit.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely.

        Returns:
            The exit status.

        Raises:
            subprocess.TimeoutExpired: If the timeout elapses first.
        """
        return self._popen.wait(timeout=timeout)

    def cancel(self, grace_seconds: float = TERMINATE_GRACE_SECONDS) -> int:
        """Terminate the process, killing it if it outlives the grace period.

        Returns:
            The exit status after termination.
        """
        if self._popen.poll() is not None:
            return self._popen.returncode

        logger.warning("process_cancelled", pid=self.pid)
        self._popen.terminate()
        try:
            return self._popen.wait(timeout=grace_seconds)
        except subprocess.TimeoutExpired:
            self._popen.kill()
            return self._popen.wait()


class ProcessDriver:
    """Runs compiler processes and streams their output as diagnostics.

    Attributes:
        parser: Converts output lines to diagnostics
        sink: Receives each diagnostic as soon as its line is read

    Example:
        >>> driver = ProcessDriver(OutputParser(), host.emit)
        >>> outcome = driver.run(invocation)
        >>> outcome.exit_code
        0
    """

    def __init__(
        self,
        parser: OutputParser,
        sink: Callable[[Diagnostic], None],
        *,
        executor: ThreadPoolExecutor | None = None,
        encoding: str = "utf-8",
    ) -> None:
        """Initialize the driver.

        Args:
            parser: Output line parser.
            sink: Diagnostic sink (called from the reader thread).
            executor: Pool for the output reader. Defaults to the shared pool.
            encoding: Encoding of the process output.
        """
        self.parser = parser
        self.sink = sink
        self._executor = executor
        self._encoding = encoding
        self._log = logger.bind(component="process_driver")

    def run(
        self,
        invocation: ProcessInvocation,
        *,
        cancel_event: threading.Event | None = None,
    ) -> ProcessOutcome:
        """Run an invocation to termination.

        Args:
            invocation: Command line to run.
            cancel_event: When set, the process is terminated.

        Returns:
            ProcessOutcome with the exit status and forwarded line count.

        Raises:
            ProcessLaunchError: If the process cannot be started.
        """
        start_time = time.monotonic()
        handle = ProcessHandle.start(invocation, encoding=self._encoding)

        executor = self._executor or shared_pool()
        reader: Future[int] = executor.submit(self._forward_output, handle)

        cancelled = False
        if cancel_event is None:
            exit_code = handle.wait()
        else:
            exit_code, cancelled = self._wait_cancellable(handle, cancel_event)

        line_count = reader.result()

        self._log.info(
            "process_exited",
            pid=handle.pid,
            exit_code=exit_code,
            lines=line_count,
            cancelled=cancelled,
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )
        return ProcessOutcome(exit_code=exit_code, line_count=line_count, cancelled=cancelled)

    def _wait_cancellable(
        self, handle: ProcessHandle, cancel_event: threading.Event
    ) -> tuple[int, bool]:
        while True:
            if cancel_event.is_set():
                return handle.cancel(), True
            try:
                return handle.wait(timeout=CANCEL_POLL_INTERVAL), False
            except subprocess.TimeoutExpired:
                continue

    def _forward_output(self, handle: ProcessHandle) -> int:
        count = 0
        for line in handle.lines():
            diagnostic = self.parser.parse(line)
            if diagnostic is None:
                continue
            self.sink(diagnostic)
            count += 1
        return count
