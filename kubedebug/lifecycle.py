"""Readiness, attach and cleanup for debug pods."""

import math
import signal
import threading
import time
from types import FrameType

import typer

from kubedebug.config import READY_MAX_ATTEMPTS, READY_POLL_INTERVAL
from kubedebug.errors import AttachError, ReadinessTimeoutError
from kubedebug.kubectl import Kubectl
from kubedebug.ui import print_step, print_success, print_verbose, print_warning

_RUNNING = "Running"


class LifecycleManager:
    def __init__(
        self,
        kubectl: Kubectl,
        poll_interval: float = READY_POLL_INTERVAL,
        max_attempts: int = READY_MAX_ATTEMPTS,
    ):
        self.kubectl = kubectl
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts

    def wait_ready(self, name: str, timeout: float | None = None) -> None:
        """Poll the pod phase until it reports Running.

        Raises:
            ReadinessTimeoutError: If the pod is not Running after the last attempt.
        """
        attempts = self.max_attempts
        if timeout is not None:
            attempts = max(1, math.ceil(timeout / self.poll_interval))

        print_step(f"Waiting for pod [blue]{name}[/blue] to be ready...", prefix="⏳")
        phase = ""
        for attempt in range(1, attempts + 1):
            result = self.kubectl.get_pod_phase(name)
            phase = result.stdout.strip() if result.ok else ""
            if phase == _RUNNING:
                print_success(f"Pod [blue]{name}[/blue] is running")
                return
            print_verbose(f"Pod {name} phase: {phase or 'unknown'}")
            if attempt < attempts:
                time.sleep(self.poll_interval)

        waited = attempts * self.poll_interval
        raise ReadinessTimeoutError(
            f"Pod '{name}' was created but did not become ready within "
            f"{waited:g} seconds (last phase: {phase or 'unknown'})"
        )

    def attach(self, name: str) -> int:
        """Open an interactive shell in the pod and return the remote exit code.

        Raises:
            AttachError: If the session could not be started at all.
        """
        print_step(f"Attaching to pod [blue]{name}[/blue]...", prefix="🔌")
        try:
            return self.kubectl.exec_shell(name)
        except OSError as e:
            raise AttachError(f"Error attaching to pod '{name}': {e}") from e

    def cleanup(self, name: str) -> bool:
        """Delete the pod. Failures are reported as warnings, never raised."""
        print_step(f"Cleaning up debug pod [blue]{name}[/blue]...", prefix="🧹")
        result = self.kubectl.delete_pod(name)
        if not result.ok:
            print_warning(
                f"Failed to delete debug pod '{name}': "
                f"{result.stderr.strip() or f'exit code {result.returncode}'}"
            )
            return False
        print_success(f"Debug pod [blue]{name}[/blue] deleted")
        return True

    def on_interrupt(self, name: str) -> "CleanupGuard":
        return CleanupGuard(self, name)


class CleanupGuard:
    """Deletes a pod exactly once, on interrupt or when the block exits.

    On SIGINT/SIGTERM the pod is deleted and the process exits with status 1.
    """

    signals = (signal.SIGINT, signal.SIGTERM)

    def __init__(self, lifecycle: LifecycleManager, name: str):
        self.lifecycle = lifecycle
        self.name = name
        self._lock = threading.RLock()
        self._triggered = False
        self._previous: dict[int, object] = {}

    @property
    def triggered(self) -> bool:
        return self._triggered

    def run(self) -> bool:
        """Delete the pod unless that already happened. Returns True if this call deleted it."""
        with self._lock:
            if self._triggered:
                return False
            self._triggered = True
        return self.lifecycle.cleanup(self.name)

    def _handle(self, signum: int, frame: FrameType | None) -> None:
        if self._triggered:
            # Cleanup already under way; let it finish
            return
        print_warning(f"Received {signal.Signals(signum).name}, cleaning up...")
        self.run()
        raise typer.Exit(code=1)

    def arm(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            print_warning("Interrupt cleanup unavailable outside the main thread")
            return
        for sig in self.signals:
            self._previous[sig] = signal.signal(sig, self._handle)

    def disarm(self) -> None:
        for sig, handler in self._previous.items():
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
        self._previous.clear()

    def __enter__(self) -> "CleanupGuard":
        self.arm()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.run()
        finally:
            self.disarm()
