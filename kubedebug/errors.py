"""Error types raised by the debug session engine."""


class DebugToolError(Exception):
    """Base class for errors that end a debug session."""

    def __init__(self, message: str, stderr: str = ""):
        self.stderr = stderr.strip()
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class NotFoundError(DebugToolError):
    """The named target pod does not exist."""


class DiscoveryError(DebugToolError):
    """Searching for an existing debug pod failed (not the same as no match)."""


class ResolutionError(DebugToolError):
    """Target metadata could not be read and no fallback is available."""


class ApplyError(DebugToolError):
    """Submitting the debug pod manifest failed; the pod was never created."""


class ReadinessTimeoutError(DebugToolError, TimeoutError):
    """The debug pod was created but did not reach Running in time."""


class AttachError(DebugToolError):
    """The interactive session could not be started."""


class SessionAborted(DebugToolError):
    """The operator declined to continue."""
