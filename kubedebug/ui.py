import os

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from kubedebug.config import (
    ATTACH_SHELL,
    DEBUG_CONTAINER_NAME,
    ENV_SIMPLE_UI,
    ENV_VERBOSE,
)
from kubedebug.types import DebugPodInfo, PodDescriptor

# Global consoles for UI functions
_console = Console()
_err_console = Console(stderr=True)

# Check if we should use simple UI (e.g., when running in CI logs)
_use_simple_ui = os.getenv(ENV_SIMPLE_UI) == "1"

_verbose = os.getenv(ENV_VERBOSE) == "1"


def set_verbose(enabled: bool):
    global _verbose
    _verbose = enabled


def is_verbose() -> bool:
    return _verbose


def render_debug_pods_table(pods: list[DebugPodInfo]):
    table = Table()

    table.add_column("Debug Pod", style="cyan", no_wrap=True)
    table.add_column("Namespace", style="magenta")
    table.add_column("Target", style="blue")
    table.add_column("Status", style="green")
    table.add_column("Created", style="dim")

    for pod in pods:
        table.add_row(
            pod.name, pod.namespace, pod.target or "-", pod.status, pod.creation_time
        )

    _console.print(table)


def print_pod_summary(pod: PodDescriptor, profile: str):
    """Print what is about to be created, one line per setting."""
    container = pod.containers[0]
    lines = [
        f"Pod: [cyan bold]{pod.name}[/cyan bold] (namespace [magenta]{pod.namespace}[/magenta])",
        f"Image: [cyan]{container.image}[/cyan]",
        f"Command: [cyan]{' '.join(container.command)}[/cyan]",
        f"Profile: [cyan]{profile}[/cyan]",
    ]
    if pod.security_context.run_as_user is not None:
        lines.append(f"Run as UID: [cyan]{pod.security_context.run_as_user}[/cyan]")
    if pod.share_process_namespace:
        lines.append("Process namespace: [green]shared[/green]")

    if _use_simple_ui:
        for line in lines:
            _console.print(line)
    else:
        _console.print(
            Panel("\n".join(lines), border_style="cyan", title="Debug Pod", expand=False)
        )


def print_access_hint(pod_name: str, namespace: str):
    _console.print(
        f"[dim]You can access the pod with:[/dim] "
        f"[cyan]kubectl exec -it {pod_name} -n {namespace} "
        f"-c {DEBUG_CONTAINER_NAME} -- {ATTACH_SHELL}[/cyan]"
    )


def print_success(message: str, prefix: str = "✅"):
    """Print a success message."""
    _console.print(f"[green]{prefix}[/green] {message}")


def print_info(message: str, prefix: str = "ℹ️"):
    """Print an info message."""
    _console.print(f"[blue]{prefix}[/blue]  {message}")


def print_step(message: str, prefix: str = "🔧"):
    """Print a step/progress message."""
    _console.print(f"[cyan]{prefix}[/cyan] {message}")


def print_warning(message: str, prefix: str = "⚠️"):
    """Print a warning to stderr."""
    _err_console.print(f"[yellow]{prefix}[/yellow]  {escape(message)}")


def print_verbose(message: str):
    if _verbose:
        _err_console.print(f"[dim]{escape(message)}[/dim]", highlight=False)
