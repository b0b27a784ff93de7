import click
import typer

from kubedebug.config import (
    DEFAULT_CPU_REQUEST,
    DEFAULT_MEMORY_LIMIT,
    DEFAULT_MEMORY_REQUEST,
    DEFAULT_NAMESPACE,
    ENV_IMAGE,
    ENV_NAMESPACE,
    ENV_VERBOSE,
)
from kubedebug.discovery import list_debug_pods
from kubedebug.errors import DebugToolError
from kubedebug.kubectl import Kubectl
from kubedebug.session import DebugSession
from kubedebug.types import DebugSessionRequest, Profile, ResourceSpec
from kubedebug.ui import render_debug_pods_table, set_verbose

# UNSET stays internal: it means "no --profile given"
PROFILE_CHOICES = [p.value for p in Profile if p != Profile.UNSET]

app = typer.Typer(
    help="Create secure debug pods in Kubernetes, with non-root defaults, "
    "resource limits and security profiles."
)


@app.command(help="Start a debug session, standalone or bound to a target pod.")
def run(
    namespace: str = typer.Option(
        DEFAULT_NAMESPACE,
        "--namespace",
        "-n",
        envvar=ENV_NAMESPACE,
        help="The namespace to debug in.",
    ),
    pod: str = typer.Option(
        None,
        "--pod",
        "-p",
        help="The target pod. If not provided, a standalone debug pod is created.",
    ),
    image: str = typer.Option(
        None,
        "--image",
        envvar=ENV_IMAGE,
        help="The debug container image. Defaults to the built-in debug image.",
    ),
    profile: str = typer.Option(
        None,
        "--profile",
        click_type=click.Choice(PROFILE_CHOICES, case_sensitive=False),
        help="Security profile for the debug container.",
    ),
    interactive: bool = typer.Option(
        False, "--interactive", "-i", help="Keep stdin open on the debug container."
    ),
    tty: bool = typer.Option(False, "--tty", "-t", help="Allocate a TTY."),
    copy: bool = typer.Option(
        False,
        "--copy",
        help="Debug a copy of the target pod instead of adding a container to it.",
    ),
    remove_after: bool = typer.Option(
        False, "--rm", help="Remove the debug pod when the session ends (requires -it)."
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Always create a new debug pod, even if one already exists.",
    ),
    confirm: bool = typer.Option(
        False, "--confirm", help="Ask before creating a new debug pod."
    ),
    cpu_request: str = typer.Option(
        DEFAULT_CPU_REQUEST, "--cpu-request", help="CPU request for the debug container."
    ),
    memory_request: str = typer.Option(
        DEFAULT_MEMORY_REQUEST,
        "--memory-request",
        help="Memory request for the debug container.",
    ),
    memory_limit: str = typer.Option(
        DEFAULT_MEMORY_LIMIT, "--memory-limit", help="Memory limit for the debug container."
    ),
    context: str = typer.Option(None, "--context", help="The kubeconfig context to use."),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", envvar=ENV_VERBOSE, help="Show kubectl commands as they run."
    ),
):
    if remove_after and not (interactive and tty):
        raise typer.BadParameter("--rm requires -i and -t", param_hint="--rm")

    set_verbose(verbose)

    request = DebugSessionRequest(
        namespace=namespace,
        target_pod=pod or None,
        image=image or None,
        profile=Profile(profile.lower()) if profile else Profile.UNSET,
        interactive=interactive,
        tty=tty,
        copy_mode=copy,
        remove_after=remove_after,
        force=force,
        confirm=confirm,
        resources=ResourceSpec(
            cpu_request=cpu_request,
            memory_request=memory_request,
            memory_limit=memory_limit,
        ),
    )
    kubectl = Kubectl(namespace=namespace, context=context)

    try:
        exit_code = DebugSession(request, kubectl).run()
    except DebugToolError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)

    if exit_code != 0:
        raise typer.Exit(code=exit_code)


@app.command("list", help="List debug pods created by earlier sessions.")
def list_pods(
    namespace: str = typer.Option(
        DEFAULT_NAMESPACE,
        "--namespace",
        "-n",
        envvar=ENV_NAMESPACE,
        help="The namespace to list debug pods from.",
    ),
    pod: str = typer.Option(
        None, "--pod", "-p", help="Only show debug pods bound to this target pod."
    ),
    context: str = typer.Option(None, "--context", help="The kubeconfig context to use."),
):
    kubectl = Kubectl(namespace=namespace, context=context)
    try:
        pods = list_debug_pods(kubectl, pod)
    except DebugToolError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)

    if not pods:
        typer.echo("No debug pods found.")
        return
    render_debug_pods_table(pods)


if __name__ == "__main__":
    app()
