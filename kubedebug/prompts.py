"""Operator prompts.

Each prompt has a fixed answer for EOF or unrecognised input: reuse when a
debug pod already exists, refuse when asked to create one.
"""

import click
import typer


def _read(text: str, default: str) -> str | None:
    try:
        return typer.prompt(text, default=default, show_default=False)
    except click.exceptions.Abort:
        # EOF on stdin
        return None


def ask_for_new_pod(existing_pod: str, namespace: str) -> bool:
    """Ask whether to create a new debug pod instead of reusing ``existing_pod``.

    Returns True only for an explicit "2".
    """
    typer.echo(
        f"Debug pod '{existing_pod}' already exists in namespace '{namespace}'. Do you want to:"
    )
    typer.echo("[1] Use existing pod")
    typer.echo("[2] Create new pod")
    response = _read("Choose (1/2) [1]", default="1")
    if response is None:
        typer.echo()
        return False
    return response.strip() == "2"


def confirm_pod_creation(pod_name: str, namespace: str) -> bool:
    """Ask before creating a new debug pod. Returns True only for y/yes."""
    response = _read(
        f"Create debug pod '{pod_name}' in namespace '{namespace}'? (y/N)", default=""
    )
    if response is None:
        typer.echo()
        return False
    return response.strip().lower() in ("y", "yes")
