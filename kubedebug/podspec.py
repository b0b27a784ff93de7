"""Assembling debug pod descriptors and their manifests."""

import copy
import os
import random
import tempfile
from datetime import datetime
from typing import Any

import yaml

from kubedebug.config import (
    DEBUG_CONTAINER_NAME,
    IDLE_COMMAND,
    INTERACTIVE_COMMAND,
    PROBE_COMMAND,
    PROBE_INITIAL_DELAY_SECONDS,
    PROBE_PERIOD_SECONDS,
    SERVICE_ACCOUNT_VOLUME_PREFIX,
)
from kubedebug.types import (
    ContainerDescriptor,
    DebugSessionRequest,
    PodDescriptor,
    SecurityPosture,
    TargetPod,
)

# Fields that tie a container to the original pod's lifecycle
_PROBE_FIELDS = ("livenessProbe", "readinessProbe", "startupProbe")


def generate_name(target_pod: str | None = None, now: datetime | None = None) -> str:
    timestamp = (now or datetime.now()).strftime("%H%M%S")
    suffix = f"{random.randint(0, 9999):04d}"
    if not target_pod:
        return f"debug-{timestamp}-{suffix}"
    return f"debug-{target_pod}-{timestamp}-{suffix}"


def _noop_probe() -> dict[str, Any]:
    return {
        "exec": {"command": list(PROBE_COMMAND)},
        "initialDelaySeconds": PROBE_INITIAL_DELAY_SECONDS,
        "periodSeconds": PROBE_PERIOD_SECONDS,
    }


def _is_token_volume(name: str | None) -> bool:
    return bool(name) and name.startswith(SERVICE_ACCOUNT_VOLUME_PREFIX)


def _copy_containers(target: TargetPod) -> list[dict[str, Any]]:
    copied = []
    for container in target.containers:
        container = copy.deepcopy(container)
        for field in _PROBE_FIELDS:
            container.pop(field, None)
        mounts = [
            mount
            for mount in container.get("volumeMounts", [])
            if not _is_token_volume(mount.get("name"))
        ]
        if mounts:
            container["volumeMounts"] = mounts
        else:
            container.pop("volumeMounts", None)
        copied.append(container)
    return copied


def _copy_volumes(target: TargetPod) -> list[dict[str, Any]]:
    return [
        copy.deepcopy(volume)
        for volume in target.volumes
        if not _is_token_volume(volume.get("name"))
    ]


def build_pod(
    request: DebugSessionRequest,
    labels: dict[str, str],
    posture: SecurityPosture,
    name: str,
    image: str,
    template: TargetPod | None = None,
) -> PodDescriptor:
    """Assemble a debug pod descriptor. Has no side effects.

    When ``template`` is given the pod is a copy of that target pod with the
    debugger container appended.
    """
    command = INTERACTIVE_COMMAND if request.attach_requested else IDLE_COMMAND

    debugger = ContainerDescriptor(
        name=DEBUG_CONTAINER_NAME,
        image=image,
        command=list(command),
        tty=request.tty,
        security_context=posture.container,
        resources=request.resources,
        liveness_probe=_noop_probe(),
        readiness_probe=_noop_probe(),
    )

    pod = PodDescriptor(
        name=name,
        namespace=request.namespace,
        labels=dict(labels),
        security_context=posture.pod,
        containers=[debugger],
        share_process_namespace=bool(request.target_pod),
    )

    if template is not None:
        pod.copied_containers = _copy_containers(template)
        pod.volumes = _copy_volumes(template)

    return pod


def write_manifest(pod: PodDescriptor) -> str:
    """Write the pod manifest to a temporary YAML file and return its path.

    The caller owns the file and must remove it.
    """
    fd, path = tempfile.mkstemp(prefix="debug-pod-", suffix=".yaml")
    try:
        with os.fdopen(fd, "w") as f:
            yaml.safe_dump(pod.to_manifest(), f, default_flow_style=False, sort_keys=False)
    except Exception:
        os.unlink(path)
        raise
    return path
