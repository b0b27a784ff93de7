"""Finding debug pods left behind by earlier sessions."""

import json

from kubedebug.config import DEBUG_TARGET_LABEL, DEBUG_TYPE_LABEL, DEBUG_TYPE_VALUE
from kubedebug.errors import DiscoveryError
from kubedebug.kubectl import Kubectl
from kubedebug.types import DebugPodInfo, ExistingDebugPod

_NO_RESOURCES = "No resources found"


def debug_pod_selector(target_pod: str | None = None) -> str:
    selector = f"{DEBUG_TYPE_LABEL}={DEBUG_TYPE_VALUE}"
    if target_pod:
        selector += f",{DEBUG_TARGET_LABEL}={target_pod}"
    return selector


def find_existing_debug_pod(
    kubectl: Kubectl, target_pod: str | None = None
) -> ExistingDebugPod | None:
    """Return the first debug pod bound to the target, or None if there is none.

    Raises:
        DiscoveryError: If kubectl fails for any reason other than "no matches".
    """
    result = kubectl.get_pod_names(debug_pod_selector(target_pod))

    if not result.ok:
        if _NO_RESOURCES in result.stderr:
            return None
        raise DiscoveryError(
            f"Error checking for existing debug pods in namespace '{kubectl.namespace}'",
            stderr=result.stderr,
        )

    for line in result.stdout.splitlines():
        name = line.strip()
        if name:
            return ExistingDebugPod(name=name)
    return None


def list_debug_pods(
    kubectl: Kubectl, target_pod: str | None = None
) -> list[DebugPodInfo]:
    result = kubectl.get_pods_json(debug_pod_selector(target_pod))
    if not result.ok:
        raise DiscoveryError(
            f"Error listing debug pods in namespace '{kubectl.namespace}'",
            stderr=result.stderr,
        )

    try:
        pods_json = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise DiscoveryError(f"Could not parse kubectl output: {e}") from e

    return [
        DebugPodInfo(
            name=item["metadata"]["name"],
            namespace=item["metadata"].get("namespace", kubectl.namespace),
            target=item["metadata"].get("labels", {}).get(DEBUG_TARGET_LABEL, ""),
            status=item.get("status", {}).get("phase", "Unknown"),
            creation_time=item["metadata"].get("creationTimestamp", ""),
        )
        for item in pods_json.get("items", [])
    ]
