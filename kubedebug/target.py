"""Reading the target pod a debug session is bound to."""

import json

from kubedebug.errors import NotFoundError, ResolutionError
from kubedebug.kubectl import Kubectl
from kubedebug.types import TargetPod
from kubedebug.ui import print_warning


def _is_not_found(stderr: str) -> bool:
    return "NotFound" in stderr or "not found" in stderr


def get_target_pod(kubectl: Kubectl, name: str) -> TargetPod:
    """Fetch the target pod.

    A pod that exists but whose manifest cannot be parsed is returned with
    ``readable=False`` so callers fall back to safe defaults.

    Raises:
        NotFoundError: If the pod does not exist.
        ResolutionError: If kubectl fails for another reason.
    """
    result = kubectl.get_pod_json(name)

    if not result.ok:
        if _is_not_found(result.stderr):
            raise NotFoundError(
                f"Target pod '{name}' does not exist in namespace '{kubectl.namespace}'"
            )
        raise ResolutionError(f"Error getting target pod '{name}'", stderr=result.stderr)

    try:
        pod_json = json.loads(result.stdout)
        metadata = pod_json.get("metadata", {})
        spec = pod_json.get("spec", {})
        return TargetPod(
            name=name,
            namespace=metadata.get("namespace", kubectl.namespace),
            labels=metadata.get("labels") or {},
            containers=spec.get("containers", []),
            volumes=spec.get("volumes", []),
            owner_references=metadata.get("ownerReferences", []),
            security_context=spec.get("securityContext"),
        )
    except (json.JSONDecodeError, AttributeError) as e:
        print_warning(f"Could not parse manifest of pod '{name}': {e}")
        return TargetPod(name=name, namespace=kubectl.namespace, readable=False)
