"""Label resolution for debug pods."""

import json

from kubedebug.config import DEBUG_TARGET_LABEL, DEBUG_TYPE_LABEL, DEBUG_TYPE_VALUE
from kubedebug.kubectl import Kubectl
from kubedebug.types import TargetPod
from kubedebug.ui import print_verbose, print_warning


def resolve_labels(
    target_pod: str | None = None,
    target_labels: dict[str, str] | None = None,
    controller_selectors: dict[str, str] | None = None,
) -> dict[str, str]:
    """Build the label set for a new debug pod.

    Starts from the target's labels, strips every key the owning controller
    selects on so the debug pod is never adopted, then re-asserts the
    debug-tool labels last.
    """
    labels = dict(target_labels) if target_labels else {}

    for key in controller_selectors or {}:
        labels.pop(key, None)

    labels[DEBUG_TYPE_LABEL] = DEBUG_TYPE_VALUE
    if target_pod:
        labels[DEBUG_TARGET_LABEL] = target_pod
    else:
        labels.pop(DEBUG_TARGET_LABEL, None)
    return labels


def _jsonpath_value(kubectl: Kubectl, kind: str, name: str, path: str) -> str | None:
    result = kubectl.get_jsonpath(kind, name, path)
    if not result.ok:
        print_warning(
            f"Could not read {kind} '{name}' ({result.stderr.strip() or 'kubectl failed'})"
        )
        return None
    return result.stdout.strip() or None


def find_controller_selectors(kubectl: Kubectl, target: TargetPod) -> dict[str, str]:
    """Return the matchLabels of the Deployment that owns the target pod.

    Walks pod -> ReplicaSet -> Deployment. A missing link anywhere means
    there is nothing to strip, so an empty dict is returned.
    """
    replica_set = target.owner_name("ReplicaSet")
    if not replica_set:
        print_verbose(f"Pod '{target.name}' is not owned by a ReplicaSet")
        return {}

    deployment = _jsonpath_value(
        kubectl,
        "rs",
        replica_set,
        "{.metadata.ownerReferences[?(@.kind=='Deployment')].name}",
    )
    if not deployment:
        print_verbose(f"ReplicaSet '{replica_set}' is not owned by a Deployment")
        return {}

    raw = _jsonpath_value(
        kubectl, "deployment", deployment, "{.spec.selector.matchLabels}"
    )
    if not raw:
        return {}

    try:
        selectors = json.loads(raw)
    except json.JSONDecodeError as e:
        print_warning(f"Could not parse selector of deployment '{deployment}': {e}")
        return {}

    if not isinstance(selectors, dict):
        return {}
    print_verbose(f"Stripping selector labels of deployment '{deployment}': {selectors}")
    return {str(key): str(value) for key, value in selectors.items()}
