"""Security posture for debug pods, from a named profile or the target pod."""

from dataclasses import replace
from typing import Any

from kubedebug.types import (
    ContainerSecurityContext,
    PodSecurityContext,
    Profile,
    SecurityPosture,
    TargetPod,
)
from kubedebug.ui import print_warning

RUNTIME_DEFAULT = "RuntimeDefault"
UNCONFINED = "Unconfined"

_NON_ROOT_UID = 1000


def resolve_for_profile(profile: Profile) -> SecurityPosture:
    """Map a profile name to container- and pod-level security contexts.

    General and unset only pin the seccomp profile to RuntimeDefault.
    """
    if profile == Profile.RESTRICTED:
        return SecurityPosture(
            container=ContainerSecurityContext(
                allow_privilege_escalation=False,
                capabilities_drop=("ALL",),
                run_as_non_root=True,
                run_as_user=_NON_ROOT_UID,
                seccomp_type=RUNTIME_DEFAULT,
            ),
            pod=PodSecurityContext(
                run_as_non_root=True,
                run_as_user=_NON_ROOT_UID,
                seccomp_type=RUNTIME_DEFAULT,
            ),
        )

    if profile == Profile.BASELINE:
        return SecurityPosture(
            container=ContainerSecurityContext(
                allow_privilege_escalation=False,
                capabilities_drop=("ALL",),
                seccomp_type=RUNTIME_DEFAULT,
            ),
            pod=PodSecurityContext(seccomp_type=RUNTIME_DEFAULT),
        )

    if profile == Profile.PRIVILEGED:
        return SecurityPosture(
            container=ContainerSecurityContext(
                allow_privilege_escalation=True,
                privileged=True,
                capabilities_add=("ALL",),
                seccomp_type=UNCONFINED,
            ),
            pod=PodSecurityContext(seccomp_type=UNCONFINED),
        )

    return SecurityPosture(
        container=ContainerSecurityContext(seccomp_type=RUNTIME_DEFAULT),
        pod=PodSecurityContext(seccomp_type=RUNTIME_DEFAULT),
    )


_TYPED_POD_FIELDS = {
    "runAsNonRoot",
    "runAsUser",
    "runAsGroup",
    "fsGroup",
    "supplementalGroups",
    "seccompProfile",
}


def _optional_int(value: Any) -> int | None:
    return int(value) if value is not None else None


def _parse_pod_security_context(raw: dict[str, Any]) -> PodSecurityContext:
    run_as_non_root = raw.get("runAsNonRoot")
    seccomp = raw.get("seccompProfile") or {}
    extra = {key: value for key, value in raw.items() if key not in _TYPED_POD_FIELDS}
    # localhostProfile and friends only survive as the raw block
    if set(seccomp) - {"type"}:
        extra["seccompProfile"] = dict(seccomp)
    return PodSecurityContext(
        run_as_non_root=bool(run_as_non_root) if run_as_non_root is not None else None,
        run_as_user=_optional_int(raw.get("runAsUser")),
        run_as_group=_optional_int(raw.get("runAsGroup")),
        fs_group=_optional_int(raw.get("fsGroup")),
        supplemental_groups=tuple(int(gid) for gid in raw.get("supplementalGroups") or ()),
        seccomp_type=seccomp.get("type"),
        extra=extra,
    )


def resolve_from_target(target: TargetPod) -> PodSecurityContext | None:
    """Read the target's pod-level security context.

    Returns None when the target declares none or it cannot be read.
    """
    if not target.readable:
        print_warning(
            f"Could not read security context of pod '{target.name}', using profile settings"
        )
        return None
    if not target.security_context:
        return None
    try:
        return _parse_pod_security_context(target.security_context)
    except (TypeError, ValueError, AttributeError) as e:
        print_warning(f"Ignoring unreadable security context on pod '{target.name}': {e}")
        return None


def apply_target_override(
    posture: SecurityPosture, target_context: PodSecurityContext | None
) -> SecurityPosture:
    """Let a target pod context with a concrete UID win over the profile.

    The debug container shares the target's process namespace, so it must
    run as the same UID the pod declares.
    """
    if target_context is None or target_context.run_as_user is None:
        return posture

    container = replace(
        posture.container,
        run_as_user=target_context.run_as_user,
        run_as_non_root=target_context.run_as_non_root,
    )
    return SecurityPosture(container=container, pod=target_context)


def resolve_posture(profile: Profile, target: TargetPod | None = None) -> SecurityPosture:
    posture = resolve_for_profile(profile)
    if target is None:
        return posture
    return apply_target_override(posture, resolve_from_target(target))
