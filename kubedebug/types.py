"""Type definitions for kubedebug."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Profile(str, Enum):
    GENERAL = "general"
    RESTRICTED = "restricted"
    BASELINE = "baseline"
    PRIVILEGED = "privileged"
    UNSET = "unset"


@dataclass(frozen=True)
class ResourceSpec:
    cpu_request: str
    memory_request: str
    memory_limit: str

    def to_manifest(self) -> dict[str, Any]:
        return {
            "limits": {"memory": self.memory_limit},
            "requests": {"cpu": self.cpu_request, "memory": self.memory_request},
        }


@dataclass(frozen=True)
class DebugSessionRequest:
    """Everything the operator asked for, validated once at the CLI boundary."""

    namespace: str
    resources: ResourceSpec
    target_pod: str | None = None
    image: str | None = None
    profile: Profile = Profile.UNSET
    interactive: bool = False
    tty: bool = False
    copy_mode: bool = False
    remove_after: bool = False
    force: bool = False
    confirm: bool = False

    @property
    def attach_requested(self) -> bool:
        return self.interactive and self.tty


# ===== Security posture =====


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


@dataclass(frozen=True)
class ContainerSecurityContext:
    allow_privilege_escalation: bool | None = None
    privileged: bool | None = None
    run_as_non_root: bool | None = None
    run_as_user: int | None = None
    capabilities_add: tuple[str, ...] = ()
    capabilities_drop: tuple[str, ...] = ()
    seccomp_type: str | None = None

    def to_manifest(self) -> dict[str, Any]:
        capabilities = _drop_none(
            {
                "add": list(self.capabilities_add) or None,
                "drop": list(self.capabilities_drop) or None,
            }
        )
        return _drop_none(
            {
                "allowPrivilegeEscalation": self.allow_privilege_escalation,
                "privileged": self.privileged,
                "runAsNonRoot": self.run_as_non_root,
                "runAsUser": self.run_as_user,
                "capabilities": capabilities or None,
                "seccompProfile": (
                    {"type": self.seccomp_type} if self.seccomp_type else None
                ),
            }
        )


@dataclass(frozen=True)
class PodSecurityContext:
    run_as_non_root: bool | None = None
    run_as_user: int | None = None
    run_as_group: int | None = None
    fs_group: int | None = None
    supplemental_groups: tuple[int, ...] = ()
    seccomp_type: str | None = None
    # Fields copied verbatim from a target pod (seLinuxOptions, sysctls, ...)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_manifest(self) -> dict[str, Any]:
        manifest = _drop_none(
            {
                "runAsNonRoot": self.run_as_non_root,
                "runAsUser": self.run_as_user,
                "runAsGroup": self.run_as_group,
                "fsGroup": self.fs_group,
                "supplementalGroups": (
                    list(self.supplemental_groups) if self.supplemental_groups else None
                ),
                "seccompProfile": (
                    {"type": self.seccomp_type} if self.seccomp_type else None
                ),
            }
        )
        manifest.update(self.extra)
        return manifest


@dataclass(frozen=True)
class SecurityPosture:
    container: ContainerSecurityContext
    pod: PodSecurityContext


# ===== Pods =====


@dataclass
class ContainerDescriptor:
    name: str
    image: str
    command: list[str]
    tty: bool
    security_context: ContainerSecurityContext
    resources: ResourceSpec
    liveness_probe: dict[str, Any]
    readiness_probe: dict[str, Any]
    stdin: bool = True

    def to_manifest(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "image": self.image,
            "command": list(self.command),
            "stdin": self.stdin,
            "tty": self.tty,
            "securityContext": self.security_context.to_manifest(),
            "resources": self.resources.to_manifest(),
            "livenessProbe": self.liveness_probe,
            "readinessProbe": self.readiness_probe,
        }


@dataclass
class PodDescriptor:
    name: str
    namespace: str
    labels: dict[str, str]
    security_context: PodSecurityContext
    containers: list[ContainerDescriptor]
    share_process_namespace: bool = False
    termination_grace_period_seconds: int = 0
    automount_service_account_token: bool = False
    # Containers and volumes carried over from a target pod in copy mode
    copied_containers: list[dict[str, Any]] = field(default_factory=list)
    volumes: list[dict[str, Any]] = field(default_factory=list)

    def to_manifest(self) -> dict[str, Any]:
        spec: dict[str, Any] = {
            "automountServiceAccountToken": self.automount_service_account_token,
            "terminationGracePeriodSeconds": self.termination_grace_period_seconds,
            "securityContext": self.security_context.to_manifest(),
            "containers": self.copied_containers
            + [container.to_manifest() for container in self.containers],
        }
        if self.share_process_namespace:
            spec["shareProcessNamespace"] = True
        if self.volumes:
            spec["volumes"] = self.volumes
        return {
            "apiVersion": "v1",
            "kind": "Pod",
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
                "labels": dict(self.labels),
            },
            "spec": spec,
        }


@dataclass
class ExistingDebugPod:
    name: str


@dataclass
class DebugPodInfo:
    name: str
    namespace: str
    target: str
    status: str
    creation_time: str  # ISO 8601 timestamp from metadata.creationTimestamp


@dataclass
class TargetPod:
    """The parts of a target pod's manifest the session engine reads."""

    name: str
    namespace: str
    labels: dict[str, str] | None = None
    containers: list[dict[str, Any]] = field(default_factory=list)
    volumes: list[dict[str, Any]] = field(default_factory=list)
    owner_references: list[dict[str, Any]] = field(default_factory=list)
    security_context: dict[str, Any] | None = None
    readable: bool = True

    @property
    def primary_container_name(self) -> str | None:
        if not self.containers:
            return None
        return self.containers[0].get("name")

    @property
    def primary_image(self) -> str | None:
        if not self.containers:
            return None
        return self.containers[0].get("image")

    def owner_name(self, kind: str) -> str | None:
        for ref in self.owner_references:
            if ref.get("kind") == kind and ref.get("name"):
                return ref["name"]
        return None
