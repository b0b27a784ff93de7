import json
from typing import Any

import pytest

from kubedebug.executor import CommandResult
from kubedebug.kubectl import Kubectl
from kubedebug.types import DebugSessionRequest, ResourceSpec


class ScriptedExecutor:
    """Executor returning canned results for commands containing given fragments.

    Rules are matched in the order they were added; a fragment matches whole
    space-separated words of the joined command. Unmatched commands succeed
    with empty output.
    """

    def __init__(self):
        self.rules: list[tuple[tuple[str, ...], CommandResult]] = []
        self.calls: list[list[str]] = []
        self.interactive_calls: list[list[str]] = []
        self.interactive_exit_code = 0

    def on(self, *fragments: str, returncode: int = 0, stdout: str = "", stderr: str = ""):
        self.rules.append((fragments, CommandResult(returncode, stdout, stderr)))
        return self

    @staticmethod
    def _matches(command: list[str], fragments: tuple[str, ...]) -> bool:
        joined = f" {' '.join(command)} "
        return all(f" {fragment} " in joined for fragment in fragments)

    def run(self, command: list[str]) -> CommandResult:
        self.calls.append(command)
        for fragments, result in self.rules:
            if self._matches(command, fragments):
                return result
        return CommandResult(0, "", "")

    def run_interactive(self, command: list[str]) -> int:
        self.interactive_calls.append(command)
        return self.interactive_exit_code

    def calls_matching(self, *fragments: str) -> list[list[str]]:
        return [
            call
            for call in self.calls + self.interactive_calls
            if self._matches(call, fragments)
        ]


@pytest.fixture
def executor() -> ScriptedExecutor:
    return ScriptedExecutor()


@pytest.fixture
def kubectl(executor: ScriptedExecutor) -> Kubectl:
    return Kubectl(namespace="default", executor=executor, binary="kubectl")


@pytest.fixture
def make_request():
    def _make(**overrides: Any) -> DebugSessionRequest:
        values: dict[str, Any] = {
            "namespace": "default",
            "resources": ResourceSpec("100m", "128Mi", "128Mi"),
        }
        values.update(overrides)
        return DebugSessionRequest(**values)

    return _make


@pytest.fixture
def make_pod_json():
    """Build `kubectl get pod -o json` output for a target pod."""

    def _make(
        name: str = "nginx-1",
        labels: dict[str, str] | None = None,
        container: str = "nginx",
        image: str = "nginx:latest",
        security_context: dict[str, Any] | None = None,
        replica_set: str | None = None,
    ) -> str:
        metadata: dict[str, Any] = {
            "name": name,
            "namespace": "default",
            "labels": labels if labels is not None else {"app": "nginx"},
        }
        if replica_set:
            metadata["ownerReferences"] = [{"kind": "ReplicaSet", "name": replica_set}]
        spec: dict[str, Any] = {
            "containers": [
                {
                    "name": container,
                    "image": image,
                    "livenessProbe": {"httpGet": {"path": "/", "port": 80}},
                    "volumeMounts": [
                        {"name": "data", "mountPath": "/data"},
                        {
                            "name": "kube-api-access-abcde",
                            "mountPath": "/var/run/secrets/kubernetes.io/serviceaccount",
                        },
                    ],
                }
            ],
            "volumes": [
                {"name": "data", "emptyDir": {}},
                {"name": "kube-api-access-abcde", "projected": {"sources": []}},
            ],
        }
        if security_context is not None:
            spec["securityContext"] = security_context
        return json.dumps({"metadata": metadata, "spec": spec, "status": {"phase": "Running"}})

    return _make
