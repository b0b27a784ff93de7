"""Tests for finding existing debug pods."""

import json

import pytest

from kubedebug.discovery import (
    debug_pod_selector,
    find_existing_debug_pod,
    list_debug_pods,
)
from kubedebug.errors import DiscoveryError
from kubedebug.types import ExistingDebugPod


class TestDebugPodSelector:
    def test_without_target(self):
        """Test the selector for all debug pods."""
        assert debug_pod_selector() == "debug-tool/type=debug-pod"

    def test_with_target(self):
        """Test the selector for one target's debug pods."""
        assert (
            debug_pod_selector("nginx-1")
            == "debug-tool/type=debug-pod,debug-tool/target=nginx-1"
        )


class TestFindExistingDebugPod:
    def test_returns_first_name(self, kubectl, executor):
        """Test that the first listed pod is returned."""
        executor.on("get pod", stdout="\ndebug-nginx-1-120000-0001\ndebug-nginx-1-130000-0002\n")

        found = find_existing_debug_pod(kubectl, "nginx-1")

        assert found == ExistingDebugPod(name="debug-nginx-1-120000-0001")
        (call,) = executor.calls
        assert call == [
            "kubectl",
            "get",
            "pod",
            "-n",
            "default",
            "-l",
            "debug-tool/type=debug-pod,debug-tool/target=nginx-1",
            "--no-headers",
            "-o",
            "custom-columns=:metadata.name",
        ]

    def test_empty_output_is_none(self, kubectl, executor):
        """Test that empty output means no debug pod."""
        executor.on("get pod", stdout="", stderr="No resources found in default namespace.")

        assert find_existing_debug_pod(kubectl, "nginx-1") is None

    def test_no_resources_error_is_none(self, kubectl, executor):
        """Test that "no matches" is success-with-none even when kubectl exits non-zero."""
        executor.on(
            "get pod", returncode=1, stderr="No resources found in default namespace."
        )

        assert find_existing_debug_pod(kubectl) is None

    def test_transport_failure_raises(self, kubectl, executor):
        """Test that a failed query is an error, not an empty result."""
        executor.on(
            "get pod",
            returncode=1,
            stderr="Unable to connect to the server: dial tcp 10.0.0.1:443: i/o timeout",
        )

        with pytest.raises(DiscoveryError, match="Unable to connect") as exc_info:
            find_existing_debug_pod(kubectl, "nginx-1")
        assert "i/o timeout" in exc_info.value.stderr


class TestListDebugPods:
    def test_parses_pods(self, kubectl, executor):
        """Test parsing of the pod list JSON."""
        executor.on(
            "get pods",
            stdout=json.dumps(
                {
                    "items": [
                        {
                            "metadata": {
                                "name": "debug-nginx-1-120000-0001",
                                "namespace": "default",
                                "labels": {
                                    "debug-tool/type": "debug-pod",
                                    "debug-tool/target": "nginx-1",
                                },
                                "creationTimestamp": "2025-01-01T12:00:00Z",
                            },
                            "status": {"phase": "Running"},
                        },
                        {
                            "metadata": {
                                "name": "debug-130000-0002",
                                "labels": {"debug-tool/type": "debug-pod"},
                            },
                            "status": {},
                        },
                    ]
                }
            ),
        )

        pods = list_debug_pods(kubectl)

        assert [p.name for p in pods] == ["debug-nginx-1-120000-0001", "debug-130000-0002"]
        assert pods[0].target == "nginx-1"
        assert pods[0].status == "Running"
        assert pods[1].target == ""
        assert pods[1].status == "Unknown"
        assert pods[1].namespace == "default"

    def test_failure_raises(self, kubectl, executor):
        """Test that a failed list query raises."""
        executor.on("get pods", returncode=1, stderr="forbidden")

        with pytest.raises(DiscoveryError):
            list_debug_pods(kubectl)
