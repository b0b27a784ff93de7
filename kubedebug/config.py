"""Defaults and environment variable names for kubedebug."""

import os

# ===== Labels =====

DEBUG_TYPE_LABEL = "debug-tool/type"
DEBUG_TYPE_VALUE = "debug-pod"
DEBUG_TARGET_LABEL = "debug-tool/target"

# ===== Environment variables =====

ENV_NAMESPACE = "KUBEDEBUG_NAMESPACE"
ENV_IMAGE = "KUBEDEBUG_IMAGE"
ENV_KUBECTL = "KUBEDEBUG_KUBECTL"
ENV_VERBOSE = "KUBEDEBUG_VERBOSE"
ENV_SIMPLE_UI = "KUBEDEBUG_SIMPLE_UI"

# ===== Session defaults =====

DEFAULT_NAMESPACE = "default"
DEFAULT_IMAGE = "jbuet/debug:v1.0.0"
DEFAULT_CPU_REQUEST = "100m"
DEFAULT_MEMORY_REQUEST = "128Mi"
DEFAULT_MEMORY_LIMIT = "128Mi"


def kubectl_binary() -> str:
    return os.environ.get(ENV_KUBECTL) or "kubectl"


# ===== Pod spec =====

DEBUG_CONTAINER_NAME = "debugger"
INTERACTIVE_COMMAND = ["bash"]
IDLE_COMMAND = ["sleep", "infinity"]
ATTACH_SHELL = "sh"

PROBE_COMMAND = ["/bin/true"]
PROBE_INITIAL_DELAY_SECONDS = 5
PROBE_PERIOD_SECONDS = 10

# Injected by the service account admission controller; never copied.
SERVICE_ACCOUNT_VOLUME_PREFIX = "kube-api-access-"

# ===== Readiness =====

READY_POLL_INTERVAL = 1.0  # seconds
READY_MAX_ATTEMPTS = 30
