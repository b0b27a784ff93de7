"""The debug session decision engine.

A session picks one of three modes:

* no target pod: create a standalone debug pod;
* target pod, no copy: add an ephemeral debug container to the target
  with ``kubectl debug``;
* target pod, copy: reuse an existing debug pod for that target or create
  a copy of the target with a debugger container appended.
"""

import os
from contextlib import nullcontext
from enum import Enum

from kubedebug.config import DEFAULT_IMAGE
from kubedebug.discovery import find_existing_debug_pod
from kubedebug.errors import (
    ApplyError,
    AttachError,
    DebugToolError,
    NotFoundError,
    ResolutionError,
    SessionAborted,
)
from kubedebug.kubectl import Kubectl
from kubedebug.labels import find_controller_selectors, resolve_labels
from kubedebug.lifecycle import LifecycleManager
from kubedebug.podspec import build_pod, generate_name, write_manifest
from kubedebug.prompts import ask_for_new_pod, confirm_pod_creation
from kubedebug.security import resolve_for_profile, resolve_posture
from kubedebug.target import get_target_pod
from kubedebug.types import DebugSessionRequest, PodDescriptor, Profile, TargetPod
from kubedebug.ui import (
    print_access_hint,
    print_info,
    print_pod_summary,
    print_step,
    print_success,
    print_verbose,
    print_warning,
)


class SessionState(str, Enum):
    NO_TARGET = "NoTarget"
    TARGET_EXISTS = "TargetExists"
    TARGET_MISSING = "TargetMissing"
    REUSE_CHOSEN = "ReuseChosen"
    CREATE_NEW_CHOSEN = "CreateNewChosen"
    AUGMENTED = "Augmented"
    DONE = "Done"
    FAILED = "Failed"


class DebugSession:
    def __init__(
        self,
        request: DebugSessionRequest,
        kubectl: Kubectl,
        lifecycle: LifecycleManager | None = None,
    ):
        self.request = request
        self.kubectl = kubectl
        self.lifecycle = lifecycle or LifecycleManager(kubectl)
        self.state: SessionState | None = None
        self.history: list[SessionState] = []
        self.pod_name: str | None = None

    def _transition(self, state: SessionState) -> None:
        self.state = state
        self.history.append(state)
        print_verbose(f"session state: {state.value}")

    @property
    def profile(self) -> Profile:
        if self.request.profile == Profile.UNSET:
            return Profile.GENERAL
        return self.request.profile

    def run(self) -> int:
        """Run the session and return the exit code to hand back to the shell.

        Raises:
            DebugToolError: On any fatal decision-engine error.
        """
        try:
            exit_code = self._run()
        except DebugToolError:
            self._transition(SessionState.FAILED)
            raise
        self._transition(SessionState.DONE)
        return exit_code

    def _run(self) -> int:
        target_name = self.request.target_pod
        if not target_name:
            self._transition(SessionState.NO_TARGET)
            return self._run_standalone()

        try:
            target = get_target_pod(self.kubectl, target_name)
        except NotFoundError:
            self._transition(SessionState.TARGET_MISSING)
            raise
        self._transition(SessionState.TARGET_EXISTS)

        if not self.request.copy_mode:
            return self._augment(target)

        existing = find_existing_debug_pod(self.kubectl, target.name)
        if existing is None:
            print_verbose(f"No existing debug pod found for '{target.name}'")
        elif not self.request.force and not ask_for_new_pod(
            existing.name, self.kubectl.namespace
        ):
            self._transition(SessionState.REUSE_CHOSEN)
            return self._reuse(existing.name)

        self._transition(SessionState.CREATE_NEW_CHOSEN)
        return self._create_copy(target)

    # ===== Resolution =====

    def _resolve_image(self) -> str:
        image = self.request.image or DEFAULT_IMAGE
        if not image.strip():
            raise ResolutionError("No debug image configured; specify one with --image")
        return image

    # ===== Modes =====

    def _run_standalone(self) -> int:
        image = self._resolve_image()
        name = generate_name()
        pod = build_pod(
            self.request,
            labels=resolve_labels(),
            posture=resolve_for_profile(self.profile),
            name=name,
            image=image,
        )
        self._apply(pod)

        guard = self.lifecycle.on_interrupt(name) if self.request.remove_after else nullcontext()
        with guard:
            return self._connect(name)

    def _augment(self, target: TargetPod) -> int:
        container = target.primary_container_name
        if not container:
            raise ResolutionError(
                f"Could not determine the primary container of pod '{target.name}'"
            )
        image = self._resolve_image()

        self._transition(SessionState.AUGMENTED)
        print_step(
            f"Adding debug container to pod [blue]{target.name}[/blue] "
            f"(targeting container [cyan]{container}[/cyan])..."
        )
        try:
            return self.kubectl.debug(
                target.name,
                image=image,
                target_container=container,
                profile=self.profile.value,
                interactive=self.request.interactive,
                tty=self.request.tty,
            )
        except OSError as e:
            raise AttachError(f"Error starting kubectl debug: {e}") from e

    def _reuse(self, name: str) -> int:
        print_info(f"Using existing debug pod [blue]{name}[/blue]")
        self.pod_name = name
        return self._connect_then_remove(name)

    def _create_copy(self, target: TargetPod) -> int:
        labels = None
        selectors: dict[str, str] = {}
        if target.readable:
            labels = target.labels
            selectors = find_controller_selectors(self.kubectl, target)
        else:
            print_warning(f"Could not read labels of pod '{target.name}', using basic labels")

        image = self._resolve_image()
        name = generate_name(target.name)
        pod = build_pod(
            self.request,
            labels=resolve_labels(target.name, labels, selectors),
            posture=resolve_posture(self.profile, target),
            name=name,
            image=image,
            template=target if target.readable else None,
        )
        print_step(f"Creating debug pod [blue]{name}[/blue] as a copy of [blue]{target.name}[/blue]...")
        self._apply(pod)
        return self._connect_then_remove(name)

    # ===== Shared steps =====

    def _apply(self, pod: PodDescriptor) -> None:
        """Submit the pod manifest.

        Raises:
            SessionAborted: If the operator declines the creation prompt.
            ApplyError: If kubectl rejects the manifest.
        """
        if self.request.confirm and not confirm_pod_creation(pod.name, pod.namespace):
            raise SessionAborted(f"Creation of debug pod '{pod.name}' cancelled")

        print_pod_summary(pod, self.profile.value)
        try:
            manifest_path = write_manifest(pod)
        except OSError as e:
            raise ApplyError(f"Error writing manifest for pod '{pod.name}': {e}") from e

        try:
            result = self.kubectl.apply_file(manifest_path)
        finally:
            os.unlink(manifest_path)

        if not result.ok:
            raise ApplyError(f"Error creating debug pod '{pod.name}'", stderr=result.stderr)

        self.pod_name = pod.name
        print_success(f"Debug pod [blue]{pod.name}[/blue] created")

    def _connect(self, name: str) -> int:
        if not self.request.attach_requested:
            print_access_hint(name, self.kubectl.namespace)
            return 0
        self.lifecycle.wait_ready(name)
        return self.lifecycle.attach(name)

    def _connect_then_remove(self, name: str) -> int:
        try:
            return self._connect(name)
        finally:
            if self.request.remove_after:
                self.lifecycle.cleanup(name)
