"""Tests for security profile resolution."""

import pytest

from kubedebug.security import (
    apply_target_override,
    resolve_for_profile,
    resolve_from_target,
    resolve_posture,
)
from kubedebug.types import PodSecurityContext, Profile, TargetPod


class TestResolveForProfile:
    """Tests for the profile table."""

    @pytest.mark.parametrize(
        "profile",
        [Profile.RESTRICTED, Profile.BASELINE, Profile.PRIVILEGED, Profile.GENERAL],
    )
    def test_repeated_calls_are_identical(self, profile: Profile):
        """Test that resolution is a pure function of the profile name."""
        assert resolve_for_profile(profile) == resolve_for_profile(profile)

    def test_restricted(self):
        """Test that restricted runs as a non-root UID with all capabilities dropped."""
        posture = resolve_for_profile(Profile.RESTRICTED)

        assert posture.container.allow_privilege_escalation is False
        assert posture.container.capabilities_drop == ("ALL",)
        assert posture.container.run_as_non_root is True
        assert posture.container.run_as_user == 1000
        assert posture.container.seccomp_type == "RuntimeDefault"
        assert posture.pod == PodSecurityContext(
            run_as_non_root=True, run_as_user=1000, seccomp_type="RuntimeDefault"
        )

    def test_baseline(self):
        """Test that baseline drops capabilities without pinning a UID."""
        posture = resolve_for_profile(Profile.BASELINE)

        assert posture.container.allow_privilege_escalation is False
        assert posture.container.capabilities_drop == ("ALL",)
        assert posture.container.run_as_user is None
        assert posture.pod == PodSecurityContext(seccomp_type="RuntimeDefault")

    def test_privileged(self):
        """Test that privileged adds all capabilities and disables seccomp."""
        posture = resolve_for_profile(Profile.PRIVILEGED)

        assert posture.container.allow_privilege_escalation is True
        assert posture.container.privileged is True
        assert posture.container.capabilities_add == ("ALL",)
        assert posture.container.seccomp_type == "Unconfined"
        assert posture.pod == PodSecurityContext(seccomp_type="Unconfined")

    @pytest.mark.parametrize("profile", [Profile.GENERAL, Profile.UNSET])
    def test_general_and_unset_only_set_seccomp(self, profile: Profile):
        """Test that general and unset only pin seccomp to RuntimeDefault."""
        posture = resolve_for_profile(profile)

        assert posture.container.to_manifest() == {
            "seccompProfile": {"type": "RuntimeDefault"}
        }
        assert posture.pod.to_manifest() == {"seccompProfile": {"type": "RuntimeDefault"}}

    def test_privileged_manifest_shape(self):
        """Test that the container context renders in Kubernetes field names."""
        manifest = resolve_for_profile(Profile.PRIVILEGED).container.to_manifest()

        assert manifest == {
            "allowPrivilegeEscalation": True,
            "privileged": True,
            "capabilities": {"add": ["ALL"]},
            "seccompProfile": {"type": "Unconfined"},
        }


class TestResolveFromTarget:
    """Tests for reading the target's pod security context."""

    def test_returns_none_without_context(self):
        """Test that a target without a security context yields None."""
        target = TargetPod(name="nginx-1", namespace="default")

        assert resolve_from_target(target) is None

    def test_returns_none_for_unreadable_target(self):
        """Test that an unreadable target falls back to the profile."""
        target = TargetPod(
            name="nginx-1",
            namespace="default",
            security_context={"runAsUser": 999},
            readable=False,
        )

        assert resolve_from_target(target) is None

    def test_parses_context(self):
        """Test parsing of the common pod security context fields."""
        target = TargetPod(
            name="nginx-1",
            namespace="default",
            security_context={
                "runAsUser": 101,
                "runAsNonRoot": True,
                "seccompProfile": {"type": "RuntimeDefault"},
            },
        )

        assert resolve_from_target(target) == PodSecurityContext(
            run_as_non_root=True, run_as_user=101, seccomp_type="RuntimeDefault"
        )

    def test_garbage_uid_is_ignored(self):
        """Test that a non-numeric UID makes the context unusable."""
        target = TargetPod(
            name="nginx-1", namespace="default", security_context={"runAsUser": "abc"}
        )

        assert resolve_from_target(target) is None

    def test_keeps_group_and_extra_fields(self):
        """Test that fsGroup, groups and unknown fields survive the round trip."""
        raw = {
            "runAsUser": 101,
            "runAsGroup": 101,
            "fsGroup": 2000,
            "supplementalGroups": [3000, 4000],
            "seLinuxOptions": {"level": "s0:c123,c456"},
            "seccompProfile": {"type": "Localhost", "localhostProfile": "debug.json"},
        }
        target = TargetPod(name="nginx-1", namespace="default", security_context=raw)

        context = resolve_from_target(target)

        assert context.run_as_group == 101
        assert context.fs_group == 2000
        assert context.supplemental_groups == (3000, 4000)
        assert context.to_manifest() == raw

    def test_override_carries_fs_group_to_the_pod(self):
        """Test that the copied pod keeps the target's fsGroup for volume access."""
        target = TargetPod(
            name="nginx-1",
            namespace="default",
            security_context={"runAsUser": 101, "fsGroup": 2000},
        )

        posture = resolve_posture(Profile.RESTRICTED, target)

        assert posture.pod.to_manifest() == {"runAsUser": 101, "fsGroup": 2000}


class TestTargetOverride:
    """Tests for the target UID winning over the profile."""

    @pytest.mark.parametrize(
        "profile",
        [
            Profile.RESTRICTED,
            Profile.BASELINE,
            Profile.PRIVILEGED,
            Profile.GENERAL,
            Profile.UNSET,
        ],
    )
    def test_target_uid_wins_for_every_profile(self, profile: Profile):
        """Test that the target UID overrides every profile."""
        target = TargetPod(
            name="nginx-1",
            namespace="default",
            security_context={"runAsUser": 101, "runAsNonRoot": True},
        )

        posture = resolve_posture(profile, target)

        assert posture.pod.run_as_user == 101
        assert posture.container.run_as_user == 101
        assert posture.container.run_as_non_root is True

    def test_target_pod_context_replaces_profile_pod_context(self):
        """Test that the target pod context replaces the profile pod context."""
        target_context = PodSecurityContext(run_as_user=0)

        posture = apply_target_override(
            resolve_for_profile(Profile.RESTRICTED), target_context
        )

        assert posture.pod == target_context
        assert posture.container.run_as_user == 0
        # runAsNonRoot follows the target, not the restricted profile
        assert posture.container.run_as_non_root is None
        # Everything else from the profile is kept
        assert posture.container.capabilities_drop == ("ALL",)

    def test_context_without_uid_keeps_profile(self):
        """Test that a context without a UID leaves the profile untouched."""
        profile_posture = resolve_for_profile(Profile.RESTRICTED)

        posture = apply_target_override(
            profile_posture, PodSecurityContext(seccomp_type="Unconfined")
        )

        assert posture == profile_posture
