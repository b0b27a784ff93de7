"""kubectl invocations used by the debug session engine."""

from kubedebug.config import ATTACH_SHELL, DEBUG_CONTAINER_NAME, kubectl_binary
from kubedebug.executor import CommandExecutor, CommandResult, SubprocessExecutor


class Kubectl:
    """Builds kubectl argument lists for one namespace and runs them through an executor."""

    def __init__(
        self,
        namespace: str,
        executor: CommandExecutor | None = None,
        binary: str | None = None,
        context: str | None = None,
    ):
        self.namespace = namespace
        self.executor = executor or SubprocessExecutor()
        self.binary = binary or kubectl_binary()
        self.context = context

    def command(self, *args: str) -> list[str]:
        cmd = [self.binary, *args]
        if self.context:
            cmd.extend(["--context", self.context])
        return cmd

    def run(self, *args: str) -> CommandResult:
        return self.executor.run(self.command(*args))

    def run_interactive(self, *args: str) -> int:
        return self.executor.run_interactive(self.command(*args))

    # ===== Queries =====

    def get_pod_json(self, name: str) -> CommandResult:
        return self.run("get", "pod", name, "-n", self.namespace, "-o", "json")

    def get_pods_json(self, label_selector: str) -> CommandResult:
        return self.run(
            "get", "pods", "-n", self.namespace, "-l", label_selector, "-o", "json"
        )

    def get_pod_names(self, label_selector: str) -> CommandResult:
        return self.run(
            "get",
            "pod",
            "-n",
            self.namespace,
            "-l",
            label_selector,
            "--no-headers",
            "-o",
            "custom-columns=:metadata.name",
        )

    def get_jsonpath(self, kind: str, name: str, path: str) -> CommandResult:
        return self.run(
            "get", kind, name, "-n", self.namespace, "-o", f"jsonpath={path}"
        )

    def get_pod_phase(self, name: str) -> CommandResult:
        return self.get_jsonpath("pod", name, "{.status.phase}")

    # ===== Mutations =====

    def apply_file(self, path: str) -> CommandResult:
        return self.run("apply", "-f", path)

    def delete_pod(self, name: str) -> CommandResult:
        return self.run("delete", "pod", name, "-n", self.namespace)

    # ===== Interactive =====

    def exec_shell(self, name: str, container: str = DEBUG_CONTAINER_NAME) -> int:
        return self.run_interactive(
            "exec", "-it", name, "-n", self.namespace, "-c", container, "--", ATTACH_SHELL
        )

    def debug(
        self,
        target: str,
        image: str,
        target_container: str,
        profile: str,
        interactive: bool = False,
        tty: bool = False,
    ) -> int:
        """Add an ephemeral debug container to a running pod."""
        args = [
            "debug",
            target,
            "-n",
            self.namespace,
            "--image",
            image,
            f"--target={target_container}",
            f"--profile={profile}",
        ]
        if interactive:
            args.append("-i")
        if tty:
            args.append("-t")
        return self.run_interactive(*args)
