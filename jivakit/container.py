"""Building Kubernetes container specifications."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .errors import BuildError

__all__ = [
    "Container",
    "Builder",
    "Predicate",
    "OptionFunc",
    "predicate_failed_error",
    "new",
    "with_name",
    "with_image",
]

_VALIDATION_FAILED = "container validation failed"


@dataclass
class Container:
    """A Kubernetes container specification."""

    name: str = ""
    image: str = ""
    command: list[str] | None = None
    args: list[str] | None = None
    working_dir: str = ""
    ports: list[dict[str, Any]] | None = None
    env_from: list[dict[str, Any]] | None = None
    env: list[dict[str, Any]] | None = None
    resources: dict[str, Any] | None = None
    volume_mounts: list[dict[str, Any]] | None = None
    volume_devices: list[dict[str, Any]] | None = None
    liveness_probe: dict[str, Any] | None = None
    readiness_probe: dict[str, Any] | None = None
    lifecycle: dict[str, Any] | None = None
    termination_message_path: str = ""
    termination_message_policy: str = ""
    image_pull_policy: str = ""
    security_context: dict[str, Any] | None = None
    stdin: bool = False
    stdin_once: bool = False
    tty: bool = False

    _KEYS = {
        "name": "name",
        "image": "image",
        "command": "command",
        "args": "args",
        "working_dir": "workingDir",
        "ports": "ports",
        "env_from": "envFrom",
        "env": "env",
        "resources": "resources",
        "volume_mounts": "volumeMounts",
        "volume_devices": "volumeDevices",
        "liveness_probe": "livenessProbe",
        "readiness_probe": "readinessProbe",
        "lifecycle": "lifecycle",
        "termination_message_path": "terminationMessagePath",
        "termination_message_policy": "terminationMessagePolicy",
        "image_pull_policy": "imagePullPolicy",
        "security_context": "securityContext",
        "stdin": "stdin",
        "stdin_once": "stdinOnce",
        "tty": "tty",
    }

    def as_dict(self) -> dict[str, Any]:
        """Return the API form of the container, leaving out unset fields."""
        result: dict[str, Any] = {"name": self.name}
        for field in dataclasses.fields(self):
            if field.name == "name":
                continue
            value = getattr(self, field.name)
            if value is None or value == "" or value is False:
                continue
            result[self._KEYS[field.name]] = value
        return result


Predicate = Callable[[Container], "tuple[str, bool]"]
OptionFunc = Callable[[Container], None]


def predicate_failed_error(message: str) -> BuildError:
    """Return the error reported for a failed predicate."""
    return BuildError(f"predicatefailed: {message}")


def new(*args: OptionFunc) -> Container:
    """Return a new container with the given options applied."""
    con = Container()
    for option in args:
        option(con)
    return dataclasses.replace(con)


def with_name(name: str) -> OptionFunc:
    """Option that sets the container name."""

    def apply(con: Container) -> None:
        con.name = name

    return apply


def with_image(image: str) -> OptionFunc:
    """Option that sets the container image."""

    def apply(con: Container) -> None:
        con.image = image

    return apply


class Builder:
    """Collects container settings and their errors, then builds a Container."""

    def __init__(self) -> None:
        self.container = Container()
        self.checks: list[Predicate] = []
        self.errors: list[BaseException] = []

    def _fail(self, message: str) -> Builder:
        self.errors.append(ValueError(f"failed to build container object: {message}"))
        return self

    def _validate(self) -> None:
        for check in self.checks:
            message, ok = check(self.container)
            if not ok:
                self.errors.append(predicate_failed_error(message))
        if self.errors:
            raise BuildError(_VALIDATION_FAILED, self.errors)

    def build(self) -> Container:
        """Run the checks and return the container, or raise BuildError."""
        self._validate()
        return dataclasses.replace(self.container)

    def add_check(self, predicate: Predicate) -> Builder:
        self.checks.append(predicate)
        return self

    def add_checks(self, predicates: Iterable[Predicate]) -> Builder:
        for predicate in predicates:
            self.add_check(predicate)
        return self

    def with_name(self, name: str) -> Builder:
        if not name:
            return self._fail("missing name")
        with_name(name)(self.container)
        return self

    def with_image(self, image: str) -> Builder:
        if not image:
            return self._fail("missing image")
        with_image(image)(self.container)
        return self

    def with_command_new(self, command: list[str] | None) -> Builder:
        if command is None:
            return self._fail("nil command")
        if not command:
            return self._fail("missing command")
        self.container.command = list(command)
        return self

    def with_arguments_new(self, args: list[str] | None) -> Builder:
        if args is None:
            return self._fail("nil arguments")
        if not args:
            return self._fail("missing arguments")
        self.container.args = list(args)
        return self

    def with_volume_mounts_new(self, volume_mounts: list[dict] | None) -> Builder:
        if volume_mounts is None:
            return self._fail("nil volumemounts")
        if not volume_mounts:
            return self._fail("missing volumemounts")
        self.container.volume_mounts = list(volume_mounts)
        return self

    def with_image_pull_policy(self, policy: str) -> Builder:
        if not policy:
            return self._fail("missing imagepullpolicy")
        self.container.image_pull_policy = policy
        return self

    def with_privileged_security_context(self, privileged: bool | None) -> Builder:
        if privileged is None:
            return self._fail("missing securitycontext")
        self.container.security_context = {"privileged": bool(privileged)}
        return self

    def with_resources(self, resources: dict | None) -> Builder:
        if resources is None:
            return self._fail("missing resources")
        self.container.resources = dict(resources)
        return self

    def with_ports_new(self, ports: list[dict] | None) -> Builder:
        if ports is None:
            return self._fail("nil ports")
        if not ports:
            return self._fail("missing ports")
        self.container.ports = list(ports)
        return self

    def with_envs_new(self, envs: list[dict] | None) -> Builder:
        if envs is None:
            return self._fail("nil envs")
        if not envs:
            return self._fail("missing envs")
        self.container.env = list(envs)
        return self

    def with_envs(self, envs: list[dict] | None) -> Builder:
        if envs is None:
            return self._fail("nil envs")
        if not envs:
            return self._fail("missing envs")
        if self.container.env is None:
            return self.with_envs_new(envs)
        self.container.env.extend(envs)
        return self

    def with_liveness_probe(self, probe: dict | None) -> Builder:
        if probe is None:
            return self._fail("nil liveness probe")
        self.container.liveness_probe = probe
        return self

    def with_life_cycle(self, lifecycle: dict | None) -> Builder:
        if lifecycle is None:
            return self._fail("nil lifecycle")
        self.container.lifecycle = lifecycle
        return self