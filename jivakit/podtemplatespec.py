"""Building Kubernetes pod template specifications."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .container import Builder as ContainerBuilder
from .container import Container
from .errors import BuildError

__all__ = ["PodTemplateSpec", "Builder"]


@dataclass
class PodTemplateSpec:
    """A pod template: object metadata plus the pod spec fields we build."""

    name: str = ""
    namespace: str = ""
    annotations: dict[str, str] | None = None
    labels: dict[str, str] | None = None
    node_selector: dict[str, str] | None = None
    service_account_name: str = ""
    priority_class_name: str = ""
    affinity: dict[str, Any] | None = None
    tolerations: list[dict[str, Any]] = field(default_factory=list)
    containers: list[Container] = field(default_factory=list)


class Builder:
    """Collects pod template settings and their errors, then builds it."""

    def __init__(self) -> None:
        self.template = PodTemplateSpec()
        self.errors: list[BaseException] = []

    def _fail(self, message: str) -> Builder:
        self.errors.append(ValueError(message))
        return self

    def with_name(self, name: str) -> Builder:
        if not name:
            return self._fail("failed to build podtemplatespec object: missing name")
        self.template.name = name
        return self

    def with_namespace(self, namespace: str) -> Builder:
        if not namespace:
            return self._fail(
                "failed to build podtemplatespec object: missing namespace"
            )
        self.template.namespace = namespace
        return self

    def with_annotations(self, annotations: Mapping[str, str] | None) -> Builder:
        """Merge the annotations into any already set."""
        if not annotations:
            return self._fail("failed to build deployment object: missing annotations")
        if self.template.annotations is None:
            return self.with_annotations_new(annotations)
        self.template.annotations.update(annotations)
        return self

    def with_annotations_new(self, annotations: Mapping[str, str] | None) -> Builder:
        """Replace the annotations with a copy of the ones given."""
        if not annotations:
            return self._fail(
                "failed to build podtemplatespec object: missing annotations"
            )
        self.template.annotations = dict(annotations)
        return self

    def with_labels(self, labels: Mapping[str, str] | None) -> Builder:
        """Merge the labels into any already set."""
        if not labels:
            return self._fail("failed to build podtemplatespec object: missing labels")
        if self.template.labels is None:
            return self.with_labels_new(labels)
        self.template.labels.update(labels)
        return self

    def with_labels_new(self, labels: Mapping[str, str] | None) -> Builder:
        """Replace the labels with a copy of the ones given."""
        if not labels:
            return self._fail("failed to build podtemplatespec object: missing labels")
        self.template.labels = dict(labels)
        return self

    def with_node_selector(self, node_selectors: Mapping[str, str] | None) -> Builder:
        """Merge the node selectors into any already set."""
        if not node_selectors:
            return self._fail(
                "failed to build podtemplatespec object: missing nodeselectors"
            )
        if self.template.node_selector is None:
            return self.with_node_selector_new(node_selectors)
        self.template.node_selector.update(node_selectors)
        return self

    def with_node_selector_new(
        self, node_selectors: Mapping[str, str] | None
    ) -> Builder:
        """Replace the node selectors with a copy of the ones given."""
        if not node_selectors:
            return self._fail(
                "failed to build podtemplatespec object: missing nodeselectors"
            )
        self.template.node_selector = dict(node_selectors)
        return self

    def with_service_account_name(self, service_account_name: str) -> Builder:
        if not service_account_name:
            return self._fail(
                "failed to build podtemplatespec object: missing serviceaccountname"
            )
        self.template.service_account_name = service_account_name
        return self

    def with_priority_class_name(self, priority_class_name: str) -> Builder:
        if not priority_class_name:
            return self._fail(
                "failed to build podtemplatespec object: missing priorityclassname"
            )
        self.template.priority_class_name = priority_class_name
        return self

    def with_affinity(self, affinity: Mapping[str, Any] | None) -> Builder:
        if affinity is None:
            return self._fail("failed to build podtemplatespec object: missing affinity")
        self.template.affinity = dict(affinity)
        return self

    def with_tolerations(self, *args: dict[str, Any]) -> Builder:
        """Append the tolerations to any already set."""
        if not args:
            return self._fail("failed to build podtemplatespec object: nil tolerations")
        if not self.template.tolerations:
            return self.with_tolerations_new(*args)
        self.template.tolerations.extend(args)
        return self

    def with_tolerations_new(self, *args: dict[str, Any]) -> Builder:
        """Replace the tolerations with the ones given."""
        if not args:
            return self._fail("failed to build podtemplatespec object: nil tolerations")
        self.template.tolerations = list(args)
        return self

    def _build_containers(self, builders: tuple[ContainerBuilder, ...]) -> list[Container] | None:
        built: list[Container] = []
        for builder in builders:
            try:
                built.append(builder.build())
            except BuildError as exc:
                self.errors.append(
                    BuildError(f"failed to build podtemplatespec: {exc}", [exc])
                )
                return None
        return built

    def with_container_builders(self, *args: ContainerBuilder) -> Builder:
        """Build each container and append it to the template's containers.

        Containers built before a failing one are kept.
        """
        if not args:
            return self._fail("failed to build podtemplatespec: nil containerbuilder")
        for builder in args:
            try:
                container = builder.build()
            except BuildError as exc:
                self.errors.append(
                    BuildError(f"failed to build podtemplatespec: {exc}", [exc])
                )
                return self
            self.template.containers.append(container)
        return self

    def with_container_builders_new(self, *args: ContainerBuilder) -> Builder:
        """Build each container and replace the template's containers with them."""
        if not args:
            return self._fail("failed to build podtemplatespec: nil containerbuilder")
        built = self._build_containers(args)
        if built is not None:
            self.template.containers = built
        return self

    def build(self) -> PodTemplateSpec:
        """Return the template, or raise BuildError if any setting failed."""
        if self.errors:
            found = ", ".join(str(err) for err in self.errors)
            raise BuildError(
                f"failed to build a podtemplatespec: {self.template}: "
                f"failed to validate: build errors were found: [{found}]",
                self.errors,
            )
        return self.template