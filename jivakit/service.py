"""Building and inspecting Kubernetes services."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from .errors import BuildError

__all__ = [
    "Service",
    "ServiceList",
    "Builder",
    "Predicate",
    "contains_name",
]


class Service:
    """Wrapper over a service API object."""

    def __init__(self, obj: dict[str, Any] | None = None) -> None:
        self.object = obj

    def is_nil(self) -> bool:
        """Return True if there is no service object behind this wrapper."""
        return self.object is None

    def __repr__(self) -> str:
        return f"Service({self.object!r})"


Predicate = Callable[[Service], bool]


def contains_name(name: str) -> Predicate:
    """Predicate that holds for services whose name contains ``name``."""

    def check(service: Service) -> bool:
        metadata = (service.object or {}).get("metadata") or {}
        return name in metadata.get("name", "")

    return check


class ServiceList:
    """A list of Service wrappers."""

    def __init__(self, items: Iterable[Service] = ()) -> None:
        self.items: list[Service] = list(items)

    def __len__(self) -> int:
        return len(self.items)

    def to_api_list(self) -> dict[str, Any]:
        """Return the API form of the list."""
        return {"items": [service.object for service in self.items]}


class Builder:
    """Collects service settings and their errors, then builds the API object."""

    def __init__(self) -> None:
        self.service = Service({"metadata": {}, "spec": {}})
        self.errors: list[BaseException] = []

    @property
    def _metadata(self) -> dict[str, Any]:
        return self.service.object.setdefault("metadata", {})

    @property
    def _spec(self) -> dict[str, Any]:
        return self.service.object.setdefault("spec", {})

    def _fail(self, message: str) -> Builder:
        self.errors.append(ValueError(f"failed to build service object: {message}"))
        return self

    def with_name(self, name: str) -> Builder:
        if not name:
            return self._fail("missing name")
        self._metadata["name"] = name
        return self

    def with_generate_name(self, name: str) -> Builder:
        if not name:
            return self._fail("missing generateName")
        self._metadata["generateName"] = name
        return self

    def with_namespace(self, namespace: str) -> Builder:
        if not namespace:
            return self._fail("missing namespace")
        self._metadata["namespace"] = namespace
        return self

    def with_annotations(self, annotations: Mapping[str, str] | None) -> Builder:
        """Merge the annotations into any already set."""
        if not annotations:
            return self._fail("missing annotations")
        if self._metadata.get("annotations") is None:
            return self.with_annotations_new(annotations)
        self._metadata["annotations"].update(annotations)
        return self

    def with_annotations_new(self, annotations: Mapping[str, str] | None) -> Builder:
        """Replace the annotations with a copy of the ones given."""
        if not annotations:
            return self._fail("no new annotations")
        self._metadata["annotations"] = dict(annotations)
        return self

    def with_owner_reference_new(
        self, owner_references: Iterable[Mapping[str, Any]] | None
    ) -> Builder:
        references = list(owner_references or ())
        if not references:
            return self._fail("no new ownerRefernce")
        self._metadata["ownerReferences"] = references
        return self

    def with_labels(self, labels: Mapping[str, str] | None) -> Builder:
        """Merge the labels into any already set."""
        if not labels:
            return self._fail("missing labels")
        if self._metadata.get("labels") is None:
            return self.with_labels_new(labels)
        self._metadata["labels"].update(labels)
        return self

    def with_labels_new(self, labels: Mapping[str, str] | None) -> Builder:
        """Replace the labels with a copy of the ones given."""
        if not labels:
            return self._fail("no new labels")
        self._metadata["labels"] = dict(labels)
        return self

    def with_selectors(self, selectors: Mapping[str, str] | None) -> Builder:
        """Merge the selectors into any already set."""
        if not selectors:
            return self._fail("missing selectors")
        if self._spec.get("selector") is None:
            return self.with_selectors_new(selectors)
        self._spec["selector"].update(selectors)
        return self

    def with_selectors_new(self, selectors: Mapping[str, str] | None) -> Builder:
        """Replace the selectors with a copy of the ones given."""
        if not selectors:
            return self._fail("no new selectors")
        self._spec["selector"] = dict(selectors)
        return self

    def with_ports(self, ports: Iterable[Mapping[str, Any]] | None) -> Builder:
        """Set the service ports to a copy of the ones given."""
        port_list = list(ports or ())
        if not port_list:
            return self._fail("missing ports")
        self._spec["ports"] = port_list
        return self

    def with_cluster_ip(self, ip: str) -> Builder:
        self._spec["clusterIP"] = ip
        return self

    def build(self) -> dict[str, Any]:
        """Return the service object, or raise BuildError if any setting failed."""
        if self.errors:
            found = " ".join(str(err) for err in self.errors)
            raise BuildError(f"[{found}]", self.errors)
        return self.service.object