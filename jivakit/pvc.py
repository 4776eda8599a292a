"""Building and inspecting Kubernetes persistent volume claims."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from decimal import Decimal
from typing import Any

from .errors import BuildError

__all__ = [
    "PVC",
    "PVCList",
    "Builder",
    "Predicate",
    "parse_quantity",
    "contains_name",
]

_BINARY_SUFFIXES = {
    "Ki": 2**10,
    "Mi": 2**20,
    "Gi": 2**30,
    "Ti": 2**40,
    "Pi": 2**50,
    "Ei": 2**60,
}

_DECIMAL_SUFFIXES = {
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "": Decimal(1),
    "k": Decimal(10**3),
    "M": Decimal(10**6),
    "G": Decimal(10**9),
    "T": Decimal(10**12),
    "P": Decimal(10**15),
    "E": Decimal(10**18),
}

_NUMBER = re.compile(r"([+-]?(?:\d+(?:\.\d*)?|\.\d+))(.*)", re.DOTALL)
_EXPONENT = re.compile(r"[eE]([+-]?\d+)")


def parse_quantity(text: str) -> Decimal:
    """Parse a Kubernetes resource quantity such as ``5G`` or ``10Ti``.

    Returns the quantity's value; raises ValueError if the text is not a
    valid quantity.
    """
    match = _NUMBER.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid quantity: {text!r}")
    number, suffix = Decimal(match.group(1)), match.group(2)
    if suffix in _BINARY_SUFFIXES:
        return number * _BINARY_SUFFIXES[suffix]
    if suffix in _DECIMAL_SUFFIXES:
        return number * _DECIMAL_SUFFIXES[suffix]
    exponent = _EXPONENT.fullmatch(suffix)
    if exponent is None:
        raise ValueError(f"invalid quantity: {text!r}: unknown suffix {suffix!r}")
    return number.scaleb(int(exponent.group(1)))


class PVC:
    """Wrapper over a persistent volume claim API object."""

    def __init__(self, obj: dict[str, Any] | None = None) -> None:
        self.object = obj

    def is_bound(self) -> bool:
        """Return True if the claim has been bound to a volume."""
        status = (self.object or {}).get("status") or {}
        return status.get("phase") == "Bound"

    def is_nil(self) -> bool:
        """Return True if there is no claim object behind this wrapper."""
        return self.object is None

    def __repr__(self) -> str:
        return f"PVC({self.object!r})"


Predicate = Callable[[PVC], bool]


def contains_name(name: str) -> Predicate:
    """Predicate that holds for claims whose name contains ``name``."""

    def check(pvc: PVC) -> bool:
        metadata = (pvc.object or {}).get("metadata") or {}
        return name in metadata.get("name", "")

    return check


class PVCList:
    """A list of PVC wrappers."""

    def __init__(self, items: Iterable[PVC] = ()) -> None:
        self.items: list[PVC] = list(items)

    def __len__(self) -> int:
        return len(self.items)

    def to_api_list(self) -> dict[str, Any]:
        """Return the API form of the list."""
        return {"items": [pvc.object for pvc in self.items]}


class Builder:
    """Collects claim settings and their errors, then builds the API object."""

    def __init__(self) -> None:
        self.pvc = PVC({"metadata": {}, "spec": {}})
        self.errors: list[BaseException] = []

    @property
    def _metadata(self) -> dict[str, Any]:
        return self.pvc.object["metadata"]

    @property
    def _spec(self) -> dict[str, Any]:
        return self.pvc.object["spec"]

    def _fail(self, message: str) -> Builder:
        self.errors.append(ValueError(message))
        return self

    def with_name(self, name: str) -> Builder:
        if not name:
            return self._fail("failed to build PVC object: missing PVC name")
        self._metadata["name"] = name
        return self

    def with_generate_name(self, name: str) -> Builder:
        if not name:
            return self._fail("failed to build PVC object: missing PVC generateName")
        self._metadata["generateName"] = name
        return self

    def with_namespace(self, namespace: str) -> Builder:
        """Set the namespace, falling back to ``default`` when empty."""
        self._metadata["namespace"] = namespace or "default"
        return self

    def with_annotations(self, annotations: Mapping[str, str] | None) -> Builder:
        if not annotations:
            return self._fail("failed to build PVC object: missing annotations")
        self._metadata["annotations"] = dict(annotations)
        return self

    def with_labels(self, labels: Mapping[str, str] | None) -> Builder:
        """Merge the labels into any already set."""
        if not labels:
            return self._fail("failed to build PVC object: missing labels")
        self._metadata.setdefault("labels", {}).update(labels)
        return self

    def with_owner_reference_new(
        self, owner_references: Iterable[Mapping[str, Any]] | None
    ) -> Builder:
        references = list(owner_references or ())
        if not references:
            return self._fail("failed to build pvc object: no new ownerRefernce")
        self._metadata["ownerReferences"] = references
        return self

    def with_labels_new(self, labels: Mapping[str, str] | None) -> Builder:
        """Replace the labels with a copy of the ones given."""
        if not labels:
            return self._fail("failed to build PVC object: missing labels")
        self._metadata["labels"] = dict(labels)
        return self

    def with_storage_class(self, storage_class: str) -> Builder:
        if not storage_class:
            return self._fail("failed to build PVC object: missing storageclass name")
        self._spec["storageClassName"] = storage_class
        return self

    def with_access_modes(self, access_modes: Iterable[str] | None) -> Builder:
        modes = list(access_modes or ())
        if not modes:
            return self._fail("failed to build PVC object: missing accessmodes")
        self._spec["accessModes"] = modes
        return self

    def with_capacity(self, capacity: str) -> Builder:
        """Set the storage request; the capacity must be a valid quantity."""
        try:
            quantity = parse_quantity(capacity)
        except ValueError as exc:
            return self._fail(
                "failed to build PVC object: failed to parse capacity "
                f"{{{capacity}}}: {exc}"
            )
        self._spec.setdefault("resources", {})["requests"] = {"storage": quantity}
        return self

    def build(self) -> dict[str, Any]:
        """Return the claim object, or raise BuildError if any setting failed."""
        if self.errors:
            found = " ".join(str(err) for err in self.errors)
            raise BuildError(f"[{found}]", self.errors)
        return self.pvc.object