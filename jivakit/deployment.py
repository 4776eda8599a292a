"""Building Kubernetes deployments and reading their rollout state."""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from .errors import BuildError
from .podtemplatespec import Builder as PodTemplateSpecBuilder
from .podtemplatespec import PodTemplateSpec
from .rollout import Rollout, RolloutOutput

__all__ = [
    "PredicateName",
    "Predicate",
    "Deploy",
    "Builder",
    "new_for_api_object",
]


class PredicateName(str, enum.Enum):
    """Names of the rollout checks, also used to pick a status message."""

    PROGRESS_DEADLINE_EXCEEDED = "ProgressDeadlineExceeded"
    NOT_SPEC_SYNCED = "NotSpecSynced"
    OLDER_REPLICA_ACTIVE = "OlderReplicaActive"
    TERMINATION_IN_PROGRESS = "TerminationInProgress"
    UPDATE_IN_PROGRESS = "UpdateInProgress"


def _section(obj: Mapping[str, Any] | None, key: str) -> Mapping[str, Any]:
    return (obj or {}).get(key) or {}


class Deploy:
    """Wrapper over a deployment API object."""

    def __init__(self, obj: dict[str, Any] | None = None) -> None:
        self.object: dict[str, Any] = obj if obj is not None else {}

    @property
    def _status(self) -> Mapping[str, Any]:
        return _section(self.object, "status")

    @property
    def _spec_replicas(self) -> int | None:
        return _section(self.object, "spec").get("replicas")

    def is_progress_deadline_exceeded(self) -> bool:
        """True if the Progressing condition reports a missed deadline."""
        return any(
            cond.get("type") == "Progressing"
            and cond.get("reason") == "ProgressDeadlineExceeded"
            for cond in self._status.get("conditions") or ()
        )

    def is_older_replica_active(self) -> bool:
        """True if fewer replicas are updated than the spec asks for."""
        replicas = self._spec_replicas
        return replicas is not None and self._status.get("updatedReplicas", 0) < replicas

    def is_termination_in_progress(self) -> bool:
        """True if old replicas are still waiting to terminate."""
        status = self._status
        return status.get("replicas", 0) > status.get("updatedReplicas", 0)

    def is_update_in_progress(self) -> bool:
        """True if some updated replicas are not yet available."""
        status = self._status
        return status.get("availableReplicas", 0) < status.get("updatedReplicas", 0)

    def is_not_sync_spec(self) -> bool:
        """True if the controller has not yet observed the latest spec."""
        generation = _section(self.object, "metadata").get("generation", 0)
        return generation > self._status.get("observedGeneration", 0)

    def is_rollout(self) -> tuple[PredicateName | None, bool]:
        """Run the rollout checks in order.

        Returns the name of the first check that holds and False, or
        ``(None, True)`` when the deployment has rolled out.
        """
        for name, check in _ROLLOUT_CHECKS.items():
            if check(self):
                return name, False
        return None, True

    def failed_rollout(self, name: PredicateName) -> RolloutOutput:
        """Return the rollout output for the failed check ``name``."""
        return RolloutOutput(is_rolledout=False, message=_ROLLOUT_STATUSES[name](self))

    def success_rollout(self) -> RolloutOutput:
        """Return the rollout output for a completed rollout."""
        return RolloutOutput(
            is_rolledout=True, message="deployment successfully rolled out"
        )

    def rollout_status(self) -> RolloutOutput:
        """Return the rollout output of the deployment."""
        name, ok = self.is_rollout()
        if ok or name is None:
            return self.success_rollout()
        return self.failed_rollout(name)

    def rollout_status_raw(self) -> bytes:
        """Return the rollout output of the deployment as JSON bytes."""
        return Rollout(self.rollout_status()).raw()

    def __repr__(self) -> str:
        return f"Deploy({self.object!r})"


Predicate = Callable[[Deploy], bool]


def _older_replica_message(d: Deploy) -> str:
    replicas = d._spec_replicas
    if replicas is None:
        return "replica update in-progress: some older replicas were updated"
    return (
        "replica update in-progress: "
        f"{d._status.get('updatedReplicas', 0)} of {replicas} new replicas were updated"
    )


def _termination_message(d: Deploy) -> str:
    status = d._status
    pending = status.get("replicas", 0) - status.get("updatedReplicas", 0)
    return (
        "replica termination in-progress: "
        f"{pending} old replicas are pending termination"
    )


def _update_message(d: Deploy) -> str:
    status = d._status
    return (
        "replica update in-progress: "
        f"{status.get('availableReplicas', 0)} of {status.get('updatedReplicas', 0)} "
        "updated replicas are available"
    )


_ROLLOUT_STATUSES: dict[PredicateName, Callable[[Deploy], str]] = {
    PredicateName.PROGRESS_DEADLINE_EXCEEDED: lambda d: (
        "deployment exceeded its progress deadline"
    ),
    PredicateName.OLDER_REPLICA_ACTIVE: _older_replica_message,
    PredicateName.TERMINATION_IN_PROGRESS: _termination_message,
    PredicateName.UPDATE_IN_PROGRESS: _update_message,
    PredicateName.NOT_SPEC_SYNCED: lambda d: (
        "deployment rollout in-progress: waiting for deployment spec update"
    ),
}

_ROLLOUT_CHECKS: dict[PredicateName, Predicate] = {
    PredicateName.PROGRESS_DEADLINE_EXCEEDED: Deploy.is_progress_deadline_exceeded,
    PredicateName.OLDER_REPLICA_ACTIVE: Deploy.is_older_replica_active,
    PredicateName.TERMINATION_IN_PROGRESS: Deploy.is_termination_in_progress,
    PredicateName.UPDATE_IN_PROGRESS: Deploy.is_update_in_progress,
    PredicateName.NOT_SPEC_SYNCED: Deploy.is_not_sync_spec,
}


def new_for_api_object(obj: dict[str, Any], *args: Callable[[Deploy], None]) -> Deploy:
    """Wrap an existing deployment object, applying any options to it."""
    deploy = Deploy(obj)
    for option in args:
        option(deploy)
    return deploy


def _template_to_dict(template: PodTemplateSpec) -> dict[str, Any]:
    metadata = {
        key: value
        for key, value in (
            ("name", template.name),
            ("namespace", template.namespace),
            ("annotations", template.annotations),
            ("labels", template.labels),
        )
        if value
    }
    spec = {
        key: value
        for key, value in (
            ("nodeSelector", template.node_selector),
            ("serviceAccountName", template.service_account_name),
            ("priorityClassName", template.priority_class_name),
            ("affinity", template.affinity),
            ("tolerations", list(template.tolerations)),
        )
        if value
    }
    spec["containers"] = [container.as_dict() for container in template.containers]
    return {"metadata": metadata, "spec": spec}


class Builder:
    """Collects deployment settings and their errors, then builds the object."""

    def __init__(self) -> None:
        self.deployment = Deploy({"metadata": {}, "spec": {}})
        self.checks: list[Predicate] = []
        self.errors: list[BaseException] = []

    @property
    def _metadata(self) -> dict[str, Any]:
        return self.deployment.object.setdefault("metadata", {})

    @property
    def _spec(self) -> dict[str, Any]:
        return self.deployment.object.setdefault("spec", {})

    @property
    def _pod_spec(self) -> dict[str, Any]:
        return self._spec.setdefault("template", {}).setdefault("spec", {})

    def _fail(self, message: str) -> Builder:
        self.errors.append(ValueError(message))
        return self

    def with_name(self, name: str) -> Builder:
        if not name:
            return self._fail("failed to build deployment: missing name")
        self._metadata["name"] = name
        return self

    def with_namespace(self, namespace: str) -> Builder:
        if not namespace:
            return self._fail("failed to build deployment: missing namespace")
        self._metadata["namespace"] = namespace
        return self

    def with_annotations(self, annotations: Mapping[str, str] | None) -> Builder:
        """Merge the annotations into any already set."""
        if not annotations:
            return self._fail("failed to build deployment object: missing annotations")
        if self._metadata.get("annotations") is None:
            return self.with_annotations_new(annotations)
        self._metadata["annotations"].update(annotations)
        return self

    def with_annotations_new(self, annotations: Mapping[str, str] | None) -> Builder:
        """Replace the annotations with a copy of the ones given."""
        if not annotations:
            return self._fail("failed to build deployment object: no new annotations")
        self._metadata["annotations"] = dict(annotations)
        return self

    def with_node_selector(self, selector: Mapping[str, str] | None) -> Builder:
        """Merge the node selector of the pod template into any already set."""
        if not selector:
            return self._fail("failed to build deployment object: no node selector")
        if self._pod_spec.get("nodeSelector") is None:
            return self.with_node_selector_new(selector)
        self._pod_spec["nodeSelector"].update(selector)
        return self

    def with_node_selector_new(self, selector: Mapping[str, str] | None) -> Builder:
        """Replace the node selector of the pod template."""
        if not selector:
            return self._fail("failed to build deployment object: no new node selector")
        self._pod_spec["nodeSelector"] = dict(selector)
        return self

    def with_owner_reference_new(
        self, owner_references: Iterable[Mapping[str, Any]] | None
    ) -> Builder:
        references = list(owner_references or ())
        if not references:
            return self._fail("failed to build deployment object: no new ownerRefernce")
        self._metadata["ownerReferences"] = references
        return self

    def with_labels(self, labels: Mapping[str, str] | None) -> Builder:
        """Merge the labels into any already set."""
        if not labels:
            return self._fail("failed to build deployment object: missing labels")
        if self._metadata.get("labels") is None:
            return self.with_labels_new(labels)
        self._metadata["labels"].update(labels)
        return self

    def with_labels_new(self, labels: Mapping[str, str] | None) -> Builder:
        """Replace the labels with a copy of the ones given."""
        if not labels:
            return self._fail("failed to build deployment object: no new labels")
        self._metadata["labels"] = dict(labels)
        return self

    def with_selector_match_labels(
        self, match_labels: Mapping[str, str] | None
    ) -> Builder:
        """Merge the selector's match labels into any already set."""
        if not match_labels:
            return self._fail("failed to build deployment object: missing matchlabels")
        selector = self._spec.get("selector")
        if selector is None:
            return self.with_selector_match_labels_new(match_labels)
        selector.setdefault("matchLabels", {}).update(match_labels)
        return self

    def with_selector_match_labels_new(
        self, match_labels: Mapping[str, str] | None
    ) -> Builder:
        """Replace the selector with one matching a copy of the labels given."""
        if not match_labels:
            return self._fail("failed to build deployment object: no new matchlabels")
        self._spec["selector"] = {"matchLabels": dict(match_labels)}
        return self

    def with_replicas(self, replicas: int | None) -> Builder:
        if replicas is None:
            return self._fail("failed to build deployment object: nil replicas")
        if replicas < 0:
            return self._fail(
                f"failed to build deployment object: invalid replicas {{{replicas}}}"
            )
        self._spec["replicas"] = int(replicas)
        return self

    def with_pod_template_spec_builder(
        self, template_builder: PodTemplateSpecBuilder | None
    ) -> Builder:
        """Build the pod template and set it as the deployment's template."""
        if template_builder is None:
            return self._fail("failed to build deployment: nil templatespecbuilder")
        try:
            template = template_builder.build()
        except BuildError as exc:
            self.errors.append(BuildError(f"failed to build deployment: {exc}", [exc]))
            return self
        self._spec["template"] = _template_to_dict(template)
        return self

    def with_strategy_type(self, strategy_type: str) -> Builder:
        if not strategy_type:
            return self._fail("failed to build deployment object: missing strategytype")
        self._spec.setdefault("strategy", {})["type"] = strategy_type
        return self

    def add_check(self, predicate: Predicate) -> Builder:
        self.checks.append(predicate)
        return self

    def add_checks(self, predicates: Iterable[Predicate]) -> Builder:
        for predicate in predicates:
            self.add_check(predicate)
        return self

    def build(self) -> dict[str, Any]:
        """Return the deployment object, or raise BuildError if any setting failed."""
        if self.errors:
            found = " ".join(str(err) for err in self.errors)
            name = self._metadata.get("name", "")
            raise BuildError(
                f"failed to build a deployment: {name}: "
                f"failed to validate: build errors were found: [{found}]",
                self.errors,
            )
        return self.deployment.object