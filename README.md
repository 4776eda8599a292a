# jivakit

Helpers for putting together the Kubernetes objects that back Jiva volumes
(containers, pod templates, deployments, persistent volume claims and
services), for reading a deployment's rollout state, and for talking to a
Jiva controller over HTTP.

## Installation

```
pip install jivakit
```

To run the test suite:

```
pip install "jivakit[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `jivakit.container` | `Container` dataclass, its `Builder`, and the option functions `new`, `with_name`, `with_image` |
| `jivakit.podtemplatespec` | `PodTemplateSpec` dataclass and its `Builder`, which takes container builders |
| `jivakit.deployment` | Deployment `Builder`, the `Deploy` wrapper with rollout checks, `PredicateName`, `new_for_api_object` |
| `jivakit.rollout` | `RolloutOutput` and `Rollout`, which renders an output as compact JSON bytes |
| `jivakit.pvc` | Claim `Builder`, `PVC` and `PVCList` wrappers, `parse_quantity`, `contains_name` |
| `jivakit.service` | Service `Builder`, `Service` and `ServiceList` wrappers, `contains_name` |
| `jivakit.jiva_client` | `ControllerClient` and `BadResponseError` |
| `jivakit.errors` | `BuildError` |

### Builders

Each builder method returns the builder, so calls chain. A bad argument
(an empty name, an empty label map, a negative replica count and so on) does
not raise at once: the problem is recorded in the builder's `errors` list, and
`build()` then raises `BuildError`, whose `errors` attribute holds every
recorded problem in order.

What `build()` returns:

- `container.Builder.build()` returns a `Container` dataclass; first it runs
  the predicates added with `add_check` / `add_checks`. A predicate takes the
  `Container` and returns a `(message, ok)` pair; each failing one adds
  `predicatefailed: <message>` to the errors. `Container.as_dict()` gives the
  API form with camel-case keys, leaving out unset fields.
- `podtemplatespec.Builder.build()` returns a `PodTemplateSpec` dataclass.
- `deployment.Builder.build()`, `pvc.Builder.build()` and
  `service.Builder.build()` return plain dictionaries shaped like the
  Kubernetes API (`metadata`, `spec`, ...). The deployment builder turns the
  pod template and its containers into dictionaries too.

Methods ending in `_new` replace a field with a copy of what they are given;
their counterparts without the suffix merge into (or append to) what is
already there. `pvc.Builder.with_namespace("")` falls back to `default`.

`pvc.Builder.with_capacity` parses the quantity with `parse_quantity`, which
understands binary suffixes (`Ki` … `Ei`), decimal suffixes (`n`, `u`, `m`,
`k`, `M`, `G`, `T`, `P`, `E`) and exponents such as `1e3`, and returns a
`decimal.Decimal`. The parsed value is what is stored under
`spec.resources.requests.storage`, so convert it before serialising the claim
to JSON.

## Examples

Build a container and put it into a deployment:

```python
from jivakit import container, deployment, podtemplatespec

ctr = (
    container.Builder()
    .with_name("jiva-controller")
    .with_image("openebs/jiva:ci")
    .with_command_new(["launch"])
    .with_arguments_new(["controller", "--frontend", "gotgt"])
)

template = (
    podtemplatespec.Builder()
    .with_labels({"openebs.io/component": "jiva-controller"})
    .with_container_builders(ctr)
)

deploy = (
    deployment.Builder()
    .with_name("pvc-1234-jiva-ctrl")
    .with_namespace("openebs")
    .with_selector_match_labels({"openebs.io/component": "jiva-controller"})
    .with_replicas(1)
    .with_pod_template_spec_builder(template)
    .with_strategy_type("Recreate")
    .build()
)
```

Check how a deployment is rolling out:

```python
from jivakit.deployment import Deploy

status = Deploy(deploy).rollout_status()
print(status.is_rolledout, status.message)
print(Deploy(deploy).rollout_status_raw())  # b'{"isRolledout":...,"message":...}'
```

The checks run in this order, and the first one that holds decides the
message: progress deadline exceeded, older replicas still active, termination
in progress, update in progress, spec not yet observed. If none holds the
message is `deployment successfully rolled out`.

Create a claim:

```python
from jivakit import pvc

claim = (
    pvc.Builder()
    .with_name("data")
    .with_namespace("openebs")
    .with_storage_class("jiva-single-replica")
    .with_access_modes(["ReadWriteOnce"])
    .with_capacity("5Gi")
    .build()
)
```

Talk to a Jiva controller:

```python
from jivakit.jiva_client import ControllerClient

client = ControllerClient("localhost:9501")
volumes = client.get("/volumes")
```

`ControllerClient` puts `http://` in front of the address and `/v1` after it
when they are missing, and waits at most `timeout` seconds (2 by default).
`get` returns the decoded JSON body. `post` and `do` send the payload as JSON,
use paths that already start with `http` as they are, return the decoded
reply or `None` for an empty body, and raise `BadResponseError` for a status
of 300 or above.

## What it does not do

jivakit only assembles objects and reads them. It has no Kubernetes API
client: nothing here creates, updates, lists or deletes objects in a cluster,
watches resources, or runs as a controller or storage driver. Hand the built
objects to a Kubernetes client of your choice.