# meshapi

Python models for service mesh API resources: control planes, mesh members,
member rolls and extensions. It also provides a `HelmValues` container for
the free-form Helm configuration that control planes carry. Every resource
converts to and from plain dictionaries in the field layout of the API, and
control planes and Helm values also convert to and from YAML.

## Installation

```
pip install meshapi
```

To run the test suite:

```
pip install "meshapi[test]"
pytest
```

## Modules

- `meshapi.meta` holds the API identifiers, object metadata and timestamp
  helpers.
  - Identifiers: `GroupVersion` (with `with_resource()` and `api_version()`),
    `GroupVersionResource` and `GroupResource`. `v1_resource()` and
    `v1alpha1_resource()` qualify a resource name with the `maistra.io` group.
  - Metadata: `TypeMeta`, `ObjectMeta` and `ListMeta`, each with `to_dict()`
    and `from_dict()`.
  - Timestamps: `format_time()` writes RFC 3339 UTC at whole seconds,
    `parse_time()` reads it, and `now_truncated()` gives the current time.
- `meshapi.helmvalues` provides `HelmValues`, a nested mapping addressed by
  dot-separated paths, and `HelmValuesError`.
- `meshapi.status` holds `Condition`, `ConditionType`, `ConditionStatus`,
  `ConditionReason`, `StatusBase` (status annotations), `StatusType`,
  `ComponentStatus`, `ComponentStatusList`, `ResourceKey`,
  `compose_reconciled_version()`, `new_status()` and
  `new_component_status()`.
- `meshapi.controlplane` holds `ServiceMeshControlPlane`,
  `ServiceMeshControlPlaneList`, `ControlPlaneSpec`, `ControlPlaneStatus`,
  `NetworkType` and `reconciled_version_of()`.
- `meshapi.member` holds `ServiceMeshMember` and its spec, status and
  conditions. `ServiceMeshControlPlaneRef` prints as `namespace/name`.
- `meshapi.memberroll` holds `ServiceMeshMemberRoll` and its spec, status and
  conditions.
- `meshapi.extension` holds the v1 `ServiceMeshExtension`, which is the
  storage version (`is_hub()` returns `True`). Its
  `ServiceMeshExtensionConfig` reads and writes JSON.
- `meshapi.extension_v1alpha1` holds the older v1alpha1 extension, whose
  config is a raw string. It converts to and from v1 with `convert_to()`,
  `convert_from()`, `spec_to_hub()` and `spec_from_hub()`.

## Helm values

```python
from meshapi.helmvalues import HelmValues, HelmValuesError

values = HelmValues({"global": {"hub": "registry.example.com"}})
values.set_field("gateways.enabled", True)

hub = values.get_string("global.hub")          # "registry.example.com"
enabled = values.get_bool("gateways.enabled")  # True
missing = values.get_string("global.tag")      # None

print(values.to_yaml())

try:
    values.get_bool("global.hub")
except HelmValuesError as exc:
    print(exc)
```

Reading values:

- The typed accessors return the value itself. These are `get_bool`,
  `get_string`, `get_int`, `get_float`, `get_force_number_to_string`,
  `get_string_list`, `get_list` and `get_map`.
- They return `None` when the path is absent or holds `null`.
- They raise `HelmValuesError` when the value has the wrong type.
- `get_map` and `get_list` return deep copies. `get_field` returns the stored
  value without copying it.
- Each `get_and_remove_*` variant removes the field once the read has
  succeeded.

Writing values:

- `set_field` creates intermediate mappings as needed.
- It raises `HelmValuesError` if a step along the path exists but is not a
  mapping.

Serialization:

- `to_json`/`from_json`, `to_yaml`/`from_yaml` and `deep_copy` round-trip the
  contents.

## Control planes

```python
from meshapi.controlplane import ServiceMeshControlPlane

with open("smcp.yaml") as f:
    smcp = ServiceMeshControlPlane.from_yaml(f.read())

foo = smcp.spec.istio.get_map("foo")
print(smcp.status.get_reconciled_version())
print(smcp.to_yaml())
```

`ControlPlaneStatus.get_reconciled_version()` falls back to
`"1.0.0-<observedGeneration>"` when no version has been recorded.
`reconciled_version_of(None)` gives `"0.0.0-0"`.

## Conditions

```python
from meshapi.status import Condition, ConditionStatus, ConditionType, new_status

status = new_status()
status.set_condition(Condition(type=ConditionType.READY, status=ConditionStatus.TRUE))
ready = status.get_condition(ConditionType.READY)
```

`set_condition` stores a copy of the condition and stamps its
`last_transition_time`. The time stays the same until the status changes.

`get_condition` returns a condition with status `Unknown` when none of that
type exists.

The member and member roll statuses offer the same `get_condition` and
`set_condition` methods for their own condition types.

## Resource keys

`ResourceKey.from_parts(namespace, name, api_version, kind)` builds a key of
the form `namespace/name=apiVersion,Kind=kind`. `to_unstructured()` turns
such a key back into a dictionary skeleton with `apiVersion`, `kind` and
`metadata`. It raises `ValueError` if the key is malformed.

## Extension conversion

```python
from meshapi.extension_v1alpha1 import ServiceMeshExtension as AlphaExtension

alpha = AlphaExtension()
alpha.spec.config = '{"key": "value"}'
hub = alpha.convert_to()           # v1 ServiceMeshExtension
back = AlphaExtension()
back.convert_from(hub)
print(back.spec.config)            # {"key":"value"}
```

When a v1alpha1 config string is read into v1, it is parsed as a JSON object
and numbers are read as floats.

If the string is not a JSON object, it is stored in the v1 config under the
`raw_v1alpha1_config` key. A warning is logged, and the string comes back
unchanged when converting back.

Converting to v1alpha1 renders the config as compact JSON with sorted keys.

## What this package does not do

This package models the resources and their serialization only. It does not
talk to a cluster: there is no API client, no watching or caching of
resources, no informers or listers, and no generation of resource
definitions or manifests.