"""The ServiceMeshControlPlane resource."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union

import yaml

from meshapi.helmvalues import HelmValues
from meshapi.meta import ListMeta, ObjectMeta, TypeMeta
from meshapi.status import (
    ComponentStatus,
    ComponentStatusList,
    Condition,
    StatusBase,
    StatusType,
    compact,
    compose_reconciled_version,
    enum_or_text,
    object_to_dict,
    parse_items,
)

DEFAULT_TEMPLATE = "default"

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _Loader(yaml.SafeLoader):
    """A safe loader that leaves timestamps as text."""


_Loader.yaml_implicit_resolvers = {
    key: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for key, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class NetworkType(str, Enum):
    """The network type of the cluster (no longer used)."""

    SUBNET = "subnet"
    MULTITENANT = "multitenant"
    NETWORK_POLICY = "networkpolicy"


def _values_in(data: Any) -> Optional[HelmValues]:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError(f"expected a mapping of values, got {type(data).__name__}")
    return HelmValues(copy.deepcopy(data))


@dataclass
class ControlPlaneSpec:
    """The configuration for installing a control plane."""

    template: str = ""
    profiles: list[str] = field(default_factory=list)
    version: str = ""
    network_type: Union[NetworkType, str] = ""
    istio: Optional[HelmValues] = None
    three_scale: Optional[HelmValues] = None

    def to_dict(self) -> dict[str, Any]:
        out = compact(
            {
                "template": self.template,
                "profiles": list(self.profiles),
                "version": self.version,
                "networkType": self.network_type,
            }
        )
        for key, values in (("istio", self.istio), ("threeScale", self.three_scale)):
            if values is not None:
                out[key] = copy.deepcopy(values.get_content())
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ControlPlaneSpec":
        data = data or {}
        return cls(
            template=data.get("template") or "",
            profiles=list(data.get("profiles") or []),
            version=data.get("version") or "",
            network_type=enum_or_text(NetworkType, data.get("networkType")),
            istio=_values_in(data.get("istio")),
            three_scale=_values_in(data.get("threeScale")),
        )


@dataclass
class ControlPlaneStatus(StatusBase, StatusType, ComponentStatusList):
    """The observed state of a control plane."""

    observed_generation: int = 0
    reconciled_version: str = ""
    last_applied_configuration: ControlPlaneSpec = field(default_factory=ControlPlaneSpec)

    def get_reconciled_version(self) -> str:
        """The reconciled version, or a default derived for older resources."""
        if not self.reconciled_version:
            return compose_reconciled_version("1.0.0", self.observed_generation)
        return self.reconciled_version

    def to_dict(self) -> dict[str, Any]:
        out = compact(
            {
                "annotations": dict(self.annotations),
                "conditions": [c.to_dict() for c in self.conditions],
                "observedGeneration": self.observed_generation,
                "reconciledVersion": self.reconciled_version,
                "components": [c.to_dict() for c in self.component_status],
            }
        )
        out["lastAppliedConfiguration"] = self.last_applied_configuration.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ControlPlaneStatus":
        data = data or {}
        return cls(
            annotations=dict(data.get("annotations") or {}),
            conditions=parse_items(data, "conditions", Condition.from_dict),
            component_status=parse_items(data, "components", ComponentStatus.from_dict),
            observed_generation=int(data.get("observedGeneration") or 0),
            reconciled_version=data.get("reconciledVersion") or "",
            last_applied_configuration=ControlPlaneSpec.from_dict(
                data.get("lastAppliedConfiguration")
            ),
        )


def reconciled_version_of(status: Optional[ControlPlaneStatus]) -> str:
    """The reconciled version of ``status``, with a default when there is none."""
    if status is None:
        return compose_reconciled_version("0.0.0", 0)
    return status.get_reconciled_version()


def _load_mapping(text: Union[str, bytes]) -> dict[str, Any]:
    data = yaml.load(text, Loader=_Loader)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"expected a mapping, got {type(data).__name__}")
    return data


@dataclass
class ServiceMeshControlPlane:
    """A deployment of the service mesh control plane."""

    type_meta: TypeMeta = field(default_factory=TypeMeta)
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ControlPlaneSpec = field(default_factory=ControlPlaneSpec)
    status: ControlPlaneStatus = field(default_factory=ControlPlaneStatus)

    def to_dict(self) -> dict[str, Any]:
        return object_to_dict(
            self.type_meta,
            self.metadata,
            {"spec": self.spec.to_dict(), "status": self.status.to_dict()},
        )

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshControlPlane":
        data = data or {}
        return cls(
            type_meta=TypeMeta.from_dict(data),
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=ControlPlaneSpec.from_dict(data.get("spec")),
            status=ControlPlaneStatus.from_dict(data.get("status")),
        )

    def to_yaml(self) -> str:
        return yaml.safe_dump(
            self.to_dict(), default_flow_style=False, sort_keys=True, allow_unicode=True
        )

    @classmethod
    def from_yaml(cls, text: Union[str, bytes]) -> "ServiceMeshControlPlane":
        return cls.from_dict(_load_mapping(text))


@dataclass
class ServiceMeshControlPlaneList:
    """A list of ServiceMeshControlPlane objects."""

    type_meta: TypeMeta = field(default_factory=TypeMeta)
    list_meta: ListMeta = field(default_factory=ListMeta)
    items: list[ServiceMeshControlPlane] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return object_to_dict(
            self.type_meta, self.list_meta, {"items": [i.to_dict() for i in self.items]}
        )

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshControlPlaneList":
        data = data or {}
        return cls(
            type_meta=TypeMeta.from_dict(data),
            list_meta=ListMeta.from_dict(data.get("metadata")),
            items=parse_items(data, "items", ServiceMeshControlPlane.from_dict),
        )