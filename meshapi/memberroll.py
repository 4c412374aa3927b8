"""The ServiceMeshMemberRoll resource, listing the namespaces of a mesh."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional, TypeVar, Union

from meshapi.member import ServiceMeshMemberCondition, conditions_get, conditions_set
from meshapi.meta import ListMeta, ObjectMeta, TypeMeta, format_time, parse_time
from meshapi.status import ConditionStatus, StatusBase

_E = TypeVar("_E", bound=Enum)


def _enum_or_text(enum_cls: type[_E], value: Any) -> Union[_E, str]:
    if not value:
        return ""
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _text(value: Any) -> str:
    return value.value if isinstance(value, Enum) else value


class ServiceMeshMemberRollConditionType(str, Enum):
    """The kind of observation a member roll condition records."""

    READY = "Ready"


class ServiceMeshMemberRollConditionReason(str, Enum):
    """Why a member roll condition is in its present state."""

    CONFIGURED = "Configured"
    RECONCILE_ERROR = "ReconcileError"
    SMCP_MISSING = "ErrSMCPMissing"
    MULTIPLE_SMCP = "ErrMultipleSMCPs"
    SMCP_NOT_RECONCILED = "SMCPReconciling"


@dataclass
class ServiceMeshMemberRollCondition:
    """A single observation of a member roll's state."""

    type: Union[ServiceMeshMemberRollConditionType, str] = ""
    status: Union[ConditionStatus, str] = ""
    last_transition_time: Optional[datetime] = None
    reason: Union[ServiceMeshMemberRollConditionReason, str] = ""
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.type:
            out["type"] = _text(self.type)
        if self.status:
            out["status"] = _text(self.status)
        out["lastTransitionTime"] = format_time(self.last_transition_time)
        if self.reason:
            out["reason"] = _text(self.reason)
        if self.message:
            out["message"] = self.message
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshMemberRollCondition":
        data = data or {}
        return cls(
            type=_enum_or_text(ServiceMeshMemberRollConditionType, data.get("type")),
            status=_enum_or_text(ConditionStatus, data.get("status")),
            last_transition_time=parse_time(data.get("lastTransitionTime")),
            reason=_enum_or_text(ServiceMeshMemberRollConditionReason, data.get("reason")),
            message=data.get("message") or "",
        )


@dataclass
class ServiceMeshMemberStatusSummary:
    """The conditions of one member namespace."""

    namespace: str = ""
    conditions: list[ServiceMeshMemberCondition] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "namespace": self.namespace,
            "conditions": [c.to_dict() for c in self.conditions],
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshMemberStatusSummary":
        data = data or {}
        return cls(
            namespace=data.get("namespace") or "",
            conditions=[
                ServiceMeshMemberCondition.from_dict(c) for c in data.get("conditions") or []
            ],
        )


@dataclass
class ServiceMeshMemberRollSpec:
    """The namespaces that should be members of the mesh."""

    members: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.members:
            out["members"] = list(self.members)
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshMemberRollSpec":
        data = data or {}
        return cls(members=list(data.get("members") or []))


@dataclass
class ServiceMeshMemberRollStatus(StatusBase):
    """The observed state of a ServiceMeshMemberRoll."""

    observed_generation: int = 0
    service_mesh_generation: int = 0
    service_mesh_reconciled_version: str = ""
    members: list[str] = field(default_factory=list)
    configured_members: list[str] = field(default_factory=list)
    pending_members: list[str] = field(default_factory=list)
    terminating_members: list[str] = field(default_factory=list)
    conditions: list[ServiceMeshMemberRollCondition] = field(default_factory=list)
    member_statuses: list[ServiceMeshMemberStatusSummary] = field(default_factory=list)

    def get_condition(
        self, condition_type: Union[ServiceMeshMemberRollConditionType, str]
    ) -> ServiceMeshMemberRollCondition:
        """The condition of that type, or an Unknown one when there is none."""
        return conditions_get(self.conditions, condition_type, ServiceMeshMemberRollCondition)

    def set_condition(
        self, condition: ServiceMeshMemberRollCondition
    ) -> "ServiceMeshMemberRollStatus":
        """Store a copy of ``condition``, stamping its transition time."""
        conditions_set(self.conditions, condition)
        return self

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.observed_generation:
            out["observedGeneration"] = self.observed_generation
        if self.service_mesh_generation:
            out["meshGeneration"] = self.service_mesh_generation
        if self.service_mesh_reconciled_version:
            out["meshReconciledVersion"] = self.service_mesh_reconciled_version
        out["members"] = list(self.members)
        out["configuredMembers"] = list(self.configured_members)
        out["pendingMembers"] = list(self.pending_members)
        out["terminatingMembers"] = list(self.terminating_members)
        out["conditions"] = [c.to_dict() for c in self.conditions]
        out["memberStatuses"] = [s.to_dict() for s in self.member_statuses]
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshMemberRollStatus":
        data = data or {}
        return cls(
            annotations=dict(data.get("annotations") or {}),
            observed_generation=int(data.get("observedGeneration") or 0),
            service_mesh_generation=int(data.get("meshGeneration") or 0),
            service_mesh_reconciled_version=data.get("meshReconciledVersion") or "",
            members=list(data.get("members") or []),
            configured_members=list(data.get("configuredMembers") or []),
            pending_members=list(data.get("pendingMembers") or []),
            terminating_members=list(data.get("terminatingMembers") or []),
            conditions=[
                ServiceMeshMemberRollCondition.from_dict(c) for c in data.get("conditions") or []
            ],
            member_statuses=[
                ServiceMeshMemberStatusSummary.from_dict(s)
                for s in data.get("memberStatuses") or []
            ],
        )


@dataclass
class ServiceMeshMemberRoll:
    """Configures which namespaces belong to a service mesh."""

    type_meta: TypeMeta = field(default_factory=TypeMeta)
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ServiceMeshMemberRollSpec = field(default_factory=ServiceMeshMemberRollSpec)
    status: ServiceMeshMemberRollStatus = field(default_factory=ServiceMeshMemberRollStatus)

    def to_dict(self) -> dict[str, Any]:
        out = self.type_meta.to_dict()
        out["metadata"] = self.metadata.to_dict()
        out["spec"] = self.spec.to_dict()
        out["status"] = self.status.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshMemberRoll":
        data = data or {}
        return cls(
            type_meta=TypeMeta.from_dict(data),
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=ServiceMeshMemberRollSpec.from_dict(data.get("spec")),
            status=ServiceMeshMemberRollStatus.from_dict(data.get("status")),
        )


@dataclass
class ServiceMeshMemberRollList:
    """A list of ServiceMeshMemberRoll objects."""

    type_meta: TypeMeta = field(default_factory=TypeMeta)
    list_meta: ListMeta = field(default_factory=ListMeta)
    items: list[ServiceMeshMemberRoll] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out = self.type_meta.to_dict()
        out["metadata"] = self.list_meta.to_dict()
        out["items"] = [item.to_dict() for item in self.items]
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshMemberRollList":
        data = data or {}
        return cls(
            type_meta=TypeMeta.from_dict(data),
            list_meta=ListMeta.from_dict(data.get("metadata")),
            items=[ServiceMeshMemberRoll.from_dict(i) for i in data.get("items") or []],
        )