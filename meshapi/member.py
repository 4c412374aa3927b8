"""The ServiceMeshMember resource, which enrols a namespace in a mesh."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, Union

from meshapi.meta import ListMeta, ObjectMeta, TypeMeta, format_time, parse_time
from meshapi.status import (
    ConditionStatus,
    StatusBase,
    compact,
    enum_or_text,
    find_condition,
    object_to_dict,
    parse_items,
    store_condition,
)

conditions_get = find_condition


def conditions_set(conditions: list, condition: Any) -> None:
    """Store a copy of ``condition`` in ``conditions``, stamped with the current time."""
    store_condition(conditions, condition, datetime.now(timezone.utc))


class ServiceMeshMemberConditionType(str, Enum):
    """The kind of observation a member condition records."""

    RECONCILED = "Reconciled"
    READY = "Ready"


class ServiceMeshMemberConditionReason(str, Enum):
    """Why a member condition is in its present state."""

    CANNOT_CREATE_MEMBER_ROLL = "CreateMemberRollFailed"
    CANNOT_UPDATE_MEMBER_ROLL = "UpdateMemberRollFailed"
    CANNOT_DELETE_MEMBER_ROLL = "DeleteMemberRollFailed"
    NAMESPACE_NOT_EXISTS = "NamespaceNotExists"
    REFERENCES_DIFFERENT_CONTROL_PLANE = "ReferencesDifferentControlPlane"
    TERMINATING = "Terminating"


@dataclass
class ServiceMeshMemberCondition:
    """A single observation of a member's state."""

    type: Union[ServiceMeshMemberConditionType, str] = ""
    status: Union[ConditionStatus, str] = ""
    last_transition_time: Optional[datetime] = None
    reason: Union[ServiceMeshMemberConditionReason, str] = ""
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        out = compact(
            {
                "type": self.type,
                "status": self.status,
                "reason": self.reason,
                "message": self.message,
            }
        )
        out["lastTransitionTime"] = format_time(self.last_transition_time)
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshMemberCondition":
        data = data or {}
        return cls(
            type=enum_or_text(ServiceMeshMemberConditionType, data.get("type")),
            status=enum_or_text(ConditionStatus, data.get("status")),
            last_transition_time=parse_time(data.get("lastTransitionTime")),
            reason=enum_or_text(ServiceMeshMemberConditionReason, data.get("reason")),
            message=data.get("message") or "",
        )


@dataclass
class ServiceMeshControlPlaneRef:
    """A reference to a ServiceMeshControlPlane object."""

    name: str = ""
    namespace: str = ""

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "namespace": self.namespace}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshControlPlaneRef":
        data = data or {}
        return cls(name=data.get("name") or "", namespace=data.get("namespace") or "")


@dataclass
class ServiceMeshMemberSpec:
    """The control plane a member namespace belongs to."""

    control_plane_ref: ServiceMeshControlPlaneRef = field(
        default_factory=ServiceMeshControlPlaneRef
    )

    def to_dict(self) -> dict[str, Any]:
        return {"controlPlaneRef": self.control_plane_ref.to_dict()}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshMemberSpec":
        data = data or {}
        return cls(control_plane_ref=ServiceMeshControlPlaneRef.from_dict(data.get("controlPlaneRef")))


@dataclass
class ServiceMeshMemberStatus(StatusBase):
    """The observed state of a ServiceMeshMember."""

    observed_generation: int = 0
    service_mesh_generation: int = 0
    service_mesh_reconciled_version: str = ""
    conditions: list[ServiceMeshMemberCondition] = field(default_factory=list)

    def get_condition(
        self, condition_type: Union[ServiceMeshMemberConditionType, str]
    ) -> ServiceMeshMemberCondition:
        """The condition of that type, or an Unknown one when there is none."""
        return find_condition(self.conditions, condition_type, ServiceMeshMemberCondition)

    def set_condition(self, condition: ServiceMeshMemberCondition) -> "ServiceMeshMemberStatus":
        """Store a copy of ``condition``, stamping its transition time."""
        conditions_set(self.conditions, condition)
        return self

    def to_dict(self) -> dict[str, Any]:
        out = compact({"annotations": dict(self.annotations)})
        out["observedGeneration"] = self.observed_generation
        out.update(
            compact(
                {
                    "meshGeneration": self.service_mesh_generation,
                    "meshReconciledVersion": self.service_mesh_reconciled_version,
                }
            )
        )
        out["conditions"] = [c.to_dict() for c in self.conditions]
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshMemberStatus":
        data = data or {}
        return cls(
            annotations=dict(data.get("annotations") or {}),
            observed_generation=int(data.get("observedGeneration") or 0),
            service_mesh_generation=int(data.get("meshGeneration") or 0),
            service_mesh_reconciled_version=data.get("meshReconciledVersion") or "",
            conditions=parse_items(data, "conditions", ServiceMeshMemberCondition.from_dict),
        )


@dataclass
class ServiceMeshMember:
    """Marks the namespace it lives in as a member of a control plane's mesh."""

    type_meta: TypeMeta = field(default_factory=TypeMeta)
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ServiceMeshMemberSpec = field(default_factory=ServiceMeshMemberSpec)
    status: ServiceMeshMemberStatus = field(default_factory=ServiceMeshMemberStatus)

    def to_dict(self) -> dict[str, Any]:
        return object_to_dict(
            self.type_meta,
            self.metadata,
            {"spec": self.spec.to_dict(), "status": self.status.to_dict()},
        )

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshMember":
        data = data or {}
        return cls(
            type_meta=TypeMeta.from_dict(data),
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=ServiceMeshMemberSpec.from_dict(data.get("spec")),
            status=ServiceMeshMemberStatus.from_dict(data.get("status")),
        )


@dataclass
class ServiceMeshMemberList:
    """A list of ServiceMeshMember objects."""

    type_meta: TypeMeta = field(default_factory=TypeMeta)
    list_meta: ListMeta = field(default_factory=ListMeta)
    items: list[ServiceMeshMember] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return object_to_dict(
            self.type_meta, self.list_meta, {"items": [i.to_dict() for i in self.items]}
        )

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshMemberList":
        data = data or {}
        return cls(
            type_meta=TypeMeta.from_dict(data),
            list_meta=ListMeta.from_dict(data.get("metadata")),
            items=parse_items(data, "items", ServiceMeshMember.from_dict),
        )