"""Conditions, annotations and component status shared by the v1 resources."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, TypeVar, Union

from meshapi.meta import format_time, now_truncated, parse_time

_E = TypeVar("_E", bound=Enum)
_T = TypeVar("_T")


def enum_or_text(enum_cls: type[_E], value: Any) -> Union[_E, str]:
    """Turn a known value into its enum member; keep unknown values as text."""
    if not value:
        return ""
    try:
        return enum_cls(value)
    except ValueError:
        return value


def enum_text(value: Any) -> Any:
    """The plain value behind an enum member; other values unchanged."""
    return value.value if isinstance(value, Enum) else value


def compact(fields: Mapping[str, Any]) -> dict[str, Any]:
    """The non-empty entries of ``fields``, with enum members as plain text."""
    return {key: enum_text(value) for key, value in fields.items() if value}


def parse_items(
    data: Mapping[str, Any], key: str, parse: Callable[[Any], _T]
) -> list[_T]:
    """Parse each element of the list stored under ``key``, if any."""
    return [parse(item) for item in data.get(key) or []]


def object_to_dict(type_meta: Any, metadata: Any, sections: Mapping[str, Any]) -> dict[str, Any]:
    """A serialized object: type fields, metadata, then the given sections."""
    out = type_meta.to_dict()
    out["metadata"] = metadata.to_dict()
    out.update(sections)
    return out


def find_condition(conditions: Iterable[Any], condition_type: Any, factory: Callable[..., _T]) -> _T:
    """The condition of that type, or an Unknown one made by ``factory``."""
    for condition in conditions:
        if condition.type == condition_type:
            return condition
    return factory(type=condition_type, status=ConditionStatus.UNKNOWN)


def store_condition(conditions: list, condition: Any, now: datetime) -> None:
    """Store a copy of ``condition``, stamping its transition time with ``now``
    when it is new or its status changed."""
    for index, previous in enumerate(conditions):
        if previous.type == condition.type:
            stamp = now if previous.status != condition.status else previous.last_transition_time
            conditions[index] = dataclasses.replace(condition, last_transition_time=stamp)
            return
    conditions.append(dataclasses.replace(condition, last_transition_time=now))


class ConditionType(str, Enum):
    """The stage a condition describes."""

    INSTALLED = "Installed"
    RECONCILED = "Reconciled"
    READY = "Ready"


class ConditionStatus(str, Enum):
    """Whether a condition holds."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class ConditionReason(str, Enum):
    """Why a condition is in its present state."""

    DELETION_ERROR = "DeletionError"
    INSTALL_SUCCESSFUL = "InstallSuccessful"
    INSTALL_ERROR = "InstallError"
    RECONCILE_SUCCESSFUL = "ReconcileSuccessful"
    VALIDATION_ERROR = "ValidationError"
    DEPENDENCY_MISSING_ERROR = "DependencyMissingError"
    RECONCILE_ERROR = "ReconcileError"
    RESOURCE_CREATED = "ResourceCreated"
    SPEC_UPDATED = "SpecUpdated"
    UPDATE_SUCCESSFUL = "UpdateSuccessful"
    COMPONENTS_READY = "ComponentsReady"
    COMPONENTS_NOT_READY = "ComponentsNotReady"
    PROBE_ERROR = "ProbeError"
    PAUSING_INSTALL = "PausingInstall"
    PAUSING_UPDATE = "PausingUpdate"
    DELETING = "Deleting"
    DELETED = "Deleted"


@dataclass
class Condition:
    """A single observation of an object's state."""

    type: Union[ConditionType, str] = ""
    status: Union[ConditionStatus, str] = ""
    reason: Union[ConditionReason, str] = ""
    message: str = ""
    last_transition_time: Optional[datetime] = None

    def matches(
        self,
        status: Union[ConditionStatus, str],
        reason: Union[ConditionReason, str],
        message: str,
    ) -> bool:
        """True when status, reason and message all equal the given ones."""
        return self.status == status and self.reason == reason and self.message == message

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
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Condition":
        data = data or {}
        return cls(
            type=enum_or_text(ConditionType, data.get("type")),
            status=enum_or_text(ConditionStatus, data.get("status")),
            reason=enum_or_text(ConditionReason, data.get("reason")),
            message=data.get("message") or "",
            last_transition_time=parse_time(data.get("lastTransitionTime")),
        )


@dataclass
class StatusBase:
    """Free-form status annotations, kept for display by command-line tools."""

    annotations: dict[str, str] = field(default_factory=dict)

    def get_annotation(self, name: str) -> str:
        return self.annotations.get(name, "")

    def set_annotation(self, name: str, value: str) -> None:
        self.annotations[name] = value

    def remove_annotation(self, name: str) -> None:
        self.annotations.pop(name, None)


@dataclass
class StatusType:
    """The list of conditions describing an object's state."""

    conditions: list[Condition] = field(default_factory=list)

    def get_condition(self, condition_type: Union[ConditionType, str]) -> Condition:
        """The condition of that type, or an Unknown one when there is none."""
        return find_condition(self.conditions, condition_type, Condition)

    def set_condition(self, condition: Condition) -> "StatusType":
        """Store a copy of ``condition``, stamping its transition time."""
        store_condition(self.conditions, condition, now_truncated())
        return self

    def remove_condition(self, condition_type: Union[ConditionType, str]) -> "StatusType":
        """Drop the first condition of that type, if any."""
        for index, condition in enumerate(self.conditions):
            if condition.type == condition_type:
                del self.conditions[index]
                break
        return self

    def to_dict(self) -> dict[str, Any]:
        return compact({"conditions": [c.to_dict() for c in self.conditions]})

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "StatusType":
        return cls(conditions=parse_items(data or {}, "conditions", Condition.from_dict))


@dataclass
class ComponentStatus(StatusType):
    """The status of one control plane component and its children."""

    resource: str = ""
    resources: list[StatusType] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out.update(
            compact(
                {
                    "resource": self.resource,
                    "children": [child.to_dict() for child in self.resources],
                }
            )
        )
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ComponentStatus":
        data = data or {}
        return cls(
            conditions=parse_items(data, "conditions", Condition.from_dict),
            resource=data.get("resource") or "",
            resources=parse_items(data, "children", StatusType.from_dict),
        )


@dataclass
class ComponentStatusList:
    """The statuses of the components that make up a control plane."""

    component_status: list[ComponentStatus] = field(default_factory=list)

    def find_component_by_name(self, name: str) -> Optional[ComponentStatus]:
        """The status of the named component itself, or ``None``."""
        return next((s for s in self.component_status if s.resource == name), None)


class ResourceKey(str):
    """A key of the form ``namespace/name=apiVersion,Kind=kind``."""

    __slots__ = ()

    @classmethod
    def from_parts(cls, namespace: str, name: str, api_version: str, kind: str) -> "ResourceKey":
        return cls(f"{namespace}/{name}={api_version},Kind={kind}")

    def _split(self, text: str, separator: str) -> tuple[str, str]:
        head, sep, tail = text.partition(separator)
        if not sep:
            raise ValueError(f"malformed resource key: {str(self)!r}")
        return head, tail

    def to_unstructured(self) -> dict[str, Any]:
        """An object skeleton holding the namespace, name, apiVersion and kind."""
        head, tail = self._split(self, "=")
        namespace, name = self._split(head, "/")
        api_version, kind = self._split(tail, ",Kind=")
        obj: dict[str, Any] = {"apiVersion": api_version, "kind": kind}
        metadata = compact({"namespace": namespace, "name": name})
        if metadata:
            obj["metadata"] = metadata
        return obj


def compose_reconciled_version(operator_version: str, generation: int) -> str:
    """The value stored in reconciled-version fields."""
    return f"{operator_version}-{generation}"


def new_status() -> StatusType:
    return StatusType()


def new_component_status() -> ComponentStatus:
    return ComponentStatus()