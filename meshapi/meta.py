"""API group and version identifiers and the metadata shared by all resources."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

GROUP_NAME = "maistra.io"

_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


@dataclass(frozen=True)
class GroupResource:
    """A resource name qualified by its API group."""

    group: str
    resource: str

    def __str__(self) -> str:
        if not self.group:
            return self.resource
        return f"{self.resource}.{self.group}"


@dataclass(frozen=True)
class GroupVersionResource:
    """A resource name qualified by API group and version."""

    group: str
    version: str
    resource: str

    def group_resource(self) -> GroupResource:
        """Drop the version, keeping group and resource."""
        return GroupResource(self.group, self.resource)


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with one of its versions."""

    group: str
    version: str

    def with_resource(self, resource: str) -> GroupVersionResource:
        """Qualify ``resource`` with this group and version."""
        return GroupVersionResource(self.group, self.version, resource)

    def api_version(self) -> str:
        """The value used in the ``apiVersion`` field of objects."""
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    def __str__(self) -> str:
        return self.api_version()


SCHEME_GROUP_VERSION_V1 = GroupVersion(GROUP_NAME, "v1")
SCHEME_GROUP_VERSION_V1ALPHA1 = GroupVersion(GROUP_NAME, "v1alpha1")


def v1_resource(resource: str) -> GroupResource:
    """Qualify an unqualified resource with the v1 group."""
    return SCHEME_GROUP_VERSION_V1.with_resource(resource).group_resource()


def v1alpha1_resource(resource: str) -> GroupResource:
    """Qualify an unqualified resource with the v1alpha1 group."""
    return SCHEME_GROUP_VERSION_V1ALPHA1.with_resource(resource).group_resource()


def format_time(value: Optional[datetime]) -> Optional[str]:
    """Render a timestamp in RFC 3339 form at second precision, in UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(_TIME_FORMAT)


def parse_time(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp; empty or missing values give ``None``."""
    if not value:
        return None
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def now_truncated() -> datetime:
    """The current UTC time, truncated to whole seconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)


@dataclass
class TypeMeta:
    """Kind and API version of an object."""

    kind: str = ""
    api_version: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.kind:
            out["kind"] = self.kind
        if self.api_version:
            out["apiVersion"] = self.api_version
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "TypeMeta":
        data = data or {}
        return cls(kind=data.get("kind") or "", api_version=data.get("apiVersion") or "")


@dataclass
class ObjectMeta:
    """Metadata carried by every persisted resource."""

    name: str = ""
    generate_name: str = ""
    namespace: str = ""
    uid: str = ""
    resource_version: str = ""
    generation: int = 0
    creation_timestamp: Optional[datetime] = None
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.name:
            out["name"] = self.name
        if self.generate_name:
            out["generateName"] = self.generate_name
        if self.namespace:
            out["namespace"] = self.namespace
        if self.uid:
            out["uid"] = self.uid
        if self.resource_version:
            out["resourceVersion"] = self.resource_version
        if self.generation:
            out["generation"] = self.generation
        out["creationTimestamp"] = format_time(self.creation_timestamp)
        if self.labels:
            out["labels"] = dict(self.labels)
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ObjectMeta":
        data = data or {}
        return cls(
            name=data.get("name") or "",
            generate_name=data.get("generateName") or "",
            namespace=data.get("namespace") or "",
            uid=data.get("uid") or "",
            resource_version=data.get("resourceVersion") or "",
            generation=int(data.get("generation") or 0),
            creation_timestamp=parse_time(data.get("creationTimestamp")),
            labels=dict(data.get("labels") or {}),
            annotations=dict(data.get("annotations") or {}),
        )


@dataclass
class ListMeta:
    """Metadata carried by resource lists."""

    resource_version: str = ""
    continue_token: str = ""
    remaining_item_count: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.resource_version:
            out["resourceVersion"] = self.resource_version
        if self.continue_token:
            out["continue"] = self.continue_token
        if self.remaining_item_count is not None:
            out["remainingItemCount"] = self.remaining_item_count
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ListMeta":
        data = data or {}
        remaining = data.get("remainingItemCount")
        return cls(
            resource_version=data.get("resourceVersion") or "",
            continue_token=data.get("continue") or "",
            remaining_item_count=None if remaining is None else int(remaining),
        )