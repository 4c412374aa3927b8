"""The ServiceMeshExtension resource at v1, the version other versions convert through."""

from __future__ import annotations

import copy
import json
import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional, TypeVar, Union

from meshapi.meta import ListMeta, ObjectMeta, TypeMeta

_E = TypeVar("_E", bound=Enum)

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


class FilterPhase(str, Enum):
    """The point at which a filter is injected into the proxy chain."""

    PRE_AUTHN = "PreAuthN"
    POST_AUTHN = "PostAuthN"
    PRE_AUTHZ = "PreAuthZ"
    POST_AUTHZ = "PostAuthZ"
    PRE_STATS = "PreStats"
    POST_STATS = "PostStats"


class PullPolicy(str, Enum):
    """When the extension image is pulled."""

    ALWAYS = "Always"
    NEVER = "Never"
    IF_NOT_PRESENT = "IfNotPresent"


def _enum_or_text(enum_cls: type[_E], value: Any) -> Union[_E, str]:
    if not value:
        return ""
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _optional_phase(value: Any) -> Optional[Union[FilterPhase, str]]:
    if value is None:
        return None
    try:
        return FilterPhase(value)
    except ValueError:
        return value


def _text(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _format_float(value: float) -> str:
    if not math.isfinite(value):
        raise ValueError(f"unsupported value: {value!r}")
    magnitude = abs(value)
    if magnitude != 0 and (magnitude < 1e-6 or magnitude >= 1e21):
        mantissa, exponent = repr(value).split("e")
        digits = exponent[1:].lstrip("0") or "0"
        return f"{mantissa}e{exponent[0]}{digits}"
    return format(Decimal(repr(value)).normalize(), "f")


def _encode_string(value: str) -> str:
    text = json.dumps(value, ensure_ascii=False)
    for char, escape in _HTML_ESCAPES.items():
        text = text.replace(char, escape)
    return text


def _encode(value: Any) -> str:
    """Compact JSON with sorted keys, escaped HTML and shortest number forms."""
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, Enum):
        return _encode(value.value)
    if isinstance(value, str):
        return _encode_string(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, Mapping):
        for key in value:
            if not isinstance(key, str):
                raise TypeError(f"unsupported map key: {key!r}")
        items = ",".join(
            f"{_encode_string(key)}:{_encode(value[key])}" for key in sorted(value)
        )
        return "{" + items + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_encode(item) for item in value) + "]"
    raise TypeError(f"unsupported type: {type(value).__name__}")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid character in JSON: {name}")


@dataclass
class LocalObjectReference:
    """A reference to an object in the same namespace, by name."""

    name: str = ""


def _secret_to_dict(ref: LocalObjectReference) -> dict[str, Any]:
    return {"name": ref.name} if ref.name else {}


def _secret_from_dict(data: Optional[Mapping[str, Any]]) -> LocalObjectReference:
    data = data or {}
    return LocalObjectReference(name=data.get("name") or "")


@dataclass
class WorkloadSelector:
    """Matches workloads by their pod labels."""

    labels: dict[str, str] = field(default_factory=dict)


def _selector_to_dict(selector: WorkloadSelector) -> dict[str, Any]:
    return {"labels": dict(selector.labels)}


def _selector_from_dict(data: Optional[Mapping[str, Any]]) -> WorkloadSelector:
    data = data or {}
    return WorkloadSelector(labels=dict(data.get("labels") or {}))


@dataclass
class DeploymentStatus:
    """How far the extension has been rolled out."""

    ready: bool = False
    container_sha256: str = ""
    sha256: str = ""
    url: str = ""
    message: str = ""


def _deployment_to_dict(status: DeploymentStatus) -> dict[str, Any]:
    out: dict[str, Any] = {"ready": status.ready}
    if status.container_sha256:
        out["containerSha256"] = status.container_sha256
    if status.sha256:
        out["sha256"] = status.sha256
    if status.url:
        out["url"] = status.url
    if status.message:
        out["message"] = status.message
    return out


def _deployment_from_dict(data: Optional[Mapping[str, Any]]) -> DeploymentStatus:
    data = data or {}
    return DeploymentStatus(
        ready=bool(data.get("ready")),
        container_sha256=data.get("containerSha256") or "",
        sha256=data.get("sha256") or "",
        url=data.get("url") or "",
        message=data.get("message") or "",
    )


@dataclass
class ServiceMeshExtensionConfig:
    """Free-form configuration handed to the extension."""

    data: Optional[dict[str, Any]] = None

    def deep_copy(self) -> "ServiceMeshExtensionConfig":
        return ServiceMeshExtensionConfig(copy.deepcopy(self.data))

    def to_json(self) -> str:
        """The configuration as compact JSON; empty when there is none."""
        if self.data is None:
            return ""
        return _encode(self.data)

    def load_json(self, text: Union[str, bytes]) -> None:
        """Read a JSON object into the configuration, merging with what is there.

        Empty input leaves the configuration unchanged and ``null`` clears it.
        Numbers are read as floats.
        """
        if not text:
            return
        try:
            parsed = json.loads(text, parse_int=float, parse_constant=_reject_constant)
        except ValueError as exc:
            raise ValueError(f"invalid config JSON: {exc}") from exc
        if parsed is None:
            self.data = None
            return
        if not isinstance(parsed, dict):
            raise ValueError(f"cannot unmarshal {type(parsed).__name__} into a config mapping")
        if self.data is None:
            self.data = parsed
        else:
            self.data.update(parsed)


@dataclass
class ServiceMeshExtensionSpec:
    """The desired state of a ServiceMeshExtension."""

    image: str = ""
    image_pull_policy: Union[PullPolicy, str] = ""
    image_pull_secrets: list[LocalObjectReference] = field(default_factory=list)
    workload_selector: WorkloadSelector = field(default_factory=WorkloadSelector)
    phase: Optional[Union[FilterPhase, str]] = None
    priority: Optional[int] = None
    config: ServiceMeshExtensionConfig = field(default_factory=ServiceMeshExtensionConfig)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.image:
            out["image"] = self.image
        if self.image_pull_policy:
            out["imagePullPolicy"] = _text(self.image_pull_policy)
        if self.image_pull_secrets:
            out["imagePullSecrets"] = [_secret_to_dict(s) for s in self.image_pull_secrets]
        out["workloadSelector"] = _selector_to_dict(self.workload_selector)
        out["phase"] = None if self.phase is None else _text(self.phase)
        if self.priority is not None:
            out["priority"] = self.priority
        if self.config.data is not None:
            out["config"] = copy.deepcopy(self.config.data)
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshExtensionSpec":
        data = data or {}
        raw_config = data.get("config")
        if raw_config is not None and not isinstance(raw_config, dict):
            raise ValueError(f"expected a config mapping, got {type(raw_config).__name__}")
        priority = data.get("priority")
        return cls(
            image=data.get("image") or "",
            image_pull_policy=_enum_or_text(PullPolicy, data.get("imagePullPolicy")),
            image_pull_secrets=[_secret_from_dict(s) for s in data.get("imagePullSecrets") or []],
            workload_selector=_selector_from_dict(data.get("workloadSelector")),
            phase=_optional_phase(data.get("phase")),
            priority=None if priority is None else int(priority),
            config=ServiceMeshExtensionConfig(copy.deepcopy(raw_config)),
        )


@dataclass
class ServiceMeshExtensionStatus:
    """The observed state of a ServiceMeshExtension."""

    phase: Union[FilterPhase, str] = ""
    priority: int = 0
    observed_generation: int = 0
    deployment: DeploymentStatus = field(default_factory=DeploymentStatus)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.phase:
            out["phase"] = _text(self.phase)
        if self.priority:
            out["priority"] = self.priority
        if self.observed_generation:
            out["observedGeneration"] = self.observed_generation
        out["deployment"] = _deployment_to_dict(self.deployment)
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshExtensionStatus":
        data = data or {}
        return cls(
            phase=_enum_or_text(FilterPhase, data.get("phase")),
            priority=int(data.get("priority") or 0),
            observed_generation=int(data.get("observedGeneration") or 0),
            deployment=_deployment_from_dict(data.get("deployment")),
        )


@dataclass
class ServiceMeshExtension:
    """An extension loaded into the proxies of selected workloads."""

    type_meta: TypeMeta = field(default_factory=TypeMeta)
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ServiceMeshExtensionSpec = field(default_factory=ServiceMeshExtensionSpec)
    status: ServiceMeshExtensionStatus = field(default_factory=ServiceMeshExtensionStatus)

    def is_hub(self) -> bool:
        """v1 is the storage version that other versions convert to and from."""
        return True

    def to_dict(self) -> dict[str, Any]:
        out = self.type_meta.to_dict()
        out["metadata"] = self.metadata.to_dict()
        out["spec"] = self.spec.to_dict()
        out["status"] = self.status.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshExtension":
        data = data or {}
        return cls(
            type_meta=TypeMeta.from_dict(data),
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=ServiceMeshExtensionSpec.from_dict(data.get("spec")),
            status=ServiceMeshExtensionStatus.from_dict(data.get("status")),
        )


@dataclass
class ServiceMeshExtensionList:
    """A list of ServiceMeshExtension objects."""

    type_meta: TypeMeta = field(default_factory=TypeMeta)
    list_meta: ListMeta = field(default_factory=ListMeta)
    items: list[ServiceMeshExtension] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out = self.type_meta.to_dict()
        out["metadata"] = self.list_meta.to_dict()
        out["items"] = [item.to_dict() for item in self.items]
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ServiceMeshExtensionList":
        data = data or {}
        return cls(
            type_meta=TypeMeta.from_dict(data),
            list_meta=ListMeta.from_dict(data.get("metadata")),
            items=[ServiceMeshExtension.from_dict(i) for i in data.get("items") or []],
        )