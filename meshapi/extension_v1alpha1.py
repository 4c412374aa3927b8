"""The ServiceMeshExtension resource at v1alpha1 and its conversion to and from v1."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from meshapi import extension as v1ext
from meshapi.extension import FilterPhase, LocalObjectReference, PullPolicy
from meshapi.meta import (
    SCHEME_GROUP_VERSION_V1,
    SCHEME_GROUP_VERSION_V1ALPHA1,
    ListMeta,
    ObjectMeta,
    TypeMeta,
)

RAW_V1ALPHA1_CONFIG = "raw_v1alpha1_config"
"""Key in the v1 config holding a v1alpha1 config that is not a JSON object."""

_log = logging.getLogger(__name__)


@dataclass
class DeploymentStatus:
    """How far the extension has been rolled out."""

    ready: bool = False
    container_sha256: str = ""
    sha256: str = ""
    url: str = ""
    message: str = ""


@dataclass
class WorkloadSelector:
    """Matches workloads by their pod labels."""

    labels: dict[str, str] = field(default_factory=dict)


@dataclass
class ServiceMeshExtensionSpec:
    """The desired state of a v1alpha1 ServiceMeshExtension; config is raw text."""

    image: str = ""
    image_pull_policy: Union[PullPolicy, str] = ""
    image_pull_secrets: list[LocalObjectReference] = field(default_factory=list)
    workload_selector: WorkloadSelector = field(default_factory=WorkloadSelector)
    phase: Optional[Union[FilterPhase, str]] = None
    priority: Optional[int] = None
    config: str = ""


@dataclass
class ServiceMeshExtensionStatus:
    """The observed state of a v1alpha1 ServiceMeshExtension."""

    phase: Union[FilterPhase, str] = ""
    priority: int = 0
    observed_generation: int = 0
    deployment: DeploymentStatus = field(default_factory=DeploymentStatus)


def _secrets(refs: list[LocalObjectReference]) -> list[LocalObjectReference]:
    return [LocalObjectReference(ref.name) for ref in refs]


def spec_to_hub(src: ServiceMeshExtensionSpec) -> v1ext.ServiceMeshExtensionSpec:
    """Convert a v1alpha1 spec to v1, keeping an unparsable config as raw text."""
    dst = v1ext.ServiceMeshExtensionSpec(
        image=src.image,
        image_pull_policy=src.image_pull_policy,
        image_pull_secrets=_secrets(src.image_pull_secrets),
        workload_selector=v1ext.WorkloadSelector(labels=dict(src.workload_selector.labels)),
        phase=src.phase,
        priority=src.priority,
    )
    try:
        dst.config.load_json(src.config)
    except ValueError as exc:
        _log.warning(
            "v1alpha1 config field (value: %r) could not be converted to v1 json: %s",
            src.config,
            exc,
        )
        if dst.config.data is None:
            dst.config.data = {}
        dst.config.data[RAW_V1ALPHA1_CONFIG] = src.config
    return dst


def spec_from_hub(src: v1ext.ServiceMeshExtensionSpec) -> ServiceMeshExtensionSpec:
    """Convert a v1 spec to v1alpha1, rendering the config as JSON text."""
    data = src.config.data
    if data is not None and RAW_V1ALPHA1_CONFIG in data:
        raw = data[RAW_V1ALPHA1_CONFIG]
        if not isinstance(raw, str):
            raise TypeError(
                f"{RAW_V1ALPHA1_CONFIG} holds {type(raw).__name__}, expected str"
            )
        config = raw
    else:
        try:
            config = src.config.to_json()
        except (TypeError, ValueError) as exc:
            _log.warning("config field could not be converted to string: %s", exc)
            config = ""
    return ServiceMeshExtensionSpec(
        image=src.image,
        image_pull_policy=src.image_pull_policy,
        image_pull_secrets=_secrets(src.image_pull_secrets),
        workload_selector=WorkloadSelector(labels=dict(src.workload_selector.labels)),
        phase=src.phase,
        priority=src.priority,
        config=config,
    )


def _status_to_hub(src: ServiceMeshExtensionStatus) -> v1ext.ServiceMeshExtensionStatus:
    d = src.deployment
    return v1ext.ServiceMeshExtensionStatus(
        phase=src.phase,
        priority=src.priority,
        observed_generation=src.observed_generation,
        deployment=v1ext.DeploymentStatus(
            ready=d.ready,
            container_sha256=d.container_sha256,
            sha256=d.sha256,
            url=d.url,
            message=d.message,
        ),
    )


def _status_from_hub(src: v1ext.ServiceMeshExtensionStatus) -> ServiceMeshExtensionStatus:
    d = src.deployment
    return ServiceMeshExtensionStatus(
        phase=src.phase,
        priority=src.priority,
        observed_generation=src.observed_generation,
        deployment=DeploymentStatus(
            ready=d.ready,
            container_sha256=d.container_sha256,
            sha256=d.sha256,
            url=d.url,
            message=d.message,
        ),
    )


def _retarget(type_meta: TypeMeta, api_version: str) -> TypeMeta:
    if not type_meta.kind and not type_meta.api_version:
        return TypeMeta()
    return TypeMeta(kind=type_meta.kind, api_version=api_version)


@dataclass
class ServiceMeshExtension:
    """A v1alpha1 extension loaded into the proxies of selected workloads."""

    type_meta: TypeMeta = field(default_factory=TypeMeta)
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ServiceMeshExtensionSpec = field(default_factory=ServiceMeshExtensionSpec)
    status: ServiceMeshExtensionStatus = field(default_factory=ServiceMeshExtensionStatus)

    def convert_to(self) -> v1ext.ServiceMeshExtension:
        """This extension as a v1 object."""
        return v1ext.ServiceMeshExtension(
            type_meta=_retarget(self.type_meta, SCHEME_GROUP_VERSION_V1.api_version()),
            metadata=copy.deepcopy(self.metadata),
            spec=spec_to_hub(self.spec),
            status=_status_to_hub(self.status),
        )

    def convert_from(self, hub: v1ext.ServiceMeshExtension) -> None:
        """Replace this extension's contents with those of a v1 object."""
        if not isinstance(hub, v1ext.ServiceMeshExtension):
            raise TypeError(
                f"expected a v1 ServiceMeshExtension, got {type(hub).__name__}"
            )
        self.type_meta = _retarget(
            hub.type_meta, SCHEME_GROUP_VERSION_V1ALPHA1.api_version()
        )
        self.metadata = copy.deepcopy(hub.metadata)
        self.spec = spec_from_hub(hub.spec)
        self.status = _status_from_hub(hub.status)

    def deep_copy(self) -> "ServiceMeshExtension":
        return copy.deepcopy(self)


@dataclass
class ServiceMeshExtensionList:
    """A list of v1alpha1 ServiceMeshExtension objects."""

    type_meta: TypeMeta = field(default_factory=TypeMeta)
    list_meta: ListMeta = field(default_factory=ListMeta)
    items: list[ServiceMeshExtension] = field(default_factory=list)