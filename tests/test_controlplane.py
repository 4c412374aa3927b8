import pytest

from meshapi.controlplane import (
    ControlPlaneSpec,
    ControlPlaneStatus,
    NetworkType,
    ServiceMeshControlPlane,
    ServiceMeshControlPlaneList,
    reconciled_version_of,
)
from meshapi.helmvalues import HelmValues
from meshapi.meta import ObjectMeta, TypeMeta
from meshapi.status import Condition, ConditionStatus, ConditionType, compose_reconciled_version

SMCP_YAML = """apiVersion: maistra.io/v1
kind: ServiceMeshControlPlane
metadata:
  creationTimestamp: null
  name: minimal-install
  namespace: istio-system
spec:
  istio:
    foo:
      bar: baz
status:
  lastAppliedConfiguration:
    istio:
      foo:
        bar: baz
"""


def _smcp():
    return ServiceMeshControlPlane(
        type_meta=TypeMeta(kind="ServiceMeshControlPlane", api_version="maistra.io/v1"),
        metadata=ObjectMeta(name="minimal-install", namespace="istio-system"),
        spec=ControlPlaneSpec(istio=HelmValues({"foo": {"bar": "baz"}})),
        status=ControlPlaneStatus(
            last_applied_configuration=ControlPlaneSpec(
                istio=HelmValues({"foo": {"bar": "baz"}})
            )
        ),
    )


def test_unmarshal_helm_values_in_smcp():
    smcp = ServiceMeshControlPlane.from_yaml(SMCP_YAML)
    foo = smcp.spec.istio.get_map("foo")
    assert foo is not None
    assert foo["bar"] == "baz"
    assert smcp.metadata.name == "minimal-install"
    assert smcp.metadata.creation_timestamp is None


def test_marshal_helm_values_in_smcp():
    assert _smcp().to_yaml() == SMCP_YAML


def test_yaml_round_trip():
    assert ServiceMeshControlPlane.from_yaml(_smcp().to_yaml()) == _smcp()


def test_reconciled_version_defaults():
    assert reconciled_version_of(None) == compose_reconciled_version("0.0.0", 0)
    status = ControlPlaneStatus(observed_generation=4)
    assert status.get_reconciled_version() == compose_reconciled_version("1.0.0", 4)
    status.reconciled_version = "2.1.0-7"
    assert reconciled_version_of(status) == "2.1.0-7"


def test_status_conditions_and_components_round_trip():
    status = ControlPlaneStatus(observed_generation=2, reconciled_version="v-2")
    status.set_condition(Condition(type=ConditionType.READY, status=ConditionStatus.TRUE))
    status.set_annotation("readyComponentCount", "1/1")
    data = status.to_dict()
    assert data["observedGeneration"] == 2
    assert data["annotations"] == {"readyComponentCount": "1/1"}
    assert ControlPlaneStatus.from_dict(data) == status


def test_spec_round_trip_with_all_fields():
    spec = ControlPlaneSpec(
        template="default",
        profiles=["small"],
        version="v2.0",
        network_type=NetworkType.MULTITENANT,
        istio=HelmValues({"a": 1}),
        three_scale=HelmValues({"enabled": False}),
    )
    data = spec.to_dict()
    assert data["networkType"] == "multitenant"
    assert data["threeScale"] == {"enabled": False}
    assert ControlPlaneSpec.from_dict(data) == spec


def test_empty_spec_omits_fields():
    assert ControlPlaneSpec().to_dict() == {}
    assert ControlPlaneSpec.from_dict({"istio": None}).istio is None


def test_spec_rejects_non_mapping_values():
    with pytest.raises(ValueError):
        ControlPlaneSpec.from_dict({"istio": ["x"]})


def test_from_yaml_rejects_non_mapping():
    with pytest.raises(ValueError):
        ServiceMeshControlPlane.from_yaml("- a\n- b\n")


def test_list_round_trip():
    lst = ServiceMeshControlPlaneList(
        type_meta=TypeMeta(kind="ServiceMeshControlPlaneList", api_version="maistra.io/v1"),
        items=[_smcp(), _smcp()],
    )
    data = lst.to_dict()
    assert len(data["items"]) == 2
    assert ServiceMeshControlPlaneList.from_dict(data) == lst