import pytest

from meshapi.extension import (
    DeploymentStatus,
    FilterPhase,
    LocalObjectReference,
    PullPolicy,
    ServiceMeshExtension,
    ServiceMeshExtensionConfig,
    ServiceMeshExtensionList,
    ServiceMeshExtensionSpec,
    ServiceMeshExtensionStatus,
    WorkloadSelector,
)
from meshapi.meta import ListMeta, ObjectMeta, TypeMeta


def _full_spec():
    return ServiceMeshExtensionSpec(
        image="quay.io/x/y:latest",
        image_pull_policy=PullPolicy.NEVER,
        image_pull_secrets=[LocalObjectReference("secret1"), LocalObjectReference("secret2")],
        workload_selector=WorkloadSelector(labels={"abc": "def"}),
        phase=FilterPhase.PRE_AUTHN,
        priority=1,
        config=ServiceMeshExtensionConfig(
            {"string": "some_string", "number": 10.0, "struct": {"key": "value"}}
        ),
    )


def test_is_hub():
    assert ServiceMeshExtension().is_hub() is True


def test_config_to_json_matches_known_encoding():
    config = ServiceMeshExtensionConfig(
        {"string": "some_string", "number": 10.0, "struct": {"key": "value"}}
    )
    assert config.to_json() == '{"number":10,"string":"some_string","struct":{"key":"value"}}'


def test_config_to_json_without_data_is_empty():
    assert ServiceMeshExtensionConfig().to_json() == ""


def test_config_to_json_keeps_fractions():
    assert ServiceMeshExtensionConfig({"x": 0.5}).to_json() == '{"x":0.5}'


def test_config_to_json_escapes_html():
    config = ServiceMeshExtensionConfig({"a": "<&>"})
    assert config.to_json() == '{"a":"\\u003c\\u0026\\u003e"}'


def test_load_json_empty_leaves_data():
    config = ServiceMeshExtensionConfig({"a": 1.0})
    config.load_json("")
    assert config.data == {"a": 1.0}


def test_load_json_reads_numbers_as_floats():
    config = ServiceMeshExtensionConfig()
    config.load_json('{"n": 10}')
    assert config.data == {"n": 10.0}
    assert isinstance(config.data["n"], float)
    assert config.to_json() == '{"n":10}'


def test_load_json_merges_into_existing():
    config = ServiceMeshExtensionConfig({"a": "x"})
    config.load_json('{"b": "y"}')
    assert config.data == {"a": "x", "b": "y"}


def test_load_json_null_clears():
    config = ServiceMeshExtensionConfig({"a": "x"})
    config.load_json("null")
    assert config.data is None


@pytest.mark.parametrize("text", ["plain string value", "[1, 2]", '"text"', "NaN", "{"])
def test_load_json_rejects_non_objects(text):
    config = ServiceMeshExtensionConfig({"keep": "me"})
    with pytest.raises(ValueError):
        config.load_json(text)
    assert config.data == {"keep": "me"}


def test_json_round_trip():
    data = {"list": [1.5, "a", True, None], "nested": {"k": "v"}, "n": 3.0}
    restored = ServiceMeshExtensionConfig()
    restored.load_json(ServiceMeshExtensionConfig(data).to_json())
    assert restored.data == data


def test_deep_copy_is_independent():
    config = ServiceMeshExtensionConfig({"nested": {"k": "v"}})
    duplicate = config.deep_copy()
    duplicate.data["nested"]["k"] = "changed"
    assert config.data == {"nested": {"k": "v"}}
    assert duplicate.data == {"nested": {"k": "changed"}}


def test_empty_spec_to_dict():
    assert ServiceMeshExtensionSpec().to_dict() == {"workloadSelector": {"labels": {}}, "phase": None}


def test_spec_phase_is_written_as_text():
    spec = ServiceMeshExtensionSpec(phase=FilterPhase.PRE_STATS)
    assert spec.to_dict()["phase"] == "PreStats"


def test_spec_round_trip():
    spec = _full_spec()
    assert ServiceMeshExtensionSpec.from_dict(spec.to_dict()) == spec


def test_unknown_phase_kept_as_text():
    spec = ServiceMeshExtensionSpec.from_dict({"phase": "Custom"})
    assert spec.phase == "Custom"
    assert spec.to_dict()["phase"] == "Custom"


def test_spec_rejects_non_mapping_config():
    with pytest.raises(ValueError):
        ServiceMeshExtensionSpec.from_dict({"config": "text"})


def test_status_always_writes_deployment_ready():
    assert ServiceMeshExtensionStatus().to_dict() == {"deployment": {"ready": False}}


def test_extension_round_trip():
    extension = ServiceMeshExtension(
        type_meta=TypeMeta(kind="ServiceMeshExtension", api_version="maistra.io/v1"),
        metadata=ObjectMeta(name="ext", namespace="istio-system"),
        spec=_full_spec(),
        status=ServiceMeshExtensionStatus(
            phase=FilterPhase.POST_AUTHZ,
            priority=4,
            observed_generation=2,
            deployment=DeploymentStatus(ready=True, sha256="abc", url="oci://x", message="ok"),
        ),
    )
    assert ServiceMeshExtension.from_dict(extension.to_dict()) == extension


def test_list_round_trip():
    items = [
        ServiceMeshExtension(metadata=ObjectMeta(name="a")),
        ServiceMeshExtension(metadata=ObjectMeta(name="b"), spec=_full_spec()),
    ]
    listing = ServiceMeshExtensionList(
        type_meta=TypeMeta(kind="ServiceMeshExtensionList"),
        list_meta=ListMeta(resource_version="7"),
        items=items,
    )
    restored = ServiceMeshExtensionList.from_dict(listing.to_dict())
    assert restored == listing
    assert [i.metadata.name for i in restored.items] == ["a", "b"]