from datetime import datetime, timedelta, timezone

import pytest

from meshapi.meta import (
    SCHEME_GROUP_VERSION_V1,
    SCHEME_GROUP_VERSION_V1ALPHA1,
    GroupResource,
    GroupVersion,
    GroupVersionResource,
    ListMeta,
    ObjectMeta,
    TypeMeta,
    format_time,
    now_truncated,
    parse_time,
    v1_resource,
    v1alpha1_resource,
)


def test_api_version_of_v1():
    assert SCHEME_GROUP_VERSION_V1.api_version() == "maistra.io/v1"


def test_api_version_without_group_is_version():
    assert GroupVersion("", "v1").api_version() == "v1"


def test_with_resource_and_group_resource():
    gvr = SCHEME_GROUP_VERSION_V1ALPHA1.with_resource("servicemeshextensions")
    assert gvr == GroupVersionResource("maistra.io", "v1alpha1", "servicemeshextensions")
    assert gvr.group_resource() == GroupResource("maistra.io", "servicemeshextensions")


def test_resource_helpers():
    assert v1_resource("servicemeshmembers") == GroupResource("maistra.io", "servicemeshmembers")
    assert v1alpha1_resource("servicemeshextensions") == GroupResource(
        "maistra.io", "servicemeshextensions"
    )


def test_group_resource_str_without_group():
    assert str(GroupResource("", "pods")) == "pods"


def test_group_versions_compare_by_value():
    assert GroupVersion("maistra.io", "v1") == SCHEME_GROUP_VERSION_V1
    assert SCHEME_GROUP_VERSION_V1.with_resource("a") != SCHEME_GROUP_VERSION_V1ALPHA1.with_resource("a")


def test_format_time_pinned():
    value = datetime(2021, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert format_time(value) == "2021-01-02T03:04:05Z"


def test_time_round_trip_converts_to_utc():
    local = datetime(2020, 6, 1, 12, 30, 0, tzinfo=timezone(timedelta(hours=2)))
    parsed = parse_time(format_time(local))
    assert parsed == local
    assert parsed.utcoffset() == timedelta(0)


def test_parse_time_empty_and_none():
    assert parse_time(None) is None
    assert parse_time("") is None
    assert format_time(None) is None


def test_parse_time_rejects_garbage():
    with pytest.raises(ValueError):
        parse_time("not a time")


def test_now_truncated_has_no_fraction():
    now = now_truncated()
    assert now.microsecond == 0
    assert now.tzinfo is not None and now.utcoffset() == timedelta(0)


def test_type_meta_round_trip_and_omit_empty():
    meta = TypeMeta(kind="ServiceMeshControlPlane", api_version="maistra.io/v1")
    assert meta.to_dict() == {"kind": "ServiceMeshControlPlane", "apiVersion": "maistra.io/v1"}
    assert TypeMeta.from_dict(meta.to_dict()) == meta
    assert TypeMeta().to_dict() == {}


def test_object_meta_empty_has_null_timestamp():
    assert ObjectMeta().to_dict() == {"creationTimestamp": None}
    assert ObjectMeta.from_dict(None) == ObjectMeta()


def test_object_meta_round_trip():
    meta = ObjectMeta(
        name="minimal-install",
        namespace="istio-system",
        generation=3,
        creation_timestamp=datetime(2021, 5, 5, 5, 5, 5, tzinfo=timezone.utc),
        labels={"app": "mesh"},
        annotations={"note": "value"},
    )
    data = meta.to_dict()
    assert data["name"] == "minimal-install"
    assert data["namespace"] == "istio-system"
    assert ObjectMeta.from_dict(data) == meta


def test_list_meta_round_trip():
    meta = ListMeta(resource_version="12", continue_token="next", remaining_item_count=4)
    data = meta.to_dict()
    assert data["continue"] == "next"
    assert ListMeta.from_dict(data) == meta
    assert ListMeta().to_dict() == {}