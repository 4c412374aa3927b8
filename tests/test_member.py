from datetime import datetime, timedelta, timezone

from meshapi.member import (
    ServiceMeshControlPlaneRef,
    ServiceMeshMember,
    ServiceMeshMemberCondition,
    ServiceMeshMemberConditionReason,
    ServiceMeshMemberConditionType,
    ServiceMeshMemberList,
    ServiceMeshMemberSpec,
    ServiceMeshMemberStatus,
)
from meshapi.meta import ObjectMeta, TypeMeta
from meshapi.status import ConditionStatus

T0 = datetime(2021, 5, 4, 10, 20, 30, tzinfo=timezone.utc)


def _member() -> ServiceMeshMember:
    status = ServiceMeshMemberStatus(
        annotations={"controlPlaneRef": "istio-system/basic"},
        observed_generation=2,
        service_mesh_generation=3,
        service_mesh_reconciled_version="2.1.0-3",
        conditions=[
            ServiceMeshMemberCondition(
                type=ServiceMeshMemberConditionType.READY,
                status=ConditionStatus.TRUE,
                last_transition_time=T0,
                reason=ServiceMeshMemberConditionReason.TERMINATING,
                message="msg",
            )
        ],
    )
    return ServiceMeshMember(
        type_meta=TypeMeta(kind="ServiceMeshMember", api_version="maistra.io/v1"),
        metadata=ObjectMeta(name="default", namespace="bookinfo"),
        spec=ServiceMeshMemberSpec(ServiceMeshControlPlaneRef(name="basic", namespace="istio-system")),
        status=status,
    )


def test_control_plane_ref_str():
    ref = ServiceMeshControlPlaneRef(name="basic", namespace="istio-system")
    assert str(ref) == "istio-system/basic"


def test_get_condition_missing_is_unknown():
    status = ServiceMeshMemberStatus()
    cond = status.get_condition(ServiceMeshMemberConditionType.RECONCILED)
    assert cond.type == ServiceMeshMemberConditionType.RECONCILED
    assert cond.status == ConditionStatus.UNKNOWN
    assert status.conditions == []


def test_get_condition_existing():
    member = _member()
    cond = member.status.get_condition(ServiceMeshMemberConditionType.READY)
    assert cond.status == ConditionStatus.TRUE
    assert cond.message == "msg"


def test_set_condition_appends_with_current_time():
    status = ServiceMeshMemberStatus()
    before = datetime.now(timezone.utc)
    cond = ServiceMeshMemberCondition(type=ServiceMeshMemberConditionType.READY, status=ConditionStatus.FALSE)
    result = status.set_condition(cond)
    after = datetime.now(timezone.utc)
    assert result is status
    assert len(status.conditions) == 1
    assert before <= status.conditions[0].last_transition_time <= after
    assert cond.last_transition_time is None


def test_set_condition_same_status_keeps_time():
    status = _member().status
    status.set_condition(
        ServiceMeshMemberCondition(
            type=ServiceMeshMemberConditionType.READY, status=ConditionStatus.TRUE, message="other"
        )
    )
    assert len(status.conditions) == 1
    assert status.conditions[0].last_transition_time == T0
    assert status.conditions[0].message == "other"


def test_set_condition_changed_status_updates_time():
    status = _member().status
    status.set_condition(
        ServiceMeshMemberCondition(type=ServiceMeshMemberConditionType.READY, status=ConditionStatus.FALSE)
    )
    assert len(status.conditions) == 1
    assert status.conditions[0].status == ConditionStatus.FALSE
    assert status.conditions[0].last_transition_time > T0 + timedelta(days=1)


def test_member_round_trip():
    member = _member()
    assert ServiceMeshMember.from_dict(member.to_dict()) == member


def test_member_wire_keys():
    data = _member().to_dict()
    assert data["spec"] == {"controlPlaneRef": {"name": "basic", "namespace": "istio-system"}}
    assert data["status"]["meshGeneration"] == 3
    assert data["status"]["conditions"][0]["reason"] == "Terminating"
    assert data["kind"] == "ServiceMeshMember"


def test_empty_status_keeps_required_fields():
    data = ServiceMeshMemberStatus().to_dict()
    assert data == {"observedGeneration": 0, "conditions": []}


def test_unknown_condition_values_kept_as_text():
    cond = ServiceMeshMemberCondition.from_dict({"type": "Custom", "reason": "Odd"})
    assert cond.type == "Custom"
    assert cond.reason == "Odd"
    assert cond.to_dict()["type"] == "Custom"


def test_known_condition_values_become_enums():
    cond = ServiceMeshMemberCondition.from_dict({"type": "Reconciled", "status": "True"})
    assert cond.type is ServiceMeshMemberConditionType.RECONCILED
    assert cond.status is ConditionStatus.TRUE


def test_list_round_trip():
    members = ServiceMeshMemberList(items=[_member(), _member()])
    restored = ServiceMeshMemberList.from_dict(members.to_dict())
    assert restored == members
    assert len(restored.items) == 2