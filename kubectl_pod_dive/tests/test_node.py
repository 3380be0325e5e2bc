import pytest

from kubectl_pod_dive.errors import ClusterLookupError
from kubectl_pod_dive.model import NodeReadiness
from kubectl_pod_dive.node import node_readiness, node_role, profile_node


def node_with(*conditions):
    return {"metadata": {"name": "n"}, "status": {"conditions": list(conditions)}}


class TestNodeReadiness:
    def test_ready(self):
        node = node_with({"type": "Ready", "status": "True"})
        assert node_readiness(node) is NodeReadiness.READY

    def test_not_ready(self):
        node = node_with({"type": "Ready", "status": "False"})
        assert node_readiness(node) is NodeReadiness.NOT_READY

    def test_unknown(self):
        node = node_with({"type": "Ready", "status": "Unknown"})
        assert node_readiness(node) is NodeReadiness.UNKNOWN

    def test_unexpected_status_counts_as_ready(self):
        node = node_with({"type": "Ready", "status": "Maybe"})
        assert node_readiness(node) is NodeReadiness.READY

    def test_no_ready_condition_stays_unset(self):
        node = node_with({"type": "DiskPressure", "status": "False"})
        assert node_readiness(node) is None
        assert node_readiness({"metadata": {"name": "n"}}) is None

    def test_other_conditions_are_ignored(self):
        node = node_with(
            {"type": "Ready", "status": "False"},
            {"type": "MemoryPressure", "status": "True"},
        )
        assert node_readiness(node) is NodeReadiness.NOT_READY


class TestNodeRole:
    def test_master_role_label(self):
        assert node_role({"kubernetes.io/role": "master"}) == "master"

    def test_control_plane_label_presence(self):
        assert node_role({"node-role.kubernetes.io/control-plane": ""}) == "master"

    def test_worker(self):
        assert node_role({"kubernetes.io/role": "node"}) is None
        assert node_role({}) is None


def test_profile_node(gateway):
    node = profile_node(gateway, "node-1")

    assert node.name == "node-1"
    assert node.readiness is NodeReadiness.READY
    assert node.role is None
    assert node.labels["topology.kubernetes.io/zone"] == "eu-west-1a"
    assert gateway.calls == [("get_node", "node-1")]


def test_profile_master_node(gateway):
    node = profile_node(gateway, "node-2")

    assert node.role == "master"
    assert node.readiness is NodeReadiness.UNKNOWN


def test_missing_node_is_a_lookup_error(gateway):
    with pytest.raises(ClusterLookupError) as exc:
        profile_node(gateway, "node-9")
    assert "node-9" in str(exc.value)
