import logging

import pytest

from kubectl_pod_dive.errors import PendingSchedulingError, PodNotFoundError
from kubectl_pod_dive.locator import locate_pod


class TestLocatePod:
    def test_cluster_wide_lookup(self, gateway):
        pod = locate_pod(gateway, "web-0")

        assert pod.name == "web-0"
        assert pod.namespace == "default"
        assert pod.node_name == "node-1"
        assert pod.phase == "Running"
        assert gateway.calls == [("list_pods", None, "metadata.name=web-0")]

    def test_namespace_scoped_lookup(self, gateway):
        pod = locate_pod(gateway, "dup", "team-b")

        assert pod.namespace == "team-b"
        assert gateway.calls == [("list_pods", "team-b", "metadata.name=dup")]

    def test_name_must_match_exactly(self, gateway):
        with pytest.raises(PodNotFoundError):
            locate_pod(gateway, "web")

    def test_not_found_gives_a_hint(self, gateway):
        with pytest.raises(PodNotFoundError) as exc:
            locate_pod(gateway, "nope")

        message = str(exc.value)
        assert "nope" in message
        assert "context" in message
        assert "spelling" in message

    def test_wrong_namespace_is_not_found(self, gateway):
        with pytest.raises(PodNotFoundError):
            locate_pod(gateway, "web-0", "kube-system")

    def test_transport_error_is_not_found(self, make_gateway):
        gateway = make_gateway(fail_on={"list_pods"})

        with pytest.raises(PodNotFoundError) as exc:
            locate_pod(gateway, "web-0")
        assert exc.value.__cause__ is not None

    def test_empty_name_issues_no_query(self, gateway):
        with pytest.raises(PodNotFoundError):
            locate_pod(gateway, "")
        assert gateway.calls == []

    def test_ambiguous_name_picks_first_and_warns(self, gateway, caplog):
        with caplog.at_level(logging.WARNING, logger="kubectl_pod_dive.locator"):
            pod = locate_pod(gateway, "dup")

        assert pod.namespace == "team-a"
        assert "team-a, team-b" in caplog.text

    def test_unscheduled_pod_is_pending(self, gateway):
        with pytest.raises(PendingSchedulingError) as exc:
            locate_pod(gateway, "job-abc")

        assert "batch/job-abc" in str(exc.value)
        assert "Pending" in str(exc.value)


def test_pod_record_parses_container_history(gateway):
    pod = locate_pod(gateway, "api-7d9f-abcde")

    app, sidecar = pod.container_statuses
    assert app.restart_count == 1
    assert app.last_terminated.reason == "Error"
    assert app.last_terminated.exit_code == 1
    assert app.stuck is None
    assert sidecar.waiting.reason == "CrashLoopBackOff"
    assert sidecar.last_terminated.exit_code == 137

    (migrate,) = pod.init_container_statuses
    assert migrate.name == "migrate"
    assert migrate.last_terminated.reason == "Completed"

    assert [(o.kind, o.name) for o in pod.owner_references] == [
        ("ReplicaSet", "api-7d9f")
    ]
