import os

import pytest

from kubectl_pod_dive.errors import GatewayError
from kubectl_pod_dive.gateway import SnapshotGateway
from kubectl_pod_dive.model import load_json

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")


class RecordingGateway(SnapshotGateway):
    """
    Snapshot gateway that remembers every query and can fail chosen operations.
    """

    def __init__(self, snapshot, fail_on=()):
        super().__init__(snapshot)
        self.calls = []
        self.fail_on = set(fail_on)

    def _record(self, op, *args):
        self.calls.append((op, *args))
        if op in self.fail_on:
            raise GatewayError(f"{op} unavailable")

    @property
    def ops(self):
        return [call[0] for call in self.calls]

    def list_pods(self, namespace, field_selector=None):
        self._record("list_pods", namespace, field_selector)
        return super().list_pods(namespace, field_selector)

    def get_node(self, name):
        self._record("get_node", name)
        return super().get_node(name)

    def get_replica_set(self, namespace, name):
        self._record("get_replica_set", namespace, name)
        return super().get_replica_set(namespace, name)

    def get_stateful_set(self, namespace, name):
        self._record("get_stateful_set", namespace, name)
        return super().get_stateful_set(namespace, name)

    def get_daemon_set(self, namespace, name):
        self._record("get_daemon_set", namespace, name)
        return super().get_daemon_set(namespace, name)


@pytest.fixture
def fixture_path():
    def _path(name):
        return os.path.join(FIXTURES_DIR, name)

    return _path


@pytest.fixture
def snapshot():
    return load_json(os.path.join(FIXTURES_DIR, "cluster.json"))


@pytest.fixture
def make_gateway(snapshot):
    def _make(fail_on=(), data=None):
        return RecordingGateway(data if data is not None else snapshot, fail_on)

    return _make


@pytest.fixture
def gateway(make_gateway):
    return make_gateway()
