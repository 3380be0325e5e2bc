import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

# ----------------------------
# Parsing utilities
# ----------------------------


def load_json(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def get_pod_phase(pod: dict[str, Any]) -> str:
    return pod.get("status", {}).get("phase") or "Unknown"


def get_pod_name(pod: dict[str, Any]) -> str:
    return pod.get("metadata", {}).get("name", "<unknown>")


def normalize_items(objects: Any) -> list[dict[str, Any]]:
    if not objects:
        return []
    if isinstance(objects, list):
        return objects
    if objects.get("kind", "").endswith("List"):
        return objects.get("items") or []
    return [objects]


def find_condition(obj: dict[str, Any], cond_type: str) -> dict[str, Any] | None:
    """
    Last condition of the given type wins; the API returns at most one.
    """
    found = None
    for c in obj.get("status", {}).get("conditions") or []:
        if c.get("type") == cond_type:
            found = c
    return found


# ----------------------------
# Enumerations
# ----------------------------


class NodeReadiness(Enum):
    READY = "ready"
    NOT_READY = "not ready"
    UNKNOWN = "unknown state"

    @classmethod
    def from_status(cls, status: str | None) -> "NodeReadiness":
        if status == "False":
            return cls.NOT_READY
        if status == "Unknown":
            return cls.UNKNOWN
        return cls.READY


class OwnerKind(Enum):
    REPLICA_SET = "replicaset"
    STATEFUL_SET = "statefulset"
    DAEMON_SET = "daemonset"
    OTHER = "other"

    @classmethod
    def classify(cls, raw_kind: str) -> "OwnerKind":
        lowered = (raw_kind or "").lower()
        for kind in cls:
            if kind is not cls.OTHER and kind.value == lowered:
                return kind
        return cls.OTHER


# ----------------------------
# Records
# ----------------------------


@dataclass(frozen=True)
class OwnerReference:
    kind: str
    name: str

    @classmethod
    def from_dict(cls, ref: dict[str, Any]) -> "OwnerReference":
        return cls(kind=ref.get("kind", ""), name=ref.get("name", "<unknown>"))


@dataclass(frozen=True)
class WaitingInfo:
    reason: str | None
    message: str | None


@dataclass(frozen=True)
class TerminationInfo:
    reason: str | None
    exit_code: int | None


@dataclass(frozen=True)
class ContainerStatusEntry:
    name: str
    restart_count: int = 0
    waiting: WaitingInfo | None = None
    last_waiting: WaitingInfo | None = None
    last_terminated: TerminationInfo | None = None

    @classmethod
    def from_dict(cls, status: dict[str, Any]) -> "ContainerStatusEntry":
        state = status.get("state") or {}
        last_state = status.get("lastState") or {}
        return cls(
            name=status.get("name", "<unknown>"),
            restart_count=int(status.get("restartCount") or 0),
            waiting=_waiting(state.get("waiting")),
            last_waiting=_waiting(last_state.get("waiting")),
            last_terminated=_terminated(last_state.get("terminated")),
        )

    @property
    def stuck(self) -> WaitingInfo | None:
        return self.waiting or self.last_waiting


def _waiting(raw: dict[str, Any] | None) -> WaitingInfo | None:
    if raw is None:
        return None
    return WaitingInfo(reason=raw.get("reason"), message=raw.get("message"))


def _terminated(raw: dict[str, Any] | None) -> TerminationInfo | None:
    if raw is None:
        return None
    exit_code = raw.get("exitCode")
    return TerminationInfo(
        reason=raw.get("reason"),
        exit_code=int(exit_code) if exit_code is not None else None,
    )


@dataclass(frozen=True)
class PodRecord:
    name: str
    namespace: str
    node_name: str
    phase: str
    owner_references: tuple[OwnerReference, ...] = ()
    container_statuses: tuple[ContainerStatusEntry, ...] = ()
    init_container_statuses: tuple[ContainerStatusEntry, ...] = ()

    @classmethod
    def from_dict(cls, pod: dict[str, Any]) -> "PodRecord":
        metadata = pod.get("metadata", {})
        status = pod.get("status", {})
        return cls(
            name=get_pod_name(pod),
            namespace=metadata.get("namespace") or "default",
            node_name=pod.get("spec", {}).get("nodeName") or "",
            phase=get_pod_phase(pod),
            owner_references=tuple(
                OwnerReference.from_dict(ref)
                for ref in metadata.get("ownerReferences") or []
            ),
            container_statuses=tuple(
                ContainerStatusEntry.from_dict(c)
                for c in status.get("containerStatuses") or []
            ),
            init_container_statuses=tuple(
                ContainerStatusEntry.from_dict(c)
                for c in status.get("initContainerStatuses") or []
            ),
        )


@dataclass(frozen=True)
class NodeRecord:
    name: str
    labels: dict[str, str] = field(default_factory=dict)
    readiness: NodeReadiness | None = None
    role: str | None = None


@dataclass(frozen=True)
class WorkloadSummary:
    """
    One resolved owner of the pod.

    declared_count is None when the kind is not a recognized controller,
    bare is True for the synthetic entry of a pod without owners.
    """

    kind: str
    name: str
    owner_kind: OwnerKind = OwnerKind.OTHER
    declared_count: int | None = None
    bare: bool = False


@dataclass(frozen=True)
class DiveResult:
    pod: PodRecord
    node: NodeRecord
    owners: tuple[WorkloadSummary, ...]
    siblings: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "pod": {
                "name": self.pod.name,
                "namespace": self.pod.namespace,
                "phase": self.pod.phase,
                "containers": [asdict(c) for c in self.pod.container_statuses],
                "initContainers": [
                    asdict(c) for c in self.pod.init_container_statuses
                ],
            },
            "node": {
                "name": self.node.name,
                "role": self.node.role,
                "readiness": self.node.readiness.value if self.node.readiness else None,
                "labels": dict(sorted(self.node.labels.items())),
            },
            "owners": [
                {
                    "kind": o.kind,
                    "name": o.name,
                    "replicas": o.declared_count,
                    "bare": o.bare,
                }
                for o in self.owners
            ],
            "siblings": list(self.siblings),
        }
