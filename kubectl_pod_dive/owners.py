import logging
from collections.abc import Callable, Iterable
from typing import Any

from kubectl_pod_dive.errors import ClusterLookupError, GatewayError
from kubectl_pod_dive.gateway import ClusterGateway
from kubectl_pod_dive.model import OwnerKind, OwnerReference, WorkloadSummary

logger = logging.getLogger(__name__)

BARE_POD_KIND = "pod"

# spec.replicas is defaulted to 1 by the API server
DEFAULT_REPLICAS = 1


def _replica_set_count(gateway: ClusterGateway, namespace: str, name: str) -> int:
    rs = gateway.get_replica_set(namespace, name)
    return _spec_replicas(rs)


def _stateful_set_count(gateway: ClusterGateway, namespace: str, name: str) -> int:
    sts = gateway.get_stateful_set(namespace, name)
    return _spec_replicas(sts)


def _daemon_set_count(gateway: ClusterGateway, namespace: str, name: str) -> int:
    ds = gateway.get_daemon_set(namespace, name)
    # the API omits zero-valued status counters
    return int(ds.get("status", {}).get("desiredNumberScheduled") or 0)


def _spec_replicas(obj: dict[str, Any]) -> int:
    replicas = obj.get("spec", {}).get("replicas")
    return DEFAULT_REPLICAS if replicas is None else int(replicas)


CountFetcher = Callable[[ClusterGateway, str, str], int]

COUNT_FETCHERS: dict[OwnerKind, CountFetcher] = {
    OwnerKind.REPLICA_SET: _replica_set_count,
    OwnerKind.STATEFUL_SET: _stateful_set_count,
    OwnerKind.DAEMON_SET: _daemon_set_count,
}


def resolve_owners(
    gateway: ClusterGateway,
    owner_references: Iterable[OwnerReference],
    namespace: str,
) -> tuple[WorkloadSummary, ...]:
    """
    Resolve each owner reference, in pod order, into a WorkloadSummary.

    - No owners: a single synthetic bare-pod entry
    - ReplicaSet/StatefulSet/DaemonSet: declared count fetched from the API
    - Anything else: count left unknown, no lookup
    A failed lookup of a recognized controller aborts the whole resolution.
    """
    refs = list(owner_references)
    if not refs:
        return (WorkloadSummary(kind=BARE_POD_KIND, name="", bare=True),)

    owners = []
    for ref in refs:
        kind = ref.kind.lower()
        owner_kind = OwnerKind.classify(ref.kind)
        fetch = COUNT_FETCHERS.get(owner_kind)

        if fetch is None:
            logger.debug("Owner %s/%s is not a replica controller", kind, ref.name)
            owners.append(
                WorkloadSummary(kind=kind, name=ref.name, owner_kind=owner_kind)
            )
            continue

        logger.debug("Fetching %s %s/%s", kind, namespace, ref.name)
        try:
            count = fetch(gateway, namespace, ref.name)
        except GatewayError as e:
            raise ClusterLookupError(
                f"Failed to get {kind} {namespace}/{ref.name} from the {kind}s API "
                f"({e}). Check that the API server is reachable."
            ) from e

        owners.append(
            WorkloadSummary(
                kind=kind,
                name=ref.name,
                owner_kind=owner_kind,
                declared_count=count,
            )
        )

    return tuple(owners)
