"""
ASCII tree rendering of a dive.

    [node]      node-1 [ready]
    [namespace]    ├─┬─ default
    [type]         │ └─┬─ statefulset
    [workload]     │   └─┬─ web [3 replicas]
    [pod]          │     └─┬─ web-0 [Running]
    [containers]   │       └─── app [0 restarts]
    [siblings]     ├─── web-1
                   └─── cache-0

Rendering only reads the records it is given.
"""

from collections.abc import Callable, Sequence
from typing import TypeVar

from kubectl_pod_dive.model import (
    ContainerStatusEntry,
    DiveResult,
    NodeRecord,
    PodRecord,
    WorkloadSummary,
)

T = TypeVar("T")

LABEL_WIDTH = 15
NODE_LABEL_WIDTH = 12

BRANCH = "├───"
LAST_BRANCH = "└───"

BENIGN_TERMINATION = "Completed"


def pluralize(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def tree_rows(
    items: Sequence[T],
    label: str,
    indent: str,
    formatter: Callable[[T], str],
) -> list[str]:
    """
    Render items as one tree level.

    The first row carries the label, the last row the closing connector,
    every other row the continuing connector.
    """
    rows = []
    last = len(items) - 1
    for i, item in enumerate(items):
        head = label if i == 0 else ""
        connector = LAST_BRANCH if i == last else BRANCH
        rows.append(f"{head:<{LABEL_WIDTH}}{indent}{connector} {formatter(item)}")
    return rows


def node_line(node: NodeRecord) -> str:
    readiness = node.readiness.value if node.readiness else "no ready condition"
    state = f"{node.role}, {readiness}" if node.role else readiness
    return f"{'[node]':<{NODE_LABEL_WIDTH}}{node.name} [{state}]"


def workload_text(owner: WorkloadSummary) -> str:
    if owner.bare:
        return "[bare pod]"
    if owner.declared_count is None:
        return f"{owner.name} [unknown replicas]"
    return f"{owner.name} [{pluralize(owner.declared_count, 'replica')}]"


def container_text(status: ContainerStatusEntry) -> str:
    return f"{status.name} [{pluralize(status.restart_count, 'restart')}]"


def owner_block(pod: PodRecord, owner: WorkloadSummary, rail: str) -> list[str]:
    namespace_connector = "├─┬─" if rail.strip() else "└─┬─"
    # a pod with no reported containers is a leaf
    has_containers = pod.container_statuses or pod.init_container_statuses
    pod_connector = "└─┬─" if has_containers else LAST_BRANCH
    lines = [
        f"{'[namespace]':<{LABEL_WIDTH}}{namespace_connector} {pod.namespace}",
        f"{'[type]':<{LABEL_WIDTH}}{rail} └─┬─ {owner.kind}",
        f"{'[workload]':<{LABEL_WIDTH}}{rail}   └─┬─ {workload_text(owner)}",
        f"{'[pod]':<{LABEL_WIDTH}}{rail}     {pod_connector} {pod.name} [{pod.phase}]",
    ]
    indent = f"{rail}       "
    lines += tree_rows(pod.container_statuses, "[containers]", indent, container_text)
    lines += tree_rows(pod.init_container_statuses, "[init]", indent, container_text)
    return lines


def diagnostics(pod: PodRecord) -> list[str]:
    statuses = pod.container_statuses + pod.init_container_statuses

    waiting = []
    terminations = []
    for c in statuses:
        stuck = c.stuck
        if stuck is not None:
            line = f"    {c.name} {stuck.reason or 'Unknown'}"
            if stuck.message:
                line += f": {stuck.message}"
            waiting.append(line)

        terminated = c.last_terminated
        if terminated and terminated.reason and terminated.reason != BENIGN_TERMINATION:
            code = terminated.exit_code if terminated.exit_code is not None else "unknown"
            terminations.append(f"    {c.name} {terminated.reason} [code {code}]")

    lines = []
    if waiting:
        lines += ["WAITING:"] + waiting
    if terminations:
        lines += ["TERMINATIONS:"] + terminations
    return lines


def render(
    pod: PodRecord,
    node: NodeRecord,
    owners: Sequence[WorkloadSummary],
    siblings: Sequence[str],
) -> list[str]:
    rail = "│" if siblings else " "

    lines = [node_line(node)]
    for owner in owners:
        lines += owner_block(pod, owner, rail)
    lines += tree_rows(siblings, "[siblings]", "", str)

    trailer = diagnostics(pod)
    if trailer:
        lines += [""] + trailer
    return lines


def render_result(result: DiveResult) -> list[str]:
    return render(result.pod, result.node, result.owners, result.siblings)
