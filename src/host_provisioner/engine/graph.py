"""Notification graph utilities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from host_provisioner.engine.errors import NotificationCycleError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class NotificationGraph:
    """A directed graph of ``source -> targets`` notification edges.

    Only used to reject cycles: execution order is declaration order, never
    inferred from this graph.
    """

    def __init__(self, nodes: Iterable[str], edges: Mapping[str, Iterable[str]]) -> None:
        self._nodes = set(nodes)
        self._targets: dict[str, set[str]] = {}
        for node in self._nodes:
            self._targets[node] = {t for t in edges.get(node, []) if t in self._nodes}

    def check_acyclic(self) -> None:
        """Raise ``NotificationCycleError`` naming the nodes left on a cycle."""
        indegree: dict[str, int] = dict.fromkeys(self._nodes, 0)
        for targets in self._targets.values():
            for t in targets:
                indegree[t] += 1

        ready = sorted(n for n, deg in indegree.items() if deg == 0)
        visited: set[str] = set()
        while ready:
            node = ready.pop()
            visited.add(node)
            for t in sorted(self._targets[node]):
                indegree[t] -= 1
                if indegree[t] == 0:
                    ready.append(t)

        if len(visited) != len(self._nodes):
            raise NotificationCycleError(sorted(self._nodes - visited))
