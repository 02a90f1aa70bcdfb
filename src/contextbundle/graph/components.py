"""
Connected-component analysis over identifier reference graphs.

Both functions visit nodes and neighbors in sorted order so that the
returned component order is stable across runs.
"""

from collections import deque
from typing import Dict, Iterable, Iterator, List, Mapping, Set, Tuple


def strongly_connected_components(
    nodes: Iterable[str],
    edges: Mapping[str, Iterable[str]],
) -> List[Set[str]]:
    """
    Compute strongly connected components with Tarjan's algorithm.

    Iterative, so deep reference chains do not hit the recursion limit.
    Edges that point outside `nodes` are ignored.

    Args:
        nodes: All vertices of the graph
        edges: Forward adjacency (vertex -> referenced vertices)

    Returns:
        Components in the order Tarjan completes them (callees before callers).
        Every node appears in exactly one component.
    """
    node_set = set(nodes)
    index: Dict[str, int] = {}
    low: Dict[str, int] = {}
    on_stack: Set[str] = set()
    stack: List[str] = []
    components: List[Set[str]] = []
    counter = 0

    def neighbors_of(node: str) -> Iterator[str]:
        return iter(sorted(n for n in edges.get(node, ()) if n in node_set))

    for root in sorted(node_set):
        if root in index:
            continue

        index[root] = low[root] = counter
        counter += 1
        stack.append(root)
        on_stack.add(root)
        work: List[Tuple[str, Iterator[str]]] = [(root, neighbors_of(root))]

        while work:
            node, neighbors = work[-1]
            descended = False

            for neighbor in neighbors:
                if neighbor not in index:
                    index[neighbor] = low[neighbor] = counter
                    counter += 1
                    stack.append(neighbor)
                    on_stack.add(neighbor)
                    work.append((neighbor, neighbors_of(neighbor)))
                    descended = True
                    break
                if neighbor in on_stack:
                    low[node] = min(low[node], index[neighbor])

            if descended:
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                low[parent] = min(low[parent], low[node])

            if low[node] == index[node]:
                component: Set[str] = set()
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.add(member)
                    if member == node:
                        break
                components.append(component)

    return components


def weakly_connected_components(
    nodes: Iterable[str],
    edges: Mapping[str, Iterable[str]],
) -> List[Set[str]]:
    """
    Compute weakly connected components (edge direction ignored).

    Useful for finding clusters of declarations that are tied together and
    usually move as a unit.
    """
    node_set = set(nodes)
    adjacency: Dict[str, Set[str]] = {node: set() for node in node_set}
    for source, targets in edges.items():
        if source not in node_set:
            continue
        for target in targets:
            if target in node_set:
                adjacency[source].add(target)
                adjacency[target].add(source)

    components: List[Set[str]] = []
    visited: Set[str] = set()

    for start in sorted(node_set):
        if start in visited:
            continue
        component = {start}
        visited.add(start)
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for neighbor in sorted(adjacency[current]):
                if neighbor not in visited:
                    visited.add(neighbor)
                    component.add(neighbor)
                    queue.append(neighbor)
        components.append(component)

    return components
