from typing import Dict, List

import numpy as np


class ConnectivityEngine:
    """
    A Union-Find (Disjoint Set) structure over point indices ``0..N-1`` with
    path compression and union by size.

    Every point starts as its own singleton component. Components only ever
    merge, so the number of components is non-increasing over the lifetime
    of an engine.
    """

    def __init__(self, num_nodes: int):
        """
        Initialize the engine with every node in its own component.

        Parameters
        ----------
        num_nodes : int
            The number of nodes (points) tracked by the engine.
        """

        if num_nodes < 0:
            raise ValueError("num_nodes must be non-negative")
        self.num_nodes = num_nodes
        self._parent = list(range(num_nodes))
        self._size = [1] * num_nodes  # only meaningful at roots
        self._count = num_nodes

    def _check(self, node: int) -> None:
        if not 0 <= node < self.num_nodes:
            raise IndexError(
                f"node {node} out of range for engine of {self.num_nodes} nodes"
            )

    def find(self, node: int) -> int:
        """
        Find the root representative of the component containing the node.

        Every node visited on the way is re-pointed directly at the root.
        Union by size keeps trees ``O(log N)`` deep, which bounds the
        recursion.

        Parameters
        ----------
        node : int
            The node whose component root is to be found.

        Returns
        -------
        int
            The root node of the component.
        """

        self._check(node)
        return self._find(node)

    def _find(self, node: int) -> int:
        parent = self._parent[node]
        if parent != node:
            parent = self._find(parent)
            self._parent[node] = parent
        return parent

    def union(self, node1: int, node2: int) -> bool:
        """
        Merge the components containing node1 and node2.

        The root of the smaller component is attached under the root of the
        larger one. On equal sizes the lower-indexed root is kept.

        Parameters
        ----------
        node1 : int
            First node.
        node2 : int
            Second node.

        Returns
        -------
        bool
            True if two components were merged, False if the nodes were
            already connected (in which case nothing changes).
        """

        root1 = self.find(node1)
        root2 = self.find(node2)
        if root1 == root2:
            return False

        size1, size2 = self._size[root1], self._size[root2]
        if size1 < size2 or (size1 == size2 and root2 < root1):
            root1, root2 = root2, root1
        self._parent[root2] = root1
        self._size[root1] = size1 + size2
        self._count -= 1
        return True

    def is_connected(self, node1: int, node2: int) -> bool:
        """
        Check whether two nodes are in the same connected component.

        Parameters
        ----------
        node1 : int
            First node.
        node2 : int
            Second node.

        Returns
        -------
        bool
            True if node1 and node2 are connected, False otherwise.
        """

        return self.find(node1) == self.find(node2)

    def component_size(self, node: int) -> int:
        """
        Number of nodes in the component containing the node.

        Parameters
        ----------
        node : int
            Any node of the component.

        Returns
        -------
        int
            The size of the component.
        """

        return self._size[self.find(node)]

    def component_count(self) -> int:
        """Return the number of distinct components."""

        return self._count

    @property
    def is_saturated(self) -> bool:
        """True once at most one component remains."""
        return self._count <= 1

    @property
    def is_pristine(self) -> bool:
        """True while every node is still a singleton."""
        return self._count == self.num_nodes

    def _roots(self) -> List[int]:
        return [i for i in range(self.num_nodes) if self._parent[i] == i]

    def all_component_sizes(self) -> List[int]:
        """
        Sizes of every distinct component.

        Returns
        -------
        List[int]
            One entry per component, largest first; components of equal size
            are ordered by ascending root index.
        """

        roots = sorted(self._roots(), key=lambda r: (-self._size[r], r))
        return [self._size[r] for r in roots]

    def clusters(self) -> List[List[int]]:
        """
        Member indices of every component.

        Returns
        -------
        List[List[int]]
            Sorted member lists, in the same order as
            :meth:`all_component_sizes`.
        """

        members: Dict[int, List[int]] = {r: [] for r in self._roots()}
        for node in range(self.num_nodes):
            members[self._find(node)].append(node)
        roots = sorted(members, key=lambda r: (-self._size[r], r))
        return [members[r] for r in roots]

    def labels(self) -> np.ndarray:
        """
        Root representative of every node.

        Returns
        -------
        np.ndarray
            An (N,) integer array; nodes with equal labels share a component.
        """

        return np.array([self._find(i) for i in range(self.num_nodes)], dtype=np.int64)

    def __len__(self) -> int:
        """
        Return the number of connected components.

        Returns
        -------
        int
            The number of components currently being tracked.
        """

        return self._count

    def __repr__(self) -> str:
        return (
            f"ConnectivityEngine(num_nodes={self.num_nodes}, "
            f"components={self._count})"
        )
