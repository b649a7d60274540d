"""
Red-black interval tree over pairwise-disjoint intervals.

Insertion and rebalancing follow CLRS (ch. 13) with the interval-tree
augmentation of section 14.3: every node keeps ``max_end``, the largest end
offset in its subtree.

Nodes live in parallel lists (an arena) and refer to each other by index.
Index 0 is the shared black sentinel ("nil" in CLRS). There is no deletion:
a tree is built up while one sentence is matched and then dropped.

Restrictions apply: callers must only insert intervals that do not overlap
anything already stored. ``next_available`` is tuned for the greedy matcher
and is not a general overlap query.
"""

from __future__ import annotations

from typing import Iterator, Optional

from geotagger.interval import Interval

NIL = 0


class IntervalTree:
    """A balanced binary-search tree keyed by :class:`Interval`."""

    def __init__(self) -> None:
        # Slot 0 is the sentinel; its interval is never read.
        self._interval: list[Optional[Interval]] = [None]
        self._left: list[int] = [NIL]
        self._right: list[int] = [NIL]
        self._parent: list[int] = [NIL]
        self._red: list[bool] = [False]
        self._max_end: list[int] = [-1]
        self._root = NIL

    # ── General queries ──────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._interval) - 1

    def __bool__(self) -> bool:
        return self._root != NIL

    def __contains__(self, interval: Interval) -> bool:
        return self.contains(interval)

    def __iter__(self) -> Iterator[Interval]:
        """In-order traversal, i.e. ascending intervals."""
        node = self._minimum_node(self._root)
        while node != NIL:
            yield self._interval[node]
            node = self._successor_node(node)

    def contains(self, interval: Interval) -> bool:
        return self._search(interval) != NIL

    def minimum(self) -> Optional[Interval]:
        node = self._minimum_node(self._root)
        return None if node == NIL else self._interval[node]

    def maximum(self) -> Optional[Interval]:
        node = self._maximum_node(self._root)
        return None if node == NIL else self._interval[node]

    def successor(self, interval: Interval) -> Optional[Interval]:
        """
        The next interval after ``interval``, or None if ``interval`` is the
        maximum or is not stored in the tree.
        """
        node = self._search(interval)
        if node == NIL:
            return None
        node = self._successor_node(node)
        return None if node == NIL else self._interval[node]

    def predecessor(self, interval: Interval) -> Optional[Interval]:
        """
        The interval before ``interval``, or None if ``interval`` is the
        minimum or is not stored in the tree.
        """
        node = self._search(interval)
        if node == NIL:
            return None
        node = self._predecessor_node(node)
        return None if node == NIL else self._interval[node]

    def next_available(self, query: Interval) -> int:
        """
        Where a candidate span may start.

        Probes the tree at ``query.end``, then at ``query.start``, using
        key-order descent only (``max_end`` is not consulted). Returns the
        first offset past the stored interval covering a probe point, or
        ``query.start`` if neither point is covered.
        """
        for point in (query.end, query.start):
            covering = self._covering(point)
            if covering is not None:
                return covering.end + 1
        return query.start

    def _covering(self, point: int) -> Optional[Interval]:
        probe = Interval(point, point)
        node = self._root
        while node != NIL:
            current = self._interval[node]
            if current.overlaps(probe):
                return current
            node = self._left[node] if point < current.start else self._right[node]
        return None

    # ── Insertion ────────────────────────────────────────────────────

    def insert(self, interval: Interval) -> bool:
        """
        Insert ``interval``. Returns False (tree unchanged) if an equal
        interval is already stored. Overlap with stored intervals is not
        checked.
        """
        parent = NIL
        node = self._root
        while node != NIL:
            current = self._interval[node]
            if interval == current:
                return False
            parent = node
            node = self._left[node] if interval < current else self._right[node]

        # Only widen max_end along the path once we know the insert happens.
        ancestor = parent
        while ancestor != NIL:
            if self._max_end[ancestor] < interval.end:
                self._max_end[ancestor] = interval.end
            ancestor = self._parent[ancestor]

        new = self._new_node(interval, parent)
        if parent == NIL:
            self._root = new
        elif interval < self._interval[parent]:
            self._left[parent] = new
        else:
            self._right[parent] = new

        self._insert_fixup(new)
        return True

    def _new_node(self, interval: Interval, parent: int) -> int:
        self._interval.append(interval)
        self._left.append(NIL)
        self._right.append(NIL)
        self._parent.append(parent)
        self._red.append(True)
        self._max_end.append(interval.end)
        return len(self._interval) - 1

    def _insert_fixup(self, z: int) -> None:
        parent, red = self._parent, self._red
        while red[parent[z]]:
            p = parent[z]
            g = parent[p]
            if p == self._left[g]:
                uncle = self._right[g]
                if red[uncle]:
                    red[p] = False
                    red[uncle] = False
                    red[g] = True
                    z = g
                else:
                    if z == self._right[p]:
                        z = p
                        self._left_rotate(z)
                        p = parent[z]
                        g = parent[p]
                    red[p] = False
                    red[g] = True
                    self._right_rotate(g)
            else:
                uncle = self._left[g]
                if red[uncle]:
                    red[p] = False
                    red[uncle] = False
                    red[g] = True
                    z = g
                else:
                    if z == self._left[p]:
                        z = p
                        self._right_rotate(z)
                        p = parent[z]
                        g = parent[p]
                    red[p] = False
                    red[g] = True
                    self._left_rotate(g)
        red[self._root] = False

    def _reset_max_end(self, node: int) -> None:
        value = self._interval[node].end
        left, right = self._left[node], self._right[node]
        if left != NIL:
            value = max(value, self._max_end[left])
        if right != NIL:
            value = max(value, self._max_end[right])
        self._max_end[node] = value

    def _replace_child(self, old: int, new: int) -> None:
        parent = self._parent[old]
        self._parent[new] = parent
        if parent == NIL:
            self._root = new
        elif old == self._left[parent]:
            self._left[parent] = new
        else:
            self._right[parent] = new

    def _left_rotate(self, x: int) -> None:
        y = self._right[x]
        self._right[x] = self._left[y]
        if self._left[y] != NIL:
            self._parent[self._left[y]] = x
        self._replace_child(x, y)
        self._left[y] = x
        self._parent[x] = y
        self._reset_max_end(x)
        self._reset_max_end(y)

    def _right_rotate(self, x: int) -> None:
        y = self._left[x]
        self._left[x] = self._right[y]
        if self._right[y] != NIL:
            self._parent[self._right[y]] = x
        self._replace_child(x, y)
        self._right[y] = x
        self._parent[x] = y
        self._reset_max_end(x)
        self._reset_max_end(y)

    # ── Node navigation ──────────────────────────────────────────────

    def _search(self, interval: Interval) -> int:
        node = self._root
        while node != NIL:
            current = self._interval[node]
            if interval == current:
                return node
            node = self._left[node] if interval < current else self._right[node]
        return NIL

    def _minimum_node(self, node: int) -> int:
        if node == NIL:
            return NIL
        while self._left[node] != NIL:
            node = self._left[node]
        return node

    def _maximum_node(self, node: int) -> int:
        if node == NIL:
            return NIL
        while self._right[node] != NIL:
            node = self._right[node]
        return node

    def _successor_node(self, node: int) -> int:
        if self._right[node] != NIL:
            return self._minimum_node(self._right[node])
        parent = self._parent[node]
        while parent != NIL and node == self._right[parent]:
            node = parent
            parent = self._parent[parent]
        return parent

    def _predecessor_node(self, node: int) -> int:
        if self._left[node] != NIL:
            return self._maximum_node(self._left[node])
        parent = self._parent[node]
        while parent != NIL and node == self._left[parent]:
            node = parent
            parent = self._parent[parent]
        return parent

    # ── Verification (used by tests) ─────────────────────────────────

    def is_bst(self) -> bool:
        """Every node is greater than its left subtree and less than its right."""
        def check(node: int, low: Optional[Interval], high: Optional[Interval]) -> bool:
            if node == NIL:
                return True
            current = self._interval[node]
            if low is not None and current <= low:
                return False
            if high is not None and current >= high:
                return False
            return check(self._left[node], low, current) and check(self._right[node], current, high)

        return check(self._root, None, None)

    def is_balanced(self) -> bool:
        """Every root-to-leaf path has the same number of black nodes."""
        def black_height(node: int) -> int:
            if node == NIL:
                return 0
            left = black_height(self._left[node])
            right = black_height(self._right[node])
            if left < 0 or right < 0 or left != right:
                return -1
            return left + (0 if self._red[node] else 1)

        return black_height(self._root) >= 0

    def has_valid_red_coloring(self) -> bool:
        """The root is black and no red node has a red child."""
        if self._red[self._root]:
            return False
        for node in range(1, len(self._interval)):
            if self._red[node] and (self._red[self._left[node]] or self._red[self._right[node]]):
                return False
        return True

    def has_consistent_max_ends(self) -> bool:
        """Each node's max_end is the largest end offset within its subtree."""
        def subtree_max(node: int) -> Optional[int]:
            if node == NIL:
                return -1
            left = subtree_max(self._left[node])
            right = subtree_max(self._right[node])
            if left is None or right is None:
                return None
            expected = max(self._interval[node].end, left, right)
            return expected if self._max_end[node] == expected else None

        return subtree_max(self._root) is not None

    def height(self) -> int:
        def depth(node: int) -> int:
            if node == NIL:
                return 0
            return 1 + max(depth(self._left[node]), depth(self._right[node]))

        return depth(self._root)
