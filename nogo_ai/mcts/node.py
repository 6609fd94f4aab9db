"""
Search tree and statistics for Monte Carlo Tree Search.

The tree is an arena: nodes live in one list owned by the SearchTree and
refer to each other by index. A parent owns its children through the
`children` index list; each child keeps its parent's index so that
backpropagation can climb to the root. Destroying the tree drops the whole
arena at once.

Move statistics are kept apart from the tree in an ActionTable keyed by
Move, so every node labelled with the same move shares one record no matter
where it sits in the tree.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from nogo_ai.core.actions import Move, all_moves
from nogo_ai.core.board import Board
from nogo_ai.core.constants import PlaceResult


class TreeDestroyedError(RuntimeError):
    """Raised when a destroyed SearchTree is used."""


@dataclass
class ActionStatistics:
    """Visit and win counts shared by every node carrying one move."""
    total: int = 0
    win: int = 0

    @property
    def win_rate(self) -> float:
        return self.win / self.total if self.total > 0 else 0.0


class ActionTable:
    """
    Move -> ActionStatistics mapping shared across a whole episode.

    Lookups of unseen moves return a zero record without inserting it.
    """

    def __init__(self):
        self._stats: Dict[Move, ActionStatistics] = {}

    def get(self, move: Move) -> ActionStatistics:
        stats = self._stats.get(move)
        return stats if stats is not None else ActionStatistics()

    def total(self, move: Move) -> int:
        stats = self._stats.get(move)
        return stats.total if stats is not None else 0

    def record(self, move: Move, result: int) -> ActionStatistics:
        """
        Count one traversal of `move` with `result` (1 win, 0 loss).
        """
        stats = self._stats.get(move)
        if stats is None:
            stats = self._stats[move] = ActionStatistics()
        stats.total += 1
        stats.win += result
        return stats

    def clear(self) -> None:
        self._stats.clear()

    def items(self):
        return self._stats.items()

    def __contains__(self, move: Move) -> bool:
        return move in self._stats

    def __len__(self) -> int:
        return len(self._stats)


@dataclass(eq=False)
class TreeNode:
    """
    One decision point in the search tree.

    `move` is the move that led here from the parent (None at the root) and
    `state` is the position after it. `visits` and `wins` count the
    simulations that passed through this physical node; selection scores
    use the shared ActionTable instead.
    """
    index: int
    state: Board
    move: Optional[Move] = None
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)
    visits: int = 0
    wins: int = 0
    expanded: bool = False
    shape: Optional[float] = None  # cached local-shape bonus of `move`

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def __str__(self) -> str:
        return (f"TreeNode(index={self.index}, move={self.move}, "
                f"visits={self.visits}, wins={self.wins}, "
                f"children={len(self.children)})")


class SearchTree:
    """
    Arena of TreeNodes for a single decision.
    """

    def __init__(self):
        self._nodes: Optional[List[TreeNode]] = []

    @classmethod
    def create_root(cls, state: Board) -> 'SearchTree':
        """
        Create a tree holding only a root for `state`.

        Args:
            state: Position to search from

        Returns:
            New SearchTree
        """
        tree = cls()
        tree._nodes.append(TreeNode(index=0, state=state))
        return tree

    def _arena(self) -> List[TreeNode]:
        if self._nodes is None:
            raise TreeDestroyedError("search tree has been destroyed")
        return self._nodes

    @property
    def root(self) -> TreeNode:
        return self._arena()[0]

    @property
    def size(self) -> int:
        """Number of live nodes (0 once destroyed)."""
        return 0 if self._nodes is None else len(self._nodes)

    @property
    def destroyed(self) -> bool:
        return self._nodes is None

    def node(self, index: int) -> TreeNode:
        return self._arena()[index]

    def parent(self, node: TreeNode) -> Optional[TreeNode]:
        if node.parent is None:
            return None
        return self._arena()[node.parent]

    def children(self, node: TreeNode) -> List[TreeNode]:
        arena = self._arena()
        return [arena[i] for i in node.children]

    def expand(self, leaf: TreeNode) -> None:
        """
        Add one child per legal move of the side to move at `leaf`.

        A leaf with no legal move stays childless, which marks it terminal.
        Expanding an already expanded node does nothing.

        Args:
            leaf: Node to expand
        """
        arena = self._arena()
        if leaf.expanded:
            return
        leaf.expanded = True

        state = leaf.state
        for move in all_moves(state.to_move, state.width, state.height):
            after, result = state.apply(move)
            if result != PlaceResult.LEGAL:
                continue
            child = TreeNode(
                index=len(arena),
                state=after,
                move=move,
                parent=leaf.index,
            )
            arena.append(child)
            leaf.children.append(child.index)

    def path_to_root(self, node: TreeNode) -> Iterator[TreeNode]:
        """Yield `node` and its ancestors, ending with the root."""
        arena = self._arena()
        current: Optional[TreeNode] = node
        while current is not None:
            yield current
            current = None if current.parent is None else arena[current.parent]

    def destroy(self) -> None:
        """
        Release every node. Safe to call more than once.
        """
        if self._nodes is None:
            return
        for node in self._nodes:
            node.children.clear()
            node.parent = None
        self._nodes = None

    def __len__(self) -> int:
        return self.size
