"""Accumulated trust graph kept in step with repeated explorations.

``merge`` is a pure function and assumes snapshots arrive in fetch order.
TrustGraphSync is the single writer that owns the accumulated graph:

- every ``explore`` call takes a generation number before traversing
- merges happen one at a time behind a lock
- with ``discard_stale`` set, a snapshot whose generation was overtaken by
  a later ``explore`` while it was traversing is dropped instead of merged

This gives callers the "navigate away" behaviour: only the most recent
exploration lands in the view.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from ..core.config import ExploreConfig
from ..models import Identity
from .builder import FetchFn, NodeObserver, traverse
from .merge import merge
from .models import TrustGraph

logger = logging.getLogger(__name__)


@dataclass
class TrustGraphSync:
    """Single-writer owner of the accumulated trust graph.

    Example:
        sync = TrustGraphSync(fetch=client, on_node_fetched=repository, main_id=me)
        await sync.explore(me)
        await sync.explore(someone_else, depth=2)
        graph = sync.graph
    """

    fetch: FetchFn
    on_node_fetched: NodeObserver | None = None
    config: ExploreConfig = field(default_factory=ExploreConfig)

    # Own identity; exploring it flags the start node as the main node
    main_id: Identity | None = None

    _graph: TrustGraph | None = None
    _generation: int = 0
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _stats: dict[str, int] = field(default_factory=lambda: {
        "explorations": 0,
        "merges": 0,
        "discarded": 0,
    })

    @property
    def graph(self) -> TrustGraph:
        """Current accumulated graph (empty before the first merge)."""
        return self._graph if self._graph is not None else TrustGraph.empty()

    @property
    def generation(self) -> int:
        return self._generation

    async def explore(
        self,
        identity: Identity,
        depth: int | None = None,
        is_main_node: bool | None = None,
        select: bool = True,
    ) -> TrustGraph | None:
        """Traverse from ``identity`` and merge the snapshot.

        Args:
            identity: Identity to explore from
            depth: Depth budget (default: ``config.default_depth``)
            is_main_node: Override the main-node flag of the start node
            select: Flag the start node as selected

        Returns:
            The merged graph, or None if the snapshot was stale and dropped

        Raises:
            FetchError: If the start identity itself could not be fetched
        """
        self._generation += 1
        generation = self._generation
        self._stats["explorations"] += 1

        if depth is None:
            depth = self.config.default_depth
        if is_main_node is None:
            is_main_node = identity == self.main_id

        snapshot = await traverse(
            identity,
            depth,
            is_main_node,
            self.fetch,
            on_node_fetched=self.on_node_fetched,
        )

        async with self._lock:
            if self.config.discard_stale and generation != self._generation:
                self._stats["discarded"] += 1
                logger.info(
                    f"Discarding stale snapshot for {identity} "
                    f"(generation {generation}, current {self._generation})"
                )
                return None

            self._graph = merge(self._graph, snapshot, identity if select else None)
            self._stats["merges"] += 1
            return self._graph

    def reset(self) -> None:
        """Forget the accumulated graph."""
        self._graph = None
        logger.debug("Cleared accumulated trust graph")

    def get_stats(self) -> dict[str, int]:
        return dict(self._stats)
