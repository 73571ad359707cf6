"""Workspace-wide search over boards and their items."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .api import ApiError, SundayClient
from .models import Board, Item
from .ordering import filter_boards

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    kind: str  # "board" or "item"
    board: Board
    item: Optional[Item] = None

    @property
    def label(self) -> str:
        if self.item is None:
            return f"Board: {self.board.name}"
        return f"{self.item.name} ({self.board.name})"


def search_workspace(
    client: SundayClient,
    boards: Sequence[Board],
    query: str,
    per_board_limit: int = 10,
) -> List[SearchResult]:
    """Board name matches first, then item matches from every board."""
    if not query.strip():
        return []
    results = [SearchResult("board", board) for board in filter_boards(boards, query)]
    for board in boards:
        try:
            items = client.search_items(board.id, query, limit=per_board_limit)
        except ApiError as exc:
            logger.warning("Item search skipped board %s: %s", board.id, exc.message)
            continue
        results.extend(SearchResult("item", board, item) for item in items)
    return results
