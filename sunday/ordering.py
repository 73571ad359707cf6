"""List reordering for the board sidebar."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, TypeVar

from .models import Board, BoardFolder

T = TypeVar("T")


@dataclass
class FolderSection:
    folder: BoardFolder
    boards: List[Board] = field(default_factory=list)


def move_entry(entries: Sequence[T], old_index: int, new_index: int) -> List[T]:
    """Move one entry the way a reorderable list reports a drop.

    ``new_index`` is the slot the entry was dropped on, counted before the
    entry is removed, so it is shifted down by one when moving forward.
    """
    result = list(entries)
    if not 0 <= old_index < len(result):
        raise IndexError(f"old_index {old_index} out of range")
    if new_index > old_index:
        new_index -= 1
    new_index = max(0, min(new_index, len(result) - 1))
    if new_index == old_index:
        return result
    entry = result.pop(old_index)
    result.insert(new_index, entry)
    return result


def reorder_folders(
    folders: Sequence[BoardFolder], old_index: int, new_index: int
) -> List[BoardFolder]:
    """Return folders in their new order with positions renumbered."""
    reordered = move_entry(folders, old_index, new_index)
    for position, folder in enumerate(reordered):
        folder.position = position
    return reordered


def board_drop_order(
    boards: Sequence[Board],
    dragged: Board,
    target_position: int,
    target_folder_id: Optional[int],
) -> List[int]:
    """Ids of the target folder's boards after dropping ``dragged`` into it."""
    in_folder = sorted(
        (b for b in boards if b.folder_id == target_folder_id and b.id != dragged.id),
        key=lambda b: b.position,
    )
    insert_at = next(
        (i for i, b in enumerate(in_folder) if b.position >= target_position),
        len(in_folder),
    )
    in_folder.insert(insert_at, dragged)
    return [b.id for b in in_folder]


def group_by_folder(
    boards: Sequence[Board], folders: Sequence[BoardFolder]
) -> Tuple[List[FolderSection], List[Board]]:
    """Split boards into folder sections plus the unfiled remainder."""
    sections: Dict[int, FolderSection] = {
        folder.id: FolderSection(folder)
        for folder in sorted(folders, key=lambda f: f.position)
    }
    unfiled: List[Board] = []
    for board in sorted(boards, key=lambda b: b.position):
        section = sections.get(board.folder_id) if board.folder_id is not None else None
        if section is None:
            unfiled.append(board)
        else:
            section.boards.append(board)
    return list(sections.values()), unfiled


def filter_boards(boards: Sequence[Board], query: str) -> List[Board]:
    needle = query.strip().lower()
    if not needle:
        return []
    return [
        board
        for board in boards
        if needle in board.name.lower()
        or (board.description and needle in board.description.lower())
    ]
