import pytest

from sunday.models import Board, BoardFolder
from sunday.ordering import (
    board_drop_order,
    filter_boards,
    group_by_folder,
    move_entry,
    reorder_folders,
)


def make_board(board_id, position, folder_id=None, name=None, description=None):
    return Board(
        id=board_id,
        workspace_id=1,
        name=name or f"Board {board_id}",
        folder_id=folder_id,
        description=description,
        position=position,
    )


def test_move_entry_forward_adjusts_for_removal():
    assert move_entry(["a", "b", "c", "d"], 0, 3) == ["b", "c", "a", "d"]


def test_move_entry_backward():
    assert move_entry(["a", "b", "c", "d"], 3, 1) == ["a", "d", "b", "c"]


def test_move_entry_past_end_clamps():
    assert move_entry(["a", "b", "c"], 0, 10) == ["b", "c", "a"]


def test_move_entry_same_slot_is_noop():
    entries = ["a", "b"]
    assert move_entry(entries, 0, 1) == ["a", "b"]
    assert move_entry(entries, 1, 1) == ["a", "b"]


def test_move_entry_rejects_bad_source():
    with pytest.raises(IndexError):
        move_entry(["a"], 2, 0)


def test_reorder_folders_renumbers_positions():
    folders = [BoardFolder(id=i, workspace_id=1, position=i * 10) for i in (1, 2, 3)]
    reordered = reorder_folders(folders, 2, 0)
    assert [f.id for f in reordered] == [3, 1, 2]
    assert [f.position for f in reordered] == [0, 1, 2]


def test_board_drop_order_inserts_before_position():
    boards = [make_board(1, 0, 5), make_board(2, 1, 5), make_board(3, 2, 5), make_board(4, 0)]
    dragged = boards[3]
    assert board_drop_order(boards, dragged, 1, 5) == [1, 4, 2, 3]


def test_board_drop_order_appends_past_end():
    boards = [make_board(1, 0, 5), make_board(2, 1, 5)]
    dragged = make_board(9, 0)
    assert board_drop_order(boards + [dragged], dragged, 99, 5) == [1, 2, 9]


def test_board_drop_order_within_same_folder():
    boards = [make_board(1, 0), make_board(2, 1), make_board(3, 2)]
    assert board_drop_order(boards, boards[0], 3, None) == [2, 3, 1]


def test_group_by_folder_sorts_and_keeps_orphans_unfiled():
    folders = [
        BoardFolder(id=2, workspace_id=1, name="B", position=1),
        BoardFolder(id=1, workspace_id=1, name="A", position=0),
    ]
    boards = [
        make_board(10, 1, 1),
        make_board(11, 0, 1),
        make_board(12, 0, None),
        make_board(13, 0, 99),
    ]
    sections, unfiled = group_by_folder(boards, folders)
    assert [s.folder.name for s in sections] == ["A", "B"]
    assert [b.id for b in sections[0].boards] == [11, 10]
    assert sections[1].boards == []
    assert [b.id for b in unfiled] == [12, 13]


def test_filter_boards_matches_name_and_description():
    boards = [
        make_board(1, 0, name="Chimney Jobs"),
        make_board(2, 1, name="Leads", description="chimney sweep leads"),
        make_board(3, 2, name="Other"),
    ]
    assert [b.id for b in filter_boards(boards, "CHIMNEY")] == [1, 2]
    assert filter_boards(boards, "   ") == []
