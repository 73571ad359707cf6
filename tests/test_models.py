from datetime import datetime, timezone

from sunday.models import (
    Board,
    BoardFolder,
    Group,
    Item,
    TemplateInfo,
    TemplateList,
    Workspace,
    parse_bool,
    parse_datetime,
    parse_int,
)


def test_parse_int_accepts_strings_and_falls_back():
    assert parse_int("42") == 42
    assert parse_int(7) == 7
    assert parse_int(None) == 0
    assert parse_int("abc", default=-1) == -1
    assert parse_int(True) == 0


def test_parse_bool_only_true_values():
    assert parse_bool(True)
    assert parse_bool(1)
    assert parse_bool("1")
    assert not parse_bool("0")
    assert not parse_bool(None)
    assert not parse_bool("true")


def test_parse_datetime_handles_utc_suffix_and_garbage():
    parsed = parse_datetime("2024-05-01T12:30:00Z")
    assert parsed == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
    assert parse_datetime("not a date") is None
    assert parse_datetime("") is None


def test_board_from_dict_with_string_ids_and_groups():
    board = Board.from_dict(
        {
            "id": "12",
            "workspace_id": "3",
            "folder_id": "5",
            "name": "Leads",
            "type": "shareable",
            "owner_username": "alice",
            "user_access_level": "item_only",
            "position": "2",
            "groups": [
                {
                    "id": "1",
                    "board_id": "12",
                    "title": "New",
                    "is_collapsed": "1",
                    "items": [{"id": "9", "board_id": "12", "group_id": "1", "name": "Call back"}],
                }
            ],
        }
    )
    assert board.id == 12
    assert board.folder_id == 5
    assert board.board_type == "shareable"
    assert board.created_by == "alice"
    assert not board.has_full_access
    assert board.position == 2
    assert board.group_count == 1
    assert board.groups[0].is_collapsed
    assert board.groups[0].items[0].name == "Call back"


def test_board_defaults_for_unknown_values():
    board = Board.from_dict({"id": 1, "workspace_id": 1, "type": "weird", "folder_id": ""})
    assert board.name == "Untitled Board"
    assert board.board_type == "main"
    assert board.folder_id is None
    assert board.access_level == "full"


def test_item_position_falls_back_to_sort_order():
    item = Item.from_dict({"id": 1, "board_id": 2, "group_id": 3, "name": "x", "sort_order": "4"})
    assert item.position == 4
    assert item.created_by == "unknown"


def test_group_and_folder_defaults():
    group = Group.from_dict({"id": 1, "board_id": 2})
    assert group.title == "Untitled"
    assert group.color == "#0073ea"
    folder = BoardFolder.from_dict({"id": 4, "workspace_id": 1})
    assert folder.name == "Untitled Folder"
    assert folder.color == "#808080"
    assert folder.is_expanded


def test_workspace_nests_boards():
    workspace = Workspace.from_dict(
        {"id": "1", "name": "Office", "boards": [{"id": 2, "workspace_id": 1, "name": "Jobs"}]}
    )
    assert workspace.boards[0].name == "Jobs"
    assert workspace.to_dict()["name"] == "Office"


def test_template_list_marks_builtins():
    templates = TemplateList.from_dict(
        {
            "builtin_templates": [{"id": "tasks", "name": "Task Tracker"}],
            "saved_templates": [{"id": 7, "name": "Mine", "is_shared": 1, "category": "Sales"}],
            "categories": ["Sales"],
        }
    )
    assert templates.builtin_templates[0].is_builtin
    saved = templates.saved_templates[0]
    assert saved.id == "7"
    assert saved.is_shared
    assert not saved.is_builtin
    assert [t.name for t in templates.all_templates] == ["Task Tracker", "Mine"]


def test_template_info_defaults():
    template = TemplateInfo.from_dict({"id": 3, "name": "Blank"})
    assert template.icon == "dashboard"
    assert template.color == "#579bfc"
    assert template.category == "Custom"
    assert template.created_at is None
