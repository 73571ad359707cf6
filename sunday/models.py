"""Domain records mirrored from the Sunday backend."""
from __future__ import annotations

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

BOARD_TYPES = ("main", "shareable", "private")
ACCESS_LEVELS = ("full", "item_only", "none")


def parse_int(value: Any, default: int = 0) -> int:
    """Parse ids and counters that the backend may send as strings."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def parse_optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return parse_int(value)


def parse_bool(value: Any) -> bool:
    return value is True or value == 1 or value == "1"


def parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_required_datetime(value: Any) -> datetime:
    return parse_datetime(value) or datetime.now()


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class Item:
    id: int
    board_id: int
    group_id: int
    name: str
    created_by: str = "unknown"
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None
    position: int = 0
    column_values: Dict[str, Any] = field(default_factory=dict)
    parent_item_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "Item":
        return cls(
            id=parse_int(data.get("id")),
            board_id=parse_int(data.get("board_id")),
            group_id=parse_int(data.get("group_id")),
            name=data.get("name") or "",
            created_by=data.get("created_by") or "unknown",
            created_at=parse_required_datetime(data.get("created_at")),
            updated_at=parse_datetime(data.get("updated_at")),
            position=parse_int(data.get("position", data.get("sort_order"))),
            column_values=dict(data.get("column_values") or {}),
            parent_item_id=parse_optional_int(data.get("parent_item_id")),
        )

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["created_at"] = format_datetime(self.created_at)
        data["updated_at"] = format_datetime(self.updated_at)
        return data


@dataclass
class Group:
    id: int
    board_id: int
    title: str = "Untitled"
    color: str = "#0073ea"
    position: int = 0
    is_collapsed: bool = False
    items: List[Item] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "Group":
        return cls(
            id=parse_int(data.get("id")),
            board_id=parse_int(data.get("board_id")),
            title=data.get("title") or "Untitled",
            color=data.get("color") or "#0073ea",
            position=parse_int(data.get("position", data.get("sort_order"))),
            is_collapsed=parse_bool(data.get("is_collapsed")),
            items=[Item.from_dict(i) for i in data.get("items") or []],
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "board_id": self.board_id,
            "title": self.title,
            "color": self.color,
            "position": self.position,
            "is_collapsed": self.is_collapsed,
            "items": [i.to_dict() for i in self.items],
        }


@dataclass
class BoardFolder:
    id: int
    workspace_id: int
    name: str = "Untitled Folder"
    color: str = "#808080"
    position: int = 0
    is_expanded: bool = True

    @classmethod
    def from_dict(cls, data: Dict) -> "BoardFolder":
        return cls(
            id=parse_int(data.get("id")),
            workspace_id=parse_int(data.get("workspace_id")),
            name=data.get("name") or "Untitled Folder",
            color=data.get("color") or "#808080",
            position=parse_int(data.get("position")),
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "workspace_id": self.workspace_id,
            "name": self.name,
            "color": self.color,
            "position": self.position,
        }


@dataclass
class Board:
    id: int
    workspace_id: int
    name: str
    folder_id: Optional[int] = None
    description: Optional[str] = None
    board_type: str = "main"
    created_by: str = "unknown"
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None
    groups: List[Group] = field(default_factory=list)
    item_count: int = 0
    group_count: int = 0
    position: int = 0
    access_level: str = "full"

    @classmethod
    def from_dict(cls, data: Dict) -> "Board":
        board_type = data.get("board_type") or data.get("type")
        if board_type not in BOARD_TYPES:
            board_type = "main"
        access_level = data.get("user_access_level")
        if access_level not in ACCESS_LEVELS:
            access_level = "full"
        groups = [Group.from_dict(g) for g in data.get("groups") or []]
        return cls(
            id=parse_int(data.get("id")),
            workspace_id=parse_int(data.get("workspace_id")),
            folder_id=parse_optional_int(data.get("folder_id")),
            name=data.get("name") or "Untitled Board",
            description=data.get("description"),
            board_type=board_type,
            created_by=data.get("owner_username") or data.get("created_by") or "unknown",
            created_at=parse_required_datetime(data.get("created_at")),
            updated_at=parse_datetime(data.get("updated_at")),
            groups=groups,
            item_count=parse_int(data.get("item_count")),
            group_count=parse_int(data.get("group_count"), default=len(groups)),
            position=parse_int(data.get("position")),
            access_level=access_level,
        )

    @property
    def has_full_access(self) -> bool:
        return self.access_level == "full"

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "workspace_id": self.workspace_id,
            "folder_id": self.folder_id,
            "name": self.name,
            "description": self.description,
            "type": self.board_type,
            "created_by": self.created_by,
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
            "position": self.position,
        }


@dataclass
class Workspace:
    id: int
    name: str = "Untitled"
    description: Optional[str] = None
    icon: Optional[str] = None
    created_by: str = "unknown"
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None
    boards: List[Board] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "Workspace":
        return cls(
            id=parse_int(data.get("id")),
            name=data.get("name") or "Untitled",
            description=data.get("description"),
            icon=data.get("icon"),
            created_by=data.get("owner_username") or data.get("created_by") or "unknown",
            created_at=parse_required_datetime(data.get("created_at")),
            updated_at=parse_datetime(data.get("updated_at")),
            boards=[Board.from_dict(b) for b in data.get("boards") or []],
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "created_by": self.created_by,
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
        }


@dataclass
class TemplateInfo:
    id: str
    name: str
    description: Optional[str] = None
    icon: str = "dashboard"
    color: str = "#579bfc"
    category: str = "Custom"
    is_builtin: bool = False
    is_shared: bool = True
    include_items: bool = False
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    template_data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict, is_builtin: bool = False) -> "TemplateInfo":
        created_at = data.get("created_at")
        return cls(
            id=str(data.get("id") if data.get("id") is not None else ""),
            name=data.get("name") or "",
            description=data.get("description"),
            icon=data.get("icon") or "dashboard",
            color=data.get("color") or "#579bfc",
            category=data.get("category") or "Custom",
            is_builtin=data.get("is_builtin") is True or is_builtin,
            is_shared=parse_bool(data.get("is_shared")),
            include_items=parse_bool(data.get("include_items")),
            created_by=data.get("created_by"),
            created_at=parse_required_datetime(created_at) if created_at else None,
            template_data=dict(data.get("template_data") or {}),
        )

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["created_at"] = format_datetime(self.created_at)
        return data


@dataclass
class TemplateList:
    builtin_templates: List[TemplateInfo] = field(default_factory=list)
    saved_templates: List[TemplateInfo] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)

    @property
    def all_templates(self) -> List[TemplateInfo]:
        return [*self.builtin_templates, *self.saved_templates]

    @classmethod
    def from_dict(cls, data: Dict) -> "TemplateList":
        return cls(
            builtin_templates=[
                TemplateInfo.from_dict(t, is_builtin=True)
                for t in data.get("builtin_templates") or []
            ],
            saved_templates=[
                TemplateInfo.from_dict(t) for t in data.get("saved_templates") or []
            ],
            categories=[str(c) for c in data.get("categories") or []],
        )
