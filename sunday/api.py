"""HTTP client for the Sunday backend."""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Iterable, List, Optional, Tuple

import requests

from .config import ClientConfig
from .models import Board, BoardFolder, Item, TemplateInfo, TemplateList, Workspace, parse_int

logger = logging.getLogger(__name__)

ADMIN_ROLES = ("developer", "administrator", "management", "dispatcher")


class ApiError(Exception):
    """A failed call against the backend, with a message fit for the UI."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def has_role_admin_access(role: str) -> bool:
    return role.lower() in ADMIN_ROLES


def _flag(value: bool) -> str:
    return "1" if value else "0"


class SundayClient:
    """Workspace, board, folder, template and search calls.

    Every method raises :class:`ApiError` on failure; callers decide how to
    surface it.
    """

    def __init__(
        self, config: ClientConfig, session: Optional[requests.Session] = None
    ) -> None:
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update(config.default_headers())

    @property
    def username(self) -> str:
        return self.config.username

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _url(self, endpoint: str) -> str:
        return f"{self.config.sunday_base}/{endpoint}"

    def _get(
        self, endpoint: str, action: str, *, url: Optional[str] = None, **params: Any
    ) -> Dict:
        query = {"action": action, "username": self.username}
        query.update({k: v for k, v in params.items() if v is not None})
        query["_t"] = int(time.time() * 1000)
        return self._request("GET", url or self._url(endpoint), params=query)

    def _post(self, endpoint: str, action: str, **fields: Any) -> Dict:
        body = {"action": action, "username": self.username}
        for key, value in fields.items():
            if value is None:
                continue
            if isinstance(value, bool):
                body[key] = _flag(value)
            elif isinstance(value, (list, tuple)):
                body[key] = json.dumps(list(value))
            else:
                body[key] = str(value)
        return self._request("POST", self._url(endpoint), data=body)

    def _request(self, method: str, url: str, **kwargs: Any) -> Dict:
        action = (kwargs.get("params") or kwargs.get("data") or {}).get("action")
        try:
            response = self.session.request(
                method, url, timeout=self.config.timeout, **kwargs
            )
        except requests.ConnectionError as exc:
            logger.warning("%s %s (%s) failed: %s", method, url, action, exc)
            raise ApiError("Network error: Unable to connect") from exc
        except requests.Timeout as exc:
            logger.warning("%s %s (%s) timed out", method, url, action)
            raise ApiError("Network error: Request timed out") from exc
        except requests.RequestException as exc:
            logger.warning("%s %s (%s) failed: %s", method, url, action, exc)
            raise ApiError(str(exc)) from exc

        if response.status_code not in (200, 201):
            message = f"HTTP {response.status_code}: {response.reason}"
            try:
                error = response.json().get("error")
            except (ValueError, AttributeError):
                error = None
            if error:
                message = str(error)
            logger.warning("%s %s (%s): %s", method, url, action, message)
            raise ApiError(message, response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("%s %s (%s): undecodable body", method, url, action)
            raise ApiError("Invalid response format", response.status_code) from exc
        if not isinstance(payload, dict):
            raise ApiError("Invalid response format", response.status_code)
        if payload.get("success") is not True:
            message = str(payload.get("error") or "Request failed")
            logger.warning("%s %s (%s): %s", method, url, action, message)
            raise ApiError(message, response.status_code)
        return payload

    @staticmethod
    def _data(payload: Dict) -> Dict:
        data = payload.get("data")
        if not isinstance(data, dict):
            raise ApiError("Invalid response format")
        return data

    def _new_id(self, payload: Dict, key: str = "id") -> int:
        value = self._data(payload).get(key)
        if value is None:
            raise ApiError("Invalid response format")
        return parse_int(value)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------
    def has_admin_access(self) -> bool:
        payload = self._get(
            "",
            "get_crm_admin",
            url=self.config.user_management_url,
            requesting_username=self.username,
        )
        return payload.get("crm_admin") in (True, 1)

    # ------------------------------------------------------------------
    # Workspaces
    # ------------------------------------------------------------------
    def list_workspaces(self) -> List[Workspace]:
        data = self._data(self._get("workspaces.php", "list"))
        return [Workspace.from_dict(w) for w in data.get("workspaces") or []]

    def create_workspace(
        self,
        name: str,
        description: str = "",
        color: str = "#0073ea",
        icon: str = "folder",
    ) -> int:
        payload = self._post(
            "workspaces.php",
            "create",
            name=name,
            description=description,
            color=color,
            icon=icon,
        )
        return self._new_id(payload)

    def update_workspace(
        self,
        workspace_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> None:
        self._post(
            "workspaces.php",
            "update",
            id=workspace_id,
            name=name,
            description=description,
            color=color,
            icon=icon,
        )

    def delete_workspace(self, workspace_id: int) -> None:
        self._post("workspaces.php", "delete", id=workspace_id)

    # ------------------------------------------------------------------
    # Boards and folders
    # ------------------------------------------------------------------
    def list_boards(self, workspace_id: int) -> Tuple[List[Board], List[BoardFolder]]:
        data = self._data(self._get("boards.php", "list", workspace_id=workspace_id))
        boards = [Board.from_dict(b) for b in data.get("boards") or []]
        folders = [BoardFolder.from_dict(f) for f in data.get("folders") or []]
        return boards, folders

    def get_board(self, board_id: int) -> Board:
        data = self._data(self._get("boards.php", "get", id=board_id))
        return Board.from_dict(data)

    def create_board(
        self,
        workspace_id: int,
        name: str,
        description: str = "",
        is_private: bool = False,
        folder_id: Optional[int] = None,
    ) -> int:
        payload = self._post(
            "boards.php",
            "create",
            workspace_id=workspace_id,
            name=name,
            description=description,
            is_private=is_private,
            folder_id=folder_id,
        )
        return self._new_id(payload)

    def create_board_from_template(
        self,
        workspace_id: int,
        name: str,
        template_id: str,
        folder_id: Optional[int] = None,
    ) -> int:
        payload = self._post(
            "boards.php",
            "create_from_template",
            workspace_id=workspace_id,
            name=name,
            template=template_id,
            folder_id=folder_id,
        )
        return self._new_id(payload)

    def update_board(
        self,
        board_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        is_archived: Optional[bool] = None,
    ) -> None:
        self._post(
            "boards.php",
            "update",
            id=board_id,
            name=name,
            description=description,
            is_archived=is_archived,
        )

    def delete_board(self, board_id: int) -> None:
        self._post("boards.php", "delete", id=board_id)

    def create_folder(self, workspace_id: int, name: str, color: str = "#808080") -> int:
        payload = self._post(
            "boards.php",
            "create_folder",
            workspace_id=workspace_id,
            name=name,
            color=color,
        )
        return self._new_id(payload, "folder_id")

    def update_folder(
        self, folder_id: int, name: Optional[str] = None, color: Optional[str] = None
    ) -> None:
        self._post("boards.php", "update_folder", id=folder_id, name=name, color=color)

    def delete_folder(self, folder_id: int) -> None:
        self._post("boards.php", "delete_folder", id=folder_id)

    def move_board(self, board_id: int, folder_id: Optional[int] = None) -> None:
        """Move a board into a folder, or back to the workspace root."""
        self._post("boards.php", "move_board", board_id=board_id, folder_id=folder_id)

    def reorder_boards(
        self,
        workspace_id: int,
        order: Iterable[int],
        folder_id: Optional[int] = None,
    ) -> None:
        self._post(
            "boards.php",
            "reorder_boards",
            workspace_id=workspace_id,
            order=list(order),
            folder_id=folder_id,
        )

    def reorder_folders(self, order: Iterable[int]) -> None:
        self._post("boards.php", "reorder_folders", order=list(order))

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------
    def search_items(self, board_id: int, query: str, limit: int = 50) -> List[Item]:
        data = self._data(
            self._get("items.php", "search", board_id=board_id, q=query, limit=limit)
        )
        return [Item.from_dict(i) for i in data.get("items") or []]

    # ------------------------------------------------------------------
    # Board templates
    # ------------------------------------------------------------------
    def list_templates(self, category: Optional[str] = None) -> TemplateList:
        data = self._data(self._get("board_templates.php", "list", category=category))
        return TemplateList.from_dict(data)

    def get_template(self, template_id: str) -> TemplateInfo:
        data = self._data(self._get("board_templates.php", "get", id=template_id))
        return TemplateInfo.from_dict(data)

    def save_board_as_template(
        self,
        board_id: int,
        name: str,
        description: Optional[str] = None,
        icon: str = "dashboard",
        color: str = "#579bfc",
        category: str = "Custom",
        is_shared: bool = True,
        include_items: bool = False,
        include_automations: bool = True,
    ) -> int:
        payload = self._post(
            "board_templates.php",
            "save",
            board_id=board_id,
            name=name,
            description=description,
            icon=icon,
            color=color,
            category=category,
            is_shared=is_shared,
            include_items=include_items,
            include_automations=include_automations,
        )
        return self._new_id(payload)

    def update_template(
        self,
        template_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        icon: Optional[str] = None,
        color: Optional[str] = None,
        category: Optional[str] = None,
        is_shared: Optional[bool] = None,
    ) -> None:
        self._post(
            "board_templates.php",
            "update",
            id=template_id,
            name=name,
            description=description,
            icon=icon,
            color=color,
            category=category,
            is_shared=is_shared,
        )

    def delete_template(self, template_id: int) -> None:
        self._post("board_templates.php", "delete", id=template_id)

    def create_board_from_saved_template(
        self,
        template_id: str,
        workspace_id: int,
        name: str,
        folder_id: Optional[int] = None,
        include_items: bool = False,
        include_automations: bool = True,
    ) -> int:
        payload = self._post(
            "board_templates.php",
            "create_board",
            template_id=template_id,
            workspace_id=workspace_id,
            name=name,
            folder_id=folder_id,
            include_items=include_items,
            include_automations=include_automations,
        )
        return self._new_id(payload, "board_id")
