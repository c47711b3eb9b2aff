"""Core drivesearch data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple


def _require_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {type(value).__name__}")
    return value


def _str_tuple(data: Mapping[str, Any], key: str, *, required: bool) -> Tuple[str, ...]:
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"field {key!r} is required")
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"field {key!r} must be a list of strings")
    return tuple(value)


def _parse_timestamp(value: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Metadata for one synced file, as written by the sync binary."""

    id: str
    name: str
    web_view_link: str
    mime_type: str
    parents: Tuple[str, ...]
    parent_folder_name: str
    keywords: Tuple[str, ...] = ()
    romaji_keywords: Tuple[str, ...] = ()
    modified_time: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "FileRecord":
        if not isinstance(data, dict):
            raise ValueError("file record must be an object")
        modified_time = data.get("modified_time")
        if modified_time is not None and not isinstance(modified_time, str):
            raise ValueError("field 'modified_time' must be a string")
        return cls(
            id=_require_str(data, "id"),
            name=_require_str(data, "name"),
            web_view_link=_require_str(data, "web_view_link"),
            mime_type=_require_str(data, "mime_type"),
            parents=_str_tuple(data, "parents", required=True),
            parent_folder_name=_require_str(data, "parent_folder_name"),
            keywords=_str_tuple(data, "keywords", required=False),
            romaji_keywords=_str_tuple(data, "romaji_keywords", required=False),
            modified_time=modified_time,
        )


@dataclass(frozen=True, slots=True)
class IndexSnapshot:
    """Everything loaded from one read of the snapshot file."""

    files: Tuple[FileRecord, ...] = ()
    folders: Dict[str, str] = field(default_factory=dict)
    last_sync: str = ""
    sync_token: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.files

    @property
    def last_sync_at(self) -> Optional[datetime]:
        return _parse_timestamp(self.last_sync) if self.last_sync else None

    @classmethod
    def from_dict(cls, data: Any) -> "IndexSnapshot":
        if not isinstance(data, dict):
            raise ValueError("snapshot must be a JSON object")

        raw_files = data.get("files")
        if not isinstance(raw_files, list):
            raise ValueError("field 'files' must be a list")
        files = tuple(FileRecord.from_dict(item) for item in raw_files)

        seen: set[str] = set()
        for record in files:
            if record.id in seen:
                raise ValueError(f"duplicate file id {record.id!r}")
            seen.add(record.id)

        folders = data.get("folders")
        if not isinstance(folders, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in folders.items()
        ):
            raise ValueError("field 'folders' must map folder ids to names")

        sync_token = data.get("sync_token")
        if sync_token is not None and not isinstance(sync_token, str):
            raise ValueError("field 'sync_token' must be a string")

        return cls(
            files=files,
            folders=dict(folders),
            last_sync=_require_str(data, "last_sync"),
            sync_token=sync_token,
        )


@dataclass(slots=True)
class MatchResult:
    """Display-ready search hit."""

    title: str
    subtitle: str
    arg: str
    uid: str
    valid: bool = True
    mime_type: Optional[str] = None

    @classmethod
    def from_record(cls, record: FileRecord) -> "MatchResult":
        return cls(
            title=record.name,
            subtitle=record.parent_folder_name,
            arg=record.web_view_link,
            uid=record.id,
            valid=True,
            mime_type=record.mime_type,
        )

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "MatchResult":
        """Build a result from a launcher item as printed by the sync binary."""
        return cls(
            title=str(item.get("title", "")),
            subtitle=str(item.get("subtitle", "")),
            arg=str(item.get("arg", "")),
            uid=str(item.get("uid", "")),
            valid=bool(item.get("valid", True)),
            mime_type=item.get("mimeType"),
        )

    def to_item(self) -> Dict[str, Any]:
        item: Dict[str, Any] = {
            "title": self.title,
            "subtitle": self.subtitle,
            "arg": self.arg,
            "uid": self.uid,
            "valid": self.valid,
        }
        if self.mime_type is not None:
            item["mimeType"] = self.mime_type
        return item
