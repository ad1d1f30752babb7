from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel


@dataclass(frozen=True)
class Record:
    """One parsed data row: normalized header key -> value, plus its line ordinal.

    `id` is the row's position in the original line sequence (header line = 0).
    """
    id: int
    values: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze the mapping so records cannot be patched after parsing
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.values.get(key, default)

    def __getitem__(self, key: str) -> str:
        return self.values[key]

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into a plain dict as served to clients (`id` included)."""
        out: Dict[str, Any] = dict(self.values)
        out["id"] = self.id
        return out


class DisplayColumn(BaseModel):
    key: str
    label: str


class RecordDetail(BaseModel):
    """Detail view for a selected row."""
    id: int
    title: str
    definition: str
    example: Optional[str] = None
    record: Dict[str, Any]


class DatasetStatus(BaseModel):
    status: str
    message: str
    count: int = 0
    headers: List[str] = []
    dropped_rows: int = 0
    loaded_at: Optional[str] = None
    source_url: Optional[str] = None


class DatasetResponse(DatasetStatus):
    columns: List[DisplayColumn] = []
    data: List[Dict[str, Any]] = []


class SearchResponse(BaseModel):
    success: bool
    message: str
    query: str = ""
    empty_query: bool = False
    headers: List[str] = []
    data: List[Dict[str, Any]] = []
    count: int = 0
    took_ms: Optional[int] = None


class ThemeModel(BaseModel):
    theme: Literal["light", "dark"]
