import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import ContextNotFound

Record = Dict[str, Any]

GLOBAL_KEY = "_global"
COLLECTION_KEY = "_contexts"


@dataclass(frozen=True)
class Link:
    context_path: str
    template_path: str


@dataclass
class SiteModel:
    """Shared state passed between stages.

    ``records`` maps a canonical context key (POSIX path relative to
    ``root``) to its mutable data. Cross references are stored as keys:
    every record's ``_global`` names the global record and the global
    record's ``_contexts`` lists the keys of all the others.
    """
    root: Path
    records: Dict[str, Record] = field(default_factory=dict)
    links: List[Link] = field(default_factory=list)
    global_id: Optional[str] = None

    def __post_init__(self) -> None:
        self.root = Path(os.path.normpath(Path(self.root).absolute()))

    def normalize(self, path: Union[str, Path]) -> str:
        p = Path(path)
        if not p.is_absolute():
            p = self.root / p
        p = Path(os.path.normpath(p))
        try:
            return p.relative_to(self.root).as_posix()
        except ValueError:
            return p.as_posix()

    def add(self, path: Union[str, Path], data: Record) -> str:
        key = self.normalize(path)
        self.records[key] = data
        return key

    def get(self, path: Union[str, Path]) -> Optional[Record]:
        return self.records.get(self.normalize(path))

    def __contains__(self, path: object) -> bool:
        return isinstance(path, (str, Path)) and self.normalize(path) in self.records

    def __len__(self) -> int:
        return len(self.records)

    def global_of(self, key: str) -> Optional[Record]:
        gid = self.records[key].get(GLOBAL_KEY)
        return self.records.get(gid) if gid is not None else None

    def global_record(self) -> Record:
        if self.global_id is None or self.global_id not in self.records:
            raise ContextNotFound(str(self.global_id))
        return self.records[self.global_id]

    def collection(self) -> List[Record]:
        """Records referenced by the global context, in collection order."""
        return [self.records[k] for k in self.global_record().get(COLLECTION_KEY, [])]
