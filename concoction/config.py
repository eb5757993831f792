import json
import os
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .errors import ConfigError

DEFAULT_DATE_FORMAT = "dddd, MMMM Do YYYY, h:mm:ss a"


class ModuleCfg(BaseModel):
    name: str                  # "module.Class" inside concoction.plugins, or a full dotted path
    params: dict = Field(default_factory=dict)


class BuildOptions(BaseModel):
    """Path patterns handed to the rendering engine."""
    templates: List[Path]
    contexts: str
    dest: Path
    linking_rules: Dict[str, Path]
    static: Path


class SiteCfg(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    root: Path = Field(Path("."), validate_default=True)
    theme: Path
    metadata: Path
    build: Path
    globals_path: Path = Field(alias="globals")
    date_format: str = Field(DEFAULT_DATE_FORMAT, alias="dateFormat")
    modules: List[ModuleCfg] = Field(default_factory=list, alias="plugins")

    @field_validator("root")
    @classmethod
    def _absolute_root(cls, v: Path) -> Path:
        return Path(os.path.normpath(v.absolute()))

    def resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self.root / path

    def options(self) -> BuildOptions:
        post_tpl = self.theme / "templates" / "post.tpl"
        contexts = (self.metadata / "*.json").as_posix()
        return BuildOptions(
            templates=[post_tpl, self.theme / "templates" / "index.tpl"],
            contexts=contexts,
            dest=self.build,
            linking_rules={contexts: post_tpl},
            static=self.theme / "static",
        )

    def stages(self) -> List[ModuleCfg]:
        if self.modules:
            return self.modules
        return [
            ModuleCfg(name="global_context.GlobalContext",
                      params={"globalsPath": self.globals_path.as_posix()}),
            ModuleCfg(name="sort_by_date.SortByDate"),
            ModuleCfg(name="date_formatter.DateFormatter",
                      params={"format": self.date_format}),
        ]


def _parse(path: Path, text: str) -> Optional[dict]:
    if path.suffix in (".yml", ".yaml"):
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path.name}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path.name}: {exc}") from exc


def load_config(path: Path) -> SiteCfg:
    try:
        with path.open("r", encoding="utf-8") as fh:
            text = fh.read()
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc
    data = _parse(path, text)
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain an object")
    root = Path(data.get("root") or ".")
    data["root"] = str(root if root.is_absolute() else path.parent / root)
    try:
        return SiteCfg.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"invalid descriptor {path.name}: {exc}") from exc
