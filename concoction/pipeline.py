import logging
import time
from dataclasses import dataclass
from importlib import import_module
from typing import List, Optional

from rich.console import Console

from .base_module import BaseModule
from .config import ModuleCfg, SiteCfg
from .context import SiteModel
from .errors import ConcoctionError, ConfigError

console = Console()
log = logging.getLogger(__name__)

PLUGIN_PACKAGE = "concoction.plugins"


@dataclass
class StageResult:
    name: str
    ok: bool
    elapsed: float
    error: Optional[ConcoctionError] = None


def load_stage(m: ModuleCfg) -> BaseModule:
    if "." not in m.name:
        raise ConfigError(f"stage name must be 'module.Class': {m.name}")
    mod_path, cls_name = m.name.rsplit(".", 1)
    # short names live in concoction.plugins
    if not mod_path.startswith("concoction") and "." not in mod_path:
        mod_path = f"{PLUGIN_PACKAGE}.{mod_path}"
    try:
        mod = import_module(mod_path)
    except ModuleNotFoundError as exc:
        raise ConfigError(f"unknown stage module {mod_path}") from exc
    cls = getattr(mod, cls_name, None)
    if not (isinstance(cls, type) and issubclass(cls, BaseModule)):
        raise ConfigError(f"{m.name} is not a stage")
    return cls(m.params)


def check_order(stages: List[BaseModule]) -> None:
    names = [s.name for s in stages]
    for i, stage in enumerate(stages):
        if stage.once and names.count(stage.name) > 1:
            raise ConfigError(f"{stage.name} may only run once")
        for dep in stage.requires:
            if dep not in names[:i]:
                raise ConfigError(f"{stage.name} requires {dep} to run first")
        for later in stage.precedes:
            if later in names[:i]:
                raise ConfigError(f"{stage.name} must run before {later}")


class Pipeline:
    def __init__(self, cfg: SiteCfg, model: Optional[SiteModel] = None) -> None:
        self.cfg = cfg
        self.model = model if model is not None else SiteModel(root=cfg.root)
        self.stages: List[BaseModule] = self._load_stages()

    def _load_stages(self) -> List[BaseModule]:
        stages = [load_stage(m) for m in self.cfg.stages()]
        check_order(stages)
        return stages

    def _run_stage(self, stage: BaseModule) -> StageResult:
        start = time.perf_counter()
        try:
            stage.run(self.model)
        except ConcoctionError as exc:
            return StageResult(stage.name, False, time.perf_counter() - start, exc)
        return StageResult(stage.name, True, time.perf_counter() - start)

    def run(self) -> List[StageResult]:
        console.rule("[bold blue]Concoction Pipeline")
        results: List[StageResult] = []
        for stage in self.stages:
            console.print(f"[cyan]▶ Running {stage.name}")
            result = self._run_stage(stage)
            results.append(result)
            if not result.ok:
                log.error("%s failed: %s", stage.name, result.error)
                console.rule(f"[red]✘ Pipeline aborted at {stage.name}")
                raise result.error
        console.rule("[green]✔ Pipeline Finished")
        return results
