import json
import logging
from pathlib import Path
from typing import List

from tqdm import tqdm

from .config import SiteCfg
from .context import Link, SiteModel
from .errors import ConfigError

log = logging.getLogger(__name__)


def _read_record(path: Path) -> dict:
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path.name}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain an object")
    return data


def _glob(cfg: SiteCfg, pattern: str) -> List[Path]:
    p = Path(pattern)
    return sorted(cfg.resolve(p.parent).glob(p.name))


def load_site(cfg: SiteCfg, progress: bool = True) -> SiteModel:
    """Build the context store and links for ``cfg``.

    Keys are normalised once here, relative to the site root, so the
    stages can look paths up in the same form.
    """
    model = SiteModel(root=cfg.root)
    options = cfg.options()

    files = _glob(cfg, options.contexts)
    globals_file = cfg.resolve(cfg.globals_path)
    known = {model.normalize(f) for f in files}
    if model.normalize(globals_file) not in known and globals_file.exists():
        files.append(globals_file)

    for path in tqdm(files, desc="Loading contexts", disable=not progress):
        model.add(path, _read_record(path))

    for pattern, template in options.linking_rules.items():
        template_key = model.normalize(cfg.resolve(template))
        for path in _glob(cfg, pattern):
            model.links.append(Link(model.normalize(path), template_key))

    log.info("loaded %d contexts, %d links", len(model), len(model.links))
    return model
