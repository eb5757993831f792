"""Shared fixtures for the concoction tests."""
import json
from pathlib import Path

import pytest

from concoction.context import Link, SiteModel


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def make_model(tmp_path):
    """Build a SiteModel from {relative path: record}, linking every record."""
    def _make(records, links=True):
        model = SiteModel(root=tmp_path)
        for path, data in records.items():
            key = model.add(path, data)
            if links:
                model.links.append(Link(key, "theme/templates/post.tpl"))
        return model
    return _make


@pytest.fixture
def site_dir(tmp_path):
    """A descriptor, a globals file and three dated posts on disk."""
    write_json(tmp_path / "concoction.json", {
        "theme": "theme",
        "metadata": "metadata",
        "build": "build",
        "globals": "metadata/globals.json",
        "dateFormat": "YYYY-MM-DD",
    })
    write_json(tmp_path / "metadata" / "globals.json", {"title": "Site"})
    write_json(tmp_path / "metadata" / "a.json", {"title": "A", "date": "2020-01-01"})
    write_json(tmp_path / "metadata" / "b.json", {"title": "B", "date": "2021-06-01"})
    write_json(tmp_path / "metadata" / "c.json", {"title": "C", "date": "2020-06-15"})
    return tmp_path
