"""
Scene Loader

Utilities for building a SceneCatalog from the built-in scenes or from JSON.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .scene_schema import Scene, SceneDataError, SkillDimension, validate_catalog
from .default_catalog import DEFAULT_SCENES, SKILL_DIMENSIONS


class SceneCatalog:
    """An ordered, read-only sequence of scenes and their skill dimensions."""

    def __init__(self, scenes: List[Scene], dimensions: List[SkillDimension]):
        self._scenes: Tuple[Scene, ...] = tuple(scenes)
        self._dimensions: Tuple[SkillDimension, ...] = tuple(dimensions)

    @property
    def scenes(self) -> Tuple[Scene, ...]:
        return self._scenes

    @property
    def dimensions(self) -> Tuple[SkillDimension, ...]:
        return self._dimensions

    def __len__(self) -> int:
        return len(self.scenes)

    def __iter__(self) -> Iterator[Scene]:
        return iter(self.scenes)

    def __getitem__(self, index: int) -> Scene:
        return self.scenes[index]

    @property
    def last_index(self) -> int:
        return len(self.scenes) - 1

    def index_of(self, scene_id: str) -> Optional[int]:
        for i, scene in enumerate(self.scenes):
            if scene.id == scene_id:
                return i
        return None

    def get_dimension(self, dimension_id: str) -> Optional[SkillDimension]:
        for dimension in self.dimensions:
            if dimension.id == dimension_id:
                return dimension
        return None


def create_catalog(
    scenes: List[Scene],
    dimensions: Optional[List[SkillDimension]] = None,
) -> SceneCatalog:
    """Build a catalog, raising SceneDataError if it is structurally invalid."""
    dimensions = list(dimensions) if dimensions is not None else list(SKILL_DIMENSIONS)
    problems = validate_catalog(scenes, dimensions)
    if problems:
        raise SceneDataError("; ".join(problems))
    return SceneCatalog(scenes=scenes, dimensions=dimensions)


def default_catalog() -> SceneCatalog:
    """The built-in assessment."""
    return create_catalog(DEFAULT_SCENES, SKILL_DIMENSIONS)


def load_catalog_from_json(json_path: str) -> SceneCatalog:
    """
    Load a catalog from a JSON file.

    The file holds {"scenes": [...], "dimensions": [...]}; dimensions are
    optional and default to the built-in eight.
    """
    path = Path(json_path)
    if not path.exists():
        raise FileNotFoundError(f"Scene catalog not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    scenes = [Scene(**scene) for scene in data.get("scenes", [])]
    dimensions = data.get("dimensions")
    if dimensions is not None:
        dimensions = [SkillDimension(**d) for d in dimensions]
    return create_catalog(scenes, dimensions)


def catalog_to_dict(catalog: SceneCatalog) -> Dict[str, Any]:
    return {
        "scenes": [scene.model_dump(mode="json") for scene in catalog.scenes],
        "dimensions": [dimension.model_dump(mode="json") for dimension in catalog.dimensions],
    }


def save_catalog_to_json(catalog: SceneCatalog, json_path: str) -> None:
    """Save a catalog to a JSON file"""
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(catalog_to_dict(catalog), f, indent=2, ensure_ascii=False)


def get_catalog_summary(catalog: SceneCatalog) -> List[Dict[str, str]]:
    """Short listing of the catalog's scenes, for CLIs and APIs."""
    return [
        {"id": scene.id, "type": scene.type.value, "title": scene.title, "dimension": scene.dimension}
        for scene in catalog
    ]
