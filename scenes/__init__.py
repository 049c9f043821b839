"""
Scene Catalog

Immutable scene definitions for the assessment workflow.

Usage:
    from scenes import default_catalog, load_catalog_from_json, SceneType

    catalog = default_catalog()
    first = catalog[0]

    # Or load a custom catalog
    catalog = load_catalog_from_json("path/to/catalog.json")
"""

from .scene_schema import (
    # Enums
    SceneType,
    DimensionIcon,
    NARRATED_SCENE_TYPES,
    ICON_GLYPHS,
    icon_glyph,

    # Dimensions
    SkillDimension,

    # Payloads
    VoiceCriteria,
    VoicePrompt,
    WrittenConstraints,
    WrittenCriteria,
    WrittenChallenge,
    PrioritizationTask,
    DialogueOption,
    DialogueTurn,
    RolePlayCriteria,
    RolePlayScenario,
    BranchChoice,
    ScenarioBranch,
    ProblemSolvingCriteria,
    ProblemSolvingScenario,
    ComprehensionQuestion,
    JudgmentOption,
    JudgmentScenario,

    # Scene
    Scene,
    SceneDataError,
    validate_catalog,
)

from .default_catalog import DEFAULT_SCENES, SKILL_DIMENSIONS

from .scene_loader import (
    SceneCatalog,
    create_catalog,
    default_catalog,
    load_catalog_from_json,
    save_catalog_to_json,
    get_catalog_summary,
)

__all__ = [
    "SceneType",
    "DimensionIcon",
    "NARRATED_SCENE_TYPES",
    "ICON_GLYPHS",
    "icon_glyph",
    "SkillDimension",
    "VoiceCriteria",
    "VoicePrompt",
    "WrittenConstraints",
    "WrittenCriteria",
    "WrittenChallenge",
    "PrioritizationTask",
    "DialogueOption",
    "DialogueTurn",
    "RolePlayCriteria",
    "RolePlayScenario",
    "BranchChoice",
    "ScenarioBranch",
    "ProblemSolvingCriteria",
    "ProblemSolvingScenario",
    "ComprehensionQuestion",
    "JudgmentOption",
    "JudgmentScenario",
    "Scene",
    "SceneDataError",
    "validate_catalog",
    "DEFAULT_SCENES",
    "SKILL_DIMENSIONS",
    "SceneCatalog",
    "create_catalog",
    "default_catalog",
    "load_catalog_from_json",
    "save_catalog_to_json",
    "get_catalog_summary",
]
