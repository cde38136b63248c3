"""数据模型。"""
from .scene import (
    Scene,
    Shot,
    ShotTiming,
    ShotCamera,
    ShotAudio,
    SubjectRef,
    ShotEnvironment,
    ShotProps,
    ChainRef,
)
from .reference import ReferenceShot, ShotIndex, ShotFilters, build_filters
from .plan import ModelSpec, ExecutionStep, ExecutionPlan, AssetRequirements, PostProcessing
from .assets import AssetManifest, CharacterFrame, LocationFrame, PropFrame, CharacterReference
from .errors import SceneDocumentError, ShotIndexError

__all__ = [
    "Scene",
    "Shot",
    "ShotTiming",
    "ShotCamera",
    "ShotAudio",
    "SubjectRef",
    "ShotEnvironment",
    "ShotProps",
    "ChainRef",
    "ReferenceShot",
    "ShotIndex",
    "ShotFilters",
    "build_filters",
    "ModelSpec",
    "ExecutionStep",
    "ExecutionPlan",
    "AssetRequirements",
    "PostProcessing",
    "AssetManifest",
    "CharacterFrame",
    "LocationFrame",
    "PropFrame",
    "CharacterReference",
    "SceneDocumentError",
    "ShotIndexError",
]
