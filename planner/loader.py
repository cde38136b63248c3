"""场景文档与镜头库索引的读写。"""
from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

from config.settings import get_settings
from models.errors import SceneDocumentError, ShotIndexError
from models.reference import ShotIndex, build_filters
from models.scene import Scene

logger = logging.getLogger(__name__)

SCENE_SUFFIXES = (".json", ".yaml", ".yml")


def _read_document(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"文件不存在: {path}")
    raw = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = yaml.safe_load(raw) or {}
    elif suffix == ".json":
        data = json.loads(raw)
    else:
        raise ValueError(f"不支持的文件格式: {path.suffix}")
    if not isinstance(data, dict):
        raise ValueError(f"文档顶层必须是对象: {path}")
    return data


# ---------------------------------------------------------------------------
# 场景文档
# ---------------------------------------------------------------------------


def parse_scene_dict(data: dict[str, Any], scene_id: str | None = None) -> Scene:
    data = dict(data)
    if scene_id and not data.get("scene_id"):
        data["scene_id"] = scene_id
    try:
        return Scene.model_validate(data)
    except ValidationError as e:
        raise SceneDocumentError(f"场景文档不合法: {e}") from e


def load_scene(path: str | Path) -> Scene:
    path = Path(path)
    try:
        data = _read_document(path)
    except json.JSONDecodeError as e:
        raise SceneDocumentError(f"场景文档解析失败: {path}: {e}") from e
    except yaml.YAMLError as e:
        raise SceneDocumentError(f"场景文档解析失败: {path}: {e}") from e
    scene = parse_scene_dict(data, scene_id=path.stem)
    logger.debug("已加载场景 %s（%d 个镜头）", scene.scene_id, len(scene.shots))
    return scene


def get_scene_path(scene_id: str, scenes_dir: Path | None = None) -> Path | None:
    scenes_dir = scenes_dir or get_settings().scenes_dir
    for ext in SCENE_SUFFIXES:
        p = scenes_dir / f"{scene_id}{ext}"
        if p.exists():
            return p
    return None


def get_scene_by_id(scene_id: str, scenes_dir: Path | None = None) -> Scene | None:
    path = get_scene_path(scene_id, scenes_dir)
    if path is None:
        return None
    return load_scene(path)


def list_scenes(scenes_dir: Path | None = None) -> list[dict[str, Any]]:
    """场景目录概览；无法解析的文件跳过并记录警告。"""
    scenes_dir = scenes_dir or get_settings().scenes_dir
    if not scenes_dir.exists():
        return []
    scenes: list[dict[str, Any]] = []
    for p in sorted(scenes_dir.iterdir()):
        if p.suffix.lower() not in SCENE_SUFFIXES or "_master" in p.name:
            continue
        try:
            scene = load_scene(p)
        except ValueError as e:
            logger.warning("跳过无法解析的场景文件 %s: %s", p.name, e)
            continue
        scenes.append(
            {
                "scene_id": scene.scene_id,
                "name": scene.name,
                "description": scene.description,
                "shots": len(scene.shots),
                "file": p.name,
            }
        )
    return scenes


def load_transcript(path: str | Path) -> dict[str, Any]:
    """语音转写结果：{"chunks": [{"lines": [...]}]}。"""
    return _read_document(Path(path))


# ---------------------------------------------------------------------------
# 镜头库索引
# ---------------------------------------------------------------------------


def parse_shot_index_dict(data: dict[str, Any]) -> ShotIndex:
    try:
        index = ShotIndex.model_validate(data)
    except ValidationError as e:
        raise ShotIndexError(f"镜头库索引不合法: {e}") from e
    duplicates = [i for i, n in Counter(s.id for s in index.shots).items() if n > 1]
    if duplicates:
        raise ShotIndexError(f"镜头库存在重复 id: {', '.join(sorted(duplicates))}")
    if not data.get("filters"):
        index = index.model_copy(update={"filters": build_filters(index.shots)})
    if not index.count:
        index = index.model_copy(update={"count": len(index.shots)})
    return index


def load_shot_index(path: str | Path | None = None) -> ShotIndex:
    path = Path(path or get_settings().index_path)
    try:
        data = _read_document(path)
    except json.JSONDecodeError as e:
        raise ShotIndexError(f"镜头库索引解析失败: {path}: {e}") from e
    index = parse_shot_index_dict(data)
    logger.info("已加载镜头库 %d 个参考镜头", index.count)
    return index


# ---------------------------------------------------------------------------
# 输出
# ---------------------------------------------------------------------------


def save_document(doc: BaseModel, path: str | Path) -> Path:
    """以 JSON 保存计划或素材清单。"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(doc.model_dump(mode="json"), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return path
