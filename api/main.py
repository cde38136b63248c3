"""FastAPI 入口：镜头库查询、提示词、场景执行计划与素材清单。"""
import sys
from functools import lru_cache
from pathlib import Path

# 保证从任意工作目录启动时都能找到 config、planner 等包（项目根）
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from fastapi import Depends, FastAPI, HTTPException

from config.settings import Settings, get_settings
from models.reference import ShotIndex
from models.scene import Scene
from planner.assets import score_scene_assets
from planner.dialogue import dialogue_summary
from planner.execution import build_execution_plan
from planner.frames import reference_image_url
from planner.graph import run_scene_pipeline
from planner.loader import get_scene_by_id, get_scene_path, list_scenes, load_shot_index
from planner.prompts import compose_image_prompt


app = FastAPI(title="镜头库与场景执行计划", version="1.0.0")


@lru_cache(maxsize=4)
def _cached_index(path: str, mtime: float) -> ShotIndex:
    return load_shot_index(path)


def get_shot_index(settings: Settings = Depends(get_settings)) -> ShotIndex:
    path = settings.index_path
    if not path.exists():
        raise HTTPException(503, "镜头库索引未生成")
    try:
        return _cached_index(str(path), path.stat().st_mtime)
    except ValueError as e:
        raise HTTPException(500, str(e))


def get_scene(scene_id: str, settings: Settings = Depends(get_settings)) -> Scene:
    try:
        scene = get_scene_by_id(scene_id, settings.scenes_dir)
    except ValueError as e:
        raise HTTPException(422, str(e))
    if scene is None:
        raise HTTPException(404, "场景不存在")
    return scene


def get_optional_index(settings: Settings = Depends(get_settings)) -> ShotIndex | None:
    """场景接口不强制要求镜头库。"""
    if not settings.index_path.exists():
        return None
    return get_shot_index(settings)


# ---------- 镜头库 ----------


@app.get("/api/shots")
def api_list_shots(
    director: str | None = None,
    emotion: str | None = None,
    lighting: str | None = None,
    shot: str | None = None,
    lens: str | None = None,
    film: str | None = None,
    search: str | None = None,
    limit: int = 100,
    index: ShotIndex = Depends(get_shot_index),
):
    """按条件筛选参考镜头。"""
    shots = index.search(
        director=director,
        emotion=emotion,
        lighting=lighting,
        shot=shot,
        lens=lens,
        film=film,
        search=search,
        limit=limit,
    )
    return {"count": len(shots), "shots": [s.model_dump(by_alias=True) for s in shots]}


@app.get("/api/shot/{shot_id}")
def api_get_shot(shot_id: str, index: ShotIndex = Depends(get_shot_index)):
    ref = index.get(shot_id)
    if ref is None:
        raise HTTPException(404, "镜头不存在")
    return ref.model_dump(by_alias=True)


@app.get("/api/prompt/{shot_id}")
def api_get_prompt(
    shot_id: str,
    index: ShotIndex = Depends(get_shot_index),
    settings: Settings = Depends(get_settings),
):
    """为参考镜头生成完整提示词。"""
    ref = index.get(shot_id)
    if ref is None:
        raise HTTPException(404, "镜头不存在")
    return {
        "id": ref.id,
        "film": ref.film,
        "prompt": compose_image_prompt(ref),
        "referenceImage": reference_image_url(ref, settings),
        "shot": ref.model_dump(by_alias=True),
    }


@app.get("/api/filters")
def api_get_filters(index: ShotIndex = Depends(get_shot_index)):
    return index.filters.model_dump(by_alias=True)


# ---------- 场景 ----------


@app.get("/api/scenes")
def api_list_scenes(settings: Settings = Depends(get_settings)):
    scenes = list_scenes(settings.scenes_dir)
    return {"count": len(scenes), "scenes": scenes}


@app.get("/api/scene/{scene_id}")
def api_get_scene(scene: Scene = Depends(get_scene)):
    return scene.model_dump(mode="json")


@app.get("/api/scene/{scene_id}/build")
def api_build_scene(
    scene: Scene = Depends(get_scene),
    index: ShotIndex | None = Depends(get_optional_index),
    settings: Settings = Depends(get_settings),
):
    """构建场景执行计划。"""
    return build_execution_plan(scene, index, settings).model_dump(mode="json")


@app.get("/api/scene/{scene_id}/assets")
def api_scene_assets(scene: Scene = Depends(get_scene), settings: Settings = Depends(get_settings)):
    """场景中每个角色、地点、道具的最佳参考帧。"""
    return score_scene_assets(scene, settings).model_dump(mode="json")


@app.get("/api/scene/{scene_id}/dialogue")
def api_scene_dialogue(scene: Scene = Depends(get_scene)):
    return dialogue_summary(scene).model_dump(mode="json")


@app.post("/api/scene/{scene_id}/export")
def api_export_scene(scene_id: str, settings: Settings = Depends(get_settings)):
    """走完整流水线，执行计划与素材清单写入 output_dir。"""
    path = get_scene_path(scene_id, settings.scenes_dir)
    if path is None:
        raise HTTPException(404, "场景不存在")
    return run_scene_pipeline(path, output_dir=settings.output_dir, settings=settings)


# ---------- 健康检查 ----------


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    from config.logging_config import setup_logging

    s = get_settings()
    setup_logging(s.log_level, s.log_file)
    uvicorn.run(app, host=s.host, port=s.port)
