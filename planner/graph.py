"""
LangGraph：加载场景 -> 镜头接续 -> 执行计划 -> 素材选帧 -> 导出。
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, TypedDict

from config.settings import Settings, get_settings
from models.assets import AssetManifest
from models.plan import ExecutionPlan
from models.reference import ShotIndex
from models.scene import Scene
from planner.assets import score_scene_assets
from planner.chaining import chain_summary, resolve_chains
from planner.execution import build_execution_plan
from planner.loader import load_scene, load_shot_index, save_document

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# 状态
# ---------------------------------------------------------------------------


class ScenePipelineState(TypedDict, total=False):
    scene_path: str
    index_path: str | None
    output_dir: Path | None
    settings: Settings
    scene: Scene
    shot_index: ShotIndex | None
    chains: dict[str, int]
    plan: ExecutionPlan
    manifest: AssetManifest
    plan_path: str
    manifest_path: str
    error: str
    result: dict[str, Any]


def _fail(step: str, error: str) -> dict[str, Any]:
    logger.error("步骤 %s 失败: %s", step, error)
    return {"error": error, "result": {"success": False, "error": error, "step": step}}


# ---------------------------------------------------------------------------
# LangGraph 节点
# ---------------------------------------------------------------------------


def _node_load(state: ScenePipelineState) -> dict[str, Any]:
    try:
        scene = load_scene(state["scene_path"])
    except (FileNotFoundError, ValueError) as e:
        return _fail("load", str(e))
    shot_index = None
    index_path = state.get("index_path")
    if index_path:
        try:
            shot_index = load_shot_index(index_path)
        except (FileNotFoundError, ValueError) as e:
            return _fail("load", str(e))
    return {"scene": scene, "shot_index": shot_index}


def _node_chain(state: ScenePipelineState) -> dict[str, Any]:
    scene = state["scene"]
    shots = resolve_chains(scene.ordered_shots())
    return {"chains": chain_summary(shots)}


def _node_plan(state: ScenePipelineState) -> dict[str, Any]:
    plan = build_execution_plan(state["scene"], state.get("shot_index"), state.get("settings"))
    return {"plan": plan}


def _node_assets(state: ScenePipelineState) -> dict[str, Any]:
    return {"manifest": score_scene_assets(state["scene"], state.get("settings"))}


def _node_export(state: ScenePipelineState) -> dict[str, Any]:
    output_dir = state.get("output_dir")
    if output_dir is None:
        return {}
    scene_id = state["scene"].scene_id
    try:
        plan_path = save_document(state["plan"], Path(output_dir) / f"{scene_id}_plan.json")
        manifest_path = save_document(state["manifest"], Path(output_dir) / f"{scene_id}_assets.json")
    except OSError as e:
        return _fail("export", str(e))
    return {"plan_path": str(plan_path), "manifest_path": str(manifest_path)}


def _node_fail_result(state: ScenePipelineState) -> dict[str, Any]:
    if state.get("result") is not None:
        return {}
    return {"result": {"success": False, "error": state.get("error") or "未知错误", "step": "unknown"}}


def _node_success_result(state: ScenePipelineState) -> dict[str, Any]:
    return {
        "result": {
            "success": True,
            "scene_id": state["scene"].scene_id,
            "chains": state["chains"],
            "plan": state["plan"].model_dump(mode="json"),
            "assets": state["manifest"].model_dump(mode="json"),
            "plan_path": state.get("plan_path"),
            "manifest_path": state.get("manifest_path"),
        }
    }


def _route_on_error(next_node: str):
    def route(state: ScenePipelineState) -> str:
        if state.get("result") is not None:
            return "fail_result"
        return next_node

    return route


# ---------------------------------------------------------------------------
# 建图与入口
# ---------------------------------------------------------------------------


def _build_graph():
    from langgraph.graph import StateGraph, END

    graph = StateGraph(ScenePipelineState)

    graph.add_node("load", _node_load)
    graph.add_node("chain", _node_chain)
    graph.add_node("plan", _node_plan)
    graph.add_node("assets", _node_assets)
    graph.add_node("export", _node_export)
    graph.add_node("success_result", _node_success_result)
    graph.add_node("fail_result", _node_fail_result)

    graph.set_entry_point("load")
    graph.add_conditional_edges(
        "load", _route_on_error("chain"), {"chain": "chain", "fail_result": "fail_result"}
    )
    graph.add_edge("chain", "plan")
    graph.add_edge("plan", "assets")
    graph.add_edge("assets", "export")
    graph.add_conditional_edges(
        "export",
        _route_on_error("success_result"),
        {"success_result": "success_result", "fail_result": "fail_result"},
    )
    graph.add_edge("success_result", END)
    graph.add_edge("fail_result", END)

    return graph.compile()


# 延迟编译，避免顶层 import langgraph 失败时影响其他导入
_scene_graph = None


def _get_graph():
    global _scene_graph
    if _scene_graph is None:
        _scene_graph = _build_graph()
    return _scene_graph


def run_scene_pipeline(
    scene_path: str | Path,
    index_path: str | Path | None = None,
    output_dir: str | Path | None = None,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """对外入口：构建场景执行计划与素材清单（LangGraph）。"""
    settings = settings or get_settings()
    if index_path is None and settings.index_path.exists():
        index_path = settings.index_path
    initial: ScenePipelineState = {
        "scene_path": str(scene_path),
        "index_path": str(index_path) if index_path else None,
        "output_dir": Path(output_dir) if output_dir else None,
        "settings": settings,
    }
    result_state = _get_graph().invoke(initial)
    result = result_state.get("result")
    if result is not None:
        return result
    return {"success": False, "error": result_state.get("error", "未知错误"), "step": "unknown"}
