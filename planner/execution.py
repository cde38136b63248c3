"""
执行计划构建：场景文档 + 镜头库 -> 按顺序排列的执行步骤。

纯函数：相同输入重复构建得到完全相同的计划。
"""
from __future__ import annotations

import logging
from typing import Any

from config.settings import Settings, get_settings
from models.plan import AssetRequirements, ExecutionPlan, ExecutionStep, PostProcessing
from models.reference import ReferenceShot, ShotIndex
from models.scene import Scene, Shot
from planner.chaining import resolve_chains
from planner.frames import analysis_frame_path, last_frame_placeholder, reference_image_url
from planner.model_selector import clamp_duration, select_model
from planner.names import visible_names
from planner.prompts import compose_image_prompt, compose_motion_prompt
from planner.tables import EXTERIOR_KEYWORDS, INTERIOR_KEYWORDS, TRANSITION_MODEL, get_model_spec

logger = logging.getLogger(__name__)


def detect_int_ext(location: str | None) -> str:
    """先查外景关键词，再查内景关键词，默认内景。"""
    if not location:
        return "INT"
    loc = location.lower()
    if any(kw in loc for kw in EXTERIOR_KEYWORDS):
        return "EXT"
    if any(kw in loc for kw in INTERIOR_KEYWORDS):
        return "INT"
    return "INT"


def _start_reference(
    shot: Shot,
    previous_end_frame: str | None,
    ref: ReferenceShot | None,
    scene_id: str,
    settings: Settings,
) -> str | None:
    if shot.start_frame:
        return shot.start_frame
    if shot.chain_from_previous and previous_end_frame:
        return previous_end_frame
    if ref is not None:
        url = reference_image_url(ref, settings)
        if url:
            return url
    if shot.timing.start_frame is not None:
        return analysis_frame_path(scene_id, shot.timing.start_frame, settings)
    return None


def _end_reference(shot: Shot, model: str, scene_id: str, settings: Settings) -> str | None:
    if shot.end_frame:
        return shot.end_frame
    wants_end = shot.needs_end_frame or model == TRANSITION_MODEL
    if wants_end and shot.timing.end_frame is not None:
        return analysis_frame_path(scene_id, shot.timing.end_frame, settings)
    return None


def build_execution_plan(
    scene: Scene,
    shot_index: ShotIndex | None = None,
    settings: Settings | None = None,
) -> ExecutionPlan:
    settings = settings or get_settings()
    shots = resolve_chains(scene.ordered_shots())

    steps: list[ExecutionStep] = []
    model_counts: dict[str, int] = {}
    estimated = 0.0
    previous_end_frame: str | None = None
    last_location: str | None = None

    for i, shot in enumerate(shots):
        ref = shot_index.get(shot.reference_shot) if shot_index else None
        if shot.reference_shot and ref is None:
            logger.debug("%s 的参考镜头 %s 不在镜头库中", shot.shot_id, shot.reference_shot)

        choice = select_model(shot)
        spec = get_model_spec(choice.model)
        duration = clamp_duration(shot.requested_duration, spec, settings.default_duration_sec)

        inputs: dict[str, Any] = {
            spec.image_param: _start_reference(shot, previous_end_frame, ref, scene.scene_id, settings),
            "prompt": compose_motion_prompt(shot.motion_prompt),
            "duration": f"{duration:g}",
        }
        if spec.end_image_param:
            end = _end_reference(shot, choice.model, scene.scene_id, settings)
            if end:
                inputs[spec.end_image_param] = end

        location = shot.location_name
        if location:
            last_location = location
        else:
            location = last_location

        dialog = shot.dialogue_text
        step = ExecutionStep(
            shot_id=shot.shot_id,
            order=shot.order if shot.order is not None else i + 1,
            model=choice.model,
            model_reason=choice.reason,
            endpoint=spec.endpoint,
            duration=duration,
            inputs=inputs,
            reference_shot=shot.reference_shot,
            image_prompt=compose_image_prompt(ref, shot, scene),
            has_dialog=bool(dialog),
            dialog=dialog,
            dialog_voice=shot.dialog_voice,
            speaker=shot.audio.speaker,
            speaker_on_screen=choice.speaker_on_screen,
            tts_required=bool(dialog),
            transition_in=shot.transition_in or "cut",
            transition_out=shot.transition_out or "cut",
            narrative_beat=shot.narrative_beat,
            chain_from_previous=shot.chain_from_previous,
            chain_ref=shot.chain_ref,
            assets=AssetRequirements(
                characters_needed=visible_names(shot),
                location=location,
                int_ext=detect_int_ext(location),
                props=list(shot.props.items),
            ),
        )
        steps.append(step)
        estimated += duration
        model_counts[choice.model] = model_counts.get(choice.model, 0) + 1
        previous_end_frame = shot.end_frame or last_frame_placeholder(shot.shot_id)

    plan = ExecutionPlan(
        scene_id=scene.scene_id,
        scene_name=scene.name,
        description=scene.description,
        total_shots=len(steps),
        estimated_duration=round(estimated, 3),
        shots=steps,
        post_processing=PostProcessing(
            concat_videos=True,
            add_transitions=True,
            add_music=bool(scene.music_cue),
            music_file=scene.music_cue or None,
        ),
        model_counts=model_counts,
    )
    logger.info(
        "场景 %s：%d 个镜头，预计 %.1f 秒，模型分布 %s",
        plan.scene_id,
        plan.total_shots,
        plan.estimated_duration,
        model_counts,
    )
    return plan


def build_webhook_payload(plan: ExecutionPlan) -> dict[str, Any]:
    """转为自动化工作流 webhook 的请求体。"""
    return {
        "scene_id": plan.scene_id,
        "scene_name": plan.scene_name,
        "shots": [
            {
                "shot_id": step.shot_id,
                "model": step.model,
                "endpoint": step.endpoint,
                "inputs": step.inputs,
                "duration": step.duration,
                "tts": {"text": step.dialog, "voice": step.dialog_voice} if step.has_dialog else None,
                "transition_out": step.transition_out,
            }
            for step in plan.shots
        ],
        "post_processing": plan.post_processing.model_dump(),
    }
