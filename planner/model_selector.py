"""
按镜头内容选择生成模型。

规则按顺序匹配，先命中者胜：
1. 显式指定（非 auto）的模型原样使用；
2. 有台词：说话者在画面内且机位静止 -> 口型同步模型；在画面内但机位运动 -> 转场模型；
   不在画面内（画外音）-> 需要尾帧时用转场模型，否则用基础模型；
3. 有尾帧且运镜命中关键词 -> 转场模型；
4. 仅有尾帧 -> 转场模型；
5. 其他 -> 基础模型。
"""
from __future__ import annotations

import logging
import re

from pydantic import BaseModel

from models.plan import ModelSpec
from models.scene import Shot
from planner.names import fuzzy_match, normalize_name, raw_subject_names
from planner.tables import (
    BASE_MODEL,
    LIP_SYNC_MODEL,
    MOVEMENT_KEYWORDS,
    OFFSCREEN_SPEAKERS,
    TRANSITION_MODEL,
)

logger = logging.getLogger(__name__)

_MOVEMENT_RE = re.compile(r"(?<![a-z])(" + "|".join(MOVEMENT_KEYWORDS) + r")", re.IGNORECASE)


class ModelChoice(BaseModel):
    model: str
    reason: str
    speaker_on_screen: bool = False

    model_config = {"protected_namespaces": ()}


def movement_text(shot: Shot) -> str:
    """运镜描述：camera.movement，缺失时用 motion_prompt。"""
    return shot.camera.movement or shot.motion_prompt or ""


def is_moving_camera(text: str | None) -> bool:
    return bool(text) and _MOVEMENT_RE.search(text) is not None


def has_end_frame(shot: Shot) -> bool:
    """显式尾帧，或要求尾帧且时间轴上有结束帧。"""
    return bool(shot.end_frame) or (shot.needs_end_frame and shot.timing.end_frame is not None)


def needs_end_frame(shot: Shot) -> bool:
    return has_end_frame(shot) or shot.needs_end_frame or is_moving_camera(movement_text(shot))


def speaker_on_screen(shot: Shot) -> bool:
    """说话者名字与画面内主体名模糊匹配。"""
    speaker = normalize_name(shot.audio.speaker)
    if not speaker or speaker in OFFSCREEN_SPEAKERS:
        return False
    return any(fuzzy_match(speaker, name) for name in raw_subject_names(shot))


def select_model(shot: Shot) -> ModelChoice:
    if shot.model and shot.model != "auto":
        return ModelChoice(model=shot.model, reason="Explicitly specified")

    moving = is_moving_camera(movement_text(shot))

    if shot.dialogue_text:
        speaker = shot.audio.speaker
        if not speaker:
            return ModelChoice(model=LIP_SYNC_MODEL, reason="Has dialog - lip sync")
        on_screen = speaker_on_screen(shot)
        if on_screen and not moving:
            return ModelChoice(
                model=LIP_SYNC_MODEL,
                reason=f"{speaker} ON SCREEN, static camera - lip sync",
                speaker_on_screen=True,
            )
        if on_screen:
            return ModelChoice(
                model=TRANSITION_MODEL,
                reason=f"{speaker} ON SCREEN but camera moving ({movement_text(shot)})",
                speaker_on_screen=True,
            )
        model = TRANSITION_MODEL if needs_end_frame(shot) else BASE_MODEL
        return ModelChoice(model=model, reason=f"{speaker} OFF SCREEN - voiceover")

    if has_end_frame(shot) and moving:
        return ModelChoice(model=TRANSITION_MODEL, reason="Camera movement needs start+end frame")
    if has_end_frame(shot):
        return ModelChoice(model=TRANSITION_MODEL, reason="Has end frame - state change")
    return ModelChoice(model=BASE_MODEL, reason="Default motion")


def clamp_duration(requested: float | None, spec: ModelSpec, default: float = 5.0) -> float:
    """请求时长按模型上限截断，未指定时使用默认值。"""
    duration = requested if requested and requested > 0 else default
    return float(min(duration, spec.max_duration))
