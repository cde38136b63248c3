"""
生成提示词：参考镜头 + 场景上下文 -> 图像提示词；运镜描述 -> 视频运动提示词。

图像提示词按固定顺序用逗号拼接，空段省略；默认值（晴天、静止机位、直视镜头、16:9）不写入。
"""
from __future__ import annotations

import re

from models.reference import ReferenceShot
from models.scene import Scene, Shot
from planner.names import subject_names
from planner.tables import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_COSTUME_CONDITION,
    DEFAULT_EYE_DIRECTION,
    DEFAULT_MOVEMENT,
    DEFAULT_WEATHER,
    IDLE_MOTION_PROMPT,
    LIGHTING_PHRASES,
    SETTLE_CLAUSE,
    SUBJECT_LABELS,
)

_CONTINUATION_RE = re.compile(r",\s*then\b", re.IGNORECASE)


def subject_label(subject_type: str | None) -> str:
    subject_type = (subject_type or "character").lower()
    return SUBJECT_LABELS.get(subject_type, subject_type.upper())


def _subject_segment(ref: ReferenceShot) -> str:
    subject_type = (ref.subject_type or "character").lower()
    desc = ref.subject_description or "subject"
    if subject_type == "character" and ref.costume:
        costume_parts: list[str] = []
        if ref.costume.key_pieces:
            costume_parts.append(", ".join(ref.costume.key_pieces))
        if ref.costume.condition and ref.costume.condition != DEFAULT_COSTUME_CONDITION:
            costume_parts.append(ref.costume.condition)
        if costume_parts:
            desc += f" wearing {', '.join(costume_parts)}"
    segment = f"[{subject_label(subject_type)}: {desc}]"
    if ref.character_pose:
        if ref.character_pose.posture:
            segment += f" {ref.character_pose.posture}"
        if ref.character_pose.gesture:
            segment += f", {ref.character_pose.gesture}"
    return segment


def _environment_segment(
    location: str | None, environment: str | None, time_of_day: str | None, weather: str | None
) -> str:
    env = ""
    if location:
        env = f"in {location}"
    elif environment:
        env = f"in {environment} setting"
    if time_of_day:
        env += f" at {time_of_day}"
    if weather and weather != DEFAULT_WEATHER:
        env += f" with {weather}"
    return env.strip()


def _camera_segment(ref: ReferenceShot) -> str:
    camera = ""
    if ref.shot:
        camera += f"{ref.shot} shot"
    if ref.lens:
        camera += f" {ref.lens}"
    if ref.depth:
        camera += f" {ref.depth}"
    return camera.strip()


def lighting_phrase(lighting: str | None, lighting_source: str | None = None) -> str:
    if lighting_source:
        return lighting_source
    if lighting:
        return LIGHTING_PHRASES.get(lighting, f"{lighting} lighting")
    return ""


def compose_image_prompt(
    reference: ReferenceShot | None,
    shot: Shot | None = None,
    scene: Scene | None = None,
) -> str:
    """拼接图像提示词；参考镜头缺失时退化为镜头/场景自身信息。"""
    parts: list[str] = []
    scene_location = scene.location if scene else None
    shot_location = shot.location_name if shot else None

    if reference is None:
        if shot:
            primary, _ = subject_names(shot)
            if primary:
                parts.append(f"[CHARACTER: {', '.join(primary)}]")
        parts.append(
            _environment_segment(
                shot_location or scene_location,
                None,
                scene.time_of_day if scene else None,
                None,
            )
        )
        if scene and scene.mood:
            parts.append(f"{scene.mood} mood")
        return ", ".join(p for p in parts if p)

    ref = reference
    parts.append(_subject_segment(ref))
    if ref.subject_placement:
        parts.append(f"positioned {ref.subject_placement}")
    if ref.eye_direction and ref.eye_direction != DEFAULT_EYE_DIRECTION:
        parts.append(f"looking {ref.eye_direction}")

    location = ref.location or (None if ref.environment else shot_location or scene_location)
    parts.append(
        _environment_segment(
            location,
            ref.environment,
            ref.time_of_day or (scene.time_of_day if scene else None),
            ref.weather,
        )
    )

    if ref.emotion:
        intensity = f" ({ref.emotion_intensity})" if ref.emotion_intensity else ""
        parts.append(f"{ref.emotion} mood{intensity}")
    elif scene and scene.mood:
        parts.append(f"{scene.mood} mood")

    if ref.camera3d and ref.camera3d.description:
        parts.append(ref.camera3d.description)
    if ref.framing:
        parts.append(f"{ref.framing} composition")
    parts.append(_camera_segment(ref))
    if ref.movement and ref.movement != DEFAULT_MOVEMENT:
        parts.append(f"{ref.movement} camera")
    parts.append(lighting_phrase(ref.lighting, ref.lighting_source))

    if ref.color_palette:
        parts.append(f"{ref.color_palette} color grade")
    elif ref.lighting_color:
        parts.append(f"{ref.lighting_color} tones")
    if ref.aspect_ratio and ref.aspect_ratio != DEFAULT_ASPECT_RATIO:
        parts.append(f"{ref.aspect_ratio} aspect ratio")
    if ref.narrative and ref.narrative.story_context:
        parts.append(f"[STORY: {ref.narrative.story_context}]")

    return ", ".join(p for p in parts if p)


def compose_motion_prompt(motion: str | None) -> str:
    """保证运动提示词有明确终点（"then settles" / "then holds"）。"""
    motion = (motion or "").strip()
    if not motion:
        return IDLE_MOTION_PROMPT
    if _CONTINUATION_RE.search(motion):
        return motion
    return f"{motion}, {SETTLE_CLAUSE}"
