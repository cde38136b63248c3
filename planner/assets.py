"""
素材选帧：为场景中的每个角色、地点、道具挑选最具代表性的一帧。

每个实体只保留得分最高的一次出现；后出现的镜头只有严格更高分才替换（平分保留先出现者）。
"""
from __future__ import annotations

import logging

from config.settings import Settings, get_settings
from models.assets import AssetManifest, CharacterFrame, CharacterReference, LocationFrame, PropFrame
from models.scene import Scene, Shot
from planner.frames import analysis_frame_path
from planner.names import first_fuzzy_match, normalize_name, subject_names
from planner.tables import (
    CHARACTER_FRAMING_SCORES,
    DEFAULT_FRAMING,
    EXCLUDED_PROPS,
    FRAMING_FALLBACK_SCORE,
    GROUP_MARKERS,
    GROUP_PENALTY,
    INTERACTION_BONUS,
    LOCATION_FRAMING_SCORES,
    PRIMARY_BONUS,
    PROP_FRAMING_SCORES,
    PROP_GROUPS,
    SOLO_BONUS,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# 评分
# ---------------------------------------------------------------------------


def shot_framing(shot: Shot) -> tuple[str, str]:
    """(完整景别标签, 基础景别)，如 MS_GROUP -> MS。"""
    full = (shot.camera.start_framing or DEFAULT_FRAMING).upper()
    return full, full.split("_")[0]


def character_framing_score(full_framing: str) -> int:
    base = full_framing.split("_")[0]
    score = CHARACTER_FRAMING_SCORES.get(base, FRAMING_FALLBACK_SCORE)
    if any(marker in full_framing for marker in GROUP_MARKERS):
        score -= GROUP_PENALTY
    return score


def location_framing_score(full_framing: str) -> int:
    return LOCATION_FRAMING_SCORES.get(full_framing.split("_")[0], FRAMING_FALLBACK_SCORE)


def prop_framing_score(full_framing: str, interaction: str | None = None) -> int:
    score = PROP_FRAMING_SCORES.get(full_framing.split("_")[0], FRAMING_FALLBACK_SCORE)
    return score + (INTERACTION_BONUS if interaction else 0)


def is_excluded_prop(name: str) -> bool:
    n = normalize_name(name)
    return not n or any(ex in n for ex in EXCLUDED_PROPS)


def canonical_prop(name: str) -> str:
    """按 PROP_GROUPS 顺序归并同义道具，未命中返回原名。"""
    for group, members in PROP_GROUPS:
        if first_fuzzy_match(name, members) is not None:
            return group
    return name


# ---------------------------------------------------------------------------
# 扫描
# ---------------------------------------------------------------------------


def _score_characters(
    shot: Shot, frame: str, framing: str, characters: dict[str, CharacterFrame]
) -> None:
    primary, secondary = subject_names(shot)
    base = character_framing_score(framing)
    solo = len(primary) == 1 and not secondary
    for name in primary:
        score = base + PRIMARY_BONUS + (SOLO_BONUS if solo else 0)
        current = characters.get(name)
        if current is None or score > current.score:
            characters[name] = CharacterFrame(
                frame=frame, shot_id=shot.shot_id, framing=framing, score=score,
                is_primary=True, is_solo=solo,
            )
    for name in secondary:
        current = characters.get(name)
        if current is None or base > current.score:
            characters[name] = CharacterFrame(
                frame=frame, shot_id=shot.shot_id, framing=framing, score=base,
                is_primary=False, is_solo=False,
            )


def _score_location(
    shot: Shot, frame: str, framing: str, locations: dict[str, LocationFrame]
) -> None:
    location = (shot.environment.location or "").strip()
    if not location:
        return
    score = location_framing_score(framing)
    current = locations.get(location)
    if current is None or score > current.score:
        locations[location] = LocationFrame(
            frame=frame, shot_id=shot.shot_id, framing=framing, score=score,
            elements=list(shot.environment.visible_elements),
        )


def _score_props(shot: Shot, frame: str, framing: str, props: dict[str, PropFrame]) -> None:
    interaction = shot.props.interaction
    score = prop_framing_score(framing, interaction)
    for raw in shot.props.items:
        name = (raw or "").strip()
        if is_excluded_prop(name):
            continue
        key = canonical_prop(name)
        current = props.get(key)
        if current is None:
            props[key] = PropFrame(
                name=key, frame=frame, shot_id=shot.shot_id, framing=framing,
                score=score, interaction=interaction, variants=[name],
            )
            continue
        if name not in current.variants:
            current.variants.append(name)
        if score > current.score:
            props[key] = current.model_copy(
                update={
                    "frame": frame,
                    "shot_id": shot.shot_id,
                    "framing": framing,
                    "score": score,
                    "interaction": interaction,
                }
            )


def _enrich_references(
    scene: Scene, characters: dict[str, CharacterFrame]
) -> dict[str, CharacterReference]:
    enriched: dict[str, CharacterReference] = {}
    for ref_id, data in scene.character_references.items():
        frame = characters.get(normalize_name(ref_id)) or characters.get(
            normalize_name(str(data.get("name") or ""))
        )
        enriched[ref_id] = CharacterReference(
            id=ref_id,
            data=dict(data),
            screenshot=frame.frame if frame else None,
            best_shot=frame.shot_id if frame else None,
            shot_framing=frame.framing if frame else None,
            is_solo_shot=frame.is_solo if frame else False,
            selection_score=frame.score if frame else 0,
        )
    return enriched


def score_scene_assets(scene: Scene, settings: Settings | None = None) -> AssetManifest:
    settings = settings or get_settings()
    characters: dict[str, CharacterFrame] = {}
    locations: dict[str, LocationFrame] = {}
    props: dict[str, PropFrame] = {}

    for shot in scene.ordered_shots():
        if shot.timing.start_frame is None:
            continue
        frame = analysis_frame_path(scene.scene_id, shot.timing.start_frame, settings)
        framing, _ = shot_framing(shot)
        _score_characters(shot, frame, framing, characters)
        _score_location(shot, frame, framing, locations)
        _score_props(shot, frame, framing, props)

    logger.info(
        "场景 %s 素材：角色 %d，地点 %d，道具 %d",
        scene.scene_id,
        len(characters),
        len(locations),
        len(props),
    )
    return AssetManifest(
        scene_id=scene.scene_id,
        characters=characters,
        locations=locations,
        props=props,
        character_references=_enrich_references(scene, characters),
        visual_style=scene.visual_style,
    )
