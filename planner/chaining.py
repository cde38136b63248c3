"""
镜头接续判定：当前镜头是否以前一镜头的尾帧作为起始参考。

无破坏性转场（划像、叠化、淡入淡出、甩镜）时，满足任一条件即接续：
a. 同一地点且主体有重叠；
b. 同一说话者且帧间隔 <= 2；
c. 帧间隔 <= 1。
从左到右单遍扫描，首个镜头不接续。
"""
from __future__ import annotations

import logging

from pydantic import BaseModel

from models.scene import ChainRef, Shot
from planner.names import any_overlap, normalize_name, visible_names
from planner.tables import BREAK_TRANSITIONS

logger = logging.getLogger(__name__)

SPEAKER_MAX_GAP = 2
ADJACENT_MAX_GAP = 1


class ChainDecision(BaseModel):
    chain: bool
    reason: str = ""
    frame_gap: int | None = None
    chain_ref: ChainRef | None = None


def _normalize_transition(label: str | None) -> str:
    return normalize_name(label).replace("-", "_").replace(" ", "_") or "cut"


def is_breaking_transition(label: str | None) -> bool:
    t = _normalize_transition(label)
    return any(b in t for b in BREAK_TRANSITIONS)


def frame_gap(previous: Shot, current: Shot) -> int | None:
    """当前起始帧 - 前一镜头结束帧；任一缺失返回 None。"""
    # 缺失的帧不按 0 计，没有时间轴的两个镜头不会因帧间隔而接续
    if current.timing.start_frame is None or previous.timing.end_frame is None:
        return None
    return current.timing.start_frame - previous.timing.end_frame


def should_chain(previous: Shot, current: Shot) -> ChainDecision:
    gap = frame_gap(previous, current)
    if is_breaking_transition(previous.transition_out) or is_breaking_transition(current.transition_in):
        return ChainDecision(chain=False, reason="breaking transition", frame_gap=gap)

    curr_location = normalize_name(current.environment.location)
    prev_location = normalize_name(previous.environment.location)
    same_location = bool(curr_location) and curr_location == prev_location
    overlapping = any_overlap(visible_names(current), visible_names(previous))

    curr_speaker = normalize_name(current.audio.speaker)
    prev_speaker = normalize_name(previous.audio.speaker)
    same_speaker = bool(curr_speaker) and curr_speaker == prev_speaker

    reason = ""
    if same_location and overlapping:
        reason = f"same location ({curr_location}) with overlapping subjects"
    elif same_speaker and gap is not None and gap <= SPEAKER_MAX_GAP:
        reason = f"same speaker ({curr_speaker}) continuing"
    elif gap is not None and gap <= ADJACENT_MAX_GAP:
        reason = f"adjacent frames (gap {gap})"

    if not reason:
        return ChainDecision(chain=False, frame_gap=gap)
    return ChainDecision(
        chain=True,
        reason=reason,
        frame_gap=gap,
        chain_ref=ChainRef(from_shot=previous.shot_id, use_frame=previous.timing.end_frame),
    )


def resolve_chains(shots: list[Shot]) -> list[Shot]:
    """返回标注了 chain_from_previous / chain_ref 的镜头副本，不修改输入。"""
    resolved: list[Shot] = []
    for i, shot in enumerate(shots):
        if i == 0:
            resolved.append(shot.model_copy(update={"chain_from_previous": False, "chain_ref": None}))
            continue
        decision = should_chain(shots[i - 1], shot)
        if decision.chain:
            logger.debug("%s 接续 %s：%s", shot.shot_id, shots[i - 1].shot_id, decision.reason)
        resolved.append(
            shot.model_copy(
                update={"chain_from_previous": decision.chain, "chain_ref": decision.chain_ref}
            )
        )
    return resolved


def chain_summary(shots: list[Shot]) -> dict[str, int]:
    chained = sum(1 for s in shots if s.chain_from_previous)
    return {"chained": chained, "standalone": len(shots) - chained}
