"""台词工具：台词概览、按词级时间轴把转写台词拆分到镜头。"""
from __future__ import annotations

import logging
import math
from typing import Any

from pydantic import BaseModel, Field

from models.scene import Scene
from planner.names import visible_names

logger = logging.getLogger(__name__)

DEFAULT_FPS = 3
WORDS_PER_SECOND = 3.5  # 日常对话语速


class TimedWord(BaseModel):
    word: str
    speaker: str | None = None
    start_time: float
    end_time: float
    start_frame: int
    end_frame: int


class DialogueSummary(BaseModel):
    scene_id: str
    shots_with_dialogue: list[dict[str, Any]] = Field(default_factory=list)
    shots_unknown_dialogue: list[dict[str, Any]] = Field(default_factory=list)


def dialogue_summary(scene: Scene) -> DialogueSummary:
    summary = DialogueSummary(scene_id=scene.scene_id)
    for shot in scene.ordered_shots():
        dialog = shot.audio.dialog
        if dialog and dialog != "Unknown":
            summary.shots_with_dialogue.append(
                {
                    "shot_id": shot.shot_id,
                    "speaker": shot.audio.speaker,
                    "dialog": dialog,
                    "has_timestamp": shot.audio.dialog_start_time is not None,
                    "start_time": shot.audio.dialog_start_time,
                    "end_time": shot.audio.dialog_end_time,
                    "start_frame": shot.timing.start_frame,
                    "end_frame": shot.timing.end_frame,
                }
            )
            continue
        characters = visible_names(shot)
        if characters:
            summary.shots_unknown_dialogue.append(
                {
                    "shot_id": shot.shot_id,
                    "characters": characters,
                    "start_frame": shot.timing.start_frame,
                    "end_frame": shot.timing.end_frame,
                }
            )
    return summary


def build_word_timeline(
    transcript: dict[str, Any],
    fps: float = DEFAULT_FPS,
    words_per_second: float = WORDS_PER_SECOND,
) -> list[TimedWord]:
    """transcript: {"chunks": [{"lines": [{"text", "speaker", "approx_time"}]}]}"""
    timeline: list[TimedWord] = []
    for chunk in transcript.get("chunks") or []:
        for line in chunk.get("lines") or []:
            words = str(line.get("text") or "").split()
            if not words:
                continue
            per_word = (len(words) / words_per_second) / len(words)
            start = float(line.get("approx_time") or 0)
            for i, word in enumerate(words):
                word_start = start + i * per_word
                word_end = word_start + per_word
                timeline.append(
                    TimedWord(
                        word=word,
                        speaker=line.get("speaker"),
                        start_time=word_start,
                        end_time=word_end,
                        start_frame=math.floor(word_start * fps) + 1,
                        end_frame=math.floor(word_end * fps) + 1,
                    )
                )
    return timeline


def split_dialogue(
    scene: Scene,
    transcript: dict[str, Any],
    fps: float = DEFAULT_FPS,
    words_per_second: float = WORDS_PER_SECOND,
) -> Scene:
    """把落在各镜头帧区间内的词写入该镜头的 audio，返回新的 Scene。"""
    timeline = build_word_timeline(transcript, fps, words_per_second)
    shots = []
    for shot in scene.shots:
        start = shot.timing.start_frame or 0
        end = shot.timing.end_frame or 0
        words = [w for w in timeline if w.start_frame <= end and w.end_frame >= start]
        if words:
            audio = shot.audio.model_copy(
                update={
                    "dialog": " ".join(w.word for w in words),
                    "speaker": words[0].speaker,
                    "word_count": len(words),
                    "dialog_source": "whisper_split",
                }
            )
        else:
            audio = shot.audio.model_copy(update={"dialog": None, "speaker": None, "word_count": 0})
        shots.append(shot.model_copy(update={"audio": audio}))
    updated = sum(1 for s in shots if s.audio.word_count)
    logger.info("场景 %s：%d 个镜头分配到台词", scene.scene_id, updated)
    return scene.model_copy(update={"shots": shots})
