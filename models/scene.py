"""场景文档数据模型。"""
from typing import Any

from pydantic import BaseModel, Field, model_validator


class _SceneModel(BaseModel):
    """场景文档中显式的 null 按字段缺失处理取默认值；列表中的 null 项丢弃。"""

    model_config = {"extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if value is None:
                continue
            if isinstance(value, list):
                value = [v for v in value if v is not None]
            cleaned[key] = value
        return cleaned


class ShotTiming(_SceneModel):
    start_frame: int | None = None
    end_frame: int | None = None
    duration_sec: float | None = None
    actual_duration_sec: float | None = None
    generation_duration_sec: float | None = None


class ShotCamera(_SceneModel):
    movement: str | None = None
    framing: str | None = None
    start_framing: str | None = None  # ECU | CU | MCU | MS | MS_GROUP ...
    end_framing: str | None = None
    start: str | None = None
    end: str | None = None


class ShotAudio(_SceneModel):
    dialog: str | None = None
    speaker: str | None = None
    word_count: int = 0
    dialog_source: str | None = None
    dialog_start_time: float | None = None
    dialog_end_time: float | None = None


class SubjectRef(_SceneModel):
    who: str | list[str] | None = None  # 单个名字或名字列表
    description: str | None = None

    def names(self) -> list[str]:
        if not self.who:
            return []
        if isinstance(self.who, str):
            return [self.who]
        return [w for w in self.who if isinstance(w, str)]


class ShotEnvironment(_SceneModel):
    location: str | None = None
    visible_elements: list[str] = Field(default_factory=list)


class ShotProps(_SceneModel):
    items: list[str] = Field(default_factory=list)
    interaction: str | None = None


class ChainRef(_SceneModel):
    """接续上一镜头时引用的镜头与帧。"""
    from_shot: str
    use_frame: int | None = None


class Shot(_SceneModel):
    """场景中的单个镜头。"""
    shot_id: str
    order: int | None = None
    chain_from_previous: bool = False
    chain_ref: ChainRef | None = None
    timing: ShotTiming = Field(default_factory=ShotTiming)
    camera: ShotCamera = Field(default_factory=ShotCamera)
    audio: ShotAudio = Field(default_factory=ShotAudio)
    subject_primary: SubjectRef = Field(default_factory=SubjectRef)
    subject_secondary: SubjectRef = Field(default_factory=SubjectRef)
    environment: ShotEnvironment = Field(default_factory=ShotEnvironment)
    props: ShotProps = Field(default_factory=ShotProps)
    transition_in: str | None = None
    transition_out: str | None = None
    model: str | None = None  # 显式指定模型；"auto" 表示自动选择
    reference_shot: str | None = None  # 镜头库中的参考镜头 id
    start_frame: str | None = None
    end_frame: str | None = None
    needs_end_frame: bool = False
    motion_prompt: str | None = None
    dialog: str | None = None  # 旧格式：顶层台词
    dialog_voice: str | None = None
    duration: float | None = None
    location: str | None = None
    narrative_beat: str | None = None

    model_config = {"protected_namespaces": ()}

    @property
    def dialogue_text(self) -> str | None:
        return self.audio.dialog or self.dialog or None

    @property
    def location_name(self) -> str | None:
        return self.environment.location or self.location or None

    @property
    def requested_duration(self) -> float | None:
        return (
            self.duration
            or self.timing.generation_duration_sec
            or self.timing.duration_sec
            or None
        )


class Scene(_SceneModel):
    """完整场景文档。"""
    scene_id: str
    name: str = ""
    description: str | None = None
    location: str | None = None
    time_of_day: str | None = None
    mood: str | None = None
    music_cue: str | None = None
    aspect_ratio: str | None = None
    visual_style: dict | None = None
    character_references: dict[str, dict] = Field(default_factory=dict)
    shots: list[Shot] = Field(default_factory=list)

    def ordered_shots(self) -> list[Shot]:
        """按 order 排序（稳定排序；缺失 order 时使用位置序号）。"""
        indexed = [
            (shot.order if shot.order is not None else i + 1, i, shot)
            for i, shot in enumerate(self.shots)
        ]
        return [shot for _, _, shot in sorted(indexed, key=lambda t: (t[0], t[1]))]
