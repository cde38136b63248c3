"""执行计划数据模型。"""
from typing import Any

from pydantic import BaseModel, Field

from .scene import ChainRef


class ModelSpec(BaseModel):
    """生成模型的固定参数。"""
    name: str
    endpoint: str
    image_param: str
    end_image_param: str | None = None
    supports_dialog: bool = False
    max_duration: float = 10.0


class AssetRequirements(BaseModel):
    """镜头生成所需的素材。"""
    characters_needed: list[str] = Field(default_factory=list)
    location: str | None = None
    int_ext: str = "INT"  # INT | EXT
    props: list[str] = Field(default_factory=list)


class ExecutionStep(BaseModel):
    """单个镜头的执行步骤，每次构建计划时重新生成。"""
    shot_id: str
    order: int
    model: str
    model_reason: str = ""
    endpoint: str
    duration: float
    inputs: dict[str, Any] = Field(default_factory=dict)
    reference_shot: str | None = None
    image_prompt: str = ""
    has_dialog: bool = False
    dialog: str | None = None
    dialog_voice: str | None = None
    speaker: str | None = None
    speaker_on_screen: bool = False
    tts_required: bool = False
    transition_in: str = "cut"
    transition_out: str = "cut"
    narrative_beat: str | None = None
    chain_from_previous: bool = False
    chain_ref: ChainRef | None = None
    extract_last_frame: bool = True
    assets: AssetRequirements = Field(default_factory=AssetRequirements)

    model_config = {"protected_namespaces": ()}


class PostProcessing(BaseModel):
    concat_videos: bool = True
    add_transitions: bool = True
    add_music: bool = False
    music_file: str | None = None


class ExecutionPlan(BaseModel):
    """整场戏的执行计划。"""
    scene_id: str
    scene_name: str = ""
    description: str | None = None
    total_shots: int = 0
    estimated_duration: float = 0.0
    shots: list[ExecutionStep] = Field(default_factory=list)
    post_processing: PostProcessing = Field(default_factory=PostProcessing)
    model_counts: dict[str, int] = Field(default_factory=dict)  # 各模型镜头数

    model_config = {"protected_namespaces": ()}
