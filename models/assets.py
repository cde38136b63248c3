"""场景素材清单数据模型。"""
from pydantic import BaseModel, Field


class CharacterFrame(BaseModel):
    frame: str
    shot_id: str
    framing: str
    score: int
    is_primary: bool = False
    is_solo: bool = False


class LocationFrame(BaseModel):
    frame: str
    shot_id: str
    framing: str
    score: int
    elements: list[str] = Field(default_factory=list)


class PropFrame(BaseModel):
    """合并后的道具：name 为规范名，variants 为命中的原始名称。"""
    name: str
    frame: str
    shot_id: str
    framing: str
    score: int
    interaction: str | None = None
    variants: list[str] = Field(default_factory=list)


class CharacterReference(BaseModel):
    """场景角色设定 + 最佳截图。"""
    id: str
    data: dict = Field(default_factory=dict)
    screenshot: str | None = None
    best_shot: str | None = None
    shot_framing: str | None = None
    is_solo_shot: bool = False
    selection_score: int = 0


class AssetManifest(BaseModel):
    scene_id: str
    characters: dict[str, CharacterFrame] = Field(default_factory=dict)
    locations: dict[str, LocationFrame] = Field(default_factory=dict)
    props: dict[str, PropFrame] = Field(default_factory=dict)
    character_references: dict[str, CharacterReference] = Field(default_factory=dict)
    visual_style: dict | None = None
