"""镜头库（参考镜头索引）数据模型。"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# 索引文件使用 camelCase 键
_INDEX_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    extra="ignore",
)


class Camera3D(BaseModel):
    model_config = _INDEX_CONFIG

    azimuth: float | None = None  # 0-359，0 为正面
    elevation: float | None = None  # -30 ~ 60
    distance: float | None = None  # 0.6 ~ 1.8
    description: str | None = None


class Costume(BaseModel):
    model_config = _INDEX_CONFIG

    style: str | None = None
    era: str | None = None
    key_pieces: list[str] = Field(default_factory=list)
    condition: str | None = None
    colors: list[str] = Field(default_factory=list)


class CharacterPose(BaseModel):
    model_config = _INDEX_CONFIG

    posture: str | None = None
    body_language: str | None = None
    gesture: str | None = None
    head_position: str | None = None


class ProductionDesign(BaseModel):
    model_config = _INDEX_CONFIG

    style: str | None = None
    key_props: list[str] = Field(default_factory=list)
    materials: list[str] = Field(default_factory=list)
    practical_lights: list[str] = Field(default_factory=list)


class Narrative(BaseModel):
    model_config = _INDEX_CONFIG

    shot_purpose: str | None = None
    narrative_beat: str | None = None
    emotional_function: str | None = None
    story_context: str | None = None


class ReferenceShot(BaseModel):
    """已打标的参考镜头，入库后不可变。"""
    model_config = _INDEX_CONFIG

    id: str
    image: str | None = None
    film: str | None = None
    year: int | str | None = None
    director: str | None = None
    # 镜头分类
    shot: str | None = None
    angle: str | None = None
    movement: str | None = None
    lens: str | None = None
    depth: str | None = None
    # 情绪与光线
    emotion: str | None = None
    emotion_intensity: str | None = None
    lighting: str | None = None
    lighting_source: str | None = None
    lighting_color: str | None = None
    # 环境
    environment: str | None = None
    location: str | None = None
    weather: str | None = None
    time_of_day: str | None = None
    genre: list[str] = Field(default_factory=list)
    decade: str | int | None = None
    tags: list[str] = Field(default_factory=list)
    prompt: str | None = None
    # 构图
    framing: str | None = None
    composition_notes: str | None = None
    # 主体
    subject_type: str | None = None
    subject_description: str | None = None
    subject_placement: str | None = None
    eye_direction: str | None = None
    pose: str | None = None
    # 风格
    color_palette: str | None = None
    film_stock: str | None = None
    aspect_ratio: str | None = None
    camera3d: Camera3D | None = None
    costume: Costume | None = None
    character_pose: CharacterPose | None = None
    production_design: ProductionDesign | None = None
    narrative: Narrative | None = None


class ShotFilters(BaseModel):
    """筛选项枚举。"""
    model_config = _INDEX_CONFIG

    directors: list[str] = Field(default_factory=list)
    emotions: list[str] = Field(default_factory=list)
    lighting: list[str] = Field(default_factory=list)
    shot_types: list[str] = Field(default_factory=list)
    environments: list[str] = Field(default_factory=list)
    decades: list[str] = Field(default_factory=list)
    films: list[str] = Field(default_factory=list)
    lenses: list[str] = Field(default_factory=list)
    angles: list[str] = Field(default_factory=list)


# 筛选项 -> ReferenceShot 字段
FILTER_FIELDS: dict[str, str] = {
    "directors": "director",
    "emotions": "emotion",
    "lighting": "lighting",
    "shot_types": "shot",
    "environments": "environment",
    "decades": "decade",
    "films": "film",
    "lenses": "lens",
    "angles": "angle",
}


def build_filters(shots: list[ReferenceShot]) -> ShotFilters:
    """从镜头列表提取各筛选项的去重排序值。"""
    values: dict[str, list[str]] = {}
    for key, attr in FILTER_FIELDS.items():
        found = {str(getattr(s, attr)) for s in shots if getattr(s, attr)}
        values[key] = sorted(found)
    return ShotFilters(**values)


class ShotIndex(BaseModel):
    """镜头库索引：扁平镜头列表 + 筛选项。"""
    model_config = ConfigDict(extra="ignore")

    generated: str | None = None
    count: int = 0
    filters: ShotFilters = Field(default_factory=ShotFilters)
    shots: list[ReferenceShot] = Field(default_factory=list)

    def get(self, shot_id: str | None) -> ReferenceShot | None:
        if not shot_id:
            return None
        for s in self.shots:
            if s.id == shot_id:
                return s
        return None

    def search(
        self,
        director: str | None = None,
        emotion: str | None = None,
        lighting: str | None = None,
        shot: str | None = None,
        lens: str | None = None,
        film: str | None = None,
        search: str | None = None,
        limit: int = 100,
    ) -> list[ReferenceShot]:
        results: list[ReferenceShot] = []
        for s in self.shots:
            if director and s.director != director:
                continue
            if emotion and s.emotion != emotion:
                continue
            if lighting and s.lighting != lighting:
                continue
            if shot and s.shot != shot:
                continue
            if lens and s.lens != lens:
                continue
            if film and (not s.film or film.lower() not in s.film.lower()):
                continue
            if search:
                searchable = " ".join(
                    str(v)
                    for v in (s.film, s.director, s.emotion, s.lighting, s.shot, s.location, *s.tags)
                    if v
                ).lower()
                if search.lower() not in searchable:
                    continue
            results.append(s)
        return results[:limit]
