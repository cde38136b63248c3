"""
查找表：模型参数、关键词、评分表。所有规则以有序数据表达，便于审阅与单测。
"""
from __future__ import annotations

from models.plan import ModelSpec

# ---------------------------------------------------------------------------
# 生成模型
# ---------------------------------------------------------------------------

LIP_SYNC_MODEL = "seedance-1.5"
TRANSITION_MODEL = "kling-o1"
BASE_MODEL = "kling-2.6"

MODEL_SPECS: dict[str, ModelSpec] = {
    LIP_SYNC_MODEL: ModelSpec(
        name=LIP_SYNC_MODEL,
        endpoint="fal-ai/seedance-1.5",
        image_param="image_url",
        end_image_param="end_image_url",
        supports_dialog=True,
        max_duration=5,
    ),
    TRANSITION_MODEL: ModelSpec(
        name=TRANSITION_MODEL,
        endpoint="fal-ai/kling-video/o1",
        image_param="start_image_url",
        end_image_param="tail_image_url",
        supports_dialog=False,
        max_duration=10,
    ),
    BASE_MODEL: ModelSpec(
        name=BASE_MODEL,
        endpoint="fal-ai/kling-video/v2.6",
        image_param="image_url",
        end_image_param=None,
        supports_dialog=False,
        max_duration=10,
    ),
}

# 运镜关键词（前缀匹配，避免 "companion" 命中 "pan"）
MOVEMENT_KEYWORDS: tuple[str, ...] = (
    "dolly",
    "orbit",
    "zoom",
    "push",
    "pull",
    "pan",
    "tilt",
    "track",
    "crane",
)

# 非角色说话者（电视、广播等），一律按画外音处理
OFFSCREEN_SPEAKERS: tuple[str, ...] = ("tv",)

# ---------------------------------------------------------------------------
# 镜头接续
# ---------------------------------------------------------------------------

BREAK_TRANSITIONS: tuple[str, ...] = ("whip_pan", "wipe", "dissolve", "fade")

# 名字中出现这些片段即视为占位符而非实体
PLACEHOLDER_TOKENS: tuple[str, ...] = ("transition", "blur", "_")

# ---------------------------------------------------------------------------
# 提示词
# ---------------------------------------------------------------------------

SUBJECT_LABELS: dict[str, str] = {
    "character": "CHARACTER",
    "object": "OBJECT",
    "vehicle": "OBJECT",
    "animal": "ANIMAL",
    "scene": "SCENE",
    "background": "SCENE",
}

LIGHTING_PHRASES: dict[str, str] = {
    "natural": "natural daylight streaming from window on left",
    "three-point": "key light from front-left with soft fill from right",
    "rembrandt": "single key light from 45° left creating triangle shadow on cheek",
    "silhouette": "strong backlight from behind, subject in silhouette",
    "neon": "neon signs casting pink and blue glow from sides",
    "harsh-sun": "harsh midday sun from directly above casting sharp shadows",
    "candlelight": "warm flickering candlelight from below-left",
    "moonlight": "cool blue moonlight from above-right",
    "volumetric": "god rays streaming through dusty atmosphere from behind",
    "spotlight": "single hard spotlight from directly above",
    "film-noir": "venetian blind shadows with single hard key from side",
    "rim-light": "strong rim light from behind outlining subject",
    "golden-hour": "warm golden sunset light from low left angle",
    "fireplace": "warm orange fireplace glow from lower left",
    "fluorescent": "cold overhead fluorescent tubes casting flat even light",
}

# 默认值不写进提示词
DEFAULT_WEATHER = "clear"
DEFAULT_MOVEMENT = "static"
DEFAULT_EYE_DIRECTION = "at-camera"
DEFAULT_ASPECT_RATIO = "16:9"
DEFAULT_COSTUME_CONDITION = "pristine"

SETTLE_CLAUSE = "then settles"
IDLE_MOTION_PROMPT = "subtle movement, then holds"

# ---------------------------------------------------------------------------
# 素材评分
# ---------------------------------------------------------------------------

DEFAULT_FRAMING = "MS"
FRAMING_FALLBACK_SCORE = 50

# 角色：特写最佳，远景最差
CHARACTER_FRAMING_SCORES: dict[str, int] = {
    "BCU": 100,
    "ECU": 100,
    "CU": 90,
    "MCU": 80,
    "MS": 60,
    "OTS": 50,
    "MWS": 40,
    "WS": 20,
    "EWS": 10,
    "POV": 5,
}
GROUP_MARKERS: tuple[str, ...] = ("GROUP", "TWO_SHOT")
GROUP_PENALTY = 15
PRIMARY_BONUS = 30
SOLO_BONUS = 20

# 场景：远景更能交代空间
LOCATION_FRAMING_SCORES: dict[str, int] = {
    "EWS": 100,
    "WS": 90,
    "MWS": 80,
    "MW": 70,
    "MS": 50,
    "MCU": 30,
    "CU": 20,
    "BCU": 10,
}

# 道具：特写优先
PROP_FRAMING_SCORES: dict[str, int] = {
    "ECU": 100,
    "BCU": 95,
    "CU": 90,
    "MCU": 80,
    "MS": 60,
    "MWS": 40,
    "WS": 20,
}
INTERACTION_BONUS = 20

# 身体部位、布景、家具、角色，不计为道具
EXCLUDED_PROPS: tuple[str, ...] = (
    "finger",
    "thumb",
    "hand",
    "hands",
    "foot",
    "shoe",
    "shoes",
    "feet",
    "door",
    "window",
    "wall",
    "floor",
    "ceiling",
    "table",
    "chair",
    "couch",
    "sofa",
    "zombie",
    "body",
)

# 同义道具归并；按顺序匹配，先命中者胜
PROP_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "vehicle",
        (
            "car_door_handle",
            "car_key",
            "gas_pedal",
            "steering_wheel",
            "red_car",
            "key",
        ),
    ),
    ("mug", ("tea_mug", "cool_mug", "mug")),
    ("pint_glass", ("pint_glass", "lager", "beer")),
)

# ---------------------------------------------------------------------------
# 内外景
# ---------------------------------------------------------------------------

EXTERIOR_KEYWORDS: tuple[str, ...] = (
    "street",
    "exterior",
    "driveway",
    "garden",
    "outside",
    "ext",
    "outdoor",
    "yard",
    "parking",
    "sidewalk",
    "road",
    "alley",
)
INTERIOR_KEYWORDS: tuple[str, ...] = (
    "interior",
    "int",
    "inside",
    "room",
    "flat",
    "apartment",
    "house",
    "pub",
    "bar",
    "kitchen",
    "bedroom",
    "bathroom",
    "office",
    "hall",
    "corridor",
)


def get_model_spec(model: str) -> ModelSpec:
    """未知模型名回落到基础模型参数。"""
    return MODEL_SPECS.get(model, MODEL_SPECS[BASE_MODEL])
