"""
Pytest 配置与共享 fixtures。
"""
import json
from pathlib import Path
from typing import Any

import pytest

from config.settings import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """指向临时目录的配置。"""
    scenes_dir = tmp_path / "scenes"
    scenes_dir.mkdir()
    return Settings(
        project_root=tmp_path,
        index_path=tmp_path / "index.json",
        scenes_dir=scenes_dir,
        output_dir=tmp_path / "output",
        reference_base_url="http://localhost:3333",
        frames_subdir="analysis_3fps",
        frame_number_width=4,
        default_duration_sec=5.0,
    )


@pytest.fixture
def sample_index_data() -> dict[str, Any]:
    return {
        "generated": "2025-01-01T00:00:00Z",
        "count": 3,
        "shots": [
            {
                "id": "blade-runner-2049_shot-001",
                "image": "_source/film-grab/blade-runner-2049/blade-runner-2049_shot-001.jpg",
                "film": "Blade Runner 2049",
                "director": "villeneuve",
                "shot": "medium-close",
                "lens": "50mm",
                "depth": "shallow focus",
                "emotion": "sadness",
                "emotionIntensity": "medium",
                "lighting": "rembrandt",
                "location": "office",
                "timeOfDay": "night",
                "subjectType": "character",
                "subjectDescription": "man in suit",
                "costume": {"keyPieces": ["tie"], "condition": "worn"},
                "tags": ["noir", "rain"],
                "narrative": {"storyContext": "Detective alone after a long case"},
            },
            {
                "id": "mad-max_shot-010",
                "image": "_source/film-grab/mad-max/mad-max_shot-010.jpg",
                "film": "Mad Max: Fury Road",
                "director": "miller",
                "shot": "extreme-wide",
                "emotion": "tension",
                "lighting": "harsh-sun",
                "environment": "desert",
                "subjectType": "vehicle",
                "subjectDescription": "war rig",
                "tags": ["chase"],
            },
            {
                "id": "amelie_shot-003",
                "image": "_source/shot-cafe/amelie/amelie_shot-003.jpg",
                "film": "Amelie",
                "director": "jeunet",
                "shot": "close-up",
                "emotion": "joy",
                "lighting": "golden-hour",
                "colorPalette": "golden-warm",
                "subjectType": "character",
                "subjectDescription": "young woman",
            },
        ],
    }


@pytest.fixture
def sample_scene_data() -> dict[str, Any]:
    return {
        "scene_id": "the_plan",
        "name": "The Plan",
        "description": "Shaun and Ed plan their next move at the pub",
        "time_of_day": "night",
        "music_cue": "music/dont_stop_me_now.mp3",
        "character_references": {
            "shaun": {"name": "Shaun"},
            "ed": {"name": "Ed"},
        },
        "shots": [
            {
                "shot_id": "shot_1",
                "order": 1,
                "reference_shot": "blade-runner-2049_shot-001",
                "timing": {"start_frame": 1, "end_frame": 10},
                "camera": {"movement": "static", "start_framing": "WS"},
                "subject_primary": {"who": "Shaun"},
                "environment": {"location": "Winchester Pub", "visible_elements": ["bar", "jukebox"]},
                "props": {"items": ["pint_glass"]},
                "motion_prompt": "Shaun leans on the bar",
                "duration": 4,
            },
            {
                "shot_id": "shot_2",
                "order": 2,
                "timing": {"start_frame": 11, "end_frame": 20},
                "camera": {"movement": "static", "start_framing": "CU"},
                "audio": {"dialog": "hello", "speaker": "bob", "word_count": 1},
                "subject_primary": {"who": "bob"},
                "props": {"items": ["lager"], "interaction": "bob sips his lager"},
                "duration": 8,
            },
            {
                "shot_id": "shot_3",
                "order": 3,
                "timing": {"start_frame": 40, "end_frame": 55},
                "camera": {"movement": "slow dolly in", "start_framing": "MS_GROUP"},
                "subject_primary": {"who": ["Shaun", "Ed"]},
                "environment": {"location": "Winchester Street"},
                "end_frame": "/frames/shot_3_end.jpg",
                "transition_in": "dissolve",
            },
        ],
    }


@pytest.fixture
def index_file(settings: Settings, sample_index_data: dict[str, Any]) -> Path:
    settings.index_path.write_text(json.dumps(sample_index_data), encoding="utf-8")
    return settings.index_path


@pytest.fixture
def scene_file(settings: Settings, sample_scene_data: dict[str, Any]) -> Path:
    path = settings.scenes_dir / "the_plan.json"
    path.write_text(json.dumps(sample_scene_data), encoding="utf-8")
    return path
