"""
Tests for model selection: explicit overrides, on-screen / off-screen dialogue,
end frames and camera movement.
"""
import pytest

from models.scene import Shot
from planner.model_selector import clamp_duration, is_moving_camera, select_model
from planner.tables import (
    BASE_MODEL,
    LIP_SYNC_MODEL,
    MODEL_SPECS,
    TRANSITION_MODEL,
    get_model_spec,
)


def _shot(**fields) -> Shot:
    return Shot.model_validate({"shot_id": "s", **fields})


def _speaking(speaker: str, who, movement: str = "static", **fields) -> Shot:
    return _shot(
        audio={"dialog": "we take the car", "speaker": speaker, "word_count": 4},
        subject_primary={"who": who},
        camera={"movement": movement},
        **fields,
    )


class TestExplicitOverride:

    def test_override_used_verbatim(self):
        choice = select_model(_shot(model=TRANSITION_MODEL, audio={"dialog": "hi", "speaker": "bob"}))
        assert choice.model == TRANSITION_MODEL
        assert choice.reason == "Explicitly specified"

    def test_unknown_override_kept_and_params_fall_back(self):
        choice = select_model(_shot(model="veo-3"))
        assert choice.model == "veo-3"
        assert get_model_spec("veo-3").name == BASE_MODEL

    def test_auto_means_no_override(self):
        assert select_model(_shot(model="auto")).model == BASE_MODEL


class TestDialogue:

    def test_on_screen_static_uses_lip_sync(self):
        choice = select_model(_speaking("Bob", "bob"))
        assert choice.model == LIP_SYNC_MODEL
        assert choice.speaker_on_screen is True

    def test_speaker_matched_by_substring(self):
        choice = select_model(_speaking("shaun", ["Shaun's mum", "Ed"]))
        assert choice.model == LIP_SYNC_MODEL

    def test_secondary_subject_counts_as_visible(self):
        shot = _speaking("ed", "shaun", subject_secondary={"who": "Ed"})
        assert select_model(shot).model == LIP_SYNC_MODEL

    def test_camera_move_flips_to_transition_model(self):
        static = select_model(_speaking("bob", "bob", movement="static"))
        moving = select_model(_speaking("bob", "bob", movement="slow dolly in"))
        assert static.model == LIP_SYNC_MODEL
        assert moving.model == TRANSITION_MODEL
        assert moving.speaker_on_screen is True

    def test_off_screen_static_is_voiceover_on_base(self):
        choice = select_model(_speaking("ed", "shaun"))
        assert choice.model == BASE_MODEL
        assert choice.speaker_on_screen is False
        assert "OFF SCREEN" in choice.reason

    def test_off_screen_with_end_frame_uses_transition(self):
        choice = select_model(_speaking("ed", "shaun", end_frame="/frames/end.jpg"))
        assert choice.model == TRANSITION_MODEL

    def test_off_screen_with_camera_move_uses_transition(self):
        assert select_model(_speaking("ed", "shaun", movement="pan left")).model == TRANSITION_MODEL

    def test_tv_speaker_is_never_on_screen(self):
        choice = select_model(_speaking("TV", ["tv", "shaun"]))
        assert choice.model == BASE_MODEL
        assert choice.speaker_on_screen is False

    def test_dialogue_without_speaker_uses_lip_sync(self):
        assert select_model(_shot(dialog="You've got red on you")).model == LIP_SYNC_MODEL

    def test_underscore_subject_still_matches_speaker(self):
        choice = select_model(_speaking("shaun", "shaun_pov"))
        assert choice.model == LIP_SYNC_MODEL
        assert choice.speaker_on_screen is True


class TestEndFrameAndMovement:

    def test_end_frame_with_camera_move(self):
        choice = select_model(_shot(end_frame="/e.jpg", camera={"movement": "orbit right"}))
        assert choice.model == TRANSITION_MODEL
        assert "movement" in choice.reason.lower()

    def test_end_frame_only(self):
        choice = select_model(_shot(end_frame="/e.jpg"))
        assert choice.model == TRANSITION_MODEL
        assert "end frame" in choice.reason.lower()

    def test_needs_end_frame_with_timing_end(self):
        choice = select_model(_shot(needs_end_frame=True, timing={"start_frame": 1, "end_frame": 9}))
        assert choice.model == TRANSITION_MODEL
        assert choice.reason == "Has end frame - state change"

    def test_needs_end_frame_without_timing_end_is_base(self):
        assert select_model(_shot(needs_end_frame=True)).model == BASE_MODEL

    def test_motion_prompt_used_when_camera_movement_missing(self):
        choice = select_model(_shot(end_frame="/e.jpg", motion_prompt="slow push in on the door"))
        assert choice.reason == "Camera movement needs start+end frame"

    def test_camera_move_without_end_frame_is_base(self):
        assert select_model(_shot(camera={"movement": "crane up"})).model == BASE_MODEL

    def test_default_is_base(self):
        assert select_model(_shot()).model == BASE_MODEL


@pytest.mark.parametrize(
    "text,expected",
    [
        ("slow dolly in", True),
        ("Tracking shot left", True),
        ("whip_pan", True),
        ("ZOOM_OUT", True),
        ("static", False),
        ("companion walks in", False),
        ("", False),
        (None, False),
    ],
)
def test_is_moving_camera(text, expected):
    assert is_moving_camera(text) is expected


class TestClampDuration:

    def test_clamped_to_model_max(self):
        assert clamp_duration(8, MODEL_SPECS[LIP_SYNC_MODEL]) == 5.0

    def test_within_max_kept(self):
        assert clamp_duration(7, MODEL_SPECS[BASE_MODEL]) == 7.0

    def test_missing_or_zero_uses_default(self):
        assert clamp_duration(None, MODEL_SPECS[BASE_MODEL]) == 5.0
        assert clamp_duration(0, MODEL_SPECS[BASE_MODEL], default=3.0) == 3.0
