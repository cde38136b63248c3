"""
Tests for shot chaining (continuing from the previous shot's last frame).
"""
import pytest

from models.scene import Shot
from planner.chaining import (
    chain_summary,
    frame_gap,
    is_breaking_transition,
    resolve_chains,
    should_chain,
)


def _shot(
    shot_id: str,
    start: int | None = None,
    end: int | None = None,
    location: str | None = None,
    who=None,
    speaker: str | None = None,
    transition_in: str | None = None,
    transition_out: str | None = None,
) -> Shot:
    return Shot.model_validate(
        {
            "shot_id": shot_id,
            "timing": {"start_frame": start, "end_frame": end},
            "environment": {"location": location},
            "subject_primary": {"who": who},
            "audio": {"speaker": speaker},
            "transition_in": transition_in,
            "transition_out": transition_out,
        }
    )


class TestFrameGap:

    @pytest.mark.parametrize("start", [11, 10, 5])
    def test_adjacent_or_overlapping_always_chain(self, start):
        prev = _shot("a", 1, 10, location="pub", who="shaun")
        curr = _shot("b", start, 30, location="street", who="liz")
        assert should_chain(prev, curr).chain is True

    def test_gap_of_two_without_other_signal_does_not_chain(self):
        prev = _shot("a", 1, 10, location="pub", who="shaun")
        curr = _shot("b", 12, 30, location="street", who="liz")
        assert should_chain(prev, curr).chain is False

    @pytest.mark.parametrize(
        "prev_out,curr_in",
        [("dissolve", None), (None, "whip-pan"), ("Fade to black", None), (None, "WIPE")],
    )
    def test_breaking_transition_blocks_adjacent_chain(self, prev_out, curr_in):
        prev = _shot("a", 1, 10, transition_out=prev_out)
        curr = _shot("b", 11, 30, transition_in=curr_in)
        assert should_chain(prev, curr).chain is False

    def test_missing_timing_has_no_gap(self):
        prev = _shot("a", location="pub", who="shaun")
        curr = _shot("b", location="street", who="liz")
        assert frame_gap(prev, curr) is None
        assert should_chain(prev, curr).chain is False


class TestLocationAndSubjects:

    def test_same_location_with_overlapping_subject(self):
        prev = _shot("a", 1, 10, location="Pub", who="Shaun")
        curr = _shot("b", 50, 60, location="pub", who=["shaun", "Ed"])
        decision = should_chain(prev, curr)
        assert decision.chain is True
        assert "same location" in decision.reason

    def test_subject_overlap_is_substring_either_way(self):
        prev = _shot("a", 1, 10, location="flat", who="Shaun's mum")
        curr = _shot("b", 50, 60, location="flat", who="shaun")
        assert should_chain(prev, curr).chain is True

    def test_same_location_without_overlap(self):
        prev = _shot("a", 1, 10, location="pub", who="shaun")
        curr = _shot("b", 50, 60, location="pub", who="liz")
        assert should_chain(prev, curr).chain is False

    def test_placeholder_subjects_never_overlap(self):
        prev = _shot("a", 1, 10, location="pub", who="transition_blur")
        curr = _shot("b", 50, 60, location="pub", who="transition_blur")
        assert should_chain(prev, curr).chain is False

    def test_breaking_transition_blocks_location_chain(self):
        prev = _shot("a", 1, 10, location="pub", who="shaun")
        curr = _shot("b", 50, 60, location="pub", who="shaun", transition_in="dissolve")
        assert should_chain(prev, curr).chain is False


class TestSpeaker:

    def test_same_speaker_within_two_frames(self):
        prev = _shot("a", 1, 10, location="pub", speaker="Ed")
        curr = _shot("b", 12, 20, location="street", speaker="ed")
        decision = should_chain(prev, curr)
        assert decision.chain is True
        assert "speaker" in decision.reason

    def test_same_speaker_too_far_apart(self):
        prev = _shot("a", 1, 10, speaker="ed")
        curr = _shot("b", 13, 20, speaker="ed")
        assert should_chain(prev, curr).chain is False


class TestResolveChains:

    def test_first_shot_never_chains(self):
        first = _shot("a", 1, 10).model_copy(update={"chain_from_previous": True})
        resolved = resolve_chains([first])
        assert resolved[0].chain_from_previous is False
        assert resolved[0].chain_ref is None

    def test_chain_ref_points_to_previous_end_frame(self):
        shots = [_shot("a", 1, 10), _shot("b", 11, 20), _shot("c", 90, 99)]
        resolved = resolve_chains(shots)
        assert [s.chain_from_previous for s in resolved] == [False, True, False]
        assert resolved[1].chain_ref.from_shot == "a"
        assert resolved[1].chain_ref.use_frame == 10
        assert resolved[2].chain_ref is None

    def test_input_not_mutated(self):
        shots = [_shot("a", 1, 10), _shot("b", 11, 20)]
        resolve_chains(shots)
        assert shots[1].chain_from_previous is False

    def test_chain_summary(self):
        resolved = resolve_chains([_shot("a", 1, 10), _shot("b", 11, 20), _shot("c", 21, 30)])
        assert chain_summary(resolved) == {"chained": 2, "standalone": 1}


def test_is_breaking_transition():
    assert is_breaking_transition("whip_pan")
    assert is_breaking_transition("Whip Pan")
    assert not is_breaking_transition("cut")
    assert not is_breaking_transition(None)
