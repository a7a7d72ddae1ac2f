"""Shared test fixtures for the subtitle_burner test suite.

WHY: Most test modules need the same small timeline: a few plain cues and
one karaoke cue with per-word timing. Ids must be predictable so tests can
name the cue a split or add created.

HOW: make_id_factory() returns a counter-based id generator; fixtures
build engines around it and provide the sample cues and states.

RULES:
- Generated ids are "cue-1", "cue-2", ... in call order per fixture
- sample_cues: "a" [0, 2), "b" [2, 4), "c" [5, 8), no word timing
- karaoke_cue: "Hello" 0-1, "beautiful" 1-2, "world" 2-3, style karaoke
"""

import itertools
from typing import Callable

import pytest

from subtitle_burner.core.models import AnimationStyle, ProjectState, SubtitleCue, SubtitleWord
from subtitle_burner.core.subtitle_engine import SubtitleEngine


def make_id_factory(prefix: str = "cue") -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


@pytest.fixture
def make_ids():
    """The id-factory constructor, for tests that need their own prefix."""
    return make_id_factory


@pytest.fixture
def id_factory():
    return make_id_factory()


@pytest.fixture
def engine(id_factory):
    """SubtitleEngine whose ids are cue-1, cue-2, ..."""
    return SubtitleEngine(id_factory=id_factory)


@pytest.fixture
def sample_cues():
    return (
        SubtitleCue(id="a", start_time=0.0, end_time=2.0, text="First"),
        SubtitleCue(id="b", start_time=2.0, end_time=4.0, text="Second"),
        SubtitleCue(id="c", start_time=5.0, end_time=8.0, text="Third"),
    )


@pytest.fixture
def karaoke_words():
    return (
        SubtitleWord(text="Hello", start_time=0.0, end_time=1.0),
        SubtitleWord(text="beautiful", start_time=1.0, end_time=2.0),
        SubtitleWord(text="world", start_time=2.0, end_time=3.0),
    )


@pytest.fixture
def karaoke_cue(karaoke_words):
    return SubtitleCue(
        id="k",
        start_time=0.0,
        end_time=3.0,
        text="Hello beautiful world",
        words=karaoke_words,
        animation_style=AnimationStyle.KARAOKE,
    )


@pytest.fixture
def project_state(sample_cues):
    return ProjectState(cues=sample_cues)
