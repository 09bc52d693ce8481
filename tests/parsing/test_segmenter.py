from __future__ import annotations

from what_should_i_do.config.profiles import RuleConfig
from what_should_i_do.parsing.segmenter import is_header, iter_sentences, segment, split_sentences


def test_split_sentences_on_terminal_punctuation() -> None:
    assert split_sentences("One. Two! Three? Four") == ["One.", "Two!", "Three?", "Four"]
    assert split_sentences("") == []


def test_segment_drops_headers_and_short_sentences() -> None:
    text = "Re: Class suspension. Classes are suspended tomorrow for all levels. Ok."
    assert segment(text) == ["Classes are suspended tomorrow for all levels."]


def test_segment_keeps_short_sentences_when_nothing_else_survives() -> None:
    assert segment("Call me. Thanks.") == ["Call me.", "Thanks."]


def test_segment_skips_near_duplicates() -> None:
    text = "Submit the form by Friday. submit the form  by friday!"
    assert segment(text) == ["Submit the form by Friday."]


def test_minimum_length_comes_from_config() -> None:
    text = "Bring your own lunch today. Classes start at nine in the morning."
    strict = RuleConfig(min_sentence_length=30)

    assert segment(text) == ["Bring your own lunch today.", "Classes start at nine in the morning."]
    assert segment(text, strict) == ["Classes start at nine in the morning."]


def test_iter_sentences_is_lazy() -> None:
    it = iter_sentences("Please attend the meeting tomorrow morning.")
    assert next(it) == "Please attend the meeting tomorrow morning."


def test_is_header() -> None:
    assert is_header("TO: All Teachers")
    assert is_header("Subject : Weather advisory")
    assert is_header("Office of the Mayor announces the following")
    assert not is_header("Please attend the meeting.")
