import random

import pytest

from speedread.pacing import (
    DelayOptions,
    base_delay,
    calculate_word_delay,
    playback_delay,
    sentence_context,
)


class TestBaseDelay:
    def test_milliseconds_per_word(self) -> None:
        assert base_delay(300) == pytest.approx(200.0)
        assert base_delay(600) == pytest.approx(100.0)

    def test_rate_is_clamped(self) -> None:
        assert base_delay(0) == pytest.approx(600.0)
        assert base_delay(5000) == pytest.approx(40.0)


class TestStandardPath:
    def test_neutral_word(self, fixed_rng) -> None:
        assert calculate_word_delay("word", 300, rng=fixed_rng) == pytest.approx(200.0)

    def test_higher_rate_is_faster(self, fixed_rng) -> None:
        assert calculate_word_delay("elephant", 600, rng=fixed_rng) < calculate_word_delay("elephant", 300, rng=fixed_rng)

    def test_function_words_glide(self, fixed_rng) -> None:
        """Short function words are shown for less time than content words."""
        the = calculate_word_delay("the", 300, rng=fixed_rng)
        elephant = calculate_word_delay("elephant", 300, rng=fixed_rng)
        assert the == pytest.approx(120.0)
        assert elephant == pytest.approx(230.0)
        assert the < elephant

    def test_classification_ignores_punctuation(self, fixed_rng) -> None:
        """Punctuated function words and clause openers are still recognised."""
        assert calculate_word_delay("the,", 300, rng=fixed_rng) == pytest.approx(200 * (0.6 + 0.3))
        options = DelayOptions(next_word="(because")
        assert calculate_word_delay("word", 300, options, fixed_rng) == pytest.approx(220.0)

    def test_longer_function_word(self, fixed_rng) -> None:
        assert calculate_word_delay("would", 300, rng=fixed_rng) == pytest.approx(150.0)

    def test_long_word_dwell_scales_with_length(self, fixed_rng) -> None:
        # 13 letters: 1.15 + 5 * 0.04
        assert calculate_word_delay("extraordinary", 300, rng=fixed_rng) == pytest.approx(270.0)

    def test_punctuation_pause_ordering(self, fixed_rng) -> None:
        plain = calculate_word_delay("elephant", 300, rng=fixed_rng)
        comma = calculate_word_delay("elephant,", 300, rng=fixed_rng)
        period = calculate_word_delay("elephant.", 300, rng=fixed_rng)
        assert period > comma > plain
        assert period == pytest.approx(200 * (1.15 + 0.85))
        assert comma == pytest.approx(200 * (1.15 + 0.3))

    def test_dash_pause(self, fixed_rng) -> None:
        assert calculate_word_delay("word—", 300, rng=fixed_rng) == pytest.approx(280.0)

    def test_phrase_boundary_pause(self, fixed_rng) -> None:
        """Clause openers pause mid-sentence but not at the start of a sentence."""
        mid = calculate_word_delay("however", 300, rng=fixed_rng)
        first = calculate_word_delay("however", 300, DelayOptions(is_first_of_sentence=True), fixed_rng)
        assert mid == pytest.approx(250.0)
        assert first == pytest.approx(240.0)

    def test_lookahead(self, fixed_rng) -> None:
        before_boundary = calculate_word_delay("word", 300, DelayOptions(next_word="because"), fixed_rng)
        before_long = calculate_word_delay("word", 300, DelayOptions(next_word="extraordinarily"), fixed_rng)
        assert before_boundary == pytest.approx(220.0)
        assert before_long == pytest.approx(216.0)

    def test_sentence_position(self, fixed_rng) -> None:
        after_comma = calculate_word_delay("word", 300, DelayOptions(is_after_comma=True), fixed_rng)
        cruising = calculate_word_delay("word", 300, DelayOptions(words_into_sentence=3), fixed_rng)
        tired = calculate_word_delay("word", 300, DelayOptions(words_into_sentence=20), fixed_rng)
        assert after_comma == pytest.approx(224.0)
        assert cruising == pytest.approx(190.0)
        assert tired == pytest.approx(216.0)

    def test_capitalised_word_mid_sentence(self, fixed_rng) -> None:
        assert calculate_word_delay("London", 300, rng=fixed_rng) == pytest.approx(230.0)
        first = DelayOptions(is_first_of_sentence=True)
        assert calculate_word_delay("London", 300, first, fixed_rng) == pytest.approx(240.0)

    def test_numbers(self, fixed_rng) -> None:
        assert calculate_word_delay("42", 300, rng=fixed_rng) == pytest.approx(300.0)
        assert calculate_word_delay("4th", 300, rng=fixed_rng) == pytest.approx(270.0)

    def test_opening_quote(self, fixed_rng) -> None:
        assert calculate_word_delay('"word', 300, rng=fixed_rng) == pytest.approx(220.0)

    def test_chunk_scaling(self, fixed_rng) -> None:
        assert calculate_word_delay("word", 300, DelayOptions(chunk_size=2), fixed_rng) == pytest.approx(260.0)

    def test_breathing_wave(self, fixed_rng) -> None:
        delay = calculate_word_delay("word", 300, DelayOptions(word_position=4), fixed_rng)
        assert delay == pytest.approx(200.0 * (1 + 0.05 * 0.9995736), rel=1e-6)

    def test_micro_variation_is_bounded(self) -> None:
        rng = random.Random(1234)
        for _ in range(200):
            delay = calculate_word_delay("word", 300, rng=rng)
            assert 200.0 * 0.97 <= delay <= 200.0 * 1.03

    def test_seeded_source_is_repeatable(self) -> None:
        first = [calculate_word_delay("word", 300, rng=random.Random(7)) for _ in range(3)]
        assert len(set(first)) == 1

    def test_empty_word(self, fixed_rng) -> None:
        assert calculate_word_delay("", 300, rng=fixed_rng) == pytest.approx(200.0)


class TestContextPath:
    def test_sentence_end(self) -> None:
        assert calculate_word_delay("end.", 300, DelayOptions(context_mode=True)) == pytest.approx(360.0)

    def test_speed_chunk_and_clause(self) -> None:
        options = DelayOptions(context_mode=True, speed_multiplier=2.0, chunk_size=3)
        assert calculate_word_delay("pause,", 300, options) == pytest.approx(100.0 * 1.6 * 1.3)

    def test_ignores_word_class(self) -> None:
        options = DelayOptions(context_mode=True)
        assert calculate_word_delay("the", 300, options) == calculate_word_delay("extraordinary", 300, options)


class TestSentenceContext:
    tokens = ["It", "was", "late,", "and", "dark.", "Then", "rain"]

    def test_first_token(self) -> None:
        ctx = sentence_context(self.tokens, 0)
        assert ctx.is_first_of_sentence
        assert not ctx.is_after_comma
        assert ctx.words_into_sentence == 0
        assert ctx.next_word == "was"
        assert ctx.word_position == 0

    def test_after_comma(self) -> None:
        ctx = sentence_context(self.tokens, 3)
        assert not ctx.is_first_of_sentence
        assert ctx.is_after_comma
        assert ctx.words_into_sentence == 3
        assert ctx.next_word == "dark."

    def test_new_sentence(self) -> None:
        ctx = sentence_context(self.tokens, 5)
        assert ctx.is_first_of_sentence
        assert ctx.words_into_sentence == 0

    def test_last_token(self) -> None:
        ctx = sentence_context(self.tokens, 6)
        assert ctx.words_into_sentence == 1
        assert ctx.next_word == ""

    def test_overrides_pass_through(self) -> None:
        ctx = sentence_context(self.tokens, 1, chunk_size=3, context_mode=True)
        assert ctx.chunk_size == 3
        assert ctx.context_mode


class TestPlaybackDelay:
    tokens = ["Alpha", "beta.", "Gamma", "delta."]

    def test_paragraph_start_pause(self, fixed_rng) -> None:
        """Paragraph starts after the first token get 20% more time."""
        plain = calculate_word_delay("Gamma", 300, sentence_context(self.tokens, 2), fixed_rng)
        assert playback_delay(self.tokens, {0, 2}, 2, 300, rng=fixed_rng) == pytest.approx(plain * 1.2)
        assert playback_delay(self.tokens, set(), 2, 300, rng=fixed_rng) == pytest.approx(plain)

    def test_first_token_has_no_paragraph_pause(self, fixed_rng) -> None:
        plain = calculate_word_delay("Alpha", 300, sentence_context(self.tokens, 0), fixed_rng)
        assert playback_delay(self.tokens, {0}, 0, 300, rng=fixed_rng) == pytest.approx(plain)

    def test_spotlight_uses_constant_timing(self) -> None:
        delay = playback_delay(self.tokens, set(), 1, 300, context_mode=True, spotlight=True, speed_multiplier=2.0)
        assert delay == pytest.approx(100.0)

    def test_out_of_range_index(self, fixed_rng) -> None:
        assert playback_delay(self.tokens, set(), 10, 300, rng=fixed_rng) > 0
