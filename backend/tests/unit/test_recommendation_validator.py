"""
Unit tests for the recommendation validator.

Every predicate is exercised on its own, plus ordering, the cap and the
documented length / sentence boundaries.
"""

import pytest

from backend.app.core.recommendation_validator import (
    MAX_RECOMMENDATIONS,
    count_sentences,
    keyword_in_text,
    rejection_reason,
    validate_recommendations,
)

JOB_DESCRIPTION = (
    "Acme Corp is hiring a Backend Engineer. You will build REST APIs with Python and FastAPI, "
    "run services on Kubernetes and own our continuous integration pipelines. "
    "Experience with PostgreSQL is a plus."
)


def _rec(**overrides):
    rec = {
        "section": "Experience",
        "location": "Software Engineer at Initech",
        "currentText": "Built APIs in Python.",
        "suggestedText": "Built REST APIs in Python and FastAPI.",
        "keywords": ["FastAPI", "REST APIs"],
        "reason": "The posting asks for FastAPI.",
    }
    rec.update(overrides)
    return rec


def _sentences(n):
    return " ".join(f"Sentence number {i}." for i in range(n))


class TestCountSentences:
    def test_counts_terminal_punctuation_runs(self):
        assert count_sentences("One. Two! Three?") == 3

    def test_repeated_punctuation_is_one_boundary(self):
        assert count_sentences("Wow!!! Really?!") == 2

    def test_trailing_fragment_counts(self):
        assert count_sentences("Led a team. Shipped features") == 2

    def test_no_punctuation_is_one_sentence(self):
        assert count_sentences("Python, SQL, Docker") == 1

    def test_empty(self):
        assert count_sentences("   ") == 0


class TestKeywordInText:
    def test_substring_case_insensitive(self):
        assert keyword_in_text("fastapi", JOB_DESCRIPTION.lower())

    def test_multi_word_matched_per_word(self):
        # "Python APIs" never appears verbatim, but both words do
        assert keyword_in_text("Python APIs", JOB_DESCRIPTION.lower())

    def test_multi_word_ignores_short_words(self):
        assert keyword_in_text("CI on Kubernetes", "we use kubernetes and ci")

    def test_multi_word_with_missing_word_fails(self):
        assert not keyword_in_text("Python Django", JOB_DESCRIPTION.lower())

    def test_single_word_missing_fails(self):
        assert not keyword_in_text("Terraform", JOB_DESCRIPTION.lower())

    def test_blank_keyword_fails(self):
        assert not keyword_in_text("  ", JOB_DESCRIPTION.lower())


class TestRejections:
    def test_valid_recommendation_passes(self):
        assert rejection_reason(_rec(), JOB_DESCRIPTION.lower()) is None

    def test_non_dict_rejected(self):
        assert rejection_reason("not a dict", JOB_DESCRIPTION.lower())

    @pytest.mark.parametrize("field", ["section", "location", "currentText", "suggestedText", "reason"])
    def test_missing_text_field_rejected(self, field):
        rec = _rec()
        del rec[field]
        assert rejection_reason(rec, JOB_DESCRIPTION.lower())

    def test_keywords_must_be_list_of_strings(self):
        assert rejection_reason(_rec(keywords="FastAPI"), JOB_DESCRIPTION.lower())
        assert rejection_reason(_rec(keywords=["FastAPI", 3]), JOB_DESCRIPTION.lower())

    def test_identical_after_trim_rejected(self):
        rec = _rec(currentText="Built APIs in Python.", suggestedText="  Built APIs in Python.  ")
        assert "identical" in rejection_reason(rec, JOB_DESCRIPTION.lower())

    def test_empty_suggestion_rejected(self):
        assert rejection_reason(_rec(suggestedText="   "), JOB_DESCRIPTION.lower())

    def test_empty_keywords_rejected(self):
        assert rejection_reason(_rec(keywords=[]), JOB_DESCRIPTION.lower()) == "no keywords"

    def test_keyword_absent_from_job_description_rejected(self):
        rec = _rec(keywords=["FastAPI", "Terraform"])
        assert "Terraform" in rejection_reason(rec, JOB_DESCRIPTION.lower())

    @pytest.mark.parametrize(
        "reason",
        [
            "Nothing to change here",
            "No change needed.",
            "This bullet is ALREADY GOOD",
            "Already optimal",
            "no changes required",
            "No modification needed",
            "The keyword is already present",
            "Already contains FastAPI",
            "Already includes the keyword",
            "No improvement needed",
        ],
    )
    def test_no_change_reasons_rejected(self, reason):
        assert rejection_reason(_rec(reason=reason), JOB_DESCRIPTION.lower())


class TestBoundaries:
    def test_exactly_300_chars_passes(self):
        text = "Built REST APIs in Python " + "x" * (300 - len("Built REST APIs in Python "))
        assert len(text) == 300
        assert rejection_reason(_rec(suggestedText=text), JOB_DESCRIPTION.lower()) is None

    def test_301_chars_fails(self):
        text = "Built REST APIs in Python " + "x" * (301 - len("Built REST APIs in Python "))
        assert len(text) == 301
        assert "300" in rejection_reason(_rec(suggestedText=text), JOB_DESCRIPTION.lower())

    def test_current_text_length_also_capped(self):
        assert rejection_reason(_rec(currentText="y" * 301), JOB_DESCRIPTION.lower())

    def test_two_sentences_pass(self):
        rec = _rec(suggestedText="Built REST APIs in FastAPI. Ran them on Kubernetes.")
        assert rejection_reason(rec, JOB_DESCRIPTION.lower()) is None

    def test_three_sentences_fail(self):
        rec = _rec(suggestedText=_sentences(3))
        assert "sentences" in rejection_reason(rec, JOB_DESCRIPTION.lower())

    def test_current_text_sentences_also_capped(self):
        rec = _rec(currentText=_sentences(3))
        assert "currentText" in rejection_reason(rec, JOB_DESCRIPTION.lower())


class TestValidateRecommendations:
    def test_preserves_order_of_survivors(self):
        items = [
            _rec(location="A"),
            _rec(location="B", keywords=["Terraform"]),
            _rec(location="C"),
            _rec(location="D", reason="already optimal"),
            _rec(location="E"),
        ]
        out = validate_recommendations(items, JOB_DESCRIPTION)
        assert [r.location for r in out] == ["A", "C", "E"]

    def test_caps_at_seven(self):
        items = [_rec(location=str(i)) for i in range(12)]
        out = validate_recommendations(items, JOB_DESCRIPTION)
        assert len(out) == MAX_RECOMMENDATIONS == 7
        assert [r.location for r in out] == [str(i) for i in range(7)]

    def test_output_is_typed_and_trimmed(self):
        out = validate_recommendations([_rec(suggestedText="  Built REST APIs in FastAPI.  ")], JOB_DESCRIPTION)
        assert out[0].suggested_text == "Built REST APIs in FastAPI."
        assert out[0].model_dump(by_alias=True)["suggestedText"] == "Built REST APIs in FastAPI."

    def test_accepted_items_satisfy_invariants(self):
        items = [
            _rec(),
            _rec(currentText="Same text.", suggestedText="Same text."),
            _rec(keywords=["GraphQL"]),
            _rec(keywords=["kubernetes", "continuous integration"]),
        ]
        out = validate_recommendations(items, JOB_DESCRIPTION)
        assert len(out) == 2
        for r in out:
            assert r.current_text != r.suggested_text.strip()
            assert r.keywords
            assert all(keyword_in_text(k, JOB_DESCRIPTION.lower()) for k in r.keywords)

    def test_garbage_items_are_skipped(self):
        out = validate_recommendations([None, 42, "text", _rec()], JOB_DESCRIPTION)
        assert len(out) == 1

    def test_empty_input(self):
        assert validate_recommendations([], JOB_DESCRIPTION) == []
