"""Tests for explanation text parsing and prompts."""

from exam_pilot.models.profile import Language, Subject
from exam_pilot.tutor.parser import parse_explanation
from exam_pilot.tutor.prompts import (
    FALLBACK_ANSWER,
    FALLBACK_STEPS,
    build_question_prompt,
    build_system_prompt,
    fallback_explanation,
)


class TestParseExplanation:
    def test_well_formed(self):
        text = (
            "STEP 1: Write down the equation\n"
            "STEP 2: Subtract 3 from both sides\n"
            "  STEP 3:   Divide by 2  \n"
            "\n"
            "FINAL ANSWER:  x = 4 \n"
        )
        result = parse_explanation(text)
        assert result.steps == [
            "Write down the equation",
            "Subtract 3 from both sides",
            "Divide by 2",
        ]
        assert result.final_answer == "x = 4"

    def test_ignores_other_lines(self):
        text = "Great question!\nSTEP 1: Think\nSome prose\nFINAL ANSWER: 7"
        result = parse_explanation(text)
        assert result.steps == ["Think"]
        assert result.final_answer == "7"

    def test_malformed_text(self):
        result = parse_explanation("no structure at all")
        assert result.steps == []
        assert result.final_answer == ""

    def test_empty_and_none(self):
        assert parse_explanation("").steps == []
        assert parse_explanation(None).final_answer == ""

    def test_step_without_number_kept_verbatim(self):
        assert parse_explanation("STEPS are below").steps == ["STEPS are below"]

    def test_last_final_answer_wins(self):
        text = "FINAL ANSWER: 1\nFINAL ANSWER: 2"
        assert parse_explanation(text).final_answer == "2"


class TestFallback:
    def test_english_template_parses(self):
        result = parse_explanation(fallback_explanation(Language.EN))
        assert result.steps == FALLBACK_STEPS[Language.EN]
        assert len(result.steps) == 4
        assert result.final_answer == FALLBACK_ANSWER[Language.EN]

    def test_arabic_template_parses(self):
        result = parse_explanation(fallback_explanation(Language.AR))
        assert result.steps == FALLBACK_STEPS[Language.AR]
        assert result.final_answer == FALLBACK_ANSWER[Language.AR]


class TestPrompts:
    def test_question_prompt_english(self):
        prompt = build_question_prompt("Solve 2x = 4", Subject.MATH, Language.EN)
        assert "IGCSE math teacher" in prompt
        assert "Question: Solve 2x = 4" in prompt
        assert "FINAL ANSWER:" in prompt
        assert "Arabic" not in prompt

    def test_question_prompt_arabic(self):
        prompt = build_question_prompt("q", Subject.CHEMISTRY, Language.AR)
        assert "in Arabic" in prompt
        assert "Write the entire response in Arabic." in prompt

    def test_system_prompt(self):
        assert "Arabic" not in build_system_prompt(Language.EN)
        assert build_system_prompt(Language.AR).endswith("Respond in Arabic.")
