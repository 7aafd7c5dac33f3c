import json

import pytest

from quizify.errors import InputValidationError, QuizSchemaError, UpstreamServiceError
from quizify.services.quiz_generator import generate_quiz, parse_quiz_response


def _question(i, correct=None):
    return {
        "question": f"What is item {i}?",
        "answers": [f"a{i}", f"b{i}", f"c{i}", f"d{i}"],
        "correctAnswer": correct or f"a{i}",
    }


def _quiz_json(count=5, **overrides):
    questions = [_question(i) for i in range(count)]
    for index, value in overrides.items():
        questions[int(index.lstrip("q"))] = value
    return json.dumps({"quiz": questions})


class TestParseQuizResponse:
    def test_valid_response(self):
        result = parse_quiz_response(_quiz_json(5))

        assert len(result.quiz) == 5
        assert result.quiz[0].question == "What is item 0?"
        assert result.quiz[0].answers == ("a0", "b0", "c0", "d0")
        assert result.quiz[0].correct_answer == "a0"

    def test_code_fences_are_stripped(self):
        result = parse_quiz_response("```json\n" + _quiz_json(5) + "\n```")

        assert len(result.quiz) == 5

    def test_bare_list_is_accepted(self):
        result = parse_quiz_response(json.dumps([_question(0), _question(1)]))

        assert len(result.quiz) == 2

    def test_whitespace_is_normalized(self):
        raw = json.dumps({"quiz": [{
            "question": "  Which   one? ",
            "answers": ["first  answer", "second"],
            "correctAnswer": "first answer ",
        }]})

        question = parse_quiz_response(raw).quiz[0]

        assert question.question == "Which one?"
        assert question.correct_answer == "first answer"

    def test_invalid_json_fails(self):
        with pytest.raises(QuizSchemaError):
            parse_quiz_response("Here is your quiz: {")

    def test_correct_answer_outside_answers_fails_whole_quiz(self):
        bad = _question(3, correct="not listed")

        with pytest.raises(QuizSchemaError):
            parse_quiz_response(_quiz_json(5, q3=bad))

    def test_missing_field_fails(self):
        bad = {"question": "Q?", "answers": ["x", "y"]}

        with pytest.raises(QuizSchemaError):
            parse_quiz_response(_quiz_json(5, q0=bad))

    def test_duplicate_answers_fail(self):
        bad = {"question": "Q?", "answers": ["x", "x"], "correctAnswer": "x"}

        with pytest.raises(QuizSchemaError):
            parse_quiz_response(_quiz_json(5, q1=bad))

    def test_empty_quiz_fails(self):
        with pytest.raises(QuizSchemaError):
            parse_quiz_response(json.dumps({"quiz": []}))

    def test_schema_error_is_an_upstream_error(self):
        with pytest.raises(UpstreamServiceError):
            parse_quiz_response("[]")


class TestGenerateQuiz:
    def test_prompt_carries_text_and_count(self, fake_model_factory, source_text):
        model = fake_model_factory(text=_quiz_json(7))

        result = generate_quiz(source_text, 7, model=model)

        assert len(result.quiz) == 7
        call = model.calls[0]
        assert source_text in call.contents
        assert "exactly** 7 questions" in call.contents
        assert call.kwargs["generation_config"] == {"response_mime_type": "application/json"}

    def test_count_mismatch_is_accepted(self, fake_model_factory, source_text):
        model = fake_model_factory(text=_quiz_json(5))

        result = generate_quiz(source_text, 6, model=model)

        assert len(result.quiz) == 5

    @pytest.mark.parametrize("count", [4, 51, 0])
    def test_count_out_of_range_rejected(self, fake_model_factory, source_text, count):
        model = fake_model_factory(text=_quiz_json(5))

        with pytest.raises(InputValidationError):
            generate_quiz(source_text, count, model=model)
        assert model.calls == []

    def test_blank_text_rejected(self, fake_model_factory):
        model = fake_model_factory(text=_quiz_json(5))

        with pytest.raises(InputValidationError):
            generate_quiz("   ", 5, model=model)

    def test_upstream_failure_propagates(self, fake_model_factory, source_text):
        model = fake_model_factory(error=RuntimeError("quota exceeded"))

        with pytest.raises(UpstreamServiceError) as excinfo:
            generate_quiz(source_text, 5, model=model)

        assert excinfo.value.public_message == "Failed to generate quiz"
        assert excinfo.value.detail == "quota exceeded"

    def test_malformed_model_output_fails_loudly(self, fake_model_factory, source_text):
        model = fake_model_factory(text='{"quiz": [{"question": "only a prompt"}]}')

        with pytest.raises(QuizSchemaError):
            generate_quiz(source_text, 5, model=model)
