EXTRACT_TEXT_PROMPT = (
    "Extract all text content from the following document. If the document is a DOC/DOCX, "
    "it will be provided in a compatible format. For all file types, extract the raw text "
    "content accurately."
)


def build_quiz_prompt(text: str, num_questions: int) -> str:
    return f"""
You are an expert educator creating a multiple-choice quiz to test understanding of the text below.

Generate **exactly** {num_questions} questions.

Requirements for each question object:
- question: The question prompt (string).
- answers: 4 distinct answer choices (array of strings), in the order they should be shown.
- correctAnswer: The correct choice, copied exactly from `answers`.

Questions must be answerable using only the provided text.

Output format must be **exactly** a JSON object that looks like this:

{{
  "quiz": [
    {{
      "question": "…",
      "answers": ["…", "…", "…", "…"],
      "correctAnswer": "…"
    }}
  ]
}}

Do **not** include any commentary.

Text:
\"\"\"
{text}
\"\"\"
"""
