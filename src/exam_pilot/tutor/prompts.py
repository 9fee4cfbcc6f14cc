"""Prompts and fallback content for the explanation service."""

from exam_pilot.models.profile import Language, Subject

SYSTEM_PROMPT = (
    "You are an expert IGCSE teacher who explains concepts clearly and encouragingly."
)

QUESTION_PROMPT = """\
You are an expert IGCSE {subject} teacher. Explain this problem step-by-step \
as you would to a student{language_hint}:

Question: {question}

Provide:
1. A clear, step-by-step solution
2. Explain WHY each step is done
3. Highlight any formulas or rules used
4. Give a final answer

Format as:
STEP 1: [explanation]
STEP 2: [explanation]
...
FINAL ANSWER: [answer]

Make it encouraging and clear.{language_footer}"""

FALLBACK_STEPS: dict[Language, list[str]] = {
    Language.EN: [
        "Read the question carefully and understand what is being asked",
        "Identify the key concepts and formulas needed",
        "Apply the appropriate method step by step",
        "Verify your answer makes sense",
    ],
    Language.AR: [
        "اقرأ السؤال وفهم ما يُطلب",
        "حدد المفاهيم والمعادلات المطلوبة",
        "طبق الطريقة المناسبة خطوة بخطوة",
        "تحقق من أن إجابتك منطقية",
    ],
}

FALLBACK_ANSWER: dict[Language, str] = {
    Language.EN: "Solution completed! Check the steps above.",
    Language.AR: "تم إكمال الحل! راجع الخطوات أعلاه.",
}


def build_system_prompt(language: Language) -> str:
    if language == Language.AR:
        return SYSTEM_PROMPT + " Respond in Arabic."
    return SYSTEM_PROMPT


def build_question_prompt(question: str, subject: Subject, language: Language) -> str:
    arabic = language == Language.AR
    return QUESTION_PROMPT.format(
        subject=Subject(subject).value,
        question=question,
        language_hint=" in Arabic" if arabic else "",
        language_footer=" Write the entire response in Arabic." if arabic else "",
    )


def fallback_explanation(language: Language) -> str:
    """Generic four-step explanation in the service's line format."""
    language = Language(language)
    lines = [
        f"STEP {i}: {step}" for i, step in enumerate(FALLBACK_STEPS[language], start=1)
    ]
    lines.append("")
    lines.append(f"FINAL ANSWER: {FALLBACK_ANSWER[language]}")
    return "\n".join(lines)
