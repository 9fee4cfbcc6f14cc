"""Parse line-oriented explanation text into steps and a final answer."""

import re

from exam_pilot.models.question import Explanation

_STEP_PREFIX = re.compile(r"^STEP \d+:\s*")
_FINAL_PREFIX = "FINAL ANSWER:"


def parse_explanation(text: str | None) -> Explanation:
    """Split raw service output into an ``Explanation``.

    Lines starting with ``STEP`` become steps (the ``STEP n:`` prefix is
    stripped); a line starting with ``FINAL ANSWER:`` sets the final answer,
    the last one winning. Anything else is ignored, so malformed text gives
    empty steps and an empty answer rather than an error.
    """
    steps: list[str] = []
    final_answer = ""
    for line in (text or "").splitlines():
        stripped = line.strip()
        if stripped.startswith("STEP"):
            steps.append(_STEP_PREFIX.sub("", stripped, count=1))
        elif stripped.startswith(_FINAL_PREFIX):
            final_answer = stripped[len(_FINAL_PREFIX):].strip()
    return Explanation(steps=steps, final_answer=final_answer)
