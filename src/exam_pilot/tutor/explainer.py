"""OpenAI-backed explanation service client."""

import structlog
from openai import AsyncOpenAI, OpenAIError

from exam_pilot.errors import ServiceUnavailableError
from exam_pilot.models.profile import Language, Subject
from exam_pilot.tutor.prompts import build_question_prompt, build_system_prompt

logger = structlog.get_logger()


class Explainer:
    """Requests step-by-step explanations from a chat completion model.

    Args:
        api_key: OpenAI API key. When None, every call raises
            ``ServiceUnavailableError`` so callers fall back.
        model: Chat model to use.
        temperature: Sampling temperature.
        max_tokens: Completion token cap.
        timeout: Request timeout in seconds (None keeps the client default).
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-3.5-turbo",
        temperature: float = 0.7,
        max_tokens: int = 1500,
        timeout: float | None = None,
    ):
        self.client: AsyncOpenAI | None = None
        if api_key:
            client_kwargs = {"timeout": timeout} if timeout is not None else {}
            self.client = AsyncOpenAI(api_key=api_key, **client_kwargs)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _user_content(self, prompt: str, image: str | None) -> str | list[dict]:
        if image is None:
            return prompt
        return [
            {"type": "text", "text": prompt},
            {"type": "image_url", "image_url": {"url": image}},
        ]

    async def explain(
        self,
        question: str,
        subject: Subject,
        language: Language,
        image: str | None = None,
    ) -> str:
        """Return the raw explanation text for a question.

        Args:
            question: Question text (or a placeholder label for image questions).
            subject: Question subject.
            language: Locale to answer in.
            image: Optional image as a data URL or https URL.

        Raises:
            ServiceUnavailableError: No client is configured, the request failed,
                or the response had no content.
        """
        if self.client is None:
            raise ServiceUnavailableError("Explanation service is not configured.")

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": build_system_prompt(language)},
                    {
                        "role": "user",
                        "content": self._user_content(
                            build_question_prompt(question, subject, language), image
                        ),
                    },
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            logger.exception("explanation_request_failed")
            raise ServiceUnavailableError("Explanation request failed.") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ServiceUnavailableError("Explanation service returned no content.")
        logger.info("explanation_received", subject=str(subject), chars=len(content))
        return content

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()
