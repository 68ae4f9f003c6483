"""
Quiz Generator

Generates multiple-choice questions from study notes using LiteLLM, with
a deterministic offline fallback.

Strategy:
1. Walk settings.QUIZ_MODELS in order ("provider/model" strings).
2. Skip a model whose provider API key is not configured.
3. Call the model, retrying with exponential backoff (tenacity) on API
   errors, unparseable JSON or an empty question list.
4. The first model that yields valid questions wins.
5. When every model fails (or none is configured) return templated
   questions built from the notes. Generation never fails the request.

A question is valid when it has text, exactly four options and a
correctOptionIndex between 0 and 3. Invalid entries are dropped.

Usage:
    from study_tracker.services.quiz import QuizGenerator

    generator = QuizGenerator()
    response = await generator.generate(notes, num_questions=5)
    response.questions, response.provider, response.is_fallback
"""

import json
import logging
import os
import re
from typing import Any, Optional

from litellm import acompletion
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    stop_after_attempt,
    wait_exponential,
)

from study_tracker.config import settings
from study_tracker.middleware.error_handling import LLMError
from study_tracker.models.quiz import QuizGenerateResponse, QuizQuestion
from study_tracker.services.quiz.prompts import (
    FALLBACK_EXPLANATION,
    FALLBACK_OPTIONS,
    FALLBACK_QUESTION_TEMPLATE,
    QUIZ_GENERATION_PROMPT,
    QUIZ_SYSTEM_PROMPT,
)

logger = logging.getLogger(__name__)

# LiteLLM provider prefix -> settings attribute holding its API key
PROVIDER_API_KEYS = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
}

_CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


class QuizParseError(LLMError):
    """Model output could not be turned into valid questions."""

    error_code = "quiz_parse_error"


# =============================================================================
# Parsing
# =============================================================================


def _extract_json(text: str) -> str:
    """Strip a surrounding markdown code fence if present."""
    match = _CODE_FENCE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def _to_question(item: Any) -> Optional[QuizQuestion]:
    if not isinstance(item, dict):
        return None

    question = item.get("question")
    options = item.get("options")
    index = item.get("correctOptionIndex", item.get("correct_option_index"))

    if not question or not isinstance(options, list) or len(options) != 4:
        return None
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index <= 3:
        return None

    return QuizQuestion(
        question=str(question),
        options=[str(option) for option in options],
        correct_option_index=index,
        explanation=str(item.get("explanation") or ""),
    )


def parse_quiz_json(text: str, num_questions: int) -> list[QuizQuestion]:
    """
    Parse a model response into at most `num_questions` valid questions.

    Accepts a bare JSON array, an array wrapped in a ```json fence, or an
    object with a "questions" array.

    Raises:
        QuizParseError: If the text is not JSON or not a question list
    """
    try:
        data = json.loads(_extract_json(text))
    except json.JSONDecodeError as e:
        raise QuizParseError(f"Failed to parse AI response as JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("questions")
    if not isinstance(data, list):
        raise QuizParseError("AI response is not a list of questions")

    questions = [q for q in (_to_question(item) for item in data) if q is not None]
    return questions[:num_questions]


def fallback_questions(content: str, num_questions: int) -> list[QuizQuestion]:
    """
    Templated questions about terms taken from the notes.

    Deterministic: terms are the distinct words longer than four characters
    in order of appearance. At most settings.QUIZ_FALLBACK_MAX_QUESTIONS
    questions are produced.
    """
    terms: list[str] = []
    for word in content.split():
        term = re.sub(r"[^\w]", "", word)
        if len(term) > 4 and term not in terms:
            terms.append(term)

    count = min(num_questions, settings.QUIZ_FALLBACK_MAX_QUESTIONS)
    return [
        QuizQuestion(
            question=FALLBACK_QUESTION_TEMPLATE.format(
                term=terms[i % len(terms)] if terms else "topic"
            ),
            options=list(FALLBACK_OPTIONS),
            correct_option_index=0,
            explanation=FALLBACK_EXPLANATION,
        )
        for i in range(count)
    ]


# =============================================================================
# Generator
# =============================================================================


def has_credentials(model: str) -> bool:
    """Whether the API key for a model's provider is configured."""
    provider = model.split("/", 1)[0].lower()
    key_name = PROVIDER_API_KEYS.get(provider)
    if key_name is None:
        # Providers without a key (e.g. local servers) are always tried
        return True
    return bool(getattr(settings, key_name, "") or os.getenv(key_name))


class QuizGenerator:
    """
    Multi-provider quiz generator with retry and fallback.

    Attributes:
        models: LiteLLM model strings, tried in order
        max_attempts: Attempts per model
        backoff_min: First retry delay in seconds (doubles each retry)
        backoff_max: Upper bound for the retry delay in seconds
    """

    def __init__(
        self,
        models: Optional[list[str]] = None,
        max_attempts: Optional[int] = None,
        backoff_min: Optional[float] = None,
        backoff_max: Optional[float] = None,
    ):
        self.models = models if models is not None else list(settings.QUIZ_MODELS)
        self.max_attempts = max_attempts or settings.QUIZ_MAX_ATTEMPTS
        self.backoff_min = (
            backoff_min if backoff_min is not None else settings.QUIZ_BACKOFF_MIN_SECONDS
        )
        self.backoff_max = (
            backoff_max if backoff_max is not None else settings.QUIZ_BACKOFF_MAX_SECONDS
        )

    async def generate(self, content: str, num_questions: int = 5) -> QuizGenerateResponse:
        """
        Generate questions from study notes.

        Args:
            content: Study notes
            num_questions: Number of questions requested

        Returns:
            QuizGenerateResponse naming the model that answered, or
            flagged is_fallback when templated questions were used
        """
        for model in self.models:
            if not has_credentials(model):
                logger.debug(f"Skipping quiz provider {model}: no API key configured")
                continue

            logger.info(f"Attempting to generate quiz using {model}...")
            try:
                questions = await self._generate_with_model(model, content, num_questions)
            except Exception as e:
                logger.warning(f"Quiz provider {model} failed: {type(e).__name__}: {e}")
                continue

            logger.info(f"Generated {len(questions)} quiz questions with {model}")
            return QuizGenerateResponse(questions=questions, provider=model)

        logger.error("All quiz providers failed, returning fallback questions")
        return QuizGenerateResponse(
            questions=fallback_questions(content, num_questions),
            provider=None,
            is_fallback=True,
        )

    async def _generate_with_model(
        self, model: str, content: str, num_questions: int
    ) -> list[QuizQuestion]:
        """
        Call one model with retry.

        Raises:
            Exception: The last error once all attempts are exhausted
        """
        messages = [
            {"role": "system", "content": QUIZ_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": QUIZ_GENERATION_PROMPT.format(
                    num_questions=num_questions, content=content
                ),
            },
        ]

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(
                multiplier=self.backoff_min, min=self.backoff_min, max=self.backoff_max
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                response = await acompletion(
                    model=model,
                    messages=messages,
                    temperature=settings.QUIZ_TEMPERATURE,
                    max_tokens=settings.QUIZ_MAX_TOKENS,
                )
                text = response.choices[0].message.content
                if not text:
                    raise QuizParseError(f"No content in {model} response")

                questions = parse_quiz_json(text, num_questions)
                if not questions:
                    raise QuizParseError(f"No valid questions in {model} response")
                return questions

        raise LLMError(f"No attempts made for {model}")
