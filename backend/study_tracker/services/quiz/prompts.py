"""
Quiz Generation Prompts

LLM prompts for turning a learner's study notes into multiple-choice
questions. The model must answer with a bare JSON array so the response
can be parsed without post-processing beyond stripping code fences.
"""


QUIZ_SYSTEM_PROMPT = (
    "You are a helpful AI study assistant that generates quizzes in strict JSON format."
)


# =============================================================================
# Multiple-Choice Generation
# =============================================================================

QUIZ_GENERATION_PROMPT = """Role
You are an intelligent study assistant embedded in a student study app. Your job is to generate high-quality quiz questions strictly from the user's notes.

Input
Study notes provided below.
Number of questions: {num_questions}

Instructions
- Use only the provided notes. Do not introduce external information.
- Generate meaningful learning-focused questions that prioritize understanding and application.
- Avoid vague or trick questions.
- Match an intermediate difficulty level (explanations, comparisons, examples).
- Each question must have exactly one correct answer.

Output Format (STRICT)
Return ONLY a valid JSON array with this exact structure, no markdown or extra text:
[
  {{
    "question": "Question text",
    "options": ["Option A", "Option B", "Option C", "Option D"],
    "correctOptionIndex": 0,
    "explanation": "Brief explanation based on the notes"
  }}
]

Requirements:
- Each question must have exactly 4 options.
- correctOptionIndex must be 0, 1, 2, or 3.
- Make questions progressively harder.
- Keep explanations concise and directly tied to the notes.
- Do not include emojis, markdown or commentary outside the JSON.

CONTENT:
{content}"""


# =============================================================================
# Fallback Templates
# =============================================================================

FALLBACK_QUESTION_TEMPLATE = 'What is the main concept discussed regarding "{term}"?'

FALLBACK_OPTIONS = [
    "It is a fundamental concept in this topic",
    "It is not relevant to the discussion",
    "It contradicts the main theory",
    "It is only mentioned briefly",
]

FALLBACK_EXPLANATION = (
    "This is a fallback question. Configure OPENAI_API_KEY or GEMINI_API_KEY "
    "for AI-generated questions."
)
