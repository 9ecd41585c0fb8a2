"""Prompt templates for flashcard generation."""

FLASHCARD_PROMPT = """You are a flashcard generation assistant. Create educational flashcards in {language} from the attached PDF content.
The attached PDF contains pages {page_list} of the document "{filename}".

Each flashcard should have:
- A clear, concise term
- A comprehensive definition
- A helpful hint (optional)
- An explanation providing additional context
- A key concept that this flashcard relates to
- A difficulty score from 1-100 where:
  1-20: Basic facts and definitions
  21-40: Simple understanding required
  41-60: Moderate complexity
  61-80: Complex topics
  81-100: Advanced concepts

Focus on the most important concepts and ensure each flashcard is unique and valuable for learning.

For each flashcard, include:
- source: "{filename}"
- page: The page number as a string, one of {page_list}
- language: "{language}"

Respond with JSON only, in this format:
{{
  "flashcards": [
    {{
      "term": "Example Term",
      "definition": "Example definition",
      "hint": "Optional hint",
      "explanation": "Additional context",
      "keyConcept": "Main topic",
      "difficulty": 50,
      "source": "{filename}",
      "page": "{first_page}",
      "language": "{language}"
    }}
  ]
}}"""


def build_flashcard_prompt(filename: str, language: str, page_numbers: list[int]) -> str:
    """Render the generation prompt for one batch of pages."""
    return FLASHCARD_PROMPT.format(
        filename=filename,
        language=language,
        page_list=", ".join(str(page) for page in page_numbers),
        first_page=page_numbers[0],
    )
