"""
Prompt templates for the preference-extraction call.

Templates are frozen and versioned so a logged answer can be traced back to the
exact wording that produced it. Adapters never build prompt text themselves;
they call ``render_preference_prompt`` and send the two messages it returns.
"""

from dataclasses import dataclass

from romance_rec.domain.vocabulary import Vocabulary

# English prose averages about four characters per token.
CHARS_PER_TOKEN = 4


def approx_tokens(text: str) -> int:
    return -(-len(text) // CHARS_PER_TOKEN)


def clip_message(text: str, token_budget: int) -> str:
    """Cut ``text`` to roughly ``token_budget`` tokens, on a word boundary when one is near."""
    limit = token_budget * CHARS_PER_TOKEN
    if len(text) <= limit:
        return text
    clipped = text[:limit]
    space = clipped.rfind(" ")
    if space > limit // 2:
        clipped = clipped[:space]
    return clipped.rstrip()


def label_list(labels: tuple[str, ...] | list[str], token_budget: int) -> str:
    """
    Quote and join labels, dropping the tail once the budget is spent.

    Vocabularies arrive most-used first, so the labels that fall off are the rare ones.
    """
    kept: list[str] = []
    used = 0
    for label in labels:
        quoted = f'"{label}"'
        cost = approx_tokens(quoted) + 1
        if kept and used + cost > token_budget:
            break
        kept.append(quoted)
        used += cost
    return ", ".join(kept)


@dataclass(frozen=True)
class PromptTemplate:
    """A system/user message pair with ``str.format`` placeholders."""

    name: str
    version: str
    system: str
    user: str
    max_output_tokens: int = 512
    message_token_budget: int = 1000
    vocabulary_token_budget: int = 3000

    def format(self, **values: str) -> dict[str, str]:
        return {
            "system": self.system.format(**values),
            "user": self.user.format(**values),
        }


EXTRACT_PREFERENCES = PromptTemplate(
    name="extract_preferences",
    version="2.0.0",
    system=(
        "You are a romance book recommendation assistant. Analyze the user's "
        "message and extract their preferences in a structured format.\n\n"
        "For content warnings, distinguish between warnings they want to include "
        "and warnings they want to exclude.\n\n"
        "For spice levels, understand the various ways readers describe heat and "
        "convert them to exactly one of these values, ordered from least to most "
        "explicit: {spice_levels}. Use null if the reader states no preference.\n"
        "- closed door, clean, fade to black: the lowest level\n"
        "- kissing, mild intimacy: the second level\n"
        "- steamy, explicit scenes: the upper levels\n\n"
        "Available tags in the database (comma-separated):\n"
        "{tags}\n\n"
        "Available content warnings in the database (comma-separated):\n"
        "{content_warnings}\n\n"
        "IMPORTANT: Only use tags and content warnings that exist in the database. "
        "If the reader mentions something that does not exist, map it to the "
        "closest available option.\n\n"
        "Respond with a single JSON object and nothing else:\n"
        "{{\n"
        '    "spiceLevel": one of the spice levels or null,\n'
        '    "genres": ["tag1", "tag2"],\n'
        '    "contentWarnings": ["warning1"],\n'
        '    "excludedWarnings": ["warning2"],\n'
        '    "minimumRating": a number between 0 and 5, or null,\n'
        '    "keywords": ["free word"]\n'
        "}}"
    ),
    user="{message}",
)

TEMPLATES: dict[str, PromptTemplate] = {EXTRACT_PREFERENCES.name: EXTRACT_PREFERENCES}


def get_template(name: str) -> PromptTemplate:
    try:
        return TEMPLATES[name]
    except KeyError:
        raise KeyError(f"unknown prompt template {name!r}; known: {sorted(TEMPLATES)}") from None


def render_preference_prompt(
    message: str,
    vocabulary: Vocabulary,
    spice_levels: tuple[str, ...] | list[str],
    template: PromptTemplate = EXTRACT_PREFERENCES,
) -> dict[str, str]:
    """
    Build the system and user messages for one extraction request.

    The reader's message is clipped to the template's message budget. Tags and
    warnings share the vocabulary budget, half each.
    """
    half = template.vocabulary_token_budget // 2
    return template.format(
        message=clip_message(message, template.message_token_budget),
        spice_levels=", ".join(spice_levels),
        tags=label_list(vocabulary.tags, half),
        content_warnings=label_list(vocabulary.content_warnings, half),
    )
