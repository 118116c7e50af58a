"""Parse variation metadata out of the judge's free-form design output."""

import json
import re

from pydantic import TypeAdapter, ValidationError

from prompt_arena.variation.domain.variation import BASELINE_NUMBER, VariationInfo

DEFAULT_STRATEGIES: list[str] = [
    "PERSONA",
    "EXEMPLAR",
    "CONSTRAINT",
    "SOCRATIC",
    "CHECKLIST",
]

_JSON_BLOCK_PATTERN = re.compile(r"```json\s*([\s\S]*?)\s*```")
_VARIATION_LIST = TypeAdapter(list[VariationInfo])


def extract_json_from_markdown(text: str) -> object | None:
    """Decode the first ```json fenced block in text, or return None."""
    match = _JSON_BLOCK_PATTERN.search(text)
    if match is None or not match.group(1):
        return None
    try:
        return json.loads(match.group(1))
    except ValueError:
        return None


def create_default_variations(count: int) -> list[VariationInfo]:
    """Deterministic fallback metadata for variations 1..count.

    Strategies follow DEFAULT_STRATEGIES in order, then numbered placeholders.
    """
    return [
        VariationInfo(
            number=n,
            strategy=(
                DEFAULT_STRATEGIES[n - 1]
                if n <= len(DEFAULT_STRATEGIES)
                else f"VARIATION_{n}"
            ),
            summary=f"Variation {n}",
        )
        for n in range(1, count + 1)
    ]


def parse_variation_info(output: str, fallback_count: int) -> list[VariationInfo]:
    """Return the judge's variation list, or the default list when absent or malformed.

    The judge's numbering and order are trusted as-is, except that entries
    claiming the baseline number are dropped. A list holding only such entries
    counts as malformed. Never raises.
    """
    parsed = extract_json_from_markdown(output)
    if isinstance(parsed, dict) and isinstance(parsed.get("variations"), list):
        try:
            infos = _VARIATION_LIST.validate_python(parsed["variations"])
        except ValidationError:
            infos = None
        if infos is not None:
            judged = [info for info in infos if info.number != BASELINE_NUMBER]
            if judged or not infos:
                return judged
    return create_default_variations(fallback_count)
