import re
from collections import Counter
from typing import Any

import yaml  # type: ignore

from vocabu.domain.exceptions import ValidationError

# ---------- Word extraction ----------

_WORD_RE = re.compile(r"[a-zа-яё\-']{2,}")


def extract_words(text: str) -> list[str]:
    """Lowercase words of 2+ letters, most frequent first (ties keep first occurrence)."""
    if not text:
        return []
    freq = Counter(_WORD_RE.findall(text.lower()))
    return [w for w, _ in sorted(freq.items(), key=lambda kv: -kv[1])]


# ---------- Word lists ----------


def parse_word_list(text: str) -> list[tuple[str, str]]:
    """
    Parse ``term<TAB>translation`` or ``term;translation`` lines.

    Blank lines and lines starting with '#' are skipped. The translation is optional.
    """
    pairs: list[tuple[str, str]] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = re.split(r"\t|;", line, maxsplit=1)
        term = parts[0].strip()
        translation = parts[1].strip() if len(parts) > 1 else ""
        if term:
            pairs.append((term, translation))
    return pairs


# ---------- Structured documents ----------


def load_structured(text: str) -> Any:
    """Parse YAML (and therefore JSON) text, raising ValidationError on syntax errors."""
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValidationError(f"Cannot parse document: {e}") from e
