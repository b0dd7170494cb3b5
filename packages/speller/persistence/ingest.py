"""
Vocabulary file import.

Two formats are accepted:
- JSON: an array of ``{"word": ..., "phonetic": ..., "meaning": ...}``,
  detected by a ``.json`` filename or content starting with ``[``
- text: one word per line, optionally followed by a meaning after a comma,
  semicolon or tab

Entries without a word are skipped. A file with no usable entry is an
error; nothing is partially imported.
"""

from __future__ import annotations

import json
import re
from typing import List, Optional

from ..content.vocabulary import Vocabulary
from ..errors import VocabularyImportError

DEFAULT_PHONETIC = "/.../"
_SEPARATORS = re.compile(r",|;|\t")


def _is_json(content: str, filename: Optional[str]) -> bool:
    if filename and filename.lower().endswith(".json"):
        return True
    return content.lstrip().startswith("[")


def _parse_json(content: str) -> List[Vocabulary]:
    try:
        items = json.loads(content)
    except json.JSONDecodeError as e:
        raise VocabularyImportError(f"Invalid JSON: {e}") from e
    if not isinstance(items, list):
        raise VocabularyImportError("JSON vocabulary must be an array of entries")

    result = []
    for item in items:
        if not isinstance(item, dict):
            continue
        word = str(item.get("word") or "").strip()
        if not word:
            continue
        result.append(Vocabulary.create(
            word,
            phonetic=item.get("phonetic") or DEFAULT_PHONETIC,
            meaning=item.get("meaning") or "",
        ))
    return result


def _parse_lines(content: str) -> List[Vocabulary]:
    result = []
    for line in content.splitlines():
        if not line.strip():
            continue
        parts = _SEPARATORS.split(line)
        word = parts[0].strip()
        if not word:
            continue
        meaning = parts[1].strip() if len(parts) > 1 else ""
        result.append(Vocabulary.create(word, phonetic=DEFAULT_PHONETIC, meaning=meaning))
    return result


def parse_vocabulary(content: str, filename: Optional[str] = None) -> List[Vocabulary]:
    """Parse an uploaded vocabulary file. Raises ``VocabularyImportError``."""
    if _is_json(content, filename):
        vocab = _parse_json(content)
    else:
        vocab = _parse_lines(content)
    if not vocab:
        raise VocabularyImportError("No valid vocabulary found")
    return vocab
