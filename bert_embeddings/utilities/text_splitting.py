"""
Heuristic Utilities for splitting content into embedding rows.
"""

import re
from typing import List, Optional

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: Optional[str]) -> List[str]:
    """
    Split text into sentences, one per embedding row.

    Blank lines always end a sentence. Inside a paragraph, whitespace after
    '.', '!' or '?' ends a sentence.
    """
    if not text:
        return []
    sentences = []
    for paragraph in _PARAGRAPH_BREAK.split(str(text)):
        paragraph = re.sub(r"\s+", " ", paragraph).strip()
        sentences.extend(s for s in _SENTENCE_END.split(paragraph) if s)
    return sentences
