import math
import re
from typing import List

from bedtime_stories.schemas import StoryParts

SENTENCE_DELIMITERS = re.compile(r"[.!?]+")


def split_sentences(story: str) -> List[str]:
    """Sentences between terminal punctuation, blank fragments dropped."""
    return [s for s in SENTENCE_DELIMITERS.split(story) if s.strip()]


def _join(sentences: List[str]) -> str:
    return ". ".join(sentences) + "."


def split_story_into_parts(story: str) -> StoryParts:
    """
    Split a story into beginning, middle and end by sentence count.

    The first two segments hold ceil(N/3) sentences each and the last one
    takes whatever is left, so it can be shorter or empty. Every segment
    ends with a period, an empty one is just ".".
    """
    sentences = split_sentences(story)
    third = math.ceil(len(sentences) / 3)

    return StoryParts(
        beginning=_join(sentences[:third]),
        middle=_join(sentences[third:third * 2]),
        end=_join(sentences[third * 2:]),
    )
