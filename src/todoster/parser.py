"""Index specification parsing for Todoster commands.

An index spec is a comma separated list of 0-based positions and inclusive
ranges, e.g. ``"0,2-4,7"``. Parsing is lenient: malformed pieces are dropped
and the rest of the spec still applies.
"""

import logging
import re
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

# ASCII digits with an optional leading plus; no minus, underscores or unicode digits
INDEX_RE = re.compile(r"^\+?[0-9]+$")

# Widest range a single token may expand to; wider ranges are skipped
MAX_RANGE_SPAN = 100_000


def _parse_index(token: str) -> Optional[int]:
    token = token.strip()
    if not INDEX_RE.match(token):
        return None
    return int(token)


def parse_index_list(spec: str) -> List[int]:
    """Parse an index spec into a flat list of indexes.

    Tokens keep their left-to-right order, ranges expand ascending whichever
    way round they are written, and duplicates are kept. A range covering more
    than ``MAX_RANGE_SPAN`` indexes is skipped like a malformed token.

    Args:
        spec: User supplied spec such as ``"0, 2-4, 7"``

    Returns:
        List of indexes; empty when nothing in the spec could be parsed
    """
    result: List[int] = []

    for part in spec.split(","):
        token = part.strip()
        if not token:
            continue

        if "-" in token:
            start_s, end_s = token.split("-", 1)
            start = _parse_index(start_s)
            end = _parse_index(end_s)
            if start is None or end is None:
                logger.debug("Skipping malformed range %r", token)
                continue
            low, high = min(start, end), max(start, end)
            if high - low + 1 > MAX_RANGE_SPAN:
                logger.debug("Skipping oversized range %r", token)
                continue
            result.extend(range(low, high + 1))
        else:
            index = _parse_index(token)
            if index is None:
                logger.debug("Skipping malformed index %r", token)
                continue
            result.append(index)

    return result


def completion_order(indexes: Iterable[int]) -> List[int]:
    """Deduplicated indexes, ascending."""
    return sorted(set(indexes))


def deletion_order(indexes: Iterable[int]) -> List[int]:
    """Deduplicated indexes, descending.

    Removing from the back first keeps the remaining target positions valid.
    """
    return sorted(set(indexes), reverse=True)
