from __future__ import annotations

import math
import re
from typing import Any

PROMPT_MAX_CHARS = 12000


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def clamp_int(value: Any, default: int, min_value: int = 0, max_value: int = 100) -> int:
    if isinstance(value, bool):
        return default
    try:
        parsed = round_half_up(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    return max(min_value, min(max_value, parsed))


def safe_str(value: Any, max_len: int = 1500) -> str:
    if not isinstance(value, str):
        return ""
    text = re.sub(r"\s+", " ", value).strip()
    if len(text) > max_len:
        text = text[:max_len].rstrip()
    return text


def safe_str_list(value: Any, max_items: int, max_len: int = 220) -> list[str]:
    if not isinstance(value, list):
        return []
    output: list[str] = []
    for item in value:
        text = safe_str(item, max_len=max_len)
        if text:
            output.append(text)
        if len(output) >= max_items:
            break
    return output


def truncate_for_prompt(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars].rstrip()
