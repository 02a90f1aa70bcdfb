"""
Token estimation for bundle cost accounting.

The default estimate is UTF-8 byte length floor-divided by 4. Callers who
know which model consumes the bundle should pass their own counter through
GroupOptions.count_tokens.
"""

from typing import Callable

import tiktoken

CountTokensFunc = Callable[[str], int]

DEFAULT_ENCODING = "cl100k_base"


def default_count_tokens(text: str) -> int:
    """
    Estimate tokens in a piece of code.

    Args:
        text: Source text

    Returns:
        Estimated token count (bytes // 4)
    """
    if not text:
        return 0
    return len(text.encode("utf-8")) // 4


def tiktoken_counter(encoding: str = DEFAULT_ENCODING) -> CountTokensFunc:
    """
    Build a model-accurate token counter.

    Args:
        encoding: tiktoken encoding name (default: cl100k_base)

    Returns:
        Function counting tokens of a text with that encoding
    """
    tokenizer = tiktoken.get_encoding(encoding)

    def count_tokens(text: str) -> int:
        if not text:
            return 0
        return len(tokenizer.encode(text))

    return count_tokens


def format_token_count(token_count: int) -> str:
    """
    Render a token count compactly for logs.

    Examples: 999 -> "999 toks", 1400 -> "1.4k toks", 45200 -> "45k toks".
    """
    if token_count < 1000:
        return f"{token_count} toks"

    k = token_count / 1000.0
    if k < 30:
        return f"{k:.1f}k toks"
    return f"{k:.0f}k toks"
