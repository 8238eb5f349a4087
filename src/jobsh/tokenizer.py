"""Split a command line into words.

The tokenizer is deliberately naive: it cuts the line at every
occurrence of a single delimiter character and nothing else.  There is
no quoting and no escaping, so ``echo "a b"`` yields the three words
``echo``, ``"a`` and ``b"``.

Splitting is delimiter-exact.  Two delimiters in a row produce an empty
word between them, which is kept.  A delimiter at the very end does not
start a new word, and an empty line has no words at all.
"""


def split_line(line: str, delimiter: str = " ") -> list[str]:
    """Return the words of *line* separated by *delimiter*.

    Args:
        line: The raw text to split.
        delimiter: A single separator character.

    Returns:
        The words in order, empty words between adjacent delimiters included.

    Raises:
        ValueError: If *delimiter* is not exactly one character.

    """
    if len(delimiter) != 1:
        msg = f"delimiter must be a single character, got {delimiter!r}"
        raise ValueError(msg)
    if not line:
        return []
    tokens = line.split(delimiter)
    # A trailing delimiter terminates the last word rather than opening a new one.
    if tokens[-1] == "":
        tokens.pop()
    return tokens
