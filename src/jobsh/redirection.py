"""I/O redirection parsing.

A command may name a file to read standard input from (``< file``) and
a file to write standard output to (``> file``).  Both operators must
stand alone as words, separated by the delimiter from the program name
and from their operand.

Extraction rules:
    - The first ``<`` and the word after it are removed and become the
      input path; then the same happens for the first ``>`` and the
      output path.
    - An operator with nothing after it is malformed.  It is dropped,
      its path stays unset, and an error is reported, but the rest of
      the command still runs.
    - Only the first occurrence of each operator counts.  Any later
      ``<`` or ``>`` is an ordinary argument and reaches the program
      untouched.
"""

from dataclasses import dataclass, field

from jobsh.tokenizer import split_line

INPUT_OPERATOR = "<"
OUTPUT_OPERATOR = ">"


class MalformedRedirectionError(Exception):
    """Raise when a redirection operator has no operand."""


@dataclass
class ParsedCommand:
    """An argument vector with its redirection targets peeled off."""

    arguments: list[str] = field(default_factory=list)
    input_path: str | None = None  # < file
    output_path: str | None = None  # > file


def _take_operand(
    tokens: list[str], operator: str, label: str
) -> tuple[str | None, MalformedRedirectionError | None]:
    """Remove the first *operator* and its operand from *tokens* in place."""
    if operator not in tokens:
        return None, None
    index = tokens.index(operator)
    if index + 1 >= len(tokens):
        del tokens[index]
        return None, MalformedRedirectionError(f"Invalid {label} redirection")
    operand = tokens[index + 1]
    del tokens[index : index + 2]
    return operand, None


def extract_redirections(
    tokens: list[str],
) -> tuple[ParsedCommand, list[MalformedRedirectionError]]:
    """Split *tokens* into an argument vector and redirection targets.

    The input list is left untouched.

    Returns:
        The parsed command and any malformed-redirection errors found.

    """
    arguments = list(tokens)
    errors: list[MalformedRedirectionError] = []

    input_path, error = _take_operand(arguments, INPUT_OPERATOR, "input")
    if error is not None:
        errors.append(error)

    output_path, error = _take_operand(arguments, OUTPUT_OPERATOR, "output")
    if error is not None:
        errors.append(error)

    parsed = ParsedCommand(arguments=arguments, input_path=input_path, output_path=output_path)
    return parsed, errors


def parse_command(
    command: str, delimiter: str = " "
) -> tuple[ParsedCommand, list[MalformedRedirectionError]]:
    """Tokenize *command* and extract its redirections."""
    return extract_redirections(split_line(command, delimiter))
