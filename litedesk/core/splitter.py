"""Quote- and comment-aware splitting of SQL buffers into statements.

This is a lexer, not a parser. It only tracks enough state to know whether a
semicolon ends a statement:

* single or double quoted literals, where a doubled quote character stays
  inside the literal;
* ``--`` line comments, which run through the next newline (or end of input)
  and contribute nothing to any statement.

Block comments and dialect-specific delimiters are not recognised.
"""

from __future__ import annotations

QUOTE_CHARS = ("'", '"')


def split_statements(text: str) -> list[str]:
    """Split ``text`` into trimmed, non-empty statements in source order."""
    statements: list[str] = []
    current: list[str] = []
    in_string = False
    quote_char = ""
    length = len(text)
    index = 0

    while index < length:
        char = text[index]

        if in_string:
            current.append(char)
            if char == quote_char:
                if index + 1 < length and text[index + 1] == quote_char:
                    # Escaped quote: keep both characters and stay in the literal.
                    current.append(text[index + 1])
                    index += 2
                    continue
                in_string = False
            index += 1
            continue

        if char in QUOTE_CHARS:
            in_string = True
            quote_char = char
            current.append(char)
            index += 1
            continue

        if char == "-" and text.startswith("--", index):
            newline = text.find("\n", index)
            if newline == -1:
                break
            index = newline + 1
            continue

        if char == ";":
            _flush(current, statements)
            current = []
            index += 1
            continue

        current.append(char)
        index += 1

    _flush(current, statements)
    return statements


def _flush(buffer: list[str], statements: list[str]) -> None:
    statement = "".join(buffer).strip()
    if statement:
        statements.append(statement)
