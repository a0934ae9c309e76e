"""
Lexical analyzer for Python-family source text.

This module converts raw source text into the token list consumed by the tree builder:

Classes:
    CharacterStream: Stream abstraction for reading characters with offset/line/column tracking.
    Token: A single token with type, source text, offsets and location.
    Lexer: Converts a CharacterStream into a sequence of tokens, including trivia.

Features:
    - Emits whitespace, comments and non-significant line breaks as trivia tokens,
      so the concatenated token texts always reproduce the source exactly.
    - Tracks indentation and synthesizes zero-width INDENT / DEDENT /
      INCONSISTENT_DEDENT tokens, plus a final statement break and closing dedents.
    - Newlines inside brackets, blank lines and comment-only lines are trivia.
    - Recognizes identifiers, hard keywords, numbers (decimal, hex, octal, binary,
      long, float, imaginary), prefixed and triple-quoted strings, and operators by
      longest match.
    - Soft keywords (`as`, `with`, `print`, `None`, ...) are always emitted as
      IDENTIFIER; promoting them is the parser's job.

The lexer never raises on malformed input: unterminated strings stop at the end
of the line (or input) and unknown characters become BAD_CHARACTER tokens.

Example:
    >>> tokens = Lexer(CharacterStream("x = 1\\n")).tokenize()
    >>> [str(t.type) for t in tokens]
    ['IDENTIFIER', 'SPACE', 'EQ', 'SPACE', 'INTEGER_LITERAL', 'STATEMENT_BREAK']

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
"""

import logging
from collections import deque
from collections.abc import Collection
from typing import Any

from pysyntax.pysyntax_constants import (
    MAX_OPERATOR_LENGTH,
    TokenType,
    keyword_hashmap,
    operator_hashmap,
)

logger = logging.getLogger(__name__)

TAB_SIZE = 8

DIGITS = frozenset("0123456789")

STRING_PREFIXES = {"r", "u", "b", "f", "br", "rb", "ur", "fr", "rf"}

OPENING_BRACKETS = {TokenType.LPAR, TokenType.LBRACKET, TokenType.LBRACE}
CLOSING_BRACKETS = {TokenType.RPAR, TokenType.RBRACKET, TokenType.RBRACE}


class CharacterStream:
    """
    A utility for reading characters from a string source with offset, line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            Exception: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise Exception(
                f"CharacterStreamError: Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at the given offset without advancing, or "" if out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """A single lexical token.

    Attributes:
        type (TokenType): The lexical category assigned by the lexer.
        text (str): The exact source text covered by the token (empty for
            synthesized INDENT/DEDENT and end-of-input breaks).
        start (int): Offset of the first character.
        end (int): Offset one past the last character.
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
    """

    def __init__(
        self,
        type_: TokenType,
        text: str,
        start: int = 0,
        end: int | None = None,
        line: int = 0,
        col: int = 0,
    ):
        self.type = type_
        self.text = text
        self.start = start
        self.end = start + len(text) if end is None else end
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.text!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.text == other.text
            and self.start == other.start
            and self.end == other.end
        )

    def __hash__(self) -> int:
        return hash((self.type, self.text, self.start, self.end))


class Lexer:
    """Lexical analyzer for Python-family source.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        indent_stack (list[int]): Widths of the currently open indentation levels.
        paren_depth (int): Bracket nesting depth; newlines are trivia while positive.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream
        self.indent_stack: list[int] = [0]
        self.paren_depth = 0
        self.at_line_start = True
        self.line_has_content = False
        self.finished = False
        self.pending: deque[Token] = deque()

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def tokenize(self) -> list[Token]:
        """Consumes the whole stream and returns every token, trivia included."""
        tokens: list[Token] = []
        while True:
            tok = self.next_token()
            if tok is None:
                break
            tokens.append(tok)
        logger.debug(
            "lexed %d tokens from %d characters", len(tokens), len(self.stream.source)
        )
        return tokens

    def next_token(self) -> Token | None:
        """Returns the next token, or None once the input and all closing tokens are exhausted."""
        while not self.pending:
            if self.finished:
                return None
            self._scan()
        return self.pending.popleft()

    def _emit(
        self, type_: TokenType, start: int, line: int, col: int
    ) -> Token:
        text = self.stream.source[start : self.stream.position]
        tok = Token(type_, text, start, self.stream.position, line, col)
        self.pending.append(tok)
        return tok

    def _emit_marker(self, type_: TokenType) -> None:
        pos = self.stream.position
        self.pending.append(
            Token(type_, "", pos, pos, self.stream.line, self.stream.column)
        )

    def _scan(self) -> None:
        if self.stream.end_of_file():
            self._finish()
            return
        if self.at_line_start and self.paren_depth == 0:
            self._scan_line_start()
            return

        ch = self.peek()
        start, line, col = self.stream.position, self.stream.line, self.stream.column

        # 1. Whitespace and explicit line continuation
        if ch in " \t\f":
            while self.peek() in (" ", "\t", "\f"):
                self.advance()
            self._emit(TokenType.SPACE, start, line, col)
            return
        if ch == "\\" and self.peek(1) in ("\n", "\r"):
            self.advance()
            self._consume_newline()
            self._emit(TokenType.SPACE, start, line, col)
            return

        # 2. Newline
        if ch in ("\n", "\r"):
            self._consume_newline()
            if self.paren_depth > 0:
                self._emit(TokenType.LINE_BREAK, start, line, col)
            else:
                self._emit(TokenType.STATEMENT_BREAK, start, line, col)
                self.line_has_content = False
                self.at_line_start = True
            return

        # 3. Comment
        if ch == "#":
            self._scan_comment(start, line, col)
            return

        self.line_has_content = True

        # 4. Identifier, keyword or prefixed string
        if ch.isalpha() or ch == "_" or (ord(ch) > 127 and ch.isidentifier()):
            ident = self.advance()
            while self.peek() != "" and (self.peek().isalnum() or self.peek() == "_"):
                ident += self.advance()
            if ident.lower() in STRING_PREFIXES and self.peek() in ("'", '"'):
                self._scan_string_body()
                self._emit(TokenType.STRING_LITERAL, start, line, col)
                return
            self._emit(keyword_hashmap.get(ident, TokenType.IDENTIFIER), start, line, col)
            return

        # 5. Number
        if ch in DIGITS or (ch == "." and self.peek(1) in DIGITS):
            self._emit(self._scan_number(), start, line, col)
            return

        # 6. String
        if ch in ("'", '"'):
            self._scan_string_body()
            self._emit(TokenType.STRING_LITERAL, start, line, col)
            return

        # 7. Operator or delimiter (longest match)
        match_len = 0
        candidate = ""
        for i in range(MAX_OPERATOR_LENGTH):
            c = self.peek(i)
            if c == "":
                break
            candidate += c
            if candidate in operator_hashmap:
                match_len = i + 1
        if match_len:
            for _ in range(match_len):
                self.advance()
            tok = self._emit(operator_hashmap[candidate[:match_len]], start, line, col)
            if tok.type in OPENING_BRACKETS:
                self.paren_depth += 1
            elif tok.type in CLOSING_BRACKETS and self.paren_depth > 0:
                self.paren_depth -= 1
            return

        # 8. Unknown character
        self.advance()
        self._emit(TokenType.BAD_CHARACTER, start, line, col)

    def _scan_line_start(self) -> None:
        """Handles leading whitespace of a logical line and emits indentation markers."""
        start, line, col = self.stream.position, self.stream.line, self.stream.column
        width = 0
        while self.peek() in (" ", "\t", "\f"):
            ch = self.advance()
            if ch == "\t":
                width = (width // TAB_SIZE + 1) * TAB_SIZE
            elif ch == " ":
                width += 1
        if self.stream.position > start:
            self._emit(TokenType.SPACE, start, line, col)
        self.at_line_start = False

        ch = self.peek()
        if ch in ("", "#", "\n", "\r"):
            # Blank or comment-only line: no indentation change
            if ch == "#":
                self._scan_comment(
                    self.stream.position, self.stream.line, self.stream.column
                )
            if self.peek() in ("\n", "\r"):
                nl_start, nl_line, nl_col = (
                    self.stream.position,
                    self.stream.line,
                    self.stream.column,
                )
                self._consume_newline()
                self._emit(TokenType.LINE_BREAK, nl_start, nl_line, nl_col)
                self.at_line_start = True
            return

        if width > self.indent_stack[-1]:
            self.indent_stack.append(width)
            self._emit_marker(TokenType.INDENT)
        elif width < self.indent_stack[-1]:
            while len(self.indent_stack) > 1 and width < self.indent_stack[-1]:
                self.indent_stack.pop()
                self._emit_marker(TokenType.DEDENT)
            if width != self.indent_stack[-1]:
                self._emit_marker(TokenType.INCONSISTENT_DEDENT)

    def _finish(self) -> None:
        if self.line_has_content:
            self._emit_marker(TokenType.STATEMENT_BREAK)
            self.line_has_content = False
        while len(self.indent_stack) > 1:
            self.indent_stack.pop()
            self._emit_marker(TokenType.DEDENT)
        self.finished = True

    def _consume_newline(self) -> None:
        if self.peek() == "\r" and self.peek(1) == "\n":
            self.advance()
        self.advance()

    def _scan_comment(self, start: int, line: int, col: int) -> None:
        while self.peek() not in ("", "\n", "\r"):
            self.advance()
        self._emit(TokenType.END_OF_LINE_COMMENT, start, line, col)

    def _scan_digits(self, allowed: Collection[str]) -> None:
        while self.peek() != "" and (self.peek() in allowed or self.peek() == "_"):
            self.advance()

    def _scan_number(self) -> TokenType:
        if self.peek() == "0" and self.peek(1).lower() in ("x", "o", "b"):
            radix = self.peek(1).lower()
            self.advance()
            self.advance()
            if radix == "x":
                self._scan_digits("0123456789abcdefABCDEF")
            elif radix == "o":
                self._scan_digits("01234567")
            else:
                self._scan_digits("01")
            if self.peek() in ("l", "L"):
                self.advance()
            return TokenType.INTEGER_LITERAL

        is_float = False
        self._scan_digits(DIGITS)
        if self.peek() == ".":
            is_float = True
            self.advance()
            self._scan_digits(DIGITS)
        if self.peek() in ("e", "E"):
            sign = 1 if self.peek(1) in ("+", "-") else 0
            if self.peek(1 + sign) in DIGITS:
                is_float = True
                self.advance()
                if sign:
                    self.advance()
                self._scan_digits(DIGITS)
        if self.peek() in ("j", "J"):
            self.advance()
            return TokenType.IMAGINARY_LITERAL
        if not is_float and self.peek() in ("l", "L"):
            self.advance()
        return TokenType.FLOAT_LITERAL if is_float else TokenType.INTEGER_LITERAL

    def _scan_string_body(self) -> None:
        """Consumes a quoted string starting at the opening quote."""
        quote = self.advance()
        triple = self.peek() == quote and self.peek(1) == quote
        if triple:
            self.advance()
            self.advance()
        while not self.stream.end_of_file():
            ch = self.peek()
            if ch == "\\":
                self.advance()
                if not self.stream.end_of_file():
                    self.advance()
            elif triple:
                if ch == quote and self.peek(1) == quote and self.peek(2) == quote:
                    for _ in range(3):
                        self.advance()
                    return
                self.advance()
            elif ch in ("\n", "\r"):
                return  # unterminated single-quoted string
            elif ch == quote:
                self.advance()
                return
            else:
                self.advance()


def tokenize(source: str) -> list[Token]:
    """Tokenizes a complete source string."""
    return Lexer(CharacterStream(source)).tokenize()


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
