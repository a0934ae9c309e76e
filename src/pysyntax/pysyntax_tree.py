"""
Concrete syntax tree and the marker-based builder that produces it.

Classes:
    ErrorAnnotation:
        A syntax error message attached to a source range of a committed node.

    SyntaxLeaf / SyntaxNode:
        The committed tree. Leaves wrap tokens (trivia included), nodes carry an
        ElementType, their children and the error annotations recorded inside them.

    NodeDict:
        TypedDict form of a SyntaxNode, for JSON output and debugging.

    TreeBuilder / Marker:
        Stack-discipline builder used by the parsers. The builder exposes the token
        list as a stream that skips trivia and consults an optional token-type
        remapper; markers are opened at the current token and later committed
        (`done`), abandoned (`drop`), rewound (`rollback_to`) or turned into an
        error region (`error`).

Productions are kept in a flat list (the arena). Rolling back truncates that
list at the marker and rewinds the token cursor; `build_tree()` replays the
list once, in order, to produce the tree.

Usage:
    builder = TreeBuilder(tokens, text)
    root = builder.mark()
    ...
    root.done(ElementType.FILE)
    tree = builder.build_tree()
"""

import logging
from collections.abc import Callable, Iterator
from typing import Any, TypedDict

from pysyntax.pysyntax_constants import TRIVIA, ElementType, TokenType
from pysyntax.pysyntax_lexer import Token

logger = logging.getLogger(__name__)

TokenTypeRemapper = Callable[[TokenType, str], TokenType]
"""Called with (lexer type, token text) for identifier tokens; returns the type the parser sees."""

EdgeBinder = Callable[[list[Token]], int]
"""Given the trivia tokens next to a node edge, returns how many of them belong inside the node."""


class ErrorAnnotation:
    """A syntax error recorded at a source range (zero-width for point errors)."""

    def __init__(self, message: str, start: int, end: int):
        self.message = message
        self.start = start
        self.end = end

    def __repr__(self) -> str:
        return f"ErrorAnnotation({self.message!r}, {self.start}, {self.end})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, ErrorAnnotation)
            and self.message == other.message
            and self.start == other.start
            and self.end == other.end
        )


class NodeDict(TypedDict, total=False):
    kind: str
    start: int
    end: int
    text: str
    errors: list[dict[str, Any]]
    children: list["NodeDict"]


class SyntaxLeaf:
    """A token placed in the tree."""

    def __init__(self, token: Token):
        self.token = token

    @property
    def type(self) -> TokenType:
        return self.token.type

    @property
    def text(self) -> str:
        return self.token.text

    @property
    def start(self) -> int:
        return self.token.start

    @property
    def end(self) -> int:
        return self.token.end

    @property
    def is_trivia(self) -> bool:
        return self.token.type in TRIVIA

    def __repr__(self) -> str:
        return f"SyntaxLeaf({self.token.type}, {self.token.text!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, SyntaxLeaf)
            and self.token.type == other.token.type
            and self.token.text == other.token.text
        )

    def to_dict(self) -> NodeDict:
        return {
            "kind": str(self.token.type),
            "start": self.token.start,
            "end": self.token.end,
            "text": self.token.text,
        }


class SyntaxNode:
    """
    A committed region of the concrete syntax tree.

    Args:
        kind (ElementType): The node category.
        children (list[SyntaxNode | SyntaxLeaf], optional): Child nodes and leaves in source order.
        start (int): Start offset in the source.
        end (int): End offset in the source.

    Attributes:
        errors (list[ErrorAnnotation]): Errors recorded directly inside this node.

    Equality is structural: kinds, child structure and leaf texts. Offsets and
    error annotations are ignored, so a tree compares equal to the tree of its
    own reconstructed source.
    """

    def __init__(
        self,
        kind: ElementType,
        children: list["SyntaxNode | SyntaxLeaf"] | None = None,
        start: int = 0,
        end: int = 0,
    ):
        self.kind = kind
        self.children: list[SyntaxNode | SyntaxLeaf] = children or []
        self.start = start
        self.end = end
        self.errors: list[ErrorAnnotation] = []

    @property
    def nodes(self) -> list["SyntaxNode"]:
        """Composite children only."""
        return [c for c in self.children if isinstance(c, SyntaxNode)]

    @property
    def leaves(self) -> list[SyntaxLeaf]:
        """Direct non-trivia leaves."""
        return [c for c in self.children if isinstance(c, SyntaxLeaf) and not c.is_trivia]

    @property
    def text(self) -> str:
        return "".join(leaf.text for leaf in self.iter_leaves())

    def iter_leaves(self) -> Iterator[SyntaxLeaf]:
        for child in self.children:
            if isinstance(child, SyntaxNode):
                yield from child.iter_leaves()
            else:
                yield child

    def iter_nodes(self) -> Iterator["SyntaxNode"]:
        """This node and all descendant nodes, in pre-order."""
        yield self
        for child in self.nodes:
            yield from child.iter_nodes()

    def find_all(self, kind: ElementType) -> list["SyntaxNode"]:
        return [n for n in self.iter_nodes() if n.kind is kind]

    def iter_errors(self) -> Iterator[ErrorAnnotation]:
        for node in self.iter_nodes():
            yield from node.errors

    @property
    def has_errors(self) -> bool:
        return any(True for _ in self.iter_errors())

    def __repr__(self) -> str:
        parts = [f"{self.kind}"]
        nodes = self.nodes
        if nodes:
            preview = ", ".join(repr(c) for c in nodes[:3])
            if len(nodes) > 3:
                preview += ", ..."
            parts.append(f"children=[{preview}]")
        if self.errors:
            parts.append(f"errors={len(self.errors)}")
        return f"SyntaxNode({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, SyntaxNode):
            return False
        return self.kind == other.kind and self.children == other.children

    def to_dict(self) -> NodeDict:
        return {
            "kind": str(self.kind),
            "start": self.start,
            "end": self.end,
            "errors": [
                {"message": e.message, "start": e.start, "end": e.end}
                for e in self.errors
            ],
            "children": [c.to_dict() for c in self.children],
        }


def following_comment_binder(tokens: list[Token]) -> int:
    """Right-edge binder that keeps trailing comments (and the trivia before them) inside the node."""
    count = 0
    for i, tok in enumerate(tokens):
        if tok.type is TokenType.END_OF_LINE_COMMENT:
            count = i + 1
    return count


def default_edge_binder(tokens: list[Token]) -> int:
    return 0


def whole_edge_binder(tokens: list[Token]) -> int:
    """Binder that pulls every adjacent trivia token inside the node (used for the file root)."""
    return len(tokens)


class Marker:
    """An open production in the builder's arena.

    Attributes:
        lexeme_index (int): Index of the token the marker was opened at.
        kind (ElementType | None): Set once committed.
        error_message (str | None): Set when the marker became an error region.
    """

    def __init__(self, builder: "TreeBuilder", lexeme_index: int):
        self.builder = builder
        self.lexeme_index = lexeme_index
        self.end_index: int | None = None
        self.kind: ElementType | None = None
        self.error_message: str | None = None
        self.left_binder: EdgeBinder = default_edge_binder
        self.right_binder: EdgeBinder = default_edge_binder

    @property
    def is_closed(self) -> bool:
        return self.end_index is not None

    def done(self, kind: ElementType) -> None:
        self.builder._close(self, kind=kind)

    def error(self, message: str) -> None:
        self.builder._close(self, message=message)

    def drop(self) -> None:
        self.builder._drop(self)

    def rollback_to(self) -> None:
        self.builder._rollback(self)

    def precede(self) -> "Marker":
        return self.builder._precede(self)

    def set_custom_edge_token_binders(
        self, left: EdgeBinder | None, right: EdgeBinder | None
    ) -> None:
        self.left_binder = left or default_edge_binder
        self.right_binder = right or default_edge_binder

    def __repr__(self) -> str:
        state = self.kind or self.error_message or "open"
        return f"Marker({self.lexeme_index}, {state})"


class _DoneMarker:
    def __init__(self, start: Marker):
        self.start = start


class TreeBuilder:
    """Token stream plus production arena for one parse unit.

    Args:
        tokens (list[Token]): Every token of the source, trivia included.
        text (str): The source text the tokens were produced from.
    """

    def __init__(self, tokens: list[Token], text: str) -> None:
        self.tokens = tokens
        self.text = text
        self.productions: list[Marker | _DoneMarker] = []
        self.current = 0
        self.remapper: TokenTypeRemapper | None = None
        self._skip_trivia()

    # TOKEN STREAM

    def set_token_type_remapper(self, remapper: TokenTypeRemapper | None) -> None:
        self.remapper = remapper

    def _skip_trivia(self) -> None:
        while self.current < len(self.tokens) and self.tokens[self.current].type in TRIVIA:
            self.current += 1

    def eof(self) -> bool:
        return self.current >= len(self.tokens)

    def token_type(self) -> TokenType | None:
        """Type of the current token as the parser sees it, or None at end of input."""
        if self.eof():
            return None
        tok = self.tokens[self.current]
        if self.remapper is not None and tok.type is TokenType.IDENTIFIER:
            return self.remapper(tok.type, tok.text)
        return tok.type

    def token_text(self) -> str | None:
        if self.eof():
            return None
        return self.tokens[self.current].text

    def current_offset(self) -> int:
        if self.eof():
            return len(self.text)
        return self.tokens[self.current].start

    def advance_lexer(self) -> None:
        if self.eof():
            return
        self.current += 1
        self._skip_trivia()

    def lookahead(self, steps: int = 1) -> TokenType | None:
        """Raw lexer type of a later significant token (not remapped)."""
        index = self.current
        while steps > 0 and index < len(self.tokens):
            index += 1
            while index < len(self.tokens) and self.tokens[index].type in TRIVIA:
                index += 1
            steps -= 1
        return self.tokens[index].type if index < len(self.tokens) else None

    # PRODUCTIONS

    def mark(self) -> Marker:
        marker = Marker(self, self.current)
        self.productions.append(marker)
        return marker

    def error(self, message: str) -> None:
        """Records an error at the current position."""
        self.mark().error(message)

    def _index_of(self, marker: Marker) -> int:
        for i in range(len(self.productions) - 1, -1, -1):
            if self.productions[i] is marker:
                return i
        raise AssertionError(f"Marker {marker!r} is not in the production list")

    def _close(
        self,
        marker: Marker,
        kind: ElementType | None = None,
        message: str | None = None,
    ) -> None:
        if marker.is_closed:
            raise AssertionError(f"Marker {marker!r} is already closed")
        index = self._index_of(marker)
        for later in self.productions[index + 1 :]:
            if isinstance(later, Marker) and not later.is_closed:
                raise AssertionError(
                    f"Another not done marker {later!r} added after {marker!r}"
                )
        marker.kind = kind
        marker.error_message = message
        marker.end_index = self.current
        self.productions.append(_DoneMarker(marker))

    def _drop(self, marker: Marker) -> None:
        if marker.is_closed:
            raise AssertionError(f"Cannot drop closed marker {marker!r}")
        del self.productions[self._index_of(marker)]

    def _rollback(self, marker: Marker) -> None:
        if marker.is_closed:
            raise AssertionError(f"Cannot roll back to closed marker {marker!r}")
        del self.productions[self._index_of(marker) :]
        self.current = marker.lexeme_index

    def _precede(self, marker: Marker) -> Marker:
        before = Marker(self, marker.lexeme_index)
        self.productions.insert(self._index_of(marker), before)
        return before

    # TREE

    def _node_range(self, marker: Marker) -> tuple[int, int]:
        """Token index range [start, end) of a closed marker after edge binding."""
        assert marker.end_index is not None  # for mypy
        start, end = marker.lexeme_index, marker.end_index

        leading_start = start
        while leading_start > 0 and self.tokens[leading_start - 1].type in TRIVIA:
            leading_start -= 1
        start -= marker.left_binder(self.tokens[leading_start:start])

        trailing_start = end
        while trailing_start > start and self.tokens[trailing_start - 1].type in TRIVIA:
            trailing_start -= 1
        trailing_end = end
        while trailing_end < len(self.tokens) and self.tokens[trailing_end].type in TRIVIA:
            trailing_end += 1
        if trailing_start < end:
            end = trailing_start
        end += marker.right_binder(self.tokens[end:trailing_end])
        return start, max(start, end)

    def _offset(self, index: int) -> int:
        if index < len(self.tokens):
            return self.tokens[index].start
        return len(self.text)

    def build_tree(self) -> SyntaxNode:
        """Replays the production list into a SyntaxNode tree.

        Every token ends up in exactly one node; tokens outside any committed
        production (and errors outside any node) belong to a FILE root, unless
        the outermost production already is the single root node.
        """
        root = SyntaxNode(ElementType.FILE)
        stack: list[tuple[SyntaxNode | None, Marker | None]] = [(root, None)]
        cursor = 0

        def owner() -> SyntaxNode:
            for node, _ in reversed(stack):
                if node is not None:
                    return node
            raise AssertionError("Tree builder stack lost its root")  # pragma: no cover

        def emit_leaves(upto: int) -> int:
            target = owner()
            pos = cursor
            while pos < upto:
                target.children.append(SyntaxLeaf(self.tokens[pos]))
                pos += 1
            return pos

        ranges: dict[int, tuple[int, int]] = {}
        for production in self.productions:
            if isinstance(production, Marker):
                if not production.is_closed:
                    raise AssertionError(f"Unclosed marker {production!r} at build time")
                start, end = self._node_range(production)
                start = max(start, cursor)
                ranges[id(production)] = (start, end)
                cursor = emit_leaves(start)
                if production.kind is not None:
                    node = SyntaxNode(production.kind, start=self._offset(start))
                    owner().children.append(node)
                    stack.append((node, production))
                else:
                    stack.append((None, production))
            else:
                start, end = ranges[id(production.start)]
                end = max(end, cursor)
                cursor = emit_leaves(end)
                node, marker = stack.pop()
                assert marker is production.start  # for mypy
                if node is not None:
                    node.end = self.tokens[end - 1].end if end > start else node.start
                else:
                    err_start = self._offset(start)
                    err_end = self.tokens[end - 1].end if end > start else err_start
                    owner().errors.append(
                        ErrorAnnotation(marker.error_message or "", err_start, err_end)
                    )
        cursor = emit_leaves(len(self.tokens))
        root.end = len(self.text)
        logger.debug(
            "built tree from %d productions over %d tokens",
            len(self.productions),
            len(self.tokens),
        )

        if len(root.children) == 1 and isinstance(root.children[0], SyntaxNode):
            only = root.children[0]
            if only.kind is ElementType.FILE:
                only.errors = root.errors + only.errors
                only.start, only.end = 0, len(self.text)
                return only
        return root


__all__ = [
    "ErrorAnnotation",
    "Marker",
    "NodeDict",
    "SyntaxLeaf",
    "SyntaxNode",
    "TreeBuilder",
    "following_comment_binder",
    "whole_edge_binder",
]
