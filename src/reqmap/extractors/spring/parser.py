from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Collection, Literal, Optional

import tree_sitter_java
from tree_sitter import Language, Node, Parser

from reqmap.utils.exceptions import JavaSyntaxError

JAVA_LANGUAGE = Language(tree_sitter_java.language())

_TYPE_DECLARATIONS = {
    "class_declaration",
    "interface_declaration",
    "enum_declaration",
    "record_declaration",
    "annotation_type_declaration",
}
_ANONYMOUS_BODY_PARENTS = {"object_creation_expression", "enum_constant"}
_ANNOTATION_NODES = {"annotation", "marker_annotation"}
_COMMENT_NODES = {"line_comment", "block_comment", "comment"}
_MEMBER_CONTAINERS = {
    "program",
    "class_body",
    "interface_body",
    "enum_body",
    "enum_body_declarations",
    "annotation_type_body",
}

_JAVA_ESCAPES = {
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "f": "\f",
    "r": "\r",
    "s": " ",
    '"': '"',
    "'": "'",
    "\\": "\\",
}
_ESCAPE_RE = re.compile(r"\\(u+[0-9a-fA-F]{4}|[0-7]{1,3}|.)", re.DOTALL)
_WHITESPACE_RE = re.compile(r"\s+")

ValueKind = Literal["string", "symbol"]


@dataclass(frozen=True)
class ElementValue:
    """
    One resolved annotation element value.

    kind == "string": a string literal, a concatenation of literals, or a
    string constant declared in the same file.
    kind == "symbol": any other name reference (e.g. RequestMethod.GET);
    text holds the last identifier ("GET").
    """

    kind: ValueKind
    text: str


@dataclass(frozen=True)
class Annotation:
    name: str  # as written: "RequestMapping" or "org.springframework...RequestMapping"
    attributes: dict[str, tuple[ElementValue, ...]] = field(default_factory=dict)

    def values(self, attribute: str, kind: ValueKind) -> tuple[str, ...]:
        return tuple(v.text for v in self.attributes.get(attribute, ()) if v.kind == kind)


def _first_named(annotations: tuple[Annotation, ...], names: Collection[str]) -> Optional[Annotation]:
    for a in annotations:
        if a.name in names:
            return a
    return None


@dataclass(frozen=True)
class MethodDeclaration:
    """A method declaration plus the annotations of its nearest enclosing type."""

    name: str
    type_name: str  # fully qualified, nested types joined with "$"
    annotations: tuple[Annotation, ...]
    type_annotations: tuple[Annotation, ...]
    line: int

    @property
    def declaration_id(self) -> str:
        return f"{self.type_name}#{self.name}"

    def annotation(self, names: Collection[str]) -> Optional[Annotation]:
        return _first_named(self.annotations, names)

    def enclosing_annotation(self, names: Collection[str]) -> Optional[Annotation]:
        return _first_named(self.type_annotations, names)


@dataclass
class _TypeFrame:
    qualified_name: str
    owners: tuple[str, ...]  # simple names of the enclosing named types, innermost last
    annotations: tuple[Annotation, ...]
    # javac binary-name counters per local class name; "" counts anonymous classes
    local_counts: dict[str, int] = field(default_factory=dict)

    def next_local_index(self, name: str) -> int:
        self.local_counts[name] = self.local_counts.get(name, 0) + 1
        return self.local_counts[name]


def parse_java_source(source: bytes | str, file_path: str = "<source>") -> list[MethodDeclaration]:
    """
    Parse one Java compilation unit and return its method declarations in source order.

    A fresh tree-sitter Parser is created per call so that files never share state.
    Raises JavaSyntaxError when the grammar reports an error anywhere in the file.
    """
    if isinstance(source, str):
        source = source.encode("utf-8")

    parser = Parser(JAVA_LANGUAGE)
    tree = parser.parse(source)
    root = tree.root_node
    if root.has_error:
        raise JavaSyntaxError(file_path, _first_error_line(root))

    return _CompilationUnitReader(root).method_declarations()


def parse_java_file(path: Path) -> list[MethodDeclaration]:
    return parse_java_source(path.read_bytes(), file_path=str(path))


def _text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def _compact(text: str) -> str:
    return _WHITESPACE_RE.sub("", text)


def _first_error_line(root: Node) -> Optional[int]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def _decode_string_literal(raw: str) -> Optional[str]:
    # text blocks are not resolved
    if raw.startswith('"""') or len(raw) < 2:
        return None
    return _ESCAPE_RE.sub(_unescape, raw[1:-1])


def _unescape(match: re.Match[str]) -> str:
    seq = match.group(1)
    if seq[0] == "u":
        return chr(int(seq.lstrip("u"), 16))
    if seq[0] in "01234567":
        return chr(int(seq, 8))
    return _JAVA_ESCAPES.get(seq, seq)


def _modifiers(node: Node) -> Optional[Node]:
    for child in node.children:
        if child.type == "modifiers":
            return child
    return None


def _has_modifier(node: Node, keyword: str) -> bool:
    mods = _modifiers(node)
    return mods is not None and any(c.type == keyword for c in mods.children)


def _is_anonymous_body(node: Node) -> bool:
    return node.type == "class_body" and node.parent is not None and node.parent.type in _ANONYMOUS_BODY_PARENTS


def _is_local_declaration(node: Node) -> bool:
    # a type declared inside a method or initializer block
    return node.parent is not None and node.parent.type not in _MEMBER_CONTAINERS


class _CompilationUnitReader:
    def __init__(self, root: Node) -> None:
        self.root = root
        self.package = self._package_name()
        # Owner simple name -> NAME -> value
        self.type_constants: dict[str, dict[str, str]] = {}
        # NAME -> value, None once a second type declares the same NAME
        self.file_constants: dict[str, Optional[str]] = {}
        self._collect_string_constants()

    # ----------------------------
    # Declarations
    # ----------------------------

    def method_declarations(self) -> list[MethodDeclaration]:
        out: list[MethodDeclaration] = []
        stack: list[tuple[Node, Optional[_TypeFrame]]] = [(self.root, None)]

        while stack:
            node, frame = stack.pop()
            inner = frame

            if node.type in _TYPE_DECLARATIONS:
                inner = self._named_type_frame(node, frame)
            elif _is_anonymous_body(node) and frame is not None:
                inner = self._anonymous_type_frame(frame)
            elif node.type == "method_declaration" and frame is not None:
                out.append(
                    MethodDeclaration(
                        name=_text(node.child_by_field_name("name")),
                        type_name=frame.qualified_name,
                        annotations=self._annotations_of(node, frame.owners),
                        type_annotations=frame.annotations,
                        line=node.start_point[0] + 1,
                    )
                )

            # reversed so the stack pops children in source order
            stack.extend((child, inner) for child in reversed(node.named_children))

        return out

    def _package_name(self) -> str:
        for child in self.root.named_children:
            if child.type != "package_declaration":
                continue
            for part in child.named_children:
                if part.type in ("scoped_identifier", "identifier"):
                    return _compact(_text(part))
        return ""

    def _named_type_frame(self, node: Node, outer: Optional[_TypeFrame]) -> _TypeFrame:
        name = _text(node.child_by_field_name("name"))
        owners = outer.owners if outer is not None else ()

        if outer is None:
            qualified = f"{self.package}.{name}" if self.package else name
        elif _is_local_declaration(node):
            qualified = f"{outer.qualified_name}${outer.next_local_index(name)}{name}"
        else:
            qualified = f"{outer.qualified_name}${name}"

        # a type's own annotations sit outside its body, so its members are not in scope there
        return _TypeFrame(qualified, owners + (name,), self._annotations_of(node, owners))

    @staticmethod
    def _anonymous_type_frame(outer: _TypeFrame) -> _TypeFrame:
        index = outer.next_local_index("")
        return _TypeFrame(f"{outer.qualified_name}${index}", outer.owners, ())

    # ----------------------------
    # Annotations
    # ----------------------------

    def _annotations_of(self, node: Node, owners: tuple[str, ...]) -> tuple[Annotation, ...]:
        mods = _modifiers(node)
        if mods is None:
            return ()
        return tuple(
            self._annotation(a, owners) for a in mods.named_children if a.type in _ANNOTATION_NODES
        )

    def _annotation(self, node: Node, owners: tuple[str, ...]) -> Annotation:
        name = _compact(_text(node.child_by_field_name("name")))
        attributes: dict[str, list[ElementValue]] = {}

        args = node.child_by_field_name("arguments")
        if args is not None:
            for arg in args.named_children:
                if arg.type in _COMMENT_NODES:
                    continue
                if arg.type == "element_value_pair":
                    key = _text(arg.child_by_field_name("key"))
                    value = arg.child_by_field_name("value")
                else:
                    # @RequestMapping("/x") is shorthand for value = "/x"
                    key, value = "value", arg
                attributes.setdefault(key, []).extend(self._element_values(value, owners))

        return Annotation(name=name, attributes={k: tuple(v) for k, v in attributes.items()})

    def _element_values(self, node: Optional[Node], owners: tuple[str, ...]) -> list[ElementValue]:
        if node is None:
            return []
        if node.type == "element_value_array_initializer":
            out: list[ElementValue] = []
            for child in node.named_children:
                out.extend(self._element_values(child, owners))
            return out
        if node.type in _COMMENT_NODES:
            return []
        value = self._constant_value(node, owners)
        return [value] if value is not None else []

    def _constant_value(self, node: Node, owners: tuple[str, ...]) -> Optional[ElementValue]:
        kind = node.type

        if kind == "string_literal":
            decoded = _decode_string_literal(_text(node))
            return ElementValue("string", decoded) if decoded is not None else None

        if kind == "parenthesized_expression":
            inner = [c for c in node.named_children if c.type not in _COMMENT_NODES]
            return self._constant_value(inner[0], owners) if len(inner) == 1 else None

        if kind == "binary_expression":
            if _text(node.child_by_field_name("operator")) != "+":
                return None
            left = node.child_by_field_name("left")
            right = node.child_by_field_name("right")
            if left is None or right is None:
                return None
            lv = self._constant_value(left, owners)
            rv = self._constant_value(right, owners)
            if lv is None or rv is None or lv.kind != "string" or rv.kind != "string":
                return None
            return ElementValue("string", lv.text + rv.text)

        if kind == "identifier":
            name = _text(node)
            constant = self._lookup_constant(name, owners)
            if constant is not None:
                return ElementValue("string", constant)
            return ElementValue("symbol", name)

        if kind in ("field_access", "scoped_identifier"):
            parts = _compact(_text(node)).split(".")
            if len(parts) >= 2:
                constant = self.type_constants.get(parts[-2], {}).get(parts[-1])
                if constant is not None:
                    return ElementValue("string", constant)
            return ElementValue("symbol", parts[-1])

        return None

    # ----------------------------
    # Same-file string constants
    # ----------------------------

    def _lookup_constant(self, name: str, owners: tuple[str, ...]) -> Optional[str]:
        """Innermost enclosing type first, then a name declared by exactly one type in the file."""
        for owner in reversed(owners):
            constant = self.type_constants.get(owner, {}).get(name)
            if constant is not None:
                return constant
        return self.file_constants.get(name)

    def _collect_string_constants(self) -> None:
        """
        Record `final` String fields (and interface constants) declared in this file,
        per declaring type. Earlier declarations may be referenced by later ones.
        """
        stack: list[tuple[Node, tuple[str, ...]]] = [(self.root, ())]
        while stack:
            node, owners = stack.pop()
            inner = owners

            if node.type in _TYPE_DECLARATIONS:
                inner = owners + (_text(node.child_by_field_name("name")),)
            elif _is_anonymous_body(node):
                # anonymous members are visible to nobody outside the body
                inner = owners + ("",)
            elif node.type in ("field_declaration", "constant_declaration"):
                if owners and (node.type == "constant_declaration" or _has_modifier(node, "final")):
                    self._record_constants(node, owners)
                continue

            stack.extend((child, inner) for child in reversed(node.named_children))

    def _record_constants(self, node: Node, owners: tuple[str, ...]) -> None:
        declared = self.type_constants.setdefault(owners[-1], {})
        for declarator in node.children_by_field_name("declarator"):
            value_node = declarator.child_by_field_name("value")
            if value_node is None:
                continue
            value = self._constant_value(value_node, owners)
            if value is None or value.kind != "string":
                continue
            name = _text(declarator.child_by_field_name("name"))
            declared.setdefault(name, value.text)
            self.file_constants[name] = None if name in self.file_constants else value.text
