"""Extracts a normalized structural summary from a parsed source tree."""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from tree_sitter import Node

from .parsing import ParsedSource
from ..models import (
    ClassInfo,
    CodeStructure,
    ExportInfo,
    FunctionInfo,
    ImportInfo,
    InterfaceInfo,
    TypeAliasInfo,
)

DESTRUCTURED = "<destructured>"
ANONYMOUS = "<anonymous>"

_FUNCTION_DECLARATIONS = {
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
}
_FUNCTION_VALUES = {
    "arrow_function",
    "function_expression",
    "function",
    "generator_function",
}
_CLASS_DECLARATIONS = {"class_declaration", "abstract_class_declaration"}
_VARIABLE_STATEMENTS = {"lexical_declaration", "variable_declaration"}
_METHOD_MEMBERS = {"method_definition", "method_signature", "abstract_method_signature"}
_PROPERTY_MEMBERS = {"public_field_definition", "field_definition"}
_PARAMETER_WRAPPERS = {"required_parameter", "optional_parameter"}
_ACCESSOR_KEYWORDS = {"get", "set"}
_SIMPLE_IDENTIFIERS = {"identifier", "this"}


def extract_structure(parsed: ParsedSource) -> CodeStructure:
    """Walk ``parsed`` once and classify its declarations.

    Unknown or malformed nodes are skipped; this function does not raise for
    any tree the parser produces.
    """
    collector = _StructureCollector(parsed.source)
    collector.collect(parsed.root)
    return collector.build()


class _StructureCollector:
    def __init__(self, source: bytes) -> None:
        self._source = source
        self.functions: List[FunctionInfo] = []
        self.classes: List[ClassInfo] = []
        self.imports: List[ImportInfo] = []
        self.exports: List[ExportInfo] = []
        self.interfaces: List[InterfaceInfo] = []
        self.type_aliases: List[TypeAliasInfo] = []

    def collect(self, root: Node) -> None:
        for node in _preorder(root):
            kind = node.type
            if kind in _FUNCTION_DECLARATIONS:
                self._visit_function_declaration(node)
            elif kind in _VARIABLE_STATEMENTS:
                self._visit_variable_statement(node)
            elif kind in _CLASS_DECLARATIONS:
                self._visit_class(node)
            elif kind == "interface_declaration":
                self._visit_interface(node)
            elif kind == "type_alias_declaration":
                self._visit_type_alias(node)
            elif kind == "import_statement":
                self._visit_import(node)
            elif kind == "export_statement":
                self._visit_export(node)

    def build(self) -> CodeStructure:
        return CodeStructure(
            functions=tuple(self.functions),
            classes=tuple(self.classes),
            imports=tuple(self.imports),
            exports=tuple(self.exports),
            interfaces=tuple(self.interfaces),
            type_aliases=tuple(self.type_aliases),
        )

    # ------------------------------------------------------------------
    # Declarations

    def _visit_function_declaration(self, node: Node) -> None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return
        statement = _statement_node(node)
        self.functions.append(
            FunctionInfo(
                name=self._text(name_node),
                parameters=self._parameters(node),
                return_type=self._return_type(node),
                is_exported=_export_statement(node) is not None,
                is_async=_has_keyword(node, "async"),
                line=_line(statement),
            )
        )

    def _visit_variable_statement(self, node: Node) -> None:
        if node.parent is not None and node.parent.type == "for_statement":
            return
        statement = _statement_node(node)
        exported = _export_statement(node) is not None
        for declarator in _named_children_of_type(node, "variable_declarator"):
            name_node = declarator.child_by_field_name("name")
            value = declarator.child_by_field_name("value")
            if name_node is None or name_node.type != "identifier":
                continue
            if value is None or value.type not in _FUNCTION_VALUES:
                continue
            self.functions.append(
                FunctionInfo(
                    name=self._text(name_node),
                    parameters=self._parameters(value),
                    return_type=self._return_type(value),
                    is_exported=exported,
                    is_async=_has_keyword(value, "async"),
                    line=_line(statement),
                )
            )

    def _visit_class(self, node: Node) -> None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return
        methods: List[str] = []
        properties: List[str] = []
        body = node.child_by_field_name("body")
        if body is not None:
            for member in body.named_children:
                member_node = _simple_member_name_node(member)
                if member_node is None:
                    continue
                member_name = self._text(member_node)
                if member.type in _METHOD_MEMBERS:
                    if member_name == "constructor" or _is_accessor(member):
                        continue
                    methods.append(member_name)
                elif member.type in _PROPERTY_MEMBERS:
                    properties.append(member_name)
        self.classes.append(
            ClassInfo(
                name=self._text(name_node),
                methods=tuple(methods),
                properties=tuple(properties),
                is_exported=_export_statement(node) is not None,
                line=_line(_statement_node(node)),
            )
        )

    def _visit_interface(self, node: Node) -> None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return
        properties: List[str] = []
        body = node.child_by_field_name("body")
        if body is not None:
            for member in body.named_children:
                if member.type != "property_signature":
                    continue
                member_node = _simple_member_name_node(member)
                if member_node is not None:
                    properties.append(self._text(member_node))
        self.interfaces.append(
            InterfaceInfo(
                name=self._text(name_node),
                properties=tuple(properties),
                is_exported=_export_statement(node) is not None,
                line=_line(_statement_node(node)),
            )
        )

    def _visit_type_alias(self, node: Node) -> None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return
        self.type_aliases.append(
            TypeAliasInfo(
                name=self._text(name_node),
                is_exported=_export_statement(node) is not None,
                line=_line(_statement_node(node)),
            )
        )

    # ------------------------------------------------------------------
    # Module statements

    def _visit_import(self, node: Node) -> None:
        source_node = node.child_by_field_name("source")
        if source_node is None or source_node.type != "string":
            return

        named: List[str] = []
        default: Optional[str] = None
        namespace: Optional[str] = None

        for clause in _named_children_of_type(node, "import_clause"):
            for binding in clause.named_children:
                if binding.type == "identifier":
                    default = self._text(binding)
                elif binding.type == "namespace_import":
                    identifier = _first_named_child(binding, "identifier")
                    if identifier is not None:
                        namespace = self._text(identifier)
                elif binding.type == "named_imports":
                    for specifier in _named_children_of_type(binding, "import_specifier"):
                        local = specifier.child_by_field_name("alias") or specifier.child_by_field_name("name")
                        if local is not None:
                            named.append(self._text(local))

        self.imports.append(
            ImportInfo(
                source=self._string_value(source_node),
                named=tuple(named),
                default=default,
                namespace=namespace,
                line=_line(node),
            )
        )

    def _visit_export(self, node: Node) -> None:
        line = _line(node)
        is_default = _has_keyword(node, "default")
        kind = "default" if is_default else "named"

        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            if declaration.type == "ambient_declaration":
                declaration = declaration.named_children[0] if declaration.named_children else None
            if declaration is not None:
                for name in self._declared_names(declaration):
                    self.exports.append(ExportInfo(name=name, kind=kind, line=line))
            return

        value = node.child_by_field_name("value")
        if value is None and _has_keyword(node, "="):
            value = _last_expression(node)
        if value is not None:
            name = self._default_value_name(value)
            if name is not None:
                self.exports.append(ExportInfo(name=name, kind="default", line=line))
            return

        for clause in _named_children_of_type(node, "export_clause"):
            for specifier in _named_children_of_type(clause, "export_specifier"):
                exported = specifier.child_by_field_name("alias") or specifier.child_by_field_name("name")
                if exported is not None:
                    self.exports.append(
                        ExportInfo(name=self._string_value(exported), kind="named", line=line)
                    )

    def _declared_names(self, declaration: Node) -> Iterator[str]:
        kind = declaration.type
        if kind in _FUNCTION_DECLARATIONS:
            name_node = declaration.child_by_field_name("name")
            if name_node is not None:
                yield self._text(name_node)
        elif kind in _CLASS_DECLARATIONS:
            name_node = declaration.child_by_field_name("name")
            yield self._text(name_node) if name_node is not None else ANONYMOUS
        elif kind in {"interface_declaration", "type_alias_declaration"}:
            name_node = declaration.child_by_field_name("name")
            if name_node is not None:
                yield self._text(name_node)
        elif kind in _VARIABLE_STATEMENTS:
            for declarator in _named_children_of_type(declaration, "variable_declarator"):
                name_node = declarator.child_by_field_name("name")
                if name_node is not None and name_node.type == "identifier":
                    yield self._text(name_node)

    def _default_value_name(self, value: Node) -> Optional[str]:
        if value.type == "identifier":
            return self._text(value)
        if value.type in {"function_expression", "function", "generator_function"}:
            # `export default function name() {}` is a declaration; unnamed ones export nothing.
            name_node = value.child_by_field_name("name")
            return self._text(name_node) if name_node is not None else None
        if value.type == "class":
            name_node = value.child_by_field_name("name")
            return self._text(name_node) if name_node is not None else ANONYMOUS
        return ANONYMOUS

    # ------------------------------------------------------------------
    # Helpers

    def _parameters(self, node: Node) -> Tuple[str, ...]:
        single = node.child_by_field_name("parameter")
        if single is not None:
            return (self._parameter_name(single),)
        parameters = node.child_by_field_name("parameters")
        if parameters is None:
            return ()
        names: List[str] = []
        for parameter in parameters.named_children:
            if parameter.type in _PARAMETER_WRAPPERS:
                pattern = parameter.child_by_field_name("pattern") or parameter.child_by_field_name("name")
                names.append(self._parameter_name(pattern) if pattern is not None else DESTRUCTURED)
            elif parameter.type in _SIMPLE_IDENTIFIERS or parameter.type in {
                "rest_pattern",
                "assignment_pattern",
                "object_pattern",
                "array_pattern",
            }:
                names.append(self._parameter_name(parameter))
        return tuple(names)

    def _parameter_name(self, pattern: Node) -> str:
        if pattern.type in _SIMPLE_IDENTIFIERS:
            return self._text(pattern)
        if pattern.type == "rest_pattern":
            inner = pattern.named_children[0] if pattern.named_children else None
            if inner is not None and inner.type == "identifier":
                return self._text(inner)
        if pattern.type == "assignment_pattern":
            left = pattern.child_by_field_name("left")
            if left is not None and left.type == "identifier":
                return self._text(left)
        return DESTRUCTURED

    def _return_type(self, node: Node) -> Optional[str]:
        annotation = node.child_by_field_name("return_type")
        if annotation is None:
            return None
        if annotation.named_children:
            first = annotation.named_children[0]
            last = annotation.named_children[-1]
            return self._source[first.start_byte : last.end_byte].decode("utf-8", errors="ignore")
        return self._text(annotation).lstrip(":").strip() or None

    def _string_value(self, node: Node) -> str:
        text = self._text(node)
        if node.type == "string" and len(text) >= 2 and text[0] in {"'", '"'}:
            return text[1:-1]
        return text

    def _text(self, node: Node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def _preorder(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _export_statement(node: Node) -> Optional[Node]:
    parent = node.parent
    if parent is not None and parent.type == "ambient_declaration":
        parent = parent.parent
    if parent is not None and parent.type == "export_statement":
        return parent
    return None


def _statement_node(node: Node) -> Node:
    return _export_statement(node) or node


def _line(node: Node) -> int:
    return node.start_point[0] + 1


def _has_keyword(node: Node, keyword: str) -> bool:
    return any(not child.is_named and child.type == keyword for child in node.children)


def _is_accessor(member: Node) -> bool:
    name_node = member.child_by_field_name("name")
    for child in member.children:
        if name_node is not None and child.start_byte >= name_node.start_byte:
            break
        if not child.is_named and child.type in _ACCESSOR_KEYWORDS:
            return True
    return False


def _simple_member_name_node(member: Node) -> Optional[Node]:
    name_node = member.child_by_field_name("name")
    if name_node is None or name_node.type != "property_identifier":
        return None
    return name_node


def _named_children_of_type(node: Node, kind: str) -> Iterator[Node]:
    for child in node.named_children:
        if child.type == kind:
            yield child


def _first_named_child(node: Node, kind: str) -> Optional[Node]:
    return next(_named_children_of_type(node, kind), None)


def _last_expression(node: Node) -> Optional[Node]:
    for child in reversed(node.named_children):
        if child.type != "comment":
            return child
    return None


__all__ = ["ANONYMOUS", "DESTRUCTURED", "extract_structure"]
