"""Tests for the source structure extractor."""

from __future__ import annotations

from workscope.analyzers.structure import ANONYMOUS, DESTRUCTURED, extract_structure
from workscope.models import ExportInfo, ImportInfo
from tests._fixtures.workspace_builder import WorkspaceBuilder


def test_extract_structure_collects_functions_and_imports(workspace_builder: WorkspaceBuilder) -> None:
    parsed = workspace_builder.parse(
        """
        import { readFile } from "fs";
        import path from "path";
        import * as utils from "./utils";
        import { helper as h, other } from './helpers';

        export async function loadUser(id: string, ...rest: number[]): Promise<User> {
          return fetchUser(id);
        }

        function internal({ a, b }: Opts, [x]: number[], count = 1) {
          return a;
        }

        export const greet = (name: string): string => `hi ${name}`;
        const add = async (a, b) => a + b;
        const single = x => x;
        """
    )

    structure = extract_structure(parsed)

    assert [fn.name for fn in structure.functions] == ["loadUser", "internal", "greet", "add", "single"]
    load_user, internal, greet, add, single = structure.functions

    assert load_user.parameters == ("id", "rest")
    assert load_user.return_type == "Promise<User>"
    assert load_user.is_exported is True
    assert load_user.is_async is True
    assert load_user.line == 6

    assert internal.parameters == (DESTRUCTURED, DESTRUCTURED, "count")
    assert internal.return_type is None
    assert internal.is_exported is False

    assert greet.parameters == ("name",)
    assert greet.return_type == "string"
    assert greet.is_exported is True
    assert greet.is_async is False
    assert greet.line == 14

    assert add.is_async is True
    assert add.is_exported is False
    assert single.parameters == ("x",)

    assert structure.imports == (
        ImportInfo(source="fs", named=("readFile",), default=None, namespace=None, line=1),
        ImportInfo(source="path", named=(), default="path", namespace=None, line=2),
        ImportInfo(source="./utils", named=(), default=None, namespace="utils", line=3),
        ImportInfo(source="./helpers", named=("h", "other"), default=None, namespace=None, line=4),
    )
    assert structure.exports == (
        ExportInfo(name="loadUser", kind="named", line=6),
        ExportInfo(name="greet", kind="named", line=14),
    )


def test_extract_structure_handles_classes_interfaces_and_types(workspace_builder: WorkspaceBuilder) -> None:
    parsed = workspace_builder.parse(
        """
        export interface User {
          id: string;
          name?: string;
          greet(): void;
        }

        type Id = string | number;
        export type Role = "admin" | "user";

        export abstract class Repository {
          abstract find(id: Id): User;
        }

        export default class UserManager extends Base {
          private users: User[] = [];
          static count = 0;
          #secret = 1;
          ["computed"] = 2;

          constructor(private readonly repo: Repository) {
            super();
          }

          get size(): number {
            return this.users.length;
          }

          set size(value: number) {}

          async addUser(user: User): Promise<void> {
            this.users.push(user);
          }

          removeUser(id: Id) {}
        }
        """
    )

    structure = extract_structure(parsed)

    assert [(iface.name, iface.properties, iface.is_exported, iface.line) for iface in structure.interfaces] == [
        ("User", ("id", "name"), True, 1)
    ]
    assert [(alias.name, alias.is_exported, alias.line) for alias in structure.type_aliases] == [
        ("Id", False, 7),
        ("Role", True, 8),
    ]

    repository, manager = structure.classes
    assert repository.name == "Repository"
    assert repository.methods == ("find",)
    assert repository.is_exported is True
    assert repository.line == 10

    assert manager.name == "UserManager"
    assert manager.methods == ("addUser", "removeUser")
    assert manager.properties == ("users", "count")
    assert manager.is_exported is True
    assert manager.line == 14

    assert structure.functions == ()
    assert [(item.name, item.kind) for item in structure.exports] == [
        ("User", "named"),
        ("Role", "named"),
        ("Repository", "named"),
        ("UserManager", "default"),
    ]


def test_export_clauses_and_default_expressions(workspace_builder: WorkspaceBuilder) -> None:
    parsed = workspace_builder.parse(
        """
        function a() {}
        function b() {}
        export { a, b as c };
        export * from "./other";
        export default a;
        """
    )

    structure = extract_structure(parsed)

    assert [fn.is_exported for fn in structure.functions] == [False, False]
    assert structure.imports == ()
    assert structure.exports == (
        ExportInfo(name="a", kind="named", line=3),
        ExportInfo(name="c", kind="named", line=3),
        ExportInfo(name="a", kind="default", line=5),
    )


def test_anonymous_default_exports(workspace_builder: WorkspaceBuilder) -> None:
    anonymous_class = extract_structure(workspace_builder.parse("export default class {}\n"))
    anonymous_function = extract_structure(workspace_builder.parse("export default function () {}\n"))
    object_literal = extract_structure(workspace_builder.parse("export default { a: 1 };\n"))

    assert [item.name for item in anonymous_class.exports] == [ANONYMOUS]
    assert anonymous_function.exports == ()
    assert anonymous_function.functions == ()
    assert [(item.name, item.kind) for item in object_literal.exports] == [(ANONYMOUS, "default")]


def test_exported_variable_statement_records_every_declarator(workspace_builder: WorkspaceBuilder) -> None:
    structure = extract_structure(
        workspace_builder.parse("export const limit = 1, compute = () => limit;\n")
    )

    assert [item.name for item in structure.exports] == ["limit", "compute"]
    assert [fn.name for fn in structure.functions] == ["compute"]
    assert structure.functions[0].is_exported is True


def test_nested_functions_are_collected(workspace_builder: WorkspaceBuilder) -> None:
    structure = extract_structure(
        workspace_builder.parse(
            """
            function outer() {
              function inner() {}
              const helper = function () {};
              return inner;
            }
            """
        )
    )

    assert [(fn.name, fn.line) for fn in structure.functions] == [
        ("outer", 1),
        ("inner", 2),
        ("helper", 3),
    ]


def test_ambient_exported_declarations(workspace_builder: WorkspaceBuilder) -> None:
    structure = extract_structure(
        workspace_builder.parse("export declare function ambient(value: number): void;\n", "types.d.ts")
    )

    assert [item.name for item in structure.exports] == ["ambient"]
    assert [(fn.name, fn.parameters, fn.return_type, fn.is_exported) for fn in structure.functions] == [
        ("ambient", ("value",), "void", True)
    ]


def test_react_component_in_tsx(workspace_builder: WorkspaceBuilder) -> None:
    parsed = workspace_builder.parse(
        """
        import React, { useState } from "react";

        export const Counter = ({ start }: Props) => {
          const [count, setCount] = useState(start);
          return <button onClick={() => setCount(count + 1)}>{count}</button>;
        };
        """,
        "Counter.tsx",
    )

    structure = extract_structure(parsed)

    assert parsed.grammar == "tsx"
    assert structure.imports == (
        ImportInfo(source="react", named=("useState",), default="React", namespace=None, line=1),
    )
    assert [(fn.name, fn.parameters, fn.is_exported) for fn in structure.functions] == [
        ("Counter", (DESTRUCTURED,), True)
    ]
    assert [item.name for item in structure.exports] == ["Counter"]


def test_extract_structure_tolerates_syntax_errors(workspace_builder: WorkspaceBuilder) -> None:
    parsed = workspace_builder.parse(
        """
        import { ok } from "./ok";
        function broken( {
        """
    )

    structure = extract_structure(parsed)

    assert parsed.has_errors is True
    assert [item.source for item in structure.imports] == ["./ok"]
