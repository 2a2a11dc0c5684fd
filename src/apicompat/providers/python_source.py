"""Python source provider: reads a package's public surface with ``ast``.

Mapping:
    package directory           -> assembly (version from ``__version__``)
    module (dotted path)        -> namespace
    class / nested class        -> type / nested type
    function / method           -> M: member, parameter names as signature
    ``@property``               -> P: member
    module or class attribute   -> F: member
    ``from .x import Cls``      -> alias forwarding ``<module>.Cls`` to ``x.Cls``

Accessibility follows naming convention: ``_name`` is internal, ``__name``
(not a dunder) is private, anything else is public.  A module ``__all__``
marks every unlisted top-level name internal, and modules with a ``_``-prefixed
path component are internal namespaces.

Nothing is imported or executed; the provider only parses.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from ..exceptions import ParsingError, UnsupportedSourceError
from ..logging_config import get_logger
from ..symbols import factory
from ..symbols.containers import ElementContainer, MetadataInformation
from ..symbols.model import Accessibility, Alias, Declaration
from .base import Source

logger = get_logger(__name__)

_SKIP_DIRS = {"__pycache__", ".git", ".tox", ".venv", "venv", "build", "dist"}

_SKIP_DECORATORS = {"overload", "typing.overload"}

_PROPERTY_DECORATORS = {"property", "cached_property", "functools.cached_property"}


@dataclass
class _Module:
    name: str
    path: Path
    tree: ast.Module
    is_package: bool
    exported: Optional[frozenset[str]] = None  # __all__, when declared
    declarations: list[Declaration] = field(default_factory=list)
    classes: dict[str, Declaration] = field(default_factory=dict)


class PythonSourceProvider:
    """Builds a declaration tree from a Python package directory or single module."""

    name = "python"

    def load(self, source: Source) -> Declaration:
        return self.load_container(source).element

    def load_container(self, source: Source, display: Optional[str] = None) -> ElementContainer:
        root = Path(source)
        if root.is_file() and root.suffix == ".py":
            assembly_name = root.stem
            files = [(assembly_name, root, False)]
        elif root.is_dir():
            assembly_name = root.name
            files = list(_discover(root))
        else:
            raise UnsupportedSourceError(root)

        modules = [self._parse(name, path, is_package) for name, path, is_package in files]
        by_name = {m.name: m for m in modules}

        # Every module first: aliases may point at any class in the package
        for module in modules:
            module.declarations = _declarations(module.tree.body, module.exported)
            module.classes = {d.name: d for d in module.declarations if d.is_type}

        namespaces = [
            factory.namespace(
                m.name,
                *m.declarations,
                accessibility=_namespace_access(m.name),
            )
            for m in modules
        ]
        aliases = [a for m in modules for a in _aliases(m, by_name)]
        tree = factory.assembly(assembly_name, *namespaces, aliases=aliases)

        version = _version(by_name.get(assembly_name))
        logger.debug(
            f"Parsed {assembly_name}: {len(namespaces)} modules, {len(aliases)} re-exports"
        )
        return ElementContainer(
            tree, MetadataInformation(assembly_name, version, display or assembly_name)
        )

    def _parse(self, name: str, path: Path, is_package: bool) -> _Module:
        try:
            source = path.read_text(encoding="utf-8")
            tree = ast.parse(source, filename=str(path))
        except SyntaxError as e:
            raise ParsingError(path, f"line {e.lineno}: {e.msg}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ParsingError(path, str(e)) from e
        return _Module(name, path, tree, is_package, _exported_names(tree))


# ── Discovery ────────────────────────────────────────────────────────


def _discover(root: Path) -> Iterable[tuple[str, Path, bool]]:
    """(dotted name, path, is_package) for every module under ``root``, sorted by name."""
    found: list[tuple[str, Path, bool]] = []
    for path in root.rglob("*.py"):
        rel = path.relative_to(root)
        if any(part in _SKIP_DIRS for part in rel.parts[:-1]):
            continue
        parts = [root.name, *rel.parts[:-1]]
        is_package = path.name == "__init__.py"
        if not is_package:
            parts.append(path.stem)
        found.append((".".join(parts), path, is_package))
    return sorted(found, key=lambda item: item[0])


def _namespace_access(module_name: str) -> Accessibility:
    # The package root keeps its own name whatever it is
    for part in module_name.split(".")[1:]:
        if part.startswith("_") and not _is_dunder(part):
            return Accessibility.INTERNAL
    return Accessibility.PUBLIC


# ── Names and accessibility ──────────────────────────────────────────


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def _name_access(name: str, exported: Optional[frozenset[str]] = None) -> Accessibility:
    if _is_dunder(name):
        return Accessibility.PUBLIC
    if name.startswith("__"):
        return Accessibility.PRIVATE
    if name.startswith("_"):
        return Accessibility.INTERNAL
    if exported is not None and name not in exported:
        return Accessibility.INTERNAL
    return Accessibility.PUBLIC


def _exported_names(tree: ast.Module) -> Optional[frozenset[str]]:
    for node in tree.body:
        if isinstance(node, ast.Assign):
            targets = node.targets
        elif isinstance(node, ast.AnnAssign) and node.value is not None:
            targets = [node.target]
        else:
            continue
        if any(isinstance(t, ast.Name) and t.id == "__all__" for t in targets):
            if isinstance(node.value, (ast.List, ast.Tuple)):
                return frozenset(
                    elt.value
                    for elt in node.value.elts
                    if isinstance(elt, ast.Constant) and isinstance(elt.value, str)
                )
    return None


def _dotted_name(node: ast.expr) -> str:
    if isinstance(node, ast.Call):
        node = node.func
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return f"{_dotted_name(node.value)}.{node.attr}"
    return ""


# ── Declarations ─────────────────────────────────────────────────────


def _statements(body: list[ast.stmt]) -> Iterable[ast.stmt]:
    """Flatten ``if``/``try`` blocks; ``if TYPE_CHECKING:`` bodies are skipped."""
    for node in body:
        if isinstance(node, ast.If):
            if _dotted_name(node.test).endswith("TYPE_CHECKING"):
                yield from _statements(node.orelse)
                continue
            yield from _statements(node.body)
            yield from _statements(node.orelse)
        elif isinstance(node, ast.Try):
            yield from _statements(node.body)
            for handler in node.handlers:
                yield from _statements(handler.body)
            yield from _statements(node.orelse)
            yield from _statements(node.finalbody)
        else:
            yield node


def _declarations(
    body: list[ast.stmt],
    exported: Optional[frozenset[str]] = None,
    in_class: bool = False,
) -> list[Declaration]:
    """Declarations bound by ``body``, keyed by name.

    A rebinding replaces the earlier declaration but keeps its position.
    """
    found: dict[str, Declaration] = {}
    for node in _statements(body):
        for declaration in _declare(node, exported, in_class):
            found[declaration.name] = declaration
    return list(found.values())


def _declare(
    node: ast.stmt,
    exported: Optional[frozenset[str]],
    in_class: bool,
) -> list[Declaration]:
    if isinstance(node, ast.ClassDef):
        return [
            factory.type_decl(
                node.name,
                *_declarations(node.body, in_class=True),
                accessibility=_name_access(node.name, exported),
            )
        ]

    if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
        decorators = [_dotted_name(d) for d in node.decorator_list]
        if any(d in _SKIP_DECORATORS for d in decorators):
            return []
        if any(d.endswith((".setter", ".deleter")) for d in decorators):
            return []
        access = _name_access(node.name, exported)
        if in_class and any(d in _PROPERTY_DECORATORS for d in decorators):
            return [factory.prop(node.name, accessibility=access)]
        drop_first = in_class and "staticmethod" not in decorators
        return [factory.method(node.name, *_parameters(node.args, drop_first), accessibility=access)]

    if isinstance(node, ast.Assign):
        names = [n for t in node.targets for n in _target_names(t)]
    elif isinstance(node, ast.AnnAssign):
        names = _target_names(node.target)
    else:
        return []
    return [
        factory.field(name, accessibility=_name_access(name, exported))
        for name in names
        if name != "__all__"
    ]


def _target_names(target: ast.expr) -> list[str]:
    if isinstance(target, ast.Name):
        return [target.id]
    if isinstance(target, (ast.Tuple, ast.List)):
        return [n for elt in target.elts for n in _target_names(elt)]
    return []


def _parameters(args: ast.arguments, drop_first: bool) -> list[str]:
    """Parameter names in signature order, with ``/``, ``*`` and ``**`` markers."""
    positional = [a.arg for a in args.posonlyargs] + [a.arg for a in args.args]
    params: list[str] = []
    for i, name in enumerate(positional):
        if drop_first and i == 0:
            continue
        params.append(name)
        if args.posonlyargs and i == len(args.posonlyargs) - 1:
            params.append("/")
    if args.vararg is not None:
        params.append(f"*{args.vararg.arg}")
    elif args.kwonlyargs:
        params.append("*")
    params.extend(a.arg for a in args.kwonlyargs)
    if args.kwarg is not None:
        params.append(f"**{args.kwarg.arg}")
    return params


# ── Re-exports ───────────────────────────────────────────────────────


def _resolve_module(module: _Module, node: ast.ImportFrom) -> Optional[str]:
    if node.level == 0:
        return node.module
    package = module.name.split(".")
    if not module.is_package:
        package = package[:-1]
    if node.level > 1:
        package = package[: len(package) - (node.level - 1)]
    if not package:
        return None
    return ".".join([*package, node.module] if node.module else package)


def _aliases(module: _Module, modules: dict[str, _Module]) -> list[Alias]:
    aliases: list[Alias] = []
    for node in _statements(module.tree.body):
        if not isinstance(node, ast.ImportFrom):
            continue
        source = modules.get(_resolve_module(module, node) or "")
        if source is None or source is module:
            continue
        for imported in node.names:
            local = imported.asname or imported.name
            target = source.classes.get(imported.name)
            if target is None:
                continue
            if _name_access(local, module.exported) is not Accessibility.PUBLIC:
                continue
            aliases.append(factory.forward(target, module.name, local, source.name))
    return aliases


def _version(module: Optional[_Module]) -> str:
    if module is None:
        return ""
    for node in module.tree.body:
        if isinstance(node, ast.Assign) and isinstance(node.value, ast.Constant):
            if any(isinstance(t, ast.Name) and t.id == "__version__" for t in node.targets):
                return str(node.value.value)
    return ""
