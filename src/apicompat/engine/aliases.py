"""Alias resolution — makes type forwarding transparent to matching.

Each assembly's forwarding records are resolved eagerly into a lookup table
keyed by the forwarded identity before matching starts.  The matcher
consults the table only after a direct identity lookup fails.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from ..symbols.identity import type_identity
from ..symbols.model import Alias, Declaration


@dataclass(frozen=True)
class ResolvedAlias:
    """A forwarding record with both ends named by identity."""

    identity: str  # what a lookup asks for
    namespace: str  # namespace the forwarded identity lives in
    target: Declaration
    target_identity: str  # where the declaration really lives

    @classmethod
    def from_alias(cls, alias: Alias) -> ResolvedAlias:
        return cls(
            identity=type_identity(alias.namespace, alias.name),
            namespace=alias.namespace,
            target=alias.target,
            target_identity=type_identity(alias.target_namespace, alias.target.name),
        )


class AliasTable:
    """Identity-keyed view over one assembly's forwarding records.

    Read-only after construction, so one table may serve concurrent
    comparisons.  When two records forward the same identity the first wins.
    """

    def __init__(self, aliases: tuple[Alias, ...] = ()):
        self._by_identity: dict[str, ResolvedAlias] = {}
        for alias in aliases:
            resolved = ResolvedAlias.from_alias(alias)
            self._by_identity.setdefault(resolved.identity, resolved)

    @classmethod
    def for_assembly(cls, assembly: Declaration) -> AliasTable:
        return cls(assembly.aliases)

    def __len__(self) -> int:
        return len(self._by_identity)

    def __iter__(self) -> Iterator[ResolvedAlias]:
        return iter(self._by_identity.values())

    def __contains__(self, identity: object) -> bool:
        return identity in self._by_identity

    def resolve(self, identity: str) -> Optional[ResolvedAlias]:
        """Return the record forwarding ``identity``, or None."""
        return self._by_identity.get(identity)

    def in_namespace(self, namespace: str) -> list[ResolvedAlias]:
        """Records whose forwarded identity belongs to ``namespace``, in record order."""
        return [a for a in self._by_identity.values() if a.namespace == namespace]

    def namespaces(self) -> list[str]:
        """Distinct namespaces covered by the table, in first-seen order."""
        return list(dict.fromkeys(a.namespace for a in self._by_identity.values()))
