"""Reference graph accumulated over every analyzed file."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from refiner.models import EXTERNAL, INTERNAL, ModuleReference


@dataclass(frozen=True)
class ReferenceGraph:
    external_used: frozenset[str] = frozenset()
    internal_targets: frozenset[Path] = frozenset()
    local_reference_counts: Mapping[Path, int] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_references(cls, origin: Path, references: Iterable[ModuleReference]) -> ReferenceGraph:
        """Build the contribution of a single file."""
        external: set[str] = set()
        targets: set[Path] = set()
        internal_count = 0
        for reference in references:
            if reference.kind == EXTERNAL and reference.package:
                external.add(reference.package)
            elif reference.kind == INTERNAL:
                internal_count += 1
                if reference.target is not None:
                    targets.add(reference.target)
        counts = {origin: internal_count} if internal_count else {}
        return cls(
            external_used=frozenset(external),
            internal_targets=frozenset(targets),
            local_reference_counts=MappingProxyType(counts),
        )

    def merge(self, other: ReferenceGraph) -> ReferenceGraph:
        counts = Counter(self.local_reference_counts)
        counts.update(other.local_reference_counts)
        return ReferenceGraph(
            external_used=self.external_used | other.external_used,
            internal_targets=self.internal_targets | other.internal_targets,
            local_reference_counts=MappingProxyType(dict(counts)),
        )

    def local_references(self, identity: Path) -> int:
        return self.local_reference_counts.get(identity, 0)


def build_graph(contributions: Iterable[ReferenceGraph]) -> ReferenceGraph:
    """Union every contribution in one pass; equivalent to folding with merge."""
    external: set[str] = set()
    targets: set[Path] = set()
    counts: Counter[Path] = Counter()
    for contribution in contributions:
        external.update(contribution.external_used)
        targets.update(contribution.internal_targets)
        counts.update(contribution.local_reference_counts)
    return ReferenceGraph(
        external_used=frozenset(external),
        internal_targets=frozenset(targets),
        local_reference_counts=MappingProxyType(dict(counts)),
    )
