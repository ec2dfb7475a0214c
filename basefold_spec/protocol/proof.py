"""Commit-phase artifacts consumed read-only by the query phase."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Tuple

from ..primitives.field import FieldArray, FieldElement
from ..primitives.merkle_tree import MerkleProof, MerkleRoot

# --- Type Aliases ---

OpeningKey = Tuple[int, int]  # (round, pair index)
Oracles = List[FieldArray]    # oracles[0] = message, oracles[i+1] = fold of round i


@dataclass(frozen=True)
class RoundOpening:
    """Opened codeword pair of one round.

    Attributes:
        left: codeword[2j]
        right: codeword[2j + 1]
        proof: Merkle path for leaf 2j (first sibling is the hash of `right`)
        folded: Value the pair folded to, i.e. oracles[round + 1][j]
    """
    left: FieldElement
    right: FieldElement
    proof: MerkleProof
    folded: FieldElement


@dataclass(frozen=True)
class RoundProofTable:
    """Immutable (round, pair) -> RoundOpening table plus each round's root.

    Produced once per commit and passed explicitly to query; lookups never
    mutate it, so any number of checks may read it concurrently.
    """
    roots: Tuple[MerkleRoot, ...] = ()
    entries: Mapping[OpeningKey, RoundOpening] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self):
        object.__setattr__(self, "roots", tuple(self.roots))
        if not isinstance(self.entries, MappingProxyType):
            object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    @property
    def n_rounds(self) -> int:
        return len(self.roots)

    def get(self, round_idx: int, pair_idx: int) -> Optional[RoundOpening]:
        return self.entries.get((round_idx, pair_idx))

    def without(self, *keys: OpeningKey) -> "RoundProofTable":
        """Copy with the given entries removed."""
        return RoundProofTable(
            roots=self.roots,
            entries={k: v for k, v in self.entries.items() if k not in keys},
        )

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[OpeningKey]:
        return iter(self.entries)
