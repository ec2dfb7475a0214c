"""Basefold folding: collapse each codeword pair to one evaluation at the challenge."""

from typing import Dict, Tuple

from ..errors import ConfigurationError
from ..primitives.field import FieldArray, FieldElement, elements_bytes
from ..primitives.merkle_tree import MerkleTree
from .proof import RoundOpening

# --- Type Aliases ---

Codeword = FieldArray  # Encoded round input (length n_i)
TVector = FieldArray   # Interpolation points for one round (length n_i)


class Fold:
    """Folding, commitment, and fold verification."""

    @staticmethod
    def fold(codeword: Codeword, t: TVector, challenge: FieldElement) -> FieldArray:
        """Evaluate, at `challenge`, the affine function through each pair.

        folded[j] = (v1 - v0) / (t1 - t0) * (r - t0) + v0 with
        (v0, v1) = codeword[2j : 2j+2] and (t0, t1) = t[2j : 2j+2].
        """
        if len(codeword) % 2 != 0:
            raise ConfigurationError(f"codeword length {len(codeword)} is odd")
        if len(t) != len(codeword):
            raise ConfigurationError(f"t-vector length {len(t)} != codeword length {len(codeword)}")

        field = type(codeword)
        r = field(challenge.value)
        v0, v1 = codeword[0::2], codeword[1::2]
        t0, t1 = t[0::2], t[1::2]
        slope = (v1 - v0) / (t1 - t0)
        return slope * (r - t0) + v0

    @staticmethod
    def fold_pair(
        t0: FieldElement,
        t1: FieldElement,
        v0: FieldElement,
        v1: FieldElement,
        challenge: FieldElement,
    ) -> FieldElement:
        """Scalar fold of one pair; matches Fold.fold entry for entry."""
        slope = (v1 - v0) / (t1 - t0)
        return slope * (challenge - t0) + v0

    @staticmethod
    def merkelize(codeword: Codeword, modulus: int) -> MerkleTree:
        """Commit to a codeword: one leaf per entry."""
        return MerkleTree.build(elements_bytes(codeword, modulus))

    @staticmethod
    def open_pairs(
        round_idx: int,
        codeword: Codeword,
        folded: FieldArray,
        tree: MerkleTree,
        modulus: int,
    ) -> Dict[Tuple[int, int], RoundOpening]:
        """Openings for every pair of a round, keyed (round, pair index).

        The proof is for the left leaf 2j; its first sibling is the leaf hash
        of the right value, so a single path authenticates both.
        """
        openings: Dict[Tuple[int, int], RoundOpening] = {}
        for j in range(len(codeword) // 2):
            openings[(round_idx, j)] = RoundOpening(
                left=FieldElement(int(codeword[2 * j]), modulus),
                right=FieldElement(int(codeword[2 * j + 1]), modulus),
                proof=tree.generate_proof(2 * j),
                folded=FieldElement(int(folded[j]), modulus),
            )
        return openings
