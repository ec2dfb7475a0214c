"""Tests for codeword folding and pair openings."""

import numpy as np
import pytest

from basefold_spec.errors import ConfigurationError
from basefold_spec.primitives.field import FieldElement, element_bytes, prime_field
from basefold_spec.primitives.merkle_tree import hash_leaf, verify_merkle_proof
from basefold_spec.protocol.fold import Fold

P = 97
GF = prime_field(P)


class TestFold:

    @pytest.mark.parametrize("n", [2, 4, 16])
    def test_vectorized_matches_scalar(self, n: int, rng: np.random.Generator) -> None:
        codeword = GF(rng.integers(0, P, size=n))
        t = GF(np.arange(n))
        challenge = FieldElement.random(P, rng)
        folded = Fold.fold(codeword, t, challenge)
        assert len(folded) == n // 2
        for j in range(n // 2):
            expected = Fold.fold_pair(
                FieldElement(int(t[2 * j]), P),
                FieldElement(int(t[2 * j + 1]), P),
                FieldElement(int(codeword[2 * j]), P),
                FieldElement(int(codeword[2 * j + 1]), P),
                challenge,
            )
            assert int(folded[j]) == expected.value

    def test_affine_interpolation(self) -> None:
        """Pair values of f(x) = 5 + 3x fold to f(r)."""
        t = GF([2, 7])
        codeword = GF([5 + 3 * 2, 5 + 3 * 7])
        folded = Fold.fold(codeword, t, FieldElement(10, P))
        assert int(folded[0]) == 5 + 3 * 10

    @pytest.mark.parametrize("r", [0, 1])
    def test_challenge_at_pair_point(self, r: int) -> None:
        """Folding at t0 or t1 returns the matching pair value."""
        codeword = GF([11, 42])
        folded = Fold.fold(codeword, GF([0, 1]), FieldElement(r, P))
        assert int(folded[0]) == int(codeword[r])

    def test_odd_length_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            Fold.fold(GF([1, 2, 3]), GF([0, 1, 2]), FieldElement(1, P))

    def test_t_vector_length_mismatch_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            Fold.fold(GF([1, 2]), GF([0, 1, 2, 3]), FieldElement(1, P))


class TestOpenPairs:

    def test_openings_cover_every_pair(self, rng: np.random.Generator) -> None:
        codeword = GF(rng.integers(0, P, size=8))
        t = GF(np.arange(8))
        folded = Fold.fold(codeword, t, FieldElement(3, P))
        tree = Fold.merkelize(codeword, P)
        openings = Fold.open_pairs(2, codeword, folded, tree, P)

        assert sorted(openings) == [(2, j) for j in range(4)]
        for (_, j), opening in openings.items():
            assert opening.left.value == int(codeword[2 * j])
            assert opening.right.value == int(codeword[2 * j + 1])
            assert opening.folded.value == int(folded[j])
            assert verify_merkle_proof(tree.get_root(), element_bytes(opening.left, P), opening.proof, 2 * j)
            assert opening.proof.path[0][0] == hash_leaf(element_bytes(opening.right, P))
