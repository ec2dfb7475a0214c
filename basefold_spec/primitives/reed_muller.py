"""Reed-Muller codes RM(r, m) over GF(p).

Codewords are evaluations, over the boolean hypercube {0,1}^m, of
multilinear polynomials of total degree <= r. Point j of the hypercube has
coordinate i equal to bit i of j.

Generator rows are monomial evaluations. Parity-check rows are the signed
sub-cube indicators h_U(x) = (-1)^(|U| - wt(x)) * [supp(x) ⊆ U] for
|U| > r: applying h_U to a codeword extracts (by Mobius inversion) the
coefficient of monomial U, which is zero for every codeword. Over GF(2)
the signs vanish and h_U is the classical dual-code indicator.
"""

import itertools
import logging
from collections import Counter
from dataclasses import dataclass
from math import comb
from typing import Dict, Iterator, List, Sequence, Tuple

import numpy as np

from ..errors import ConfigurationError, DecodingError, EncodingError
from .field import ElementLike, FieldArray, prime_field, to_field_array

logger = logging.getLogger(__name__)

# --- Type Aliases ---

Monomial = Tuple[int, ...]  # increasing variable indices


@dataclass(frozen=True)
class AffineSubspace:
    """Coset offset + span{e_i : i in basis} of the hypercube.

    points[mask] is the point offset | (basis bits selected by mask), so the
    parity of popcount(mask) is the parity of the point's weight on basis.
    """
    basis: Monomial
    offset: int
    points: Tuple[int, ...]


def _popcount(x: int) -> int:
    return bin(x).count("1")


def _mask(variables: Sequence[int]) -> int:
    m = 0
    for v in variables:
        m |= 1 << v
    return m


def monomials(max_degree: int, variables: int, min_degree: int = 0) -> List[Monomial]:
    """Variable subsets of size in [min_degree, max_degree], by degree then lexicographic."""
    out: List[Monomial] = []
    for d in range(min_degree, min(max_degree, variables) + 1):
        out.extend(itertools.combinations(range(variables), d))
    return out


def code_dimension(degree: int, variables: int) -> int:
    """k = sum_{i=0}^{r} C(m, i)."""
    return sum(comb(variables, i) for i in range(min(degree, variables) + 1))


class ReedMullerCode:
    """RM(degree, variables) over GF(modulus)."""

    def __init__(self, degree: int, variables: int, modulus: int):
        if degree < 0:
            raise ConfigurationError(f"degree must be >= 0, got {degree}")
        if variables < 0:
            raise ConfigurationError(f"variables must be >= 0, got {variables}")

        self.degree = degree
        self.variables = variables
        self.modulus = modulus
        self.field = prime_field(modulus)

        self.n = 1 << variables
        self.k = code_dimension(degree, variables)
        self.monomials = monomials(degree, variables)
        self._monomial_index: Dict[Monomial, int] = {s: i for i, s in enumerate(self.monomials)}

        self.evaluation_points = self._evaluation_points()
        self.generator_matrix = self._generator_matrix()
        self.parity_check_matrix = self._parity_check_matrix()

    def __repr__(self) -> str:
        return f"ReedMullerCode(degree={self.degree}, variables={self.variables}, modulus={self.modulus})"

    # --- Construction ---

    def _evaluation_points(self) -> np.ndarray:
        """n x m 0/1 matrix; row j is the binary expansion of j (bit i -> column i)."""
        idx = np.arange(self.n, dtype=np.int64)
        return ((idx[:, None] >> np.arange(self.variables, dtype=np.int64)) & 1).astype(np.uint8)

    def _generator_matrix(self) -> FieldArray:
        rows = np.zeros((self.k, self.n), dtype=np.int64)
        for i, monomial in enumerate(self.monomials):
            # all() over an empty selection is True: the constant monomial
            rows[i] = np.all(self.evaluation_points[:, list(monomial)] == 1, axis=1)
        return self.field(rows)

    def _parity_check_matrix(self) -> FieldArray:
        dual = monomials(self.variables, self.variables, min_degree=self.degree + 1)
        idx = np.arange(self.n, dtype=np.int64)
        weights = np.array([_popcount(int(j)) for j in idx], dtype=np.int64)

        signs = np.zeros((len(dual), self.n), dtype=np.int8)
        for i, monomial in enumerate(dual):
            u = _mask(monomial)
            inside = (idx & ~u) == 0
            odd = (len(monomial) - weights) % 2 == 1
            signs[i] = np.where(inside, np.where(odd, -1, 1), 0)

        rows = self.field((signs != 0).astype(np.int64))
        negative = signs < 0
        rows[negative] = -rows[negative]
        return rows

    # --- Encoding ---

    def encode(self, message: Sequence[ElementLike]) -> FieldArray:
        """codeword[j] = sum_i message[i] * G[i][j].

        Raises:
            EncodingError: If len(message) != k
        """
        if len(message) != self.k:
            raise EncodingError(f"message length {len(message)} != code dimension {self.k}")
        msg = to_field_array(message, self.modulus)
        return msg @ self.generator_matrix

    def syndrome(self, word: Sequence[ElementLike]) -> FieldArray:
        """H @ word; all-zero exactly for codewords."""
        if len(word) != self.n:
            raise DecodingError(f"word length {len(word)} != code length {self.n}")
        return self.parity_check_matrix @ to_field_array(word, self.modulus)

    def is_codeword(self, word: Sequence[ElementLike]) -> bool:
        return not np.any(self.syndrome(word))

    # --- Decoding ---

    def subspaces(self, dimension: int) -> Iterator[AffineSubspace]:
        """Enumerate every affine subspace offset + span{e_i : i in basis}, |basis| = dimension.

        Bases are increasing index tuples from itertools.combinations; offsets
        range over points that are zero on the basis coordinates. Iterative,
        so a fresh call restarts the sequence.
        """
        if dimension < 0 or dimension > self.variables:
            return
        for basis in itertools.combinations(range(self.variables), dimension):
            basis_mask = _mask(basis)
            spans = []
            for sel in range(1 << dimension):
                spans.append(_mask(b for j, b in enumerate(basis) if (sel >> j) & 1))
            for offset in range(self.n):
                if offset & basis_mask:
                    continue
                yield AffineSubspace(
                    basis=basis,
                    offset=offset,
                    points=tuple(offset | s for s in spans),
                )

    def _coset_estimate(self, residual: List[int], subspace: AffineSubspace) -> int:
        """Signed sum over the coset: one vote for the coefficient of monomial `basis`."""
        p = self.modulus
        dim = len(subspace.basis)
        total = 0
        for sel, point in enumerate(subspace.points):
            if (dim - _popcount(sel)) % 2:
                total -= residual[point]
            else:
                total += residual[point]
        return total % p

    def decode(self, received: Sequence[ElementLike]) -> FieldArray:
        """Reed majority-logic decoding; returns the length-k message.

        Degree levels are processed from `degree` down to 0. Each monomial S
        of the current degree receives one vote per coset of span{e_i : i in S};
        the most frequent vote wins (ties go to the first coset seen). The
        decoded part is subtracted before moving one degree down. Recovers
        the message when fewer than 2^(m-r-1) positions are corrupted.

        Raises:
            DecodingError: If len(received) != n
        """
        if len(received) != self.n:
            raise DecodingError(f"received length {len(received)} != code length {self.n}")

        residual_arr = to_field_array(received, self.modulus)
        decoded = self.field.Zeros(self.k)

        for level in range(min(self.degree, self.variables), -1, -1):
            residual = [int(x) for x in residual_arr]
            by_basis: Dict[Monomial, Counter] = {}
            for subspace in self.subspaces(level):
                votes = by_basis.setdefault(subspace.basis, Counter())
                votes[self._coset_estimate(residual, subspace)] += 1

            level_rows = []
            for monomial, votes in by_basis.items():
                value, count = votes.most_common(1)[0]
                row = self._monomial_index[monomial]
                decoded[row] = value
                level_rows.append(row)
                logger.debug("decode: monomial %s -> %d (%d/%d votes)",
                             monomial, value, count, sum(votes.values()))

            if level_rows:
                residual_arr = residual_arr - decoded[level_rows] @ self.generator_matrix[level_rows]

        return decoded

    # --- Code Parameters ---

    @property
    def minimum_distance(self) -> int:
        """2^(m - r) (the code is the whole space when r >= m)."""
        return 1 << (self.variables - min(self.degree, self.variables))

    def weight_distribution(self, limit: int = 1 << 16) -> Dict[int, int]:
        """Exhaustive weight enumerator {hamming weight: codeword count}.

        Only for tiny codes: enumerates all p^k messages.

        Raises:
            ConfigurationError: If p^k exceeds limit
        """
        total = self.modulus ** self.k
        if total > limit:
            raise ConfigurationError(f"{total} codewords exceeds enumeration limit {limit}")

        distribution: Dict[int, int] = {}
        for message in itertools.product(range(self.modulus), repeat=self.k):
            weight = int(np.count_nonzero(self.encode(list(message))))
            distribution[weight] = distribution.get(weight, 0) + 1
        return dict(sorted(distribution.items()))
