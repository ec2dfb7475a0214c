"""Basefold query verification.

A query check replays, for one sampled position, every round from the last
back to the first. Round i with pair index j passes when:
1. Authentication - the opening (i, j) exists and its Merkle path binds
   codeword[2j] and codeword[2j+1] to round i's root
2. Code consistency - those two values equal oracles[i] @ G_i[:, 2j:2j+2],
   tying the round's oracle to the committed codeword
3. Fold - the affine interpolation at the round challenge equals
   oracles[i+1][j] and the opening's recorded folded value

Pair indices halve between rounds: pair j of round i produces
oracles[i+1][j], whose pair in round i+1 is j // 2.

Every read driven by the transcript is bounds-checked; malformed input
yields False, never an exception.
"""

import logging
from typing import List, Optional, Sequence

from ..errors import BasefoldError
from ..primitives.field import FieldArray, FieldElement, element_bytes, to_field_array
from ..primitives.merkle_tree import HASH_SIZE, hash_leaf, verify_merkle_proof
from ..primitives.reed_muller import ReedMullerCode
from .fold import Fold
from .proof import Oracles, RoundProofTable

logger = logging.getLogger(__name__)


def normalize_oracles(
    code_family: Sequence[ReedMullerCode],
    oracles: Sequence[Sequence[int]],
    table: RoundProofTable,
) -> Optional[Oracles]:
    """Validate transcript shape and convert oracles to field arrays.

    Returns None (after logging why) if the transcript cannot belong to
    this code family.
    """
    n_rounds = len(code_family)
    modulus = code_family[0].modulus

    if not isinstance(table, RoundProofTable):
        logger.warning("Rejecting transcript: proof table has type %s", type(table).__name__)
        return None
    if len(oracles) != n_rounds + 1:
        logger.warning("Rejecting transcript: %d oracles, expected %d", len(oracles), n_rounds + 1)
        return None
    if table.n_rounds != n_rounds:
        logger.warning("Rejecting transcript: %d roots, expected %d", table.n_rounds, n_rounds)
        return None
    if any(not isinstance(root, bytes) or len(root) != HASH_SIZE for root in table.roots):
        logger.warning("Rejecting transcript: malformed Merkle root")
        return None

    expected = [code.k for code in code_family] + [code_family[-1].n // 2]
    converted: Oracles = []
    for i, (oracle, length) in enumerate(zip(oracles, expected)):
        if len(oracle) != length:
            logger.warning("Rejecting transcript: oracle %d has length %d, expected %d",
                           i, len(oracle), length)
            return None
        try:
            converted.append(to_field_array(oracle, modulus))
        except (BasefoldError, OverflowError, TypeError, ValueError) as exc:
            logger.warning("Rejecting transcript: oracle %d is not in GF(%d): %s", i, modulus, exc)
            return None
    return converted


class QueryVerifier:
    """Read-only state shared by all query checks of one query call."""

    def __init__(
        self,
        code_family: Sequence[ReedMullerCode],
        t_vectors: Sequence[FieldArray],
        challenges: Sequence[FieldElement],
        oracles: Oracles,
        table: RoundProofTable,
    ):
        self.code_family = code_family
        self.t_vectors = t_vectors
        self.challenges = challenges
        self.oracles = oracles
        self.table = table
        self.modulus = code_family[0].modulus

    def pair_indices(self, position: int) -> List[int]:
        """Pair index per round for a leaf position in round 0's codeword."""
        indices = [position // 2]
        for _ in range(1, len(self.code_family)):
            indices.append(indices[-1] // 2)
        return indices

    def check(self, position: int) -> bool:
        """Run one query check; True only if every round passes."""
        if position < 0 or position >= self.code_family[0].n:
            logger.debug("Query position %d out of range", position)
            return False

        indices = self.pair_indices(position)
        try:
            for round_idx in reversed(range(len(self.code_family))):
                if not self.check_round(round_idx, indices[round_idx]):
                    return False
        except (BasefoldError, AttributeError, IndexError, OverflowError, TypeError, ValueError) as exc:
            logger.debug("Query at position %d rejected on malformed data: %s", position, exc)
            return False
        return True

    def check_round(self, round_idx: int, pair_idx: int) -> bool:
        code = self.code_family[round_idx]
        if pair_idx < 0 or 2 * pair_idx + 1 >= code.n:
            logger.debug("Round %d: pair %d out of range", round_idx, pair_idx)
            return False

        opening = self.table.get(round_idx, pair_idx)
        if opening is None:
            logger.debug("Round %d: no opening for pair %d", round_idx, pair_idx)
            return False

        left, right = opening.left, opening.right
        if left.modulus != self.modulus or right.modulus != self.modulus:
            logger.debug("Round %d: opening for pair %d is over another field", round_idx, pair_idx)
            return False

        # Authentication
        root = self.table.roots[round_idx]
        proof = opening.proof
        if not verify_merkle_proof(root, element_bytes(left, self.modulus), proof, 2 * pair_idx):
            logger.debug("Round %d: Merkle path for pair %d does not verify", round_idx, pair_idx)
            return False
        if not proof.path or proof.path[0][0] != hash_leaf(element_bytes(right, self.modulus)):
            logger.debug("Round %d: right value of pair %d not authenticated", round_idx, pair_idx)
            return False

        # Code consistency
        columns = code.generator_matrix[:, 2 * pair_idx:2 * pair_idx + 2]
        expected_pair = self.oracles[round_idx] @ columns
        if int(expected_pair[0]) != left.value or int(expected_pair[1]) != right.value:
            logger.debug("Round %d: oracle does not encode to the opened pair %d", round_idx, pair_idx)
            return False

        # Fold
        t = self.t_vectors[round_idx]
        t0 = FieldElement(int(t[2 * pair_idx]), self.modulus)
        t1 = FieldElement(int(t[2 * pair_idx + 1]), self.modulus)
        folded = Fold.fold_pair(t0, t1, left, right, self.challenges[round_idx])
        next_value = int(self.oracles[round_idx + 1][pair_idx])
        if folded.value != next_value or folded != opening.folded:
            logger.debug("Round %d: fold mismatch at pair %d (expected %d, oracle %d)",
                         round_idx, pair_idx, folded.value, next_value)
            return False

        return True
