"""Basefold commitment scheme: commit (encode, merkelize, fold) and query."""

import hashlib
import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures.thread import BrokenThreadPool
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..errors import BasefoldSystemError, ConfigurationError, EncodingError
from ..primitives.field import (
    ElementLike,
    FieldArray,
    FieldElement,
    elements_bytes,
    to_field_array,
)
from ..primitives.merkle_tree import MerkleProof, MerkleRoot, verify_merkle_proof
from ..primitives.reed_muller import ReedMullerCode
from ..primitives.transcript import Transcript
from .config import BasefoldConfig, build_code_family, build_t_vectors
from .fold import Fold
from .proof import Oracles, RoundProofTable
from .verifier import QueryVerifier, normalize_oracles

logger = logging.getLogger(__name__)

TRANSCRIPT_LABEL = b"basefold-v1"


class BasefoldProtocol:
    """Basefold over a family of Reed-Muller codes.

    Round i encodes its input with code_family[i], commits to the codeword,
    and folds it in half under a challenge derived from the transcript.
    Round i's folded output (n_i / 2 values) is round i+1's message, so
    n_i // 2 must equal k_{i+1}.

    The instance is read-only after construction: commit returns its
    artifacts, and query takes them back as arguments.
    """

    def __init__(
        self,
        code_family: Sequence[ReedMullerCode],
        t_vectors: Sequence[Sequence[ElementLike]],
        rng: Optional[np.random.Generator] = None,
        max_workers: Optional[int] = None,
    ):
        self.code_family: Tuple[ReedMullerCode, ...] = tuple(code_family)
        self._validate_family()
        self.modulus = self.code_family[0].modulus
        self.field = self.code_family[0].field
        self.t_vectors: Tuple[FieldArray, ...] = self._validate_t_vectors(t_vectors)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_workers = max_workers

        logger.info(
            "Basefold over GF(%d): %d rounds, code lengths %s, message length %d",
            self.modulus, self.n_rounds, [c.n for c in self.code_family], self.message_length,
        )

    @classmethod
    def from_config(
        cls, config: BasefoldConfig, rng: Optional[np.random.Generator] = None
    ) -> "BasefoldProtocol":
        """Standard family for a config: RM(degree, m), then RM(m', m') for m' = m-1 .. 1."""
        config.validate()
        code_family = build_code_family(config)
        return cls(
            code_family,
            build_t_vectors(code_family),
            rng=rng if rng is not None else config.rng(),
            max_workers=config.max_workers,
        )

    # --- Validation ---

    def _validate_family(self) -> None:
        family = self.code_family
        if not family:
            raise ConfigurationError("code family is empty")

        moduli = {code.modulus for code in family}
        if len(moduli) != 1:
            raise ConfigurationError(f"codes use different moduli: {sorted(moduli)}")

        for i, code in enumerate(family):
            if code.n < 2:
                raise ConfigurationError(f"round {i}: code length {code.n} cannot be folded")
            if i + 1 < len(family):
                nxt = family[i + 1]
                if nxt.variables >= code.variables:
                    raise ConfigurationError(
                        f"variable counts must strictly decrease: round {i} has {code.variables}, "
                        f"round {i + 1} has {nxt.variables}"
                    )
                if code.n // 2 != nxt.k:
                    raise ConfigurationError(
                        f"round {i} folds to {code.n // 2} values but round {i + 1} expects "
                        f"messages of length {nxt.k}"
                    )

    def _validate_t_vectors(self, t_vectors: Sequence[Sequence[ElementLike]]) -> Tuple[FieldArray, ...]:
        if len(t_vectors) != len(self.code_family):
            raise ConfigurationError(
                f"{len(t_vectors)} t-vectors for {len(self.code_family)} rounds"
            )

        converted = []
        for i, (t, code) in enumerate(zip(t_vectors, self.code_family)):
            if len(t) != code.n:
                raise ConfigurationError(f"round {i}: t-vector length {len(t)} != code length {code.n}")
            arr = to_field_array(t, self.modulus)
            if np.any(arr[0::2] == arr[1::2]):
                raise ConfigurationError(f"round {i}: t-vector pairs must hold distinct points")
            converted.append(arr)
        return tuple(converted)

    # --- Properties ---

    @property
    def n_rounds(self) -> int:
        return len(self.code_family)

    @property
    def message_length(self) -> int:
        return self.code_family[0].k

    # --- Transcript ---

    def new_transcript(self) -> Transcript:
        """Transcript seeded with the public parameters of this instance."""
        transcript = Transcript(TRANSCRIPT_LABEL)
        transcript.put_ints([self.modulus, self.n_rounds])
        for code in self.code_family:
            transcript.put_ints([code.degree, code.variables])
        t_digest = hashlib.sha3_256()
        for t in self.t_vectors:
            t_digest.update(b"".join(elements_bytes(t, self.modulus)))
        transcript.put(t_digest.digest())
        return transcript

    def derive_challenges(self, roots: Sequence[MerkleRoot]) -> List[FieldElement]:
        """Folding challenges for a sequence of committed roots.

        Challenge i depends on the public parameters and roots[0..i].
        """
        transcript = self.new_transcript()
        challenges = []
        for root in roots:
            transcript.put(bytes(root))
            challenges.append(transcript.get_field(self.modulus))
        return challenges

    # --- Commit ---

    def commit(self, message: Sequence[ElementLike]) -> Tuple[Oracles, RoundProofTable]:
        """Commit to a message.

        Returns:
            oracles: [message, fold of round 0, ..., fold of round d]
            table: roots and every pair opening, keyed (round, pair index)

        Raises:
            EncodingError: If len(message) != k of the first code
        """
        if len(message) != self.message_length:
            raise EncodingError(
                f"message length {len(message)} != code dimension {self.message_length}"
            )

        transcript = self.new_transcript()
        current = to_field_array(message, self.modulus)
        oracles: Oracles = [current]
        roots: List[MerkleRoot] = []
        openings = {}

        for round_idx, code in enumerate(self.code_family):
            # Commit: encode, build Merkle tree, absorb root
            codeword = code.encode(current)
            tree = Fold.merkelize(codeword, self.modulus)
            root = tree.get_root()
            roots.append(root)
            transcript.put(root)

            # Fold: derive challenge, halve the codeword
            challenge = transcript.get_field(self.modulus)
            folded = Fold.fold(codeword, self.t_vectors[round_idx], challenge)
            openings.update(Fold.open_pairs(round_idx, codeword, folded, tree, self.modulus))

            logger.debug("commit round %d: n=%d root=%s challenge=%d",
                         round_idx, code.n, root.hex()[:16], challenge.value)
            current = folded
            oracles.append(current)

        return oracles, RoundProofTable(roots=tuple(roots), entries=openings)

    # --- Query ---

    def sample_positions(self, n_queries: int, rng: Optional[np.random.Generator] = None) -> List[int]:
        """Uniform leaf positions in the first round's codeword."""
        rng = rng if rng is not None else self.rng
        return [int(x) for x in rng.integers(0, self.code_family[0].n, size=n_queries)]

    def query(
        self,
        oracles: Sequence[Sequence[ElementLike]],
        table: RoundProofTable,
        n_queries: int,
        rng: Optional[np.random.Generator] = None,
    ) -> bool:
        """Run n_queries (the security parameter lambda) independent checks.

        Accepts only if every check passes. Malformed transcripts are
        rejected, never raised on.
        """
        if n_queries < 1:
            raise ConfigurationError(f"n_queries must be >= 1, got {n_queries}")

        try:
            normalized = normalize_oracles(self.code_family, oracles, table)
        except TypeError as exc:
            logger.warning("Rejecting transcript: %s", exc)
            return False
        if normalized is None:
            return False

        verifier = QueryVerifier(
            self.code_family,
            self.t_vectors,
            self.derive_challenges(table.roots),
            normalized,
            table,
        )

        # Positions are drawn on this thread; the checks only read shared data
        positions = self.sample_positions(n_queries, rng)
        try:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                results = list(pool.map(verifier.check, positions))
        except BrokenThreadPool as exc:
            raise BasefoldSystemError(f"query worker pool failed: {exc}") from exc

        accepted = all(results)
        logger.info("query: %d/%d checks passed -> %s",
                    sum(results), n_queries, "accept" if accepted else "reject")
        return accepted

    def verify_merkle_proof(self, root: MerkleRoot, value: ElementLike, proof: MerkleProof, index: int) -> bool:
        """Check that field value `value` is leaf `index` under `root`."""
        return verify_merkle_proof(root, elements_bytes([value], self.modulus)[0], proof, index)
