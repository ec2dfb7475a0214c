"""Binary Merkle tree over byte-string leaves using SHA3-256."""

import hashlib
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from ..errors import ProofError

# --- Constants ---

HASH_SIZE = 32
LEAF_PREFIX = b"\x00"
NODE_PREFIX = b"\x01"

# --- Type Aliases ---

MerkleRoot = bytes
Digest = bytes
PathStep = Tuple[Digest, bool]  # (sibling hash, current node is the left child)

EMPTY_ROOT: MerkleRoot = bytes(HASH_SIZE)


# --- Hashing ---

def hash_leaf(value: bytes) -> Digest:
    return hashlib.sha3_256(LEAF_PREFIX + bytes(value)).digest()


def hash_node(left: Digest, right: Digest) -> Digest:
    return hashlib.sha3_256(NODE_PREFIX + left + right).digest()


# --- Proof ---

@dataclass(frozen=True)
class MerkleProof:
    """Authentication path for one leaf.

    Attributes:
        leaf: Hash of the leaf value
        index: Leaf position
        path: (sibling, is_left) per level, leaf to root. is_left is True when
              the running node is the left input of its parent. A node
              paired with itself (odd level) lists itself as sibling.
    """
    leaf: Digest
    index: int
    path: Tuple[PathStep, ...] = field(default_factory=tuple)

    @property
    def siblings(self) -> List[Digest]:
        return [sibling for sibling, _ in self.path]

    def compute_root(self) -> Digest:
        current = self.leaf
        for sibling, is_left in self.path:
            current = hash_node(current, sibling) if is_left else hash_node(sibling, current)
        return current

    def verify(self, root: MerkleRoot) -> bool:
        """Recompute the path hash and compare with root."""
        return self.compute_root() == root


def verify_merkle_proof(root: MerkleRoot, value: bytes, proof: MerkleProof, index: int) -> bool:
    """Check that `value` sits at leaf `index` of the tree with `root`.

    Unlike MerkleProof.verify, also binds the proof to the leaf value, the
    claimed index, and direction flags consistent with the index bits.
    """
    if not isinstance(proof, MerkleProof):
        return False
    if proof.index != index or hash_leaf(value) != proof.leaf:
        return False
    for level, (sibling, is_left) in enumerate(proof.path):
        if len(sibling) != HASH_SIZE:
            return False
        if is_left != (((index >> level) & 1) == 0):
            return False
    return proof.verify(root)


# --- Merkle Tree ---

class MerkleTree:
    """Binary hash tree. layers[0] holds leaf hashes, layers[-1] the root."""

    def __init__(self):
        self.layers: List[List[Digest]] = []
        self.height = 0

    @classmethod
    def build(cls, values: Sequence[bytes]) -> "MerkleTree":
        tree = cls()
        tree.merkelize(values)
        return tree

    # --- Core Operations ---

    def merkelize(self, values: Sequence[bytes]) -> None:
        """Hash every value into a leaf and build the tree bottom-up."""
        self.height = len(values)
        if self.height == 0:
            self.layers = []
            return

        level = [hash_leaf(v) for v in values]
        self.layers = [level]
        while len(level) > 1:
            nxt = []
            for i in range(0, len(level), 2):
                left = level[i]
                right = level[i + 1] if i + 1 < len(level) else left
                nxt.append(hash_node(left, right))
            self.layers.append(nxt)
            level = nxt

    def get_root(self) -> MerkleRoot:
        """Return the root, or EMPTY_ROOT for a tree without leaves."""
        if not self.layers:
            return EMPTY_ROOT
        return self.layers[-1][0]

    def generate_proof(self, index: int) -> MerkleProof:
        """Build the authentication path for leaf `index`.

        Raises:
            ProofError: If index is outside [0, height)
        """
        if index < 0 or index >= self.height:
            raise ProofError(f"Leaf index {index} out of range [0, {self.height})")

        path: List[PathStep] = []
        idx = index
        for layer in self.layers[:-1]:
            is_left = idx % 2 == 0
            sibling_idx = idx + 1 if is_left else idx - 1
            if sibling_idx >= len(layer):
                sibling_idx = idx
            path.append((layer[sibling_idx], is_left))
            idx //= 2

        return MerkleProof(leaf=self.layers[0][index], index=index, path=tuple(path))

    def get_proof_length(self) -> int:
        """Number of levels in a proof."""
        return max(len(self.layers) - 1, 0)
