"""Tests for the Fiat-Shamir transcript."""

from basefold_spec.primitives.field import FieldElement
from basefold_spec.primitives.transcript import Transcript


def _challenges(transcript: Transcript, count: int, modulus: int = 97):
    return [transcript.get_field(modulus) for _ in range(count)]


class TestTranscript:

    def test_deterministic(self) -> None:
        a, b = Transcript(), Transcript()
        for t in (a, b):
            t.put(b"root")
            t.put_ints([97, 3])
        assert _challenges(a, 5) == _challenges(b, 5)
        assert a.get_state() == b.get_state()

    def test_put_changes_challenges(self) -> None:
        a, b = Transcript(), Transcript()
        a.put(b"root-a")
        b.put(b"root-b")
        assert _challenges(a, 4) != _challenges(b, 4)

    def test_label_separates_transcripts(self) -> None:
        assert _challenges(Transcript(b"one"), 4) != _challenges(Transcript(b"two"), 4)

    def test_length_prefix(self) -> None:
        """put(b"ab") differs from put(b"a") followed by put(b"b")."""
        a, b = Transcript(), Transcript()
        a.put(b"ab")
        b.put(b"a")
        b.put(b"b")
        assert a.get_state() != b.get_state()

    def test_successive_squeezes_differ(self) -> None:
        t = Transcript()
        t.put(b"x")
        values = _challenges(t, 8, modulus=2 ** 61 - 1)
        assert len(set(values)) == 8

    def test_challenges_in_field(self) -> None:
        t = Transcript()
        for c in _challenges(t, 50, modulus=17):
            assert isinstance(c, FieldElement)
            assert c.modulus == 17
            assert 0 <= c.value < 17

    def test_absorb_resets_squeeze_counter(self) -> None:
        t = Transcript()
        t.get_field(97)
        assert t.out_cursor == 1
        t.put(b"more")
        assert t.out_cursor == 0
