"""
Tests for threshold committee proofs.
"""

import pytest

from fhe_tournament.exceptions import ConfigurationError
from fhe_tournament.oracles.committee import Committee, CommitteeProof

CLEARTEXT = b'["95","log-A","alice"]'


class TestCommittee:
    """Test Committee quorum verification."""

    def test_quorum_accepted(self) -> None:
        committee, members = Committee.generate(size=3, threshold=2)
        proof = Committee.attest(members[:2], 7, CLEARTEXT)
        assert committee.verify(7, CLEARTEXT, proof) is True

    def test_below_threshold_rejected(self) -> None:
        committee, members = Committee.generate(size=3, threshold=2)
        proof = Committee.attest(members[:1], 7, CLEARTEXT)
        assert committee.verify(7, CLEARTEXT, proof) is False

    def test_signature_bound_to_request_id(self) -> None:
        committee, members = Committee.generate(size=3, threshold=2)
        proof = Committee.attest(members, 7, CLEARTEXT)
        assert committee.verify(8, CLEARTEXT, proof) is False

    def test_signature_bound_to_cleartext(self) -> None:
        committee, members = Committee.generate(size=3, threshold=2)
        proof = Committee.attest(members, 7, CLEARTEXT)
        assert committee.verify(7, b'["95","log-A","mallory"]', proof) is False

    def test_outsider_signatures_do_not_count(self) -> None:
        """Signatures from another committee should not reach quorum."""
        # Arrange
        committee, members = Committee.generate(size=3, threshold=2)
        _, outsiders = Committee.generate(size=3, threshold=2)
        signatures = dict(Committee.attest(members[:1], 7, CLEARTEXT).signatures)
        signatures["intruder"] = outsiders[0].sign(7, CLEARTEXT)
        # Same member id, wrong key
        signatures[members[1].member_id] = outsiders[1].sign(7, CLEARTEXT)

        # Act / Assert
        assert committee.verify(7, CLEARTEXT, CommitteeProof(signatures)) is False

    def test_proof_dict_round_trip(self) -> None:
        committee, members = Committee.generate(size=2, threshold=2)
        proof = Committee.attest(members, 1, CLEARTEXT)
        restored = CommitteeProof.from_dict(proof.to_dict())
        assert committee.verify(1, CLEARTEXT, restored) is True

    def test_invalid_threshold(self) -> None:
        with pytest.raises(ConfigurationError):
            Committee.generate(size=2, threshold=3)
