"""
Digest Chain Unit Tests
Tests for ticket_reduce/chains/digest_chain.py
"""
from ticket_reduce.chains.digest_chain import (
    ActionDigestChain,
    BatchDigestChain,
    ticket_commitment,
)
from ticket_reduce.config.runtime import HashTags
from ticket_reduce.crypto.hashing import hash_with_prefix, to_hex

from fixtures import make_action, make_ticket


class TestActionDigestChain:
    """Tests for the open-batch action chain."""

    def test_empty_is_tag_hash(self):
        chain = ActionDigestChain()
        assert chain.empty == to_hex(hash_with_prefix(HashTags().actions_empty))

    def test_from_actions_matches_appends(self):
        chain = ActionDigestChain()
        a1, a2 = make_action(round_=1), make_action(round_=2, amount=4)
        digest = chain.append(chain.append(chain.empty, a1), a2)
        assert chain.from_actions([a1, a2]) == digest

    def test_order_matters(self):
        chain = ActionDigestChain()
        a1, a2 = make_action(round_=1), make_action(round_=2)
        assert chain.from_actions([a1, a2]) != chain.from_actions([a2, a1])

    def test_from_no_actions_is_empty(self):
        chain = ActionDigestChain()
        assert chain.from_actions([]) == chain.empty

    def test_event_hash_depends_on_content(self):
        chain = ActionDigestChain()
        assert chain.event_hash(make_action(amount=1)) != chain.event_hash(make_action(amount=2))

    def test_tags_change_digest(self):
        custom = ActionDigestChain(HashTags(action_sequence="OtherSeqEvents"))
        default = ActionDigestChain()
        action = make_action()
        assert custom.append(custom.empty, action) != default.append(default.empty, action)


class TestBatchDigestChain:
    """Tests for the long-run batch chain."""

    def test_empty_differs_from_action_empty(self):
        assert BatchDigestChain().empty != ActionDigestChain().empty

    def test_families_are_separated(self):
        """Same inputs in both chains never collide."""
        actions = ActionDigestChain()
        batches = BatchDigestChain()
        digest = actions.from_actions([make_action()])
        assert batches.append(actions.empty, digest) != batches.append(batches.empty, digest)
        assert batches.append(batches.empty, digest) != actions.append(batches.empty, make_action())

    def test_from_batches(self):
        chain = BatchDigestChain()
        d1 = ActionDigestChain().from_actions([make_action(round_=1)])
        d2 = ActionDigestChain().from_actions([make_action(round_=2)])
        assert chain.from_batches([d1, d2]) == chain.append(chain.append(chain.empty, d1), d2)

    def test_from_batches_custom_start(self):
        chain = BatchDigestChain()
        start = chain.append(chain.empty, ActionDigestChain().empty)
        assert chain.from_batches([], start=start) == start


class TestTicketCommitment:
    """Tests for ticket leaf commitments."""

    def test_deterministic(self):
        assert ticket_commitment(make_ticket()) == ticket_commitment(make_ticket())

    def test_distinguishes_tickets(self):
        assert ticket_commitment(make_ticket(amount=1)) != ticket_commitment(make_ticket(amount=2))
        assert ticket_commitment(make_ticket(owner="alice")) != ticket_commitment(
            make_ticket(owner="bob")
        )

    def test_is_hex_hash(self):
        commitment = ticket_commitment(make_ticket())
        assert commitment.startswith("0x")
        assert len(commitment) == 66
