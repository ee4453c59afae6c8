"""
Reduction Driver Tests
Tests for ticket_reduce/reduction/driver.py
"""
import pytest

from ticket_reduce.crypto.hashing import ZERO_LEAF
from ticket_reduce.merkle.sparse_tree import empty_root
from ticket_reduce.reduction.chain_verification import verify_chain
from ticket_reduce.reduction.models import ADD_TICKET, CUT_ACTIONS, INIT
from ticket_reduce.schemas.errors import InvalidWitnessError, ReducerException, SequencingError

from fixtures import make_action, make_config, make_driver, make_program


class TestStart:
    """Tests for driver start-up."""

    def test_head_requires_start(self, program):
        driver = make_driver(program, start=False)
        with pytest.raises(RuntimeError, match="not been started"):
            driver.head

    def test_start_issues_base_certificate(self, program):
        driver = make_driver(program, start=False)
        cert = driver.start()
        assert cert.transition == INIT
        assert cert.public_output.final_state == program.batches.empty
        assert cert.public_output.new_ticket_root == driver.round_tree.root_hex
        assert cert.public_output.new_bank_root == driver.bank_tree.root_hex

    def test_start_twice_rejected(self, driver):
        with pytest.raises(RuntimeError, match="already started"):
            driver.start()

    def test_custom_initial_state(self, program):
        driver = make_driver(program, start=False)
        state = "0x" + "11" * 32
        driver.start(initial_state=state)
        assert driver.state.initial_state == state
        assert driver.state.final_state == state

    def test_round_tree_default_is_empty_ticket_tree(self, driver, config):
        assert driver.empty_ticket_root == empty_root(config.tree_depth, ZERO_LEAF, config.tags.tree_node)
        assert driver.round_tree.get(7) == driver.empty_ticket_root


class TestAddTicket:
    """Tests for driver bookkeeping around addTicket."""

    def test_trees_track_certified_roots(self, scenario_driver):
        state = scenario_driver.state
        assert scenario_driver.round_tree.root_hex == state.new_ticket_root
        assert scenario_driver.bank_tree.root_hex == state.new_bank_root

    def test_ticket_subtrees_per_round(self, scenario_driver):
        assert len(scenario_driver.ticket_trees[1]) == 2
        assert len(scenario_driver.ticket_trees[2]) == 1
        assert scenario_driver.round_tree.get(1) == scenario_driver.ticket_trees[1].root

    def test_next_ticket_id(self, scenario_driver):
        assert scenario_driver.next_ticket_id(2) == 2
        assert scenario_driver.next_ticket_id(3) == 1

    def test_untouched_round_has_empty_subtree(self, driver):
        assert driver.ticket_tree(5).root == driver.empty_ticket_root
        assert 5 not in driver.ticket_trees

    def test_rejected_step_leaves_state_untouched(self, scenario_driver):
        length = len(scenario_driver.certificates)
        round_root = scenario_driver.round_tree.root
        bank_root = scenario_driver.bank_tree.root
        round_one = scenario_driver.ticket_trees[1].root

        with pytest.raises(SequencingError):
            scenario_driver.add_ticket(make_action(round_=1))

        assert len(scenario_driver.certificates) == length
        assert scenario_driver.round_tree.root == round_root
        assert scenario_driver.bank_tree.root == bank_root
        assert scenario_driver.ticket_trees[1].root == round_one

    def test_round_beyond_tree_capacity(self):
        driver = make_driver(make_program(make_config(tree_depth=4)))
        with pytest.raises(InvalidWitnessError, match="round 16"):
            driver.add_ticket(make_action(round_=16))
        assert len(driver.certificates) == 1

    def test_ticket_id_beyond_tree_capacity(self):
        driver = make_driver(make_program(make_config(tree_depth=4)))
        for _ in range(15):
            driver.add_ticket(make_action(round_=1))
        with pytest.raises(InvalidWitnessError, match="ticket_id 16") as exc_info:
            driver.add_ticket(make_action(round_=1))
        assert exc_info.value.details == {"ticket_id": 16, "capacity": 16}

    def test_driver_can_continue_after_rejection(self, scenario_driver):
        with pytest.raises(ReducerException):
            scenario_driver.add_ticket(make_action(round_=1))
        cert = scenario_driver.add_ticket(make_action(round_=2, amount=4))
        assert cert.public_output.last_processed_ticket_id == 2
        assert scenario_driver.bank_value(2) == 5


class TestReduce:
    """Tests for whole-batch reduction."""

    def test_reduce_closes_batch(self, driver, program):
        actions = [make_action(round_=1), make_action(round_=1, amount=2), make_action(round_=3)]
        head = driver.reduce(actions)
        assert head.transition == CUT_ACTIONS
        assert head.public_output.final_state == program.batches.append(
            program.batches.empty, program.actions.from_actions(actions)
        )
        assert [c.transition for c in driver.certificates] == [INIT] + [ADD_TICKET] * 3 + [CUT_ACTIONS]

    def test_reduce_without_cut(self, driver):
        head = driver.reduce([make_action(round_=1)], cut=False)
        assert head.transition == ADD_TICKET

    def test_reduce_empty_batch(self, driver, program):
        head = driver.reduce([])
        assert head.public_output.final_state == program.batches.append(
            program.batches.empty, program.actions.empty
        )

    def test_multiple_batches_verify(self, driver, program):
        driver.reduce([make_action(round_=1), make_action(round_=2)])
        driver.reduce([make_action(round_=2, amount=5), make_action(round_=4)])
        assert driver.bank_value(2) == 6
        assert verify_chain(driver.certificates, program).ok

    def test_reduce_is_logged(self, driver, caplog):
        with caplog.at_level("INFO", logger="ticket_reduce.reduction.driver"):
            driver.reduce([make_action(round_=1)])
        assert "Reduced 1 actions" in caplog.text
