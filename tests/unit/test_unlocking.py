"""Тесты drain логики UnlockingService.

Coverage:
- plan_drain: полный/частичный drain, остановка на незрелом entry
- apply_drain: применение плана к очереди
- UnlockingService: NothingUnlockable, TransferFailed с откатом, unlock для другого аккаунта
"""

import pytest

from src.core.clock import ManualHeightClock
from src.core.domain import GlobalConfig, Lock, LockQueue, RegistrarState
from src.core.errors import InvalidParameter, NothingUnlockable, TransferFailed
from src.custody import InMemoryCustody
from src.registrar import UnlockingService, apply_drain, plan_drain


def make_queue(*pairs):
    return LockQueue(Lock(amount=amount, maturity_height=height) for amount, height in pairs)


# =============================================================================
# PLAN / APPLY
# =============================================================================


class TestPlanDrain:
    """Тесты plan_drain."""

    def test_full_consumption_of_matured_prefix(self):
        queue = make_queue((100, 10), (100, 20), (100, 30))

        plan = plan_drain(queue, 500, current_height=20)

        assert plan.released == 200
        assert plan.entries_consumed == 2
        assert plan.front_remainder is None

    def test_partial_front(self):
        queue = make_queue((100, 10), (100, 20))

        plan = plan_drain(queue, 150, current_height=20)

        assert plan.released == 150
        assert plan.entries_consumed == 1
        assert plan.front_remainder == Lock(amount=50, maturity_height=20)

    def test_exact_amount_consumes_without_remainder(self):
        queue = make_queue((100, 10), (100, 10))

        plan = plan_drain(queue, 100, current_height=10)

        assert plan.released == 100
        assert plan.entries_consumed == 1
        assert plan.front_remainder is None

    def test_plan_does_not_mutate_queue(self):
        queue = make_queue((100, 10), (100, 20))
        before = queue.snapshot()

        plan_drain(queue, 150, current_height=20)

        assert queue.snapshot() == before

    def test_immature_front_blocks_matured_entries_behind(self):
        """Незрелый front блокирует всё за ним."""
        queue = make_queue((100, 50), (100, 10))

        plan = plan_drain(queue, 100, current_height=20)

        assert plan.released == 0
        assert plan.entries_consumed == 0


class TestApplyDrain:
    """Тесты apply_drain."""

    def test_apply_partial_plan(self):
        queue = make_queue((100, 10), (100, 20), (100, 30))

        apply_drain(queue, plan_drain(queue, 150, current_height=25))

        assert [entry.as_pair() for entry in queue] == [(50, 20), (100, 30)]

    def test_apply_drains_to_empty(self):
        queue = make_queue((100, 10), (40, 10))

        apply_drain(queue, plan_drain(queue, 1_000, current_height=10))

        assert len(queue) == 0


# =============================================================================
# SERVICE
# =============================================================================


@pytest.fixture
def clock():
    return ManualHeightClock(start_height=20)


@pytest.fixture
def custody():
    """Custody с 300 токенами уже в custody."""
    return InMemoryCustody(custody_account="registrar", balances={"registrar": 300})


@pytest.fixture
def state():
    registrar_state = RegistrarState(config=GlobalConfig(token="TKN", operator="op", lock_duration=10))
    for pair in ((100, 10), (100, 20), (100, 30)):
        registrar_state.account("alice").queue.append(Lock(amount=pair[0], maturity_height=pair[1]))
    return registrar_state


@pytest.fixture
def service(state, custody, clock):
    return UnlockingService(state, custody, clock)


class TestUnlockingService:
    """Тесты UnlockingService."""

    def test_unlock_self(self, service, custody, state):
        result = service.unlock("alice", 150)

        assert result.released == 150
        assert result.requested == 150
        assert result.recipient == "alice"
        assert result.partial is False
        assert custody.balance_of("alice") == 150
        assert custody.custody_balance() == 150
        assert [entry.as_pair() for entry in state.account("alice").queue] == [(50, 20), (100, 30)]

    def test_unlock_partial_liquidity_is_not_error(self, service, custody):
        result = service.unlock("alice", 1_000)

        assert result.released == 200
        assert result.partial is True
        assert result.entries_consumed == 2
        assert custody.balance_of("alice") == 200

    def test_unlock_explicit_account_pays_that_account(self, service, custody):
        """Двухаргументная форма: получатель — целевой аккаунт, не caller."""
        result = service.unlock("bob", 100, account="alice")

        assert result.account == "alice"
        assert result.recipient == "alice"
        assert custody.balance_of("alice") == 100
        assert custody.balance_of("bob") == 0

    def test_unknown_account_nothing_unlockable(self, service, state):
        with pytest.raises(NothingUnlockable):
            service.unlock("nobody", 10)

        assert state.peek_account("nobody") is None

    def test_immature_front_nothing_unlockable(self, state, custody):
        service = UnlockingService(state, custody, ManualHeightClock(start_height=9))

        with pytest.raises(NothingUnlockable) as exc_info:
            service.unlock("alice", 100)

        assert "no unlockables found" in str(exc_info.value)
        assert exc_info.value.current_height == 9
        assert custody.balance_of("alice") == 0
        assert len(state.account("alice").queue) == 3

    def test_failed_push_rolls_back(self, service, custody, state):
        before = state.account("alice").queue.snapshot()
        custody.fail_next_push()

        with pytest.raises(TransferFailed) as exc_info:
            service.unlock("alice", 150)

        assert exc_info.value.direction == "push"
        assert state.account("alice").queue.snapshot() == before
        assert custody.custody_balance() == 300
        assert custody.balance_of("alice") == 0

    @pytest.mark.parametrize("amount", [0, -10, 1.5])
    def test_invalid_amount(self, service, state, amount):
        with pytest.raises(InvalidParameter):
            service.unlock("alice", amount)

        assert len(state.account("alice").queue) == 3
