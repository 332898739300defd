"""
Integration tests for membership activation and signup commissions.

Tests cover:
- Fixed per-plan amounts up to five levels
- One payout per (user, plan, level)
- Direct sponsor earning window extension
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import select, update

from earning_engine.models import (
    Notification,
    ReferralCommissionEarning,
    SignupCommission,
    Transaction,
    User,
)
from earning_engine.models.enums import CommissionSource, MembershipStatus
from earning_engine.services.admin import AdminUserControlService
from earning_engine.services.referral.signup_commission import signup_reference
from earning_engine.utils.datetime_utils import ensure_utc
from earning_engine.utils.exceptions import PlanNotFoundError


pytestmark = pytest.mark.integration


@pytest.fixture
def chain(make_user, now):
    """New INACTIVE member under a three-sponsor chain."""

    async def _chain(top_plan: str = "BASIC", middle_status=MembershipStatus.ACTIVE):
        s3 = await make_user(plan="BASIC")
        s2 = await make_user(plan="BASIC", status=middle_status, sponsor=s3)
        s1 = await make_user(
            plan=top_plan, sponsor=s2, start=now - timedelta(days=40)
        )
        member = await make_user(
            plan=None, status=MembershipStatus.INACTIVE, sponsor=s1, start=None
        )
        return member, s1, s2, s3

    return _chain


class TestActivation:
    """Activation sets the membership and pays the schedule."""

    @pytest.mark.asyncio
    async def test_activation_sets_membership(
        self, session, plans, chain, fetch, now
    ):
        member, *_ = await chain()

        result = await AdminUserControlService(session).activate_membership(
            member.id, "standard", now=now
        )

        assert result.plan.name == "STANDARD"
        stored = await fetch(User, member.id)
        assert stored.membership_status == MembershipStatus.ACTIVE
        assert stored.membership_plan == "STANDARD"
        assert stored.tasks_enabled is True
        assert ensure_utc(stored.membership_start_date) == now
        assert ensure_utc(stored.membership_end_date) == now + timedelta(days=30)
        assert ensure_utc(stored.earnings_continue_until) == now + timedelta(days=30)

    @pytest.mark.asyncio
    async def test_sponsors_credited_per_level(
        self, session, plans, chain, fetch, count_rows, now
    ):
        member, s1, s2, s3 = await chain()

        result = await AdminUserControlService(session).activate_membership(
            member.id, "STANDARD", now=now
        )

        assert [(c.sponsor_id, c.level, c.amount) for c in result.commissions.credits] == [
            (s1.id, 1, Decimal("250")),
            (s2.id, 2, Decimal("200")),
            (s3.id, 3, Decimal("170")),
        ]
        for sponsor, amount in ((s1, 250), (s2, 200), (s3, 170)):
            stored = await fetch(User, sponsor.id)
            assert stored.balance == Decimal(amount)
            assert stored.referral_earnings == Decimal(amount)
            assert stored.total_earnings == Decimal(amount)
            assert stored.available_voucher_pkr == Decimal("0")

        assert await count_rows(
            Transaction, reference=signup_reference(member.id, "STANDARD", 1)
        ) == 1
        assert await count_rows(
            ReferralCommissionEarning, source=CommissionSource.SIGNUP
        ) == 3
        assert await count_rows(
            Notification, recipient_id=s2.id, title="Level 2 Commission Earned!"
        ) == 1

    @pytest.mark.asyncio
    async def test_inactive_sponsor_still_credited(
        self, session, plans, chain, fetch, now
    ):
        member, _, s2, _ = await chain(middle_status=MembershipStatus.INACTIVE)

        await AdminUserControlService(session).activate_membership(
            member.id, "BASIC", now=now
        )

        assert (await fetch(User, s2.id)).balance == Decimal("100")

    @pytest.mark.asyncio
    async def test_disabled_schedule_level_skipped(
        self, session, plans, chain, fetch, now
    ):
        member, s1, s2, s3 = await chain()
        await session.execute(
            update(SignupCommission)
            .where(
                SignupCommission.membership_plan_id == plans["PREMIUM"].id,
                SignupCommission.level == 2,
            )
            .values(is_active=False)
        )
        await session.commit()

        result = await AdminUserControlService(session).activate_membership(
            member.id, "PREMIUM", now=now
        )

        assert result.commissions.skipped_levels == [2]
        assert (await fetch(User, s1.id)).balance == Decimal("700")
        assert (await fetch(User, s2.id)).balance == Decimal("0")
        assert (await fetch(User, s3.id)).balance == Decimal("500")

    @pytest.mark.asyncio
    async def test_reactivation_pays_nothing_twice(
        self, session, plans, chain, fetch, count_rows, now
    ):
        member, s1, *_ = await chain()
        service = AdminUserControlService(session)

        await service.activate_membership(member.id, "BASIC", now=now)
        again = await service.activate_membership(
            member.id, "BASIC", now=now + timedelta(days=1)
        )

        assert again.commissions.credits == []
        assert again.commissions.skipped_levels == [1, 2, 3]
        assert (await fetch(User, s1.id)).balance == Decimal("200")
        assert await count_rows(Transaction) == 3

    @pytest.mark.asyncio
    async def test_unknown_plan(self, session, plans, chain, now):
        member, *_ = await chain()

        with pytest.raises(PlanNotFoundError):
            await AdminUserControlService(session).activate_membership(
                member.id, "GOLD", now=now
            )


class TestSponsorWindowExtension:
    """The direct sponsor's window grows after a qualifying referral."""

    @pytest.mark.asyncio
    async def test_basic_sponsor_extended_to_sixty_days(
        self, session, plans, chain, fetch, count_rows, now
    ):
        member, s1, *_ = await chain(top_plan="BASIC")
        s1_start = ensure_utc(s1.membership_start_date)

        await AdminUserControlService(session).activate_membership(
            member.id, "BASIC", now=now
        )

        stored = await fetch(User, s1.id)
        assert ensure_utc(stored.earnings_continue_until) == s1_start + timedelta(
            days=60
        )
        assert await count_rows(
            Notification, recipient_id=s1.id, title="Earning Period Extended!"
        ) == 1

    @pytest.mark.asyncio
    async def test_premium_sponsor_needs_premium_referral(
        self, session, plans, chain, fetch, now
    ):
        member, s1, *_ = await chain(top_plan="PREMIUM")

        await AdminUserControlService(session).activate_membership(
            member.id, "STANDARD", now=now
        )

        stored = await fetch(User, s1.id)
        assert stored.earnings_continue_until is None
        assert stored.balance == Decimal("250")

    @pytest.mark.asyncio
    async def test_extension_never_shortens(
        self, session, plans, chain, fetch, now
    ):
        member, s1, *_ = await chain()
        later = now + timedelta(days=200)
        s1.earnings_continue_until = later
        await session.commit()

        await AdminUserControlService(session).activate_membership(
            member.id, "BASIC", now=now
        )

        stored = await fetch(User, s1.id)
        assert ensure_utc(stored.earnings_continue_until) == later

    @pytest.mark.asyncio
    async def test_deeper_sponsors_not_extended(
        self, session, plans, chain, fetch, now
    ):
        member, _, s2, _ = await chain()

        await AdminUserControlService(session).activate_membership(
            member.id, "PREMIUM", now=now
        )

        assert (await fetch(User, s2.id)).earnings_continue_until is None


class TestSignupReference:
    """Ledger reference format."""

    def test_reference_format(self):
        assert signup_reference(42, "standard", 3) == "42:STANDARD:L3"


class TestScheduleSeed:
    """Default schedules are seeded with the catalog."""

    @pytest.mark.asyncio
    async def test_seeded_amounts(self, session, plans):
        rows = (
            await session.execute(
                select(SignupCommission.level, SignupCommission.amount)
                .where(SignupCommission.membership_plan_id == plans["PREMIUM"].id)
                .order_by(SignupCommission.level)
            )
        ).all()

        assert [(level, int(amount)) for level, amount in rows] == [
            (1, 700),
            (2, 600),
            (3, 500),
            (4, 400),
            (5, 300),
        ]
