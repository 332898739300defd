"""User statistics handler."""

from aiohttp import web

from api.handlers.common import iso, money, require_user_id
from api.keys import get_session, get_settings
from earning_engine.services.user import UserStatisticsService


async def get_user_stats(request: web.Request) -> web.Response:
    """Dashboard statistics for the current user."""
    user_id = require_user_id(request)
    service = UserStatisticsService(get_session(request), get_settings(request))
    stats = await service.get_statistics(user_id)

    user = stats.user
    plan = stats.plan
    eligibility = stats.eligibility

    return web.json_response({
        "totalEarnings": money(user.total_earnings),
        "balance": money(user.balance),
        "voucherBalance": money(stats.voucher_balance),
        "totalPoints": user.total_points,
        "tasksCompleted": user.tasks_completed,
        "totalReferrals": stats.total_referrals,
        "referralCode": user.referral_code,
        "commissionBreakdown": {
            f"level{level}": money(amount)
            for level, amount in stats.commission_breakdown.items()
        },
        "membershipStatus": user.membership_status,
        "membershipPlan": {
            "id": plan.id,
            "name": plan.name,
            "displayName": plan.display_name,
            "price": plan.price,
            "dailyTaskEarning": plan.daily_task_earning,
            "tasksPerDay": plan.tasks_per_day,
            "maxEarningDays": plan.max_earning_days,
            "extendedEarningDays": plan.extended_earning_days,
            "minimumWithdrawal": plan.minimum_withdrawal,
            "voucherAmount": plan.voucher_amount,
        } if plan else None,
        "membershipStartDate": iso(user.membership_start_date),
        "membershipEndDate": iso(user.membership_end_date),
        "earningEndsAt": iso(eligibility.window_end),
        "earningDaysRemaining": eligibility.days_remaining,
        "totalEarningDays": eligibility.total_earning_days,
        "perTaskAmount": stats.per_task_amount,
        "dailyTaskEarning": plan.daily_task_earning if plan else 0,
        "completionsToday": stats.completions_today,
        "tasksPerDay": stats.tasks_per_day,
        "eligible": eligibility.eligible,
        "eligibilityReason": eligibility.reason,
        "eligibilityMessage": eligibility.message,
        "activeDays": stats.active_days,
        "dailyEarningsToday": stats.daily_earnings_today,
    })
