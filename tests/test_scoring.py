"""
Tests for the scoring engine (aura score + since-start savings).

Covered:
  - floored sum, order independence, idempotent recompute
  - level boundaries (0 → 1, 99 → 1, 100 → 2)
  - 10 days × 20/day at 5 each with 2 cigarettes → 198 avoided, 990 saved
  - days_since_start floors at 1
  - cigarettes before the streak start are ignored
  - ROUND_HALF_UP money rounding
  - users without a profile are a no-op
"""
from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from aurashift.core.errors import UserNotFoundError
from aurashift.models.activity import ACTIVITY_POINTS, ActivityType, points_for
from aurashift.models.user import SmokingProfile
from aurashift.services.scoring import (
    calculate_level,
    calculate_savings,
    recalculate_avoidance_and_savings,
    recalculate_score,
    round_money,
    total_points,
)

from conftest import add_activity, give_profile

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)

_PROFILE = SmokingProfile(
    years_smoked=Decimal("5"),
    cigarettes_per_day=20,
    cost_per_cigarette=Decimal("5"),
    motivations=["Save Money"],
)


# ---------------------------------------------------------------------------
# Points table
# ---------------------------------------------------------------------------

class TestPointsTable:
    def test_every_type_has_points(self):
        assert set(ACTIVITY_POINTS) == set(ActivityType)

    @pytest.mark.parametrize("activity_type,expected", [
        ("cigarette_consumed", -10),
        ("gym_workout", 5),
        ("healthy_meal", 3),
        ("skin_care", 2),
        ("social_event", 1),
    ])
    def test_points_for(self, activity_type, expected):
        assert points_for(activity_type) == expected


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

class TestPureScoring:
    def test_empty_history_scores_zero(self):
        assert total_points([]) == 0

    def test_negative_sum_floors_at_zero(self):
        assert total_points([-10, -10, -10, -10, -10]) == 0

    def test_order_independent(self):
        points = [5, -10, 3, 2, 1, -10, 5, 5]
        shuffled = points[:]
        random.Random(7).shuffle(shuffled)
        assert total_points(points) == total_points(shuffled) == 1

    @pytest.mark.parametrize("score,level", [(0, 1), (99, 1), (100, 2), (250, 3)])
    def test_level(self, score, level):
        assert calculate_level(score) == level

    def test_savings_scenario(self):
        snap = calculate_savings(_PROFILE, NOW - timedelta(days=10), NOW, cigarettes_consumed=2)
        assert snap.days_since_start == 10
        assert snap.cigarettes_avoided == 198
        assert snap.money_saved == Decimal("990.00")

    def test_days_floor_at_one(self):
        snap = calculate_savings(_PROFILE, NOW - timedelta(hours=3), NOW, cigarettes_consumed=0)
        assert snap.days_since_start == 1
        assert snap.cigarettes_avoided == 20
        assert snap.money_saved == Decimal("100.00")

    def test_heavy_smoking_floors_counters(self):
        snap = calculate_savings(_PROFILE, NOW - timedelta(days=1), NOW, cigarettes_consumed=50)
        assert snap.cigarettes_avoided == 0
        assert snap.money_saved == Decimal("0.00")

    def test_round_half_up(self):
        assert round_money(Decimal("0.125")) == Decimal("0.13")
        assert round_money(Decimal("2.675")) == Decimal("2.68")
        assert round_money(7) == Decimal("7.00")


# ---------------------------------------------------------------------------
# DB-backed recomputes
# ---------------------------------------------------------------------------

class TestRecalculateScore:
    def test_zero_activities(self, db, user):
        assert recalculate_score(db, user.id) == 0

    def test_sum_of_points(self, db, user):
        for t in (ActivityType.gym_workout, ActivityType.healthy_meal, ActivityType.skin_care):
            add_activity(db, user, t, NOW)
        assert recalculate_score(db, user.id) == 10
        db.commit()
        db.refresh(user)
        assert user.aura_score == 10

    def test_negative_total_persists_zero(self, db, user):
        for _ in range(5):
            add_activity(db, user, ActivityType.cigarette_consumed, NOW)
        assert recalculate_score(db, user.id) == 0
        db.commit()
        db.refresh(user)
        assert user.aura_score == 0

    def test_idempotent(self, db, user):
        add_activity(db, user, ActivityType.gym_workout, NOW)
        add_activity(db, user, ActivityType.social_event, NOW)
        first = recalculate_score(db, user.id)
        second = recalculate_score(db, user.id)
        assert first == second == 6

    def test_overwrites_stale_value(self, db, user):
        user.aura_score = 999
        db.commit()
        add_activity(db, user, ActivityType.skin_care, NOW)
        assert recalculate_score(db, user.id) == 2

    def test_unknown_user(self, db):
        with pytest.raises(UserNotFoundError):
            recalculate_score(db, 987654)


class TestRecalculateSavings:
    def test_no_profile_is_noop(self, db, user):
        add_activity(db, user, ActivityType.cigarette_consumed, NOW)
        assert recalculate_avoidance_and_savings(db, user.id, now=NOW) is None
        db.refresh(user)
        assert user.cigarettes_avoided == 0
        assert user.total_money_saved == Decimal("0")

    def test_ten_day_scenario_persists(self, db, user):
        give_profile(db, user, streak_start=NOW - timedelta(days=10))
        add_activity(db, user, ActivityType.cigarette_consumed, NOW - timedelta(days=5))
        add_activity(db, user, ActivityType.cigarette_consumed, NOW - timedelta(days=1))
        add_activity(db, user, ActivityType.gym_workout, NOW - timedelta(days=1))

        snap = recalculate_avoidance_and_savings(
            db, user.id, ActivityType.cigarette_consumed, now=NOW
        )
        db.commit()
        db.refresh(user)

        assert snap.cigarettes_consumed == 2
        assert user.cigarettes_avoided == 198
        assert user.total_money_saved == Decimal("990.00")

    def test_cigarettes_before_start_ignored(self, db, user):
        give_profile(db, user, streak_start=NOW - timedelta(days=2))
        add_activity(db, user, ActivityType.cigarette_consumed, NOW - timedelta(days=3))
        snap = recalculate_avoidance_and_savings(db, user.id, now=NOW)
        assert snap.cigarettes_consumed == 0
        assert snap.cigarettes_avoided == 40

    def test_falls_back_to_account_creation(self, db, user):
        give_profile(db, user, streak_start=None)
        user.created_at = NOW - timedelta(days=4)
        db.commit()
        snap = recalculate_avoidance_and_savings(db, user.id, now=NOW)
        assert snap.days_since_start == 4
        assert snap.money_saved == Decimal("400.00")
