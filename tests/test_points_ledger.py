"""Tests for the eco-points ledger service and endpoints."""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.auth.models import UserProfile
from app.common.exceptions import LedgerWriteFailure, UserNotFoundException
from app.points.models import PointsTransaction, PointsTransactionType
from app.points.service import PointsService


def create_test_user(db_session, email: str = "ledger@example.com") -> UserProfile:
    """Helper to create a user without going through registration."""
    user = UserProfile(email=email, display_name="Ledger User")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def count_transactions(db_session, user_id: int) -> int:
    stmt = select(func.count()).select_from(PointsTransaction).where(
        PointsTransaction.user_id == user_id
    )
    return db_session.execute(stmt).scalar_one()


def fail_commit(*args, **kwargs):
    raise OperationalError("COMMIT", {}, Exception("database is locked"))


class TestLedger:
    def test_new_user_has_zero_points(self, db_session):
        user = create_test_user(db_session)
        assert PointsService(db_session).get_user_points(user.id) == 0

    def test_missing_user_reads_as_zero(self, db_session):
        assert PointsService(db_session).get_user_points(424242) == 0

    def test_credit_updates_cache_and_log(self, db_session):
        user = create_test_user(db_session)
        service = PointsService(db_session)

        tx_id = service.add_points_transaction(
            user.id, 25, PointsTransactionType.EARNED_WASTE, "Earned 25", related_id=7
        )

        entry = db_session.get(PointsTransaction, tx_id)
        assert entry.points_change == 25
        assert entry.balance_after == 25
        assert entry.related_id == "7"
        assert service.get_user_points(user.id) == 25

    def test_debit_larger_than_balance_clamps_to_zero(self, db_session):
        user = create_test_user(db_session)
        service = PointsService(db_session)
        service.add_points_transaction(user.id, 10, PointsTransactionType.EARNED_WASTE, "+10")

        tx_id = service.add_points_transaction(
            user.id, -50, PointsTransactionType.SPENT_DISCOUNT, "-50"
        )

        assert service.get_user_points(user.id) == 0
        entry = db_session.get(PointsTransaction, tx_id)
        # The log keeps the full requested change
        assert entry.points_change == -50
        assert entry.balance_after == 0

    def test_balance_never_negative_over_sequence(self, db_session):
        user = create_test_user(db_session)
        service = PointsService(db_session)
        for change in [5, -3, -10, 7, -1, -100, 20]:
            tx_type = (
                PointsTransactionType.EARNED_WASTE
                if change > 0
                else PointsTransactionType.SPENT_DISCOUNT
            )
            service.add_points_transaction(user.id, change, tx_type, f"{change:+d}")
            assert service.get_user_points(user.id) >= 0
        assert service.get_user_points(user.id) == 20

    def test_missing_profile_is_bootstrapped(self, db_session):
        service = PointsService(db_session)
        service.add_points_transaction(9001, 12, PointsTransactionType.EARNED_RECYCLE, "+12")

        profile = db_session.get(UserProfile, 9001)
        assert profile is not None
        assert profile.points == 12
        assert count_transactions(db_session, 9001) == 1

    def test_registration_after_bootstrap_gets_fresh_id(self, db_session):
        PointsService(db_session).add_points_transaction(
            9001, 12, PointsTransactionType.EARNED_RECYCLE, "+12"
        )

        user = create_test_user(db_session)

        assert user.id != 9001
        assert db_session.get(UserProfile, 9001).points == 12
        assert PointsService(db_session).get_user_points(user.id) == 0

    def test_bootstrap_syncs_postgresql_id_sequence(self, db_session, monkeypatch):
        statements = []
        postgres_bind = SimpleNamespace(dialect=SimpleNamespace(name="postgresql"))
        monkeypatch.setattr(db_session, "get_bind", lambda *args, **kwargs: postgres_bind)
        monkeypatch.setattr(
            db_session, "execute", lambda statement, *args, **kwargs: statements.append(str(statement))
        )

        PointsService(db_session)._sync_profile_id_sequence()

        assert len(statements) == 1
        assert "setval(pg_get_serial_sequence('user_profiles', 'id')" in statements[0]

    def test_history_newest_first(self, db_session):
        user = create_test_user(db_session)
        service = PointsService(db_session)
        ids = [
            service.add_points_transaction(user.id, n, PointsTransactionType.EARNED_WASTE, f"+{n}")
            for n in (1, 2, 3)
        ]

        history = service.get_user_points_history(user.id)
        assert [t.id for t in history] == list(reversed(ids))
        assert [t.id for t in service.get_user_points_history(user.id, limit=2)] == [
            ids[2],
            ids[1],
        ]

    def test_write_failure_raises_and_persists_nothing(self, db_session, monkeypatch):
        user = create_test_user(db_session)
        service = PointsService(db_session)
        monkeypatch.setattr(db_session, "commit", fail_commit)

        with pytest.raises(LedgerWriteFailure) as exc_info:
            service.add_points_transaction(user.id, 10, PointsTransactionType.EARNED_WASTE, "+10")
        assert exc_info.value.user_id == user.id
        assert exc_info.value.points_change == 10

        monkeypatch.undo()
        assert count_transactions(db_session, user.id) == 0
        assert service.get_user_points(user.id) == 0


class TestReconcile:
    def test_repairs_drifted_cache(self, db_session):
        user = create_test_user(db_session)
        service = PointsService(db_session)
        service.add_points_transaction(user.id, 30, PointsTransactionType.EARNED_WASTE, "+30")
        service.add_points_transaction(user.id, -40, PointsTransactionType.SPENT_DISCOUNT, "-40")
        service.add_points_transaction(user.id, 15, PointsTransactionType.EARNED_RECYCLE, "+15")

        user.points = 999
        db_session.commit()

        assert service.reconcile_balance(user.id) == 15
        db_session.refresh(user)
        assert user.points == 15

    def test_unknown_user(self, db_session):
        with pytest.raises(UserNotFoundException):
            PointsService(db_session).reconcile_balance(12345)


class TestAccrualSideChannel:
    def test_award_waste_points(self, db_session):
        user = create_test_user(db_session)
        service = PointsService(db_session)

        points = service.award_waste_points(
            user.id, ["plastic", "glass"], {"plastic": 2.5, "glass": 1}, waste_id=3
        )

        assert points == 37
        entry = service.get_user_points_history(user.id)[0]
        assert entry.type == PointsTransactionType.EARNED_WASTE
        assert entry.related_id == "3"

    def test_award_pickup_points_includes_bonus(self, db_session):
        user = create_test_user(db_session)
        points = PointsService(db_session).award_pickup_points(
            user.id, ["plastic", "glass"], {"plastic": 2.5, "glass": 1}, pickup_id=8
        )
        assert points == 44

    def test_zero_points_records_nothing(self, db_session):
        user = create_test_user(db_session)
        service = PointsService(db_session)
        assert service.award_waste_points(user.id, ["plastic"], {"plastic": 0.05}, 1) == 0
        assert count_transactions(db_session, user.id) == 0

    def test_ledger_failure_is_swallowed(self, db_session, monkeypatch):
        user = create_test_user(db_session)
        service = PointsService(db_session)
        monkeypatch.setattr(db_session, "commit", fail_commit)

        assert service.award_waste_points(user.id, ["metal"], {"metal": 2}, 5) == 0
        assert service.redeem_points(user.id, 10, "Discount", related_id=5) is None

    def test_redeem_nothing(self, db_session):
        user = create_test_user(db_session)
        assert PointsService(db_session).redeem_points(user.id, 0, "Nothing") is None
        assert count_transactions(db_session, user.id) == 0


class TestPointsAPI:
    def test_balance_requires_auth(self, client):
        response = client.get("/api/v1/points/me")
        assert response.status_code == 401

    def test_get_my_points(self, client, auth_headers, user_id, grant_points):
        grant_points(user_id, 20)

        response = client.get("/api/v1/points/me", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["points"] == 20
        assert Decimal(data["value_lkr"]) == Decimal("60.00")

    def test_get_my_history(self, client, auth_headers, user_id, grant_points):
        grant_points(user_id, 5)
        grant_points(user_id, 6)

        response = client.get("/api/v1/points/me/history", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [t["points_change"] for t in data["transactions"]] == [6, 5]
        assert data["transactions"][0]["balance_after"] == 11

    def test_discount_quote(self, client, auth_headers, user_id, grant_points):
        grant_points(user_id, 1000)

        response = client.get(
            "/api/v1/points/discount", params={"amount": "100"}, headers=auth_headers
        )
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["max_discount"]) == Decimal("50.00")
        assert data["points_required"] == 17

    def test_discount_quote_rejects_non_positive_amount(self, client, auth_headers):
        response = client.get(
            "/api/v1/points/discount", params={"amount": "0"}, headers=auth_headers
        )
        assert response.status_code == 422

    def test_admin_history_requires_admin(self, client, auth_headers, user_id):
        response = client.get(
            f"/api/v1/points/admin/users/{user_id}/history", headers=auth_headers
        )
        assert response.status_code == 403

    def test_admin_reconcile(self, client, db_session, admin_headers, user_id, grant_points):
        grant_points(user_id, 40)
        user = db_session.get(UserProfile, user_id)
        user.points = 3
        db_session.commit()

        response = client.post(
            f"/api/v1/points/admin/users/{user_id}/reconcile", headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json() == {"user_id": user_id, "points": 40}

        history = client.get(
            f"/api/v1/points/admin/users/{user_id}/history", headers=admin_headers
        )
        assert history.status_code == 200
        assert history.json()["count"] == 1
