"""
Integration tests for the ALC ledger HTTP API

Tests the full flow from HTTP request through use cases to a SQLite store.
"""

import asyncio
import json
import pytest


@pytest.mark.asyncio
class TestWalletAPI:

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    async def test_get_wallet_creates_welcome_balance(self, client):
        """
        Given: Unknown account
        When: GET /api/wallets/{account_id}
        Then: 200 with the 50 ALC welcome balance
        """
        # Act
        response = await client.get("/api/wallets/acc_api1")

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["account_id"] == "acc_api1"
        assert data["balance"] == 50
        assert data["total_earned"] == 0

    async def test_credit_debit_and_history(self, client):
        # Act
        credit = await client.post("/api/wallets/credit", json={
            "account_id": "acc_api2",
            "amount": 500,
            "payment_method": "moncash",
            "external_reference": "MC-1",
            "idempotency_key": "purchase:MC-1",
        })
        replay = await client.post("/api/wallets/credit", json={
            "account_id": "acc_api2",
            "amount": 500,
            "idempotency_key": "purchase:MC-1",
        })
        debit = await client.post("/api/wallets/debit", json={"account_id": "acc_api2", "amount": 45})
        history = await client.get("/api/wallets/acc_api2/transactions", params={"limit": 10})

        # Assert
        assert credit.status_code == 200
        assert credit.json()["balance_after"] == 550
        assert replay.json()["transaction_id"] == credit.json()["transaction_id"]
        assert debit.json()["amount"] == -45
        assert debit.json()["balance_after"] == 505
        data = history.json()
        assert data["total"] == 2
        assert [t["amount"] for t in data["transactions"]] == [-45, 500]

    async def test_insufficient_balance_is_402(self, client):
        """
        Given: Wallet with the 50 ALC welcome balance
        When: Debiting 75
        Then: 402 with INSUFFICIENT_BALANCE error body
        """
        # Act
        response = await client.post("/api/wallets/debit", json={"account_id": "acc_api3", "amount": 75})

        # Assert
        assert response.status_code == 402
        error = response.json()["error"]
        assert error["code"] == "INSUFFICIENT_BALANCE"
        assert error["message"] == "Insufficient balance. Required: 75, Available: 50"

    async def test_zero_credit_is_400(self, client):
        response = await client.post("/api/wallets/credit", json={"account_id": "acc_api4", "amount": 0})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_AMOUNT"

    async def test_malformed_body_is_validation_error(self, client):
        response = await client.post("/api/wallets/debit", json={"account_id": "acc_api4"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert "amount" in error["reason"]


@pytest.mark.asyncio
class TestQuotaAPI:

    async def test_estimate(self, client):
        response = await client.post("/api/quota/estimate", json={"actions": ["chat", "chat", "image"]})

        assert response.status_code == 200
        assert response.json()["estimated_cost"] == 35

    async def test_record_until_limit_then_charge_rejected(self, client):
        """
        Given: Free plan with 25 questions recorded today
        When: A video is charged with only 50 ALC
        Then: 429 QUOTA_EXCEEDED
        """
        # Arrange
        for _ in range(25):
            await client.post("/api/quota/acc_q_api/questions")

        # Act
        status = await client.get("/api/quota/acc_q_api")
        response = await client.post("/api/quota/charge", json={"account_id": "acc_q_api", "action": "video"})

        # Assert
        assert status.json()["can_act"] is False
        assert status.json()["remaining"] == 0
        assert response.status_code == 429
        assert response.json()["error"]["code"] == "QUOTA_EXCEEDED"

    async def test_plan_change_lifts_limit(self, client):
        # Arrange
        for _ in range(25):
            await client.post("/api/quota/acc_q_api2/questions")

        # Act
        response = await client.put("/api/admin/subscriptions/acc_q_api2", json={"plan": "premium"})

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["unlimited"] is True
        assert data["can_act"] is True
        assert data["questions_today"] == 25


@pytest.mark.asyncio
class TestAdRewardAPI:

    async def test_claim_then_429(self, client, frozen_clock):
        # Act
        claim = await client.post("/api/ad-rewards/acc_ad_api/claim")
        frozen_clock.advance(seconds=30)
        again = await client.post("/api/ad-rewards/acc_ad_api/claim")
        state = await client.get("/api/ad-rewards/acc_ad_api")

        # Assert
        assert claim.status_code == 200
        assert claim.json()["balance"] == 60
        assert again.status_code == 429
        assert again.json()["error"]["code"] == "NOT_ELIGIBLE"
        assert state.json()["status"] == "cooling"
        assert state.json()["seconds_remaining"] == 180 * 60 - 30


@pytest.mark.asyncio
class TestCouponAPI:

    async def test_admin_create_and_redeem(self, client):
        """
        Given: Coupon created through the admin API
        When: Redeemed twice by the same account, lower-case
        Then: 200 then 409 ALREADY_USED
        """
        # Arrange
        created = await client.post("/api/admin/coupons", json={
            "code": "launch50",
            "alc_value": 50,
            "max_uses": 10,
            "created_by": "admin_1",
        })

        # Act
        first = await client.post("/api/coupons/redeem", json={"account_id": "acc_cp_api", "code": "launch50"})
        second = await client.post("/api/coupons/redeem", json={"account_id": "acc_cp_api", "code": "LAUNCH50"})

        # Assert
        assert created.status_code == 201
        assert created.json()["code"] == "LAUNCH50"
        assert first.status_code == 200
        assert first.json()["balance"] == 100
        assert second.status_code == 409
        assert second.json()["error"]["code"] == "ALREADY_USED"

    async def test_unknown_code_is_404(self, client):
        response = await client.post("/api/coupons/redeem", json={"account_id": "acc_cp_api2", "code": "NOPE"})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "INVALID_CODE"

    async def test_duplicate_code_is_409(self, client):
        await client.post("/api/admin/coupons", json={"code": "ONCE", "alc_value": 10})

        response = await client.post("/api/admin/coupons", json={"code": "once", "alc_value": 10})

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_CODE"

    async def test_deactivated_coupon_is_404(self, client):
        # Arrange
        created = await client.post("/api/admin/coupons", json={"code": "OFF", "alc_value": 10})
        coupon_id = created.json()["coupon_id"]

        # Act
        patched = await client.patch(f"/api/admin/coupons/{coupon_id}", json={"is_active": False})
        response = await client.post("/api/coupons/redeem", json={"account_id": "acc_cp_api3", "code": "OFF"})

        # Assert
        assert patched.json()["is_active"] is False
        assert response.status_code == 404

    async def test_admin_adjust(self, client):
        response = await client.post("/api/admin/wallets/adjust", json={
            "account_id": "acc_adm",
            "amount": -20,
            "admin_id": "admin_1",
            "reason": "Chargeback",
        })

        assert response.status_code == 200
        assert response.json()["transaction_type"] == "admin_debit"
        assert response.json()["balance_after"] == 30


    async def test_key_reused_by_other_account_is_409(self, client):
        # Arrange
        await client.post("/api/wallets/credit", json={
            "account_id": "acc_key_a", "amount": 20, "idempotency_key": "purchase:MC-500",
        })

        # Act
        response = await client.post("/api/wallets/credit", json={
            "account_id": "acc_key_b", "amount": 100, "idempotency_key": "purchase:MC-500",
        })
        wallet = await client.get("/api/wallets/acc_key_b")

        # Assert
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "IDEMPOTENCY_CONFLICT"
        assert wallet.json()["balance"] == 50

    async def test_admin_actions_are_listed_in_admin_logs(self, client):
        """
        Given: An adjustment, a coupon creation, a deactivation and a plan change
        When: GET /api/admin/logs
        Then: Four entries newest first, filterable by target account
        """
        # Arrange
        await client.post("/api/admin/wallets/adjust", json={
            "account_id": "acc_log", "amount": 15, "admin_id": "admin_1",
        })
        created = await client.post("/api/admin/coupons", json={
            "code": "AUDIT", "alc_value": 5, "created_by": "admin_2",
        })
        await client.patch(
            f"/api/admin/coupons/{created.json()['coupon_id']}",
            json={"is_active": False, "admin_id": "admin_2"},
        )
        await client.put("/api/admin/subscriptions/acc_log", json={"plan": "plus", "admin_id": "admin_1"})

        # Act
        everything = await client.get("/api/admin/logs")
        for_account = await client.get("/api/admin/logs", params={"account_id": "acc_log"})

        # Assert
        assert everything.status_code == 200
        assert [log["action"] for log in everything.json()["logs"]] == [
            "change_plan", "set_coupon_active", "create_coupon", "adjust_balance",
        ]
        assert [log["action"] for log in for_account.json()["logs"]] == ["change_plan", "adjust_balance"]
        assert for_account.json()["logs"][1]["details"]["amount"] == 15

@pytest.mark.asyncio
class TestEventsAPI:

    async def test_unknown_entity_filter_is_400(self, client):
        response = await client.get("/api/events/acc_ev", params={"entities": "wallet,invoice"})

        assert response.status_code == 400
        assert response.json()["error"]["reason"] == "invoice"

    async def test_stream_delivers_committed_changes(self, client, change_feed):
        """
        Given: A subscriber streaming wallet and transaction events
        When: The account is credited
        Then: Both changes arrive as server-sent events
        """
        # Arrange
        stream = asyncio.create_task(client.get(
            "/api/events/acc_ev",
            params={"entities": "wallet,transaction", "max_events": 2},
        ))
        for _ in range(100):
            if change_feed.subscriber_count("acc_ev") > 0:
                break
            await asyncio.sleep(0.01)

        # Act
        await client.post("/api/wallets/credit", json={"account_id": "acc_ev", "amount": 25})
        response = await asyncio.wait_for(stream, timeout=5)

        # Assert
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        blocks = [b for b in response.text.split("\n\n") if b.strip()]
        assert [b.splitlines()[0] for b in blocks] == ["event: wallet", "event: transaction"]
        wallet_event = json.loads(blocks[0].splitlines()[1][len("data: "):])
        assert wallet_event["payload"]["balance"] == 75
