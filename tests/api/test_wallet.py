"""
Tests for wallet API endpoints.

These test the HTTP layer: status codes, response format, the
owner header and error mapping. Business rules are tested in
tests/services/test_ledger_engine.py.
"""

from decimal import Decimal

from wallet_ledger.models.enums import AccountStatus


def as_owner(owner_id):
    return {"X-Owner-Id": str(owner_id)}


class TestFund:

    def test_fund_returns_201(self, client, open_account):
        open_account(owner_id=1)
        response = client.post(
            "/wallet/fund", json={"amount": "1000.00"}, headers=as_owner(1)
        )

        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["new_balance"]) == Decimal("1000")
        assert data["transaction"]["transaction_type"] == "CREDIT"
        assert data["transaction"]["status"] == "COMPLETED"
        assert Decimal(data["transaction"]["amount"]) == Decimal("1000")
        assert data["transaction"]["reference"].startswith("TXN")

    def test_missing_owner_header_returns_422(self, client):
        response = client.post("/wallet/fund", json={"amount": "1000.00"})
        assert response.status_code == 422

    def test_below_minimum_returns_400(self, client, open_account):
        open_account(owner_id=1)
        response = client.post(
            "/wallet/fund", json={"amount": "50.00"}, headers=as_owner(1)
        )

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["code"] == "VALIDATION_ERROR"
        assert detail["message"] == "Minimum funding amount is 100"

    def test_negative_amount_returns_422(self, client, open_account):
        open_account(owner_id=1)
        response = client.post(
            "/wallet/fund", json={"amount": "-5"}, headers=as_owner(1)
        )
        assert response.status_code == 422

    def test_unknown_owner_returns_404(self, client):
        response = client.post(
            "/wallet/fund", json={"amount": "1000"}, headers=as_owner(99)
        )
        assert response.status_code == 404

    def test_suspended_account_returns_403(self, client, open_account):
        open_account(owner_id=1, status=AccountStatus.SUSPENDED)
        response = client.post(
            "/wallet/fund", json={"amount": "1000"}, headers=as_owner(1)
        )

        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "ACCOUNT_NOT_ACTIVE"


class TestWithdraw:

    def test_withdraw_returns_201(self, client, open_account):
        open_account(owner_id=1, balance="5000")
        response = client.post(
            "/wallet/withdraw", json={"amount": "1500"}, headers=as_owner(1)
        )

        assert response.status_code == 201
        assert Decimal(response.json()["new_balance"]) == Decimal("3500")

    def test_insufficient_funds_returns_400(self, client, open_account):
        open_account(owner_id=1, balance="100")
        response = client.post(
            "/wallet/withdraw", json={"amount": "1000"}, headers=as_owner(1)
        )

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["code"] == "INSUFFICIENT_FUNDS"
        assert "100.00" in detail["message"]


class TestTransfer:

    def test_transfer_returns_sender_leg(self, client, open_account):
        open_account(owner_id=1, balance="5000")
        recipient = open_account(owner_id=2, balance="3000")

        response = client.post("/wallet/transfer", json={
            "recipient_account_number": recipient.account_number,
            "amount": "1000",
            "description": "Rent",
        }, headers=as_owner(1))

        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["new_balance"]) == Decimal("4000")
        assert data["transaction"]["transaction_type"] == "DEBIT"
        assert data["transaction"]["counterparty_account_id"] == recipient.id
        assert data["transaction"]["transfer_id"] is not None
        assert data["transaction"]["description"] == "Rent"

        balance = client.get("/wallet/balance", headers=as_owner(2)).json()
        assert Decimal(balance["balance"]) == Decimal("4000")

    def test_self_transfer_returns_400(self, client, open_account):
        account = open_account(owner_id=1, balance="5000")
        response = client.post("/wallet/transfer", json={
            "recipient_account_number": account.account_number,
            "amount": "100",
        }, headers=as_owner(1))

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "SELF_TRANSFER"

    def test_malformed_account_number_returns_422(self, client, open_account):
        open_account(owner_id=1, balance="5000")
        response = client.post("/wallet/transfer", json={
            "recipient_account_number": "12345",
            "amount": "100",
        }, headers=as_owner(1))

        assert response.status_code == 422

    def test_unknown_recipient_returns_404(self, client, open_account):
        open_account(owner_id=1, balance="5000")
        response = client.post("/wallet/transfer", json={
            "recipient_account_number": "0000000000",
            "amount": "100",
        }, headers=as_owner(1))

        assert response.status_code == 404
        assert response.json()["detail"]["message"] == "Recipient account not found"


class TestReads:

    def test_balance(self, client, open_account):
        account = open_account(owner_id=1, balance="2500.50")
        response = client.get("/wallet/balance", headers=as_owner(1))

        assert response.status_code == 200
        data = response.json()
        assert data["account_number"] == account.account_number
        assert Decimal(data["balance"]) == Decimal("2500.50")
        assert data["status"] == "ACTIVE"

    def test_balance_unknown_owner_returns_404(self, client):
        response = client.get("/wallet/balance", headers=as_owner(5))
        assert response.status_code == 404

    def test_transaction_history(self, client, open_account):
        open_account(owner_id=1, balance="5000")
        client.post("/wallet/withdraw", json={"amount": "100"}, headers=as_owner(1))
        client.post("/wallet/withdraw", json={"amount": "200"}, headers=as_owner(1))

        response = client.get(
            "/wallet/transactions",
            params={"type": "DEBIT", "limit": 1},
            headers=as_owner(1),
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["transactions"]) == 1
        assert data["transactions"][0]["transaction_type"] == "DEBIT"
        assert data["pagination"]["total_count"] == 2
        assert data["pagination"]["has_next_page"] is True

    def test_history_limit_above_maximum_returns_422(self, client, open_account):
        open_account(owner_id=1)
        response = client.get(
            "/wallet/transactions", params={"limit": 500}, headers=as_owner(1)
        )
        assert response.status_code == 422

    def test_transaction_by_reference(self, client, open_account):
        open_account(owner_id=1)
        open_account(owner_id=2)
        funded = client.post(
            "/wallet/fund", json={"amount": "100"}, headers=as_owner(1)
        ).json()
        reference = funded["transaction"]["reference"]

        own = client.get(f"/wallet/transactions/{reference}", headers=as_owner(1))
        other = client.get(f"/wallet/transactions/{reference}", headers=as_owner(2))

        assert own.status_code == 200
        assert own.json()["reference"] == reference
        assert other.status_code == 404

    def test_summary(self, client, open_account):
        open_account(owner_id=1, balance="5000")
        client.post("/wallet/withdraw", json={"amount": "1000"}, headers=as_owner(1))

        data = client.get("/wallet/summary", headers=as_owner(1)).json()

        assert Decimal(data["balance"]) == Decimal("4000")
        assert Decimal(data["total_credits"]) == Decimal("5000")
        assert Decimal(data["total_debits"]) == Decimal("1000")
        assert data["transaction_count"] == 2
