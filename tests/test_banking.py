"""
Tests for ledger accounts and transactional transfers.
"""
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from fastapi import HTTPException

from storefront.schemas.account import TransferRequest
from storefront.services import banking


@pytest.fixture
def alice(now):
    return {"_id": ObjectId(), "username": "alice", "balance": 500.0, "created_at": now, "updated_at": now}


@pytest.fixture
def bob(now):
    return {"_id": ObjectId(), "username": "bob", "balance": 100.0, "created_at": now, "updated_at": now}


class TestAccounts:
    def test_create_account(self, client, mock_db, alice):
        mock_db.accounts.find_one.side_effect = [None, alice]
        mock_db.accounts.insert_one.return_value = MagicMock(inserted_id=alice["_id"])

        response = client.post("/accounts", json={"username": "Alice", "balance": 500})

        assert response.status_code == 201
        assert response.json()["username"] == "alice"
        inserted = mock_db.accounts.insert_one.call_args.args[0]
        assert inserted["username"] == "alice"
        assert inserted["balance"] == 500

    def test_duplicate_account(self, client, mock_db, alice):
        mock_db.accounts.find_one.return_value = alice
        response = client.post("/accounts", json={"username": "alice"})
        assert response.status_code == 409

    def test_negative_opening_balance(self, client):
        response = client.post("/accounts", json={"username": "alice", "balance": -1})
        assert response.status_code == 422

    def test_deposit(self, client, mock_db, alice):
        mock_db.accounts.find_one_and_update.return_value = dict(alice, balance=550.0)

        response = client.post("/accounts/alice/deposit", json={"amount": 50})

        assert response.status_code == 200
        assert response.json()["balance"] == 550.0
        assert mock_db.accounts.find_one_and_update.call_args.args[1]["$inc"] == {"balance": 50}

    def test_withdraw_guards_balance(self, client, mock_db, alice):
        mock_db.accounts.find_one_and_update.return_value = None
        mock_db.accounts.find_one.return_value = alice

        response = client.post("/accounts/alice/withdraw", json={"amount": 900})

        assert response.status_code == 400
        assert "Insufficient funds" in response.json()["detail"]
        query = mock_db.accounts.find_one_and_update.call_args.args[0]
        assert query == {"username": "alice", "balance": {"$gte": 900}}

    def test_withdraw_unknown_account(self, client, mock_db):
        mock_db.accounts.find_one_and_update.return_value = None
        mock_db.accounts.find_one.return_value = None

        response = client.post("/accounts/nobody/withdraw", json={"amount": 1})

        assert response.status_code == 404

    def test_zero_amount_rejected(self, client):
        response = client.post("/accounts/alice/deposit", json={"amount": 0})
        assert response.status_code == 422


class TestTransfer:
    @pytest.mark.asyncio
    async def test_transfer_commits(self, mock_db, alice, bob):
        mock_db.accounts.find_one_and_update.side_effect = [
            dict(alice, balance=400.0),
            dict(bob, balance=200.0),
        ]

        result = await banking.transfer(
            mock_db, TransferRequest(from_username="Alice", to_username="bob", amount=100)
        )

        assert result["from_account"]["balance"] == 400.0
        assert result["to_account"]["balance"] == 200.0
        assert mock_db.session.committed
        for call in mock_db.accounts.find_one_and_update.call_args_list:
            assert call.kwargs["session"] is mock_db.session

    @pytest.mark.asyncio
    async def test_insufficient_funds_aborts(self, mock_db, bob):
        mock_db.accounts.find_one_and_update.return_value = None
        mock_db.accounts.find_one.return_value = bob

        with pytest.raises(HTTPException) as exc_info:
            await banking.transfer(mock_db, TransferRequest(from_username="bob", to_username="alice", amount=1000))

        assert exc_info.value.status_code == 400
        assert mock_db.session.aborted
        # The credit side never ran
        assert mock_db.accounts.find_one_and_update.await_count == 1

    @pytest.mark.asyncio
    async def test_unknown_receiver_aborts(self, mock_db, alice):
        mock_db.accounts.find_one_and_update.side_effect = [dict(alice, balance=400.0), None]

        with pytest.raises(HTTPException) as exc_info:
            await banking.transfer(mock_db, TransferRequest(from_username="alice", to_username="ghost", amount=100))

        assert exc_info.value.status_code == 404
        assert mock_db.session.aborted
        assert not mock_db.session.committed

    def test_same_account_rejected(self, client, mock_db):
        response = client.post("/accounts/transfer", json={"from_username": "alice", "to_username": "ALICE", "amount": 5})

        assert response.status_code == 400
        mock_db.client.start_session.assert_not_called()
