from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException

from gold_invest_app.finance.models.investment import InvestmentModel, InvestmentStatus
from gold_invest_app.finance.models.transaction import TransactionModel, TransactionType, TransactionStatus
from gold_invest_app.finance.utils import ledger
from gold_invest_app.finance.utils.ledger import one_year_after
from gold_invest_app.gold.models.gold_price import GoldPriceModel
from gold_invest_app.users.utils.user_role import UserRole


async def store_price(price, minutes_ago=0):
    timestamp = datetime.now(timezone.utc) - timedelta(minutes=minutes_ago)
    await GoldPriceModel(price_usd=price, timestamp=timestamp).insert()


async def test_one_year_after_handles_leap_day():
    assert one_year_after(datetime(2024, 2, 29, tzinfo=timezone.utc)) == datetime(2025, 3, 1, tzinfo=timezone.utc)
    assert one_year_after(datetime(2025, 6, 15, tzinfo=timezone.utc)) == datetime(2026, 6, 15, tzinfo=timezone.utc)


@pytest.mark.parametrize("amount", [50, 99.99, 0])
async def test_create_investment_below_minimum(client, make_user, headers_for, amount):
    user = await make_user()

    resp = await client.post("/api/investments", headers=headers_for(user), json={"amount": amount})

    assert resp.status_code == 400
    assert resp.json()["message"] == "Minimum investment amount is $100"
    assert await InvestmentModel.find_all().count() == 0


async def test_create_investment_records_weight_and_deposit(client, make_user, headers_for):
    user = await make_user()
    await store_price(2000.0)

    resp = await client.post("/api/investments", headers=headers_for(user), json={"amount": 1000})

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["goldWeightOz"] == 0.5
    assert data["goldPriceAtPurchase"] == 2000.0
    assert data["status"] == "active"
    assert data["transactionId"].startswith("INV-")
    assert len(data["transactionId"]) == 13

    investment = await InvestmentModel.find_one(InvestmentModel.user_id == user.id)
    assert investment.maturity_date.year == investment.investment_date.year + 1

    deposits = await TransactionModel.find(TransactionModel.investment_id == investment.id).to_list()
    assert len(deposits) == 1
    assert deposits[0].type == TransactionType.DEPOSIT
    assert deposits[0].status == TransactionStatus.COMPLETED
    assert deposits[0].amount == 1000
    assert deposits[0].reference_id.startswith("D-")


async def test_create_investment_uses_default_price_when_none_stored(client, make_user, headers_for):
    user = await make_user()

    resp = await client.post("/api/investments", headers=headers_for(user), json={"amount": 500})

    assert resp.status_code == 201
    assert resp.json()["data"]["goldPriceAtPurchase"] == 2000.0
    assert resp.json()["data"]["goldWeightOz"] == 0.25


async def test_withdraw_pays_current_value(client, make_user, headers_for):
    user = await make_user()
    await store_price(2000.0, minutes_ago=30)
    created = await client.post("/api/investments", headers=headers_for(user), json={"amount": 1000})
    investment_id = created.json()["data"]["id"]
    await store_price(2200.0)

    resp = await client.put(f"/api/investments/{investment_id}/withdraw", headers=headers_for(user))

    assert resp.status_code == 200
    body = resp.json()
    assert body["withdrawalAmount"] == pytest.approx(1100.0)
    assert body["data"]["status"] == "withdrawn"
    assert body["data"]["withdrawalDate"] is not None

    withdrawals = await TransactionModel.find(TransactionModel.type == TransactionType.WITHDRAWAL).to_list()
    assert len(withdrawals) == 1
    assert withdrawals[0].amount == pytest.approx(1100.0)


async def test_withdraw_twice_reports_current_status(client, make_user, headers_for):
    user = await make_user()
    created = await client.post("/api/investments", headers=headers_for(user), json={"amount": 300})
    investment_id = created.json()["data"]["id"]

    first = await client.put(f"/api/investments/{investment_id}/withdraw", headers=headers_for(user))
    second = await client.put(f"/api/investments/{investment_id}/withdraw", headers=headers_for(user))

    assert first.status_code == 200
    assert second.status_code == 400
    assert "withdrawn" in second.json()["message"]
    assert await TransactionModel.find(TransactionModel.type == TransactionType.WITHDRAWAL).count() == 1


async def test_only_owner_may_withdraw_even_admin(client, make_user, headers_for):
    owner = await make_user()
    stranger = await make_user()
    admin = await make_user(role=UserRole.ADMIN)
    created = await client.post("/api/investments", headers=headers_for(owner), json={"amount": 300})
    investment_id = created.json()["data"]["id"]

    by_stranger = await client.put(f"/api/investments/{investment_id}/withdraw", headers=headers_for(stranger))
    by_admin = await client.put(f"/api/investments/{investment_id}/withdraw", headers=headers_for(admin))

    assert by_stranger.status_code == 403
    assert by_admin.status_code == 403
    investment = await InvestmentModel.find_one(InvestmentModel.user_id == owner.id)
    assert investment.status == InvestmentStatus.ACTIVE


async def test_read_investment_owner_and_admin_only(client, make_user, headers_for):
    owner = await make_user()
    stranger = await make_user()
    admin = await make_user(role=UserRole.ADMIN)
    created = await client.post("/api/investments", headers=headers_for(owner), json={"amount": 400})
    investment_id = created.json()["data"]["id"]

    assert (await client.get(f"/api/investments/{investment_id}", headers=headers_for(owner))).status_code == 200
    assert (await client.get(f"/api/investments/{investment_id}", headers=headers_for(admin))).status_code == 200
    assert (await client.get(f"/api/investments/{investment_id}", headers=headers_for(stranger))).status_code == 403

    missing = await client.get("/api/investments/00000000-0000-4000-8000-000000000000", headers=headers_for(owner))
    assert missing.status_code == 404


async def test_list_investments_and_transactions(client, make_user, headers_for):
    user = await make_user()
    other = await make_user()
    await client.post("/api/investments", headers=headers_for(user), json={"amount": 100})
    await client.post("/api/investments", headers=headers_for(user), json={"amount": 250})
    await client.post("/api/investments", headers=headers_for(other), json={"amount": 900})

    investments = await client.get("/api/investments", headers=headers_for(user))
    transactions = await client.get("/api/transactions", headers=headers_for(user))

    assert investments.json()["count"] == 2
    assert {item["amount"] for item in investments.json()["data"]} == {100, 250}
    assert all(item["currentValue"] is not None for item in investments.json()["data"])
    assert transactions.json()["count"] == 2
    assert {item["type"] for item in transactions.json()["data"]} == {"deposit"}


async def test_investment_defaults(make_user):
    user = await make_user()
    now = datetime.now(timezone.utc)
    investment = InvestmentModel(
        user_id=user.id,
        amount=100,
        gold_weight_oz=0.05,
        gold_price_at_purchase=2000,
        maturity_date=one_year_after(now),
    )

    assert investment.status == InvestmentStatus.ACTIVE
    assert investment.return_rate == 5.0
    assert investment.fees == 0.0
    assert investment.transaction_id is None

    await investment.insert()
    assert investment.transaction_id.startswith("INV-")


@pytest.mark.parametrize("raw_amount", ["NaN", "Infinity", "-Infinity"])
async def test_create_investment_rejects_non_finite_amount(client, make_user, headers_for, raw_amount):
    user = await make_user()
    headers = {**headers_for(user), "Content-Type": "application/json"}

    resp = await client.post("/api/investments", headers=headers, content=f'{{"amount": {raw_amount}}}')

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert await InvestmentModel.find_all().count() == 0
    assert await TransactionModel.find_all().count() == 0


@pytest.mark.parametrize("amount", [float("nan"), float("inf")])
async def test_ledger_refuses_non_finite_amount(make_user, amount):
    user = await make_user()

    with pytest.raises(HTTPException) as exc:
        await ledger.create_investment(user, amount)

    assert exc.value.status_code == 400
    assert exc.value.detail == "Minimum investment amount is $100"
    assert await InvestmentModel.find_all().count() == 0


async def test_withdraw_losing_race_pays_out_once(make_user, monkeypatch):
    user = await make_user()
    investment = await ledger.create_investment(user, 1000)
    real_latest_price = ledger.latest_price_usd
    raced = {"done": False}

    async def price_after_competing_withdrawal():
        # The competing request lands between the status check and the update
        if not raced["done"]:
            raced["done"] = True
            await ledger.withdraw_investment(investment.id, user)
        return await real_latest_price()

    monkeypatch.setattr(ledger, "latest_price_usd", price_after_competing_withdrawal)

    with pytest.raises(HTTPException) as exc:
        await ledger.withdraw_investment(investment.id, user)

    assert exc.value.status_code == 400
    assert exc.value.detail == "Investment is already withdrawn"
    assert await TransactionModel.find(TransactionModel.type == TransactionType.WITHDRAWAL).count() == 1
    stored = await InvestmentModel.get(investment.id)
    assert stored.status == InvestmentStatus.WITHDRAWN
