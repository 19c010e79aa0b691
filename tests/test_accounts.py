from __future__ import annotations

from decimal import Decimal
from urllib.parse import parse_qsl, urlsplit

from exchanges.tastytrade.transactions import TransactionQuery

ACCOUNTS_BODY = {
    "data": {
        "items": [
            {"account": {"account-number": "5WT00001", "nickname": "Individual"}, "authority-level": "owner"},
            {"account": {"account-number": "5WT00002", "nickname": "IRA"}, "authority-level": "owner"},
        ]
    },
    "context": "/customers/me/accounts",
}

POSITIONS_BODY = {
    "data": {
        "items": [
            {
                "account-number": "5WT00001",
                "symbol": "./ESZ4 EW4Z4 241220C6000",
                "instrument-type": "Future Option",
                "underlying-symbol": "/ESZ4",
                "quantity": "2",
                "quantity-direction": "Short",
                "multiplier": 50,
                "average-open-price": "12.25",
                "close-price": "10.0",
            },
            {
                "account-number": "5WT00001",
                "symbol": "AAPL",
                "instrument-type": "Equity",
                "quantity": 100,
                "quantity-direction": "Long",
                "multiplier": 1,
            },
        ]
    }
}


def query_of(target: str) -> list:
    return parse_qsl(urlsplit(target).query)


def test_list_and_find_accounts(stub, authed) -> None:
    stub.add("GET", "/customers/me/accounts", ACCOUNTS_BODY)

    resp = authed.accounts.list_accounts()
    assert [c.account.account_number for c in resp] == ["5WT00001", "5WT00002"]
    assert resp.items[0].authority_level == "owner"

    found = authed.accounts.find_account(" 5wt00002 ")
    assert found is not None and found.account.nickname == "IRA"
    assert authed.accounts.find_account("NOPE") is None


def test_customer_nested_objects(stub, authed) -> None:
    stub.add(
        "GET",
        "/customers/me",
        {
            "data": {
                "id": "me",
                "address": {"city": "Chicago", "is-domestic": True},
                "customer-suitability": {"annual-net-income": 150000, "net-worth": "1000000"},
                "person": {"first-name": "Ada"},
            }
        },
    )

    c = authed.accounts.get_customer().data

    assert c.address.city == "Chicago" and c.address.is_domestic
    assert c.customer_suitability.annual_net_income == Decimal(150000)
    assert c.person.first_name == "Ada"
    assert c.mailing_address.city == ""


def test_positions(stub, authed) -> None:
    stub.add("GET", "/accounts/5WT00001/positions", POSITIONS_BODY)

    positions = authed.accounts.get_positions("5WT00001").items

    fo = positions[0]
    assert fo.quantity == Decimal("2")
    assert fo.multiplier == Decimal(50)
    assert fo.is_short
    assert positions[1].quantity == Decimal(100)
    assert not positions[1].is_short


def test_trading_status(stub, authed) -> None:
    stub.add(
        "GET",
        "/accounts/5WT00001/trading-status",
        {"data": {"account-number": "5WT00001", "is-futures-enabled": True, "options-level": "No Restrictions"}},
    )
    status = authed.accounts.get_trading_status("5WT00001").data
    assert status.is_futures_enabled
    assert status.options_level == "No Restrictions"


def test_balance_snapshots_query(stub, authed) -> None:
    stub.add(
        "GET",
        "/accounts/5WT00001/balance-snapshots",
        {"data": {"items": [{"snapshot-date": "2024-05-01", "time-of-day": "EOD", "cash-balance": "10.5"}]}},
    )

    resp = authed.accounts.get_balance_snapshots("5WT00001", "2024-05-01", "EOD")

    assert resp.items[0].cash_balance == Decimal("10.5")
    assert query_of(stub.last.target) == [("snapshot-date", "2024-05-01"), ("time-of-day", "EOD")]


def test_transactions_with_filters_and_pagination(stub, authed) -> None:
    stub.add(
        "GET",
        "/accounts/5WT00001/transactions",
        {
            "data": {
                "items": [
                    {
                        "id": 42,
                        "transaction-type": "Trade",
                        "action": "Buy to Open",
                        "quantity": "1.0",
                        "price": "3.15",
                        "value": "-315.0",
                        "value-effect": "Debit",
                    }
                ]
            },
            "api-version": "v1",
            "context": "/accounts/5WT00001/transactions",
            "pagination": {"per-page": 250, "page-offset": 0, "total-items": 1, "total-pages": 1, "next-link": None},
        },
    )

    q = TransactionQuery(sort="Desc", sub_types=["Buy to Open", "Sell to Close"], start_date="2024-01-01")
    resp = authed.transactions.list("5WT00001", q)

    tx = resp.items[0]
    assert tx.id == 42
    assert tx.value == Decimal("-315.0")
    assert resp.api_version == "v1"
    assert resp.pagination is not None
    assert resp.pagination.per_page == 250
    assert resp.pagination.next_link is None
    assert query_of(stub.last.target) == [
        ("sort", "Desc"),
        ("start-date", "2024-01-01"),
        ("sub-type", "Buy to Open"),
        ("sub-type", "Sell to Close"),
    ]


def test_transactions_without_filters_send_no_query(stub, authed) -> None:
    stub.add("GET", "/accounts/5WT00001/transactions", {"data": {"items": []}})
    resp = authed.transactions.list("5WT00001")
    assert resp.items == []
    assert resp.pagination is None
    assert stub.last.target == "/accounts/5WT00001/transactions"


def test_single_transaction(stub, authed) -> None:
    stub.add("GET", "/accounts/5WT00001/transactions/42", {"data": {"id": 42, "is-estimated-fee": True}})
    tx = authed.transactions.get("5WT00001", 42).data
    assert tx.id == 42 and tx.is_estimated_fee
