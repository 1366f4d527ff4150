"""
Ledger derivation tests.

Verifies:
- cash in hand counts Cash sales only, less every payout
- vendor balances come from cost x quantity of Vendor lines
- daily reconciliation variance/status and the local-day boundary
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from stallpos.models import ORIGIN_VENDOR, PAYMENT_EWALLET
from stallpos.services import ledger_service
from stallpos.services.payout_service import record_payout


KL = ZoneInfo("Asia/Kuala_Lumpur")
DAY = date(2026, 10, 19)


def _pay(state, vendor_name, amount):
    return record_payout(state.payouts, vendor_name, amount, ids=state.ids)


class TestCashInHand:
    def test_cash_sales_minus_payouts(self, state, sell):
        sell([("zz-1", 1, 2000)])
        sell([("zz-2", 1, 1500)], payment_method=PAYMENT_EWALLET)
        _pay(state, "Mee Tarik", 500)

        assert ledger_service.cash_in_hand(state.sales, state.payouts) == 1500

    def test_empty_histories(self, state):
        assert ledger_service.cash_in_hand(state.sales, state.payouts) == 0

    def test_can_go_negative(self, state):
        _pay(state, "Mee Tarik", 300)
        assert ledger_service.cash_in_hand(state.sales, state.payouts) == -300


class TestVendorLedger:
    def test_owed_paid_balance(self, state, mee_sup, sell):
        sell([(mee_sup.id, 2)])
        _pay(state, "Mee Tarik", 300)

        assert ledger_service.vendor_ledger(state.sales, state.payouts) == [
            {"name": "Mee Tarik", "owed_cents": 800, "paid_cents": 300, "balance_cents": 500},
        ]

    def test_internal_lines_are_not_owed(self, state, mee_sup, sell):
        sell([(mee_sup.id, 1), ("zz-1", 3, 100)])

        rows = ledger_service.vendor_ledger(state.sales, state.payouts)
        assert [row["name"] for row in rows] == ["Mee Tarik"]
        assert rows[0]["owed_cents"] == 400

    def test_payout_to_vendor_without_sales_gets_row(self, state, mee_sup, sell):
        sell([(mee_sup.id, 1)])
        _pay(state, "Nasi Lemak Kak Ros", 1000)

        rows = ledger_service.vendor_ledger(state.sales, state.payouts)
        assert rows[1] == {
            "name": "Nasi Lemak Kak Ros",
            "owed_cents": 0,
            "paid_cents": 1000,
            "balance_cents": -1000,
        }

    def test_balance_survives_item_delete(self, state, mee_sup, sell):
        sell([(mee_sup.id, 2)])
        state.catalog.delete_item(mee_sup.id)

        rows = ledger_service.vendor_ledger(state.sales, state.payouts)
        assert rows[0]["owed_cents"] == 800


class TestDailyCashReconciliation:
    @pytest.mark.parametrize(
        "counted, variance, status",
        [
            (4800, -200, ledger_service.STATUS_SHORTAGE),
            (5000, 0, ledger_service.STATUS_BALANCED),
            (5100, 100, ledger_service.STATUS_SURPLUS),
        ],
    )
    def test_variance_status(self, state, sell, counted, variance, status):
        sell([("zz-1", 10, 300)])
        sell([("zz-4", 4, 500)])
        sell([("zz-3", 1, 700)], payment_method=PAYMENT_EWALLET)

        report = ledger_service.daily_cash_reconciliation(state.sales, DAY, counted, tz=KL)

        assert report["expected_cash_cents"] == 5000
        assert report["variance_cents"] == variance
        assert report["status"] == status

    def test_without_count(self, state, sell):
        sell([("zz-1", 1, 100)])
        report = ledger_service.daily_cash_reconciliation(state.sales, DAY, tz=KL)
        assert report["variance_cents"] is None
        assert report["status"] is None

    def test_breakdown_by_method_and_origin(self, state, mee_sup, sell):
        sell([("zz-1", 2, 200)])
        sell([(mee_sup.id, 1)], payment_method=PAYMENT_EWALLET)
        sell([(mee_sup.id, 2)])

        report = ledger_service.daily_cash_reconciliation(state.sales, DAY, tz=KL)

        assert report["transaction_count"] == 3
        assert report["total_revenue_cents"] == 400 + 800 + 1600
        assert report["by_payment_method"] == {"Cash": 2000, "EWallet": 800}
        assert report["by_origin"]["Internal"] == {"cash_cents": 400, "ewallet_cents": 0, "total_cents": 400}
        assert report["by_origin"][ORIGIN_VENDOR] == {"cash_cents": 1600, "ewallet_cents": 800, "total_cents": 2400}

    def test_uses_local_calendar_day(self, state, sell):
        # 01:00 on the 19th in Kuala Lumpur, still the 18th in UTC
        sell([("zz-1", 1, 1000)], now=datetime(2026, 10, 18, 17, 0))
        # 00:30 on the 20th in Kuala Lumpur
        sell([("zz-1", 1, 2000)], now=datetime(2026, 10, 19, 16, 30))

        report = ledger_service.daily_cash_reconciliation(state.sales, DAY, tz=KL)

        assert report["transaction_count"] == 1
        assert report["expected_cash_cents"] == 1000
        assert report["date"] == "2026-10-19"
