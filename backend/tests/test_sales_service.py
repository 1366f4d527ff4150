"""
Sale commit tests.

Verifies:
- price resolution for Vendor, Internal and ad-hoc lines
- cash/e-wallet payment rules and change
- rejected carts leave catalog and history untouched
- only Vendor items lose stock
"""

import pytest

from conftest import SALE_TIME
from stallpos.models import ORIGIN_INTERNAL, ORIGIN_VENDOR, PAYMENT_CASH, PAYMENT_EWALLET
from stallpos.services import sales_service
from stallpos.services.sales_service import CartLineRequest, SaleError


def _commit(state, cart, **kwargs):
    kwargs.setdefault("payment_method", PAYMENT_CASH)
    kwargs.setdefault("origin", ORIGIN_VENDOR)
    return sales_service.commit_sale(state.catalog, state.sales, cart, ids=state.ids, **kwargs)


class TestCommitSale:
    def test_vendor_sale_records_snapshot_and_decrements_stock(self, state, mee_sup):
        sale = _commit(state, [CartLineRequest(mee_sup.id, 2)], amount_received_cents=2000, now=SALE_TIME)

        assert sale.id
        assert sale.timestamp == SALE_TIME
        assert sale.total_cents == 1600
        assert sale.change_cents == 400
        assert sale.origin == ORIGIN_VENDOR
        (line,) = sale.lines
        assert line.vendor_name == "Mee Tarik"
        assert line.unit_price_cents == 800
        assert line.cost_price_cents == 400
        assert mee_sup.stock_count == 8
        assert state.sales.records() == [sale]

    def test_internal_item_uses_sale_time_price_and_keeps_stock(self, state):
        sale = _commit(
            state,
            [CartLineRequest("zz-1", 3, 150)],
            origin=ORIGIN_INTERNAL,
            amount_received_cents=450,
        )
        assert sale.total_cents == 450
        assert sale.change_cents == 0
        assert sale.lines[0].origin == ORIGIN_INTERNAL
        assert state.catalog.get("zz-1").stock_count == 100

    def test_vendor_line_ignores_sale_time_price(self, state, mee_sup):
        sale = _commit(state, [CartLineRequest(mee_sup.id, 1, 1)], amount_received_cents=800)
        assert sale.total_cents == 800

    def test_ad_hoc_line_is_internal(self, state):
        sale = _commit(
            state,
            [CartLineRequest(None, 2, 250, name="Cucur Udang")],
            origin=ORIGIN_INTERNAL,
            amount_received_cents=500,
        )
        (line,) = sale.lines
        assert line.item_id is None
        assert line.origin == ORIGIN_INTERNAL
        assert line.vendor_name == "ZZ"
        assert line.name == "Cucur Udang"

    def test_ewallet_defaults_received_to_total(self, state, mee_sup):
        sale = _commit(state, [CartLineRequest(mee_sup.id, 1)], payment_method=PAYMENT_EWALLET)
        assert sale.amount_received_cents == 800
        assert sale.change_cents == 0

    def test_oversell_allowed_by_default(self, state, mee_sup):
        _commit(state, [CartLineRequest(mee_sup.id, 12)], amount_received_cents=9600)
        assert mee_sup.stock_count == -2

    def test_deleting_item_does_not_change_recorded_sale(self, state, mee_sup):
        sale = _commit(state, [CartLineRequest(mee_sup.id, 1)], amount_received_cents=800)
        state.catalog.delete_item(mee_sup.id)

        recorded = state.sales.get(sale.id)
        assert recorded.lines[0].name == "Mee Sup"
        assert recorded.lines[0].unit_price_cents == 800

    def test_ids_unique_for_rapid_sales(self, state, sell):
        first = sell([("zz-1", 1, 100)])
        second = sell([("zz-1", 1, 100)])
        assert first.id != second.id


class TestRejectedCarts:
    @pytest.mark.parametrize(
        "cart, kwargs, message",
        [
            ([], {}, "empty cart"),
            ([CartLineRequest("missing", 1)], {"amount_received_cents": 1000}, "Item not found"),
            ([CartLineRequest("zz-1", 1)], {"amount_received_cents": 1000}, "internal items"),
            ([CartLineRequest("zz-1", 1, 0)], {"amount_received_cents": 1000}, "internal items"),
            ([CartLineRequest(None, 1, 100)], {"amount_received_cents": 1000}, "need a name"),
            ([CartLineRequest(None, 1, name="Cucur")], {"amount_received_cents": 1000}, "custom items"),
            ([CartLineRequest("zz-1", 0, 100)], {"amount_received_cents": 1000}, "Quantity"),
            ([CartLineRequest("zz-1", 1, 100)], {"payment_method": "Card"}, "payment method"),
            ([CartLineRequest("zz-1", 1, 100)], {"origin": "Other"}, "origin"),
        ],
    )
    def test_invalid_cart_raises(self, state, cart, kwargs, message):
        with pytest.raises(SaleError, match=message):
            _commit(state, cart, **kwargs)
        assert len(state.sales) == 0

    def test_insufficient_cash_leaves_state_unchanged(self, state, mee_sup):
        with pytest.raises(SaleError, match="Insufficient payment") as excinfo:
            _commit(state, [CartLineRequest(mee_sup.id, 2)], amount_received_cents=1500)

        assert excinfo.value.details == {"total_cents": 1600, "amount_received_cents": 1500}
        assert len(state.sales) == 0
        assert mee_sup.stock_count == 10

    def test_one_bad_line_rejects_whole_cart(self, state, mee_sup):
        cart = [CartLineRequest(mee_sup.id, 1), CartLineRequest("zz-2", 1)]
        with pytest.raises(SaleError):
            _commit(state, cart, amount_received_cents=5000)
        assert mee_sup.stock_count == 10
        assert len(state.sales) == 0

    def test_stock_check_when_oversell_disabled(self, state, mee_sup):
        cart = [CartLineRequest(mee_sup.id, 6), CartLineRequest(mee_sup.id, 5)]
        with pytest.raises(SaleError, match="Insufficient stock") as excinfo:
            _commit(state, cart, amount_received_cents=10000, allow_oversell=False)

        assert excinfo.value.details["items"][0]["requested_quantity"] == 11
        assert mee_sup.stock_count == 10

    def test_strict_origin_rejects_mixed_cart(self, state, mee_sup):
        cart = [CartLineRequest(mee_sup.id, 1), CartLineRequest("zz-1", 1, 100)]
        with pytest.raises(SaleError, match="Vendor items") as excinfo:
            _commit(state, cart, amount_received_cents=900, strict_origin=True)
        assert excinfo.value.details == {"lines": [2]}

    def test_mixed_cart_allowed_without_strict_origin(self, state, mee_sup):
        cart = [CartLineRequest(mee_sup.id, 1), CartLineRequest("zz-1", 1, 100)]
        sale = _commit(state, cart, amount_received_cents=900)
        assert sale.origin == ORIGIN_VENDOR
        assert [line.origin for line in sale.lines] == [ORIGIN_VENDOR, ORIGIN_INTERNAL]

    def test_mixed_cart_decrements_only_vendor_stock(self, state, mee_sup):
        cart = [CartLineRequest("zz-1", 3, 100), CartLineRequest(mee_sup.id, 2)]
        sale = _commit(state, cart, origin=ORIGIN_INTERNAL, amount_received_cents=1900)

        assert sale.total_cents == 300 + 1600
        assert mee_sup.stock_count == 8
        assert state.catalog.get("zz-1").stock_count == 100


class TestPreviewSale:
    def test_preview_commits_nothing(self, state, mee_sup):
        draft = sales_service.preview_sale(
            state.catalog,
            [CartLineRequest(mee_sup.id, 2)],
            payment_method=PAYMENT_CASH,
            origin=ORIGIN_VENDOR,
            amount_received_cents=2000,
        )
        assert draft.total_cents == 1600
        assert draft.change_cents == 400
        assert len(state.sales) == 0
        assert mee_sup.stock_count == 10


def test_history_rejects_duplicate_id(state, sell):
    sale = sell([("zz-1", 1, 100)])
    with pytest.raises(SaleError, match="Duplicate"):
        state.sales.append(sale)
