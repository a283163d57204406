"""Tests for marketplace fee arithmetic (floor, u64-checked, charged on top)."""

import pytest

from src.em_common.errors import ArithmeticOverflowError
from src.em_common.lamports import U64_MAX
from src.em_settlement.domain.fee import (
    calc_buyer_outlay,
    calc_marketplace_fee,
    split_payment,
)


class TestCalcMarketplaceFee:
    def test_gallery_example(self) -> None:
        # 1_000_000 * 250 / 10000 = 25_000
        assert calc_marketplace_fee(1_000_000, 250) == 25_000

    def test_floor_division(self) -> None:
        # 999 * 250 / 10000 = 24.975 -> 24
        assert calc_marketplace_fee(999, 250) == 24

    def test_small_price_rounds_to_zero(self) -> None:
        assert calc_marketplace_fee(39, 250) == 0

    def test_zero_fee(self) -> None:
        assert calc_marketplace_fee(1_000_000, 0) == 0

    def test_full_fee(self) -> None:
        assert calc_marketplace_fee(1_000_000, 10_000) == 1_000_000

    def test_product_overflow(self) -> None:
        with pytest.raises(ArithmeticOverflowError):
            calc_marketplace_fee(U64_MAX, 2)

    def test_largest_price_without_overflow(self) -> None:
        price = U64_MAX // 10_000
        assert calc_marketplace_fee(price, 10_000) == price


class TestBuyerOutlay:
    def test_sum(self) -> None:
        assert calc_buyer_outlay(1_000_000, 25_000) == 1_025_000

    def test_overflow(self) -> None:
        with pytest.raises(ArithmeticOverflowError):
            calc_buyer_outlay(U64_MAX, 1)


class TestSplitPayment:
    def test_seller_gets_full_price(self) -> None:
        split = split_payment(1_000_000, 250)
        assert split.price == 1_000_000
        assert split.fee == 25_000
        assert split.total == 1_025_000

    def test_sum_overflow_with_fee(self) -> None:
        # Product fits, but price + fee does not
        with pytest.raises(ArithmeticOverflowError):
            split_payment(U64_MAX - 10, 1)
