"""Marketplace fee arithmetic: the fee is charged to the buyer on top of the price."""

from dataclasses import dataclass

from src.em_common.errors import ArithmeticOverflowError
from src.em_common.lamports import fits_u64

BPS_DENOMINATOR: int = 10_000


def calc_marketplace_fee(price: int, fee_bps: int) -> int:
    """Floor division fee: (price x fee_bps) // 10000, computed in u64."""
    product = price * fee_bps
    if not fits_u64(product):
        raise ArithmeticOverflowError()
    return product // BPS_DENOMINATOR


def calc_buyer_outlay(price: int, fee: int) -> int:
    total = price + fee
    if not fits_u64(total):
        raise ArithmeticOverflowError()
    return total


@dataclass(frozen=True)
class PaymentSplit:
    price: int      # to seller, in full
    fee: int        # to treasury
    total: int      # debited from buyer, excluding rent for new accounts


def split_payment(price: int, fee_bps: int) -> PaymentSplit:
    fee = calc_marketplace_fee(price, fee_bps)
    return PaymentSplit(price=price, fee=fee, total=calc_buyer_outlay(price, fee))
