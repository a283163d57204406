from src.em_common.errors import InvalidPriceError
from src.em_common.lamports import fits_u64


def check_listing_price(price: int) -> None:
    """Raise InvalidPriceError(6004) unless 0 < price <= u64::MAX."""
    if price <= 0 or not fits_u64(price):
        raise InvalidPriceError(price)
