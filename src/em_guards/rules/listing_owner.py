from src.em_common.errors import UnauthorizedDelistError
from src.em_marketplace.domain.models import Listing


def check_listing_seller(listing: Listing, signer: str) -> None:
    """Only the wallet recorded as seller may withdraw a listing."""
    if listing.seller != signer:
        raise UnauthorizedDelistError()
