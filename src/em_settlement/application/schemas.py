"""Pydantic schemas for em_settlement API."""

from pydantic import BaseModel

from src.em_common.lamports import lamports_to_display
from src.em_settlement.domain.fee import PaymentSplit


class PurchaseResponse(BaseModel):
    tx_id: str
    asset_mint: str
    seller: str
    buyer: str
    price_lamports: int
    price_display: str
    fee_lamports: int
    fee_display: str
    total_lamports: int
    total_display: str
    asset_account: str
    reward_account: str

    @classmethod
    def from_settlement(
        cls,
        tx_id: str,
        asset_mint: str,
        seller: str,
        buyer: str,
        split: PaymentSplit,
        asset_account: str,
        reward_account: str,
    ) -> "PurchaseResponse":
        return cls(
            tx_id=tx_id,
            asset_mint=asset_mint,
            seller=seller,
            buyer=buyer,
            price_lamports=split.price,
            price_display=lamports_to_display(split.price),
            fee_lamports=split.fee,
            fee_display=lamports_to_display(split.fee),
            total_lamports=split.total,
            total_display=lamports_to_display(split.total),
            asset_account=asset_account,
            reward_account=reward_account,
        )
