from src.em_common.errors import FeeTooHighError, NameTooLongError

MAX_NAME_BYTES: int = 32  # also the longest seed the derivation accepts
MAX_FEE_BPS: int = 10_000  # 100%


def check_marketplace_name(name: str) -> None:
    """Raise NameTooLongError(6000) unless name is 1..32 bytes of UTF-8."""
    size = len(name.encode("utf-8"))
    if size == 0 or size > MAX_NAME_BYTES:
        raise NameTooLongError()


def check_fee_bps(fee_bps: int) -> None:
    if not 0 <= fee_bps <= MAX_FEE_BPS:
        raise FeeTooHighError(fee_bps)
