"""Integer arithmetic for native-currency amounts.

All balances, prices and fees are int lamports (1 SOL = 10^9 lamports).
No float, no Decimal. On-ledger amounts are u64; anything that would not fit
is an overflow, not a bigger number.
"""

LAMPORTS_PER_SOL = 1_000_000_000
U64_MAX = (1 << 64) - 1

# Rent-exemption constants of the host ledger
ACCOUNT_STORAGE_OVERHEAD = 128
LAMPORTS_PER_BYTE_YEAR = 3480
EXEMPTION_THRESHOLD_YEARS = 2

TOKEN_ACCOUNT_SPACE = 165
MINT_SPACE = 82


def minimum_balance(space: int) -> int:
    """Rent-exempt minimum for an account holding `space` data bytes.

    minimum_balance(165) == 2_039_280 (token account)
    """
    return (
        (ACCOUNT_STORAGE_OVERHEAD + space)
        * LAMPORTS_PER_BYTE_YEAR
        * EXEMPTION_THRESHOLD_YEARS
    )


def fits_u64(value: int) -> bool:
    return 0 <= value <= U64_MAX


def lamports_to_display(lamports: int) -> str:
    """Convert lamports to display string: 1_025_000_000 -> '1.025 SOL'."""
    sign = "-" if lamports < 0 else ""
    whole, frac = divmod(abs(lamports), LAMPORTS_PER_SOL)
    frac_str = f"{frac:09d}".rstrip("0")
    if not frac_str:
        return f"{sign}{whole:,} SOL"
    return f"{sign}{whole:,}.{frac_str} SOL"
