"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Wallet session
  2xxx: Ledger host (accounts, tokens, signing authority)
  3xxx: Lookup (marketplace, listing, record layout)
  6000-6007: Marketplace program errors, numbered as the on-ledger program numbers them
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth ---

class InvalidSignatureError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Wallet signature does not match the challenge", 401)


class ChallengeExpiredError(AppError):
    def __init__(self, address: str) -> None:
        super().__init__(1002, f"No pending sign-in challenge for {address}", 401)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired access token", 401)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired", 401)


# --- 2xxx: Ledger host ---

class InsufficientFundsError(AppError):
    def __init__(self, address: str, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient lamports in {address}: required {required}, available {available}",
            422,
        )


class AccountNotFoundError(AppError):
    def __init__(self, address: str) -> None:
        super().__init__(2002, f"Account not found: {address}", 404)


class AccountAlreadyInUseError(AppError):
    def __init__(self, address: str) -> None:
        super().__init__(2003, f"Account already in use: {address}", 409)


class OwnerMismatchError(AppError):
    def __init__(self, address: str, detail: str) -> None:
        super().__init__(2004, f"Authority not permitted for {address}: {detail}", 403)


class InsufficientTokenBalanceError(AppError):
    def __init__(self, address: str, required: int, available: int) -> None:
        super().__init__(
            2005,
            f"Insufficient token balance in {address}: required {required}, "
            f"available {available}",
            422,
        )


class MintMismatchError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2006, f"Mint mismatch: {detail}", 422)


class NonZeroTokenBalanceError(AppError):
    def __init__(self, address: str, amount: int) -> None:
        super().__init__(2007, f"Cannot close {address}: token balance is {amount}", 422)


class InvalidProgramAuthorityError(AppError):
    def __init__(self, address: str) -> None:
        super().__init__(2008, f"Program authority does not re-derive to {address}", 403)


# --- 3xxx: Lookup ---

class MarketplaceNotFoundError(AppError):
    def __init__(self, name: str) -> None:
        super().__init__(3001, f"Marketplace not found: {name}", 404)


class ListingNotFoundError(AppError):
    def __init__(self, asset_mint: str) -> None:
        super().__init__(3002, f"No live listing for asset {asset_mint}", 404)


class AccountDataMismatchError(AppError):
    def __init__(self, address: str, expected: str) -> None:
        super().__init__(3003, f"Account {address} does not hold a {expected} record", 422)


# --- 6000-6007: Marketplace program ---

class NameTooLongError(AppError):
    def __init__(self) -> None:
        super().__init__(6000, "Name must be less than or equal to 32 characters", 422)


class FeeTooHighError(AppError):
    def __init__(self, fee_bps: int) -> None:
        super().__init__(
            6001,
            f"Fee must be less than or equal to 10000 basis points (100%), got {fee_bps}",
            422,
        )


class CollectionInvalidError(AppError):
    def __init__(self, collection_mint: str) -> None:
        super().__init__(6002, f"Invalid collection address: {collection_mint}", 422)


class CollectionNotVerifiedError(AppError):
    def __init__(self, collection_mint: str) -> None:
        super().__init__(6003, f"Collection not verified: {collection_mint}", 422)


class InvalidPriceError(AppError):
    def __init__(self, price: int) -> None:
        super().__init__(6004, f"Price must be greater than zero, got {price}", 422)


class ArithmeticOverflowError(AppError):
    def __init__(self) -> None:
        super().__init__(6005, "Arithmetic overflow in fee calculation", 422)


class UnauthorizedDelistError(AppError):
    def __init__(self) -> None:
        super().__init__(6006, "Unauthorized: Only the listing maker can delist", 403)


class InvalidMintDecimalsError(AppError):
    def __init__(self, decimals: int) -> None:
        super().__init__(6007, f"Invalid mint decimals: {decimals}", 422)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class FaucetDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(9003, "Asset faucet is disabled on this deployment", 403)
