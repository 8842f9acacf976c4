"""Predefined error instances raised by services and routes."""

from __future__ import annotations

from sol_dashboard.errors.ledger_errors import LedgerError

# -- Validation ------------------------------------------------------------

ErrInvalidRequest = LedgerError("invalid request body", status_code=400, code="invalid-request")
ErrMissingSignature = LedgerError(
    "missing required field: signature", status_code=400, code="missing-signature"
)
ErrMissingWalletAddress = LedgerError(
    "missing required field: walletAddress", status_code=400, code="missing-wallet-address"
)
ErrInvalidTransactionType = LedgerError(
    "invalid transaction type", status_code=400, code="invalid-transaction-type"
)
ErrInvalidStatus = LedgerError(
    "invalid transaction status", status_code=400, code="invalid-status"
)
ErrInvalidTimestamp = LedgerError(
    "timestamp must be a non-negative integer", status_code=400, code="invalid-timestamp"
)
ErrEmptyTokenChanges = LedgerError(
    "confirmed transactions require at least one token change",
    status_code=400,
    code="empty-token-changes",
)
ErrInvalidTokenChange = LedgerError(
    "token change requires a numeric amount and a token symbol",
    status_code=400,
    code="invalid-token-change",
)
ErrFieldTooLong = LedgerError(
    "field value exceeds its maximum length", status_code=400, code="field-too-long"
)
ErrInvalidFieldValue = LedgerError(
    "field value has the wrong type", status_code=400, code="invalid-field-value"
)

# -- Conflict --------------------------------------------------------------

ErrTransactionDuplicate = LedgerError(
    "transaction already recorded", status_code=409, code="transaction-duplicate"
)

# -- Not Found -------------------------------------------------------------

ErrTransactionNotFound = LedgerError(
    "transaction not found", status_code=404, code="transaction-not-found"
)

# -- Availability ----------------------------------------------------------

ErrStorageUnavailable = LedgerError(
    "transaction store unavailable", status_code=503, code="storage-unavailable"
)
ErrEngineNotReady = LedgerError("engine not initialized", status_code=503, code="engine-not-ready")
ErrInternal = LedgerError("internal server error", status_code=500, code="internal-error")

# -- Swap ------------------------------------------------------------------

ErrUnknownToken = LedgerError("unknown token mint", status_code=400, code="unknown-token")
ErrInvalidSwapAmount = LedgerError(
    "swap amount must be positive", status_code=400, code="invalid-swap-amount"
)
ErrSameTokenSwap = LedgerError(
    "input and output mints must differ", status_code=400, code="same-token-swap"
)
ErrNoRoute = LedgerError("no swap route found", status_code=422, code="no-route")
