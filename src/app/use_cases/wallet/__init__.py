from .credit_wallet import CreditWallet
from .debit_wallet import DebitWallet
from .get_wallet import GetWallet
from .list_transactions import ListTransactions
from .adjust_balance import AdjustBalance
from .reconcile_ledger import ReconcileLedger
from .dtos import (
    CreditCommandDTO,
    DebitCommandDTO,
    AdjustBalanceCommandDTO,
    ListTransactionsQueryDTO,
    WalletResponseDTO,
    TransactionResponseDTO,
    TransactionListResponseDTO,
    WalletDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "CreditWallet",
    "DebitWallet",
    "GetWallet",
    "ListTransactions",
    "AdjustBalance",
    "ReconcileLedger",
    "CreditCommandDTO",
    "DebitCommandDTO",
    "AdjustBalanceCommandDTO",
    "ListTransactionsQueryDTO",
    "WalletResponseDTO",
    "TransactionResponseDTO",
    "TransactionListResponseDTO",
    "WalletDiscrepancyDTO",
    "ReconciliationResultDTO",
]
