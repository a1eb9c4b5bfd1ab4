"""ListTransactions Use Case

Paginated transaction history of an account, newest first.
"""

from libs.result import Result, Return
from src.app.errors import store_error
from src.app.repositories.alc_transaction_repository import AlcTransactionRepository
from .dtos import ListTransactionsQueryDTO, TransactionListResponseDTO, to_transaction_dto


class ListTransactions:
    """
    Use Case: List ALC transactions

    Read-only: does not create the wallet.
    """

    def __init__(self, transaction_repo: AlcTransactionRepository):
        self.transaction_repo = transaction_repo

    async def execute(self, query: ListTransactionsQueryDTO) -> Result[TransactionListResponseDTO]:
        try:
            transactions = await self.transaction_repo.list_by_account(
                query.account_id, limit=query.limit, offset=query.offset
            )
            total = await self.transaction_repo.count_by_account(query.account_id)

            return Return.ok(
                TransactionListResponseDTO(
                    account_id=query.account_id,
                    transactions=[to_transaction_dto(t) for t in transactions],
                    total=total,
                    limit=query.limit,
                    offset=query.offset,
                )
            )
        except Exception as e:
            return Return.err(store_error(e, "Failed to list transactions"))
