"""
Ledger engine: the core of the wallet.

This service enforces the fundamental rules:
1. Amounts are positive, have at most two decimal places and fall
   inside the configured range for their operation class
2. Accounts must exist and be ACTIVE
3. Balances never go below zero
4. Every balance change is recorded as COMPLETED transaction rows
   in the same unit of work, each with a unique reference
5. A transfer conserves value: the debit on the sender equals the
   credit on the recipient

No other service mutates balances or writes transactions.

Each public operation is one unit of work: it commits when it
returns and rolls back completely when it raises. The engine keeps
no state between calls, so any number of engines may run against
the same database.
"""

import uuid
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session

from wallet_ledger.exceptions import (
    AccountNotActiveError,
    ConflictError,
    InsufficientFundsError,
    NotFoundError,
    ReferenceExhaustedError,
    SelfTransferError,
    ValidationError,
    WalletError,
)
from wallet_ledger.limits import AmountLimits, AmountRange, amount_limits_from_settings
from wallet_ledger.logging_config import get_logger
from wallet_ledger.models.account import Account
from wallet_ledger.models.base import unit_of_work
from wallet_ledger.models.enums import (
    OperationClass,
    TransactionStatus,
    TransactionType,
)
from wallet_ledger.models.transaction import Transaction
from wallet_ledger.services.account_store import AccountStore, is_valid_account_number
from wallet_ledger.services.reference_generator import ReferenceGenerator
from wallet_ledger.services.transaction_store import TransactionStore

logger = get_logger("services.ledger_engine")

CENTS = Decimal("0.01")

OPERATION_LABELS = {
    OperationClass.FUNDING: "funding",
    OperationClass.TRANSFER: "transfer",
    OperationClass.WITHDRAWAL: "withdrawal",
}


@dataclass(frozen=True)
class LedgerResult:
    """What every money movement returns to its caller."""
    transaction: Transaction
    new_balance: Decimal


def validate_amount(
    amount, limits: AmountRange, operation: OperationClass
) -> Decimal:
    """
    Check an amount against its operation class and normalise it
    to two decimal places.

    Runs before any storage access, so a rejected amount never
    touches the database.
    """
    if isinstance(amount, (bool, float)):
        # floats cannot represent cents exactly; bools are ints in disguise
        raise ValidationError("Amount must be a decimal value")
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError("Amount must be a valid number")

    if not value.is_finite():
        raise ValidationError("Amount must be a valid number")
    if value <= 0:
        raise ValidationError("Amount must be greater than zero")

    label = OPERATION_LABELS[operation]
    if value < limits.min_amount:
        raise ValidationError(f"Minimum {label} amount is {limits.min_amount}")
    if value > limits.max_amount:
        raise ValidationError(f"Maximum {label} amount is {limits.max_amount}")

    normalised = value.quantize(CENTS)
    if normalised != value:
        raise ValidationError("Amount cannot have more than two decimal places")
    return normalised


class LedgerEngine:
    """
    All money movement passes through this engine.

    The engine takes a database session as a constructor argument,
    along with its amount limits and reference generator. Nothing
    is looked up from module-level state, so tests can hand in
    their own session, limits or generator.
    """

    def __init__(
        self,
        db: Session,
        limits: AmountLimits | None = None,
        reference_generator: ReferenceGenerator | None = None,
    ):
        self.db = db
        self.accounts = AccountStore(db)
        self.transactions = TransactionStore(db)
        self.references = reference_generator or ReferenceGenerator(self.transactions)
        self.limits = limits if limits is not None else amount_limits_from_settings()

        missing = set(OperationClass) - set(self.limits)
        if missing:
            raise ValueError(
                f"Amount limits missing for: {sorted(m.value for m in missing)}"
            )

    # --- Public operations ---

    def fund(
        self, owner_id: int, amount, description: str | None = None
    ) -> LedgerResult:
        """
        Credit the owner's account.

        Effect:
            balance += amount
            one CREDIT transaction, COMPLETED
        """
        try:
            amount = validate_amount(
                amount, self.limits[OperationClass.FUNDING], OperationClass.FUNDING
            )
            with unit_of_work(self.db):
                account = self._load_active_account(owner_id)
                account_number = account.account_number

                new_balance = self.accounts.adjust_balance(account.id, amount)
                transaction = self._append_leg(
                    account_id=account.id,
                    transaction_type=TransactionType.CREDIT,
                    amount=amount,
                    description=description or "Account funding",
                )
                reference = transaction.reference
        except WalletError as e:
            self._log_rejection("fund", owner_id, amount, e)
            raise

        logger.info(
            "Account funded successfully",
            extra={
                "owner_id": owner_id,
                "account_number": account_number,
                "amount": str(amount),
                "reference": reference,
                "new_balance": str(new_balance),
            },
        )
        return LedgerResult(transaction=transaction, new_balance=new_balance)

    def withdraw(
        self, owner_id: int, amount, description: str | None = None
    ) -> LedgerResult:
        """
        Debit the owner's account.

        Effect:
            balance -= amount (never below zero)
            one DEBIT transaction, COMPLETED
        """
        try:
            amount = validate_amount(
                amount,
                self.limits[OperationClass.WITHDRAWAL],
                OperationClass.WITHDRAWAL,
            )
            with unit_of_work(self.db):
                account = self._load_active_account(owner_id)
                account_number = account.account_number
                self._check_sufficient_balance(account, amount)

                new_balance = self.accounts.adjust_balance(account.id, -amount)
                transaction = self._append_leg(
                    account_id=account.id,
                    transaction_type=TransactionType.DEBIT,
                    amount=amount,
                    description=description or "Cash withdrawal",
                )
                reference = transaction.reference
        except WalletError as e:
            self._log_rejection("withdraw", owner_id, amount, e)
            raise

        logger.info(
            "Funds withdrawn successfully",
            extra={
                "owner_id": owner_id,
                "account_number": account_number,
                "amount": str(amount),
                "reference": reference,
                "new_balance": str(new_balance),
            },
        )
        return LedgerResult(transaction=transaction, new_balance=new_balance)

    def transfer(
        self,
        owner_id: int,
        recipient_account_number: str,
        amount,
        description: str | None = None,
    ) -> LedgerResult:
        """
        Move money from the owner's account to another account.

        Effect, atomically:
            sender.balance    -= amount
            recipient.balance += amount
            DEBIT leg on sender    (counterparty = recipient)
            CREDIT leg on recipient (counterparty = sender)

        Both legs are COMPLETED, carry their own reference and share
        a transfer_id. Returns the sender leg and the sender's new
        balance.
        """
        try:
            if not is_valid_account_number(recipient_account_number):
                raise ValidationError("Account number must be exactly 10 digits")
            amount = validate_amount(
                amount, self.limits[OperationClass.TRANSFER], OperationClass.TRANSFER
            )

            with unit_of_work(self.db):
                sender = self.accounts.find_by_owner(owner_id)
                if not sender:
                    raise NotFoundError("Sender account not found")
                if not sender.is_active:
                    raise AccountNotActiveError(
                        "Sender account is not active", sender.status.value
                    )

                recipient = self.accounts.find_by_account_number(
                    recipient_account_number
                )
                if not recipient:
                    raise NotFoundError("Recipient account not found")
                if not recipient.is_active:
                    raise AccountNotActiveError(
                        "Recipient account is not active", recipient.status.value
                    )

                if sender.id == recipient.id:
                    raise SelfTransferError()

                self._check_sufficient_balance(sender, amount)
                sender_number = sender.account_number
                sender_balance = self._move_funds(sender.id, recipient.id, amount)

                transfer_id = uuid.uuid4()
                description = description or "Fund transfer"
                debit = self._append_leg(
                    account_id=sender.id,
                    transaction_type=TransactionType.DEBIT,
                    amount=amount,
                    description=description,
                    counterparty_account_id=recipient.id,
                    transfer_id=transfer_id,
                )
                self._append_leg(
                    account_id=recipient.id,
                    transaction_type=TransactionType.CREDIT,
                    amount=amount,
                    description=description,
                    counterparty_account_id=sender.id,
                    transfer_id=transfer_id,
                )
                reference = debit.reference
        except WalletError as e:
            self._log_rejection("transfer", owner_id, amount, e)
            raise

        logger.info(
            "Funds transferred successfully",
            extra={
                "owner_id": owner_id,
                "sender_account_number": sender_number,
                "recipient_account_number": recipient_account_number,
                "amount": str(amount),
                "reference": reference,
                "transfer_id": str(transfer_id),
                "new_balance": str(sender_balance),
            },
        )
        return LedgerResult(transaction=debit, new_balance=sender_balance)

    # --- Internals ---

    def _load_active_account(self, owner_id: int) -> Account:
        account = self.accounts.find_by_owner(owner_id)
        if not account:
            raise NotFoundError("Account not found")
        if not account.is_active:
            raise AccountNotActiveError(
                "Account is not active", account.status.value
            )
        return account

    def _check_sufficient_balance(self, account: Account, amount: Decimal) -> None:
        """
        Cheap pre-check against the loaded row. adjust_balance
        re-checks against the locked row, which is what actually
        guarantees the balance never goes negative.
        """
        if account.balance < amount:
            raise InsufficientFundsError(
                available_balance=account.balance, requested=amount
            )

    def _move_funds(
        self, sender_id: int, recipient_id: int, amount: Decimal
    ) -> Decimal:
        """
        Debit the sender and credit the recipient; return the
        sender's new balance.

        Rows are updated in ascending id order so two opposite
        transfers between the same pair of accounts lock the rows
        in the same order and cannot deadlock.
        """
        if sender_id < recipient_id:
            sender_balance = self.accounts.adjust_balance(sender_id, -amount)
            self.accounts.adjust_balance(recipient_id, amount)
        else:
            self.accounts.adjust_balance(recipient_id, amount)
            sender_balance = self.accounts.adjust_balance(sender_id, -amount)
        return sender_balance

    def _append_leg(
        self,
        account_id: int,
        transaction_type: TransactionType,
        amount: Decimal,
        description: str,
        counterparty_account_id: int | None = None,
        transfer_id: uuid.UUID | None = None,
    ) -> Transaction:
        result = self.references.next()
        if result.exhausted:
            raise ReferenceExhaustedError(result.attempts)

        try:
            return self.transactions.append(Transaction(
                account_id=account_id,
                transaction_type=transaction_type,
                amount=amount,
                counterparty_account_id=counterparty_account_id,
                reference=result.reference,
                transfer_id=transfer_id,
                status=TransactionStatus.COMPLETED,
                description=description,
            ))
        except ConflictError as e:
            # Another writer took the reference between probe and insert.
            # The unit of work rolls back; the whole call can be retried.
            logger.warning(
                "Transaction reference taken at insert",
                extra={"reference": result.reference, "attempts": result.attempts},
            )
            raise ReferenceExhaustedError(result.attempts) from e

    def _log_rejection(
        self, operation: str, owner_id: int, amount, error: WalletError
    ) -> None:
        logger.warning(
            "Ledger operation rejected",
            extra={
                "operation": operation,
                "owner_id": owner_id,
                "amount": str(amount),
                "code": error.code,
                "reason": error.message,
            },
        )
