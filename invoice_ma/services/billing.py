"""Credit gate for invoice creation and editing.

``decide`` holds the rule and touches nothing; ``charge_credit`` is the
atomic decrement the invoice service calls inside its transaction.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import update
from sqlalchemy.orm import Session

from ..errors import InsufficientCredits
from ..models import Account

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BillingDecision:
    charge: bool
    new_edit_count: int


def decide(credits: int, edit_count: int, is_create: bool) -> BillingDecision:
    """Return whether the mutation costs a credit and the resulting edit count.

    Creating always costs one credit. The first edit of an invoice is free;
    every later edit costs one. ``edit_count`` grows by one per update
    whether or not it was charged.
    """
    if is_create:
        decision = BillingDecision(charge=True, new_edit_count=0)
    else:
        decision = BillingDecision(
            charge=edit_count >= 1, new_edit_count=edit_count + 1
        )

    if decision.charge and credits <= 0:
        if is_create:
            raise InsufficientCredits(
                "Insufficient credits. Please purchase more credits to create "
                "a new invoice."
            )
        raise InsufficientCredits(
            "Insufficient credits. Please purchase more credits to edit this "
            "invoice."
        )
    return decision


def charge_credit(db: Session, account_id: int) -> None:
    # Conditional decrement: a stale read of the balance cannot double-spend.
    result = db.execute(
        update(Account)
        .where(Account.id == account_id, Account.credits > 0)
        .values(credits=Account.credits - 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise InsufficientCredits()
    logger.info("Charged one credit to account %s", account_id)
