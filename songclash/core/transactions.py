"""Transaction runner shared by every state-changing service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, TypeVar

from firebase_admin import firestore

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.transaction import Transaction

T = TypeVar("T")


def run_in_transaction(db: Client, callback: Callable[[Transaction], T]) -> T:
    """Run ``callback`` inside a Firestore transaction and return its result.

    Firestore commits every write queued on the transaction atomically and
    re-runs the callback when a concurrent commit touched the documents it
    read, so the callback must derive everything from reads made through the
    transaction it is given.
    """
    transaction = db.transaction()

    @firestore.transactional
    def _apply(transaction: Transaction) -> Any:
        return callback(transaction)

    return _apply(transaction)
