"""Service layer for transaction CRUD operations."""
import logging
from typing import Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection # Type hint for collection

from models.transaction import OperationResult, TransactionRecord
from utils.validators import is_valid_object_id, validate_transaction

logger = logging.getLogger(__name__)

# --- Database Interaction Functions (Depend on collection passed from route) ---

async def list_transactions(collection: AsyncIOMotorCollection) -> OperationResult:
    """Fetches every transaction in natural store order."""
    logger.info(f"Fetching all transactions from collection '{collection.name}'...")
    transactions = []
    try:
        async for doc in collection.find():
            doc['_id'] = str(doc['_id'])
            transactions.append(TransactionRecord.model_validate(doc))
    except Exception as e:
        logger.exception(f"Database error fetching transactions: {e}")
        return OperationResult(status="error", message="Server error")
    logger.info(f"Fetched {len(transactions)} transactions successfully.")
    return OperationResult(status="success", transactions=transactions)


async def create_transaction(collection: AsyncIOMotorCollection, payload: Any) -> OperationResult:
    """Validates the payload and inserts it as a new transaction."""
    if payload is None or payload in ({}, []):
        return OperationResult(status="invalid_payload", message="Request body is empty")

    transaction, error = validate_transaction(payload)
    if error:
        logger.warning(f"Create rejected: {error.message}")
        return OperationResult(status="invalid_payload", message=error.message)

    try:
        result = await collection.insert_one(transaction.to_document())
    except Exception as e:
        logger.exception(f"Database error inserting transaction: {e}")
        return OperationResult(status="error", message="Server error")

    inserted_id = str(result.inserted_id)
    logger.info(f"Inserted transaction {inserted_id} ({transaction.type}, {transaction.amount}).")
    return OperationResult(status="success", inserted_id=inserted_id)


async def update_transaction(collection: AsyncIOMotorCollection, transaction_id: str, payload: Any) -> OperationResult:
    """Replaces the four fields of the transaction with the given id."""
    if not is_valid_object_id(transaction_id):
        return OperationResult(status="invalid_id", message="Invalid ID format")

    transaction, error = validate_transaction(payload)
    if error:
        logger.warning(f"Update of {transaction_id} rejected: {error.message}")
        return OperationResult(status="invalid_payload", message=error.message)

    try:
        result = await collection.update_one(
            {"_id": ObjectId(transaction_id)},
            {"$set": transaction.to_document()},
        )
    except Exception as e:
        logger.exception(f"Database error updating transaction {transaction_id}: {e}")
        return OperationResult(status="error", message="Server error")

    if result.matched_count == 0:
        logger.info(f"Update found no transaction with id {transaction_id}.")
        return OperationResult(status="not_found", message="Transaction not found")

    logger.info(f"Updated transaction {transaction_id} (modified: {result.modified_count}).")
    return OperationResult(status="success", modified_count=result.modified_count)


async def delete_transaction(collection: AsyncIOMotorCollection, transaction_id: str) -> OperationResult:
    """Permanently removes the transaction with the given id."""
    if not is_valid_object_id(transaction_id):
        return OperationResult(status="invalid_id", message="Invalid ID format")

    try:
        result = await collection.delete_one({"_id": ObjectId(transaction_id)})
    except Exception as e:
        logger.exception(f"Database error deleting transaction {transaction_id}: {e}")
        return OperationResult(status="error", message="Server error")

    if result.deleted_count == 0:
        logger.info(f"Delete found no transaction with id {transaction_id}.")
        return OperationResult(status="not_found", message="Transaction not found")

    logger.warning(f"Deleted transaction {transaction_id}.")
    return OperationResult(status="success", deleted_count=result.deleted_count)
