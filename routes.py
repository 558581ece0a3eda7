"""API Routes for transactions"""
import logging
from typing import Annotated, Any, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from motor.motor_asyncio import AsyncIOMotorCollection

from models.transaction import (
    CreatedResponse,
    DeletedResponse,
    ErrorResponse,
    OperationResult,
    TransactionRecord,
    UpdatedResponse,
)
from services import transactions_service

router = APIRouter()
logger = logging.getLogger(__name__)

_STATUS_CODES = {
    "invalid_id": status.HTTP_400_BAD_REQUEST,
    "invalid_payload": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "error": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid identifier or payload"},
    404: {"model": ErrorResponse, "description": "Transaction not found"},
    500: {"model": ErrorResponse, "description": "Server error"},
}

# --- Dependency Function ---
def get_transactions_collection(request: Request) -> AsyncIOMotorCollection:
    """Dependency to get the MongoDB transactions collection opened by the application lifespan."""
    collection = getattr(request.app.state, "transactions_collection", None)
    if collection is None:
        logger.error("Transactions collection not found in application state. Check MongoDB connection.")
        raise HTTPException(status_code=500, detail="Server error")
    return collection

# Type hint for the dependency
TransactionsCollectionDep = Annotated[AsyncIOMotorCollection, Depends(get_transactions_collection)]


def _raise_for_result(result: OperationResult) -> None:
    """Turns a non-success service result into the matching HTTP error."""
    if result.status != "success":
        raise HTTPException(status_code=_STATUS_CODES[result.status], detail=result.message)

# --- API Routes ---

@router.get("/transactions", response_model=List[TransactionRecord], responses={500: _ERROR_RESPONSES[500]}, summary="List Transactions")
async def get_transactions(collection: TransactionsCollectionDep):
    """Returns every transaction, in no particular order."""
    logger.info("GET /transactions endpoint called.")
    result = await transactions_service.list_transactions(collection)
    _raise_for_result(result)
    return result.transactions


@router.post("/transactions", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED, responses={k: _ERROR_RESPONSES[k] for k in (400, 500)}, summary="Create Transaction")
async def create_transaction(collection: TransactionsCollectionDep, payload: Annotated[Optional[Any], Body()] = None):
    result = await transactions_service.create_transaction(collection, payload)
    _raise_for_result(result)
    return CreatedResponse(insertedId=result.inserted_id)


@router.put("/transactions/{transaction_id}", response_model=UpdatedResponse, responses=_ERROR_RESPONSES, summary="Replace Transaction")
async def update_transaction(transaction_id: str, collection: TransactionsCollectionDep, payload: Annotated[Optional[Any], Body()] = None):
    """Replaces description, amount, date and type. A repeated identical update still succeeds with modifiedCount 0."""
    result = await transactions_service.update_transaction(collection, transaction_id, payload)
    _raise_for_result(result)
    return UpdatedResponse(modifiedCount=result.modified_count)


@router.delete("/transactions/{transaction_id}", response_model=DeletedResponse, responses=_ERROR_RESPONSES, summary="Delete Transaction")
async def delete_transaction(transaction_id: str, collection: TransactionsCollectionDep):
    result = await transactions_service.delete_transaction(collection, transaction_id)
    _raise_for_result(result)
    return DeletedResponse(deletedCount=result.deleted_count)
