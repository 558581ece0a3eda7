"""
Validation functions for transaction payloads and identifiers.
Nothing here touches the database or the HTTP layer.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from bson import ObjectId
from pydantic import ValidationError

from models.transaction import TRANSACTION_FIELDS, TRANSACTION_TYPES, FieldError, TransactionIn

logger = logging.getLogger(__name__)

_TYPE_MESSAGES = {
    'description': 'must be a string',
    'amount': 'must be a number',
    'date': 'must be a valid date',
    'type': 'must be one of [{}]'.format(', '.join(TRANSACTION_TYPES)),
}


def is_valid_object_id(value: Any) -> bool:
    """Validate identifier format (24 hex characters)."""
    if not isinstance(value, str):
        return False
    return ObjectId.is_valid(value)


def _field_error_from(error: Dict[str, Any]) -> FieldError:
    loc = error.get('loc') or ()
    field = str(loc[0]) if loc else None
    error_type = error.get('type', '')

    if error_type == 'missing':
        return FieldError(field=field, reason='missing', message=f'"{field}" is required')
    if error_type == 'extra_forbidden':
        return FieldError(field=field, reason='unknown_field', message=f'"{field}" is not allowed')
    if error_type == 'string_too_short':
        return FieldError(field=field, reason='empty', message=f'"{field}" is not allowed to be empty')
    if error_type == 'literal_error':
        return FieldError(field=field, reason='not_allowed_value', message=f'"{field}" {_TYPE_MESSAGES["type"]}')
    return FieldError(
        field=field,
        reason='invalid_type',
        message=f'"{field}" {_TYPE_MESSAGES.get(field, "is invalid")}',
    )


def _error_rank(error: Dict[str, Any]) -> int:
    loc = error.get('loc') or ()
    if loc and loc[0] in TRANSACTION_FIELDS:
        return TRANSACTION_FIELDS.index(loc[0])
    return len(TRANSACTION_FIELDS)


def validate_transaction(payload: Any) -> Tuple[Optional[TransactionIn], Optional[FieldError]]:
    """
    Validate a candidate transaction.

    Returns (transaction, None) with the fields coerced to their types, or
    (None, error) describing the first offending field.
    """
    if not isinstance(payload, dict):
        return None, FieldError(reason='invalid_body', message='Request body must be a JSON object')

    try:
        transaction = TransactionIn.model_validate(payload)
    except ValidationError as e:
        first = min(e.errors(), key=_error_rank)
        field_error = _field_error_from(first)
        logger.debug(f"Transaction payload rejected: {field_error.message}")
        return None, field_error
    return transaction, None
