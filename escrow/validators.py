from rest_framework.exceptions import ValidationError

from escrow.models import (
    EscrowStatus,
    EscrowCategory,
    EscrowPriority
)
from escrow.exceptions import InvalidEscrowField

from decimal import Decimal, InvalidOperation

RESPOND_ACTIONS = ('accept', 'decline')


def validate_required_text(value, field):
    text = value.strip() if isinstance(value, str) else ''
    if not text:
        raise ValidationError(f'{field} is required')
    return text


def validate_amount(value):
    '''
    Amounts that cannot be parsed fall back to 0; negative amounts are rejected.
    '''
    if value in (None, ''):
        return Decimal('0')
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal('0')

    if not amount.is_finite():
        return Decimal('0')
    if amount < 0:
        raise ValidationError('Transaction amount cannot be negative')
    return amount.quantize(Decimal('0.01'))


def validate_currency(value):
    if not value:
        return 'USD'
    if not isinstance(value, str) or not value.strip().isalpha() or len(value.strip()) > 10:
        raise InvalidEscrowField('currency', value)
    return value.strip().upper()


def validate_choice(value, choices_cls, field, default=None):
    if value in (None, ''):
        return default
    if value not in choices_cls.values:
        raise InvalidEscrowField(field, value, choices=choices_cls.values)
    return value


def validate_category(value):
    return validate_choice(value, EscrowCategory, 'category', default=EscrowCategory.OTHER)


def validate_priority(value):
    return validate_choice(value, EscrowPriority, 'priority', default=EscrowPriority.MEDIUM)


def validate_status(value):
    if value in (None, ''):
        raise ValidationError('status is required')
    return validate_choice(value, EscrowStatus, 'status')


def validate_respond_action(action):
    if action not in RESPOND_ACTIONS:
        raise ValidationError('Invalid action. Use "accept" or "decline"')
    return action
