from authentication.permissions import is_account, is_global_admin
from escrow.models import PartyRole


def resolve_role(ticket, principal):
    '''
    Returns the role `principal` plays on `ticket`:
    initiator, recipient, admin, or None for a non-party.
    '''
    if is_global_admin(principal):
        return PartyRole.ADMIN

    if is_account(principal):
        if principal.id == ticket.initiator_id:
            return PartyRole.INITIATOR
        if principal.id == ticket.recipient_id:
            return PartyRole.RECIPIENT

    return None


def counterpart(role):
    if role == PartyRole.INITIATOR:
        return PartyRole.RECIPIENT
    if role == PartyRole.RECIPIENT:
        return PartyRole.INITIATOR
    return None
