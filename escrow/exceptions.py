from rest_framework.exceptions import APIException


class EscrowTicketNotFound(APIException):
    status_code = 404
    default_detail = 'Escrow ticket not found'
    default_code = 'escrow_ticket_not_found'


class InvitationNotFound(APIException):
    status_code = 404
    default_detail = 'Escrow invitation not found or already responded'
    default_code = 'invitation_not_found'


class RecipientNotFound(APIException):
    status_code = 404
    default_detail = 'Recipient not found or inactive'
    default_code = 'recipient_not_found'


class SelfEscrowNotAllowed(APIException):
    status_code = 400
    default_detail = 'Cannot create escrow with yourself'
    default_code = 'self_escrow'


class TicketNotAcceptingMessages(APIException):
    status_code = 400
    default_detail = 'Escrow ticket is not accepting messages'
    default_code = 'not_accepting_messages'


class TicketCannotBeClosed(APIException):
    status_code = 400
    default_detail = 'Escrow ticket cannot be closed'
    default_code = 'cannot_be_closed'


class InvalidEscrowField(APIException):
    status_code = 400
    default_detail = 'Invalid value'
    default_code = 'invalid_field'

    def __init__(self, field, value=None, choices=None):
        detail = f'Invalid {field}'
        if value is not None:
            detail = f'Invalid {field}: {value}'
        if choices:
            detail = f'{detail}. Use one of: {", ".join(choices)}'
        super().__init__(detail=detail, code=self.default_code)
