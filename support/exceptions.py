from rest_framework.exceptions import APIException


class SupportTicketNotFound(APIException):
    status_code = 404
    default_detail = 'Ticket not found'
    default_code = 'ticket_not_found'
