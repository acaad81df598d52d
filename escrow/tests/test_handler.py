from django.core.exceptions import ValidationError
from django.test import TestCase
from unittest.mock import patch

from accounts.tests.utils import create_account, create_admin
from escrow.models import EscrowTicket, EscrowMessage, PartyRole
from escrow.roles import resolve_role, counterpart
from escrow.exceptions import EscrowTicketNotFound
from escrow.utils import handler
from escrow.validators import validate_amount

from decimal import Decimal


class EscrowHandlerTestCase(TestCase):
    def setUp(self):
        self.seller = create_account('Sam')
        self.buyer = create_account('Bea')
        self.admin = create_admin('mediator@marketbook.com')
        self.ticket = handler.create_ticket(self.seller, {
            'recipientId': self.buyer.id,
            'title': ' Domain transfer ',
            'description': 'example.org',
            'currency': 'php'
        })

    def test_create_ticket_normalizes_input(self):
        self.assertEqual(self.ticket.title, 'Domain transfer')
        self.assertEqual(self.ticket.currency, 'PHP')
        self.assertEqual(self.ticket.transaction_amount, Decimal('0'))
        self.assertEqual(self.ticket.source, 'web')

    def test_resolve_role(self):
        outsider = create_account('Otto')
        self.assertEqual(resolve_role(self.ticket, self.seller), PartyRole.INITIATOR)
        self.assertEqual(resolve_role(self.ticket, self.buyer), PartyRole.RECIPIENT)
        self.assertEqual(resolve_role(self.ticket, self.admin), PartyRole.ADMIN)
        self.assertIsNone(resolve_role(self.ticket, outsider))
        self.assertIsNone(resolve_role(self.ticket, None))
        self.assertEqual(counterpart(PartyRole.INITIATOR), PartyRole.RECIPIENT)
        self.assertIsNone(counterpart(PartyRole.ADMIN))

    def test_message_sequence_is_monotonic(self):
        handler.respond_to_invitation(self.ticket.id, self.buyer, 'accept')
        handler.post_party_message(self.ticket.id, self.seller, 'sent the auth code')
        handler.post_admin_message(self.ticket.id, self.admin, 'noted')
        handler.post_party_message(self.ticket.id, self.buyer, 'got it')

        messages = list(self.ticket.messages.all())
        self.assertEqual([m.sequence for m in messages], [1, 2, 3])
        self.assertEqual([m.sender for m in messages], ['initiator', 'admin', 'recipient'])

        self.ticket.refresh_from_db()
        self.assertEqual(self.ticket.last_activity, messages[-1].timestamp)

    def test_message_sender_must_match_party(self):
        message = EscrowMessage(
            ticket=self.ticket,
            sequence=1,
            sender=PartyRole.RECIPIENT,
            sender_account=self.seller,
            message='spoofed'
        )
        with self.assertRaises(ValidationError):
            message.clean()

    def test_ticket_requires_distinct_parties(self):
        ticket = EscrowTicket(initiator=self.seller, recipient=self.seller, title='x', description='x')
        with self.assertRaises(ValidationError):
            ticket.clean()

    def test_party_lookup_hides_foreign_tickets(self):
        outsider = create_account('Otto')
        with self.assertRaises(EscrowTicketNotFound):
            handler.get_ticket(self.ticket.id, outsider)

    def test_reopen_does_not_require_closed_status(self):
        ticket = handler.reopen_ticket(self.ticket.id, self.admin)
        self.assertEqual(ticket.status, 'active')
        self.assertEqual(ticket.invitation_status, 'pending')

    def test_notify_errors_are_swallowed(self):
        with patch('escrow.utils.notifications.notify_users', side_effect=RuntimeError('push down')):
            ticket = handler.update_status(self.ticket.id, self.admin, 'closed')
        self.assertEqual(ticket.status, 'closed')

    def test_validate_amount(self):
        self.assertEqual(validate_amount('12.5'), Decimal('12.50'))
        self.assertEqual(validate_amount('abc'), Decimal('0'))
        self.assertEqual(validate_amount(None), Decimal('0'))
