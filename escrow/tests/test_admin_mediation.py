from django.urls import reverse
from rest_framework import status

from escrow.models import EscrowTicket, EscrowStatus, InvitationStatus, PartyRole
from notifications.models import Notification

from .test_escrow_flow import EscrowTestCase


class AdminMediationTestCase(EscrowTestCase):
    def setUp(self):
        super().setUp()
        self.ticket = self.create_ticket()
        self.respond(self.ticket, 'accept')
        self.client.force_authenticate(user=self.admin)

    def url(self, name):
        return reverse(name, kwargs={'pk': self.ticket.id})

    def test_list_is_unscoped(self):
        other = create_other_ticket(self)
        self.client.force_authenticate(user=self.admin)

        response = self.client.get(reverse('admin-escrow-ticket-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total'], 2)
        self.assertNotIn('unreadCount', response.data)
        self.assertEqual({t['id'] for t in response.data['tickets']}, {self.ticket.id, other.id})

        response = self.client.get(reverse('admin-escrow-ticket-list'), {'search': 'leica'})
        self.assertEqual([t['id'] for t in response.data['tickets']], [self.ticket.id])

        response = self.client.get(reverse('admin-escrow-ticket-list'), {'status': 'pending'})
        self.assertEqual([t['id'] for t in response.data['tickets']], [other.id])

    def test_admin_message_notifies_both_parties(self):
        response = self.client.post(self.url('admin-escrow-ticket-message'), {'message': 'Please upload proof'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        message = self.ticket.messages.get()
        self.assertEqual(message.sender, PartyRole.ADMIN)
        self.assertIsNone(message.sender_account)

        for account in (self.alice, self.bob):
            latest = Notification.objects.filter(account=account).latest('id')
            self.assertEqual(latest.title, 'Admin Message in Escrow')

    def test_admin_message_allowed_on_closed_ticket(self):
        self.client.patch(self.url('admin-escrow-ticket-close'))
        response = self.client.post(self.url('admin-escrow-ticket-message'), {'message': 'Final note'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_admin_close_and_reopen(self):
        response = self.client.patch(self.url('admin-escrow-ticket-close'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.ticket.refresh_from_db()
        self.assertEqual(self.ticket.closed_by, PartyRole.ADMIN)

        alice_before = Notification.objects.filter(account=self.alice).count()
        bob_before = Notification.objects.filter(account=self.bob).count()
        response = self.client.patch(self.url('admin-escrow-ticket-reopen'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Escrow ticket reopened successfully')
        self.ticket.refresh_from_db()
        self.assertEqual(self.ticket.status, EscrowStatus.ACTIVE)
        self.assertIsNone(self.ticket.closed_at)
        self.assertIsNone(self.ticket.closed_by)
        self.assertEqual(Notification.objects.filter(account=self.alice).count(), alice_before + 1)
        self.assertEqual(Notification.objects.filter(account=self.bob).count(), bob_before + 1)

    def test_party_close_then_admin_reopen(self):
        self.client.force_authenticate(user=self.alice)
        self.client.patch(reverse('escrow-ticket-close', kwargs={'pk': self.ticket.id}))

        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(self.url('admin-escrow-ticket-reopen'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.send_message(self.ticket, self.bob, 'thanks')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_status_override(self):
        response = self.client.patch(self.url('admin-escrow-ticket-status'), {'status': 'closed'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.ticket.refresh_from_db()
        self.assertEqual(self.ticket.status, EscrowStatus.CLOSED)
        self.assertEqual(self.ticket.closed_by, PartyRole.ADMIN)
        self.assertIsNotNone(self.ticket.closed_at)
        self.assertEqual(self.ticket.invitation_status, InvitationStatus.ACCEPTED)

        latest = Notification.objects.filter(account=self.bob).latest('id')
        self.assertEqual(latest.message, 'Your escrow ticket status has been updated to: closed')

        response = self.client.patch(self.url('admin-escrow-ticket-status'), {'status': 'cancelled'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.ticket.refresh_from_db()
        self.assertIsNone(self.ticket.closed_at)
        self.assertIsNone(self.ticket.closed_by)

    def test_status_override_rejects_unknown_status(self):
        response = self.client.patch(self.url('admin-escrow-ticket-status'), {'status': 'archived'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.ticket.refresh_from_db()
        self.assertEqual(self.ticket.status, EscrowStatus.ACTIVE)

    def test_declined_ticket_stays_cancelled_until_override(self):
        declined = create_other_ticket(self)
        self.respond(declined, 'decline', user=self.alice)

        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(
            reverse('admin-escrow-ticket-status', kwargs={'pk': declined.id}),
            {'status': 'active'}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        declined.refresh_from_db()
        self.assertEqual(declined.status, EscrowStatus.ACTIVE)
        self.assertEqual(declined.invitation_status, InvitationStatus.DECLINED)

    def test_notes_are_internal(self):
        before = Notification.objects.count()
        response = self.client.patch(self.url('admin-escrow-ticket-notes'), {'notes': 'Seller verified'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['ticket']['adminNotes'], 'Seller verified')
        self.assertEqual(Notification.objects.count(), before)

        self.client.force_authenticate(user=self.alice)
        response = self.client.get(reverse('escrow-ticket-detail', kwargs={'pk': self.ticket.id}))
        self.assertNotIn('adminNotes', response.data)

    def test_non_original_admin_cannot_delete(self):
        response = self.client.delete(self.url('admin-escrow-ticket-detail'))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Only the original Global Admin can delete escrow tickets')
        self.assertEqual(response.data['requiredPrivilege'], 'original-global-admin')
        self.assertEqual(response.data['currentAdmin'], {'email': self.admin.email, 'isOriginal': False})
        self.ticket.refresh_from_db()
        self.assertFalse(self.ticket.is_deleted)

    def test_original_admin_soft_deletes(self):
        self.client.force_authenticate(user=self.original_admin)
        response = self.client.delete(self.url('admin-escrow-ticket-detail'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(EscrowTicket.objects.filter(pk=self.ticket.id).exists())
        deleted = EscrowTicket.all_objects.get(pk=self.ticket.id)
        self.assertTrue(deleted.is_deleted)
        self.assertEqual(deleted.deleted_by, self.original_admin.email)

        response = self.client.get(self.url('admin-escrow-ticket-detail'))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        self.client.force_authenticate(user=self.alice)
        response = self.client.get(reverse('escrow-my-tickets'))
        self.assertEqual(response.data['total'], 0)

    def test_accounts_cannot_use_admin_endpoints(self):
        self.client.force_authenticate(user=self.alice)
        response = self.client.patch(self.url('admin-escrow-ticket-reopen'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Global admin access required')

    def test_unknown_ticket(self):
        response = self.client.patch(reverse('admin-escrow-ticket-reopen', kwargs={'pk': 4242}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


def create_other_ticket(test):
    test.client.force_authenticate(user=test.bob)
    data = {'recipientId': test.alice.id, 'title': 'Web hosting', 'description': 'One year plan'}
    response = test.client.post(reverse('escrow-create'), data)
    return EscrowTicket.objects.get(pk=response.data['escrowTicket']['id'])


class AdminStatusLookupTestCase(EscrowTestCase):
    def test_unknown_ticket_is_reported_before_bad_status(self):
        self.client.force_authenticate(user=self.admin)
        url = reverse('admin-escrow-ticket-status', kwargs={'pk': 4242})
        response = self.client.patch(url, {'status': 'archived'})

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Escrow ticket not found')
