from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from unittest.mock import patch

from accounts.tests.utils import create_account, create_admin
from notifications.models import Notification
from support.models import (
    SupportTicket,
    SupportStatus,
    MessageSender,
    PublicSupportTicket
)


class SupportTicketTestCase(APITestCase):
    def setUp(self):
        self.user = create_account('Uma')
        self.other = create_account('Oscar')
        self.original_admin = create_admin('root@marketbook.com', is_original=True)
        self.admin = create_admin('helper@marketbook.com', created_by=self.original_admin)

    def open_ticket(self, user=None, subject='Cannot upload photos'):
        self.client.force_authenticate(user=user or self.user)
        data = {
            'subject': subject,
            'description': 'The upload button does nothing',
            'category': 'technical'
        }
        response = self.client.post(reverse('support-ticket-list'), data)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, msg=response.data)
        return SupportTicket.objects.get(pk=response.data['ticket']['id'])

    def admin_url(self, name, ticket, ticket_type='user'):
        return reverse(name, kwargs={'ticket_type': ticket_type, 'pk': ticket.id})


class UserSupportTicketTestCase(SupportTicketTestCase):
    @patch('support.utils.notifications.notify_global_admins')
    def test_create_ticket(self, notify_global_admins):
        ticket = self.open_ticket()

        self.assertEqual(ticket.status, SupportStatus.OPEN)
        self.assertEqual(ticket.priority, 'medium')
        self.assertEqual(ticket.assigned_to, 'global-admin')
        message = ticket.messages.get()
        self.assertEqual(message.sender, MessageSender.USER)
        self.assertEqual(message.message, ticket.description)

        notify_global_admins.assert_called_once()
        payload = notify_global_admins.call_args[0][0]
        self.assertEqual(payload['type'], 'new-ticket')
        self.assertEqual(payload['ticketId'], ticket.id)

    def test_create_ticket_validation(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.post(reverse('support-ticket-list'), {'description': 'No subject'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('subject', response.data['errors'])

        data = {'subject': 'x', 'description': 'y', 'category': 'gossip'}
        response = self.client.post(reverse('support-ticket-list'), data)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_tickets_are_private(self):
        ticket = self.open_ticket()
        self.open_ticket(user=self.other, subject='Billing question')

        self.client.force_authenticate(user=self.user)
        response = self.client.get(reverse('support-ticket-list'))
        self.assertEqual(response.data['total'], 1)
        self.assertEqual(response.data['tickets'][0]['id'], ticket.id)

        self.client.force_authenticate(user=self.other)
        response = self.client.get(reverse('support-ticket-detail', kwargs={'pk': ticket.id}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Ticket not found')

        response = self.client.post(reverse('support-ticket-reply', kwargs={'pk': ticket.id}), {'message': 'hi'})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_reply_reopens_ticket(self):
        ticket = self.open_ticket()
        self.client.patch(reverse('support-ticket-close', kwargs={'pk': ticket.id}))
        ticket.refresh_from_db()
        self.assertEqual(ticket.status, SupportStatus.CLOSED)

        response = self.client.post(reverse('support-ticket-reply', kwargs={'pk': ticket.id}), {'message': 'Still broken'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ticket.refresh_from_db()
        self.assertEqual(ticket.status, SupportStatus.OPEN)
        self.assertEqual(ticket.messages.count(), 2)
        self.assertEqual(ticket.last_reply, ticket.messages.last().timestamp)

    def test_empty_reply_is_rejected(self):
        ticket = self.open_ticket()
        response = self.client.post(reverse('support-ticket-reply', kwargs={'pk': ticket.id}), {'message': ' '})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reading_marks_admin_messages(self):
        ticket = self.open_ticket()
        self.client.force_authenticate(user=self.admin)
        self.client.post(self.admin_url('admin-support-ticket-reply', ticket), {'message': 'Which browser?'})

        self.client.force_authenticate(user=self.user)
        response = self.client.get(reverse('support-ticket-detail', kwargs={'pk': ticket.id}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(ticket.messages.get(sender=MessageSender.ADMIN).read)
        self.assertFalse(ticket.messages.get(sender=MessageSender.USER).read)


class PublicSupportTicketTestCase(SupportTicketTestCase):
    def test_anonymous_submission(self):
        self.client.force_authenticate(user=None)
        data = {'email': 'visitor@example.com', 'message': 'How do escrow fees work?'}
        response = self.client.post(reverse('public-support-create'), data, REMOTE_ADDR='10.0.0.8')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        ticket = PublicSupportTicket.objects.get(pk=response.data['ticketId'])
        self.assertEqual(ticket.name, 'Anonymous')
        self.assertEqual(ticket.category, 'general')
        self.assertEqual(ticket.source, 'public-form')
        self.assertEqual(ticket.ip_address, '10.0.0.8')

    def test_email_and_message_required(self):
        response = self.client.post(reverse('public-support-create'), {'email': 'visitor@example.com'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Email and message are required')

        response = self.client.post(reverse('public-support-create'), {'email': 'nope', 'message': 'hi'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(PublicSupportTicket.objects.exists())


class AdminSupportTicketTestCase(SupportTicketTestCase):
    def setUp(self):
        super().setUp()
        self.ticket = self.open_ticket()
        self.public_ticket = PublicSupportTicket.objects.create(
            name='Visitor',
            email='visitor@example.com',
            message='Is there a mobile app?'
        )
        self.client.force_authenticate(user=self.admin)

    def test_merged_inbox(self):
        response = self.client.get(reverse('admin-support-ticket-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total'], 2)
        self.assertEqual(
            {(t['type'], t['id']) for t in response.data['tickets']},
            {('user', self.ticket.id), ('public', self.public_ticket.id)}
        )

        response = self.client.get(reverse('admin-support-ticket-list'), {'type': 'public'})
        self.assertEqual(response.data['total'], 1)
        ticket = response.data['tickets'][0]
        self.assertEqual(ticket['subject'], 'Public Support: Is there a mobile app?')
        self.assertEqual(ticket['displayEmail'], 'visitor@example.com')

        response = self.client.get(reverse('admin-support-ticket-list'), {'type': 'other'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_retrieve_marks_user_messages_read(self):
        response = self.client.get(self.admin_url('admin-support-ticket-detail', self.ticket))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['displayName'], 'Uma Tester')
        self.assertTrue(self.ticket.messages.get().read)

        response = self.client.get(self.admin_url('admin-support-ticket-detail', self.public_ticket, 'public'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['messages'][0]['sender'], 'user')

    def test_reply_sets_in_progress_and_notifies_owner(self):
        response = self.client.post(self.admin_url('admin-support-ticket-reply', self.ticket), {'message': 'Looking into it'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.ticket.refresh_from_db()
        self.assertEqual(self.ticket.status, SupportStatus.IN_PROGRESS)
        notification = Notification.objects.get(account=self.user)
        self.assertEqual(notification.title, 'Support Reply')

    def test_reply_to_public_ticket(self):
        url = self.admin_url('admin-support-ticket-reply', self.public_ticket, 'public')
        response = self.client.post(url, {'message': 'Not yet'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.public_ticket.refresh_from_db()
        self.assertEqual(self.public_ticket.status, SupportStatus.IN_PROGRESS)
        self.assertIsNotNone(self.public_ticket.last_response_at)
        self.assertEqual(self.public_ticket.responses.get().responded_by, self.admin.email)

    def test_update_status(self):
        url = self.admin_url('admin-support-ticket-status', self.ticket)
        response = self.client.patch(url, {'status': 'resolved'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.ticket.refresh_from_db()
        self.assertEqual(self.ticket.status, SupportStatus.RESOLVED)
        self.assertEqual(
            Notification.objects.get(account=self.user).message,
            'Your support ticket status has been updated to: resolved'
        )

        response = self.client.patch(url, {'status': 'escalated'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_only_original_admin_deletes(self):
        url = self.admin_url('admin-support-ticket-detail', self.ticket)
        response = self.client.delete(url)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Only the original Global Admin can delete support tickets')
        self.assertTrue(SupportTicket.objects.filter(pk=self.ticket.id).exists())

        self.client.force_authenticate(user=self.original_admin)
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(SupportTicket.objects.filter(pk=self.ticket.id).exists())
        self.assertEqual(SupportTicket.all_objects.get(pk=self.ticket.id).deleted_by, self.original_admin.email)

        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_accounts_cannot_reach_admin_inbox(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.get(reverse('admin-support-ticket-list'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class AdminMessageTestCase(SupportTicketTestCase):
    def setUp(self):
        super().setUp()
        self.client.force_authenticate(user=self.admin)

    def test_direct_message_opens_ticket(self):
        url = reverse('admin-send-message', kwargs={'pk': self.user.id})
        response = self.client.post(url, {'subject': 'Verification', 'message': 'Please confirm your phone'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ticket = SupportTicket.objects.get(pk=response.data['ticketId'])
        self.assertEqual(ticket.account, self.user)
        self.assertEqual(ticket.status, SupportStatus.OPEN)
        message = ticket.messages.get()
        self.assertEqual(message.sender, MessageSender.ADMIN)
        self.assertEqual(message.message, 'Please confirm your phone')

        notification = Notification.objects.get(account=self.user)
        self.assertEqual(notification.title, 'New Message from Admin')
        self.assertEqual(notification.message, 'You have received a new message: Verification')

        self.client.force_authenticate(user=self.user)
        response = self.client.post(reverse('support-ticket-reply', kwargs={'pk': ticket.id}), {'message': 'Done'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_direct_message_validation(self):
        url = reverse('admin-send-message', kwargs={'pk': self.user.id})
        response = self.client.post(url, {'subject': 'Hi'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Subject and message are required')

        response = self.client.post(reverse('admin-send-message', kwargs={'pk': 4242}), {'subject': 'Hi', 'message': 'there'})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(SupportTicket.objects.exists())

    def test_broadcast_reaches_active_accounts(self):
        create_account('Ivan', is_active=False)
        create_account('Dora', is_deleted=True)

        response = self.client.post(reverse('admin-broadcast-message'), {'subject': 'Maintenance', 'message': 'Down at noon'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['recipientCount'], 2)
        self.assertEqual(
            set(Notification.objects.filter(title='Maintenance').values_list('account_id', flat=True)),
            {self.user.id, self.other.id}
        )

    def test_accounts_cannot_broadcast(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.post(reverse('admin-broadcast-message'), {'subject': 'x', 'message': 'y'})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Notification.objects.exists())
