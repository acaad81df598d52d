from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIRequestFactory, APITestCase
from unittest.mock import patch

from accounts.tests.utils import create_account, create_admin
from escrow.models import EscrowTicket
from marketbook.exceptions import exception_handler, first_error_message
from support.models import SupportTicket, PublicSupportTicket


class HealthCheckTestCase(TestCase):
    def test_health(self):
        response = self.client.get(reverse('health-check'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['status'], 'OK')


class ExceptionHandlerTestCase(TestCase):
    def test_first_error_message(self):
        self.assertEqual(first_error_message({'title': ['This field is required.']}), 'title: This field is required.')
        self.assertEqual(first_error_message({'non_field_errors': ['Bad']}), 'Bad')
        self.assertEqual(first_error_message(['one', 'two']), 'one')

    def test_unexpected_error_is_generic(self):
        request = APIRequestFactory().get('/')
        with patch('marketbook.exceptions.logger') as logger:
            response = exception_handler(RuntimeError('secret detail'), {'view': None, 'request': request})

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'message': 'Something went wrong!'})
        logger.exception.assert_called_once()

    def test_model_validation_error_is_bad_request(self):
        request = APIRequestFactory().post('/')
        response = exception_handler(ValidationError('Cannot create escrow with yourself'), {'view': None, 'request': request})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot create escrow with yourself')


class AdminDashboardTestCase(APITestCase):
    def test_dashboard_counts(self):
        alice = create_account('Alice')
        bob = create_account('Bob')
        create_account('Ivan', is_active=False)
        create_account('Dora', is_deleted=True)
        admin = create_admin('helper@marketbook.com')
        EscrowTicket.objects.create(initiator=alice, recipient=bob, title='Bike', description='Road bike')
        SupportTicket.objects.create(account=alice, subject='Upload', description='Broken')
        PublicSupportTicket.objects.create(email='visitor@example.com', message='Hello', status='resolved')

        self.client.force_authenticate(user=admin)
        response = self.client.get(reverse('admin-dashboard'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['stats'], {
            'totalUsers': 3,
            'activeUsers': 2,
            'totalTickets': 2,
            'openTickets': 1,
            'totalEscrowTickets': 1,
            'activeEscrowTickets': 1,
        })
        self.assertEqual(len(response.data['recentUsers']), 3)
        self.assertEqual({t['type'] for t in response.data['recentTickets']}, {'user', 'public'})

        self.client.force_authenticate(user=alice)
        response = self.client.get(reverse('admin-dashboard'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
