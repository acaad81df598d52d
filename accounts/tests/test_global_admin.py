from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import GlobalAdmin
from accounts.tests.utils import create_admin


class GlobalAdminRosterTestCase(APITestCase):
    def setUp(self):
        self.original_admin = create_admin('root@marketbook.com', is_original=True)
        self.admin = create_admin('helper@marketbook.com', created_by=self.original_admin)

    def test_profile(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse('global-admin-profile'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['admin']['email'], 'helper@marketbook.com')
        self.assertFalse(response.data['admin']['isOriginal'])

    def test_original_admin_creates_admin(self):
        self.client.force_authenticate(user=self.original_admin)
        data = {'email': 'New.Admin@marketbook.com', 'password': 'secret123'}
        response = self.client.post(reverse('global-admin-create'), data)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertNotIn('password', response.data['admin'])
        created = GlobalAdmin.objects.get(email='new.admin@marketbook.com')
        self.assertFalse(created.is_original)
        self.assertEqual(created.created_by, self.original_admin)
        self.assertTrue(created.check_password('secret123'))

    def test_create_admin_validation(self):
        self.client.force_authenticate(user=self.original_admin)
        url = reverse('global-admin-create')

        response = self.client.post(url, {'email': 'a@marketbook.com'})
        self.assertEqual(response.data['message'], 'Email and password are required')

        response = self.client.post(url, {'email': 'a@marketbook.com', 'password': '123'})
        self.assertEqual(response.data['message'], 'Password must be at least 6 characters long')

        response = self.client.post(url, {'email': 'HELPER@marketbook.com', 'password': 'secret123'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Admin with this email already exists')

    def test_non_original_admin_is_refused(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.post(reverse('global-admin-create'), {'email': 'x@marketbook.com', 'password': 'secret123'})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Only the original Global Admin can create new admins')
        self.assertEqual(response.data['requiredPrivilege'], 'original-global-admin')

        response = self.client.get(reverse('global-admin-list'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.delete(reverse('global-admin-detail', kwargs={'pk': self.original_admin.id}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(GlobalAdmin.objects.count(), 2)

    def test_roster(self):
        self.client.force_authenticate(user=self.original_admin)
        response = self.client.get(reverse('global-admin-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['admins']), 2)
        helper = next(a for a in response.data['admins'] if a['email'] == self.admin.email)
        self.assertEqual(helper['createdBy']['email'], self.original_admin.email)
        self.assertNotIn('password', helper)

    def test_delete_admin(self):
        self.client.force_authenticate(user=self.original_admin)

        response = self.client.delete(reverse('global-admin-detail', kwargs={'pk': self.original_admin.id}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Cannot delete the original Global Admin')

        response = self.client.delete(reverse('global-admin-detail', kwargs={'pk': self.admin.id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(GlobalAdmin.objects.filter(pk=self.admin.id).exists())

        response = self.client.delete(reverse('global-admin-detail', kwargs={'pk': self.admin.id}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Admin not found')


class InitializeGlobalAdminTestCase(TestCase):
    @override_settings(GLOBAL_ADMIN_EMAIL='Boss@Marketbook.com', GLOBAL_ADMIN_PASSWORD='changeme1')
    def test_initialize(self):
        call_command('initialize_global_admin')

        admin = GlobalAdmin.objects.get()
        self.assertEqual(admin.email, 'boss@marketbook.com')
        self.assertTrue(admin.is_original)
        self.assertTrue(admin.check_password('changeme1'))

        with self.assertRaises(CommandError):
            call_command('initialize_global_admin')
