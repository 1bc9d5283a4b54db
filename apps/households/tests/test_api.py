"""
Integration tests for the template customisation endpoint.
"""
import json
from uuid import uuid4
from django.test import TestCase, Client
from django.contrib.auth import get_user_model

from apps.households import services


User = get_user_model()


class CustomizeTemplateAPITest(TestCase):

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(username='parent', password='testpass123')
        self.client.force_login(self.user)
        self.household = services.create_household('Martin')

    def put(self, household_id, template_id, payload):
        return self.client.put(
            f'/api/households/{household_id}/templates/{template_id}',
            data=json.dumps(payload),
            content_type='application/json',
        )

    def test_disable_template(self):
        response = self.put(self.household.id, 'bath_time', {'is_enabled': False})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertFalse(data['is_enabled'])
        self.assertEqual(data['template_id'], 'bath_time')

    def test_override_values(self):
        response = self.put(self.household.id, 'dentist_checkup', {'custom_days_before': 2, 'custom_weight': 6})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['custom_weight'], 6)

    def test_invalid_weight(self):
        response = self.put(self.household.id, 'dentist_checkup', {'custom_weight': 20})
        self.assertEqual(response.status_code, 400)

    def test_unknown_household(self):
        response = self.put(uuid4(), 'bath_time', {'is_enabled': False})
        self.assertEqual(response.status_code, 404)

    def test_requires_auth(self):
        self.client.logout()
        response = self.put(self.household.id, 'bath_time', {'is_enabled': False})
        self.assertEqual(response.status_code, 401)
