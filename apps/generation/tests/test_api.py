"""
Integration tests for the generation endpoints.
"""
import json
from datetime import date
from uuid import uuid4
from django.test import TestCase, Client
from django.contrib.auth import get_user_model

from apps.generation.models import GeneratedTask, GenerationStatus
from apps.household_tasks.models import Task
from apps.households import services as household_services


User = get_user_model()

AS_OF = '2026-08-20'


class GenerationAPITest(TestCase):

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(username='parent', password='testpass123')
        self.client.force_login(self.user)
        self.household = household_services.create_household('Martin')
        self.child = household_services.add_child(self.household.id, 'Léa', date(2019, 5, 1))
        self.base = f'/api/generation/households/{self.household.id}'

    def post(self, path, payload):
        return self.client.post(f'{self.base}{path}', data=json.dumps(payload), content_type='application/json')

    def test_requires_login(self):
        response = Client().get(f'{self.base}/upcoming')
        self.assertEqual(response.status_code, 401)

    def test_unknown_household(self):
        response = self.client.get(f'/api/generation/households/{uuid4()}/upcoming')
        self.assertEqual(response.status_code, 404)

    def test_upcoming(self):
        response = self.client.get(f'{self.base}/upcoming', {'days': 60})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data)
        first = data[0]
        self.assertEqual(first['child']['first_name'], 'Léa')
        self.assertIn(first['status'], ['overdue', 'due_soon', 'upcoming'])
        self.assertIn('title', first['template'])

    def test_upcoming_negative_days(self):
        response = self.client.get(f'{self.base}/upcoming', {'days': -5})
        self.assertEqual(response.status_code, 400)

    def test_candidates(self):
        response = self.client.get(f'{self.base}/candidates', {'as_of': AS_OF})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        keys = [c['generation_key'] for c in data['candidates']]
        self.assertIn(f'homework_help:{self.child.id}:{AS_OF}', keys)
        self.assertEqual(data['failures'], [])

    def test_generate_and_pending(self):
        response = self.post('/generate', {'as_of': AS_OF, 'auto_materialize': False})
        self.assertEqual(response.status_code, 200)
        generated = response.json()['generated']
        self.assertGreater(generated, 0)

        pending = self.client.get(f'{self.base}/pending').json()
        self.assertEqual(len(pending), generated)
        self.assertTrue(all(e['status'] == GenerationStatus.PENDING for e in pending))

    def test_confirm(self):
        key = f'homework_help:{self.child.id}:{AS_OF}'
        response = self.post('/confirm', {'generation_key': key, 'as_of': AS_OF})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data['created'])
        self.assertTrue(Task.objects.filter(id=data['task_id']).exists())

    def test_confirm_unknown_key(self):
        response = self.post('/confirm', {'generation_key': 'missing', 'as_of': AS_OF})
        self.assertEqual(response.status_code, 400)

    def test_skip_records_user(self):
        key = f'homework_help:{self.child.id}:{AS_OF}'
        response = self.post('/skip', {'generation_key': key, 'as_of': AS_OF})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['skipped'])
        entry = GeneratedTask.objects.get(generation_key=key)
        self.assertEqual(entry.acknowledged_by_id, self.user.id)

    def test_stats(self):
        self.post('/confirm', {'generation_key': f'homework_help:{self.child.id}:{AS_OF}', 'as_of': AS_OF})
        response = self.client.get(f'{self.base}/stats', {'as_of': AS_OF})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['created'], 1)
        self.assertEqual(data['total'], 1)
        self.assertEqual(data['pending'], 0)
        self.assertEqual(set(data), {'total', 'pending', 'created', 'skipped', 'expired', 'critical', 'due_soon'})

    def test_stats_unknown_household(self):
        response = self.client.get(f'/api/generation/households/{uuid4()}/stats')
        self.assertEqual(response.status_code, 404)
