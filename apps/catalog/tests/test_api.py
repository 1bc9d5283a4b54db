"""
Integration tests for catalog API endpoints.
"""
from datetime import date
from django.test import TestCase, Client
from django.contrib.auth import get_user_model


User = get_user_model()


class CatalogAPITest(TestCase):
    """Test template and milestone endpoints."""

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(username='parent', password='testpass123')
        self.client.force_login(self.user)

    def test_requires_auth(self):
        self.client.logout()
        response = self.client.get('/api/catalog/templates')
        self.assertEqual(response.status_code, 401)

    def test_filter_by_category_with_pagination(self):
        response = self.client.get('/api/catalog/templates', {'categories': 'health', 'limit': 2})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['total'], 4)
        self.assertEqual(data['pages'], 2)
        self.assertEqual(len(data['items']), 2)

    def test_invalid_filter_value(self):
        response = self.client.get('/api/catalog/templates', {'categories': 'chores'})
        self.assertEqual(response.status_code, 400)
        response = self.client.get('/api/catalog/templates', {'age_ranges': '2-4'})
        self.assertEqual(response.status_code, 400)

    def test_get_template(self):
        response = self.client.get('/api/catalog/templates/school_supplies', {'locale': 'en'})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['recurrence_kind'], 'yearly')
        self.assertEqual(data['recurrence'], {
            'frequency': 'yearly', 'interval': 1, 'byDayOfMonth': [15], 'byMonth': [8],
        })
        self.assertEqual(data['recurrence_label'], 'Every year on the 15th in August')
        self.assertEqual(data['period_label'], 'Back to school')

    def test_unknown_template(self):
        response = self.client.get('/api/catalog/templates/missing')
        self.assertEqual(response.status_code, 404)

    def test_statistics(self):
        response = self.client.get('/api/catalog/templates/statistics')
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['total'], sum(data['by_category'].values()))

    def test_milestones(self):
        response = self.client.get('/api/catalog/milestones', {
            'age_months': 2, 'look_ahead_months': 2, 'completed': 'pmi_8j,pmi_1m',
        })
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(len(data['upcoming']), 4)
        self.assertEqual(len(data['current']), 6)
        self.assertEqual(data['missed'], [])

    def test_negative_age(self):
        response = self.client.get('/api/catalog/milestones', {'age_months': -1})
        self.assertEqual(response.status_code, 400)

    def test_period_rules_for_month(self):
        response = self.client.get('/api/catalog/period-rules', {'month': 12, 'locale': 'en'})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual([r['id'] for r in data], ['monthly_check_fournitures', 'christmas_spectacle_ecole'])
        show = data[1]
        self.assertEqual(show['name'], 'School Christmas show')
        self.assertEqual(show['lead_days'], 7)
        self.assertEqual(date.fromisoformat(show['next_trigger']).month, 12)

    def test_period_rules_invalid_month(self):
        response = self.client.get('/api/catalog/period-rules', {'month': 13})
        self.assertEqual(response.status_code, 400)

    def test_upcoming_period_rules(self):
        response = self.client.get('/api/catalog/period-rules', {'days_ahead': 400})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()), 11)
