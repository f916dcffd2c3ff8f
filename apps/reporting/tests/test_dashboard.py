# apps/reporting/tests/test_dashboard.py
"""
Tests for the dashboard summary, activity feed and month-over-month stats.
"""
from datetime import date, datetime, time
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from apps.ledger.models import Ledger
from apps.ledger.tests.helpers import create_buyer, create_chain, ledger_values
from apps.reporting.dashboard import (
    get_dashboard_stats, get_dashboard_summary, get_recent_activity, percent_change,
)
from users.models import User

TODAY = date(2024, 3, 15)


def at(day):
    return timezone.make_aware(datetime.combine(day, time(12, 0)))


class PercentChangeTestCase(SimpleTestCase):

    def test_cases(self):
        cases = [
            (0, 0, 0),
            (5, 0, 100),
            (50, 100, -50),
            (375, 100, 275),
            (2, 3, -33),
            (Decimal('1.5'), Decimal('1.0'), 50),
        ]
        for current, previous, expected in cases:
            with self.subTest(current=current, previous=previous):
                self.assertEqual(percent_change(current, previous), expected)


class DashboardTestCase(TestCase):
    """
    March 2024: X 1000 (paid), X 300 (paid 100), Y 600 (unpaid).
    February 2024: Y 400 (unpaid).
    """

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(username='dashboard', password='pass')
        cls.farm_a, cls.flock_a, cls.shed_a = create_chain('A')
        cls.farm_b, cls.flock_b, cls.shed_b = create_chain('B')
        cls.flock_b.status = 'completed'
        cls.flock_b.save()
        cls.buyer_x = create_buyer('X', '9800000001')
        cls.buyer_y = create_buyer('Y', '9800000002')
        create_buyer('Z', '9800000003')

        a = (cls.farm_a, cls.flock_a, cls.shed_a)
        b = (cls.farm_b, cls.flock_b, cls.shed_b)
        Ledger.objects.create(**ledger_values(
            *a, cls.buyer_x, amount_paid=Decimal('1000.00'), date=at(date(2024, 3, 10)),
        ))
        Ledger.objects.create(**ledger_values(
            *a, cls.buyer_x, total_amount=Decimal('300.00'), amount_paid=Decimal('100.00'),
            date=at(date(2024, 3, 12)),
        ))
        Ledger.objects.create(**ledger_values(
            *b, cls.buyer_y, total_amount=Decimal('600.00'), date=at(date(2024, 3, 1)),
        ))
        Ledger.objects.create(**ledger_values(
            *b, cls.buyer_y, total_amount=Decimal('400.00'), date=at(date(2024, 2, 29)),
        ))

    # ===== SUMMARY =====

    def test_entity_counts(self):
        counts = get_dashboard_summary(today=TODAY)['entityCounts']
        self.assertEqual(counts, {
            'totalFarms': 2,
            'totalBuyers': 3,
            'totalSheds': 2,
            'totalUsers': 1,
            'activeFlocks': 1,
            'completedFlocks': 1,
        })

    def test_money(self):
        data = get_dashboard_summary(today=TODAY)
        self.assertEqual(data['financialSummary'], {
            'totalRevenue': Decimal('2300.00'),
            'totalPaid': Decimal('1100.00'),
            'outstandingBalance': Decimal('1200.00'),
            'totalTransactions': 4,
        })
        self.assertEqual(data['thisMonth'], {
            'revenue': Decimal('1900.00'),
            'transactions': 3,
            'birdsSold': 600,
            'netWeight': Decimal('1500.00'),
        })
        self.assertEqual(data['lastMonth'], {'revenue': Decimal('400.00'), 'transactions': 1})
        self.assertEqual(data['averages'], {
            'transactionValue': Decimal('575.00'),
            'birdsPerTransaction': Decimal('200.00'),
            'netWeightPerTransaction': Decimal('500.00'),
        })

    def test_payment_status(self):
        status = get_dashboard_summary(today=TODAY)['paymentStatus']
        self.assertEqual(status['paid'], {'count': 1, 'totalAmount': Decimal('1000.00')})
        self.assertEqual(status['partial'], {'count': 1, 'totalAmount': Decimal('300.00')})
        self.assertEqual(status['unpaid'], {'count': 2, 'totalAmount': Decimal('1000.00')})

    def test_top_buyers_by_amount(self):
        top = get_dashboard_summary(today=TODAY)['topBuyers']
        self.assertEqual([row['name'] for row in top], ['Buyer X', 'Buyer Y'])
        self.assertEqual(top[0]['totalAmount'], Decimal('1300.00'))
        self.assertEqual(top[0]['transactionCount'], 2)
        self.assertEqual(top[1]['totalBirds'], 400)

    def test_empty_months(self):
        data = get_dashboard_summary(today=date(2023, 6, 1))
        self.assertEqual(data['thisMonth']['revenue'], Decimal('0.00'))
        self.assertEqual(data['averages']['birdsPerTransaction'], Decimal('0.00'))

    # ===== STATS =====

    def test_stats_compare_calendar_months(self):
        data = get_dashboard_stats(today=TODAY)
        self.assertEqual(data['lastMonth']['revenue'], Decimal('400.00'))
        self.assertEqual(data['lastMonth']['birds'], 200)
        self.assertEqual(data['changes'], {
            'revenue': 375,
            'transactions': 200,
            'birds': 200,
            'netWeight': 200,
        })

    def test_stats_across_year_boundary(self):
        data = get_dashboard_stats(today=date(2024, 1, 20))
        self.assertEqual(data['thisMonth']['transactions'], 0)
        self.assertEqual(data['lastMonth']['transactions'], 0)
        self.assertEqual(data['changes']['revenue'], 0)

    # ===== ACTIVITY =====

    def test_recent_activity(self):
        data = get_recent_activity(2)
        self.assertEqual(len(data['recentTransactions']), 2)
        self.assertEqual(data['recentTransactions'][0]['type'], 'transaction')
        self.assertEqual(data['recentTransactions'][0]['title'], 'Transaction with Buyer Y')
        self.assertEqual(
            [flock['description'] for flock in data['recentFlocks']],
            ['5000 chicks at Farm B', '5000 chicks at Farm A'],
        )
        self.assertEqual([farm['title'] for farm in data['recentFarms']], ['Farm B added', 'Farm A added'])

    def test_activity_limit_falls_back_and_clamps(self):
        for limit in (None, 'abc', '0', '-4', '500'):
            with self.subTest(limit=limit):
                self.assertEqual(len(get_recent_activity(limit)['recentTransactions']), 4)


class DashboardAPITestCase(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(username='dashboard-api', password='pass')
        farm, flock, shed = create_chain('A')
        buyer = create_buyer('X', '9800000001')
        Ledger.objects.create(**ledger_values(farm, flock, shed, buyer))

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_endpoints(self):
        cases = [
            ('/api/v1/dashboard/summary/', 'Dashboard summary fetched successfully', 'financialSummary'),
            ('/api/v1/dashboard/activity/', 'Recent activity fetched successfully', 'recentTransactions'),
            ('/api/v1/dashboard/stats/', 'Dashboard stats fetched successfully', 'changes'),
        ]
        for url, message, key in cases:
            with self.subTest(url=url):
                response = self.client.get(url)
                self.assertEqual(response.status_code, 200)
                body = response.json()
                self.assertEqual(body['status'], 'success')
                self.assertEqual(body['message'], message)
                self.assertIn(key, body['data'])

    def test_this_month_counts_todays_entry(self):
        response = self.client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.json()['data']['thisMonth']['transactions'], 1)

    def test_requires_authentication(self):
        self.assertEqual(APIClient().get('/api/v1/dashboard/summary/').status_code, 401)
