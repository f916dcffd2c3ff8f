# apps/reporting/tests/test_entity_reports.py
"""
Tests for the per-buyer, per-farm, per-flock and per-shed reports.
"""
from datetime import datetime, time, timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from apps.ledger.models import Ledger
from apps.ledger.tests.helpers import create_buyer, create_chain, ledger_values
from apps.reporting.services import EntityReportService
from shared.exceptions import EntityNotFound, InvalidRequest, MalformedQuery
from users.models import User


class EntityReportTestCase(TestCase):
    """
    Farm A / buyer X: 1000 on ``day`` and 300 (paid 100) three days earlier.
    Farm B / buyer Y: 600 on ``day``.
    """

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(username='entity-reporter', password='pass')
        cls.farm_a, cls.flock_a, cls.shed_a = create_chain('A')
        cls.farm_b, cls.flock_b, cls.shed_b = create_chain('B')
        cls.buyer_x = create_buyer('X', '9800000001')
        cls.buyer_y = create_buyer('Y', '9800000002')
        cls.empty_buyer = create_buyer('Z', '9800000003')

        cls.day = timezone.localdate() - timedelta(days=1)
        noon = timezone.make_aware(datetime.combine(cls.day, time(12, 0)))

        cls.today_a = Ledger.objects.create(**ledger_values(
            cls.farm_a, cls.flock_a, cls.shed_a, cls.buyer_x, date=noon,
        ))
        cls.earlier_a = Ledger.objects.create(**ledger_values(
            cls.farm_a, cls.flock_a, cls.shed_a, cls.buyer_x,
            gross_weight=Decimal('1150.00'), net_weight=Decimal('150.00'),
            total_amount=Decimal('300.00'), amount_paid=Decimal('100.00'),
            date=noon - timedelta(days=3),
        ))
        cls.today_b = Ledger.objects.create(**ledger_values(
            cls.farm_b, cls.flock_b, cls.shed_b, cls.buyer_y,
            gross_weight=Decimal('1300.00'), net_weight=Decimal('300.00'),
            total_amount=Decimal('600.00'), date=noon,
        ))

    def setUp(self):
        self.service = EntityReportService(self.user)

    def test_daily_report_per_entity(self):
        cases = [
            ('buyer', self.buyer_x.pk, [self.today_a.pk], Decimal('1000.00')),
            ('farm', self.farm_b.pk, [self.today_b.pk], Decimal('600.00')),
            ('flock', self.flock_a.pk, [self.today_a.pk], Decimal('1000.00')),
            ('shed', self.shed_b.pk, [self.today_b.pk], Decimal('600.00')),
        ]
        for entity, pk, expected, amount in cases:
            with self.subTest(entity=entity):
                data = self.service.daily(entity, str(pk), self.day.isoformat())
                self.assertEqual(data[entity]['id'], pk)
                self.assertEqual(data['date'], self.day.isoformat())
                self.assertEqual([row['id'] for row in data['transactions']], expected)
                self.assertEqual(data['summary']['totalAmount'], amount)

    def test_overall_report_covers_all_time(self):
        data = self.service.overall('farm', self.farm_a.pk)
        self.assertEqual(data['farm'], {'id': self.farm_a.pk, 'name': 'Farm A', 'supervisor': 'Supervisor A'})
        self.assertEqual(
            [row['id'] for row in data['transactions']],
            [self.today_a.pk, self.earlier_a.pk],
        )
        summary = data['summary']
        self.assertEqual(summary['totalTransactions'], 2)
        self.assertEqual(summary['totalAmount'], Decimal('1300.00'))
        self.assertEqual(summary['totalBalance'], Decimal('1200.00'))
        self.assertEqual(summary['averageNetWeight'], Decimal('325.00'))
        self.assertEqual(summary['dateRange'], {
            'from': (self.day - timedelta(days=3)).isoformat(),
            'to': self.day.isoformat(),
        })

    def test_entity_without_transactions(self):
        data = self.service.overall('buyer', self.empty_buyer.pk)
        self.assertEqual(data['buyer']['name'], 'Buyer Z')
        self.assertEqual(data['transactions'], [])
        self.assertEqual(data['summary']['totalTransactions'], 0)
        self.assertEqual(data['summary']['totalAmount'], 0)

    def test_bad_ids(self):
        with self.assertRaises(InvalidRequest) as ctx:
            self.service.overall('shed', 'abc')
        self.assertEqual(ctx.exception.code, 'INVALID_SHED_ID')

        with self.assertRaises(EntityNotFound) as ctx:
            self.service.daily('flock', 999999, self.day.isoformat())
        self.assertEqual(ctx.exception.code, 'FLOCK_NOT_FOUND')

    def test_daily_rejects_bad_date(self):
        with self.assertRaises(MalformedQuery) as ctx:
            self.service.daily('buyer', self.buyer_x.pk, 'someday')
        self.assertEqual(ctx.exception.code, 'INVALID_DATE')

    def test_buyer_unified_is_scoped_to_buyer(self):
        data = self.service.buyer_unified(self.buyer_x.pk, {
            'duration': 'period', 'period': '30', 'buyerIds': str(self.buyer_y.pk),
        })
        self.assertEqual(data['buyer']['id'], self.buyer_x.pk)
        self.assertEqual(data['summary']['totalTransactions'], 2)
        self.assertEqual(data['summary']['totalAmount'], Decimal('1300.00'))
        self.assertEqual(data['reportTitle'], 'Last 30 Days Report')

    def test_buyer_unified_defaults_to_monthly(self):
        data = self.service.buyer_unified(self.buyer_y.pk, {})
        self.assertTrue(data['reportTitle'].startswith('Monthly Report for'))


class EntityReportAPITestCase(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(username='entity-api', password='pass')
        cls.farm, cls.flock, cls.shed = create_chain('A')
        cls.buyer = create_buyer('X', '9800000001')
        cls.day = timezone.localdate()
        Ledger.objects.create(**ledger_values(
            cls.farm, cls.flock, cls.shed, cls.buyer,
            date=timezone.make_aware(datetime.combine(cls.day, time(9, 0))),
        ))

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_daily_endpoint(self):
        response = self.client.get(f'/api/v1/reports/shed/{self.shed.pk}/daily/{self.day.isoformat()}/')
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['message'], 'Shed daily report fetched successfully')
        self.assertEqual(body['data']['shed']['totalChicks'], 5000)
        self.assertEqual(body['data']['summary']['totalAmount'], 1000.0)

    def test_overall_endpoint(self):
        response = self.client.get(f'/api/v1/reports/buyer/{self.buyer.pk}/overall/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['message'], 'Buyer overall report fetched successfully')
        self.assertEqual(len(response.json()['data']['transactions']), 1)

    def test_unified_endpoint(self):
        response = self.client.get(
            f'/api/v1/reports/buyer/{self.buyer.pk}/unified/',
            {'duration': 'daily', 'date': self.day.isoformat(), 'groupBy': 'farm'},
        )
        self.assertEqual(response.status_code, 200)
        data = response.json()['data']
        self.assertEqual(data['buyer']['contactNumber'], '9800000001')
        self.assertEqual(data['groupBy'], 'farm')

    def test_error_envelopes(self):
        response = self.client.get('/api/v1/reports/farm/abc/overall/')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['code'], 'INVALID_FARM_ID')

        response = self.client.get('/api/v1/reports/farm/999999/overall/')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['code'], 'FARM_NOT_FOUND')
