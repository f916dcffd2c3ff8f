# apps/ledger/tests/test_api.py
"""
Tests for the ledger, farm and buyer endpoints.
"""
from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from apps.ledger.models import Ledger
from users.models import User

from .helpers import create_buyer, create_chain, ledger_values


class LedgerAPITestCase(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(username='manager', password='pass')
        cls.admin = User.objects.create_user(username='admin', password='pass', is_staff=True)
        cls.farm_a, cls.flock_a, cls.shed_a = create_chain('A')
        cls.farm_b, cls.flock_b, cls.shed_b = create_chain('B')
        cls.buyer = create_buyer('X', '9800000001')

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def payload(self, **overrides):
        data = {
            'farmId': self.farm_a.pk,
            'flockId': self.flock_a.pk,
            'shedId': self.shed_a.pk,
            'buyerId': self.buyer.pk,
            'vehicleNumber': 'KA-01-1234',
            'driverName': 'Ravi',
            'driverContact': '9000000001',
            'accountantName': 'Meena',
            'emptyVehicleWeight': '1000.00',
            'grossWeight': '1500.00',
            'netWeight': '500.00',
            'numberOfBirds': 200,
            'rate': '2.35',
            'totalAmount': '1175.00',
            'amountPaid': '175.00',
            'date': timezone.now().isoformat(),
        }
        data.update(overrides)
        return data

    def create_ledger(self, **overrides):
        values = ledger_values(self.farm_a, self.flock_a, self.shed_a, self.buyer, **overrides)
        return Ledger.objects.create(**values)

    # ===== CREATE =====

    def test_create(self):
        response = self.client.post('/api/v1/ledgers/', self.payload(), format='json')
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body['status'], 'success')
        self.assertEqual(body['data']['balance'], 1000.0)
        self.assertEqual(body['data']['farmInfo']['name'], 'Farm A')
        self.assertEqual(body['data']['buyerInfo']['contactNumber'], '9800000001')
        self.assertEqual(Ledger.objects.count(), 1)

    def test_create_rejects_broken_chain(self):
        response = self.client.post('/api/v1/ledgers/', self.payload(flockId=self.flock_b.pk), format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {
            'status': 'error',
            'message': 'Flock does not belong to the specified farm',
            'code': 'INVALID_FLOCK_FARM_RELATIONSHIP',
        })
        self.assertEqual(Ledger.objects.count(), 0)

    def test_create_missing_buyer_is_404(self):
        response = self.client.post('/api/v1/ledgers/', self.payload(buyerId=999999), format='json')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['code'], 'BUYER_NOT_FOUND')

    def test_create_wrong_total(self):
        response = self.client.post('/api/v1/ledgers/', self.payload(totalAmount='1175.02'), format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['code'], 'INVALID_TOTAL_AMOUNT_CALCULATION')

    def test_create_validation_error(self):
        response = self.client.post(
            '/api/v1/ledgers/',
            self.payload(netWeight='-5', vehicleNumber=''),
            format='json',
        )
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body['code'], 'VALIDATION_ERROR')
        self.assertIn('netWeight', body['errors'])
        self.assertIn('vehicleNumber', body['errors'])

    # ===== BULK =====

    def test_bulk_create(self):
        entries = [self.payload(), self.payload(), self.payload(vehicleNumber='KA-09-9999')]
        response = self.client.post('/api/v1/ledgers/bulk/', entries, format='json')
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['message'], '3 ledgers created successfully')
        self.assertEqual(len(response.json()['data']), 3)
        self.assertEqual(Ledger.objects.count(), 3)

    def test_bulk_rejects_batch_at_entry_two(self):
        entries = [self.payload(), self.payload(grossWeight='900.00'), self.payload()]
        response = self.client.post('/api/v1/ledgers/bulk/', {'ledgers': entries}, format='json')
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body['code'], 'INVALID_WEIGHT_LOGIC')
        self.assertIn('entry 2', body['message'])
        self.assertEqual(Ledger.objects.count(), 0)

    def test_bulk_requires_entries(self):
        response = self.client.post('/api/v1/ledgers/bulk/', [], format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['code'], 'INVALID_BULK_DATA')

    # ===== READ =====

    def test_retrieve(self):
        ledger = self.create_ledger(amount_paid=Decimal('400.00'))
        response = self.client.get(f'/api/v1/ledgers/{ledger.pk}/')
        self.assertEqual(response.status_code, 200)
        data = response.json()['data']
        self.assertEqual(data['id'], ledger.pk)
        self.assertEqual(data['balance'], 600.0)
        self.assertEqual(data['shedInfo']['name'], 'Shed-A')

    def test_retrieve_missing(self):
        response = self.client.get('/api/v1/ledgers/999999/')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['code'], 'NOT_FOUND')

    def test_list_filters_and_pagination(self):
        self.create_ledger()
        self.create_ledger(amount_paid=Decimal('1000.00'))
        self.create_ledger(date=timezone.now() - timedelta(days=40))

        response = self.client.get('/api/v1/ledgers/', {'paymentStatus': 'paid'})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['status'], 'success')
        self.assertEqual(body['pagination']['totalCount'], 1)

        recent = (timezone.localdate() - timedelta(days=7)).isoformat()
        response = self.client.get('/api/v1/ledgers/', {'dateFrom': recent, 'farmId': self.farm_a.pk})
        self.assertEqual(response.json()['pagination']['totalCount'], 2)

        response = self.client.get('/api/v1/ledgers/', {'limit': 2})
        self.assertEqual(response.json()['pagination'], {
            'page': 1, 'limit': 2, 'totalCount': 3, 'hasMore': True,
        })

    def test_list_exact_field_filters(self):
        self.create_ledger(vehicle_number='KA-09-9999')
        self.create_ledger(driver_name='Suresh')

        response = self.client.get('/api/v1/ledgers/', {'vehicle_number': 'KA-09-9999'})
        self.assertEqual(response.json()['pagination']['totalCount'], 1)

        response = self.client.get('/api/v1/ledgers/', {'driver_name': 'Suresh'})
        self.assertEqual(response.json()['pagination']['totalCount'], 1)

    # ===== UPDATE =====

    def test_put_is_partial(self):
        ledger = self.create_ledger()
        response = self.client.put(f'/api/v1/ledgers/{ledger.pk}/', {'amountPaid': '250.00'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['data']['balance'], 750.0)

    def test_patch_merges_before_validation(self):
        ledger = self.create_ledger()
        response = self.client.patch(f'/api/v1/ledgers/{ledger.pk}/', {'grossWeight': '1600.00'}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['code'], 'INVALID_NET_WEIGHT_CALCULATION')

        response = self.client.patch(
            f'/api/v1/ledgers/{ledger.pk}/',
            {'grossWeight': '1600.00', 'netWeight': '600.00', 'totalAmount': '1200.00'},
            format='json',
        )
        self.assertEqual(response.status_code, 200)
        ledger.refresh_from_db()
        self.assertEqual(ledger.net_weight, Decimal('600.00'))

    # ===== DELETE =====

    def test_destroy(self):
        ledger = self.create_ledger()
        response = self.client.delete(f'/api/v1/ledgers/{ledger.pk}/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['message'], f'Ledger with id {ledger.pk} deleted successfully')
        self.assertFalse(Ledger.objects.exists())

    def test_bulk_delete(self):
        first = self.create_ledger()
        second = self.create_ledger()
        self.create_ledger()
        response = self.client.post('/api/v1/ledgers/bulk-delete/', [first.pk, second.pk], format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['data'], {'deletedLedgers': 2})
        self.assertEqual(Ledger.objects.count(), 1)

        response = self.client.post('/api/v1/ledgers/bulk-delete/', {'ledgerIds': [999999]}, format='json')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['code'], 'LEDGERS_NOT_FOUND')

    def test_delete_all_requires_staff(self):
        self.create_ledger()
        response = self.client.delete('/api/v1/ledgers/all/')
        self.assertEqual(response.status_code, 403)
        self.assertEqual(Ledger.objects.count(), 1)

    def test_delete_all_for_farm(self):
        self.create_ledger()
        Ledger.objects.create(**ledger_values(self.farm_b, self.flock_b, self.shed_b, self.buyer))
        self.client.force_authenticate(user=self.admin)

        response = self.client.delete(f'/api/v1/ledgers/all/?farmId={self.farm_a.pk}')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['message'], f'1 ledgers deleted successfully for farm {self.farm_a.pk}')
        self.assertEqual(Ledger.objects.count(), 1)

        response = self.client.delete(f'/api/v1/ledgers/all/?farmId={self.farm_a.pk}')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['code'], 'NO_LEDGERS_FOUND')


class ReferenceDataAPITestCase(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(username='clerk', password='pass')
        cls.farm, cls.flock, cls.shed = create_chain('A')

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_create_farm_flock_shed(self):
        response = self.client.post('/api/v1/farms/', {'name': 'Farm Z', 'supervisor': 'Anil', 'totalSheds': 3}, format='json')
        self.assertEqual(response.status_code, 201)
        farm_id = response.json()['id']

        response = self.client.post('/api/v1/flocks/', {
            'farmId': farm_id, 'name': 'Batch 7', 'startDate': '2024-03-01',
        }, format='json')
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['status'], 'active')
        flock_id = response.json()['id']

        response = self.client.post('/api/v1/sheds/', {'flockId': flock_id, 'name': 'Shed-1', 'totalChicks': 900}, format='json')
        self.assertEqual(response.status_code, 201)

        response = self.client.post('/api/v1/sheds/', {'flockId': flock_id, 'name': 'Shed-1'}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['code'], 'VALIDATION_ERROR')

    def test_flock_end_before_start(self):
        response = self.client.post('/api/v1/flocks/', {
            'farmId': self.farm.pk, 'name': 'Batch 8',
            'startDate': '2024-03-01', 'endDate': '2024-02-01',
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('endDate', response.json()['errors'])

    def test_buyer_contact_unique(self):
        response = self.client.post('/api/v1/buyers/', {'name': 'Lakshmi Traders', 'contactNumber': '9811111111'}, format='json')
        self.assertEqual(response.status_code, 201)
        response = self.client.post('/api/v1/buyers/', {'name': 'Other', 'contactNumber': '9811111111'}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('contactNumber', response.json()['errors'])

    def test_list_flocks_by_farm(self):
        response = self.client.get('/api/v1/flocks/', {'farm': self.farm.pk})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['pagination']['totalCount'], 1)
        self.assertEqual(response.json()['data'][0]['farmName'], 'Farm A')


class HealthCheckTestCase(TestCase):

    def test_health(self):
        response = APIClient().get('/api/v1/health/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['database'], 'connected')

    def test_request_id_is_echoed(self):
        response = APIClient().get('/api/v1/health/', HTTP_X_REQUEST_ID='abc123')
        self.assertEqual(response['X-Request-ID'], 'abc123')
        self.assertEqual(response['X-Content-Type-Options'], 'nosniff')
