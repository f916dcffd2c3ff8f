# apps/ledger/tests/helpers.py
"""
Fixtures shared by the ledger and reporting tests.
"""
from datetime import date
from decimal import Decimal

from django.utils import timezone

from apps.buyers.models import Buyer
from apps.farms.models import Farm, Flock, Shed


def create_chain(label):
    """Create a consistent Farm -> Flock -> Shed chain."""
    farm = Farm.objects.create(name=f'Farm {label}', supervisor=f'Supervisor {label}', total_sheds=4)
    flock = Flock.objects.create(farm=farm, name=f'Batch {label}', start_date=date(2024, 1, 1))
    shed = Shed.objects.create(flock=flock, name=f'Shed-{label}', total_chicks=5000)
    return farm, flock, shed


def create_buyer(label, contact_number):
    return Buyer.objects.create(name=f'Buyer {label}', contact_number=contact_number, address=f'{label} Market Road')


def ledger_values(farm, flock, shed, buyer, **overrides):
    """
    A consistent ledger payload (model attribute names).

    Defaults: empty 1000, gross 1500, net 500, rate 2.00, total 1000.00.
    """
    values = {
        'farm_id': farm.pk,
        'flock_id': flock.pk,
        'shed_id': shed.pk,
        'buyer_id': buyer.pk,
        'vehicle_number': 'KA-01-1234',
        'driver_name': 'Ravi',
        'driver_contact': '9000000001',
        'accountant_name': 'Meena',
        'empty_vehicle_weight': Decimal('1000.00'),
        'gross_weight': Decimal('1500.00'),
        'net_weight': Decimal('500.00'),
        'number_of_birds': 200,
        'rate': Decimal('2.00'),
        'total_amount': Decimal('1000.00'),
        'amount_paid': Decimal('0.00'),
        'date': timezone.now(),
    }
    values.update(overrides)
    return values
