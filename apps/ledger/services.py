# apps/ledger/services.py
"""
Ledger write path: validation and persistence of ledger entries.

LedgerValidator handles:
- Referential chain checks (farm -> flock -> shed, buyer exists)
- Weight and amount consistency checks
- Merge-then-validate for partial updates

LedgerService handles:
- Creating a single entry
- Creating a batch of entries (all-or-nothing)
- Updating an entry from a partial payload
- Deleting one entry, a list of ids, or everything an owner holds
"""
import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction

from apps.buyers.models import Buyer
from apps.farms.models import Farm, Flock, Shed
from shared.exceptions import (
    EntityNotFound, InvalidRequest, NumericInconsistency, RelationshipMismatch,
)
from .models import Ledger

logger = logging.getLogger(__name__)

# Largest difference tolerated between total_amount and net_weight * rate.
AMOUNT_TOLERANCE = Decimal('0.01')

REFERENCE_FIELDS = ('farm_id', 'flock_id', 'shed_id', 'buyer_id')
WEIGHT_FIELDS = frozenset({'empty_vehicle_weight', 'gross_weight', 'net_weight'})
AMOUNT_FIELDS = frozenset({'net_weight', 'rate', 'total_amount'})

# Every writable column of a ledger entry, used to build the effective record.
LEDGER_FIELDS = REFERENCE_FIELDS + (
    'vehicle_number', 'driver_name', 'driver_contact', 'accountant_name',
    'empty_vehicle_weight', 'gross_weight', 'net_weight', 'number_of_birds',
    'rate', 'total_amount', 'amount_paid', 'date',
)


def to_decimal(value):
    """Coerce ints, floats and numeric strings to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def approximately_equal(a, b, epsilon=AMOUNT_TOLERANCE):
    """
    Return True when ``a`` and ``b`` differ by at most ``epsilon``.

    This is the single place where monetary totals are compared; callers
    must not repeat the tolerance literal.
    """
    return abs(to_decimal(a) - to_decimal(b)) <= to_decimal(epsilon)


@dataclass
class LedgerReferences:
    """The four rows a ledger entry points at, as loaded during validation."""
    farm: Farm
    flock: Flock
    shed: Shed
    buyer: Buyer


# (payload key, model, error code, label) in the order missing rows are reported.
REFERENCE_LOOKUPS = (
    ('farm_id', Farm, 'FARM_NOT_FOUND', 'Farm'),
    ('flock_id', Flock, 'FLOCK_NOT_FOUND', 'Flock'),
    ('shed_id', Shed, 'SHED_NOT_FOUND', 'Shed'),
    ('buyer_id', Buyer, 'BUYER_NOT_FOUND', 'Buyer'),
)


def _coerce_id(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class LedgerValidator:
    """
    Checks a ledger entry before it is written.

    Usage:
        validator = LedgerValidator()
        refs = validator.validate_relationships(farm_id, flock_id, shed_id, buyer_id)
        validator.validate_numeric_consistency(values)

        # Bulk: load every referenced row once, then validate entry by entry
        validator = LedgerValidator.for_batch(entries)

    Validation is best-effort: nothing is locked between validation and the
    write, so a referenced row deleted in between is not detected.
    """

    def __init__(self, preloaded=None):
        """
        Args:
            preloaded: Optional {model: {pk: instance}} map. When given, lookups
                are answered from it instead of hitting the database.
        """
        self.preloaded = preloaded

    @classmethod
    def for_batch(cls, entries):
        """Build a validator with all rows referenced by ``entries`` preloaded."""
        preloaded = {}
        for key, model, _code, _label in REFERENCE_LOOKUPS:
            ids = {_coerce_id(entry.get(key)) for entry in entries}
            ids.discard(None)
            preloaded[model] = model.objects.in_bulk(ids)
        return cls(preloaded=preloaded)

    def _lookup(self, model, pk):
        pk = _coerce_id(pk)
        if pk is None:
            return None
        if self.preloaded is not None:
            return self.preloaded.get(model, {}).get(pk)
        return model.objects.filter(pk=pk).first()

    def _lookup_chain(self, farm_id, flock_id, shed_id):
        """
        Load shed, flock and farm in one joined query.

        Returns None unless the shed exists and sits under the requested flock
        and farm; callers then fall back to one lookup per model to find out
        which link is missing or broken.
        """
        if self.preloaded is not None:
            return None
        farm_id, flock_id, shed_id = _coerce_id(farm_id), _coerce_id(flock_id), _coerce_id(shed_id)
        if None in (farm_id, flock_id, shed_id):
            return None
        shed = Shed.objects.select_related('flock__farm').filter(pk=shed_id).first()
        if shed is None or shed.flock_id != flock_id or shed.flock.farm_id != farm_id:
            return None
        return {'farm_id': shed.flock.farm, 'flock_id': shed.flock, 'shed_id': shed}

    # ===== REFERENTIAL CHAIN =====

    def validate_relationships(self, farm_id, flock_id, shed_id, buyer_id):
        """
        Verify all four referenced rows exist and form a consistent chain.

        A consistent chain costs two queries: shed joined to flock and farm,
        then the buyer. Otherwise each row is read on its own and the first
        missing row in farm, flock, shed, buyer order is reported.

        Raises:
            EntityNotFound: FARM_NOT_FOUND, FLOCK_NOT_FOUND, SHED_NOT_FOUND, BUYER_NOT_FOUND
            RelationshipMismatch: INVALID_FLOCK_FARM_RELATIONSHIP, INVALID_SHED_FLOCK_RELATIONSHIP

        Returns:
            LedgerReferences
        """
        requested = {'farm_id': farm_id, 'flock_id': flock_id, 'shed_id': shed_id, 'buyer_id': buyer_id}
        found = self._lookup_chain(farm_id, flock_id, shed_id) or {}
        for key, model, _code, _label in REFERENCE_LOOKUPS:
            if key not in found:
                found[key] = self._lookup(model, requested[key])
        for key, _model, code, label in REFERENCE_LOOKUPS:
            if found[key] is None:
                raise EntityNotFound(f"{label} not found", code=code)

        farm, flock, shed, buyer = (found[key] for key in REFERENCE_FIELDS)

        if flock.farm_id != farm.pk:
            raise RelationshipMismatch(
                "Flock does not belong to the specified farm",
                code='INVALID_FLOCK_FARM_RELATIONSHIP',
            )
        if shed.flock_id != flock.pk:
            raise RelationshipMismatch(
                "Shed does not belong to the specified flock",
                code='INVALID_SHED_FLOCK_RELATIONSHIP',
            )

        return LedgerReferences(farm=farm, flock=flock, shed=shed, buyer=buyer)

    # ===== WEIGHTS AND AMOUNTS =====

    def validate_weights(self, values):
        empty = to_decimal(values['empty_vehicle_weight'])
        gross = to_decimal(values['gross_weight'])
        net = to_decimal(values['net_weight'])

        if gross <= empty:
            raise NumericInconsistency(
                "Gross weight must be greater than empty vehicle weight",
                code='INVALID_WEIGHT_LOGIC',
            )
        if net != gross - empty:
            raise NumericInconsistency(
                "Net weight must equal gross weight minus empty vehicle weight",
                code='INVALID_NET_WEIGHT_CALCULATION',
            )

    def validate_total_amount(self, values):
        expected = to_decimal(values['net_weight']) * to_decimal(values['rate'])
        if not approximately_equal(values['total_amount'], expected):
            raise NumericInconsistency(
                "Total amount does not match calculated amount (net weight x rate)",
                code='INVALID_TOTAL_AMOUNT_CALCULATION',
            )

    def validate_numeric_consistency(self, values):
        """
        Check, in order: gross > empty, net == gross - empty, total ~= net * rate.

        Args:
            values: Mapping with empty_vehicle_weight, gross_weight, net_weight,
                rate and total_amount.
        """
        self.validate_weights(values)
        self.validate_total_amount(values)

    # ===== WHOLE ENTRY =====

    @staticmethod
    def effective_record(existing, changes):
        """
        Overlay ``changes`` onto the persisted values of ``existing``.

        Fields missing from ``changes`` keep their stored value, so the result
        can be validated exactly like a new entry.
        """
        record = {field: getattr(existing, field) for field in LEDGER_FIELDS}
        record.update(changes)
        return record

    def validate(self, values, changed_fields=None):
        """
        Validate a full entry.

        Args:
            values: Complete entry (a create payload or an effective record).
            changed_fields: Fields the caller actually supplied. Only the
                invariants that reference one of them are re-checked. None
                means everything (create path).

        Returns:
            LedgerReferences, or None when the references were not re-checked.
        """
        check_all = changed_fields is None
        changed = set() if check_all else set(changed_fields)

        references = None
        if check_all or changed & set(REFERENCE_FIELDS):
            references = self.validate_relationships(
                values['farm_id'], values['flock_id'], values['shed_id'], values['buyer_id'],
            )
        if check_all or changed & WEIGHT_FIELDS:
            self.validate_weights(values)
        if check_all or changed & AMOUNT_FIELDS:
            self.validate_total_amount(values)
        return references


class LedgerService:
    """
    Service for ledger entry writes.

    Usage:
        service = LedgerService(user)
        ledger = service.create_entry(validated_data)
        ledgers = service.create_bulk([data1, data2])
        ledger = service.update_entry(ledger, {'amount_paid': Decimal('500')})
    """

    def __init__(self, user=None):
        self.user = user

    def _reload(self, pks):
        return list(Ledger.objects.for_report().filter(pk__in=pks).order_by('id'))

    def create_entry(self, data):
        """Validate and persist one entry. Returns it with references joined."""
        LedgerValidator().validate(data)
        ledger = Ledger.objects.create(**data)
        logger.info(f'Ledger {ledger.pk} created by {self.user}')
        return self._reload([ledger.pk])[0]

    def create_bulk(self, entries):
        """
        Validate every entry, then insert the whole batch in one statement.

        The first failing entry aborts the batch with its 1-based position in
        the message ("Ledger entry 2: ..."); nothing is written in that case.
        """
        if not isinstance(entries, (list, tuple)) or not entries:
            raise InvalidRequest("Ledgers data must be a non-empty array", code='INVALID_BULK_DATA')

        validator = LedgerValidator.for_batch(entries)
        for position, entry in enumerate(entries, start=1):
            try:
                validator.validate(entry)
            except (EntityNotFound, RelationshipMismatch, NumericInconsistency) as exc:
                logger.info(f'Bulk ledger batch rejected at entry {position}: {exc.code}')
                raise exc.with_prefix(f"Ledger entry {position}: ") from exc

        with transaction.atomic():
            created = Ledger.objects.bulk_create([Ledger(**entry) for entry in entries])

        logger.info(f'{len(created)} ledgers created in bulk by {self.user}')
        return self._reload([ledger.pk for ledger in created])

    def update_entry(self, ledger, changes):
        """
        Apply a partial update.

        The payload is merged onto the stored entry and the merged record is
        validated with the same checks used on create, limited to the
        invariants touched by the supplied fields.
        """
        record = LedgerValidator.effective_record(ledger, changes)
        LedgerValidator().validate(record, changed_fields=changes.keys())

        for field, value in changes.items():
            setattr(ledger, field, value)
        ledger.save()
        logger.info(f'Ledger {ledger.pk} updated by {self.user}: {sorted(changes)}')
        return self._reload([ledger.pk])[0]

    def delete_entry(self, ledger):
        pk = ledger.pk
        ledger.delete()
        logger.info(f'Ledger {pk} deleted by {self.user}')
        return pk

    def delete_bulk(self, ledger_ids):
        """Delete the given ledger ids. Returns the number of rows deleted."""
        if not isinstance(ledger_ids, (list, tuple)) or not ledger_ids:
            raise InvalidRequest("Ledger IDs array is required", code='INVALID_LEDGER_IDS')

        valid_ids = [pk for pk in (_coerce_id(value) for value in ledger_ids) if pk is not None and pk > 0]
        if not valid_ids:
            raise InvalidRequest("No valid ledger IDs provided", code='INVALID_LEDGER_IDS')

        queryset = Ledger.objects.filter(pk__in=valid_ids)
        if not queryset.exists():
            raise EntityNotFound("No ledgers found with provided IDs", code='LEDGERS_NOT_FOUND')

        deleted, _ = queryset.delete()
        logger.info(f'{deleted} ledgers deleted by {self.user}')
        return deleted

    def delete_matching(self, farm_id=None, flock_id=None, shed_id=None, buyer_id=None):
        """
        Delete every entry belonging to the given owners (all entries when none given).

        Returns:
            (deleted_count, scope) where scope lists the owners filtered on,
            e.g. ['farm 3', 'buyer 7'].
        """
        owners = {'farm': farm_id, 'flock': flock_id, 'shed': shed_id, 'buyer': buyer_id}
        filters = {}
        scope = []
        for name, value in owners.items():
            if value in (None, ''):
                continue
            pk = _coerce_id(value)
            if pk is None:
                raise InvalidRequest(f"Invalid {name} ID format", code=f'INVALID_{name.upper()}_ID')
            filters[f'{name}_id'] = pk
            scope.append(f'{name} {pk}')

        queryset = Ledger.objects.filter(**filters)
        if not queryset.exists():
            raise EntityNotFound("No ledgers found to delete", code='NO_LEDGERS_FOUND')

        deleted, _ = queryset.delete()
        logger.info(f'{deleted} ledgers deleted by {self.user} for {scope or "all ledgers"}')
        return deleted, scope
