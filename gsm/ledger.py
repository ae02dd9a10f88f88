"""Payment ledger rules: identifiers, validation and balance projection

Nothing in here touches storage. Paid and balance figures are always derived
from the ledger entries handed in, never from a stored aggregate.
"""
import re
from decimal import Decimal, InvalidOperation

from gsm.domain import SCHEME_PREFIXES
from gsm.errors import InvalidAmount, ValidationError

PHONE_PATTERN = re.compile(r'[0-9]{10}')
MONEY_PLACES = 2  # matches the Numeric(15, 2) columns


def allocate_member_id(scheme_type, existing_count):
    """Build a member identifier such as ``KHSS-003``

    Args:
        scheme_type: One of the scheme types (KHSS, DSS, Finance)
        existing_count: Members already allocated for this scheme type

    Returns:
        ``<prefix>-<existing_count + 1 zero padded to 3 digits>``
    """
    prefix = SCHEME_PREFIXES.get(scheme_type)
    if prefix is None:
        raise ValidationError(f'Unknown scheme type: {scheme_type}', field='scheme_type')
    return f'{prefix}-{existing_count + 1:03d}'


def validate_phone(phone):
    """Phone numbers are exactly ten digits"""
    return bool(phone) and PHONE_PATTERN.fullmatch(phone) is not None


def parse_amount(value):
    """Convert operator input to a positive Decimal or raise InvalidAmount"""
    if value is None or isinstance(value, bool):
        raise InvalidAmount()
    try:
        if isinstance(value, float):
            amount = Decimal(str(value))
        else:
            amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmount()
    if not amount.is_finite() or amount <= 0:
        raise InvalidAmount()
    if amount.normalize().as_tuple().exponent < -MONEY_PLACES:
        raise InvalidAmount()
    return amount


def parse_num_schemes(value):
    try:
        count = int(value)
    except (TypeError, ValueError):
        raise ValidationError('Number of schemes must be a whole number', field='num_schemes')
    if count < 1:
        raise ValidationError('Number of schemes must be at least 1', field='num_schemes')
    return count


def scheme_total(unit_price, num_schemes):
    """Total obligation for ``num_schemes`` units at ``unit_price``"""
    return Decimal(unit_price) * num_schemes


def total_paid(entries):
    return sum((Decimal(entry.amount) for entry in entries), Decimal('0'))


def balance_after(total_amount, prior_paid, amount):
    """Snapshot stored on a new entry: the balance once it is counted"""
    return Decimal(total_amount) - (prior_paid + amount)


def project(member, entries, use_snapshot=False):
    """Derive ``(paid, balance)`` for a member from its ledger entries

    ``paid`` is the sum of every entry recorded against the member, in any
    order. ``balance`` is ``total_amount - paid`` and may go negative on
    overpayment. With ``use_snapshot`` the balance is instead read from the
    chronologically last entry carrying a snapshot, while ``paid`` is still
    summed over all entries.
    """
    own = [entry for entry in entries if entry.member_id == member.id]
    paid = total_paid(own)
    balance = Decimal(member.total_amount) - paid

    if use_snapshot:
        snapshots = [entry for entry in own if entry.balance_amount is not None]
        if snapshots:
            latest = max(snapshots, key=lambda entry: (entry.date, _sort_key(entry.id)))
            balance = Decimal(latest.balance_amount)

    return paid, balance


def sort_entries(entries):
    """Order entries ascending by date, ties broken by id"""
    return sorted(entries, key=lambda entry: (entry.date, _sort_key(entry.id)))


def _sort_key(entry_id):
    # Entry ids are numeric strings; longer means later
    text = str(entry_id)
    return (len(text), text)
