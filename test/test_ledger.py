"""Ledger rules: identifiers, validation and balance projection"""
from datetime import datetime, timedelta
from decimal import Decimal
from itertools import permutations

import pytest

from gsm import ledger
from gsm.domain import Member, MemberSummary, PaymentEntry
from gsm.errors import InvalidAmount, ValidationError

START = datetime(2026, 1, 1, 9, 0)


def member(total='1000', member_id='KHSS-001'):
    return Member(id=member_id, name='Lakshmi', phone='9876543210', address='Madurai',
                  scheme_type='KHSS', num_schemes=1, total_amount=Decimal(total))


def entry(entry_id, amount, days=0, member_id='KHSS-001', balance=None):
    return PaymentEntry(id=str(entry_id), member_id=member_id, amount=Decimal(amount),
                        date=START + timedelta(days=days),
                        balance_amount=Decimal(balance) if balance is not None else None)


@pytest.mark.parametrize('scheme_type, count, expected', [
    ('KHSS', 0, 'KHSS-001'),
    ('KHSS', 2, 'KHSS-003'),
    ('DSS', 41, 'DSS-042'),
    ('Finance', 9, 'FIN-010'),
    ('Finance', 999, 'FIN-1000'),
])
def test_allocate_member_id(scheme_type, count, expected):
    assert ledger.allocate_member_id(scheme_type, count) == expected


def test_allocate_member_id_rejects_unknown_scheme():
    with pytest.raises(ValidationError):
        ledger.allocate_member_id('Gold', 0)


@pytest.mark.parametrize('phone, valid', [
    ('12345', False),
    ('1234567890', True),
    ('12345678901', False),
    ('12345abcde', False),
    ('', False),
    (None, False),
    ('١٢٣٤٥٦٧٨٩٠', False),
])
def test_validate_phone(phone, valid):
    assert ledger.validate_phone(phone) is valid


@pytest.mark.parametrize('value', [0, '0', -5, '-5', 'abc', '', None, 'nan', 'Infinity', True, '0.001', 1.005])
def test_parse_amount_rejects(value):
    with pytest.raises(InvalidAmount) as excinfo:
        ledger.parse_amount(value)
    assert excinfo.value.field == 'amount'
    assert isinstance(excinfo.value, ValidationError)


@pytest.mark.parametrize('value, expected', [
    ('0.01', Decimal('0.01')),
    (0.01, Decimal('0.01')),
    (250, Decimal('250')),
    (' 1500.50 ', Decimal('1500.50')),
    (Decimal('99.99'), Decimal('99.99')),
    ('100.500', Decimal('100.5')),
])
def test_parse_amount_accepts(value, expected):
    assert ledger.parse_amount(value) == expected


@pytest.mark.parametrize('value', ['0', -1, 'two', None])
def test_parse_num_schemes_rejects(value):
    with pytest.raises(ValidationError):
        ledger.parse_num_schemes(value)


def test_scheme_total():
    assert ledger.scheme_total(Decimal('1000'), 2) == Decimal('2000')
    assert ledger.scheme_total(Decimal('1500'), 3) == Decimal('4500')


def test_paid_is_order_independent():
    entries = [entry(1, '100'), entry(2, '250.50', days=1), entry(3, '49.50', days=2)]
    results = {ledger.project(member(), list(order)) for order in permutations(entries)}
    assert results == {(Decimal('400.00'), Decimal('600.00'))}


def test_no_entries_leaves_full_balance():
    assert ledger.project(member('1000'), []) == (Decimal('0'), Decimal('1000'))


def test_overpayment_goes_negative():
    paid, balance = ledger.project(member('1000'), [entry(1, '700'), entry(2, '500', days=1)])
    assert paid == Decimal('1200')
    assert balance == Decimal('-200')


def test_zero_total_with_payment_is_negative_not_an_error():
    paid, balance = ledger.project(member('0'), [entry(1, '50')])
    assert balance == Decimal('-50')


def test_entries_of_other_members_are_ignored():
    entries = [entry(1, '100'), entry(2, '900', member_id='KHSS-002')]
    assert ledger.project(member(), entries) == (Decimal('100'), Decimal('900'))


def test_snapshot_balance_comes_from_latest_entry_by_date():
    # Total was 1000 when the entries were taken, then edited to 3000
    entries = [
        entry(3, '100', days=5, balance='700'),
        entry(1, '100', days=0, balance='900'),
        entry(2, '100', days=2, balance='800'),
    ]
    paid, balance = ledger.project(member('3000'), entries, use_snapshot=True)
    assert paid == Decimal('300')
    assert balance == Decimal('700')
    assert ledger.project(member('3000'), entries) == (Decimal('300'), Decimal('2700'))


def test_snapshot_ties_on_date_use_later_id():
    entries = [entry(9, '100', balance='900'), entry(10, '100', balance='800')]
    _, balance = ledger.project(member(), entries, use_snapshot=True)
    assert balance == Decimal('800')


def test_snapshot_falls_back_without_snapshots():
    _, balance = ledger.project(member('1000'), [entry(1, '100')], use_snapshot=True)
    assert balance == Decimal('900')


def test_balance_after():
    assert ledger.balance_after(Decimal('1000'), Decimal('600'), Decimal('500')) == Decimal('-100')


def test_sort_entries_by_date_then_id():
    entries = [entry(10, '1', days=1), entry(2, '1', days=1), entry(5, '1')]
    assert [e.id for e in ledger.sort_entries(entries)] == ['5', '2', '10']


def test_summary_progress_is_capped():
    summary = MemberSummary(member=member('1000'), paid=Decimal('1200'), balance=Decimal('-200'))
    assert summary.progress == 100
    half = MemberSummary(member=member('1000'), paid=Decimal('500'), balance=Decimal('500'))
    assert half.progress == 50
    assert half.last_payment is None
