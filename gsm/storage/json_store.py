"""Single JSON document repository, the local storage backend

The document keeps the record shapes of the browser build under its keys
(``gsm_scheme_users``, ``gsm_login_users``, ``gsm_scheme_settings``) plus
``gsm_payments`` and ``gsm_counters``. Every change is written back
synchronously, so memory and disk never disagree after a call returns.
"""
import json
import logging
import os
import time
from datetime import datetime
from decimal import Decimal
from gsm.domain import Member, Operator, PaymentEntry
from gsm.errors import PersistenceError
from gsm.storage.base import Repository

logger = logging.getLogger(__name__)

MEMBERS_KEY = 'gsm_scheme_users'
OPERATORS_KEY = 'gsm_login_users'
SETTINGS_KEY = 'gsm_scheme_settings'
PAYMENTS_KEY = 'gsm_payments'
COUNTERS_KEY = 'gsm_counters'

# canonical field -> stored key
MEMBER_FIELDS = {
    'id': 'id',
    'name': 'name',
    'phone': 'phone',
    'address': 'address',
    'scheme_type': 'schemeType',
    'num_schemes': 'numSchemes',
    'total_amount': 'totalAmount',
    'selected_item': 'selectedItem',
    'created_at': 'createdAt',
}
OPERATOR_FIELDS = {
    'id': 'id',
    'name': 'name',
    'username': 'username',
    'password_hash': 'passwordHash',
    'phone': 'phone',
    'role': 'role',
    'email': 'email',
    'address': 'address',
    'created_at': 'createdAt',
}


def _dump_value(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _load_datetime(value):
    return datetime.fromisoformat(value) if value else datetime.utcnow()


def _member_to_doc(member):
    return {key: _dump_value(getattr(member, attr)) for attr, key in MEMBER_FIELDS.items()}


def _doc_to_member(doc):
    return Member(
        id=doc['id'],
        name=doc.get('name', ''),
        phone=doc.get('phone', ''),
        address=doc.get('address', ''),
        scheme_type=doc['schemeType'],
        num_schemes=int(doc.get('numSchemes') or 0),
        total_amount=Decimal(str(doc.get('totalAmount') or 0)),
        selected_item=doc.get('selectedItem'),
        created_at=_load_datetime(doc.get('createdAt')),
    )


def _entry_to_doc(entry):
    return {
        'id': entry.id,
        'memberId': entry.member_id,
        'amount': str(entry.amount),
        'date': entry.date.isoformat(),
        'method': entry.method,
        'balanceAmount': str(entry.balance_amount) if entry.balance_amount is not None else None,
        'recordedBy': entry.recorded_by,
    }


def _doc_to_entry(doc):
    balance = doc.get('balanceAmount')
    return PaymentEntry(
        id=str(doc['id']),
        member_id=doc['memberId'],
        amount=Decimal(str(doc['amount'])),
        date=_load_datetime(doc.get('date')),
        method=doc.get('method') or 'cash',
        balance_amount=Decimal(str(balance)) if balance is not None else None,
        recorded_by=doc.get('recordedBy'),
    )


def _operator_to_doc(operator):
    return {key: _dump_value(getattr(operator, attr)) for attr, key in OPERATOR_FIELDS.items()}


def _doc_to_operator(doc):
    return Operator(
        id=str(doc['id']),
        name=doc.get('name', ''),
        username=doc['username'],
        password_hash=doc.get('passwordHash', ''),
        phone=doc.get('phone', ''),
        role=doc.get('role', 'Basic'),
        email=doc.get('email'),
        address=doc.get('address', ''),
        created_at=_load_datetime(doc.get('createdAt')),
    )


class JsonRepository(Repository):
    """Keeps the whole data set in one JSON file"""

    def __init__(self, path):
        self.path = path
        self._last_id = 0
        self._data = self._read()

    def _read(self):
        empty = {MEMBERS_KEY: [], OPERATORS_KEY: [], SETTINGS_KEY: {}, PAYMENTS_KEY: [], COUNTERS_KEY: {}}
        if not os.path.exists(self.path):
            return empty
        try:
            with open(self.path, encoding='utf-8') as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.error('Could not read local store %s: %s', self.path, e)
            raise PersistenceError('Could not read local store') from e
        for key, value in empty.items():
            data.setdefault(key, value)
        return data

    def _write(self, action):
        tmp_path = f'{self.path}.tmp'
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as fh:
                json.dump(self._data, fh, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.error('Local store write failed during %s: %s', action, e)
            raise PersistenceError(f'Could not {action}') from e

    def _new_id(self):
        # Creation timestamp in milliseconds, bumped to stay strictly increasing
        now = int(time.time() * 1000)
        existing = [int(doc['id']) for doc in self._data[PAYMENTS_KEY] + self._data[OPERATORS_KEY]
                    if str(doc.get('id', '')).isdigit()]
        self._last_id = max([now, self._last_id + 1] + [value + 1 for value in existing])
        return str(self._last_id)

    # Members
    def list_members(self, scheme_type=None):
        members = [_doc_to_member(doc) for doc in self._data[MEMBERS_KEY]]
        if scheme_type:
            members = [member for member in members if member.scheme_type == scheme_type]
        return members

    def get_member(self, member_id):
        doc = self._find(MEMBERS_KEY, member_id)
        return _doc_to_member(doc) if doc else None

    def count_members(self, scheme_type):
        return sum(1 for doc in self._data[MEMBERS_KEY] if doc.get('schemeType') == scheme_type)

    def create_member(self, member):
        if self._find(MEMBERS_KEY, member.id):
            raise PersistenceError(f'Member id {member.id} is already taken')
        self._data[MEMBERS_KEY].append(_member_to_doc(member))
        self._write('create member')
        return member

    def update_member(self, member_id, patch):
        doc = self._find(MEMBERS_KEY, member_id)
        if doc is None:
            return None
        for attr, value in patch.items():
            if attr in MEMBER_FIELDS and attr not in ('id', 'scheme_type'):
                doc[MEMBER_FIELDS[attr]] = _dump_value(value)
        self._write('update member')
        return _doc_to_member(doc)

    def delete_member(self, member_id):
        before = len(self._data[MEMBERS_KEY])
        self._data[MEMBERS_KEY] = [doc for doc in self._data[MEMBERS_KEY] if doc['id'] != member_id]
        if len(self._data[MEMBERS_KEY]) == before:
            return False
        self._write('delete member')
        return True

    def next_sequence(self, scheme_type):
        counters = self._data[COUNTERS_KEY]
        counters[scheme_type] = int(counters.get(scheme_type, 0)) + 1
        self._write('allocate member id')
        return counters[scheme_type]

    # Payment entries
    def list_payment_entries(self, member_id):
        entries = [_doc_to_entry(doc) for doc in self._data[PAYMENTS_KEY] if doc['memberId'] == member_id]
        return sorted(entries, key=lambda entry: (entry.date, len(entry.id), entry.id))

    def append_payment_entry(self, entry):
        entry.id = self._new_id()
        self._data[PAYMENTS_KEY].append(_entry_to_doc(entry))
        self._write('record payment')
        return entry

    def delete_payment_entries(self, member_id):
        kept = [doc for doc in self._data[PAYMENTS_KEY] if doc['memberId'] != member_id]
        removed = len(self._data[PAYMENTS_KEY]) - len(kept)
        self._data[PAYMENTS_KEY] = kept
        self._write('delete payment entries')
        return removed

    # Operators
    def list_operators(self):
        return [_doc_to_operator(doc) for doc in self._data[OPERATORS_KEY]]

    def get_operator(self, operator_id):
        doc = self._find(OPERATORS_KEY, str(operator_id))
        return _doc_to_operator(doc) if doc else None

    def find_operator_by_username(self, username):
        for doc in self._data[OPERATORS_KEY]:
            if doc['username'] == username:
                return _doc_to_operator(doc)
        return None

    def create_operator(self, operator):
        operator.id = self._new_id()
        self._data[OPERATORS_KEY].append(_operator_to_doc(operator))
        self._write('create operator')
        return operator

    def update_operator(self, operator_id, patch):
        doc = self._find(OPERATORS_KEY, str(operator_id))
        if doc is None:
            return None
        for attr, value in patch.items():
            if attr in OPERATOR_FIELDS and attr != 'id':
                doc[OPERATOR_FIELDS[attr]] = _dump_value(value)
        self._write('update operator')
        return _doc_to_operator(doc)

    def delete_operator(self, operator_id):
        before = len(self._data[OPERATORS_KEY])
        self._data[OPERATORS_KEY] = [doc for doc in self._data[OPERATORS_KEY] if str(doc['id']) != str(operator_id)]
        if len(self._data[OPERATORS_KEY]) == before:
            return False
        self._write('delete operator')
        return True

    # Scheme settings
    def get_unit_prices(self):
        return {scheme_type: Decimal(str(price)) for scheme_type, price in self._data[SETTINGS_KEY].items()}

    def set_unit_price(self, scheme_type, unit_price):
        self._data[SETTINGS_KEY][scheme_type] = str(unit_price)
        self._write('save scheme settings')
        return Decimal(str(unit_price))

    def _find(self, key, record_id):
        for doc in self._data[key]:
            if str(doc['id']) == str(record_id):
                return doc
        return None
