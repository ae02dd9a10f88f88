"""SQLAlchemy backed repository"""
import logging
from decimal import Decimal
from sqlalchemy.exc import SQLAlchemyError
from gsm import db
from gsm.domain import Member, Operator, PaymentEntry
from gsm.errors import PersistenceError
from gsm.models import MemberRecord, OperatorRecord, PaymentRecord, SchemeCounter, SchemeSetting
from gsm.storage.base import Repository

logger = logging.getLogger(__name__)

MEMBER_COLUMNS = ('name', 'phone', 'address', 'num_schemes', 'total_amount', 'selected_item')
OPERATOR_COLUMNS = ('name', 'username', 'email', 'password_hash', 'phone', 'address', 'role')


def _to_member(row):
    return Member(
        id=row.id,
        name=row.name,
        phone=row.phone,
        address=row.address or '',
        scheme_type=row.scheme_type,
        num_schemes=row.num_schemes,
        total_amount=Decimal(row.total_amount or 0),
        selected_item=row.selected_item,
        created_at=row.created_at,
    )


def _to_entry(row):
    return PaymentEntry(
        id=str(row.id),
        member_id=row.member_id,
        amount=Decimal(row.amount),
        date=row.payment_date,
        method=row.payment_method or 'cash',
        balance_amount=Decimal(row.balance_amount) if row.balance_amount is not None else None,
        recorded_by=row.recorded_by,
    )


def _to_operator(row):
    return Operator(
        id=str(row.id),
        name=row.name,
        username=row.username,
        password_hash=row.password_hash,
        phone=row.phone,
        role=row.role,
        email=row.email,
        address=row.address or '',
        created_at=row.created_at,
    )


class SqlRepository(Repository):
    """Stores everything in the application database through ``db.session``"""

    def _commit(self, action):
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error('Database write failed during %s: %s', action, e)
            raise PersistenceError(f'Could not {action}') from e

    # Members
    def list_members(self, scheme_type=None):
        query = MemberRecord.query
        if scheme_type:
            query = query.filter_by(scheme_type=scheme_type)
        return [_to_member(row) for row in query.order_by(MemberRecord.created_at, MemberRecord.id).all()]

    def get_member(self, member_id):
        row = db.session.get(MemberRecord, member_id)
        return _to_member(row) if row else None

    def count_members(self, scheme_type):
        return MemberRecord.query.filter_by(scheme_type=scheme_type).count()

    def create_member(self, member):
        # A reused id hits the primary key, so check first to keep the session clean
        if db.session.get(MemberRecord, member.id) is not None:
            raise PersistenceError(f'Member id {member.id} is already taken')
        row = MemberRecord(
            id=member.id,
            name=member.name,
            phone=member.phone,
            address=member.address,
            scheme_type=member.scheme_type,
            num_schemes=member.num_schemes,
            total_amount=member.total_amount,
            selected_item=member.selected_item,
            created_at=member.created_at,
        )
        db.session.add(row)
        self._commit('create member')
        return _to_member(row)

    def update_member(self, member_id, patch):
        row = db.session.get(MemberRecord, member_id)
        if row is None:
            return None
        for key, value in patch.items():
            if key in MEMBER_COLUMNS:
                setattr(row, key, value)
        self._commit('update member')
        return _to_member(row)

    def delete_member(self, member_id):
        row = db.session.get(MemberRecord, member_id)
        if row is None:
            return False
        db.session.delete(row)
        self._commit('delete member')
        return True

    def next_sequence(self, scheme_type):
        counter = db.session.get(SchemeCounter, scheme_type)
        if counter is None:
            counter = SchemeCounter(scheme_type=scheme_type, last_value=0)
            db.session.add(counter)
        counter.last_value = (counter.last_value or 0) + 1
        value = counter.last_value
        self._commit('allocate member id')
        return value

    # Payment entries
    def list_payment_entries(self, member_id):
        rows = PaymentRecord.query.filter_by(member_id=member_id).order_by(
            PaymentRecord.payment_date, PaymentRecord.id
        ).all()
        return [_to_entry(row) for row in rows]

    def append_payment_entry(self, entry):
        row = PaymentRecord(
            member_id=entry.member_id,
            amount=entry.amount,
            payment_date=entry.date,
            payment_method=entry.method,
            balance_amount=entry.balance_amount,
            recorded_by=entry.recorded_by,
        )
        db.session.add(row)
        self._commit('record payment')
        return _to_entry(row)

    def delete_payment_entries(self, member_id):
        count = PaymentRecord.query.filter_by(member_id=member_id).delete()
        self._commit('delete payment entries')
        return count

    # Operators
    def list_operators(self):
        return [_to_operator(row) for row in OperatorRecord.query.order_by(OperatorRecord.created_at).all()]

    def get_operator(self, operator_id):
        try:
            key = int(operator_id)
        except (TypeError, ValueError):
            return None
        row = db.session.get(OperatorRecord, key)
        return _to_operator(row) if row else None

    def find_operator_by_username(self, username):
        row = OperatorRecord.query.filter_by(username=username).first()
        return _to_operator(row) if row else None

    def create_operator(self, operator):
        row = OperatorRecord(
            name=operator.name,
            username=operator.username,
            email=operator.email,
            password_hash=operator.password_hash,
            phone=operator.phone,
            address=operator.address,
            role=operator.role,
            created_at=operator.created_at,
        )
        db.session.add(row)
        self._commit('create operator')
        return _to_operator(row)

    def update_operator(self, operator_id, patch):
        row = self._operator_row(operator_id)
        if row is None:
            return None
        for key, value in patch.items():
            if key in OPERATOR_COLUMNS:
                setattr(row, key, value)
        self._commit('update operator')
        return _to_operator(row)

    def delete_operator(self, operator_id):
        row = self._operator_row(operator_id)
        if row is None:
            return False
        db.session.delete(row)
        self._commit('delete operator')
        return True

    def _operator_row(self, operator_id):
        try:
            return db.session.get(OperatorRecord, int(operator_id))
        except (TypeError, ValueError):
            return None

    # Scheme settings
    def get_unit_prices(self):
        return {row.scheme_type: Decimal(row.unit_price) for row in SchemeSetting.query.all()}

    def set_unit_price(self, scheme_type, unit_price):
        row = db.session.get(SchemeSetting, scheme_type)
        if row is None:
            row = SchemeSetting(scheme_type=scheme_type)
            db.session.add(row)
        row.unit_price = unit_price
        self._commit('save scheme settings')
        return Decimal(row.unit_price)
