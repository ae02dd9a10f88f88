"""Scheme book: the application state container

Owns members, payment entries, operators and scheme settings through an
injected repository and exposes the operations the views call.
"""
import logging
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from werkzeug.security import check_password_hash, generate_password_hash
from gsm import ledger
from gsm.domain import (DEFAULT_DSS_ITEM, DSS, DSS_ITEMS, PAYMENT_METHOD_CODES, ROLE_ADMIN,
                        ROLE_BASIC, ROLES, SCHEME_TYPES, Member, MemberSummary, Operator,
                        PaymentEntry)
from gsm.errors import AuthError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

BALANCE_POLICIES = ('recompute', 'snapshot')
ID_ALLOCATIONS = ('counter', 'count')


def normalize_username(username):
    return (username or '').strip().lower()


class SchemeBook:
    """Public interface for every member, ledger and operator operation"""

    def __init__(self, repository, default_prices=None, balance_policy='recompute',
                 id_allocation='counter', allow_self_registered_admin=True,
                 initial_admin=None):
        if balance_policy not in BALANCE_POLICIES:
            raise ValueError(f'Unknown balance policy: {balance_policy}')
        if id_allocation not in ID_ALLOCATIONS:
            raise ValueError(f'Unknown id allocation: {id_allocation}')
        self.repository = repository
        self.default_prices = {key: Decimal(str(value)) for key, value in (default_prices or {}).items()}
        self.balance_policy = balance_policy
        self.id_allocation = id_allocation
        self.allow_self_registered_admin = allow_self_registered_admin
        self.initial_admin = initial_admin

    @classmethod
    def from_config(cls, repository, config):
        return cls(
            repository,
            default_prices=config.get('DEFAULT_SCHEME_PRICES'),
            balance_policy=config.get('BALANCE_POLICY', 'recompute'),
            id_allocation=config.get('ID_ALLOCATION', 'counter'),
            allow_self_registered_admin=config.get('ALLOW_SELF_REGISTERED_ADMIN', True),
            initial_admin=(config.get('INITIAL_ADMIN_USERNAME'), config.get('INITIAL_ADMIN_PASSWORD')),
        )

    def seed(self):
        """Store default unit prices and the initial admin when missing"""
        stored = self.repository.get_unit_prices()
        for scheme_type in SCHEME_TYPES:
            if scheme_type not in stored:
                self.repository.set_unit_price(scheme_type, self.default_prices.get(scheme_type, Decimal('0')))

        created = None
        if self.initial_admin and self.initial_admin[0] and not self.repository.list_operators():
            username, password = self.initial_admin
            created = self.repository.create_operator(Operator(
                id='',
                name='System Admin',
                username=normalize_username(username),
                password_hash=generate_password_hash(password),
                phone='0000000000',
                role=ROLE_ADMIN,
                address='System',
            ))
            logger.info('Seeded initial admin operator %s', created.username)
        return created

    # Scheme settings
    def unit_prices(self):
        prices = {scheme_type: self.default_prices.get(scheme_type, Decimal('0')) for scheme_type in SCHEME_TYPES}
        prices.update(self.repository.get_unit_prices())
        return prices

    def unit_price(self, scheme_type):
        self._check_scheme_type(scheme_type)
        return self.unit_prices()[scheme_type]

    def update_unit_prices(self, prices):
        """Save new unit prices; existing members keep their totals"""
        cleaned = {}
        for scheme_type, value in prices.items():
            self._check_scheme_type(scheme_type)
            try:
                price = Decimal(str(value))
            except (InvalidOperation, ValueError):
                raise ValidationError('Unit price must be a number', field=scheme_type)
            if not price.is_finite() or price < 0:
                raise ValidationError('Unit price cannot be negative', field=scheme_type)
            if price.normalize().as_tuple().exponent < -ledger.MONEY_PLACES:
                raise ValidationError('Unit price cannot have more than 2 decimal places', field=scheme_type)
            cleaned[scheme_type] = price
        for scheme_type, price in cleaned.items():
            self.repository.set_unit_price(scheme_type, price)
        logger.info('Scheme unit prices updated: %s', {k: str(v) for k, v in cleaned.items()})
        return self.unit_prices()

    # Members
    def list_members(self, scheme_type=None, search=''):
        if scheme_type:
            self._check_scheme_type(scheme_type)
        members = self.repository.list_members(scheme_type)
        term = (search or '').strip().lower()
        if term:
            members = [m for m in members if term in m.name.lower() or term in m.id.lower()]
        return members

    def count_members(self, scheme_type):
        return self.repository.count_members(scheme_type)

    def get_member(self, member_id):
        member = self.repository.get_member(member_id)
        if member is None:
            raise NotFoundError('Member', member_id)
        return member

    def allocate_member_id(self, scheme_type):
        """Next identifier for a scheme type under the configured policy"""
        self._check_scheme_type(scheme_type)
        if self.id_allocation == 'count':
            existing = self.repository.count_members(scheme_type)
        else:
            existing = self.repository.next_sequence(scheme_type) - 1
        return ledger.allocate_member_id(scheme_type, existing)

    def create_member(self, name, phone, address, scheme_type, num_schemes=1, selected_item=None):
        self._check_scheme_type(scheme_type)
        name = self._required(name, 'name')
        phone = self._phone(phone)
        count = ledger.parse_num_schemes(num_schemes)

        if scheme_type == DSS:
            selected_item = selected_item or DEFAULT_DSS_ITEM
            if selected_item not in DSS_ITEMS:
                raise ValidationError(f'Unknown item: {selected_item}', field='selected_item')
        else:
            selected_item = None

        member = Member(
            id=self.allocate_member_id(scheme_type),
            name=name,
            phone=phone,
            address=(address or '').strip(),
            scheme_type=scheme_type,
            num_schemes=count,
            total_amount=ledger.scheme_total(self.unit_price(scheme_type), count),
            selected_item=selected_item,
        )
        created = self.repository.create_member(member)
        logger.info('Created member %s (%s x%d)', created.id, scheme_type, count)
        return created

    def edit_member(self, member_id, **patch):
        """Change contact details or the number of schemes

        A changed ``num_schemes`` recomputes ``total_amount`` at today's unit
        price, not the price the member originally joined at.
        """
        member = self.get_member(member_id)
        blocked = {'id', 'scheme_type', 'total_amount', 'created_at'} & set(patch)
        if blocked:
            raise ValidationError(f'Cannot change {", ".join(sorted(blocked))}', field=sorted(blocked)[0])

        changes = {}
        if 'name' in patch:
            changes['name'] = self._required(patch['name'], 'name')
        if 'phone' in patch:
            changes['phone'] = self._phone(patch['phone'])
        if 'address' in patch:
            changes['address'] = (patch['address'] or '').strip()
        if 'selected_item' in patch and member.scheme_type == DSS:
            if patch['selected_item'] not in DSS_ITEMS:
                raise ValidationError(f'Unknown item: {patch["selected_item"]}', field='selected_item')
            changes['selected_item'] = patch['selected_item']
        if 'num_schemes' in patch:
            count = ledger.parse_num_schemes(patch['num_schemes'])
            if count != member.num_schemes:
                changes['num_schemes'] = count
                changes['total_amount'] = ledger.scheme_total(self.unit_price(member.scheme_type), count)

        if not changes:
            return member
        updated = self.repository.update_member(member_id, changes)
        if updated is None:
            raise NotFoundError('Member', member_id)
        logger.info('Edited member %s: %s', member_id, ', '.join(sorted(changes)))
        return updated

    def delete_member(self, member_id, cascade=False):
        """Remove a member; payment entries stay unless ``cascade`` is set"""
        if not self.repository.delete_member(member_id):
            raise NotFoundError('Member', member_id)
        removed = self.repository.delete_payment_entries(member_id) if cascade else 0
        logger.info('Deleted member %s (%d payment entries removed)', member_id, removed)
        return removed

    # Ledger
    def payment_history(self, member_id):
        return ledger.sort_entries(self.repository.list_payment_entries(member_id))

    def submit_payment(self, member_id, amount, payment_date=None, method='cash', recorded_by=None):
        amount = ledger.parse_amount(amount)
        if method not in PAYMENT_METHOD_CODES:
            raise ValidationError(f'Unknown payment method: {method}', field='method')
        member = self.get_member(member_id)

        prior = ledger.total_paid(self.repository.list_payment_entries(member_id))
        entry = PaymentEntry(
            id='',
            member_id=member.id,
            amount=amount,
            date=self._payment_datetime(payment_date),
            method=method,
            balance_amount=ledger.balance_after(member.total_amount, prior, amount),
            recorded_by=str(recorded_by) if recorded_by is not None else None,
        )
        saved = self.repository.append_payment_entry(entry)
        logger.info('Recorded payment %s of %s against %s', saved.id, amount, member.id)
        return saved

    def summarize(self, member):
        """Paid and balance for a member, derived from its ledger on every call"""
        if not isinstance(member, Member):
            member = self.get_member(member)
        entries = self.payment_history(member.id)
        paid, balance = ledger.project(member, entries, use_snapshot=self.balance_policy == 'snapshot')
        return MemberSummary(member=member, paid=paid, balance=balance, entries=entries)

    def recent_members(self, limit=5):
        members = sorted(self.repository.list_members(), key=lambda m: m.created_at)
        return [self.summarize(member) for member in reversed(members[-limit:])] if limit else []

    # Operators
    def authenticate(self, username, password):
        operator = self.repository.find_operator_by_username(normalize_username(username))
        if operator is None or not password or not check_password_hash(operator.password_hash, password):
            raise AuthError()
        return operator

    def register(self, name, username, password, phone, role=ROLE_BASIC, email=None, address=''):
        """Self-registration from the sign-up page"""
        if role == ROLE_ADMIN and not self.allow_self_registered_admin:
            logger.warning('Self-registered admin request for %s downgraded to Basic', username)
            role = ROLE_BASIC
        return self.create_operator(name, username, password, phone, role=role, email=email, address=address)

    def create_operator(self, name, username, password, phone, role=ROLE_BASIC, email=None, address=''):
        name = self._required(name, 'name')
        username = normalize_username(self._required(username, 'username'))
        password = self._required(password, 'password', strip=False)
        phone = self._phone(phone)
        if role not in ROLES:
            raise ValidationError(f'Unknown role: {role}', field='role')
        if self.repository.find_operator_by_username(username) is not None:
            raise ValidationError('Username is already taken', field='username')

        operator = self.repository.create_operator(Operator(
            id='',
            name=name,
            username=username,
            password_hash=generate_password_hash(password),
            phone=phone,
            role=role,
            email=email or None,
            address=(address or '').strip(),
        ))
        logger.info('Created operator %s with role %s', operator.username, operator.role)
        return operator

    def list_operators(self, search=''):
        operators = self.repository.list_operators()
        term = (search or '').strip().lower()
        if term:
            operators = [o for o in operators if term in o.name.lower() or term in o.username]
        return operators

    def get_operator(self, operator_id):
        operator = self.repository.get_operator(operator_id)
        if operator is None:
            raise NotFoundError('Operator', operator_id)
        return operator

    def update_operator(self, operator_id, **patch):
        operator = self.get_operator(operator_id)
        changes = {}
        if 'name' in patch:
            changes['name'] = self._required(patch['name'], 'name')
        if 'username' in patch:
            username = normalize_username(self._required(patch['username'], 'username'))
            existing = self.repository.find_operator_by_username(username)
            if existing is not None and existing.id != operator.id:
                raise ValidationError('Username is already taken', field='username')
            changes['username'] = username
        if 'phone' in patch:
            changes['phone'] = self._phone(patch['phone'])
        if 'address' in patch:
            changes['address'] = (patch['address'] or '').strip()
        if 'email' in patch:
            changes['email'] = patch['email'] or None
        if 'role' in patch:
            if patch['role'] not in ROLES:
                raise ValidationError(f'Unknown role: {patch["role"]}', field='role')
            changes['role'] = patch['role']
        if patch.get('password'):
            changes['password_hash'] = generate_password_hash(patch['password'])

        if not changes:
            return operator
        updated = self.repository.update_operator(operator_id, changes)
        if updated is None:
            raise NotFoundError('Operator', operator_id)
        logger.info('Updated operator %s: %s', updated.username, ', '.join(sorted(changes)))
        return updated

    def delete_operator(self, operator_id, acting_operator_id=None):
        if acting_operator_id is not None and str(acting_operator_id) == str(operator_id):
            raise ValidationError('You cannot delete your own account', field='id')
        if not self.repository.delete_operator(operator_id):
            raise NotFoundError('Operator', operator_id)
        logger.info('Deleted operator %s', operator_id)

    # Helpers
    @staticmethod
    def _check_scheme_type(scheme_type):
        if scheme_type not in SCHEME_TYPES:
            raise ValidationError(f'Unknown scheme type: {scheme_type}', field='scheme_type')

    @staticmethod
    def _required(value, field, strip=True):
        text = value.strip() if isinstance(value, str) else value
        if not text:
            raise ValidationError(f'{field.replace("_", " ").capitalize()} is required', field=field)
        return text if strip else value

    @staticmethod
    def _phone(phone):
        phone = (phone or '').strip()
        if not ledger.validate_phone(phone):
            raise ValidationError('Phone number must be exactly 10 digits', field='phone')
        return phone

    @staticmethod
    def _payment_datetime(value):
        if value is None or value == '':
            return datetime.utcnow()
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, datetime.utcnow().time() if value == datetime.utcnow().date() else time.min)
        raise ValidationError('Invalid payment date', field='payment_date')

