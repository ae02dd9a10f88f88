"""Canonical record types shared by the service and every storage backend"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

# Scheme types
KHSS = 'KHSS'
DSS = 'DSS'
FINANCE = 'Finance'
SCHEME_TYPES = (KHSS, DSS, FINANCE)

SCHEME_PREFIXES = {
    KHSS: 'KHSS',
    DSS: 'DSS',
    FINANCE: 'FIN',
}

SCHEME_LABELS = {
    KHSS: 'khss',
    DSS: 'dss',
    FINANCE: 'finance',
}

# Physical rewards offered by the festival/gift scheme
DSS_ITEMS = ('Copper Kudam', 'Kuthu Vizhakku', 'Brass Vessel', 'Silver Coin')
DEFAULT_DSS_ITEM = DSS_ITEMS[0]

PAYMENT_METHODS = (
    ('cash', 'Cash'),
    ('bank_transfer', 'Bank Transfer'),
    ('upi', 'UPI'),
    ('cheque', 'Cheque'),
)
PAYMENT_METHOD_CODES = tuple(code for code, _ in PAYMENT_METHODS)

ROLE_ADMIN = 'Admin'
ROLE_BASIC = 'Basic'
ROLES = (ROLE_ADMIN, ROLE_BASIC)


@dataclass
class Member:
    """An enrolled scheme participant"""
    id: str
    name: str
    phone: str
    address: str
    scheme_type: str
    num_schemes: int
    total_amount: Decimal
    selected_item: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class PaymentEntry:
    """One append-only payment received against a member"""
    id: str
    member_id: str
    amount: Decimal
    date: datetime
    method: str = 'cash'
    balance_amount: Optional[Decimal] = None
    recorded_by: Optional[str] = None


@dataclass
class Operator:
    """A human user of the system"""
    id: str
    name: str
    username: str
    password_hash: str
    phone: str
    role: str = ROLE_BASIC
    email: Optional[str] = None
    address: str = ''
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN


@dataclass
class MemberSummary:
    """A member together with the figures derived from its ledger"""
    member: Member
    paid: Decimal
    balance: Decimal
    entries: List[PaymentEntry] = field(default_factory=list)

    @property
    def last_payment(self):
        return self.entries[-1] if self.entries else None

    @property
    def progress(self):
        """Paid share of the total obligation as a percentage, capped at 100"""
        if not self.member.total_amount:
            return 100 if self.paid > 0 else 0
        percent = float(self.paid / self.member.total_amount * 100)
        return min(max(percent, 0), 100)
