"""Database models for the GSM scheme manager"""
from datetime import datetime
from flask import current_app
from flask_login import UserMixin
from gsm import db, login_manager
from gsm.errors import NotFoundError


@login_manager.user_loader
def load_user(user_id):
    book = current_app.extensions['scheme_book']
    try:
        return LoginOperator(book.get_operator(user_id))
    except NotFoundError:
        return None


class LoginOperator(UserMixin):
    """Session wrapper handed to Flask-Login around an Operator record"""

    def __init__(self, operator):
        self.operator = operator

    def get_id(self):
        return str(self.operator.id)

    def __getattr__(self, name):
        if name == 'operator':
            raise AttributeError(name)
        return getattr(self.operator, name)

    def __repr__(self):
        return f'<LoginOperator {self.operator.username}>'


# Operator Models
class OperatorRecord(db.Model):
    """Login credential subjects"""
    __tablename__ = 'operators'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    email = db.Column(db.String(120))
    password_hash = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(10), nullable=False)
    address = db.Column(db.Text, default='')
    role = db.Column(db.String(10), nullable=False, default='Basic')  # Admin, Basic
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<OperatorRecord {self.username}>'


# Member and Ledger Models
class MemberRecord(db.Model):
    """Scheme member with a total obligation"""
    __tablename__ = 'members'

    id = db.Column(db.String(20), primary_key=True)  # e.g. KHSS-001
    name = db.Column(db.String(200), nullable=False)
    phone = db.Column(db.String(10), nullable=False)
    address = db.Column(db.Text, default='')
    scheme_type = db.Column(db.String(10), nullable=False, index=True)  # KHSS, DSS, Finance
    num_schemes = db.Column(db.Integer, nullable=False, default=1)
    total_amount = db.Column(db.Numeric(15, 2), nullable=False, default=0)
    selected_item = db.Column(db.String(50))  # DSS only
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<MemberRecord {self.id}>'


class PaymentRecord(db.Model):
    """Append-only payment entries"""
    __tablename__ = 'payment_entries'

    id = db.Column(db.Integer, primary_key=True)
    member_id = db.Column(db.String(20), nullable=False, index=True)
    amount = db.Column(db.Numeric(15, 2), nullable=False)
    payment_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
    payment_method = db.Column(db.String(50), default='cash')  # cash, bank_transfer, upi, cheque
    balance_amount = db.Column(db.Numeric(15, 2))  # Balance once this entry is counted
    recorded_by = db.Column(db.String(40))  # Operator id
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<PaymentRecord {self.id}>'


# Settings Models
class SchemeSetting(db.Model):
    """Unit price per scheme type"""
    __tablename__ = 'scheme_settings'

    scheme_type = db.Column(db.String(10), primary_key=True)
    unit_price = db.Column(db.Numeric(15, 2), nullable=False, default=0)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<SchemeSetting {self.scheme_type}={self.unit_price}>'


class SchemeCounter(db.Model):
    """Monotonic member sequence per scheme type"""
    __tablename__ = 'scheme_counters'

    scheme_type = db.Column(db.String(10), primary_key=True)
    last_value = db.Column(db.Integer, nullable=False, default=0)

    def __repr__(self):
        return f'<SchemeCounter {self.scheme_type}:{self.last_value}>'


# Activity Log Model
class ActivityLog(db.Model):
    """Activity log for audit trail"""
    __tablename__ = 'activity_logs'

    id = db.Column(db.Integer, primary_key=True)
    operator_id = db.Column(db.String(40), index=True)
    action = db.Column(db.String(100), nullable=False)
    entity_type = db.Column(db.String(50))  # member, payment, operator, settings
    entity_id = db.Column(db.String(40))
    description = db.Column(db.Text)
    ip_address = db.Column(db.String(50))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f'<ActivityLog {self.action}>'
