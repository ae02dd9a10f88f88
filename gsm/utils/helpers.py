"""Helper functions"""
from decimal import Decimal
from flask import current_app, has_request_context, request
from gsm import db
from gsm.domain import FINANCE, DSS, KHSS, ROLE_ADMIN, ROLE_BASIC
from gsm.models import ActivityLog

# (label key, endpoint, endpoint kwargs, roles allowed)
MENU_ITEMS = [
    ('dashboard', 'main.dashboard', {}, (ROLE_ADMIN, ROLE_BASIC)),
    ('khss', 'schemes.list_members', {'scheme_type': KHSS}, (ROLE_ADMIN, ROLE_BASIC)),
    ('dss', 'schemes.list_members', {'scheme_type': DSS}, (ROLE_ADMIN, ROLE_BASIC)),
    ('finance', 'schemes.list_members', {'scheme_type': FINANCE}, (ROLE_ADMIN, ROLE_BASIC)),
    ('addUser', 'schemes.add_member', {}, (ROLE_ADMIN,)),
    ('addLoginUser', 'settings.add_operator', {}, (ROLE_ADMIN,)),
    ('userDetails', 'settings.user_details', {}, (ROLE_ADMIN,)),
    ('schemeSettings', 'settings.scheme_prices', {}, (ROLE_ADMIN,)),
]

def get_scheme_book():
    """The scheme book wired up by the application factory"""
    return current_app.extensions['scheme_book']

def visible_menu(user):
    """Menu entries the given operator may see"""
    if user is None or not user.is_authenticated:
        return []
    return [item for item in MENU_ITEMS if user.role in item[3]]

def format_currency(amount, currency_symbol=None):
    """Format amount as currency"""
    if amount is None:
        amount = Decimal('0')
    symbol = currency_symbol or current_app.config.get('DEFAULT_CURRENCY_SYMBOL', '₹')
    sign = '-' if amount < 0 else ''
    return f"{sign}{symbol}{abs(amount):,.2f}"

def log_activity(operator_id, action, entity_type=None, entity_id=None, description=None):
    """Write an audit row for an operator action"""
    log = ActivityLog(
        operator_id=str(operator_id) if operator_id is not None else None,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        description=description,
        ip_address=request.remote_addr if has_request_context() else None
    )
    db.session.add(log)
    db.session.commit()
    current_app.logger.info('%s by operator %s: %s', action, operator_id, description)
