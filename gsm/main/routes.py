"""Main routes"""
from flask import current_app, render_template, redirect, request, session, url_for
from flask_login import login_required, current_user
from urllib.parse import urlparse
from gsm.domain import SCHEME_TYPES
from gsm.i18n import LANGUAGES, next_language
from gsm.main import main_bp
from gsm.utils.helpers import get_scheme_book

@main_bp.route('/')
@main_bp.route('/dashboard')
@login_required
def dashboard():
    """Main dashboard"""
    book = get_scheme_book()
    stats = {scheme_type: book.count_members(scheme_type) for scheme_type in SCHEME_TYPES}
    stats['operators'] = len(book.list_operators())

    return render_template('main/dashboard.html',
                         title='Dashboard',
                         stats=stats,
                         recent_members=book.recent_members(limit=5))

@main_bp.route('/language', methods=['POST'])
@main_bp.route('/language/<lang>', methods=['POST'])
def set_language(lang=None):
    """Switch the display language; stored data is unaffected"""
    current = session.get('lang', current_app.config.get('DEFAULT_LANGUAGE', 'en'))
    session['lang'] = lang if lang in LANGUAGES else next_language(current)

    next_page = request.form.get('next') or request.referrer
    if not next_page or urlparse(next_page).netloc not in ('', request.host):
        next_page = url_for('main.index')
    return redirect(next_page)

@main_bp.route('/index')
def index():
    """Redirect to dashboard or login"""
    if current_user.is_authenticated:
        return redirect(url_for('main.dashboard'))
    return redirect(url_for('auth.login'))
