"""Authentication routes"""
from flask import render_template, redirect, url_for, flash, request, session
from flask_login import login_user, logout_user, current_user, login_required
from urllib.parse import urlparse
from gsm.auth import auth_bp
from gsm.auth.forms import LoginForm, RegisterForm, ChangePasswordForm
from gsm.errors import AuthError, SchemeError, ValidationError
from gsm.i18n import translate
from gsm.models import LoginOperator
from gsm.utils.helpers import get_scheme_book, log_activity

@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Operator login"""
    if current_user.is_authenticated:
        return redirect(url_for('main.dashboard'))

    form = LoginForm()
    if form.validate_on_submit():
        try:
            operator = get_scheme_book().authenticate(form.username.data, form.password.data)
        except AuthError:
            flash(translate('invalidCredentials', session.get('lang', 'en')), 'danger')
            return render_template('auth/login.html', title='Sign In', form=form), 401

        login_user(LoginOperator(operator))
        log_activity(operator.id, 'login', 'operator', operator.id, f'Operator {operator.username} logged in')

        next_page = request.args.get('next')
        if not next_page or urlparse(next_page).netloc != '':
            next_page = url_for('main.dashboard')

        flash(f'Welcome back, {operator.name}!', 'success')
        return redirect(next_page)

    return render_template('auth/login.html', title='Sign In', form=form)

@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    """Operator self-registration"""
    if current_user.is_authenticated:
        return redirect(url_for('main.dashboard'))

    form = RegisterForm()
    if form.validate_on_submit():
        try:
            operator = get_scheme_book().register(
                name=form.name.data,
                username=form.username.data,
                password=form.password.data,
                phone=form.phone.data,
                role=form.role.data,
                email=form.email.data
            )
        except ValidationError as e:
            field = getattr(form, e.field, None) if e.field else None
            if field is not None:
                field.errors.append(e.message)
            else:
                flash(e.message, 'danger')
            return render_template('auth/register.html', title='Register', form=form), 400
        except SchemeError as e:
            flash(e.message, 'danger')
            return render_template('auth/register.html', title='Register', form=form), 500

        log_activity(operator.id, 'register', 'operator', operator.id,
                     f'Operator {operator.username} registered with role {operator.role}')
        flash(translate('success', session.get('lang', 'en')), 'success')
        return redirect(url_for('auth.login'))

    return render_template('auth/register.html', title='Register', form=form)

@auth_bp.route('/logout')
def logout():
    """Operator logout"""
    if current_user.is_authenticated:
        log_activity(current_user.id, 'logout', 'operator', current_user.id,
                     f'Operator {current_user.username} logged out')

    logout_user()
    flash('You have been logged out successfully.', 'info')
    return redirect(url_for('auth.login'))

@auth_bp.route('/change-password', methods=['GET', 'POST'])
@login_required
def change_password():
    """Change operator password"""
    form = ChangePasswordForm()
    if form.validate_on_submit():
        book = get_scheme_book()
        try:
            book.authenticate(current_user.username, form.current_password.data)
        except AuthError:
            flash('Current password is incorrect', 'danger')
            return redirect(url_for('auth.change_password'))

        try:
            book.update_operator(current_user.id, password=form.new_password.data)
        except SchemeError as e:
            flash(e.message, 'danger')
            return redirect(url_for('auth.change_password'))

        log_activity(current_user.id, 'change_password', 'operator', current_user.id,
                     f'Operator {current_user.username} changed password')
        flash('Your password has been changed successfully!', 'success')
        return redirect(url_for('main.dashboard'))

    return render_template('auth/change_password.html', title='Change Password', form=form)
