"""Settings routes: scheme prices, operator and member management"""
from flask import render_template, redirect, url_for, flash, request, abort, session
from flask_login import login_required, current_user
from gsm.domain import DSS, SCHEME_TYPES
from gsm.errors import NotFoundError, SchemeError, ValidationError
from gsm.i18n import translate
from gsm.settings import settings_bp
from gsm.settings.forms import SchemePricesForm, OperatorForm, OperatorEditForm, MemberEditForm
from gsm.utils.decorators import admin_required
from gsm.utils.helpers import get_scheme_book, log_activity

VIEW_TYPES = ('Login',) + SCHEME_TYPES

def _attach_error(form, error):
    """Show a service validation error inline, or flash it"""
    field = getattr(form, error.field, None) if error.field else None
    if field is not None:
        field.errors.append(error.message)
    else:
        flash(error.message, 'danger')

@settings_bp.route('/prices', methods=['GET', 'POST'])
@login_required
@admin_required
def scheme_prices():
    """Per-scheme unit prices; applied to new members and numSchemes edits only"""
    book = get_scheme_book()
    form = SchemePricesForm(data=book.unit_prices())

    if form.validate_on_submit():
        prices = {scheme_type: getattr(form, scheme_type).data for scheme_type in SCHEME_TYPES}
        try:
            book.update_unit_prices(prices)
        except ValidationError as e:
            _attach_error(form, e)
            return render_template('settings/prices.html', title='Scheme Settings', form=form), 400
        except SchemeError as e:
            flash(e.message, 'danger')
            return render_template('settings/prices.html', title='Scheme Settings', form=form), 500

        log_activity(current_user.id, 'update_scheme_prices', 'settings', None,
                     ', '.join(f'{k}={v}' for k, v in prices.items()))
        flash(translate('settingsSaved', session.get('lang', 'en')), 'success')
        return redirect(url_for('settings.scheme_prices'))

    return render_template('settings/prices.html', title='Scheme Settings', form=form)

@settings_bp.route('/users')
@login_required
@admin_required
def user_details():
    """Operators or members of one scheme type, with search"""
    view_type = request.args.get('view', 'Login', type=str)
    if view_type not in VIEW_TYPES:
        view_type = 'Login'
    search = request.args.get('search', '', type=str)
    book = get_scheme_book()

    if view_type == 'Login':
        operators = book.list_operators(search=search)
        summaries = []
    else:
        operators = []
        summaries = [book.summarize(m) for m in book.list_members(view_type) if search.lower() in m.name.lower()]

    return render_template('settings/users.html',
                         title='User Details',
                         view_type=view_type,
                         view_types=VIEW_TYPES,
                         operators=operators,
                         summaries=summaries,
                         search=search)

@settings_bp.route('/operators/add', methods=['GET', 'POST'])
@login_required
@admin_required
def add_operator():
    """Create an operator with any role"""
    form = OperatorForm()

    if form.validate_on_submit():
        try:
            operator = get_scheme_book().create_operator(
                name=form.name.data,
                username=form.username.data,
                password=form.password.data,
                phone=form.phone.data,
                role=form.role.data,
                email=form.email.data,
                address=form.address.data
            )
        except ValidationError as e:
            _attach_error(form, e)
            return render_template('settings/add_operator.html', title='Add Operator', form=form), 400
        except SchemeError as e:
            flash(e.message, 'danger')
            return render_template('settings/add_operator.html', title='Add Operator', form=form), 500

        log_activity(current_user.id, 'create_operator', 'operator', operator.id,
                     f'Created operator {operator.username} ({operator.role})')
        flash(f'Operator {operator.username} created successfully!', 'success')
        return redirect(url_for('settings.add_operator'))

    return render_template('settings/add_operator.html', title='Add Operator', form=form)

@settings_bp.route('/operators/<operator_id>/edit', methods=['GET', 'POST'])
@login_required
@admin_required
def edit_operator(operator_id):
    """Edit operator"""
    book = get_scheme_book()
    try:
        operator = book.get_operator(operator_id)
    except NotFoundError:
        abort(404)
    form = OperatorEditForm(obj=operator)

    if form.validate_on_submit():
        try:
            book.update_operator(
                operator_id,
                name=form.name.data,
                username=form.username.data,
                phone=form.phone.data,
                email=form.email.data,
                address=form.address.data,
                role=form.role.data,
                password=form.password.data
            )
        except NotFoundError:
            abort(404)
        except ValidationError as e:
            _attach_error(form, e)
            return render_template('settings/edit_operator.html', title='Edit Operator',
                                   form=form, operator=operator), 400
        except SchemeError as e:
            flash(e.message, 'danger')
            return render_template('settings/edit_operator.html', title='Edit Operator',
                                   form=form, operator=operator), 500

        log_activity(current_user.id, 'update_operator', 'operator', operator_id,
                     f'Updated operator {form.username.data}')
        flash('Operator updated successfully!', 'success')
        return redirect(url_for('settings.user_details'))

    return render_template('settings/edit_operator.html', title='Edit Operator', form=form, operator=operator)

@settings_bp.route('/operators/<operator_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete_operator(operator_id):
    """Delete operator"""
    try:
        get_scheme_book().delete_operator(operator_id, acting_operator_id=current_user.id)
    except NotFoundError:
        abort(404)
    except SchemeError as e:
        flash(e.message, 'danger')
        return redirect(url_for('settings.user_details'))

    log_activity(current_user.id, 'delete_operator', 'operator', operator_id, f'Deleted operator {operator_id}')
    flash('Operator deleted successfully!', 'success')
    return redirect(url_for('settings.user_details'))

@settings_bp.route('/members/<member_id>/edit', methods=['GET', 'POST'])
@login_required
@admin_required
def edit_member(member_id):
    """Edit member contact details or number of schemes"""
    book = get_scheme_book()
    try:
        member = book.get_member(member_id)
    except NotFoundError:
        abort(404)
    form = MemberEditForm(obj=member)

    if form.validate_on_submit():
        patch = dict(
            name=form.name.data,
            phone=form.phone.data,
            address=form.address.data,
            num_schemes=form.num_schemes.data
        )
        if member.scheme_type == DSS and form.selected_item.data:
            patch['selected_item'] = form.selected_item.data
        try:
            updated = book.edit_member(member_id, **patch)
        except NotFoundError:
            abort(404)
        except ValidationError as e:
            _attach_error(form, e)
            return render_template('settings/edit_member.html', title='Edit Member',
                                   form=form, member=member, unit_price=book.unit_price(member.scheme_type)), 400
        except SchemeError as e:
            flash(e.message, 'danger')
            return render_template('settings/edit_member.html', title='Edit Member',
                                   form=form, member=member, unit_price=book.unit_price(member.scheme_type)), 500

        log_activity(current_user.id, 'update_member', 'member', member_id,
                     f'Updated member {member_id}: {updated.num_schemes} schemes, total {updated.total_amount}')
        flash('Member updated successfully!', 'success')
        return redirect(url_for('settings.user_details', view=member.scheme_type))

    return render_template('settings/edit_member.html', title='Edit Member',
                         form=form, member=member, unit_price=book.unit_price(member.scheme_type))

@settings_bp.route('/members/<member_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete_member(member_id):
    """Delete member; payment entries are kept unless cascade is requested"""
    book = get_scheme_book()
    try:
        member = book.get_member(member_id)
        removed = book.delete_member(member_id, cascade=request.form.get('cascade') == '1')
    except NotFoundError:
        abort(404)
    except SchemeError as e:
        flash(e.message, 'danger')
        return redirect(url_for('settings.user_details'))

    log_activity(current_user.id, 'delete_member', 'member', member_id,
                 f'Deleted member {member_id} ({removed} payment entries removed)')
    flash('Member deleted successfully!', 'success')
    return redirect(url_for('settings.user_details', view=member.scheme_type))
