"""Scheme member and payment routes"""
from flask import render_template, redirect, url_for, flash, request, abort, session
from flask_login import login_required, current_user
from gsm.domain import DSS, SCHEME_LABELS, SCHEME_TYPES
from gsm.errors import NotFoundError, SchemeError, ValidationError
from gsm.i18n import translate
from gsm.schemes import schemes_bp
from gsm.schemes.forms import MemberForm, PaymentForm
from gsm.utils.decorators import admin_required
from gsm.utils.helpers import get_scheme_book, log_activity

def _lang():
    return session.get('lang', 'en')

@schemes_bp.route('/<scheme_type>')
@login_required
def list_members(scheme_type):
    """Members of one scheme type, searchable by name or id"""
    if scheme_type not in SCHEME_TYPES:
        abort(404)

    search = request.args.get('search', '', type=str)
    book = get_scheme_book()
    summaries = [book.summarize(member) for member in book.list_members(scheme_type, search=search)]

    return render_template('schemes/list.html',
                         title=translate(SCHEME_LABELS[scheme_type], _lang()),
                         scheme_type=scheme_type,
                         summaries=summaries,
                         search=search)

@schemes_bp.route('/member/<member_id>', methods=['GET', 'POST'])
@login_required
def view_member(member_id):
    """Member detail with payment history and the payment form"""
    book = get_scheme_book()
    try:
        summary = book.summarize(member_id)
    except NotFoundError:
        abort(404)

    form = PaymentForm()
    if form.validate_on_submit():
        try:
            entry = book.submit_payment(
                member_id,
                form.amount.data,
                payment_date=form.payment_date.data,
                method=form.method.data,
                recorded_by=current_user.id
            )
        except ValidationError as e:
            flash(translate('invalidAmount', _lang()) if e.field == 'amount' else e.message, 'danger')
            return render_template('schemes/view.html', title=summary.member.name,
                                   summary=summary, form=form), 400
        except NotFoundError:
            abort(404)
        except SchemeError as e:
            flash(e.message, 'danger')
            return render_template('schemes/view.html', title=summary.member.name,
                                   summary=summary, form=form), 500

        log_activity(current_user.id, 'record_payment', 'payment', entry.id,
                     f'Received {entry.amount} from {member_id} by {entry.method}')
        flash(translate('paymentReceived', _lang()), 'success')
        # Back to the list with no member selected
        return redirect(url_for('schemes.list_members', scheme_type=summary.member.scheme_type))

    return render_template('schemes/view.html',
                         title=summary.member.name,
                         summary=summary,
                         form=form)

@schemes_bp.route('/add', methods=['GET', 'POST'])
@login_required
@admin_required
def add_member():
    """Enrol a new member"""
    book = get_scheme_book()
    form = MemberForm()
    if request.method == 'GET' and request.args.get('scheme_type') in SCHEME_TYPES:
        form.scheme_type.data = request.args['scheme_type']

    if form.validate_on_submit():
        try:
            member = book.create_member(
                name=form.name.data,
                phone=form.phone.data,
                address=form.address.data,
                scheme_type=form.scheme_type.data,
                num_schemes=form.num_schemes.data,
                selected_item=form.selected_item.data if form.scheme_type.data == DSS else None
            )
        except ValidationError as e:
            field = getattr(form, e.field, None) if e.field else None
            if field is not None:
                field.errors.append(e.message)
            else:
                flash(e.message, 'danger')
            return render_template('schemes/add.html', title='Add Member', form=form,
                                   prices=book.unit_prices()), 400
        except SchemeError as e:
            flash(e.message, 'danger')
            return render_template('schemes/add.html', title='Add Member', form=form,
                                   prices=book.unit_prices()), 500

        log_activity(current_user.id, 'create_member', 'member', member.id,
                     f'Created member {member.id}: {member.name}')
        flash(f"{translate('success', _lang())} ID: {member.id}", 'success')
        return redirect(url_for('schemes.add_member'))

    return render_template('schemes/add.html', title='Add Member', form=form, prices=book.unit_prices())
