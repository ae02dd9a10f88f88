"""Scheme member and payment forms"""
from flask_wtf import FlaskForm
from wtforms import StringField, SelectField, IntegerField, DateField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, Optional, NumberRange, Length, InputRequired
from gsm.domain import DSS_ITEMS, DEFAULT_DSS_ITEM, KHSS, PAYMENT_METHODS, SCHEME_TYPES
from gsm.utils.validators import TenDigitPhone

class MemberForm(FlaskForm):
    """Member enrolment form"""
    scheme_type = SelectField('Scheme', choices=[(t, t) for t in SCHEME_TYPES], default=KHSS,
                              validators=[DataRequired()])
    name = StringField('Name', validators=[DataRequired(), Length(max=200)])
    phone = StringField('Phone', validators=[DataRequired(), TenDigitPhone()])
    address = TextAreaField('Address', validators=[DataRequired()])
    num_schemes = IntegerField('Number of Schemes', default=1, validators=[InputRequired(), NumberRange(min=1)])
    selected_item = SelectField('Item Selection', choices=[(item, item) for item in DSS_ITEMS],
                                default=DEFAULT_DSS_ITEM, validators=[Optional()])
    submit = SubmitField('Submit')

class PaymentForm(FlaskForm):
    """Payment entry form"""
    # Plain text so the ledger rules decide what counts as a valid amount
    amount = StringField('Amount', validators=[DataRequired()])
    payment_date = DateField('Date', validators=[Optional()])
    method = SelectField('Payment Method', choices=list(PAYMENT_METHODS), default='cash',
                         validators=[DataRequired()])
    submit = SubmitField('Receive Payment')
