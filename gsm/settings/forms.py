"""Settings forms"""
from flask_wtf import FlaskForm
from wtforms import StringField, SelectField, IntegerField, DecimalField, TextAreaField, PasswordField, SubmitField
from wtforms.validators import DataRequired, Email, Optional, NumberRange, Length, InputRequired
from gsm.domain import DSS_ITEMS, ROLES, ROLE_BASIC
from gsm.utils.validators import TenDigitPhone

class SchemePricesForm(FlaskForm):
    """Unit price per scheme type"""
    KHSS = DecimalField('KHSS', validators=[InputRequired(), NumberRange(min=0)], places=2)
    DSS = DecimalField('DSS', validators=[InputRequired(), NumberRange(min=0)], places=2)
    Finance = DecimalField('Finance', validators=[InputRequired(), NumberRange(min=0)], places=2)
    submit = SubmitField('Save Settings')

class OperatorForm(FlaskForm):
    """Operator creation form"""
    name = StringField('Full Name', validators=[DataRequired(), Length(max=200)])
    username = StringField('Username', validators=[DataRequired(), Length(max=80)])
    password = PasswordField('Password', validators=[DataRequired()])
    phone = StringField('Phone', validators=[DataRequired(), TenDigitPhone()])
    email = StringField('Email', validators=[Optional(), Email(), Length(max=120)])
    address = TextAreaField('Address', validators=[Optional()])
    role = SelectField('Role', choices=[(role, role) for role in ROLES], default=ROLE_BASIC)
    submit = SubmitField('Save Operator')

class OperatorEditForm(FlaskForm):
    """Operator edit form"""
    name = StringField('Full Name', validators=[DataRequired(), Length(max=200)])
    username = StringField('Username', validators=[DataRequired(), Length(max=80)])
    password = PasswordField('New Password (leave blank to keep)', validators=[Optional()])
    phone = StringField('Phone', validators=[DataRequired(), TenDigitPhone()])
    email = StringField('Email', validators=[Optional(), Email(), Length(max=120)])
    address = TextAreaField('Address', validators=[Optional()])
    role = SelectField('Role', choices=[(role, role) for role in ROLES])
    submit = SubmitField('Update Operator')

class MemberEditForm(FlaskForm):
    """Administrative member edit form"""
    name = StringField('Name', validators=[DataRequired(), Length(max=200)])
    phone = StringField('Phone', validators=[DataRequired(), TenDigitPhone()])
    address = TextAreaField('Address', validators=[Optional()])
    num_schemes = IntegerField('Number of Schemes', validators=[InputRequired(), NumberRange(min=1)])
    selected_item = SelectField('Item Selection', choices=[(item, item) for item in DSS_ITEMS],
                                validators=[Optional()])
    submit = SubmitField('Save')
