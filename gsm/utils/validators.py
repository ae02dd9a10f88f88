"""Shared WTForms validators"""
from wtforms.validators import ValidationError
from gsm.ledger import validate_phone

class TenDigitPhone:
    """Phone numbers must be exactly ten digits"""
    def __init__(self, message='Phone number must be exactly 10 digits'):
        self.message = message

    def __call__(self, form, field):
        if not validate_phone((field.data or '').strip()):
            raise ValidationError(self.message)
