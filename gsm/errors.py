"""Error types raised by the scheme book and its storage backends"""


class SchemeError(Exception):
    """Base class for every failure scoped to a single operator action"""

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    default_message = 'Operation failed'


class ValidationError(SchemeError):
    """Input rejected before any write was attempted"""
    default_message = 'Invalid input'

    def __init__(self, message=None, field=None):
        super().__init__(message)
        self.field = field


class InvalidAmount(ValidationError):
    default_message = 'Invalid amount.'

    def __init__(self, message=None, field='amount'):
        super().__init__(message, field=field)


class AuthError(SchemeError):
    # Never says whether the username or the password was wrong
    default_message = 'Invalid credentials'


class PersistenceError(SchemeError):
    default_message = 'Could not save changes'


class NotFoundError(SchemeError):
    default_message = 'Record not found'

    def __init__(self, entity, key):
        super().__init__(f'{entity} {key} not found')
        self.entity = entity
        self.key = key
