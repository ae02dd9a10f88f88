"""Persistence capability every backend provides"""


class Repository:
    """Stores members, payment entries, operators and scheme settings

    Implementations translate between their own storage shape and the
    canonical records in ``gsm.domain``. Failures are raised as
    ``PersistenceError``; lookups of missing records return ``None``.
    """

    # Members
    def list_members(self, scheme_type=None):
        raise NotImplementedError

    def get_member(self, member_id):
        raise NotImplementedError

    def count_members(self, scheme_type):
        raise NotImplementedError

    def create_member(self, member):
        raise NotImplementedError

    def update_member(self, member_id, patch):
        raise NotImplementedError

    def delete_member(self, member_id):
        raise NotImplementedError

    def next_sequence(self, scheme_type):
        """Increment and return the persisted member counter for a scheme type"""
        raise NotImplementedError

    # Payment entries
    def list_payment_entries(self, member_id):
        """Entries for a member, ascending by date"""
        raise NotImplementedError

    def append_payment_entry(self, entry):
        raise NotImplementedError

    def delete_payment_entries(self, member_id):
        raise NotImplementedError

    # Operators
    def list_operators(self):
        raise NotImplementedError

    def get_operator(self, operator_id):
        raise NotImplementedError

    def find_operator_by_username(self, username):
        raise NotImplementedError

    def create_operator(self, operator):
        raise NotImplementedError

    def update_operator(self, operator_id, patch):
        raise NotImplementedError

    def delete_operator(self, operator_id):
        raise NotImplementedError

    # Scheme settings
    def get_unit_prices(self):
        """Stored unit prices keyed by scheme type; missing types are absent"""
        raise NotImplementedError

    def set_unit_price(self, scheme_type, unit_price):
        raise NotImplementedError
