"""Domain layer for timebill application.

Services live in their own modules (``timebill.domain.ledger``,
``timebill.domain.recurrence``, ...). They are not re-exported here because
``timebill.database.base`` imports ``timebill.domain.entities``, and loading
the services from this package would import the database layer while it is
still initializing.
"""
