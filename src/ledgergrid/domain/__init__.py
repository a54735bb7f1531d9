"""Domain layer for ledgergrid.

Services are imported from their modules directly (``ledgergrid.domain.overview``
and friends) so that ``ledgergrid.config`` can depend on ``domain.errors``
without a circular import through this package.
"""
