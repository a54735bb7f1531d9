"""Ledgergrid: formula-driven financial overview grids from a transaction ledger."""

__version__ = "0.1.0"


# Import main lazily so library users don't pull in the CLI stack
def __getattr__(name):
    if name == "main":
        from ledgergrid.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
