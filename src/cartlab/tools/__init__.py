"""Developer tooling: opt-in timing hooks enabled with ``CARTLAB_DEBUG=1``."""
