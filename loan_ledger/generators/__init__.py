"""Sample data generators."""

from loan_ledger.generators.ledger import LedgerGenerator, PortfolioSize

__all__ = ["LedgerGenerator", "PortfolioSize"]
