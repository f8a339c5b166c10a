from .portfolio_document import PortfolioDocumentRow
