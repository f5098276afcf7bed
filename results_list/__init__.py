"""Live results list engine: filters, groups and sorts SARIF analysis results for display."""

from results_list.services.controller import ResultsListController

__version__ = "0.1.0"

__all__ = ["ResultsListController", "__version__"]
