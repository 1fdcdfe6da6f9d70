from catalog_ingest.sessions.models import ResultSummary


class MaterializationError(Exception):
    """Raised when catalog writes fail partway through a draft.

    Entities written before the failure stay in the catalog; `partial_summary`
    reports them.
    """

    code = "materialization_failed"

    def __init__(self, message: str, partial_summary: ResultSummary) -> None:
        super().__init__(message)
        self.partial_summary = partial_summary
