class EdgarCardsError(Exception):
    """Base error for this service."""


class UpstreamError(EdgarCardsError):
    """
    An EDGAR endpoint stayed unreachable through the retry budget,
    or answered with a body we could not parse.
    """

    def __init__(self, url: str, reason: str):
        super().__init__(f"{reason} ({url})")
        self.url = url
        self.reason = reason
