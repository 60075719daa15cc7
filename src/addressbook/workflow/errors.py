NAMES_REQUIRED = "First name and last name fields mandatory!"
SELECTION_REQUIRED = "No address selected, try to select an address or find one if you haven't"
SELECTION_NOT_FOUND = "Selected address not found"
LOOKUP_FAILED = "Failed to fetch addresses"


class ValidationError(Exception):
    """User input rejected by the capture workflow."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
