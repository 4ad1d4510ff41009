class ValidationError(ValueError):
    """Raised when user input is rejected before any store call."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
