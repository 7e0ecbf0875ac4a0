class DamApiError(Exception):
    """
    Raised when the DAM answers with something other than the expected JSON
    document.
    """

    def __init__(self, message, response=None):
        super().__init__(message)
        self.response = response


class UnableToConnectError(DamApiError):
    """
    Raised when the DAM cannot be reached at all. ``user_message`` is safe to
    show to site staff.
    """

    user_message = (
        "Unable to connect to the DAM. Check if the service is running and the "
        "configuration is correct."
    )
