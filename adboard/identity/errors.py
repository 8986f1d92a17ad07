from ..exceptions import AdboardException


class IdentityError(AdboardException):
    """Raised with a message that is safe to show to the user."""
    pass


class KeyDecodeError(IdentityError):
    pass


class SignerUnavailableError(IdentityError):
    pass
