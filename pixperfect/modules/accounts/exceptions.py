"""Account domain specific exceptions."""


class AccountError(Exception):
    """Base class for account domain errors."""


class AccountAlreadyExistsError(AccountError):
    """Raised when attempting to create an account with duplicate username."""


class InvalidAccountInputError(AccountError):
    """Raised when sign-up or log-in input fails validation."""


class InvalidCredentialsError(AccountError):
    """Raised when a username/password pair does not match any account."""
