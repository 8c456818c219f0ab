from wheel_be.error_codes import ErrorCodes

class AppException(Exception):
    def __init__(self, error_code, status_message, status_code, details=None, action_button=None):
        super().__init__(status_message)
        self.error_code = error_code
        self.status_message = status_message
        self.status_code = status_code
        self.details = details if details is not None else {}
        self.action_button = action_button if action_button is not None else {}

class ValidationException(AppException):
    def __init__(self, status_message="Validation failed", details=None, action_button=None, error_code=ErrorCodes.VALIDATION_ERROR):
        super().__init__(
            error_code=error_code,
            status_message=status_message,
            status_code=422,
            details=details,
            action_button=action_button
        )

class NotFoundException(AppException):
    def __init__(self, status_message="Resource not found", details=None, action_button=None, error_code=ErrorCodes.NOT_FOUND):
        super().__init__(
            error_code=error_code,
            status_message=status_message,
            status_code=404,
            details=details,
            action_button=action_button
        )

class InsufficientFundsException(AppException):
    def __init__(self, status_message="Insufficient funds", details=None, action_button=None):
        super().__init__(
            error_code=ErrorCodes.INSUFFICIENT_FUNDS,
            status_message=status_message,
            status_code=400,
            details=details,
            action_button=action_button
        )

class SpinRejectedException(AppException):
    """A spin was requested with nothing staked or while a round is in flight."""
    def __init__(self, status_message="Spin rejected", details=None, action_button=None):
        super().__init__(
            error_code=ErrorCodes.SPIN_REJECTED,
            status_message=status_message,
            status_code=409,
            details=details,
            action_button=action_button
        )

class BetsLockedException(AppException):
    """Wagers cannot change while the outer ring is spinning."""
    def __init__(self, status_message="Bets are locked while the wheel is spinning", details=None, action_button=None):
        super().__init__(
            error_code=ErrorCodes.BETS_LOCKED,
            status_message=status_message,
            status_code=409,
            details=details,
            action_button=action_button
        )

class SessionLimitException(AppException):
    def __init__(self, status_message="Too many active sessions", details=None, action_button=None):
        super().__init__(
            error_code=ErrorCodes.SESSION_LIMIT_REACHED,
            status_message=status_message,
            status_code=503,
            details=details,
            action_button=action_button
        )

class GameLogicException(AppException):
    def __init__(self, status_message="Game logic error", details=None, action_button=None, status_code=400):
        super().__init__(
            error_code=ErrorCodes.GAME_LOGIC_ERROR,
            status_message=status_message,
            status_code=status_code, # Can be 400 or 500
            details=details,
            action_button=action_button
        )
