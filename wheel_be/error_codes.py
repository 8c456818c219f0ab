class ErrorCodes:
    # Generic
    GENERIC_ERROR = "GENERIC_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

    # Betting
    INVALID_BET = "INVALID_BET"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    BETS_LOCKED = "BETS_LOCKED"

    # Wheel rounds
    GAME_LOGIC_ERROR = "GAME_LOGIC_ERROR"
    SPIN_REJECTED = "SPIN_REJECTED"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SESSION_LIMIT_REACHED = "SESSION_LIMIT_REACHED"
