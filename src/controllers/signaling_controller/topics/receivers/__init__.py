from functools import wraps
from tools.logger import *
from tools.contract_validation import check_contract, ContractValidationError


def topic(name):
    """
    Decorator to register a topic handler.
    """

    def wrapper(init):
        log_info(f"Registering topic: {name}")
        return init

    return wrapper


def guarded(name):
    """
    Decorator that logs and drops any unexpected error raised by a callback,
    so one bad event never reaches the transport's error path.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(sid, *args, **kwargs):
            try:
                return await func(sid, *args, **kwargs)
            except Exception as e:
                log_error(f"Error handling '{name}' from {sid}: {e}")

        return wrapper

    return decorator


def validate_payload(contract, name, on_invalid=None):
    """
    Decorator to validate incoming payloads against a contract schema.

    This decorator handles the common validation pattern:
    1. Validates the payload against the contract
    2. Logs a warning and calls on_invalid(sid) if validation fails
    3. Calls the wrapped function if validation succeeds

    Args:
        contract: The contract schema to validate against
        name: The topic name (used in log messages)
        on_invalid: Optional coroutine function notified with the sender sid

    Returns:
        Decorator function
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(sid, message=None, *args, **kwargs):
            try:
                check_contract(contract, message)
            except ContractValidationError as e:
                log_warning(f"Invalid '{name}' payload from {sid}: {e.message}")
                if on_invalid is not None:
                    await on_invalid(sid)
                return None

            return await func(sid, message, *args, **kwargs)

        return wrapper

    return decorator
