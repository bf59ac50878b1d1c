class BaseType:

    def __init__(self):
        raise Exception("Cannot instantiate")

    @staticmethod
    def validate():
        raise NotImplementedError("Subclasses should implement this!")


class StringType(BaseType):

    @staticmethod
    def validate(value):
        if not isinstance(value, str):
            raise TypeError("Value must be a string.")


class AnyType(BaseType):
    """Opaque value relayed as-is (SDP blobs, ICE candidates)."""

    @staticmethod
    def validate(value):
        pass


class OptionalType(BaseType):

    def __init__(self, item_type):
        self.item_type = item_type

    def validate(self, value):
        if value is not None:
            self.item_type.validate(value)


CALL_REFERENCE = {"callId": StringType}


def validate_contract(contract, data):
    if not isinstance(data, dict):
        raise TypeError("Payload must be an object.")
    for key, value in contract.items():
        if key not in data:
            if isinstance(value, OptionalType):
                continue
            raise KeyError(f"Missing key: {key}")
        if isinstance(value, dict):
            validate_contract(value, data[key])
        else:
            value.validate(data[key])


class ContractValidationError(Exception):
    """Exception raised when contract validation fails."""

    def __init__(self, error_type: str, message: str):
        self.error_type = error_type
        self.message = message
        super().__init__(message)


def check_contract(contract, data):
    """
    Validate a payload and wrap any failure in a ContractValidationError.

    Args:
        contract: The contract schema to validate against
        data: The payload to validate

    Raises:
        ContractValidationError: error_type is "missing_field" or "type_mismatch"
    """
    try:
        validate_contract(contract, data)
    except KeyError as e:
        raise ContractValidationError(
            "missing_field", f"Missing required field: {str(e)}"
        ) from e
    except TypeError as e:
        raise ContractValidationError(
            "type_mismatch", f"Invalid field type: {str(e)}"
        ) from e
