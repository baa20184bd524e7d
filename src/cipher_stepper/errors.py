class CipherStepperError(Exception):
    pass


class ConfigurationError(CipherStepperError, ValueError):
    """Raised for invalid cipher options when strict configuration is requested."""

    def __init__(self, option: str, value: object, reason: str):
        self.option = option
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for '{option}': {value!r} ({reason})")


class UnknownCipherError(CipherStepperError, KeyError):
    def __init__(self, cipher_id: str):
        self.cipher_id = cipher_id
        super().__init__(cipher_id)

    def __str__(self) -> str:
        return f"Unknown cipher: {self.cipher_id}"
