"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class LLMServiceError(DomainException):
    """LLM call failed and the caller asked for strict handling"""

    def __init__(self, error):
        super().__init__(error.detail or error.kind.value)
        self.error = error
