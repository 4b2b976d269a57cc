from typing import Optional


class ClusterException(RuntimeError):
    def __init__(self, message: str = None, cause: BaseException = None):
        super(ClusterException, self).__init__(message)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @classmethod
    def generic(cls, error: str, json: str):
        return cls(f"{error}. Response: {json}")


class BadResponseException(ClusterException):
    def __init__(self, message: str = None, cause: BaseException = None):
        super(BadResponseException, self).__init__(message, cause)


class ClusterNameMismatchException(ClusterException):
    def __init__(self, expected: str, actual: str):
        super().__init__(f"Expected cluster name [{expected}] but the cluster reported [{actual}]")
        self.expected = expected
        self.actual = actual


class IndexNotFoundException(ClusterException):
    pass


class SecurityException(ClusterException):
    pass


class CircuitBreakingException(ClusterException):
    def __init__(self, message: Optional[str] = None, cause: Optional[Exception] = None):
        super().__init__(message, cause)
