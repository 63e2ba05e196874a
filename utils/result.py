from enum import Enum
from typing import Generic, TypeVar, Optional, Callable, Any, Dict
from http import HTTPStatus

T = TypeVar('T')  # Generic type variable
U = TypeVar('U')  # Additional type variable for map operations


class ErrorKind(Enum):
    """
    Failure categories reported by the tabular reader and writer.
    """
    IO = "io"
    EMPTY_DATA = "empty_data"
    INVALID_ARGUMENT = "invalid_argument"
    HEADING_EMPTY = "heading_empty"
    HEADING_NOT_FOUND = "heading_not_found"
    INVALID_ROW = "invalid_row"
    DECIMAL_PARSE = "decimal_parse"
    DATE_PARSE = "date_parse"
    INVALID_FORMAT_INDEX = "invalid_format_index"
    NIL_WRITER = "nil_writer"

    @property
    def status_code(self) -> HTTPStatus:
        """HTTP status used when a failure of this kind crosses the API boundary."""
        return _STATUS_BY_KIND[self]


_STATUS_BY_KIND = {
    ErrorKind.IO: HTTPStatus.INTERNAL_SERVER_ERROR,
    ErrorKind.EMPTY_DATA: HTTPStatus.UNPROCESSABLE_ENTITY,
    ErrorKind.INVALID_ARGUMENT: HTTPStatus.BAD_REQUEST,
    ErrorKind.HEADING_EMPTY: HTTPStatus.BAD_REQUEST,
    ErrorKind.HEADING_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.INVALID_ROW: HTTPStatus.BAD_REQUEST,
    ErrorKind.DECIMAL_PARSE: HTTPStatus.BAD_REQUEST,
    ErrorKind.DATE_PARSE: HTTPStatus.BAD_REQUEST,
    ErrorKind.INVALID_FORMAT_INDEX: HTTPStatus.BAD_REQUEST,
    ErrorKind.NIL_WRITER: HTTPStatus.INTERNAL_SERVER_ERROR,
}


class Result(Generic[T]):
    """
    A generic result class that represents the outcome of an operation.

    Spreadsheet operations never raise for expected failures; they return
    a Result holding either the data or an error kind with a message.

    Attributes:
        success (bool): Indicates if the operation was successful
        data (Optional[T]): The result data (only present when success is True)
        error (Optional[str]): Error message (only present when success is False)
        kind (Optional[ErrorKind]): Category of the failure (None on success)
    """
    def __init__(
        self,
        success: bool,
        data: Optional[T] = None,
        error: Optional[str] = None,
        kind: Optional[ErrorKind] = None
    ):
        """
        Initialize a Result object.

        Args:
            success (bool): Whether the operation succeeded
            data (Optional[T], optional): The data returned by a successful operation. Defaults to None.
            error (Optional[str], optional): Error message for a failed operation. Defaults to None.
            kind (Optional[ErrorKind], optional): Failure category. Defaults to IO for failures.
        """
        self.success = success
        self.data = data
        self.error = error
        if success:
            self.kind = None
        else:
            self.kind = kind if kind is not None else ErrorKind.IO

    @property
    def status_code(self) -> HTTPStatus:
        """HTTP status equivalent of this result."""
        if self.success:
            return HTTPStatus.OK
        return self.kind.status_code

    @classmethod
    def ok(cls, data: T) -> "Result[T]":
        """
        Create a successful Result with the provided data.

        Args:
            data (T): The data to be wrapped in the Result

        Returns:
            Result[T]: A successful Result containing the provided data
        """
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, kind: ErrorKind = ErrorKind.IO) -> "Result[T]":
        """
        Create a failed Result with the provided error message.

        Args:
            error (str): The error message describing the failure
            kind (ErrorKind, optional): Failure category. Defaults to ErrorKind.IO.

        Returns:
            Result[T]: A failed Result containing the error message
        """
        return cls(success=False, error=error, kind=kind)

    @classmethod
    def io_error(cls, error: str) -> "Result[T]":
        """Failure opening, reading, saving or closing a spreadsheet file."""
        return cls.fail(error, ErrorKind.IO)

    @classmethod
    def empty_data(cls, error: str = "spreadsheet is empty") -> "Result[T]":
        """Failure for a sheet that returned no rows at all."""
        return cls.fail(error, ErrorKind.EMPTY_DATA)

    @classmethod
    def invalid_argument(cls, error: str = "Invalid input data") -> "Result[T]":
        """
        Create a failed Result for an empty or malformed required argument.

        Args:
            error (str, optional): The error message. Defaults to "Invalid input data".

        Returns:
            Result[T]: A failed Result of kind INVALID_ARGUMENT
        """
        return cls.fail(error, ErrorKind.INVALID_ARGUMENT)

    @classmethod
    def heading_empty(cls, error: str = "heading must not be empty") -> "Result[T]":
        return cls.fail(error, ErrorKind.HEADING_EMPTY)

    @classmethod
    def heading_not_found(cls, heading: str) -> "Result[T]":
        """
        Create a failed Result for a column heading absent from the header row.

        Args:
            heading (str): The heading that was looked up

        Returns:
            Result[T]: A failed Result of kind HEADING_NOT_FOUND naming the heading
        """
        return cls.fail(f"heading not found in headings: {heading}", ErrorKind.HEADING_NOT_FOUND)

    @classmethod
    def invalid_row(cls, row: int) -> "Result[T]":
        return cls.fail(f"invalid row for spreadsheet: {row}", ErrorKind.INVALID_ROW)

    def is_success(self) -> bool:
        """
        Check if the Result represents a successful operation.

        Returns:
            bool: True if the Result is successful, False otherwise
        """
        return self.success

    def is_failure(self) -> bool:
        """
        Check if the Result represents a failed operation.

        Returns:
            bool: True if the Result is a failure, False otherwise
        """
        return not self.success

    def unwrap_or_raise(self) -> T:
        """
        Get the data value or raise an exception if the Result is a failure.

        Raises:
            ValueError: If the Result is a failure, with the error message

        Returns:
            T: The data value
        """
        if not self.is_success():
            raise ValueError(self.error or "Operation failed")
        return self.data  # type: ignore

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        """
        Apply a function to the data if the Result is successful.

        Args:
            fn (Callable[[T], U]): Function to apply to the data

        Returns:
            Result[U]: A new Result with the transformed data or the original error
        """
        if self.is_success():
            return Result.ok(fn(self.data))  # type: ignore
        return Result.fail(self.error or "", self.kind)  # type: ignore

    def and_then(self, fn: Callable[[T], "Result[U]"]) -> "Result[U]":
        """
        Chain operations that return Result objects.

        If this Result is a failure, it short-circuits and carries the
        original error and kind forward. If it's a success, it applies the
        function to the data and returns the new Result.

        Args:
            fn (Callable[[T], Result[U]]): Function that takes the success data and returns a new Result

        Returns:
            Result[U]: Either the original failure or the new Result from the function
        """
        if not self.is_success():
            return Result.fail(self.error or "", self.kind)  # type: ignore
        return fn(self.data)  # type: ignore

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert Result to a dictionary suitable for API responses.

        Returns:
            Dict[str, Any]: Dictionary containing success flag, status, data or error and kind
        """
        response = {
            "success": self.success,
            "status_code": self.status_code.value,
            "status": self.status_code.phrase
        }

        if self.is_success():
            response["data"] = self.data
        else:
            response["error"] = self.error
            response["kind"] = self.kind.name

        return response

    def __str__(self) -> str:
        if self.is_success():
            data_repr = str(self.data)
            # Truncate long data representations
            if len(data_repr) > 100:
                data_repr = f"{data_repr[:97]}..."
            return f"Success: {data_repr}"
        return f"Failure ({self.kind.name}): {self.error}"

    def __repr__(self) -> str:
        return f"Result(success={self.success}, kind={self.kind!r}, data={self.data!r}, error={self.error!r})"
