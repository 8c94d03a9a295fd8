"""Custom exception classes for the story submission service.

This module defines application-specific exceptions following Google Python
Style Guide. Routes translate them into HTTP responses.
"""


class StoryServiceError(Exception):
    """Base exception for all story service errors."""

    pass


class ValidationError(StoryServiceError):
    """Raised when submitted data is missing required fields or is malformed."""

    pass


class UnsupportedFileTypeError(StoryServiceError):
    """Raised when an attachment has a media type that is not accepted."""

    def __init__(self, filename: str, mimetype: str):
        """Initialize the exception.

        Args:
            filename: Original name of the rejected file.
            mimetype: Media type detected for the file.
        """
        self.filename = filename
        self.mimetype = mimetype
        super().__init__(f"File '{filename}' has unsupported type '{mimetype}'")


class FileTooLargeError(StoryServiceError):
    """Raised when an attachment exceeds the per-file size ceiling."""

    def __init__(self, filename: str, max_size: int):
        """Initialize the exception.

        Args:
            filename: Original name of the rejected file.
            max_size: The size ceiling in bytes.
        """
        self.filename = filename
        self.max_size = max_size
        super().__init__(
            f"File '{filename}' exceeds the maximum size of "
            f"{max_size / 1024 / 1024:g}MB"
        )


class StoryNotFoundError(StoryServiceError):
    """Raised when a requested story cannot be found."""

    def __init__(self, story_id: str):
        """Initialize the exception.

        Args:
            story_id: The ID of the story that was not found.
        """
        self.story_id = story_id
        super().__init__(f"Story '{story_id}' not found")


class InvalidStatusTransitionError(StoryServiceError):
    """Raised when a review action is applied to a story that is not pending."""

    def __init__(self, story_id: str, current_status: str, target_status: str):
        self.story_id = story_id
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            f"Story '{story_id}' is already {current_status} and cannot be "
            f"{target_status}"
        )


class InvalidCredentialsError(StoryServiceError):
    """Raised when a login attempt fails."""

    def __init__(self):
        super().__init__("Invalid username or password")


class UnauthorizedError(StoryServiceError):
    """Raised when a bearer token is missing, invalid or expired."""

    pass


class AdminAlreadyExistsError(StoryServiceError):
    """Raised when trying to create an administrator that already exists."""

    pass


class NotificationError(StoryServiceError):
    """Raised when an email notification cannot be delivered."""

    pass
