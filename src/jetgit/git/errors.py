"""Exceptions raised by the repository collaborator layer.

The conflict engine itself never raises for bad conflict content; these
cover repository and file access around it.
"""


class GitErrorCodes:
    """Error codes carried by GitError."""

    REPOSITORY_NOT_FOUND = "REPOSITORY_NOT_FOUND"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    COMMAND_FAILED = "COMMAND_FAILED"
    GET_FILE_CONFLICTS_FAILED = "GET_FILE_CONFLICTS_FAILED"
    APPLY_RESOLUTION_FAILED = "APPLY_RESOLUTION_FAILED"
    GET_FILE_DIFF_FAILED = "GET_FILE_DIFF_FAILED"


class GitError(Exception):
    """A repository operation failed.

    Attributes:
        message: Error description
        code: One of GitErrorCodes
        recoverable: Whether retrying or user action can fix it
        git_output: stderr of the failing git command, if any
    """

    def __init__(
        self,
        message: str,
        code: str = GitErrorCodes.COMMAND_FAILED,
        recoverable: bool = True,
        git_output: str = "",
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.git_output = git_output

