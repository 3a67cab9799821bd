"""Errors raised while bridging a compile request to Judge0.

Each error carries the HTTP status and message the API answers with.
"""


class BridgeError(Exception):
    status_code = 500
    message = "Failed to compile code"

    def __init__(self, message: str | None = None):
        if message:
            self.message = message
        super().__init__(self.message)


class ValidationError(BridgeError):
    status_code = 400
    message = "Code and language ID are required"


class SubmissionError(BridgeError):
    message = "Failed to submit code"


class PollTimeoutError(BridgeError):
    message = "Submission timed out"


class DecodeError(BridgeError):
    message = "Failed to decode submission result"


class UpstreamError(BridgeError):
    status_code = 502
    message = "Judge0 request failed"
