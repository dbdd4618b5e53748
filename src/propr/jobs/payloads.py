"""Canned review outcomes returned by the simulated executor."""

from propr.models.enums import CommentSeverity
from propr.models.review import ReviewComment, ReviewResult

SIMULATED_RESULT = ReviewResult(
    summary=(
        "Overall this PR is well-structured and the intent is clear. There are a few issues "
        "worth addressing before merging: one potential runtime error, a security concern, "
        "and a couple of suggestions to improve maintainability."
    ),
    comments=[
        ReviewComment(
            file_path="src/auth/login.ts",
            line_number=42,
            severity=CommentSeverity.ERROR,
            message=(
                "Unhandled promise rejection: the async call on this line lacks a try/catch. "
                "If the network request fails, the error will be swallowed silently."
            ),
        ),
        ReviewComment(
            file_path="src/auth/login.ts",
            line_number=67,
            severity=CommentSeverity.WARNING,
            message=(
                "Sensitive data (access token) is written to the console on this line. "
                "Remove or guard behind a debug flag before deploying to production."
            ),
        ),
        ReviewComment(
            file_path="src/components/UserProfile.tsx",
            line_number=15,
            severity=CommentSeverity.SUGGESTION,
            message=(
                "This component re-renders on every parent update. Wrapping it with React.memo() "
                "would avoid unnecessary renders when props have not changed."
            ),
        ),
        ReviewComment(
            file_path="src/utils/formatDate.ts",
            severity=CommentSeverity.SUGGESTION,
            message=(
                "Consider using Intl.DateTimeFormat instead of a hand-rolled date formatter; "
                "it handles locale and timezone differences automatically."
            ),
        ),
        ReviewComment(
            severity=CommentSeverity.INFO,
            message=(
                "Test coverage for the authentication module looks thorough. "
                "The new login flow is well-structured and the happy path is fully exercised."
            ),
        ),
    ],
)

SIMULATED_FAILURE = (
    "The review could not be completed: unable to retrieve the diff for the pull request "
    "(simulated failure, set SIMULATE=success to exercise the success path)."
)
