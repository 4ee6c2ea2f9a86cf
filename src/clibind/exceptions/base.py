"""Base exception class for clibind.

Every error the binder raises derives from ClibindError and carries two
renderings: `user_message` for people running the program and
`technical_message` for the log. `recovery_hint`, when set, says how to
fix the model declaration or call that caused it.
"""


class ClibindError(Exception):
    """
    Base exception for all clibind errors.

    Attributes:
        user_message: Human-friendly message for display
        technical_message: Detailed message for logging
        recovery_hint: Optional hint for how to fix the issue
    """

    def __init__(
        self,
        user_message: str,
        technical_message: str | None = None,
        recovery_hint: str | None = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message


class BindingStateError(ClibindError):
    """A binding node was driven through a lifecycle transition it already made."""

    def __init__(self, node_name: str, state: str):
        """
        Initialize binding state error.

        Args:
            node_name: Name of the command whose node was reused
            state: Lifecycle state the node was in
        """
        super().__init__(
            user_message=f"Command '{node_name or '<root>'}' has already been executed",
            technical_message=f"BindingNode for '{node_name}' cannot leave state {state}",
            recovery_hint="Build a fresh binding for every command-line invocation",
        )
        self.node_name = node_name
        self.state = state
