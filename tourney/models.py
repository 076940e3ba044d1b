"""Class and other data structure shared across the application"""

from typing import Any, Optional


class Reason:
    """Instead of a boolean, a function can return a reason why it failed"""

    def __init__(self, is_successful: bool, text: Optional[str] = None, context: Any = None):
        self.is_successful = is_successful
        self.text = text
        self.context = context
