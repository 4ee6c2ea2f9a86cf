"""
Custom exception hierarchy for clibind.

## Exception Hierarchy

```
ClibindError (base)
├── BindingStateError
└── ConfigurationError
    ├── AmbiguousRemainingArgumentsError
    ├── DuplicateDeclarationError
    ├── MissingModelError
    ├── UnsupportedSignatureError
    └── UnsupportedValueTypeError
```

All custom exceptions inherit from `ClibindError`, which provides:

- `user_message`: Human-friendly message for display to users
- `technical_message`: Detailed message for logging
- `recovery_hint`: Optional suggestion for how to fix the issue

### Example: Unsupported Option Type

```python
class Model:
    port: Annotated[int, Option()] = 0

CommandLineBinding.build(Model)
# User sees: "Unsupported option value type for 'Model.port': int"
# Recovery hint: "Annotate 'port' as str, list[str] or bool, or declare the arity explicitly"
```

See `clibind.exceptions.handlers` for utilities to handle these exceptions.
"""

from .base import BindingStateError, ClibindError
from .config import (
    AmbiguousRemainingArgumentsError,
    ConfigurationError,
    DuplicateDeclarationError,
    MissingModelError,
    UnsupportedSignatureError,
    UnsupportedValueTypeError,
)
from .handlers import ErrorContext, format_error_for_display

__all__ = [
    # Config
    "AmbiguousRemainingArgumentsError",
    # Base
    "BindingStateError",
    "ClibindError",
    "ConfigurationError",
    "DuplicateDeclarationError",
    # Handlers
    "ErrorContext",
    "MissingModelError",
    "UnsupportedSignatureError",
    "UnsupportedValueTypeError",
    "format_error_for_display",
]
