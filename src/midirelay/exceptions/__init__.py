"""
Custom exception hierarchy for midirelay.

## Exception Hierarchy

```
MidiRelayError (base)
├── MidiValidationError
├── TransportError
├── DispatchError
└── ConfigurationError
    ├── ConfigFileInvalidError
    └── ConfigValidationError
```

Validation errors are returned to the caller synchronously. Transport
errors are logged as warnings and the relay keeps running. Dispatch errors
are caught per trigger and recorded in the activity log as APP-ERR.
"""

from .base import MidiRelayError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .handlers import format_error_for_display, wrap_pydantic_error
from .relay import DispatchError, MidiValidationError, TransportError

__all__ = [
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    "DispatchError",
    "MidiRelayError",
    "MidiValidationError",
    "TransportError",
    "format_error_for_display",
    "wrap_pydantic_error",
]
