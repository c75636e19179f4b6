__title__ = 'cliform'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .ansi import *
from .binding import *
from .faults import *
from .schema import *
from .selection import *
from .serializer import *
from .session import *
from .validation import *
from .values import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the schema model
__all__ += schema.__all__  # type: ignore[attr-defined]
# Load the exposed API of the selection state machine
__all__ += selection.__all__  # type: ignore[attr-defined]
# Load the exposed API of the form-state collector
__all__ += values.__all__  # type: ignore[attr-defined]
# Load the exposed API of the validation engine
__all__ += validation.__all__  # type: ignore[attr-defined]
# Load the exposed API of the argument serializer
__all__ += serializer.__all__  # type: ignore[attr-defined]
# Load the exposed API of the styled-text renderer
__all__ += ansi.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the binding helper
__all__ += binding.__all__  # type: ignore[attr-defined]
# Load the exposed API of the session
__all__ += session.__all__  # type: ignore[attr-defined]
