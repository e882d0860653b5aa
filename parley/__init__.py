__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'parley'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .args import *
from .arguments import *
from .commands import *
from .contexts import *
from .dispatch import *
from .faults import *
from .helper import *
from .lexer import *
from .permissions import *
from .resolvers import *
from .results import *
from .strategy import *
from .stream import *

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
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the lexing and classification layers
__all__ += lexer.__all__  # type: ignore[attr-defined]
__all__ += strategy.__all__  # type: ignore[attr-defined]
__all__ += stream.__all__  # type: ignore[attr-defined]
# Load the exposed API of the resolution layer
__all__ += results.__all__  # type: ignore[attr-defined]
__all__ += faults.__all__  # type: ignore[attr-defined]
__all__ += contexts.__all__  # type: ignore[attr-defined]
__all__ += resolvers.__all__  # type: ignore[attr-defined]
__all__ += args.__all__  # type: ignore[attr-defined]
# Load the exposed API of the command layer
__all__ += arguments.__all__  # type: ignore[attr-defined]
__all__ += permissions.__all__  # type: ignore[attr-defined]
__all__ += commands.__all__  # type: ignore[attr-defined]
__all__ += dispatch.__all__  # type: ignore[attr-defined]
__all__ += helper.__all__  # type: ignore[attr-defined]
