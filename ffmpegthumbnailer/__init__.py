from . import _decoder
from . import _encoders
from . import _errors
from . import _filters
from . import _frame
from . import _probe
from . import _run
from . import _thumbnailer
from ._decoder import *
from ._encoders import *
from ._errors import *
from ._filters import *
from ._frame import *
from ._probe import *
from ._run import *
from ._thumbnailer import *

__all__ = (
    _decoder.__all__
    + _encoders.__all__
    + _errors.__all__
    + _filters.__all__
    + _frame.__all__
    + _probe.__all__
    + _run.__all__
    + _thumbnailer.__all__
)
