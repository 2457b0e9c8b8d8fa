from .animator import AnimationState, AudioCueEmitter, GroupAssignmentAnimator, Reveal
from .errors import EmptyRosterError, InvalidGroupCountError, RandomGrouperError, RosterFileError
from .layout import positions_for
from .shuffler import shuffle

__version__ = "1.0.0"
