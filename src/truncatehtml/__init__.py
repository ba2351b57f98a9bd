from .constants import VOID_ELEMENTS
from .tokenizer import Tokenizer
from .tokens import UnbalancedTagsError
from .truncator import TruncateOpts, Truncator, truncate, visible_length

__all__ = [
    "VOID_ELEMENTS",
    "Tokenizer",
    "TruncateOpts",
    "Truncator",
    "UnbalancedTagsError",
    "truncate",
    "visible_length",
]
