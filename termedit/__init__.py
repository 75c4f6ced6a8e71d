"""termedit - A raw-mode terminal text editor."""

from .buffer import ContentBuffer
from .cursor import Action, Cursor
from .keyboard import KeyDecoder, KeyEvent, KeyType, decode_bytes
from .model import TextModel
from .search import Direction, SearchNavigator
from .view import Frame, ScreenCompositor
from .viewport import Viewport, compute_viewport, layout_page

__all__ = [
    'Action',
    'ContentBuffer',
    'Cursor',
    'Direction',
    'Frame',
    'KeyDecoder',
    'KeyEvent',
    'KeyType',
    'ScreenCompositor',
    'SearchNavigator',
    'TextModel',
    'Viewport',
    'compute_viewport',
    'decode_bytes',
    'layout_page',
]
