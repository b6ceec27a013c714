from .handler import BaseHandler, COMMENT_PREFIX_SLASH, COMMENT_PREFIX_HASH
from .go_handler import GoHandler
from .java_handler import JavaHandler
from .js_handler import JsHandler
from .ts_handler import TsHandler
from .python_handler import PythonHandler

HANDLERS = {
    "go": GoHandler,
    "java": JavaHandler,
    "javascript": JsHandler,
    "typescript": TsHandler,
    "python": PythonHandler,
}

__all__ = [
    "BaseHandler",
    "COMMENT_PREFIX_SLASH",
    "COMMENT_PREFIX_HASH",
    "GoHandler",
    "JavaHandler",
    "JsHandler",
    "TsHandler",
    "PythonHandler",
    "HANDLERS",
]
