import logging
import sys

logger = logging.getLogger("utgen.agent")
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] [UTGen] %(message)s',
        datefmt='%I:%M:%S %p'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False

VALIDATION_RUNS = 5
MAX_CURSOR_ATTEMPTS = 3
GENERATION_MAX_TOKENS = 4096
CURSOR_MAX_TOKENS = 4096
MAX_ERROR_OUTPUT = 4000
STATUS_INTERVAL_SECONDS = 5

PYTHON_KEEP_MARKER = "# checking coverage for file - do not remove"
DEFAULT_TEST_COMMENT = "Test generated using utgen"

EXTENSION_LANGUAGES = {
    '.py': 'python',
    '.js': 'javascript', '.jsx': 'javascript', '.mjs': 'javascript', '.cjs': 'javascript',
    '.ts': 'typescript', '.tsx': 'typescript',
    '.java': 'java',
    '.go': 'go',
}

LANGUAGE_TEST_CONFIG = {
    "python": {
        "test_dir": "tests",
        "file_prefix": "test_",
        "file_ext": ".py",
    },
    "javascript": {
        "test_dir": "__tests__",
        "file_suffix": ".test",
        "file_ext": ".js",
    },
    "typescript": {
        "test_dir": "__tests__",
        "file_suffix": ".test",
        "file_ext": ".ts",
    },
    "java": {
        "test_dir": "src/test/java",
        "file_suffix": "Test",
        "file_ext": ".java",
    },
    "go": {
        "test_dir": "",
        "file_suffix": "_test",
        "file_ext": ".go",
    },
}
