"""
Workflow package.

View-models for the quiz flow: configuration, quiz taking and results, plus the
controller that moves between them.
"""

from .config_view import ConfigurationView, Notification  # noqa: F401
from .controller import AppState, QuizWorkflow  # noqa: F401
from .quiz_view import QuizTakingView  # noqa: F401
from .results import QuizResults, ResultItem, build_results  # noqa: F401
