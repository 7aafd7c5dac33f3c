from fastapi import APIRouter, Depends, Request, status

from quizify.api.schemas import (
    AnswerIn,
    ConfigViewOut,
    NotificationOut,
    QuestionViewOut,
    QuizViewOut,
    ResultItemOut,
    ResultsViewOut,
    SessionConfigIn,
    SessionOut,
    SessionUploadIn,
)
from quizify.errors import InputValidationError, InvalidTransitionError
from quizify.storage.session_store import WorkflowSessionStore
from quizify.workflow import AppState, ConfigurationView, QuizResults, QuizTakingView, QuizWorkflow

sessions_router = APIRouter(prefix="/sessions", tags=["Sessions"])


# PUBLIC_INTERFACE
def get_session_store(request: Request) -> WorkflowSessionStore:
    """Return the session store attached to the application."""
    return request.app.state.session_store


def _config_out(view: ConfigurationView) -> ConfigViewOut:
    return ConfigViewOut(
        text=view.text,
        num_questions=view.num_questions,
        is_extracting=view.is_extracting,
        is_generating=view.is_generating,
        text_too_short=view.text_too_short,
        submit_disabled=view.submit_disabled,
        notifications=[
            NotificationOut(title=n.title, description=n.description, variant=n.variant)
            for n in view.notifications
        ],
    )


def _quiz_out(view: QuizTakingView) -> QuizViewOut:
    return QuizViewOut(
        title=view.title,
        current_index=view.current_index,
        total=view.total,
        progress=view.progress,
        question=QuestionViewOut(
            question=view.current_question.question,
            answers=list(view.current_question.answers),
        ),
        selected_answers=list(view.selected_answers),
        can_go_back=view.can_go_back,
        can_go_next=view.can_go_next,
        can_submit=view.can_submit,
        is_last=view.is_last,
    )


def _results_out(results: QuizResults) -> ResultsViewOut:
    return ResultsViewOut(
        items=[
            ResultItemOut(
                index=item.index,
                question=item.question,
                answers=list(item.answers),
                selected_answer=item.selected_answer,
                correct_answer=item.correct_answer,
                is_correct=item.is_correct,
            )
            for item in results.items
        ],
        correct_count=results.correct_count,
        total=results.total,
        score_percent=results.score_percent,
        source_text=results.source_text,
    )


# PUBLIC_INTERFACE
def render_session(session_id: str, workflow: QuizWorkflow) -> SessionOut:
    """Serialize the view of the workflow's current state."""
    view = workflow.render()
    out = SessionOut(session_id=session_id, state=workflow.state.value)
    if isinstance(view, ConfigurationView):
        out.config = _config_out(view)
    elif isinstance(view, QuizTakingView):
        out.quiz = _quiz_out(view)
    elif isinstance(view, QuizResults):
        out.results = _results_out(view)
    return out


def _config_view(workflow: QuizWorkflow) -> ConfigurationView:
    if workflow.state is not AppState.CONFIG:
        raise InvalidTransitionError(f"Quiz configuration is not available in {workflow.state.value}")
    return workflow.config_view


def _quiz_view(workflow: QuizWorkflow) -> QuizTakingView:
    view = workflow.render()
    if workflow.state is not AppState.QUIZ or not isinstance(view, QuizTakingView):
        raise InvalidTransitionError(f"No quiz in progress in {workflow.state.value}")
    return view


@sessions_router.post(
    "",
    response_model=SessionOut,
    status_code=status.HTTP_201_CREATED,
    summary="Start a quiz session",
)
def create_session(store: WorkflowSessionStore = Depends(get_session_store)) -> SessionOut:
    """Create a workflow in the configuration state."""
    session_id = store.create()
    return render_session(session_id, store.get(session_id))


@sessions_router.get("/{session_id}", response_model=SessionOut, summary="Get session view")
def get_session(session_id: str, store: WorkflowSessionStore = Depends(get_session_store)) -> SessionOut:
    return render_session(session_id, store.get(session_id))


@sessions_router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Discard a session")
def delete_session(session_id: str, store: WorkflowSessionStore = Depends(get_session_store)) -> None:
    store.delete(session_id)


@sessions_router.put("/{session_id}/config", response_model=SessionOut, summary="Edit the quiz form")
def update_config(
    session_id: str,
    config_in: SessionConfigIn,
    store: WorkflowSessionStore = Depends(get_session_store),
) -> SessionOut:
    """Set the source text and/or the question count. The count is clamped to 5-50."""
    workflow = store.get(session_id)
    view = _config_view(workflow)
    if config_in.text is not None:
        view.set_text(config_in.text)
    if config_in.num_questions is not None:
        view.num_questions = config_in.num_questions
    return render_session(session_id, workflow)


@sessions_router.post("/{session_id}/upload", response_model=SessionOut, summary="Extract text from a document")
def upload_document(
    session_id: str,
    upload_in: SessionUploadIn,
    store: WorkflowSessionStore = Depends(get_session_store),
) -> SessionOut:
    """
    Fill the text field from a document.

    Accepts either a complete data URI or base64 content with its content type.
    Extraction failures are reported as notifications in the returned view.
    """
    workflow = store.get(session_id)
    view = _config_view(workflow)
    if upload_in.file_data_uri:
        view.select_data_uri(upload_in.file_data_uri)
    elif upload_in.content:
        view.select_data_uri(f"data:{upload_in.content_type or ''};base64,{upload_in.content}")
    else:
        raise InputValidationError("fileDataUri or content is required")
    return render_session(session_id, workflow)


@sessions_router.post("/{session_id}/generate", response_model=SessionOut, summary="Generate the quiz")
def generate(session_id: str, store: WorkflowSessionStore = Depends(get_session_store)) -> SessionOut:
    """On success the session moves to QUIZ; on failure it stays in CONFIG with a notification."""
    workflow = store.get(session_id)
    _config_view(workflow).submit()
    return render_session(session_id, workflow)


@sessions_router.post("/{session_id}/notifications/dismiss", response_model=SessionOut, summary="Clear notifications")
def dismiss_notifications(session_id: str, store: WorkflowSessionStore = Depends(get_session_store)) -> SessionOut:
    workflow = store.get(session_id)
    _config_view(workflow).dismiss_notifications()
    return render_session(session_id, workflow)


@sessions_router.post("/{session_id}/answer", response_model=SessionOut, summary="Select an answer")
def select_answer(
    session_id: str,
    answer_in: AnswerIn,
    store: WorkflowSessionStore = Depends(get_session_store),
) -> SessionOut:
    workflow = store.get(session_id)
    _quiz_view(workflow).select_answer(answer_in.value)
    return render_session(session_id, workflow)


@sessions_router.post("/{session_id}/next", response_model=SessionOut, summary="Next question")
def next_question(session_id: str, store: WorkflowSessionStore = Depends(get_session_store)) -> SessionOut:
    workflow = store.get(session_id)
    _quiz_view(workflow).next()
    return render_session(session_id, workflow)


@sessions_router.post("/{session_id}/back", response_model=SessionOut, summary="Previous question")
def previous_question(session_id: str, store: WorkflowSessionStore = Depends(get_session_store)) -> SessionOut:
    workflow = store.get(session_id)
    _quiz_view(workflow).back()
    return render_session(session_id, workflow)


@sessions_router.post("/{session_id}/submit", response_model=SessionOut, summary="Submit the answers")
def submit_answers(session_id: str, store: WorkflowSessionStore = Depends(get_session_store)) -> SessionOut:
    workflow = store.get(session_id)
    _quiz_view(workflow).submit()
    return render_session(session_id, workflow)


@sessions_router.post("/{session_id}/restart", response_model=SessionOut, summary="Start over")
def restart(session_id: str, store: WorkflowSessionStore = Depends(get_session_store)) -> SessionOut:
    workflow = store.get(session_id)
    workflow.restart()
    return render_session(session_id, workflow)
