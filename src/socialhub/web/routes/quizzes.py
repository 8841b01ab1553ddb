"""Quiz endpoints: browse, author, and submit attempts."""

from fastapi import APIRouter, Depends, HTTPException, status

from socialhub.auth.session import SessionHolder
from socialhub.db.client import DataClient
from socialhub.pages.quiz import DIFFICULTIES, QUESTION_TYPES, QuizPage
from socialhub.web.dependencies import current_session, get_data_client
from socialhub.web.schemas import (
    AttemptListResponse,
    AttemptResponse,
    AttemptSubmit,
    QuestionCreate,
    QuestionResponse,
    QuizCreate,
    QuizListResponse,
    QuizResponse,
)

router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])


def _quiz_page(
    client: DataClient = Depends(get_data_client),
    session: SessionHolder = Depends(current_session),
) -> QuizPage:
    page = QuizPage(client, session)
    page.load()
    return page


def _not_found(quiz_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Quiz '{quiz_id}' not found",
    )


@router.get("", response_model=QuizListResponse)
async def list_quizzes(
    search: str = "",
    category: str = "all",
    difficulty: str = "all",
    page: QuizPage = Depends(_quiz_page),
) -> QuizListResponse:
    quizzes = page.visible(search=search, category=category, difficulty=difficulty)
    return QuizListResponse(quizzes=[QuizResponse(**q) for q in quizzes], count=len(quizzes))


@router.post("", response_model=QuizResponse, status_code=status.HTTP_201_CREATED)
async def create_quiz(body: QuizCreate, page: QuizPage = Depends(_quiz_page)) -> QuizResponse:
    if not body.title.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title is required",
        )
    if body.difficulty not in DIFFICULTIES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Difficulty must be one of: {', '.join(DIFFICULTIES)}",
        )
    if body.is_timed and not body.time_limit_minutes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Timed quizzes need a time limit",
        )
    quiz = page.create_quiz(**body.model_dump())
    if quiz is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create quiz",
        )
    return QuizResponse(**quiz)


@router.get("/attempts", response_model=AttemptListResponse)
async def my_attempts(page: QuizPage = Depends(_quiz_page)) -> AttemptListResponse:
    """The caller's attempts, newest first."""
    return AttemptListResponse(
        attempts=[AttemptResponse(**a) for a in page.attempts],
        count=len(page.attempts),
    )


@router.post(
    "/{quiz_id}/questions",
    response_model=QuestionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_question(
    quiz_id: str,
    body: QuestionCreate,
    page: QuizPage = Depends(_quiz_page),
) -> QuestionResponse:
    if body.question_type not in QUESTION_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Question type must be one of: {', '.join(QUESTION_TYPES)}",
        )
    if not body.question_text.strip() or not body.correct_answer.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Question text and correct answer are required",
        )
    question = page.add_question(quiz_id, **body.model_dump())
    if question is None:
        raise _not_found(quiz_id)
    return QuestionResponse(**question)


@router.get("/{quiz_id}/questions", response_model=list[QuestionResponse])
async def list_questions(quiz_id: str, page: QuizPage = Depends(_quiz_page)) -> list[QuestionResponse]:
    """Questions in order, without answers."""
    if page.find(page.quizzes, quiz_id) is None:
        raise _not_found(quiz_id)
    return [QuestionResponse(**q) for q in page.questions(quiz_id)]


@router.post(
    "/{quiz_id}/attempts",
    response_model=AttemptResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_attempt(
    quiz_id: str,
    body: AttemptSubmit,
    page: QuizPage = Depends(_quiz_page),
) -> AttemptResponse:
    """Score answers and store an attempt."""
    quiz = page.find(page.quizzes, quiz_id)
    if quiz is None:
        raise _not_found(quiz_id)
    if not page.can_attempt(quiz):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Maximum attempts reached",
        )

    run = page.start(quiz_id)
    if run is None or not run.questions:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Quiz has no questions",
        )
    for question_id, answer in body.answers.items():
        run.answer(question_id, answer)
    if run.time_left is not None and body.time_left is not None:
        run.time_left = min(run.time_left, body.time_left)

    attempt = run.submit()
    if attempt is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not record attempt",
        )
    return AttemptResponse(**attempt)
