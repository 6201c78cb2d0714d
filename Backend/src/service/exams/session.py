# -*- coding: utf-8 -*-
"""
Exam session manager.

Lifecycle of an attempt:

1. ``get_or_create_active`` resumes the open attempt of a user or creates a
   new one with a randomized question and option order.
2. ``submit`` grades the answers against the live question bank, closes the
   attempt with a single conditional update and, when the best submitted
   attempt passes, records the exam as completed in the course.
3. ``get_status`` and ``get_history`` read submitted attempts back.

The randomizer and the grader are pure; their errors are turned into
``DataIntegrityError`` here.
"""

import random
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logger import configure_logger
from src.config.settings import settings
from src.domain.enums import ExamAttemptStatus
from src.domain.items import ExamItem
from src.domain.models import Exam, ExamAttempt, ExamQuestion
from src.repository.exams import (find_in_progress_attempt, get_attempt,
                                  get_course_id_for_section, get_exam_by_id,
                                  get_last_attempt_number,
                                  get_latest_submitted_attempt,
                                  get_questions_by_ids, insert_attempt,
                                  list_exam_questions, list_submitted_history,
                                  mark_attempt_submitted)
from src.service.exams.grader import correct_indexes, grade
from src.service.exams.pass_rule import (attempt_percent, check_exam_passed,
                                         is_attempt_passed)
from src.service.exams.randomizer import (OptionOrderMap,
                                          reconcile_permutation,
                                          shuffle_questions)
from src.service.exams.views import (ActiveExamView, GradedAnswer, HistoryItem,
                                     HistoryPage, OptionView, QuestionView,
                                     StatusView, SubmissionResult,
                                     SubmittedAnswer)
from src.service.progress.updates import mark_item_completed
from src.utils.exceptions import (ConflictError, DataIntegrityError,
                                  DuplicateCreateRace, EmptyExamError,
                                  InvalidAttemptError, MalformedQuestionError,
                                  NotFoundError)

logger = configure_logger(__name__)


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def attempt_deadline(attempt: ExamAttempt) -> Optional[datetime]:
    """End of the time window of an attempt, None when unlimited."""
    if not attempt.duration_minutes:
        return None
    return attempt.started_at + timedelta(minutes=attempt.duration_minutes)


def is_attempt_expired(attempt: ExamAttempt, now: datetime) -> bool:
    """
    Whether a submission at ``now`` is past the deadline plus grace period.

    Always False when deadline enforcement is switched off.
    """
    if not settings.exam_deadline_enforced:
        return False
    deadline = attempt_deadline(attempt)
    if deadline is None:
        return False
    grace = timedelta(seconds=settings.exam_deadline_grace_seconds)
    return now > deadline + grace


async def _get_exam_or_404(session: AsyncSession, exam_id: int) -> Exam:
    exam = await get_exam_by_id(session, exam_id)
    if exam is None:
        raise NotFoundError("Exam", exam_id)
    return exam


async def _resolve_course_id(session: AsyncSession, exam: Exam) -> int:
    course_id = await get_course_id_for_section(session, exam.section_id)
    if course_id is None:
        logger.error(
            f"Exam {exam.id} references section {exam.section_id} "
            f"that does not resolve to a course"
        )
        raise DataIntegrityError(f"Exam {exam.id} is not attached to a course")
    return course_id


def _question_view(question: ExamQuestion, permutation: Optional[List[int]]) -> QuestionView:
    options = question.options or []
    order = reconcile_permutation(permutation, len(options))
    if permutation is not None and order != list(permutation):
        logger.warning(
            f"Options of question {question.id} changed since the attempt started"
        )
    return QuestionView(
        question_id=question.id,
        question=question.question,
        score=float(question.score or 0),
        options=[
            OptionView(index=index, text=str(options[index].get("text", "")))
            for index in order
        ],
    )


async def build_active_view(
    session: AsyncSession,
    exam: Exam,
    attempt: ExamAttempt,
    questions: Optional[Dict[int, ExamQuestion]] = None,
    resumed: bool = False,
) -> ActiveExamView:
    """
    Rebuild the client view of an attempt from its stored snapshot.

    Questions removed from the bank after the attempt started are skipped.

    Args:
        session: Database session
        exam: Exam of the attempt
        attempt: Attempt to render
        questions: Already loaded questions by ID
        resumed: Whether the attempt existed before this request

    Returns:
        ActiveExamView without correctness flags
    """
    if questions is None:
        questions = await get_questions_by_ids(
            session, attempt.exam_id, attempt.question_order
        )
    option_order = OptionOrderMap.from_json(attempt.option_order)

    question_views = []
    for question_id in attempt.question_order:
        question = questions.get(question_id)
        if question is None:
            logger.warning(
                f"Question {question_id} of attempt {attempt.attempt_number} "
                f"(exam {attempt.exam_id}) no longer exists"
            )
            continue
        question_views.append(_question_view(question, option_order.get(question_id)))

    return ActiveExamView(
        exam_id=attempt.exam_id,
        course_id=attempt.course_id,
        title=exam.title,
        attempt_number=attempt.attempt_number,
        total_score=attempt.total_score,
        duration_minutes=attempt.duration_minutes,
        pass_percent=attempt.pass_percent,
        started_at=attempt.started_at,
        deadline=attempt_deadline(attempt),
        questions=question_views,
        resumed=resumed,
    )


async def _create_attempt(
    session: AsyncSession,
    user_id: int,
    exam: Exam,
    rng: Optional[random.Random],
    now: datetime,
) -> ActiveExamView:
    course_id = await _resolve_course_id(session, exam)

    questions = await list_exam_questions(session, exam.id)
    if not questions:
        logger.warning(f"Exam {exam.id} has no questions, attempt not created")
        raise EmptyExamError(exam.id)

    try:
        for question in questions:
            correct_indexes(question)
        question_order = shuffle_questions(questions, rng)
        by_id = {question.id: question for question in questions}
        option_order = OptionOrderMap.build(
            (by_id[question_id] for question_id in question_order), rng
        )
        total_score = sum(float(by_id[qid].score or 0) for qid in question_order)
    except MalformedQuestionError as e:
        logger.error(f"Cannot randomize exam {exam.id}: {e}")
        raise DataIntegrityError(f"Exam {exam.id} has malformed questions") from e

    attempt_number = await get_last_attempt_number(session, user_id, exam.id) + 1
    pass_percent = (
        exam.pass_percent
        if exam.pass_percent is not None
        else settings.exam_default_pass_percent
    )

    try:
        attempt = await insert_attempt(
            session,
            user_id=user_id,
            exam_id=exam.id,
            course_id=course_id,
            attempt_number=attempt_number,
            question_order=question_order,
            option_order=option_order.to_json(),
            total_score=total_score,
            duration_minutes=exam.duration_minutes or None,
            pass_percent=pass_percent,
            started_at=now,
        )
    except DuplicateCreateRace as race:
        logger.warning(f"{race}; returning the attempt created concurrently")
        # rollback expired the exam
        await session.refresh(exam)
        existing = await find_in_progress_attempt(session, user_id, exam.id)
        if existing is None:
            raise ConflictError(
                f"Attempt {attempt_number} for exam {exam.id} was created and "
                f"closed concurrently, retry"
            ) from race
        return await build_active_view(session, exam, existing, resumed=True)

    logger.info(
        f"User {user_id} started attempt {attempt.attempt_number} of exam {exam.id} "
        f"({len(question_order)} questions, total {total_score})"
    )
    return await build_active_view(session, exam, attempt, questions=by_id)


async def get_or_create_active(
    session: AsyncSession,
    user_id: int,
    exam_id: int,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> ActiveExamView:
    """
    Return the open attempt of a user, creating one when there is none.

    Resuming never changes the stored attempt, so repeated calls return the
    same attempt number and question order.

    Args:
        session: Database session
        user_id: User ID
        exam_id: Exam ID
        rng: Random source for a new attempt
        now: Creation time, current UTC time by default

    Returns:
        ActiveExamView

    Raises:
        NotFoundError: The exam does not exist
        EmptyExamError: The exam has no questions
        DataIntegrityError: The exam has no course or malformed questions
    """
    exam = await _get_exam_or_404(session, exam_id)

    attempt = await find_in_progress_attempt(session, user_id, exam_id)
    if attempt is not None:
        logger.info(
            f"User {user_id} resumed attempt {attempt.attempt_number} of exam {exam_id}"
        )
        return await build_active_view(session, exam, attempt, resumed=True)

    return await _create_attempt(session, user_id, exam, rng, now or utcnow())


def _retain_answers(
    attempt: ExamAttempt, answers: Iterable[SubmittedAnswer]
) -> List[SubmittedAnswer]:
    """Keep the first answer per question of the attempt, drop the rest."""
    allowed = set(attempt.question_order)
    retained: Dict[int, SubmittedAnswer] = {}
    for answer in answers:
        if answer.question_id not in allowed:
            logger.warning(
                f"Dropping answer to question {answer.question_id}: not part of "
                f"attempt {attempt.attempt_number} of exam {attempt.exam_id}"
            )
            continue
        retained.setdefault(answer.question_id, answer)
    return list(retained.values())


async def grade_answers(
    session: AsyncSession, attempt: ExamAttempt, answers: Iterable[SubmittedAnswer]
) -> List[GradedAnswer]:
    """
    Grade the answers of an attempt against the current question bank.

    Answers to questions outside the attempt, or deleted since it started,
    are dropped.

    Raises:
        DataIntegrityError: A question has no options or no correct option
    """
    retained = _retain_answers(attempt, answers)
    questions = await get_questions_by_ids(
        session, attempt.exam_id, [answer.question_id for answer in retained]
    )

    graded = []
    for answer in retained:
        question = questions.get(answer.question_id)
        if question is None:
            logger.warning(
                f"Question {answer.question_id} was deleted, answer not graded"
            )
            continue
        selected = sorted(set(answer.selected_option_indexes))
        try:
            result = grade(question, selected)
        except MalformedQuestionError as e:
            logger.error(f"Cannot grade exam {attempt.exam_id}: {e}")
            raise DataIntegrityError(
                f"Question {question.id} of exam {attempt.exam_id} is malformed"
            ) from e
        graded.append(
            GradedAnswer(
                question_id=question.id,
                selected_option_indexes=selected,
                is_correct=result.is_correct,
                score=result.score,
            )
        )
    return graded


async def record_exam_completion(
    session: AsyncSession, user_id: int, exam_id: int, course_id: int
) -> bool:
    """
    Credit the exam in the course when the best submitted attempt passes.

    Safe to call repeatedly: the completion record is written at most once.

    Returns:
        Whether the best-attempt rule holds
    """
    if not await check_exam_passed(session, user_id, exam_id, course_id):
        return False
    await mark_item_completed(session, user_id, course_id, ExamItem(item_id=exam_id))
    return True


async def submit(
    session: AsyncSession,
    user_id: int,
    exam_id: int,
    attempt_number: int,
    answers: Iterable[SubmittedAnswer],
    now: Optional[datetime] = None,
) -> SubmissionResult:
    """
    Grade and close an open attempt.

    A submission after the deadline (plus grace) still closes the attempt but
    scores it 0 and discards the answers.

    Args:
        session: Database session
        user_id: User ID
        exam_id: Exam ID
        attempt_number: Attempt being submitted
        answers: Selected option indexes per question
        now: Submission time, current UTC time by default

    Returns:
        SubmissionResult

    Raises:
        InvalidAttemptError: No open attempt of this user with that number
        DataIntegrityError: A question cannot be graded
    """
    now = now or utcnow()
    attempt = await get_attempt(session, user_id, exam_id, attempt_number)
    if attempt is None or attempt.status != ExamAttemptStatus.IN_PROGRESS:
        logger.warning(
            f"Rejected submission of attempt {attempt_number} of exam {exam_id} "
            f"by user {user_id}"
        )
        raise InvalidAttemptError()

    expired = is_attempt_expired(attempt, now)
    if expired:
        logger.info(
            f"Attempt {attempt_number} of exam {exam_id} by user {user_id} "
            f"submitted after its deadline, scored 0"
        )
        graded: List[GradedAnswer] = []
    else:
        graded = await grade_answers(session, attempt, answers)
    achieved_score = sum(answer.score for answer in graded)

    submitted = await mark_attempt_submitted(
        session,
        attempt.id,
        answers=[answer.to_json() for answer in graded],
        achieved_score=achieved_score,
        submitted_at=now,
    )
    if not submitted:
        logger.warning(
            f"Attempt {attempt_number} of exam {exam_id} was submitted concurrently"
        )
        raise InvalidAttemptError()
    await session.refresh(attempt)
    course_id = attempt.course_id
    total_score = attempt.total_score
    pass_percent = attempt.pass_percent

    logger.info(
        f"User {user_id} submitted attempt {attempt_number} of exam {exam_id}: "
        f"{achieved_score}/{total_score}"
    )

    try:
        exam_passed = await record_exam_completion(
            session, user_id, exam_id, course_id
        )
    except Exception as e:
        # the attempt stays submitted
        await session.rollback()
        logger.exception(
            f"Failed to record completion of exam {exam_id} for user {user_id}: {e}"
        )
        exam_passed = False

    return SubmissionResult(
        exam_id=exam_id,
        attempt_number=attempt_number,
        achieved_score=achieved_score,
        total_score=total_score,
        pass_percent=pass_percent,
        percent=attempt_percent(achieved_score, total_score),
        passed=is_attempt_passed(achieved_score, total_score, pass_percent),
        exam_passed=exam_passed,
        expired=expired,
        submitted_at=now,
    )


async def get_status(
    session: AsyncSession, user_id: int, exam_id: int
) -> Optional[StatusView]:
    """
    Summary of the latest submitted attempt, None when never submitted.

    Raises:
        NotFoundError: The exam does not exist
    """
    await _get_exam_or_404(session, exam_id)
    attempt = await get_latest_submitted_attempt(session, user_id, exam_id)
    if attempt is None:
        return None
    return StatusView(
        exam_id=attempt.exam_id,
        course_id=attempt.course_id,
        attempt_number=attempt.attempt_number,
        achieved_score=attempt.achieved_score,
        total_score=attempt.total_score,
        pass_percent=attempt.pass_percent,
        percent=attempt_percent(attempt.achieved_score, attempt.total_score),
        passed=is_attempt_passed(
            attempt.achieved_score, attempt.total_score, attempt.pass_percent
        ),
        submitted_at=attempt.submitted_at,
    )


async def get_history(
    session: AsyncSession,
    user_id: Optional[int],
    search: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
) -> HistoryPage:
    """
    Submitted attempts, newest first.

    Args:
        session: Database session
        user_id: Only this user's attempts; None for every user
        search: Filter on exam or course title; user name and email are
            matched only when user_id is None
        limit: Page size
        offset: Rows to skip

    Returns:
        HistoryPage
    """
    limit = max(1, min(limit, settings.exam_history_page_limit))
    rows, total = await list_submitted_history(
        session, user_id=user_id, search=search, limit=limit, offset=offset
    )

    items = []
    for attempt, exam_title, course_title, user in rows:
        items.append(
            HistoryItem(
                exam_id=attempt.exam_id,
                exam_title=exam_title or "Exam",
                course_id=attempt.course_id,
                course_title=course_title or "Unknown Course",
                attempt_number=attempt.attempt_number,
                achieved_score=attempt.achieved_score,
                total_score=attempt.total_score,
                percent=round(
                    attempt_percent(attempt.achieved_score, attempt.total_score)
                ),
                pass_percent=attempt.pass_percent,
                passed=is_attempt_passed(
                    attempt.achieved_score, attempt.total_score, attempt.pass_percent
                ),
                submitted_at=attempt.submitted_at,
                user_id=attempt.user_id if user_id is None else None,
                user_name=(
                    (user.name or user.email) if user_id is None and user else None
                ),
            )
        )
    return HistoryPage(items=items, total=total, limit=limit, offset=offset)
