# =============================================================================
# CONFTEST - Fixtures do Quiz API
# =============================================================================
# Stores em memoria (mesma interface dos stores MongoDB), gerador fake,
# tokens de sessao e app FastAPI montada sem conexoes externas
# =============================================================================

from collections import defaultdict
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import jwt
import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from config import Settings
from quiz.exceptions import UpstreamFailure
from quiz.llm.generator import GeneratedImage, GeneratedQuiz
from quiz.models import (
    Attempt,
    AttemptQuizRef,
    Quiz,
    QuizDifficulty,
    QuizMetadata,
    QuizQuestion,
    User,
)
from quiz.storage.image_store import StoredImage

TEST_SECRET = "test-session-secret"
BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# STORES EM MEMORIA
# =============================================================================


class FakeQuizStore:
    """QuizStore em memoria."""

    def __init__(self):
        self.quizzes: dict[str, Quiz] = {}
        self.fail_insert = False
        self._clock = 0

    def _next_time(self) -> datetime:
        self._clock += 1
        return BASE_TIME + timedelta(minutes=self._clock)

    def add(self, quiz: Quiz) -> Quiz:
        self.quizzes[quiz.id] = quiz
        return quiz

    async def create(self, *, title, description, questions, created_by, metadata, image_id):
        if self.fail_insert:
            raise PyMongoError("insert failed")
        now = self._next_time()
        quiz = Quiz(
            id=str(ObjectId()),
            title=title,
            description=description,
            questions=questions,
            created_by=created_by,
            created_at=now,
            updated_at=now,
            metadata=metadata,
            image_id=image_id,
        )
        return self.add(quiz).id

    async def get(self, quiz_id):
        return self.quizzes.get(quiz_id)

    async def exists(self, quiz_id):
        return quiz_id in self.quizzes

    async def list_quizzes(self, created_by=None):
        quizzes = [q for q in self.quizzes.values() if created_by is None or q.created_by == created_by]
        return sorted(quizzes, key=lambda q: q.created_at, reverse=True)

    async def list_by_ids(self, quiz_ids):
        quizzes = [self.quizzes[q] for q in quiz_ids if q in self.quizzes]
        return sorted(quizzes, key=lambda q: q.created_at, reverse=True)

    async def get_refs(self, quiz_ids):
        return {
            q: AttemptQuizRef(id=q, title=self.quizzes[q].title, image_id=self.quizzes[q].image_id)
            for q in set(quiz_ids)
            if q in self.quizzes
        }


class FakeAttemptStore:
    """AttemptStore em memoria (insert-only)."""

    def __init__(self):
        self.attempts: list[Attempt] = []

    async def record(self, attempt):
        attempt_id = str(ObjectId())
        self.attempts.append(attempt.model_copy(update={"id": attempt_id}))
        return attempt_id

    def _newest_first(self, attempts):
        return sorted(attempts, key=lambda a: a.completed_at, reverse=True)

    async def list_for_quiz(self, quiz_id, user_id=None):
        return self._newest_first(
            a for a in self.attempts
            if a.quiz_id == quiz_id and (user_id is None or a.user_id == user_id)
        )

    async def list_for_quizzes(self, quiz_ids):
        grouped = defaultdict(list)
        for attempt in self._newest_first(self.attempts):
            if attempt.quiz_id in quiz_ids:
                grouped[attempt.quiz_id].append(attempt)
        return grouped

    async def list_for_user(self, user_id):
        return self._newest_first(a for a in self.attempts if a.user_id == user_id)

    async def has_attempted(self, user_id, quiz_id):
        return any(a.user_id == user_id and a.quiz_id == quiz_id for a in self.attempts)


class FakeUserStore:
    """UserStore em memoria. Leituras devolvem copias, como o banco."""

    def __init__(self):
        self.users: dict[str, User] = {}
        self.fail_counters = False

    async def get(self, user_id):
        user = self.users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def get_by_email(self, email):
        for user in self.users.values():
            if user.email == email:
                return user.model_copy(deep=True)
        return None

    async def get_or_create(self, email, name="", image=None):
        existing = await self.get_by_email(email)
        if existing:
            return existing
        user = User(id=str(ObjectId()), email=email, name=name, image=image, created_at=BASE_TIME)
        self.users[user.id] = user
        return user.model_copy(deep=True)

    async def increment_quizzes_created(self, user_id):
        if self.fail_counters:
            raise PyMongoError("write concern timeout")
        self.users[user_id].stats.total_quizzes_created += 1

    async def record_attempt(self, user_id, *, when, streak, first_attempt):
        if self.fail_counters:
            raise PyMongoError("write concern timeout")
        stats = self.users[user_id].stats
        stats.last_quiz_date = when
        stats.current_streak = streak
        if first_attempt:
            stats.total_quizzes_attempted += 1

    async def add_bookmark(self, user_id, quiz_id):
        bookmarks = self.users[user_id].bookmarked_quizzes
        if quiz_id not in bookmarks:
            bookmarks.append(quiz_id)

    async def remove_bookmark(self, user_id, quiz_id):
        bookmarks = self.users[user_id].bookmarked_quizzes
        if quiz_id in bookmarks:
            bookmarks.remove(quiz_id)

    async def bookmarked_ids(self, user_id):
        return list(self.users[user_id].bookmarked_quizzes)


class FakeImageStore:
    """ImageStore (GridFS) em memoria."""

    def __init__(self):
        self.images: dict[str, StoredImage] = {}
        self.deleted: list[str] = []
        self.fail_upload = False

    async def upload(self, content, filename, content_type):
        if self.fail_upload:
            raise PyMongoError("gridfs unavailable")
        image_id = str(ObjectId())
        self.images[image_id] = StoredImage(content=content, content_type=content_type)
        return image_id

    async def get(self, image_id):
        return self.images.get(image_id)

    async def delete(self, image_id):
        self.deleted.append(image_id)
        return self.images.pop(image_id, None) is not None


class FakeGenerator:
    """Gerador deterministico (sem IA)."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.error: Exception | None = None

    async def generate(self, topic, difficulty, num_questions):
        self.calls.append((topic, difficulty, num_questions))
        if self.error is not None:
            raise self.error
        questions = [
            QuizQuestion(
                id=i,
                text=f"{topic} question {i}?",
                options=["A", "B", "C", "D"],
                correct_answer="A",
                explanation="A is right",
            )
            for i in range(1, num_questions + 1)
        ]
        return GeneratedQuiz(
            title=f"Quiz: {topic}",
            description=f"A {difficulty.value} quiz about {topic}",
            questions=questions,
            metadata=QuizMetadata(
                difficulty=difficulty,
                generated_at=BASE_TIME.isoformat(),
                model_used="claude-test",
                seed=42,
            ),
            image=GeneratedImage(content=b"\x89PNG-test", content_type="image/png"),
        )


# =============================================================================
# FIXTURES DE DADOS
# =============================================================================


@pytest.fixture
def settings():
    return Settings(session_secret=TEST_SECRET, environment="test")


@pytest.fixture
def sample_questions():
    """Duas questoes: capital da Franca e 2+2."""
    return [
        QuizQuestion(
            id=1,
            text="What is the capital of France?",
            options=["Paris", "Lyon", "Nice", "Lille"],
            correct_answer="Paris",
            explanation="Paris is the capital.",
        ),
        QuizQuestion(
            id=2,
            text="What is 2 + 2?",
            options=["3", "4", "5", "6"],
            correct_answer="4",
        ),
    ]


@pytest.fixture
def make_quiz(sample_questions):
    """Factory de Quiz com defaults razoaveis."""

    def _make(quiz_id=None, created_by=None, questions=None, created_at=BASE_TIME, **overrides):
        data = dict(
            id=quiz_id or str(ObjectId()),
            title="Geography & Math",
            description="Mixed quiz",
            questions=questions if questions is not None else sample_questions,
            created_by=created_by or str(ObjectId()),
            created_at=created_at,
            updated_at=created_at,
            metadata=QuizMetadata(
                difficulty=QuizDifficulty.EASY,
                generated_at=created_at.isoformat(),
                model_used="claude-test",
                seed=7,
            ),
            image_id=str(ObjectId()),
        )
        data.update(overrides)
        return Quiz(**data)

    return _make


@pytest.fixture
def make_attempt():
    """Factory de Attempt (score/total)."""

    def _make(quiz_id, user_id, score, total, completed_at=BASE_TIME, **overrides):
        return Attempt(
            id=str(ObjectId()),
            quiz_id=quiz_id,
            user_id=user_id,
            answers=[],
            score=score,
            total_questions=total,
            completed_at=completed_at,
            **overrides,
        )

    return _make


# =============================================================================
# FIXTURES DE ENGINE / APP
# =============================================================================


@pytest.fixture
def quiz_store():
    return FakeQuizStore()


@pytest.fixture
def attempt_store():
    return FakeAttemptStore()


@pytest.fixture
def user_store():
    return FakeUserStore()


@pytest.fixture
def image_store():
    return FakeImageStore()


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def failing_generator(fake_generator):
    fake_generator.error = UpstreamFailure(details={"reason": "provider down"})
    return fake_generator


@pytest.fixture
def engine(quiz_store, attempt_store, user_store, image_store, fake_generator):
    from quiz.engine import QuizEngine

    return QuizEngine(
        quizzes=quiz_store,
        attempts=attempt_store,
        users=user_store,
        images=image_store,
        generator=fake_generator,
    )


@pytest.fixture
def app_state(settings, engine, user_store):
    from app_state import AppState

    return AppState(settings=settings, engine=engine, users=user_store)


@pytest.fixture
def app(app_state):
    from server import create_app

    return create_app(app_state)


@pytest.fixture
def client(app):
    """Cliente de teste FastAPI (nao requer servidor rodando)."""
    from fastapi.testclient import TestClient

    return TestClient(app)


@pytest.fixture
def make_token():
    """Emite tokens de sessao como o frontend faria."""

    def _make(email="alice@example.com", name="Alice", picture=None, expires_in=3600, secret=TEST_SECRET):
        claims = {
            "email": email,
            "name": name,
            "picture": picture,
            "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        }
        return jwt.encode(claims, secret, algorithm="HS256")

    return _make


@pytest.fixture
def auth_headers(make_token):
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def other_headers(make_token):
    return {"Authorization": f"Bearer {make_token(email='bob@example.com', name='Bob')}"}


# =============================================================================
# FIXTURES DE MONGO (mocks de colecao)
# =============================================================================


class AsyncCursor:
    """Cursor async minimo (find().sort() e ``async for``)."""

    def __init__(self, docs):
        self.docs = list(docs)
        self.sort_args = None

    def sort(self, *args):
        self.sort_args = args
        return self

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self.docs:
            yield doc


@pytest.fixture
def mock_collection():
    """Mock de colecao pymongo assincrona."""
    collection = MagicMock()
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))
    collection.insert_many = AsyncMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.find_one_and_update = AsyncMock()
    collection.update_one = AsyncMock()
    collection.count_documents = AsyncMock(return_value=0)
    collection.index_information = AsyncMock(return_value={"_id_": {}})
    collection.create_index = AsyncMock()
    collection.drop_index = AsyncMock()
    collection.find = MagicMock(return_value=AsyncCursor([]))
    return collection


@pytest.fixture
def mock_db(mock_collection):
    """Banco cujo ``db[nome]`` devolve sempre ``mock_collection``."""
    db = MagicMock()
    db.__getitem__.return_value = mock_collection
    return db


@pytest.fixture
def make_cursor():
    return AsyncCursor
