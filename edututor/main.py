# main.py
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from edututor import config, schemas
from edututor.db import init_db
from edututor.errors import ConversationNotFound, MalformedSubmission, QuizNotFound, StorageUnavailable
from edututor.llm import build_generator
from edututor.responses import ConversationContext
from edututor.seed import seed_sample_data
from edututor.storage import Storage
from edututor.tutor import TutorService

logger = logging.getLogger(__name__)


def build_tutor() -> TutorService:
    init_db()
    storage = Storage()
    if config.SEED_SAMPLE_DATA:
        seed_sample_data(storage)
    return TutorService(storage, external_generate=build_generator())


def create_app(tutor: Optional[TutorService] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "tutor", None) is None:
            app.state.tutor = build_tutor()
        yield

    app = FastAPI(title="EduTutor – AI Tutor, Quizzes & Progress", lifespan=lifespan)
    app.state.tutor = tutor

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StorageUnavailable)
    async def storage_unavailable(request: Request, exc: StorageUnavailable):
        logger.error("Storage unavailable on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})

    _register_routes(app)
    return app


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------
def get_tutor(request: Request) -> TutorService:
    return request.app.state.tutor


def current_user_id(
    x_user_id: Optional[int] = Header(default=None, alias="X-User-Id"),
    tutor: TutorService = Depends(get_tutor),
) -> int:
    if x_user_id is None or tutor.storage.get_user_by_id(x_user_id) is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return x_user_id


def _register_routes(app: FastAPI) -> None:
    # -------------------------------------------------------------------------
    # Health & AI status
    # -------------------------------------------------------------------------
    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    @app.get("/api/llm-test")
    def llm_test(tutor: TutorService = Depends(get_tutor)):
        ping = getattr(tutor.external_generate, "ping", None)
        if ping is None:
            return {"ok": False, "error": "No text generation provider is configured."}
        return ping()

    @app.get("/api/ai/status", response_model=schemas.AIStatusOut)
    def ai_status(user_id: int = Depends(current_user_id), tutor: TutorService = Depends(get_tutor)):
        return tutor.ai_status()

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------
    @app.post("/api/users", response_model=schemas.UserOut)
    def create_user(payload: schemas.UserIn, tutor: TutorService = Depends(get_tutor)):
        if tutor.storage.get_user_by_email(payload.email):
            raise HTTPException(status_code=400, detail="User already exists")
        return tutor.storage.create_user(payload.email, payload.name)

    # -------------------------------------------------------------------------
    # Chat
    # -------------------------------------------------------------------------
    @app.post("/api/chat/send", response_model=schemas.ChatSendOut)
    def chat_send(
        payload: schemas.ChatSendIn,
        user_id: int = Depends(current_user_id),
        tutor: TutorService = Depends(get_tutor),
    ):
        context = ConversationContext(
            learning_level=payload.learning_level or "beginner",
            preferred_style=payload.preferred_style or "explanatory",
        )
        try:
            turn = tutor.handle_chat_turn(user_id, payload.message, payload.conversation_id, context)
        except ConversationNotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
        return {
            "conversation_id": turn.conversation_id,
            "message": turn.reply_text,
            "topic": turn.topic.value,
            "suggested_topics": turn.suggested_topics,
        }

    @app.get("/api/chat/conversations", response_model=List[schemas.ConversationOut])
    def list_conversations(user_id: int = Depends(current_user_id), tutor: TutorService = Depends(get_tutor)):
        return tutor.storage.get_conversations_by_user_id(user_id)

    @app.get("/api/chat/conversations/{conversation_id}/messages", response_model=List[schemas.MessageOut])
    def list_messages(
        conversation_id: int,
        user_id: int = Depends(current_user_id),
        tutor: TutorService = Depends(get_tutor),
    ):
        conv = tutor.storage.get_conversation_by_id(conversation_id)
        if not conv or conv.user_id != user_id:
            raise HTTPException(status_code=404, detail="Conversation not found")
        return tutor.storage.get_messages_by_conversation_id(conversation_id)

    # -------------------------------------------------------------------------
    # Quizzes
    # -------------------------------------------------------------------------
    @app.get("/api/quizzes", response_model=List[schemas.QuizOut])
    def list_quizzes(user_id: int = Depends(current_user_id), tutor: TutorService = Depends(get_tutor)):
        return tutor.storage.get_quizzes()

    @app.get("/api/quizzes/{quiz_id}", response_model=schemas.QuizOut)
    def get_quiz(quiz_id: int, user_id: int = Depends(current_user_id), tutor: TutorService = Depends(get_tutor)):
        quiz = tutor.storage.get_quiz_by_id(quiz_id)
        if not quiz:
            raise HTTPException(status_code=404, detail="Quiz not found")
        return quiz

    @app.post("/api/quizzes/{quiz_id}/submit", response_model=schemas.QuizResultOut)
    def submit_quiz(
        quiz_id: int,
        payload: schemas.QuizSubmitIn,
        user_id: int = Depends(current_user_id),
        tutor: TutorService = Depends(get_tutor),
    ):
        try:
            result = tutor.submit_quiz(user_id, quiz_id, payload.answers)
        except QuizNotFound:
            raise HTTPException(status_code=404, detail="Quiz not found")
        except MalformedSubmission as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {"score": result.score, "total_questions": result.total_questions}

    # -------------------------------------------------------------------------
    # Progress & stats
    # -------------------------------------------------------------------------
    @app.get("/api/progress", response_model=List[schemas.ProgressOut])
    def get_progress(user_id: int = Depends(current_user_id), tutor: TutorService = Depends(get_tutor)):
        return tutor.storage.get_user_progress(user_id)

    @app.get("/api/stats", response_model=schemas.StatsOut)
    def get_stats(user_id: int = Depends(current_user_id), tutor: TutorService = Depends(get_tutor)):
        return tutor.get_stats(user_id)


logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("edututor.main:app", host="0.0.0.0", port=8000)
