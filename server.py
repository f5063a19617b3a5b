import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from incubator.backend import Backend
from incubator.session_store import SessionNotFound
from incubator.session_sweeper import SessionSweeper
from incubator.settings import Settings

logger = logging.getLogger("incubator_backend")


class StudentRequest(BaseModel):
    studentId: str = Field(..., min_length=1)


class AnswerRequest(StudentRequest):
    answer: str = Field(..., min_length=1)


class ChatRequest(StudentRequest):
    message: str = Field(..., min_length=1)


def _not_found(e: SessionNotFound) -> HTTPException:
    return HTTPException(status_code=404, detail=str(e))


def create_app(backend: Backend | None = None, settings: Settings | None = None) -> FastAPI:
    settings = settings or (backend.settings if backend else Settings.from_env())
    backend = backend or Backend(settings)
    sweeper = SessionSweeper(
        backend.store,
        ttl_seconds=settings.session_ttl_seconds,
        interval_seconds=settings.sweep_interval_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sweeper.start()
        logger.info(f"🤖 AI: {'Ready' if backend.client.available else 'Disabled'}")
        try:
            yield
        finally:
            await sweeper.stop()

    app = FastAPI(title="3win Business Incubator Backend", lifespan=lifespan)
    app.state.backend = backend
    app.state.sweeper = sweeper

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept"],
    )

    @app.get("/")
    def root():
        return {
            "message": "🚀 3win Business Incubator Backend is running!",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": "2.0.0",
            "features": ["BMC Assistant", "Design Assistant"],
        }

    @app.get("/api/health")
    def health():
        return backend.health()

    @app.post("/api/start")
    def start(req: StudentRequest):
        return backend.start_session(req.studentId)

    @app.post("/api/next")
    def next_question(req: StudentRequest):
        try:
            return backend.next_bmc_question(req.studentId)
        except SessionNotFound as e:
            raise _not_found(e)

    @app.post("/api/answer")
    def answer(req: AnswerRequest):
        try:
            return backend.submit_answer(req.studentId, req.answer)
        except SessionNotFound as e:
            raise _not_found(e)

    @app.post("/api/advance")
    def advance(req: StudentRequest):
        try:
            return backend.advance(req.studentId)
        except SessionNotFound as e:
            raise _not_found(e)

    @app.post("/api/summary")
    def summary(req: StudentRequest):
        try:
            return backend.summary(req.studentId)
        except SessionNotFound as e:
            raise _not_found(e)

    @app.post("/api/chat")
    def chat(req: ChatRequest):
        return backend.chat(req.studentId, req.message)

    @app.get("/api/session/{student_id}")
    def get_session(student_id: str):
        try:
            return backend.transcript(student_id)
        except SessionNotFound as e:
            raise _not_found(e)

    @app.delete("/api/session/{student_id}")
    def end_session(student_id: str):
        if not backend.end_session(student_id):
            raise HTTPException(status_code=404, detail=f"Session not found: {student_id}")
        return {"message": "✅ Session ended"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=app.state.backend.settings.port)
