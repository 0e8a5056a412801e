"""
Form evaluation API.

Clients run pose detection on-device and send landmark frames here:
- POST /evaluate scores a whole recorded set in one request
- WS /ws/{exercise} evaluates frames live and streams back results and cues

Run with:
    uvicorn form_engine.server:app --host 127.0.0.1 --port 8000
"""

import argparse
import json
import logging
import os
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError, field_validator

from .factory import get_available_exercises, normalize_exercise_type
from .feedback import RealtimeCoach
from .landmarks import NUM_LANDMARKS, Landmark
from .session import EvaluationSession
from .thresholds_config import EXERCISE_METADATA

logging.basicConfig(level=os.getenv("FORM_ENGINE_LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

KEEP_FRAMES = os.getenv("FORM_ENGINE_KEEP_FRAMES", "false").lower() in ("1", "true", "yes")
CORS_ORIGINS = [o.strip() for o in os.getenv("FORM_ENGINE_CORS_ORIGINS", "*").split(",") if o.strip()]

app = FastAPI(title="Form Evaluation Engine")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class LandmarkModel(BaseModel):
    x: float = Field(ge=0.0, le=1.0, allow_inf_nan=False)
    y: float = Field(ge=0.0, le=1.0, allow_inf_nan=False)
    z: float = Field(default=0.0, allow_inf_nan=False)
    visibility: float = Field(default=0.0, ge=0.0, le=1.0, allow_inf_nan=False)

    def to_landmark(self) -> Landmark:
        return Landmark(x=self.x, y=self.y, z=self.z, visibility=self.visibility)


class FrameModel(BaseModel):
    landmarks: List[LandmarkModel] = Field(min_length=NUM_LANDMARKS, max_length=NUM_LANDMARKS)
    timestamp: Optional[float] = None

    def to_landmarks(self) -> List[Landmark]:
        return [lm.to_landmark() for lm in self.landmarks]


class EvaluateRequest(BaseModel):
    exercise: str
    frames: List[FrameModel]
    include_frames: bool = False

    @field_validator("exercise")
    @classmethod
    def exercise_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("exercise must not be empty")
        return value


def _error_details(errors) -> List[dict]:
    # Rejected input may hold NaN/inf, which cannot be rendered as JSON
    return [{k: v for k, v in e.items() if k not in ("input", "ctx", "url")} for e in errors]


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Rejected request to %s (%d errors)", request.url.path, len(exc.errors()))
    return JSONResponse(status_code=422, content={"detail": _error_details(exc.errors())})


@app.get("/")
def read_root():
    return {
        "message": "Welcome to the Form Evaluation Engine API",
        "available_exercises": get_available_exercises(),
    }


@app.get("/exercises")
def list_exercises():
    return {"exercises": EXERCISE_METADATA}


@app.post("/evaluate")
def evaluate(request: EvaluateRequest):
    session = EvaluationSession.for_exercise(
        request.exercise, keep_frame_results=request.include_frames or KEEP_FRAMES
    )
    if session is None:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown exercise '{request.exercise}'. "
            f"Available options: {', '.join(get_available_exercises())}",
        )

    last_timestamp = None
    for frame in request.frames:
        session.process_frame(frame.to_landmarks(), frame.timestamp)
        if frame.timestamp is not None:
            last_timestamp = frame.timestamp

    return session.finish(last_timestamp).to_dict()


@app.websocket("/ws/{exercise}")
async def websocket_endpoint(websocket: WebSocket, exercise: str):
    logger.info("WebSocket connection attempt received (exercise=%s).", exercise)
    await websocket.accept()

    session = EvaluationSession.for_exercise(exercise, keep_frame_results=KEEP_FRAMES)
    if session is None:
        await websocket.send_json(
            {
                "error": f"Unknown exercise '{exercise}'",
                "available_exercises": get_available_exercises(),
            }
        )
        await websocket.close(code=1008)
        return

    logger.info("WebSocket connection accepted (%s).", normalize_exercise_type(exercise))
    coach = RealtimeCoach()
    session.start()

    try:
        while True:
            data = await websocket.receive_text()

            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                logger.warning("Received malformed data packet")
                continue

            if isinstance(message, dict) and "command" in message:
                command = message["command"]
                if command == "reset":
                    session.start()
                    coach.reset()
                    await websocket.send_json({"status": "reset"})
                elif command == "finish":
                    summary = session.finish().to_dict()
                    await websocket.send_json({"status": "finished", "summary": summary})
                    await websocket.close()
                    return
                else:
                    logger.warning("Unknown command '%s'", command)
                    await websocket.send_json({"error": f"Unknown command '{command}'"})
                continue

            try:
                frame = FrameModel.model_validate(message)
            except ValidationError as validation_error:
                logger.warning("Invalid frame (%d errors)", validation_error.error_count())
                details = _error_details(validation_error.errors())
                await websocket.send_json({"error": "invalid frame", "details": details})
                continue

            result = session.process_frame(frame.to_landmarks(), frame.timestamp)
            cue = coach.update(result)

            payload = result.to_dict()
            payload["feedback"] = cue.to_dict() if cue else None
            payload["current_message"] = coach.current_message
            await websocket.send_json(payload)

    except WebSocketDisconnect:
        logger.info("Client disconnected")
    except Exception as websocket_error:
        logger.error("WebSocket connection error: %s", websocket_error)
    finally:
        logger.info("Client connection closed (session %s)", session.id)


def parse_args():
    parser = argparse.ArgumentParser(description="Form evaluation service")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=int(os.getenv("FORM_ENGINE_PORT", "8000")))
    return parser.parse_args()


def main():
    args = parse_args()
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
