import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from app.api.endpoints import users
from app.api.endpoints import projects
from app.api.endpoints import project_members
from app.api.endpoints import milestones
from app.api.endpoints import tasks
from app.api.endpoints import folders
from app.api.endpoints import files
from app.api.endpoints import file_versions
from app.api.endpoints import file_activities
from app.api.endpoints import comments
from app.api.endpoints import chat


from fastapi.middleware.cors import CORSMiddleware
from app.core.config import Settings

settings = Settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="3D Project Assistant")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Lista los campos que no pasan la validación
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"), "message": err.get("msg")}
        for err in exc.errors()
    ]
    logger.info("Rejected %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"detail": "Validation failed", "errors": errors}),
    )


app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(projects.router, prefix="/projects", tags=["projects"])
app.include_router(project_members.router, prefix="/project_members", tags=["project_members"])
app.include_router(milestones.router, prefix="/milestones", tags=["milestones"])
app.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
app.include_router(folders.router, prefix="/folders", tags=["folders"])
app.include_router(files.router, prefix="/files", tags=["files"])
app.include_router(file_versions.router, prefix="/file_versions", tags=["file_versions"])
app.include_router(file_activities.router, prefix="/file_activities", tags=["file_activities"])
app.include_router(comments.router, prefix="/comments", tags=["comments"])
app.include_router(chat.router, prefix="/chat", tags=["chat"])
