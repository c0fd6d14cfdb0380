from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .api import jobs, runners, scripts, sessions

app = FastAPI(
    title="Job Console API",
    description="Admin API for scripts, runners, jobs and logs of the job execution system",
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(scripts.router, prefix="/api")
app.include_router(sessions.router, prefix="/api")
app.include_router(runners.router, prefix="/api")
app.include_router(jobs.router, prefix="/api")

@app.get("/")
def read_root():
    return {"message": "Welcome to the Job Console API", "upstream": config.JOB_API_BASE_URL}


if __name__ == "__main__":
    import os

    import uvicorn

    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run(app, host="0.0.0.0", port=port)
