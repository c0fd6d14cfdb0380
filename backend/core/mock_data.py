from ..models.job import LogEntry

# Sample execution logs served when the upstream /get-logs call fails
MOCK_LOGS: list[dict] = [
    {
        "msg_id": "be038f31-e67f-495c-a04d-f3660d349030",
        "runner_id": "493bf9e80adb294d2c3fe6dfdd711e96",
        "logs": "Starting website check for test.com.vn\nConnecting to server...\nHTTP Status: 200 OK\n"
        "Response time: 245ms\nCheck completed successfully",
        "status": "success",
        "message": "Website check completed",
        "created_at": "2024-03-15T10:30:00Z",
        "updated_at": "2024-03-15T10:30:45Z",
    },
    {
        "msg_id": "ae038f31-e67f-495c-a04d-f3660d349031",
        "runner_id": "123bf9e80adb294d2c3fe6dfdd711e96",
        "logs": "Starting backup process\nConnecting to database...\nConnection timeout after 30 seconds",
        "status": "timeout",
        "message": "Database connection timeout",
        "created_at": "2024-03-15T11:00:00Z",
        "updated_at": "2024-03-15T11:00:35Z",
    },
    {
        "msg_id": "ce038f31-e67f-495c-a04d-f3660d349032",
        "runner_id": "456bf9e80adb294d2c3fe6dfdd711e97",
        "logs": "Deployment started for app v2.1.0\nPulling latest image...\nStarting containers...\n"
        "Health check passed\nDeployment completed",
        "status": "done",
        "message": "Application deployed successfully",
        "created_at": "2024-03-15T12:15:00Z",
        "updated_at": "2024-03-15T12:17:30Z",
    },
]


def mock_logs() -> list[LogEntry]:
    return [LogEntry.model_validate(row) for row in MOCK_LOGS]
