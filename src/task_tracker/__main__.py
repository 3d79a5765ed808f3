"""
Run the API with uvicorn:
python -m task_tracker
"""
import uvicorn

from task_tracker.utils import env_int, load_local_env


def main() -> None:
    load_local_env()
    uvicorn.run(
        "task_tracker.app:app",
        host="0.0.0.0",
        port=env_int("PORT", 3001),
        log_level="info",
    )


if __name__ == "__main__":
    main()
