"""Serve the API with uvicorn: ``python -m civic_issues`` or ``civic-issues``."""
import uvicorn

from .config import HOST, PORT


def main() -> None:
    uvicorn.run("civic_issues.main:app", host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    main()
