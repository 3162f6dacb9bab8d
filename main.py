"""Entrypoint for running the expense tracker FastAPI backend locally."""
from __future__ import annotations

import uvicorn


if __name__ == "__main__":
    uvicorn.run(
        "expense_tracker.api:app",
        host="127.0.0.1",
        port=5000,
        reload=True,
    )
