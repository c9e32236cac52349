from __future__ import annotations

import os
import sys
from pathlib import Path

import uvicorn


def main():
    root = Path(__file__).resolve().parent.parent
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    uvicorn.run(
        "app.main:app",
        host=os.getenv("WINDOW_HOST", "127.0.0.1"),
        port=int(os.getenv("WINDOW_PORT", "8000")),
        reload=False,
    )


if __name__ == "__main__":
    main()
