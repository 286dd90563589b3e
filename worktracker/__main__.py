from __future__ import annotations

import uvicorn

from worktracker.core.config import settings


def main() -> None:
    uvicorn.run("worktracker.main:app", host=settings.HOST, port=settings.PORT, reload=False)


if __name__ == "__main__":
    main()
