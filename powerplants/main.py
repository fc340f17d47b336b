"""Process entrypoint: ``powerplants`` or ``python -m powerplants.main``."""

import uvicorn

from powerplants import create_app
from powerplants.core.config import settings

app = create_app()


def main() -> None:
    uvicorn.run("powerplants.main:app", host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    main()
