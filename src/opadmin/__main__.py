"""opadmin entrypoint.

Run with:
  python -m opadmin
"""

import uvicorn

from opadmin.config import Settings
from opadmin.logs import setup_logging


def main() -> None:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    uvicorn.run(
        "opadmin.app:app_from_env",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )

if __name__ == "__main__":
    main()
