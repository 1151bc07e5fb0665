"""Run the gateway with uvicorn: ``python -m archmen_llm``."""

import uvicorn

from archmen_llm.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "archmen_llm.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
