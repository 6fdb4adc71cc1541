"""Run the API with uvicorn: ``python -m agora``."""
import os

import uvicorn


def main() -> None:
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "3000") or 3000)
    uvicorn.run("agora.app:app", host=host, port=port)


if __name__ == "__main__":
    main()
