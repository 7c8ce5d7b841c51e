"""Ambient Ready Calculator — run locally with: python main.py or uvicorn main:app --reload."""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env so AMBICALC_DEMO=1 and other vars are set before the app reads them
load_dotenv(Path(__file__).resolve().parent / ".env")

from ambicalc.api import app  # noqa: E402

logging.basicConfig(
    level=os.environ.get("AMBICALC_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

__all__ = ["app"]

if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
