import logging
import os

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

from hangout.app import create_app  # noqa: E402
from hangout.database import init_db  # noqa: E402

app = create_app()

# 起動時にテーブルを作成する
init_db()

if __name__ == "__main__":
    app.run(
        debug=os.getenv("FLASK_DEBUG", "false").lower() in ("1", "true", "yes"),
        host="0.0.0.0",
        port=int(os.getenv("PORT", "5000")),
    )
