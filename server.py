from __future__ import annotations

import uvicorn
from dotenv import load_dotenv

load_dotenv()

from hvac_booking.config import settings


if __name__ == "__main__":
    uvicorn.run(
        "hvac_booking.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
    )
