"""Standalone verification email function. Deploy on its own, e.g.:

  uvicorn app.functions.send_verification_email:app --port 8001

Accepts {"to": ..., "code": ...} and sends the code through Resend.
"""

import logging

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from app.core.config import get_settings
from app.services.verification_email import (
    EmailNotConfiguredError,
    EmailProviderError,
    send_verification_email,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Send verification email", docs_url=None, redoc_url=None)


class VerificationEmailRequest(BaseModel):
    to: str = Field(..., min_length=3, max_length=320)
    code: str = Field(..., min_length=1, max_length=64)


@app.post("/")
async def post_send_verification_email(body: VerificationEmailRequest) -> JSONResponse:
    """Send one verification code. Provider rejection → 400, anything else failing → 500."""
    try:
        await send_verification_email(body.to, body.code, get_settings())
    except EmailProviderError as e:
        if e.status_code is not None:
            return JSONResponse({"error": e.detail or e.message}, status_code=400)
        return JSONResponse({"error": e.message}, status_code=500)
    except EmailNotConfiguredError as e:
        return JSONResponse({"error": e.message}, status_code=500)
    return JSONResponse({"success": True})
